import logging

import rydercup.server as server
from rydercup.settings import load_settings


def test_defaults(monkeypatch):
    for key in ("DATABASE_URL", "ADMIN_PIN", "HOLES_IN_ROUND", "SMTP_HOST"):
        monkeypatch.delenv(key, raising=False)
    settings = load_settings()
    assert settings.database_url == "sqlite:///rydercup.db"
    assert settings.admin_pin == "1234"
    assert settings.holes_in_round == 18
    assert settings.smtp_host == ""


def test_database_path_becomes_sqlite_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "data/cup.db")
    assert load_settings().database_url == "sqlite:///data/cup.db"


def test_bad_integer_env_is_logged_and_ignored(monkeypatch, caplog):
    monkeypatch.setenv("HOLES_IN_ROUND", "nine")
    with caplog.at_level(logging.WARNING, logger="rydercup.settings"):
        settings = load_settings()
    assert settings.holes_in_round == 18
    assert "HOLES_IN_ROUND=nine" in caplog.text


def test_port_from_env(monkeypatch):
    monkeypatch.delenv("APP_PORT", raising=False)
    monkeypatch.setenv("PORT", "9100")
    assert server._port_from_env() == 9100
    monkeypatch.setenv("PORT", "http")
    assert server._port_from_env() == server.DEFAULT_PORT


def test_ssl_kwargs(monkeypatch):
    for key in ("SSL_CERT_FILE", "SSL_KEY_FILE", "SSL_CA_FILE", "SSL_KEY_PASSWORD"):
        monkeypatch.delenv(key, raising=False)
    assert server._ssl_kwargs() == {}

    monkeypatch.setenv("SSL_CERT_FILE", "cert.pem")
    assert server._ssl_kwargs() == {}

    monkeypatch.setenv("SSL_KEY_FILE", "key.pem")
    monkeypatch.setenv("SSL_CA_FILE", "ca.pem")
    assert server._ssl_kwargs() == {
        "ssl_certfile": "cert.pem",
        "ssl_keyfile": "key.pem",
        "ssl_ca_certs": "ca.pem",
    }


def test_prepare_database_runs_migrations_once(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'fresh.db'}"
    assert server.prepare_database(database_url) == [
        "20250301_game_codes",
        "20250315_team_scores",
    ]
    assert server.prepare_database(database_url) == []
