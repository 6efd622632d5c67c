import logging
import os

import uvicorn

from rydercup.db import ensure_schema
from rydercup.migrations import apply_migrations
from rydercup.settings import load_settings

logger = logging.getLogger(__name__)
APP_MODULE = "rydercup.main:app"
DEFAULT_PORT = 8000


def _port_from_env() -> int:
    for key in ("APP_PORT", "PORT"):
        value = os.getenv(key)
        if value:
            try:
                return int(value)
            except ValueError:
                logger.warning("Ignoring %s=%s (not an integer)", key, value)
    return DEFAULT_PORT


def _ssl_kwargs() -> dict[str, str]:
    cert = os.getenv("SSL_CERT_FILE")
    key = os.getenv("SSL_KEY_FILE")
    if not cert and not key:
        return {}
    if not cert or not key:
        logger.warning("HTTPS needs both SSL_CERT_FILE and SSL_KEY_FILE; serving plain HTTP.")
        return {}

    ssl_kwargs = {"ssl_certfile": cert, "ssl_keyfile": key}
    optional = {"SSL_CA_FILE": "ssl_ca_certs", "SSL_KEY_PASSWORD": "ssl_keyfile_password"}
    for env_key, uvicorn_key in optional.items():
        value = os.getenv(env_key)
        if value:
            ssl_kwargs[uvicorn_key] = value
    return ssl_kwargs


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def prepare_database(database_url: str) -> list[str]:
    """Create missing tables and run pending migrations before serving."""
    ensure_schema(database_url)
    applied = apply_migrations(database_url)
    if applied:
        logger.info("Applied %d migration(s): %s", len(applied), ", ".join(applied))
    return applied


def main() -> None:
    configure_logging()
    prepare_database(load_settings().database_url)

    ssl_kwargs = _ssl_kwargs()
    host = os.getenv("APP_HOST", "0.0.0.0")
    port = _port_from_env()
    scheme = "https" if ssl_kwargs else "http"
    logger.info("Serving scoring API on %s://%s:%s", scheme, host, port)
    uvicorn.run(
        APP_MODULE,
        host=host,
        port=port,
        log_level=os.getenv("UVICORN_LOG_LEVEL", "info"),
        **ssl_kwargs,
    )


if __name__ == "__main__":
    main()
