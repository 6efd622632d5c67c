import random
from datetime import date, datetime, timezone

from rydercup.lobby import (
    GAME_CODE_ALPHABET,
    game_phase,
    generate_game_code,
    generate_invite_token,
    scoring_access,
    scoring_window,
)


def test_game_code_alphabet_and_length():
    code = generate_game_code(random.Random(3))
    assert len(code) == 6
    assert set(code) <= set(GAME_CODE_ALPHABET)
    assert code == generate_game_code(random.Random(3))


def test_invite_token_is_hex():
    token = generate_invite_token()
    assert len(token) == 64
    int(token, 16)


def test_scoring_window_bounds():
    window = scoring_window(date(2026, 6, 1))
    assert window.unlocks_at == datetime(2026, 5, 31, tzinfo=timezone.utc)
    assert window.expires_at == datetime(2026, 6, 8, tzinfo=timezone.utc)


def test_game_phase_transitions():
    window = scoring_window("2026-06-01")
    assert game_phase(window, datetime(2026, 5, 30, tzinfo=timezone.utc)) == "lobby"
    assert game_phase(window, datetime(2026, 5, 31, 1, tzinfo=timezone.utc)) == "live"
    assert game_phase(window, datetime(2026, 6, 9, tzinfo=timezone.utc)) == "expired"


def test_scoring_access_reasons():
    window = scoring_window("2026-06-01")
    early = scoring_access(window, datetime(2026, 5, 1, tzinfo=timezone.utc))
    assert early["can_score"] is False
    assert early["reason"] == "Tournament has not started yet"
    late = scoring_access(window, datetime(2026, 7, 1, tzinfo=timezone.utc))
    assert late["reason"] == "Tournament scoring window has expired"
    assert scoring_access(window, datetime(2026, 6, 1, tzinfo=timezone.utc))["can_score"] is True
