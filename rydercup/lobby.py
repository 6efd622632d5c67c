from __future__ import annotations

import random
import secrets
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

GAME_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
GAME_CODE_LENGTH = 6

LOBBY_PHASE = "lobby"
LIVE_PHASE = "live"
EXPIRED_PHASE = "expired"


@dataclass(frozen=True)
class ScoringWindow:
    unlocks_at: datetime
    expires_at: datetime


def generate_game_code(rng: random.Random | None = None) -> str:
    """Six characters from an alphabet without 0/O/1/I look-alikes."""
    chooser = rng or random.SystemRandom()
    return "".join(chooser.choice(GAME_CODE_ALPHABET) for _ in range(GAME_CODE_LENGTH))


def generate_invite_token() -> str:
    return secrets.token_hex(32)


def parse_timestamp(value: str | datetime | date) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def scoring_window(
    tournament_date: str | datetime | date,
    unlock_hours_before: int = 24,
    expire_days_after: int = 7,
) -> ScoringWindow:
    start = parse_timestamp(tournament_date)
    return ScoringWindow(
        unlocks_at=start - timedelta(hours=unlock_hours_before),
        expires_at=start + timedelta(days=expire_days_after),
    )


def window_for_game(game: dict) -> ScoringWindow:
    return ScoringWindow(
        unlocks_at=parse_timestamp(game["unlocks_at"]),
        expires_at=parse_timestamp(game["expires_at"]),
    )


def game_phase(window: ScoringWindow, now: datetime) -> str:
    if now < window.unlocks_at:
        return LOBBY_PHASE
    if now < window.expires_at:
        return LIVE_PHASE
    return EXPIRED_PHASE


def scoring_access(window: ScoringWindow, now: datetime) -> dict:
    can_score = False
    reason = ""
    if now < window.unlocks_at:
        reason = "Tournament has not started yet"
    elif now > window.expires_at:
        reason = "Tournament scoring window has expired"
    else:
        can_score = True
    return {
        "can_score": can_score,
        "reason": reason,
        "unlocks_at": window.unlocks_at.isoformat(),
        "expires_at": window.expires_at.isoformat(),
        "current_time": now.isoformat(),
    }
