import json
import logging
import random
from datetime import date, datetime, timezone
from typing import Literal

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from rydercup.db import (
    apply_draft,
    check_in_player,
    delete_all_matches,
    delete_game,
    delete_holes_from,
    delete_match,
    delete_player,
    ensure_schema,
    fetch_draft_picks,
    fetch_game,
    fetch_game_by_code,
    fetch_game_days,
    fetch_games,
    fetch_holes,
    fetch_match,
    fetch_matches,
    fetch_player,
    fetch_player_by_email,
    fetch_players,
    game_code_exists,
    insert_game,
    insert_matches,
    insert_player,
    mark_invite_sent,
    player_is_committed,
    record_draft_pick,
    reset_draft,
    set_captain,
    update_game_scores,
    update_game_status,
    update_match_result,
    update_player,
    update_teams,
    upsert_hole,
)
from rydercup.engine import (
    CAPTAINS_MODE,
    DRAFT_MODES,
    MATCH_STATUS_LABELS,
    TEAM_A,
    TEAM_B,
    DraftError,
    MatchScore,
    ScoringError,
    TeamPoints,
    aggregate_scores,
    assign_snake_draft,
    match_status_label,
    order_players,
    score_match,
    seed_captains,
    team_for_pick,
    undo_from_hole,
    validate_hole_results,
)
from rydercup.lobby import (
    game_phase,
    generate_game_code,
    generate_invite_token,
    scoring_access,
    scoring_window,
    window_for_game,
)
from rydercup.migrations import apply_migrations
from rydercup.notifications import check_in_url, send_player_invite
from rydercup.pairings import (
    MATCH_FORMATS,
    Match,
    build_singles_pairings,
    group_sessions_by_day,
    match_display,
    order_roster,
    validate_match,
)
from rydercup.settings import load_settings

logger = logging.getLogger(__name__)

app = FastAPI()
settings = load_settings()

GAME_STATUS_COMPLETED = "completed"
GAME_STATUS_DRAFTING = "drafting"
GAME_STATUS_DRAFT_COMPLETE = "draft_complete"


class SessionPayload(BaseModel):
    day_number: int = Field(ge=1)
    format: str
    num_matches: int = Field(default=0, ge=0)


class GamePayload(BaseModel):
    name: str
    tournament_date: date
    days: list[SessionPayload] = []
    num_days: int | None = Field(default=None, ge=1)
    team_a_name: str | None = None
    team_b_name: str | None = None
    max_players: int | None = Field(default=None, ge=2)
    holes_in_round: int | None = Field(default=None, ge=1, le=18)


class TeamsPayload(BaseModel):
    team_a_name: str | None = None
    team_b_name: str | None = None
    team_a_color: str | None = None
    team_b_color: str | None = None


class PlayerPayload(BaseModel):
    name: str
    email: str
    handicap: float | None = None
    is_captain: bool = False
    send_invite: bool = False


class PlayerUpdatePayload(BaseModel):
    name: str | None = None
    email: str | None = None
    handicap: float | None = None


class CaptainsPayload(BaseModel):
    captain_a_id: int | None = None
    captain_b_id: int | None = None


class DraftPickPayload(BaseModel):
    player_id: int
    pick_number: int | None = Field(default=None, ge=1)


class AutoDraftPayload(BaseModel):
    mode: Literal["random", "balanced"]
    seed: int | None = None


class FinalizeDraftPayload(BaseModel):
    draft_mode: str = CAPTAINS_MODE


class MatchPayload(BaseModel):
    day_number: int = Field(default=1, ge=1)
    match_number: int | None = Field(default=None, ge=1)
    format: str = "singles"
    team_a_player1: int
    team_a_player2: int | None = None
    team_b_player1: int
    team_b_player2: int | None = None


class MatchesPayload(BaseModel):
    matches: list[MatchPayload]


class AutoMatchesPayload(BaseModel):
    day_number: int = Field(default=1, ge=1)


class HolePayload(BaseModel):
    hole_number: int
    winner: Literal["A", "B", "halved"]


class UndoPayload(BaseModel):
    hole_number: int = Field(ge=1)


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def _read_payload(model: type[BaseModel], request: Request):
    body = await request.body()
    try:
        return model.model_validate(json.loads(body) if body else {})
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "error": "Invalid payload",
                "details": exc.errors(include_url=False, include_context=False),
            },
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail={"error": "Invalid payload", "details": str(exc)},
        ) from exc


@app.exception_handler(ScoringError)
async def scoring_error_handler(request: Request, exc: ScoringError) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=400)


def _require_pin(pin: str) -> None:
    if pin != settings.admin_pin:
        raise HTTPException(status_code=403, detail="Invalid or missing PIN.")


def _require_game(game_id: int) -> dict:
    game = fetch_game(settings.database_url, game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


def _require_player(player_id: int) -> dict:
    player = fetch_player(settings.database_url, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


def _require_match(match_id: int) -> dict:
    match = fetch_match(settings.database_url, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return match


def _is_expired(game: dict) -> bool:
    return _now() > window_for_game(game).expires_at


def _public_player(player: dict) -> dict:
    return {key: value for key, value in player.items() if key != "invite_token"}


def _game_view(game: dict, include_players: bool = False) -> dict:
    view = dict(game)
    view["days"] = fetch_game_days(settings.database_url, game["id"])
    view["phase"] = game_phase(window_for_game(game), _now())
    if include_players:
        view["players"] = [
            _public_player(player) for player in fetch_players(settings.database_url, game["id"])
        ]
    return view


def _team_names(game: dict) -> dict[str, str]:
    return {TEAM_A: game["team_a_name"], TEAM_B: game["team_b_name"]}


def _match_view(match: dict, game: dict) -> dict:
    view = dict(match)
    score = score_match(fetch_holes(settings.database_url, match["id"]), game["holes_in_round"])
    view["holes_played"] = score.holes_played
    view["display"] = match_display(match)
    view["status_label"] = MATCH_STATUS_LABELS.get(match["status"], match["status"])
    view["result_label"] = match_status_label(score, _team_names(game))
    return view


def _refresh_team_scores(game_id: int) -> TeamPoints:
    points = aggregate_scores(fetch_matches(settings.database_url, game_id))
    update_game_scores(
        settings.database_url, game_id, points.team_a_points, points.team_b_points
    )
    return points


def _rescore_match(match: dict, game: dict) -> MatchScore:
    holes = fetch_holes(settings.database_url, match["id"])
    score = score_match(holes, game["holes_in_round"])
    update_match_result(
        settings.database_url,
        match["id"],
        score.team_a_score,
        score.team_b_score,
        score.status,
        score.winner,
    )
    _refresh_team_scores(game["id"])
    return score


def _next_pick_number(picks: list[dict]) -> int:
    return max((pick["pick_number"] for pick in picks), default=0) + 1


def _unique_game_code() -> str:
    while True:
        code = generate_game_code()
        if not game_code_exists(settings.database_url, code):
            return code


@app.on_event("startup")
def startup() -> None:
    ensure_schema(settings.database_url)
    apply_migrations(settings.database_url)


# Games


@app.post("/api/games", status_code=201)
async def api_create_game(request: Request):
    payload = await _read_payload(GamePayload, request)
    if not payload.name.strip() or not payload.days:
        raise HTTPException(
            status_code=400,
            detail="Game name, number of days, and day configurations required",
        )
    unknown = sorted({day.format for day in payload.days} - set(MATCH_FORMATS))
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown match format: {', '.join(unknown)}")

    days = group_sessions_by_day(day.model_dump() for day in payload.days)
    window = scoring_window(
        payload.tournament_date,
        settings.unlock_hours_before,
        settings.expire_days_after,
    )
    game_code = _unique_game_code()
    game = insert_game(
        settings.database_url,
        name=payload.name.strip(),
        game_code=game_code,
        num_days=payload.num_days or len(days),
        tournament_date=payload.tournament_date.isoformat(),
        unlocks_at=window.unlocks_at.isoformat(),
        expires_at=window.expires_at.isoformat(),
        days=days,
        team_a_name=payload.team_a_name or "Team A",
        team_b_name=payload.team_b_name or "Team B",
        max_players=payload.max_players,
        holes_in_round=payload.holes_in_round or settings.holes_in_round,
    )
    logger.info("Created game %s (%s) with code %s", game["id"], game["name"], game_code)
    return {"message": "Game created successfully", "game": game, "game_code": game_code}


@app.get("/api/games")
async def api_list_games():
    now = _now()
    games = []
    for game in fetch_games(settings.database_url):
        games.append({**game, "phase": game_phase(window_for_game(game), now)})
    return {"games": games}


@app.get("/api/games/code/{code}")
async def api_game_by_code(code: str):
    game = fetch_game_by_code(settings.database_url, code)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found. Check the code and try again.")
    return {"game": _game_view(game, include_players=True)}


@app.get("/api/games/{game_id}")
async def api_game(game_id: int):
    return {"game": _game_view(_require_game(game_id))}


@app.delete("/api/games/{game_id}")
async def api_delete_game(game_id: int, pin: str = ""):
    _require_pin(pin)
    _require_game(game_id)
    delete_game(settings.database_url, game_id)
    logger.info("Deleted game %s", game_id)
    return {"message": "Game deleted successfully"}


@app.put("/api/games/{game_id}/teams")
async def api_update_teams(game_id: int, request: Request):
    payload = await _read_payload(TeamsPayload, request)
    game = update_teams(settings.database_url, game_id, **payload.model_dump())
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return {"message": "Teams updated successfully", "game": game}


@app.get("/api/games/{game_id}/scoring-access")
async def api_scoring_access(game_id: int):
    game = _require_game(game_id)
    return scoring_access(window_for_game(game), _now())


# Players


@app.post("/api/games/{game_id}/players", status_code=201)
async def api_add_player(game_id: int, request: Request):
    payload = await _read_payload(PlayerPayload, request)
    game = _require_game(game_id)
    if not payload.name.strip() or not payload.email.strip():
        raise HTTPException(status_code=400, detail="Name and email required")
    if _is_expired(game):
        raise HTTPException(status_code=400, detail="This tournament has expired")
    if fetch_player_by_email(settings.database_url, game_id, payload.email.strip()):
        raise HTTPException(status_code=400, detail="Player already in this game")
    if game["max_players"]:
        current = fetch_players(settings.database_url, game_id)
        if len(current) >= game["max_players"]:
            raise HTTPException(status_code=400, detail="This game is full")

    player = insert_player(
        settings.database_url,
        game_id,
        payload.name.strip(),
        payload.email.strip(),
        payload.handicap,
        payload.is_captain,
        generate_invite_token(),
    )
    email_sent = False
    if payload.send_invite:
        email_sent = send_player_invite(settings, player, game)
        if email_sent:
            mark_invite_sent(settings.database_url, player["id"])
    return {
        "message": "Player added successfully",
        "player": player,
        "check_in_url": check_in_url(settings, player["invite_token"]),
        "email_sent": email_sent,
    }


@app.get("/api/games/{game_id}/players")
async def api_players(game_id: int):
    _require_game(game_id)
    players = fetch_players(settings.database_url, game_id)
    checked_in = sum(1 for player in players if player["checked_in"])
    return {
        "players": players,
        "check_in_stats": {
            "total": len(players),
            "checked_in": checked_in,
            "pending": len(players) - checked_in,
        },
    }


@app.put("/api/players/{player_id}")
async def api_update_player(player_id: int, request: Request):
    payload = await _read_payload(PlayerUpdatePayload, request)
    player = _require_player(player_id)
    if _is_expired(_require_game(player["game_id"])):
        raise HTTPException(
            status_code=400,
            detail="This tournament has expired and cannot be edited",
        )
    if payload.email is not None:
        payload.email = payload.email.strip()
        if not payload.email:
            raise HTTPException(status_code=400, detail="Email cannot be blank")
        existing = fetch_player_by_email(settings.database_url, player["game_id"], payload.email)
        if existing and existing["id"] != player_id:
            raise HTTPException(status_code=400, detail="Player already in this game")
    updated = update_player(settings.database_url, player_id, **payload.model_dump())
    return {"message": "Player updated successfully", "player": updated}


@app.delete("/api/players/{player_id}")
async def api_delete_player(player_id: int):
    player = _require_player(player_id)
    game = _require_game(player["game_id"])
    if game["status"] == GAME_STATUS_COMPLETED:
        raise HTTPException(
            status_code=400,
            detail="Cannot remove players from a completed tournament",
        )
    if player_is_committed(settings.database_url, player_id):
        raise HTTPException(
            status_code=400,
            detail="Player has been drafted or paired; reset the draft before removing them",
        )
    delete_player(settings.database_url, player_id)
    return {"message": "Player removed successfully"}


@app.post("/api/players/{player_id}/invite")
async def api_send_invite(player_id: int):
    player = _require_player(player_id)
    game = _require_game(player["game_id"])
    success = send_player_invite(settings, player, game)
    if success:
        mark_invite_sent(settings.database_url, player_id)
    return {
        "message": "Invite sent successfully" if success else "Failed to send invite",
        "success": success,
        "check_in_url": check_in_url(settings, player["invite_token"]),
    }


@app.post("/api/checkin/{token}")
async def api_check_in(token: str):
    player = check_in_player(settings.database_url, token)
    if not player:
        raise HTTPException(status_code=404, detail="Invalid check-in link")
    game = _require_game(player["game_id"])
    return {
        "message": "Checked in successfully!",
        "player": _public_player(player),
        "game_code": game["game_code"],
        "game_name": game["name"],
    }


# Draft


@app.get("/api/games/{game_id}/draft")
async def api_draft(game_id: int):
    game = _require_game(game_id)
    players = fetch_players(settings.database_url, game_id)
    picks = fetch_draft_picks(settings.database_url, game_id)
    rosters = order_roster(players, picks)
    return {
        "draft_mode": game["draft_mode"],
        "status": game["status"],
        "picks": picks,
        "next_pick": {
            "pick_number": _next_pick_number(picks),
            "team": team_for_pick(_next_pick_number(picks)),
        },
        "team_a": rosters[TEAM_A],
        "team_b": rosters[TEAM_B],
        "available": [player for player in players if not player["team"]],
    }


@app.post("/api/games/{game_id}/draft/captains")
async def api_draft_captains(game_id: int, request: Request):
    payload = await _read_payload(CaptainsPayload, request)
    _require_game(game_id)
    players = [
        player for player in fetch_players(settings.database_url, game_id) if not player["team"]
    ]
    captain_a, captain_b, pool = seed_captains(
        players, payload.captain_a_id, payload.captain_b_id
    )
    set_captain(settings.database_url, captain_a["id"], TEAM_A)
    set_captain(settings.database_url, captain_b["id"], TEAM_B)
    update_game_status(
        settings.database_url, game_id, GAME_STATUS_DRAFTING, draft_mode=CAPTAINS_MODE
    )
    logger.info(
        "Game %s captains: %s (A), %s (B)", game_id, captain_a["id"], captain_b["id"]
    )
    return {
        "captains": {TEAM_A: captain_a["id"], TEAM_B: captain_b["id"]},
        "available": [player["id"] for player in pool],
    }


@app.post("/api/games/{game_id}/draft/pick")
async def api_draft_pick(game_id: int, request: Request):
    payload = await _read_payload(DraftPickPayload, request)
    _require_game(game_id)
    player = _require_player(payload.player_id)
    if player["game_id"] != game_id:
        raise HTTPException(status_code=404, detail="Player not found")

    picks = fetch_draft_picks(settings.database_url, game_id)
    pick_number = payload.pick_number or _next_pick_number(picks)
    already_recorded = any(pick["pick_number"] == pick_number for pick in picks)
    if player["team"] and not already_recorded:
        raise HTTPException(status_code=400, detail="Player has already been drafted")

    outcome = record_draft_pick(
        settings.database_url,
        game_id,
        pick_number,
        team_for_pick(pick_number),
        player["id"],
    )
    pick = outcome["pick"]
    if pick["player_id"] != player["id"]:
        raise HTTPException(
            status_code=409,
            detail=f"Pick {pick_number} already belongs to another player",
        )
    if outcome["created"]:
        logger.info("Game %s pick %s: player %s to team %s", game_id, pick_number, player["id"], pick["team"])
    return {
        "message": "Draft pick saved successfully" if outcome["created"] else "Draft pick already saved",
        "created": outcome["created"],
        "pick_number": pick_number,
        "team": pick["team"],
        "player_id": player["id"],
    }


@app.post("/api/games/{game_id}/draft/auto")
async def api_auto_draft(game_id: int, request: Request):
    payload = await _read_payload(AutoDraftPayload, request)
    _require_game(game_id)
    players = fetch_players(settings.database_url, game_id)
    available = [player for player in players if not player["team"]]
    if not available:
        raise DraftError("No unassigned players left to draft.")

    picks = fetch_draft_picks(settings.database_url, game_id)
    rng = random.Random(payload.seed) if payload.seed is not None else None
    ordered = order_players(payload.mode, available, rng)
    result = assign_snake_draft(
        ordered,
        _next_pick_number(picks),
        team_a_ids=[player["id"] for player in players if player["team"] == TEAM_A],
        team_b_ids=[player["id"] for player in players if player["team"] == TEAM_B],
    )
    apply_draft(settings.database_url, game_id, result.ledger())
    update_game_status(
        settings.database_url, game_id, GAME_STATUS_DRAFTING, draft_mode=payload.mode
    )
    logger.info("Game %s %s draft assigned %d players", game_id, payload.mode, len(result.picks))
    return {
        "message": "Auto draft completed",
        "team_a": result.team_a,
        "team_b": result.team_b,
        "draft_order": [_public_player(entry) for entry in result.draft_order()],
    }


@app.post("/api/games/{game_id}/draft/finalize")
async def api_finalize_draft(game_id: int, request: Request):
    payload = await _read_payload(FinalizeDraftPayload, request)
    _require_game(game_id)
    if payload.draft_mode not in DRAFT_MODES:
        raise DraftError(f"Unknown draft mode {payload.draft_mode!r}.")
    update_game_status(
        settings.database_url,
        game_id,
        GAME_STATUS_DRAFT_COMPLETE,
        draft_mode=payload.draft_mode,
    )
    return {"message": "Draft finalized successfully"}


@app.post("/api/games/{game_id}/draft/reset")
async def api_reset_draft(game_id: int, pin: str = ""):
    _require_pin(pin)
    _require_game(game_id)
    reset_draft(settings.database_url, game_id)
    logger.info("Draft reset for game %s", game_id)
    return {"message": "Draft reset successfully"}


# Matches


def _next_match_number(matches: list[dict], day_number: int) -> int:
    numbers = [m["match_number"] for m in matches if m["day_number"] == day_number]
    return max(numbers, default=0) + 1


@app.post("/api/games/{game_id}/matches")
async def api_create_matches(game_id: int, request: Request):
    payload = await _read_payload(MatchesPayload, request)
    _require_game(game_id)
    roster = {
        player["id"]: player["team"] for player in fetch_players(settings.database_url, game_id)
    }
    existing = fetch_matches(settings.database_url, game_id)
    to_create: list[Match] = []
    for entry in payload.matches:
        taken = existing + [
            {"day_number": m.day_number, "match_number": m.match_number} for m in to_create
        ]
        match = Match(
            day_number=entry.day_number,
            match_number=entry.match_number or _next_match_number(taken, entry.day_number),
            format=entry.format,
            team_a_player1=entry.team_a_player1,
            team_b_player1=entry.team_b_player1,
            team_a_player2=entry.team_a_player2,
            team_b_player2=entry.team_b_player2,
        )
        validate_match(match, roster)
        to_create.append(match)
    match_ids = insert_matches(settings.database_url, game_id, to_create)
    return {"message": "Matches created successfully", "match_ids": match_ids}


@app.post("/api/games/{game_id}/matches/auto")
async def api_auto_matches(game_id: int, request: Request):
    payload = await _read_payload(AutoMatchesPayload, request)
    _require_game(game_id)
    players = fetch_players(settings.database_url, game_id)
    rosters = order_roster(players, fetch_draft_picks(settings.database_url, game_id))
    existing = fetch_matches(settings.database_url, game_id)
    pairings = build_singles_pairings(
        rosters[TEAM_A],
        rosters[TEAM_B],
        day_number=payload.day_number,
        start_number=_next_match_number(existing, payload.day_number),
    )
    match_ids = insert_matches(settings.database_url, game_id, pairings)
    return {
        "message": f"{len(match_ids)} singles matches created successfully!",
        "match_ids": match_ids,
    }


@app.get("/api/games/{game_id}/matches")
async def api_matches(game_id: int):
    game = _require_game(game_id)
    return {
        "matches": [
            _match_view(match, game) for match in fetch_matches(settings.database_url, game_id)
        ]
    }


@app.delete("/api/games/{game_id}/matches")
async def api_delete_all_matches(game_id: int):
    _require_game(game_id)
    deleted = delete_all_matches(settings.database_url, game_id)
    logger.info("Deleted %d matches for game %s", deleted, game_id)
    return {"message": "All matches deleted successfully", "deleted": deleted}


@app.delete("/api/games/{game_id}/matches/{match_id}")
async def api_delete_match(game_id: int, match_id: int):
    if not delete_match(settings.database_url, game_id, match_id):
        raise HTTPException(status_code=404, detail="Match not found")
    points = _refresh_team_scores(game_id)
    logger.info("Deleted match %s from game %s", match_id, game_id)
    return {
        "message": "Match deleted successfully",
        "team_a_points": points.team_a_points,
        "team_b_points": points.team_b_points,
    }


@app.get("/api/matches/{match_id}")
async def api_match(match_id: int):
    match = _require_match(match_id)
    game = _require_game(match["game_id"])
    view = _match_view(match, game)
    view["holes"] = fetch_holes(settings.database_url, match_id)
    view["holes_in_round"] = game["holes_in_round"]
    return {"match": view}


@app.post("/api/matches/{match_id}/holes")
async def api_record_hole(match_id: int, request: Request):
    payload = await _read_payload(HolePayload, request)
    match = _require_match(match_id)
    game = _require_game(match["game_id"])
    window = window_for_game(game)
    now = _now()
    if now < window.unlocks_at:
        raise HTTPException(status_code=400, detail="Scoring has not started yet")
    if now > window.expires_at:
        raise HTTPException(status_code=400, detail="Scoring window has expired")
    validate_hole_results([payload.model_dump()], game["holes_in_round"])

    upsert_hole(settings.database_url, match_id, payload.hole_number, payload.winner)
    score = _rescore_match(match, game)
    logger.info(
        "Match %s hole %s -> %s (%s)", match_id, payload.hole_number, payload.winner, score.status
    )
    return {
        "message": "Hole recorded successfully",
        "team_a_score": score.team_a_score,
        "team_b_score": score.team_b_score,
        "match_status": score.status,
        "match_winner": score.winner,
        "status_label": match_status_label(score, _team_names(game)),
    }


@app.post("/api/matches/{match_id}/undo")
async def api_undo_from_hole(match_id: int, request: Request):
    payload = await _read_payload(UndoPayload, request)
    match = _require_match(match_id)
    game = _require_game(match["game_id"])
    if _is_expired(game):
        raise HTTPException(status_code=400, detail="Scoring window has expired")

    _, score = undo_from_hole(
        fetch_holes(settings.database_url, match_id),
        payload.hole_number,
        game["holes_in_round"],
    )
    deleted = delete_holes_from(settings.database_url, match_id, payload.hole_number)
    update_match_result(
        settings.database_url,
        match_id,
        score.team_a_score,
        score.team_b_score,
        score.status,
        score.winner,
    )
    _refresh_team_scores(game["id"])
    logger.info("Match %s rolled back from hole %s (%d removed)", match_id, payload.hole_number, deleted)
    return {
        "message": "Holes deleted successfully",
        "team_a_score": score.team_a_score,
        "team_b_score": score.team_b_score,
        "match_status": score.status,
        "match_winner": score.winner,
        "holes_played": score.holes_played,
        "status_label": match_status_label(score, _team_names(game)),
    }


@app.get("/api/games/{game_id}/leaderboard")
async def api_leaderboard(game_id: int):
    game = _require_game(game_id)
    points = _refresh_team_scores(game_id)
    return {
        "team_a_points": points.team_a_points,
        "team_b_points": points.team_b_points,
        "team_a_name": game["team_a_name"] or "Team A",
        "team_b_name": game["team_b_name"] or "Team B",
        "total_matches": points.total_matches,
        "completed_matches": points.completed_matches,
    }
