import argparse
import json
from pathlib import Path

from rydercup.db import (
    fetch_draft_picks,
    fetch_game,
    fetch_game_by_code,
    fetch_game_days,
    fetch_holes,
    fetch_matches,
    fetch_players,
)
from rydercup.engine import aggregate_scores
from rydercup.settings import load_settings


def export_snapshot(database_url: str, game_id: int) -> dict:
    game = fetch_game(database_url, game_id) or {"id": game_id}
    matches = fetch_matches(database_url, game_id)
    points = aggregate_scores(matches)
    return {
        "game": game,
        "days": fetch_game_days(database_url, game_id),
        "players": fetch_players(database_url, game_id),
        "draft_picks": fetch_draft_picks(database_url, game_id),
        "matches": [
            {**match, "holes": fetch_holes(database_url, match["id"])} for match in matches
        ],
        "leaderboard": {
            "team_a_points": points.team_a_points,
            "team_b_points": points.team_b_points,
            "completed_matches": points.completed_matches,
            "total_matches": points.total_matches,
        },
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump a game's players, draft and scores as JSON.")
    parser.add_argument("--game-id", "-g", type=int, help="Game ID to snapshot.")
    parser.add_argument("--code", "-c", type=str, help="Game share code to snapshot.")
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Path to write the JSON export (defaults to stdout).",
    )
    args = parser.parse_args()

    database_url = load_settings().database_url
    game_id = args.game_id
    if not game_id and args.code:
        game = fetch_game_by_code(database_url, args.code)
        game_id = game["id"] if game else None
    if not game_id:
        raise SystemExit("Unable to determine the game (pass --game-id or a valid --code).")

    snapshot = export_snapshot(database_url, game_id)
    payload = json.dumps(snapshot, default=str, indent=2)

    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        print(f"Snapshot saved to {args.output}")
    else:
        print(payload)


if __name__ == "__main__":
    main()
