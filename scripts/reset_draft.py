#!/usr/bin/env python3
"""Clear a game's draft, matches and scores so teams can be picked again."""

from __future__ import annotations

import argparse

from rydercup.db import fetch_game, fetch_game_by_code, fetch_games, reset_draft
from rydercup.settings import load_settings


def _resolve_game_id(database_url: str, code: str | None, explicit_id: int | None) -> int | None:
    if explicit_id:
        game = fetch_game(database_url, explicit_id)
        return game["id"] if game else None
    if code:
        game = fetch_game_by_code(database_url, code)
        return game["id"] if game else None
    return None


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Delete draft picks, matches and hole scores for a game and clear team assignments."
    )
    parser.add_argument("--game-id", type=int, help="Target game ID.")
    parser.add_argument("--code", type=str, help="Lookup game by share code.")
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available games from the database.",
    )
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Required to actually reset the draft.",
    )
    args = parser.parse_args()
    database_url = load_settings().database_url

    if args.list:
        games = fetch_games(database_url)
        if not games:
            print("No games found.")
            return
        print("Games:")
        for entry in games:
            print(f"  {entry['id']}: {entry['name']} [{entry['game_code']}] ({entry['status']})")
        return

    if not args.confirm:
        parser.error("This command deletes draft and match history. Re-run with --confirm to proceed.")

    game_id = _resolve_game_id(database_url, args.code, args.game_id)
    if not game_id:
        parser.error("Could not resolve a game. Provide a valid --game-id or --code.")

    reset_draft(database_url, game_id)
    print(f"Draft reset for game {game_id}.")


if __name__ == "__main__":
    main()
