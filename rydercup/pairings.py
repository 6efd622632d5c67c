from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rydercup.engine import TEAM_A, TEAM_B, ScoringError

MATCH_FORMATS = {
    "singles": 1,
    "fourball": 2,
    "foursomes": 2,
}


class PairingError(ScoringError):
    pass


@dataclass(frozen=True)
class Match:
    day_number: int
    match_number: int
    format: str
    team_a_player1: int
    team_b_player1: int
    team_a_player2: int | None = None
    team_b_player2: int | None = None

    def side(self, team: str) -> list[int]:
        if team == TEAM_A:
            players = [self.team_a_player1, self.team_a_player2]
        else:
            players = [self.team_b_player1, self.team_b_player2]
        return [player for player in players if player is not None]


def group_sessions_by_day(sessions: Iterable[Mapping[str, Any]]) -> list[dict]:
    """Collapse per-session rows into one row per day, formats comma-joined."""
    days: dict[int, dict] = {}
    for session in sessions:
        day = days.setdefault(
            session["day_number"],
            {"day_number": session["day_number"], "formats": [], "num_matches": 0},
        )
        day["formats"].append(session["format"])
        day["num_matches"] += session.get("num_matches", 0)
    return [
        {
            "day_number": day["day_number"],
            "format": ",".join(day["formats"]),
            "num_matches": day["num_matches"],
        }
        for _, day in sorted(days.items())
    ]


def validate_match(match: Match, roster: Mapping[int, str | None]) -> None:
    size = MATCH_FORMATS.get(match.format)
    if size is None:
        raise PairingError(f"Unknown match format {match.format!r}.")
    for team in (TEAM_A, TEAM_B):
        side = match.side(team)
        if len(side) != size:
            raise PairingError(
                f"{match.format.capitalize()} needs {size} player{'s' if size != 1 else ''} "
                f"per side, team {team} has {len(side)}."
            )
        if len(set(side)) != len(side):
            raise PairingError(f"Team {team} lists the same player twice.")
        for player_id in side:
            if player_id not in roster:
                raise PairingError(f"Player {player_id} is not in this game.")
            if roster[player_id] != team:
                raise PairingError(f"Player {player_id} is not on team {team}.")


def order_roster(players: list[dict], picks: list[dict]) -> dict[str, list[dict]]:
    """Split players by team, captains first and then in draft order."""
    pick_numbers = {pick["player_id"]: pick["pick_number"] for pick in picks}
    rosters: dict[str, list[dict]] = defaultdict(list)
    for player in players:
        if player.get("team") in (TEAM_A, TEAM_B):
            rosters[player["team"]].append(player)
    for team in (TEAM_A, TEAM_B):
        rosters[team] = sorted(
            rosters[team],
            key=lambda entry: (
                not entry.get("is_captain"),
                pick_numbers.get(entry["id"], 0),
                entry["id"],
            ),
        )
    return {TEAM_A: rosters[TEAM_A], TEAM_B: rosters[TEAM_B]}


def build_singles_pairings(
    team_a: list[dict],
    team_b: list[dict],
    day_number: int = 1,
    start_number: int = 1,
) -> list[Match]:
    count = min(len(team_a), len(team_b))
    if count == 0:
        raise PairingError("Need at least one player on each team to create matches.")
    return [
        Match(
            day_number=day_number,
            match_number=start_number + idx,
            format="singles",
            team_a_player1=team_a[idx]["id"],
            team_b_player1=team_b[idx]["id"],
        )
        for idx in range(count)
    ]


def _side_names(match: Mapping[str, Any], team: str) -> str:
    prefix = f"team_{team.lower()}"
    names = [match.get(f"{prefix}_player1_name"), match.get(f"{prefix}_player2_name")]
    return " & ".join(filter(None, names)) or f"Team {team}"


def match_display(match: Mapping[str, Any]) -> str:
    return (
        f"Day {match['day_number']} Match {match['match_number']}: "
        f"{_side_names(match, TEAM_A)} vs {_side_names(match, TEAM_B)}"
    )
