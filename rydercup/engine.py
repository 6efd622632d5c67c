"""Match-play scoring and team draft rules.

Everything here is a pure function over plain values: hole results and
players are mappings (rows as returned by ``rydercup.db``) and the results
are frozen dataclasses. Nothing in this module touches the database.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

TEAM_A = "A"
TEAM_B = "B"
HALVED = "halved"
HOLE_WINNERS = (TEAM_A, TEAM_B, HALVED)

NOT_STARTED = "not_started"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
MATCH_STATUS_LABELS = {
    NOT_STARTED: "Not started",
    IN_PROGRESS: "In progress",
    COMPLETED: "Completed",
}

DEFAULT_HOLES_IN_ROUND = 18
MISSING_HANDICAP = 999

CAPTAINS_MODE = "captains"
RANDOM_MODE = "random"
BALANCED_MODE = "balanced"
DRAFT_MODES = (CAPTAINS_MODE, RANDOM_MODE, BALANCED_MODE)


class ScoringError(ValueError):
    """Base class for rejected scoring or draft input."""


class InvalidHoleResults(ScoringError):
    pass


class DraftError(ScoringError):
    pass


class InsufficientPlayers(DraftError):
    pass


@dataclass(frozen=True)
class MatchScore:
    team_a_score: int
    team_b_score: int
    status: str
    winner: str | None
    holes_played: int
    holes_remaining: int

    @property
    def diff(self) -> int:
        return self.team_a_score - self.team_b_score


def validate_hole_results(
    hole_results: Iterable[Mapping[str, Any]],
    holes_in_round: int = DEFAULT_HOLES_IN_ROUND,
) -> None:
    seen: set[int] = set()
    for hole in hole_results:
        number = hole["hole_number"]
        if not 1 <= number <= holes_in_round:
            raise InvalidHoleResults(
                f"Hole {number} is outside the round (1-{holes_in_round})."
            )
        if number in seen:
            raise InvalidHoleResults(f"Hole {number} was recorded more than once.")
        seen.add(number)
        if hole["winner"] not in HOLE_WINNERS:
            raise InvalidHoleResults(
                f"Hole {number} has an unknown winner {hole['winner']!r}."
            )


def score_match(
    hole_results: Iterable[Mapping[str, Any]],
    holes_in_round: int = DEFAULT_HOLES_IN_ROUND,
    *,
    validate: bool = False,
) -> MatchScore:
    """
    Derive a match's scores, status and winner from its recorded holes.

    The result is recomputed from the full list every time; halved holes
    count toward neither side. A match ends early once the leader is up by
    more holes than remain to be played.
    """
    holes = list(hole_results)
    if validate:
        validate_hole_results(holes, holes_in_round)

    team_a_score = sum(1 for hole in holes if hole["winner"] == TEAM_A)
    team_b_score = sum(1 for hole in holes if hole["winner"] == TEAM_B)
    holes_played = len(holes)
    holes_remaining = holes_in_round - holes_played
    diff = team_a_score - team_b_score

    status = IN_PROGRESS
    winner = None
    if holes_played == 0:
        status = NOT_STARTED
    elif abs(diff) > holes_remaining and holes_remaining > 0:
        status = COMPLETED
        winner = TEAM_A if diff > 0 else TEAM_B
    elif holes_played == holes_in_round:
        status = COMPLETED
        if diff == 0:
            winner = HALVED
        else:
            winner = TEAM_A if diff > 0 else TEAM_B

    return MatchScore(
        team_a_score=team_a_score,
        team_b_score=team_b_score,
        status=status,
        winner=winner,
        holes_played=holes_played,
        holes_remaining=holes_remaining,
    )


def undo_from_hole(
    hole_results: Iterable[Mapping[str, Any]],
    hole_number: int,
    holes_in_round: int = DEFAULT_HOLES_IN_ROUND,
) -> tuple[list[Mapping[str, Any]], MatchScore]:
    """Drop every result from ``hole_number`` onward and rescore the rest."""
    kept = [hole for hole in hole_results if hole["hole_number"] < hole_number]
    return kept, score_match(kept, holes_in_round)


def match_status_label(score: MatchScore, team_names: Mapping[str, str] | None = None) -> str:
    names = {TEAM_A: "Team A", TEAM_B: "Team B"}
    names.update(team_names or {})
    margin = abs(score.diff)
    if score.status == NOT_STARTED:
        return MATCH_STATUS_LABELS[NOT_STARTED]
    if score.status == COMPLETED:
        if score.winner == HALVED:
            return "Match halved"
        winner = names.get(score.winner, score.winner)
        if score.holes_remaining > 0:
            return f"{winner} wins {margin} & {score.holes_remaining}"
        return f"{winner} wins {margin} UP"
    if margin == 0:
        return "All square"
    leader = names[TEAM_A] if score.diff > 0 else names[TEAM_B]
    return f"{leader} {margin} UP"


def team_for_pick(pick_number: int) -> str:
    """
    Serpentine turn order: A, B, B, A, A, B, ...

    Each pair of picks is a round; the team that picked second in one round
    picks first in the next.
    """
    if pick_number < 1:
        raise DraftError(f"Pick numbers start at 1, got {pick_number}.")
    round_index, slot = divmod(pick_number - 1, 2)
    if round_index % 2 == 0:
        return TEAM_A if slot == 0 else TEAM_B
    return TEAM_B if slot == 0 else TEAM_A


@dataclass(frozen=True)
class DraftSlot:
    player: Mapping[str, Any]
    team: str
    pick_number: int

    @property
    def player_id(self) -> Any:
        return self.player["id"]


@dataclass(frozen=True)
class DraftResult:
    picks: list[DraftSlot]
    team_a: list[Any] = field(default_factory=list)
    team_b: list[Any] = field(default_factory=list)

    def ledger(self) -> list[dict]:
        return [
            {"pick_number": slot.pick_number, "team": slot.team, "player_id": slot.player_id}
            for slot in self.picks
        ]

    def draft_order(self) -> list[dict]:
        return [
            {**slot.player, "team": slot.team, "pick_number": slot.pick_number}
            for slot in self.picks
        ]


def assign_snake_draft(
    ordered_players: Sequence[Mapping[str, Any]],
    start_pick_number: int = 1,
    *,
    team_a_ids: Iterable[Any] = (),
    team_b_ids: Iterable[Any] = (),
) -> DraftResult:
    """
    Assign players, in the order given, to teams using the snake rule.

    ``team_a_ids``/``team_b_ids`` are players already on a team (captains)
    and lead the returned rosters.
    """
    team_a = list(team_a_ids)
    team_b = list(team_b_ids)
    picks: list[DraftSlot] = []
    for offset, player in enumerate(ordered_players):
        pick_number = start_pick_number + offset
        team = team_for_pick(pick_number)
        picks.append(DraftSlot(player=player, team=team, pick_number=pick_number))
        if team == TEAM_A:
            team_a.append(player["id"])
        else:
            team_b.append(player["id"])
    return DraftResult(picks=picks, team_a=team_a, team_b=team_b)


def random_order(
    players: Iterable[Mapping[str, Any]],
    rng: random.Random | None = None,
) -> list[Mapping[str, Any]]:
    shuffled = list(players)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled


def _handicap_key(player: Mapping[str, Any]) -> float:
    handicap = player.get("handicap")
    return MISSING_HANDICAP if handicap is None else float(handicap)


def balanced_order(players: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Lowest handicap first; players without a handicap go last."""
    return sorted(players, key=_handicap_key)


def order_players(
    mode: str,
    players: Iterable[Mapping[str, Any]],
    rng: random.Random | None = None,
) -> list[Mapping[str, Any]]:
    if mode == RANDOM_MODE:
        return random_order(players, rng)
    if mode == BALANCED_MODE:
        return balanced_order(players)
    raise DraftError(f"Unsupported auto draft mode {mode!r}.")


def seed_captains(
    players: Sequence[Mapping[str, Any]],
    captain_a_id: Any = None,
    captain_b_id: Any = None,
) -> tuple[Mapping[str, Any], Mapping[str, Any], list[Mapping[str, Any]]]:
    """
    Choose the two captains for a captains-pick draft.

    Explicit ids win; otherwise the first two players flagged as captains
    are used. Returns both captains and the remaining draft pool.
    """
    if len(players) < 2:
        raise InsufficientPlayers("At least 2 players are needed to pick captains.")

    by_id = {player["id"]: player for player in players}
    if captain_a_id is not None or captain_b_id is not None:
        if captain_a_id == captain_b_id:
            raise DraftError("Each team needs a different captain.")
        missing = [pid for pid in (captain_a_id, captain_b_id) if pid not in by_id]
        if missing:
            raise DraftError(f"Captain {missing[0]} is not in this game.")
        captain_a, captain_b = by_id[captain_a_id], by_id[captain_b_id]
    else:
        flagged = [player for player in players if player.get("is_captain")]
        if len(flagged) < 2:
            raise DraftError("Select a captain for each team before drafting.")
        captain_a, captain_b = flagged[0], flagged[1]

    pool = [
        player
        for player in players
        if player["id"] not in (captain_a["id"], captain_b["id"])
    ]
    return captain_a, captain_b, pool


@dataclass(frozen=True)
class TeamPoints:
    team_a_points: float
    team_b_points: float
    completed_matches: int = 0
    total_matches: int = 0


def aggregate_scores(matches: Iterable[Mapping[str, Any]]) -> TeamPoints:
    team_a_points = 0.0
    team_b_points = 0.0
    completed = 0
    total = 0
    for match in matches:
        total += 1
        if match.get("status") == COMPLETED:
            completed += 1
        winner = match.get("winner")
        if winner == TEAM_A:
            team_a_points += 1
        elif winner == TEAM_B:
            team_b_points += 1
        elif winner == HALVED:
            team_a_points += 0.5
            team_b_points += 0.5
    return TeamPoints(
        team_a_points=team_a_points,
        team_b_points=team_b_points,
        completed_matches=completed,
        total_matches=total,
    )
