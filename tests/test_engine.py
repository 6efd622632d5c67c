import random

import pytest

from rydercup.engine import (
    COMPLETED,
    HALVED,
    IN_PROGRESS,
    NOT_STARTED,
    DraftError,
    InsufficientPlayers,
    InvalidHoleResults,
    aggregate_scores,
    assign_snake_draft,
    balanced_order,
    match_status_label,
    order_players,
    random_order,
    score_match,
    seed_captains,
    team_for_pick,
    undo_from_hole,
    validate_hole_results,
)


def _holes(winners: list[str]) -> list[dict]:
    return [{"hole_number": idx, "winner": winner} for idx, winner in enumerate(winners, 1)]


def _players(handicaps: list) -> list[dict]:
    return [
        {"id": idx, "name": f"Player {idx}", "handicap": handicap}
        for idx, handicap in enumerate(handicaps, 1)
    ]


def test_no_holes_is_not_started():
    score = score_match([])
    assert score.status == NOT_STARTED
    assert score.winner is None
    assert score.holes_remaining == 18


def test_halved_holes_count_for_neither_side():
    score = score_match(_holes(["A", HALVED, "B", HALVED]))
    assert (score.team_a_score, score.team_b_score) == (1, 1)
    assert score.holes_played == 4
    assert score.status == IN_PROGRESS


def test_lead_within_remaining_holes_stays_in_progress():
    # 9 up with 9 to play is dormie, not finished
    score = score_match(_holes(["A"] * 9))
    assert score.status == IN_PROGRESS
    assert score.winner is None


def test_early_clinch_completes_match():
    score = score_match(_holes(["A"] * 13 + ["B"] * 2))
    assert score.status == COMPLETED
    assert score.winner == "A"
    assert score.holes_remaining == 3
    assert match_status_label(score) == "Team A wins 11 & 3"


def test_early_clinch_for_team_b():
    score = score_match(_holes(["B"] * 10))
    assert score.status == COMPLETED
    assert score.winner == "B"


def test_full_round_level_is_halved():
    score = score_match(_holes(["A", "B"] * 9))
    assert score.status == COMPLETED
    assert score.winner == HALVED
    assert match_status_label(score) == "Match halved"


def test_full_round_one_up():
    score = score_match(_holes(["A", "B"] * 8 + [HALVED, "B"]))
    assert score.status == COMPLETED
    assert score.winner == "B"
    assert match_status_label(score, {"B": "Europe"}) == "Europe wins 1 UP"


def test_hole_order_does_not_matter():
    holes = _holes(["A", "B", "A", HALVED, "A"])
    assert score_match(holes) == score_match(list(reversed(holes)))


def test_shorter_round():
    score = score_match(_holes(["A"] * 5), holes_in_round=9)
    assert score.status == COMPLETED
    assert score.holes_remaining == 4


def test_in_progress_labels():
    assert match_status_label(score_match(_holes(["A", "B"]))) == "All square"
    assert match_status_label(score_match(_holes(["B", "B", HALVED]))) == "Team B 2 UP"
    assert match_status_label(score_match([])) == "Not started"


def test_undo_is_left_inverse_of_recording():
    recorded = _holes(["A", "B", "A", "A", HALVED])
    kept, score = undo_from_hole(recorded, 3)
    assert [hole["hole_number"] for hole in kept] == [1, 2]
    assert score == score_match(recorded[:2])


def test_undo_reopens_completed_match():
    recorded = _holes(["A"] * 10)
    assert score_match(recorded).status == COMPLETED
    _, score = undo_from_hole(recorded, 10)
    assert score.status == IN_PROGRESS
    assert score.winner is None


def test_undo_from_first_hole_clears_match():
    _, score = undo_from_hole(_holes(["A", "B"]), 1)
    assert score.status == NOT_STARTED


@pytest.mark.parametrize(
    "holes",
    [
        [{"hole_number": 0, "winner": "A"}],
        [{"hole_number": 19, "winner": "A"}],
        [{"hole_number": 3, "winner": "A"}, {"hole_number": 3, "winner": "B"}],
        [{"hole_number": 1, "winner": "C"}],
    ],
)
def test_invalid_hole_results_rejected(holes):
    with pytest.raises(InvalidHoleResults):
        validate_hole_results(holes)
    with pytest.raises(InvalidHoleResults):
        score_match(holes, validate=True)


def test_snake_turn_order():
    assert [team_for_pick(p) for p in range(1, 9)] == ["A", "B", "B", "A", "A", "B", "B", "A"]
    with pytest.raises(DraftError):
        team_for_pick(0)


@pytest.mark.parametrize("count", [1, 2, 5, 8, 11])
def test_snake_draft_keeps_teams_even(count):
    result = assign_snake_draft(_players([None] * count))
    assert abs(len(result.team_a) - len(result.team_b)) <= 1
    for slot in result.picks:
        if slot.pick_number % 2 == 0:
            partner = result.picks[slot.pick_number - 2]
            assert partner.team != slot.team
    assert [entry["pick_number"] for entry in result.ledger()] == list(range(1, count + 1))


@pytest.mark.parametrize("count", [2, 3, 6, 7, 10])
def test_mirrored_picks_in_one_round_are_opposed(count):
    teams = {slot.pick_number: slot.team for slot in assign_snake_draft(_players([None] * count)).picks}
    for pick in range(1, count + 1):
        mirror = count + 1 - pick
        if mirror != pick and (pick - 1) // 2 == (mirror - 1) // 2:
            assert teams[pick] != teams[mirror]
    for first in range(1, count, 2):
        assert teams[first] != teams[first + 1]


def test_snake_draft_continues_from_start_pick():
    result = assign_snake_draft(_players([1, 2]), start_pick_number=3, team_a_ids=[90], team_b_ids=[91])
    assert [slot.team for slot in result.picks] == ["B", "A"]
    assert result.team_a == [90, 2]
    assert result.team_b == [91, 1]


def test_balanced_draft_distributes_handicaps():
    players = _players([5, 30, 10, 25, 2, 40])
    result = assign_snake_draft(balanced_order(players))
    handicap = {player["id"]: player["handicap"] for player in players}
    team_a_total = sum(handicap[pid] for pid in result.team_a)
    team_b_total = sum(handicap[pid] for pid in result.team_b)
    assert sorted(handicap[pid] for pid in result.team_a) == [2, 25, 30]
    assert (team_a_total, team_b_total) == (57, 55)


def test_balanced_order_puts_missing_handicaps_last():
    players = _players([None, 12, 0, None, 3])
    assert [player["handicap"] for player in balanced_order(players)] == [0, 3, 12, None, None]


def test_random_order_is_reproducible_with_seed():
    players = _players(list(range(10)))
    first = random_order(players, random.Random(7))
    second = order_players("random", players, random.Random(7))
    assert first == second
    assert sorted(p["id"] for p in first) == [p["id"] for p in players]


def test_unknown_draft_mode():
    with pytest.raises(DraftError):
        order_players("captains", _players([1, 2]))


def test_seed_captains_uses_flags():
    players = _players([10, 4, 8])
    players[1]["is_captain"] = True
    players[2]["is_captain"] = True
    captain_a, captain_b, pool = seed_captains(players)
    assert (captain_a["id"], captain_b["id"]) == (2, 3)
    assert [player["id"] for player in pool] == [1]


def test_seed_captains_explicit_ids():
    captain_a, captain_b, pool = seed_captains(_players([1, 2, 3, 4]), 4, 1)
    assert (captain_a["id"], captain_b["id"]) == (4, 1)
    assert [player["id"] for player in pool] == [2, 3]


def test_seed_captains_needs_two_players():
    with pytest.raises(InsufficientPlayers):
        seed_captains(_players([5]))
    with pytest.raises(DraftError):
        seed_captains(_players([5, 6]), 1, 1)


def test_aggregate_scores():
    matches = [
        {"winner": "A", "status": COMPLETED},
        {"winner": "B", "status": COMPLETED},
        {"winner": HALVED, "status": COMPLETED},
        {"winner": "A", "status": COMPLETED},
        {"winner": None, "status": IN_PROGRESS},
    ]
    points = aggregate_scores(matches)
    assert points.team_a_points == 2.5
    assert points.team_b_points == 1.5
    assert points.completed_matches == 4
    assert points.total_matches == 5
    assert aggregate_scores(reversed(matches)) == points
