import pytest

from rydercup.pairings import (
    Match,
    PairingError,
    build_singles_pairings,
    group_sessions_by_day,
    match_display,
    order_roster,
    validate_match,
)


def test_group_sessions_by_day():
    days = group_sessions_by_day(
        [
            {"day_number": 2, "format": "singles", "num_matches": 8},
            {"day_number": 1, "format": "foursomes", "num_matches": 4},
            {"day_number": 1, "format": "fourball", "num_matches": 4},
        ]
    )
    assert days == [
        {"day_number": 1, "format": "foursomes,fourball", "num_matches": 8},
        {"day_number": 2, "format": "singles", "num_matches": 8},
    ]


def test_singles_pairings_use_shorter_roster():
    team_a = [{"id": 1}, {"id": 2}, {"id": 3}]
    team_b = [{"id": 4}, {"id": 5}]
    matches = build_singles_pairings(team_a, team_b, day_number=3, start_number=2)
    assert [(m.team_a_player1, m.team_b_player1) for m in matches] == [(1, 4), (2, 5)]
    assert [m.match_number for m in matches] == [2, 3]
    assert all(m.day_number == 3 and m.format == "singles" for m in matches)


def test_singles_pairings_need_both_teams():
    with pytest.raises(PairingError):
        build_singles_pairings([{"id": 1}], [])


def test_order_roster_captain_then_draft_order():
    players = [
        {"id": 1, "team": "A", "is_captain": False},
        {"id": 2, "team": "A", "is_captain": True},
        {"id": 3, "team": "B", "is_captain": True},
        {"id": 4, "team": "A", "is_captain": False},
        {"id": 5, "team": None, "is_captain": False},
    ]
    picks = [{"player_id": 4, "pick_number": 1}, {"player_id": 1, "pick_number": 4}]
    rosters = order_roster(players, picks)
    assert [p["id"] for p in rosters["A"]] == [2, 4, 1]
    assert [p["id"] for p in rosters["B"]] == [3]


def test_validate_match_checks_format_and_teams():
    roster = {1: "A", 2: "A", 3: "B", 4: "B"}
    validate_match(Match(1, 1, "fourball", 1, 3, 2, 4), roster)
    with pytest.raises(PairingError):
        validate_match(Match(1, 1, "foursomes", 1, 3), roster)
    with pytest.raises(PairingError):
        validate_match(Match(1, 1, "singles", 3, 1), roster)
    with pytest.raises(PairingError):
        validate_match(Match(1, 1, "scramble", 1, 3), roster)
    with pytest.raises(PairingError):
        validate_match(Match(1, 1, "singles", 1, 99), roster)


def test_match_display():
    match = {
        "day_number": 1,
        "match_number": 2,
        "team_a_player1_name": "Ann",
        "team_a_player2_name": "Bea",
        "team_b_player1_name": "Cal",
        "team_b_player2_name": None,
    }
    assert match_display(match) == "Day 1 Match 2: Ann & Bea vs Cal"
