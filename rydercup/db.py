from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

import psycopg
from psycopg.rows import dict_row

from rydercup.pairings import Match

SCHEMA_STATEMENTS = [
    """
    create table if not exists games (
        id {pk},
        name text not null,
        game_code text unique,
        num_days integer not null default 1,
        status text not null default 'lobby',
        draft_mode text,
        tournament_date text,
        unlocks_at text,
        expires_at text,
        team_a_name text not null default 'Team A',
        team_b_name text not null default 'Team B',
        team_a_color text not null default '#00205B',
        team_b_color text not null default '#CE1126',
        team_a_score real not null default 0,
        team_b_score real not null default 0,
        max_players integer,
        holes_in_round integer not null default 18,
        created_at timestamp not null default current_timestamp,
        updated_at timestamp not null default current_timestamp
    );
    """,
    """
    create table if not exists game_days (
        id {pk},
        game_id integer not null references games (id),
        day_number integer not null,
        format text not null,
        num_matches integer not null default 0
    );
    """,
    """
    create table if not exists game_players (
        id {pk},
        game_id integer not null references games (id),
        name text not null,
        email text not null,
        handicap real,
        team text,
        is_captain boolean not null default false,
        checked_in boolean not null default false,
        checked_in_at timestamp,
        invite_token text unique,
        invite_sent_at timestamp,
        created_at timestamp not null default current_timestamp,
        unique (game_id, email)
    );
    """,
    """
    create table if not exists draft_picks (
        id {pk},
        game_id integer not null references games (id),
        pick_number integer not null,
        team text not null,
        player_id integer not null,
        created_at timestamp not null default current_timestamp,
        unique (game_id, pick_number)
    );
    """,
    """
    create table if not exists matches (
        id {pk},
        game_id integer not null references games (id),
        day_number integer not null default 1,
        match_number integer not null,
        format text not null default 'singles',
        team_a_player1_id integer,
        team_a_player2_id integer,
        team_b_player1_id integer,
        team_b_player2_id integer,
        team_a_score integer not null default 0,
        team_b_score integer not null default 0,
        status text not null default 'not_started',
        winner text,
        created_at timestamp not null default current_timestamp
    );
    """,
    """
    create table if not exists holes (
        id {pk},
        match_id integer not null references matches (id),
        hole_number integer not null,
        winner text not null,
        recorded_at timestamp not null default current_timestamp,
        unique (match_id, hole_number)
    );
    """,
    "create index if not exists idx_games_game_code on games (game_code);",
    "create index if not exists idx_game_players_invite_token on game_players (invite_token);",
]

_PRIMARY_KEYS = {
    "sqlite": "integer primary key autoincrement",
    "postgres": "serial primary key",
}

MATCH_SELECT = """
    select m.*,
        p1a.name as team_a_player1_name, p1a.handicap as team_a_player1_handicap,
        p2a.name as team_a_player2_name, p2a.handicap as team_a_player2_handicap,
        p1b.name as team_b_player1_name, p1b.handicap as team_b_player1_handicap,
        p2b.name as team_b_player2_name, p2b.handicap as team_b_player2_handicap
    from matches m
    left join game_players p1a on m.team_a_player1_id = p1a.id
    left join game_players p2a on m.team_a_player2_id = p2a.id
    left join game_players p1b on m.team_b_player1_id = p1b.id
    left join game_players p2b on m.team_b_player2_id = p2b.id
"""


def sqlite_path(database_url: str) -> str | None:
    if database_url.startswith("sqlite:///"):
        return database_url[len("sqlite:///"):]
    if database_url.startswith("sqlite://"):
        return database_url[len("sqlite://"):]
    if database_url.startswith("sqlite:"):
        return database_url[len("sqlite:"):]
    return None


def dialect(database_url: str) -> str:
    return "sqlite" if sqlite_path(database_url) is not None else "postgres"


def schema_statements(database_url: str) -> list[str]:
    pk = _PRIMARY_KEYS[dialect(database_url)]
    return [statement.format(pk=pk) for statement in SCHEMA_STATEMENTS]


@contextmanager
def connect(database_url: str) -> Iterator[Any]:
    """Open one transaction; commit on success, roll back on error."""
    path = sqlite_path(database_url)
    if path is None:
        with psycopg.connect(database_url, row_factory=dict_row) as conn:
            yield conn
        return

    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("pragma foreign_keys = on")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def execute(conn: Any, query: str, params: Iterable[Any] = ()) -> Any:
    if isinstance(conn, sqlite3.Connection):
        return conn.execute(query.replace("%s", "?"), tuple(params))
    return conn.execute(query, tuple(params))


def _fetchone(conn: Any, query: str, params: Iterable[Any] = ()) -> dict | None:
    # drain the cursor so sqlite can commit after a returning clause
    rows = execute(conn, query, params).fetchall()
    return dict(rows[0]) if rows else None


def _fetchall(conn: Any, query: str, params: Iterable[Any] = ()) -> list[dict]:
    return [dict(row) for row in execute(conn, query, params).fetchall()]


def ensure_schema(database_url: str) -> None:
    with connect(database_url) as conn:
        for statement in schema_statements(database_url):
            execute(conn, statement)


def _row_to_player(row: dict | None) -> dict | None:
    if row is None:
        return None
    row["is_captain"] = bool(row.get("is_captain"))
    row["checked_in"] = bool(row.get("checked_in"))
    return row


# Games


def game_code_exists(database_url: str, game_code: str) -> bool:
    with connect(database_url) as conn:
        row = _fetchone(conn, "select id from games where game_code = %s;", (game_code,))
        return row is not None


def insert_game(
    database_url: str,
    *,
    name: str,
    game_code: str,
    num_days: int,
    tournament_date: str,
    unlocks_at: str,
    expires_at: str,
    days: list[dict],
    team_a_name: str = "Team A",
    team_b_name: str = "Team B",
    max_players: int | None = None,
    holes_in_round: int = 18,
) -> dict:
    with connect(database_url) as conn:
        game = _fetchone(
            conn,
            """
            insert into games (
                name,
                game_code,
                num_days,
                status,
                tournament_date,
                unlocks_at,
                expires_at,
                team_a_name,
                team_b_name,
                max_players,
                holes_in_round
            )
            values (%s, %s, %s, 'lobby', %s, %s, %s, %s, %s, %s, %s)
            returning *;
            """,
            (
                name,
                game_code,
                num_days,
                tournament_date,
                unlocks_at,
                expires_at,
                team_a_name,
                team_b_name,
                max_players,
                holes_in_round,
            ),
        )
        for day in days:
            execute(
                conn,
                """
                insert into game_days (game_id, day_number, format, num_matches)
                values (%s, %s, %s, %s);
                """,
                (game["id"], day["day_number"], day["format"], day["num_matches"]),
            )
        return game


def fetch_game(database_url: str, game_id: int) -> dict | None:
    with connect(database_url) as conn:
        return _fetchone(conn, "select * from games where id = %s;", (game_id,))


def fetch_game_by_code(database_url: str, game_code: str) -> dict | None:
    with connect(database_url) as conn:
        return _fetchone(
            conn,
            "select * from games where game_code = %s;",
            (game_code.strip().upper(),),
        )


def fetch_games(database_url: str) -> list[dict]:
    with connect(database_url) as conn:
        return _fetchall(
            conn,
            """
            select
                g.*,
                (select count(*) from game_players where game_id = g.id) as player_count
            from games g
            order by g.created_at desc, g.id desc;
            """,
        )


def fetch_game_days(database_url: str, game_id: int) -> list[dict]:
    with connect(database_url) as conn:
        return _fetchall(
            conn,
            "select * from game_days where game_id = %s order by day_number;",
            (game_id,),
        )


def update_teams(
    database_url: str,
    game_id: int,
    team_a_name: str | None = None,
    team_b_name: str | None = None,
    team_a_color: str | None = None,
    team_b_color: str | None = None,
) -> dict | None:
    with connect(database_url) as conn:
        return _fetchone(
            conn,
            """
            update games set
                team_a_name = coalesce(%s, team_a_name),
                team_b_name = coalesce(%s, team_b_name),
                team_a_color = coalesce(%s, team_a_color),
                team_b_color = coalesce(%s, team_b_color),
                updated_at = current_timestamp
            where id = %s
            returning *;
            """,
            (team_a_name, team_b_name, team_a_color, team_b_color, game_id),
        )


def update_game_status(
    database_url: str,
    game_id: int,
    status: str,
    draft_mode: str | None = None,
) -> None:
    with connect(database_url) as conn:
        execute(
            conn,
            """
            update games
            set status = %s,
                draft_mode = coalesce(%s, draft_mode),
                updated_at = current_timestamp
            where id = %s;
            """,
            (status, draft_mode, game_id),
        )


def update_game_scores(
    database_url: str,
    game_id: int,
    team_a_score: float,
    team_b_score: float,
) -> None:
    with connect(database_url) as conn:
        execute(
            conn,
            "update games set team_a_score = %s, team_b_score = %s where id = %s;",
            (team_a_score, team_b_score, game_id),
        )


def _delete_game_matches(conn: Any, game_id: int) -> int:
    execute(
        conn,
        "delete from holes where match_id in (select id from matches where game_id = %s);",
        (game_id,),
    )
    cursor = execute(conn, "delete from matches where game_id = %s;", (game_id,))
    return cursor.rowcount


def delete_game(database_url: str, game_id: int) -> None:
    with connect(database_url) as conn:
        _delete_game_matches(conn, game_id)
        execute(conn, "delete from draft_picks where game_id = %s;", (game_id,))
        execute(conn, "delete from game_players where game_id = %s;", (game_id,))
        execute(conn, "delete from game_days where game_id = %s;", (game_id,))
        execute(conn, "delete from games where id = %s;", (game_id,))


# Players


def insert_player(
    database_url: str,
    game_id: int,
    name: str,
    email: str,
    handicap: float | None,
    is_captain: bool,
    invite_token: str,
) -> dict:
    with connect(database_url) as conn:
        row = _fetchone(
            conn,
            """
            insert into game_players (game_id, name, email, handicap, is_captain, invite_token)
            values (%s, %s, %s, %s, %s, %s)
            returning *;
            """,
            (game_id, name, email, handicap, is_captain, invite_token),
        )
        return _row_to_player(row)


def fetch_players(database_url: str, game_id: int) -> list[dict]:
    with connect(database_url) as conn:
        rows = _fetchall(
            conn,
            "select * from game_players where game_id = %s order by id;",
            (game_id,),
        )
        return [_row_to_player(row) for row in rows]


def fetch_player(database_url: str, player_id: int) -> dict | None:
    with connect(database_url) as conn:
        return _row_to_player(
            _fetchone(conn, "select * from game_players where id = %s;", (player_id,))
        )


def fetch_player_by_email(database_url: str, game_id: int, email: str) -> dict | None:
    with connect(database_url) as conn:
        return _row_to_player(
            _fetchone(
                conn,
                "select * from game_players where game_id = %s and lower(email) = lower(%s);",
                (game_id, email),
            )
        )


def update_player(
    database_url: str,
    player_id: int,
    name: str | None = None,
    email: str | None = None,
    handicap: float | None = None,
) -> dict | None:
    with connect(database_url) as conn:
        return _row_to_player(
            _fetchone(
                conn,
                """
                update game_players set
                    name = coalesce(%s, name),
                    email = coalesce(%s, email),
                    handicap = coalesce(%s, handicap)
                where id = %s
                returning *;
                """,
                (name, email, handicap, player_id),
            )
        )


def player_is_committed(database_url: str, player_id: int) -> bool:
    """True when the player holds a draft pick or a match slot."""
    with connect(database_url) as conn:
        row = _fetchone(
            conn,
            """
            select 1 as found
            where exists (select 1 from draft_picks where player_id = %s)
               or exists (
                   select 1 from matches
                   where %s in (
                       team_a_player1_id, team_a_player2_id,
                       team_b_player1_id, team_b_player2_id
                   )
               );
            """,
            (player_id, player_id),
        )
        return row is not None


def delete_player(database_url: str, player_id: int) -> None:
    with connect(database_url) as conn:
        execute(conn, "delete from game_players where id = %s;", (player_id,))


def check_in_player(database_url: str, invite_token: str) -> dict | None:
    with connect(database_url) as conn:
        return _row_to_player(
            _fetchone(
                conn,
                """
                update game_players
                set checked_in = true, checked_in_at = current_timestamp
                where invite_token = %s
                returning *;
                """,
                (invite_token,),
            )
        )


def mark_invite_sent(database_url: str, player_id: int) -> None:
    with connect(database_url) as conn:
        execute(
            conn,
            "update game_players set invite_sent_at = current_timestamp where id = %s;",
            (player_id,),
        )


def set_captain(database_url: str, player_id: int, team: str) -> None:
    with connect(database_url) as conn:
        execute(
            conn,
            "update game_players set team = %s, is_captain = true where id = %s;",
            (team, player_id),
        )


# Draft


def fetch_draft_picks(database_url: str, game_id: int) -> list[dict]:
    with connect(database_url) as conn:
        return _fetchall(
            conn,
            "select * from draft_picks where game_id = %s order by pick_number;",
            (game_id,),
        )


def record_draft_pick(
    database_url: str,
    game_id: int,
    pick_number: int,
    team: str,
    player_id: int,
) -> dict:
    """
    Insert one ledger row unless the pick number is already taken.

    A retried pick for the same player only assigns the team when the
    player has none; a pick number held by another player is left alone.
    """
    with connect(database_url) as conn:
        inserted = _fetchone(
            conn,
            """
            insert into draft_picks (game_id, pick_number, team, player_id)
            values (%s, %s, %s, %s)
            on conflict (game_id, pick_number) do nothing
            returning *;
            """,
            (game_id, pick_number, team, player_id),
        )
        if inserted:
            execute(
                conn,
                "update game_players set team = %s where id = %s;",
                (team, player_id),
            )
            return {"created": True, "pick": inserted}

        existing = _fetchone(
            conn,
            "select * from draft_picks where game_id = %s and pick_number = %s;",
            (game_id, pick_number),
        )
        if existing and existing["player_id"] == player_id:
            execute(
                conn,
                "update game_players set team = %s where id = %s and team is null;",
                (existing["team"], player_id),
            )
        return {"created": False, "pick": existing}


def apply_draft(database_url: str, game_id: int, ledger: list[dict]) -> None:
    with connect(database_url) as conn:
        for entry in ledger:
            execute(
                conn,
                """
                insert into draft_picks (game_id, pick_number, team, player_id)
                values (%s, %s, %s, %s)
                on conflict (game_id, pick_number) do nothing;
                """,
                (game_id, entry["pick_number"], entry["team"], entry["player_id"]),
            )
            execute(
                conn,
                "update game_players set team = %s where id = %s;",
                (entry["team"], entry["player_id"]),
            )


def reset_draft(database_url: str, game_id: int) -> None:
    with connect(database_url) as conn:
        _delete_game_matches(conn, game_id)
        execute(conn, "delete from draft_picks where game_id = %s;", (game_id,))
        execute(
            conn,
            "update game_players set team = null, is_captain = false where game_id = %s;",
            (game_id,),
        )
        execute(
            conn,
            """
            update games
            set status = 'lobby',
                draft_mode = null,
                team_a_score = 0,
                team_b_score = 0,
                updated_at = current_timestamp
            where id = %s;
            """,
            (game_id,),
        )


# Matches


def insert_matches(database_url: str, game_id: int, matches: list[Match]) -> list[int]:
    match_ids: list[int] = []
    with connect(database_url) as conn:
        for match in matches:
            row = _fetchone(
                conn,
                """
                insert into matches (
                    game_id,
                    day_number,
                    match_number,
                    format,
                    team_a_player1_id,
                    team_a_player2_id,
                    team_b_player1_id,
                    team_b_player2_id,
                    status
                )
                values (%s, %s, %s, %s, %s, %s, %s, %s, 'not_started')
                returning id;
                """,
                (
                    game_id,
                    match.day_number,
                    match.match_number,
                    match.format,
                    match.team_a_player1,
                    match.team_a_player2,
                    match.team_b_player1,
                    match.team_b_player2,
                ),
            )
            match_ids.append(row["id"])
    return match_ids


def fetch_matches(database_url: str, game_id: int) -> list[dict]:
    with connect(database_url) as conn:
        return _fetchall(
            conn,
            MATCH_SELECT + " where m.game_id = %s order by m.day_number, m.match_number;",
            (game_id,),
        )


def fetch_match(database_url: str, match_id: int) -> dict | None:
    with connect(database_url) as conn:
        return _fetchone(conn, MATCH_SELECT + " where m.id = %s;", (match_id,))


def update_match_result(
    database_url: str,
    match_id: int,
    team_a_score: int,
    team_b_score: int,
    status: str,
    winner: str | None,
) -> None:
    with connect(database_url) as conn:
        execute(
            conn,
            """
            update matches
            set team_a_score = %s,
                team_b_score = %s,
                status = %s,
                winner = %s
            where id = %s;
            """,
            (team_a_score, team_b_score, status, winner, match_id),
        )


def delete_match(database_url: str, game_id: int, match_id: int) -> bool:
    """Delete one match and renumber the rest of its day from 1."""
    with connect(database_url) as conn:
        match = _fetchone(
            conn,
            "select id, day_number from matches where id = %s and game_id = %s;",
            (match_id, game_id),
        )
        if not match:
            return False
        execute(conn, "delete from holes where match_id = %s;", (match_id,))
        execute(conn, "delete from matches where id = %s;", (match_id,))
        remaining = _fetchall(
            conn,
            """
            select id from matches
            where game_id = %s and day_number = %s
            order by match_number, id;
            """,
            (game_id, match["day_number"]),
        )
        for number, row in enumerate(remaining, 1):
            execute(
                conn,
                "update matches set match_number = %s where id = %s;",
                (number, row["id"]),
            )
        return True


def delete_all_matches(database_url: str, game_id: int) -> int:
    with connect(database_url) as conn:
        deleted = _delete_game_matches(conn, game_id)
        execute(
            conn,
            "update games set team_a_score = 0, team_b_score = 0 where id = %s;",
            (game_id,),
        )
        return deleted


# Holes


def fetch_holes(database_url: str, match_id: int) -> list[dict]:
    with connect(database_url) as conn:
        return _fetchall(
            conn,
            "select * from holes where match_id = %s order by hole_number;",
            (match_id,),
        )


def upsert_hole(database_url: str, match_id: int, hole_number: int, winner: str) -> None:
    with connect(database_url) as conn:
        execute(
            conn,
            """
            insert into holes (match_id, hole_number, winner)
            values (%s, %s, %s)
            on conflict (match_id, hole_number) do update
                set winner = excluded.winner,
                    recorded_at = current_timestamp;
            """,
            (match_id, hole_number, winner),
        )


def delete_holes_from(database_url: str, match_id: int, hole_number: int) -> int:
    with connect(database_url) as conn:
        cursor = execute(
            conn,
            "delete from holes where match_id = %s and hole_number >= %s;",
            (match_id, hole_number),
        )
        return cursor.rowcount
