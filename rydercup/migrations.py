import logging
from typing import Any, Callable, Tuple

from rydercup.db import connect, execute
from rydercup.lobby import generate_game_code

logger = logging.getLogger(__name__)

MigrationTask = Tuple[str, str, Callable[[Any], None]]


def _backfill_game_codes(conn: Any) -> None:
    rows = execute(conn, "select id from games where game_code is null order by id;").fetchall()
    taken = {
        row["game_code"]
        for row in execute(conn, "select game_code from games where game_code is not null;").fetchall()
    }
    for row in rows:
        game_id = row["id"]
        code = generate_game_code()
        while code in taken:
            code = generate_game_code()
        taken.add(code)
        execute(conn, "update games set game_code = %s where id = %s;", (code, game_id))
        logger.info("Game %s assigned code %s", game_id, code)


def _backfill_team_scores(conn: Any) -> None:
    execute(
        conn,
        """
        update games set
            team_a_score = coalesce((
                select sum(case when winner = 'A' then 1.0 when winner = 'halved' then 0.5 else 0 end)
                from matches where matches.game_id = games.id
            ), 0),
            team_b_score = coalesce((
                select sum(case when winner = 'B' then 1.0 when winner = 'halved' then 0.5 else 0 end)
                from matches where matches.game_id = games.id
            ), 0);
        """,
    )


def _ensure_migrations_table(conn: Any) -> None:
    execute(
        conn,
        """
        create table if not exists schema_migrations (
            id text primary key,
            description text not null,
            applied_at timestamp not null default current_timestamp
        );
        """,
    )


MIGRATIONS: list[MigrationTask] = [
    (
        "20250301_game_codes",
        "Assign share codes to games created before codes existed",
        _backfill_game_codes,
    ),
    (
        "20250315_team_scores",
        "Populate cached team scores from existing match winners",
        _backfill_team_scores,
    ),
]


def applied_migrations(database_url: str) -> set[str]:
    with connect(database_url) as conn:
        _ensure_migrations_table(conn)
        rows = execute(conn, "select id from schema_migrations;").fetchall()
        return {row["id"] for row in rows}


def apply_migrations(database_url: str) -> list[str]:
    applied: list[str] = []
    done = applied_migrations(database_url)
    for migration_id, description, task in MIGRATIONS:
        if migration_id in done:
            continue
        with connect(database_url) as conn:
            task(conn)
            execute(
                conn,
                """
                insert into schema_migrations (id, description)
                values (%s, %s);
                """,
                (migration_id, description),
            )
        logger.info("Applied migration %s", migration_id)
        applied.append(migration_id)
    return applied


if __name__ == "__main__":
    from rydercup.db import ensure_schema
    from rydercup.settings import load_settings

    database_url = load_settings().database_url
    ensure_schema(database_url)
    apply_migrations(database_url)
