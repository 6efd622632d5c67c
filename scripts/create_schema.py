#!/usr/bin/env python3
"""Ensure the database schema exists, apply migrations and echo the DDL."""

from pathlib import Path

from rydercup.db import ensure_schema, schema_statements, sqlite_path
from rydercup.migrations import apply_migrations
from rydercup.settings import load_settings


def main() -> None:
    settings = load_settings()
    ensure_schema(settings.database_url)
    applied = apply_migrations(settings.database_url)
    print("Schema ensured.")
    db_path = sqlite_path(settings.database_url)
    if db_path:
        print(f"Database file: {Path(db_path).resolve()}")
    else:
        print(f"Database url: {settings.database_url}")
    if applied:
        print(f"Applied migrations: {', '.join(applied)}")

    print("\nSchema DDL dump:")
    for statement in schema_statements(settings.database_url):
        print(statement.strip())


if __name__ == "__main__":
    main()
