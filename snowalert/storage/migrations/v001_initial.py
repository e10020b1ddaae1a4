"""Initial schema: tracked locations, notification dedup keys, check runs."""

import sqlite3

DDL = [
    # Tracked locations in display order
    """
    CREATE TABLE IF NOT EXISTS locations (
        id TEXT PRIMARY KEY,
        position INTEGER NOT NULL,
        name TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        alerts_enabled INTEGER NOT NULL DEFAULT 0,
        last_checked TEXT,
        snow_probability INTEGER NOT NULL DEFAULT 0,
        has_snow_expected INTEGER NOT NULL DEFAULT 0,
        forecast TEXT,
        daily_forecasts_json TEXT NOT NULL DEFAULT '[]'
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_locations_position ON locations(position)",

    # Notifications already delivered today
    """
    CREATE TABLE IF NOT EXISTS notification_keys (
        location_name TEXT NOT NULL,
        display_date TEXT NOT NULL,
        day_marker TEXT NOT NULL,
        fired_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (location_name, display_date, day_marker)
    )
    """,

    # Check cycle log
    """
    CREATE TABLE IF NOT EXISTS check_runs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT UNIQUE NOT NULL,
        started_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        completed_at TEXT,
        status TEXT NOT NULL DEFAULT 'running',
        locations_checked INTEGER NOT NULL DEFAULT 0,
        locations_updated INTEGER NOT NULL DEFAULT 0,
        locations_failed INTEGER NOT NULL DEFAULT 0,
        notifications_sent INTEGER NOT NULL DEFAULT 0,
        notifications_failed INTEGER NOT NULL DEFAULT 0,
        summary_json TEXT,
        error_message TEXT
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
