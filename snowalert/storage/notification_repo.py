"""Repository for notification dedup keys."""

import sqlite3

from snowalert.models.alert import NotificationKey


def add_key(conn: sqlite3.Connection, key: NotificationKey, current_marker: str) -> None:
    """Record one fired key and drop keys from any other day."""
    with conn:
        conn.execute(
            "INSERT OR IGNORE INTO notification_keys (location_name, display_date, day_marker) "
            "VALUES (?, ?, ?)",
            (key.location_name, key.display_date, key.day_marker),
        )
        conn.execute(
            "DELETE FROM notification_keys WHERE day_marker != ?", (current_marker,)
        )


def list_keys(conn: sqlite3.Connection) -> set[NotificationKey]:
    rows = conn.execute(
        "SELECT location_name, display_date, day_marker FROM notification_keys"
    ).fetchall()
    return {
        NotificationKey(
            location_name=r["location_name"],
            display_date=r["display_date"],
            day_marker=r["day_marker"],
        )
        for r in rows
    }
