"""Repository for system state shared by the daemon and CLI processes."""

import sqlite3

CHECK_LOCK_KEY = "check_lock"
UNLOCKED = ""


def get_system_state(conn: sqlite3.Connection, key: str) -> str | None:
    """Get a system state value."""
    row = conn.execute(
        "SELECT value FROM system_state WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def acquire_lock(
    conn: sqlite3.Connection, key: str, owner: str, stale_after_seconds: int
) -> bool:
    """Claim ``key`` for ``owner``. Fails while another owner holds a fresh claim.

    A claim older than ``stale_after_seconds`` is treated as abandoned by a
    crashed process and taken over.
    """
    with conn:
        cursor = conn.execute(
            "INSERT INTO system_state (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP "
            "WHERE system_state.value = ? OR system_state.updated_at < datetime('now', ?)",
            (key, owner, UNLOCKED, f"-{int(stale_after_seconds)} seconds"),
        )
    return cursor.rowcount == 1


def release_lock(conn: sqlite3.Connection, key: str, owner: str) -> None:
    """Release ``key`` if ``owner`` still holds it."""
    with conn:
        conn.execute(
            "UPDATE system_state SET value = ?, updated_at = CURRENT_TIMESTAMP "
            "WHERE key = ? AND value = ?",
            (UNLOCKED, key, owner),
        )
