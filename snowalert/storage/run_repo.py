"""Repository for check cycle tracking."""

import sqlite3

from snowalert.models.reporting import RunRecord


def create_run(conn: sqlite3.Connection, run_id: str) -> None:
    """Record the start of a check cycle."""
    conn.execute("INSERT INTO check_runs (run_id) VALUES (?)", (run_id,))
    conn.commit()


def complete_run(
    conn: sqlite3.Connection,
    run_id: str,
    status: str,
    summary_json: str | None = None,
    error_message: str | None = None,
    **metrics: int | None,
) -> None:
    """Record cycle completion with metrics."""
    sets = ["completed_at = CURRENT_TIMESTAMP", "status = ?"]
    params: list = [status]

    if summary_json is not None:
        sets.append("summary_json = ?")
        params.append(summary_json)
    if error_message is not None:
        sets.append("error_message = ?")
        params.append(error_message)
    for key, val in metrics.items():
        if val is not None:
            sets.append(f"{key} = ?")
            params.append(val)

    params.append(run_id)
    conn.execute(f"UPDATE check_runs SET {', '.join(sets)} WHERE run_id = ?", params)
    conn.commit()


def get_last_run(conn: sqlite3.Connection) -> RunRecord | None:
    row = conn.execute(
        "SELECT * FROM check_runs ORDER BY id DESC LIMIT 1"
    ).fetchone()
    if row is None:
        return None
    return RunRecord(
        run_id=row["run_id"],
        status=row["status"],
        started_at=row["started_at"],
        completed_at=row["completed_at"],
        locations_checked=row["locations_checked"],
        locations_updated=row["locations_updated"],
        notifications_sent=row["notifications_sent"],
        error_message=row["error_message"],
    )
