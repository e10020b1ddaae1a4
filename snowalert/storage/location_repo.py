"""Repository for tracked locations and their cached forecast snapshot.

The daemon and CLI commands share one database, so mutations touch single
rows; only seeding replaces the whole table.
"""

import json
import sqlite3
from datetime import datetime

from snowalert.models.forecast import ForecastDay
from snowalert.models.location import Location

COLUMNS = (
    "id, name, latitude, longitude, alerts_enabled, last_checked, "
    "snow_probability, has_snow_expected, forecast, daily_forecasts_json"
)


def replace_locations(conn: sqlite3.Connection, locations: list[Location]) -> None:
    """Replace the stored location list, preserving order."""
    with conn:
        conn.execute("DELETE FROM locations")
        conn.executemany(
            f"INSERT INTO locations (position, {COLUMNS}) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [(position, *_to_row(loc)) for position, loc in enumerate(locations)],
        )


def insert_location(conn: sqlite3.Connection, loc: Location) -> None:
    """Append one location after the current last position."""
    with conn:
        conn.execute(
            f"INSERT INTO locations (position, {COLUMNS}) "
            "VALUES ((SELECT COALESCE(MAX(position) + 1, 0) FROM locations), "
            "?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            _to_row(loc),
        )


def delete_location(conn: sqlite3.Connection, location_id: str) -> bool:
    with conn:
        cursor = conn.execute("DELETE FROM locations WHERE id = ?", (location_id,))
    return cursor.rowcount == 1


def update_forecast_state(conn: sqlite3.Connection, loc: Location) -> bool:
    """Write one location's check results, leaving name, order and alert flag alone.

    Returns False if the row no longer exists.
    """
    with conn:
        cursor = conn.execute(
            "UPDATE locations SET last_checked = ?, snow_probability = ?, "
            "has_snow_expected = ?, forecast = ?, daily_forecasts_json = ? WHERE id = ?",
            (*_to_row(loc)[5:], loc.id),
        )
    return cursor.rowcount == 1


def set_alerted(conn: sqlite3.Connection, location_id: str, enabled: bool) -> bool:
    """Turn alerts off for one location, or on for it and off for every other.

    Returns False if the location does not exist.
    """
    with conn:
        if not enabled:
            cursor = conn.execute(
                "UPDATE locations SET alerts_enabled = 0 WHERE id = ?", (location_id,)
            )
            return cursor.rowcount == 1
        if conn.execute("SELECT 1 FROM locations WHERE id = ?", (location_id,)).fetchone() is None:
            return False
        conn.execute("UPDATE locations SET alerts_enabled = (id = ?)", (location_id,))
        return True


def list_locations(conn: sqlite3.Connection) -> list[Location]:
    """Load locations in stored order.

    Raises ValueError/KeyError on a corrupt row.
    """
    rows = conn.execute("SELECT * FROM locations ORDER BY position").fetchall()
    return [_from_row(r) for r in rows]


def _to_row(loc: Location) -> tuple:
    return (
        loc.id,
        loc.name,
        loc.latitude,
        loc.longitude,
        int(loc.alerts_enabled),
        loc.last_checked.isoformat() if loc.last_checked else None,
        loc.snow_probability,
        int(loc.has_snow_expected),
        loc.forecast,
        json.dumps([d.to_dict() for d in loc.daily_forecasts]),
    )


def _from_row(row: sqlite3.Row) -> Location:
    last_checked = row["last_checked"]
    return Location(
        id=row["id"],
        name=row["name"],
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
        alerts_enabled=bool(row["alerts_enabled"]),
        last_checked=datetime.fromisoformat(last_checked) if last_checked else None,
        snow_probability=int(row["snow_probability"]),
        has_snow_expected=bool(row["has_snow_expected"]),
        forecast=row["forecast"],
        daily_forecasts=tuple(
            ForecastDay.from_dict(d) for d in json.loads(row["daily_forecasts_json"])
        ),
    )
