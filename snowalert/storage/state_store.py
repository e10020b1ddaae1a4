"""Persistence port for tracked locations and notification dedup keys."""

import logging
import sqlite3

from snowalert.models.alert import NotificationKey
from snowalert.models.location import Location
from snowalert.storage import location_repo, notification_repo

logger = logging.getLogger(__name__)

LOAD_ERRORS = (sqlite3.DatabaseError, ValueError, KeyError, TypeError)


class StateStore:
    """Load/save facade over the SQLite repos.

    ``read_*`` returns None when stored state is unreadable; ``load_*``
    falls back to empty instead.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def read_locations(self) -> list[Location] | None:
        try:
            return location_repo.list_locations(self.conn)
        except LOAD_ERRORS:
            logger.exception("Failed to read saved locations")
            return None

    def load_locations(self) -> list[Location]:
        return self.read_locations() or []

    def save_locations(self, locations: list[Location]) -> None:
        location_repo.replace_locations(self.conn, locations)

    def add_location(self, location: Location) -> None:
        location_repo.insert_location(self.conn, location)

    def delete_location(self, location_id: str) -> bool:
        return location_repo.delete_location(self.conn, location_id)

    def save_forecast_state(self, location: Location) -> bool:
        return location_repo.update_forecast_state(self.conn, location)

    def set_alerted(self, location_id: str, enabled: bool) -> bool:
        return location_repo.set_alerted(self.conn, location_id, enabled)

    def read_notification_keys(self) -> set[NotificationKey] | None:
        try:
            return notification_repo.list_keys(self.conn)
        except sqlite3.DatabaseError:
            logger.exception("Failed to read notification history")
            return None

    def load_notification_keys(self) -> set[NotificationKey]:
        return self.read_notification_keys() or set()

    def add_notification_key(self, key: NotificationKey, current_marker: str) -> None:
        notification_repo.add_key(self.conn, key, current_marker)
