"""Same-day notification dedup keyed on (location, forecast date, fire day)."""

import logging
import sqlite3
import threading
from collections.abc import Callable
from datetime import date

from snowalert.models.alert import NotificationKey
from snowalert.models.common import local_today
from snowalert.storage.state_store import StateStore

logger = logging.getLogger(__name__)


class NotificationDeduper:
    """Tracks which alerts already fired today.

    Keys from earlier days are dropped, so a location/date pair becomes
    eligible again on the next calendar day.
    """

    def __init__(self, store: StateStore, today: Callable[[], date] = local_today):
        self.store = store
        self._today = today
        self._lock = threading.RLock()
        self._keys: set[NotificationKey] = store.load_notification_keys()
        self._unsaved: set[NotificationKey] = set()

    @property
    def day_marker(self) -> str:
        return self._today().isoformat()

    @property
    def keys(self) -> frozenset[NotificationKey]:
        with self._lock:
            return frozenset(self._keys)

    def make_key(self, location_name: str, display_date: str) -> NotificationKey:
        return NotificationKey(location_name, display_date, self.day_marker)

    def should_fire(self, key: NotificationKey) -> bool:
        with self._lock:
            self._prune()
            return key not in self._keys

    def refresh(self) -> None:
        """Re-read keys recorded by other processes. Unreadable state keeps the current set."""
        with self._lock:
            stored = self.store.read_notification_keys()
            if stored is not None:
                self._keys = stored | self._unsaved

    def record_fired(self, key: NotificationKey) -> None:
        with self._lock:
            self.store.add_notification_key(key, self.day_marker)
            self._keys.add(key)
            self._prune()

    def fire_once(self, key: NotificationKey, deliver: Callable[[], None]) -> bool:
        """Deliver unless already fired today. Returns True if delivered.

        The key is recorded only after ``deliver`` returns; exceptions from
        ``deliver`` propagate and leave the key eligible for retry. A key that
        was delivered but could not be stored still counts as delivered and is
        suppressed for the rest of this process.
        """
        with self._lock:
            self.refresh()
            if not self.should_fire(key):
                logger.info("Already notified about %s %s today", key.location_name, key.display_date)
                return False
            deliver()
            try:
                self.record_fired(key)
            except sqlite3.Error:
                logger.exception("Delivered %s but failed to record it", key)
                self._unsaved.add(key)
                self._keys.add(key)
            return True

    def _prune(self) -> None:
        marker = self.day_marker
        self._keys = {k for k in self._keys if k.day_marker == marker}
        self._unsaved = {k for k in self._unsaved if k.day_marker == marker}
