"""Tracked location set with the single-alerted-location rule."""

import logging
import threading
from dataclasses import replace

from snowalert.config.defaults import DEFAULT_LOCATION
from snowalert.config.schema import LocationConfig
from snowalert.errors import LocationNotFoundError
from snowalert.models.location import Location, PlaceCandidate
from snowalert.storage.state_store import StateStore

logger = logging.getLogger(__name__)


class LocationManager:
    """Owns the ordered location list and persists every mutation.

    At most one location has alerts enabled. Removing the alerted location
    leaves none alerted until the user turns alerts on elsewhere.

    Other processes (the daemon, CLI commands) share the store, so each
    mutation re-reads the list first and writes only the rows it changes.
    """

    def __init__(self, store: StateStore, default_location: LocationConfig = DEFAULT_LOCATION):
        self.store = store
        self.default_location = default_location
        self._lock = threading.RLock()
        self._locations: list[Location] = []
        loaded = store.read_locations()
        if loaded is None:
            logger.warning("Saved locations unreadable, starting over")
            loaded = []
        self._apply_loaded(loaded)

    def reload(self) -> None:
        """Re-read the list from the store. Unreadable state keeps the current list."""
        with self._lock:
            loaded = self.store.read_locations()
            if loaded is None:
                logger.warning("Keeping %d in-memory locations", len(self._locations))
                return
            self._apply_loaded(loaded)

    @property
    def locations(self) -> list[Location]:
        with self._lock:
            return list(self._locations)

    @property
    def alerted_location(self) -> Location | None:
        with self._lock:
            return next((loc for loc in self._locations if loc.alerts_enabled), None)

    @property
    def selected_snow_probability(self) -> int:
        loc = self.alerted_location
        return loc.snow_probability if loc else 0

    @property
    def has_selected_snow_expected(self) -> bool:
        loc = self.alerted_location
        return loc.has_snow_expected if loc else False

    @property
    def max_snow_probability(self) -> int:
        return max((loc.snow_probability for loc in self.locations), default=0)

    @property
    def has_any_snow_expected(self) -> bool:
        return any(loc.has_snow_expected for loc in self.locations)

    def get(self, location_id: str) -> Location | None:
        with self._lock:
            return next((loc for loc in self._locations if loc.id == location_id), None)

    def find(self, name_or_id: str) -> Location:
        """Look up by exact id, then case-insensitive name."""
        with self._lock:
            loc = self.get(name_or_id)
            if loc is not None:
                return loc
            wanted = name_or_id.strip().lower()
            for loc in self._locations:
                if loc.name.lower() == wanted:
                    return loc
        raise LocationNotFoundError(f"No tracked location matches {name_or_id!r}")

    def add_location(self, location: Location) -> Location:
        with self._lock:
            self.reload()
            if self.alerted_location is not None and location.alerts_enabled:
                location = replace(location, alerts_enabled=False)
            self.store.add_location(location)
            self._locations.append(location)
        logger.info("Added location %s (alerts %s)", location.name, "on" if location.alerts_enabled else "off")
        return location

    def add_place(self, place: PlaceCandidate) -> Location:
        return self.add_location(
            Location(name=place.name, latitude=place.latitude, longitude=place.longitude)
        )

    def remove_location(self, location_id: str) -> None:
        with self._lock:
            self.reload()
            if self.get(location_id) is None:
                raise LocationNotFoundError(f"No tracked location with id {location_id!r}")
            remaining = [loc for loc in self._locations if loc.id != location_id]
            if not remaining:
                # seed first so readers never see an empty table
                logger.info("Last location removed, reseeding %s", self.default_location.name)
                seed = self._default()
                self.store.add_location(seed)
                remaining = [seed]
            self.store.delete_location(location_id)
            self._locations = remaining

    def update_location(self, location: Location) -> bool:
        """Store a location's check results.

        The alert flag is never written here, so a check that started before
        a toggle cannot re-enable a second alerted location. Returns False if
        the location was removed in the meantime, by this or another process.
        """
        with self._lock:
            for i, current in enumerate(self._locations):
                if current.id != location.id:
                    continue
                if not self.store.save_forecast_state(location):
                    del self._locations[i]
                    break
                self._locations[i] = replace(location, alerts_enabled=current.alerts_enabled)
                return True
        logger.info("Location %s no longer tracked, dropping update", location.name)
        return False

    def toggle_alerts(self, location_id: str) -> Location:
        """Turn alerts off, or turn them on here and off everywhere else."""
        with self._lock:
            self.reload()
            target = self.get(location_id)
            if target is None:
                raise LocationNotFoundError(f"No tracked location with id {location_id!r}")
            enable = not target.alerts_enabled
            self.store.set_alerted(location_id, enable)
            self._locations = [
                replace(loc, alerts_enabled=enable and loc.id == location_id)
                if loc.id == location_id or enable
                else loc
                for loc in self._locations
            ]
            toggled = self.get(location_id)
        assert toggled is not None
        logger.info("Alerts %s for %s", "on" if enable else "off", toggled.name)
        return toggled

    def _default(self) -> Location:
        return Location(
            name=self.default_location.name,
            latitude=self.default_location.latitude,
            longitude=self.default_location.longitude,
        )

    def _apply_loaded(self, loaded: list[Location]) -> None:
        if not loaded:
            logger.info("No saved locations, seeding %s", self.default_location.name)
            seed = self._default()
            self.store.save_locations([seed])
            self._locations = [seed]
            return
        normalized = _single_alerted(loaded)
        if normalized != loaded:
            first = next(loc for loc in normalized if loc.alerts_enabled)
            logger.warning("Several locations had alerts on, keeping %s", first.name)
            self.store.set_alerted(first.id, True)
        self._locations = normalized


def _single_alerted(locations: list[Location]) -> list[Location]:
    """Keep alerts on the first alerted location only."""
    seen = False
    result = []
    for loc in locations:
        if loc.alerts_enabled and seen:
            loc = replace(loc, alerts_enabled=False)
        seen = seen or loc.alerts_enabled
        result.append(loc)
    return result
