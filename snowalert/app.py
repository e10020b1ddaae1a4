"""Process-wide service wiring."""

import sqlite3
from dataclasses import dataclass

from snowalert.config.defaults import DEFAULT_LOCATION
from snowalert.config.schema import AppConfig
from snowalert.ingest.geocoding_client import GeocodingClient
from snowalert.ingest.openmeteo_client import OpenMeteoClient
from snowalert.notify.deduper import NotificationDeduper
from snowalert.notify.notifier import build_notifier
from snowalert.pipeline.check_pipeline import WeatherCheckOrchestrator
from snowalert.storage.database import connect, run_migrations
from snowalert.storage.state_store import StateStore
from snowalert.tracking.location_manager import LocationManager


@dataclass
class App:
    conn: sqlite3.Connection
    store: StateStore
    locations: LocationManager
    deduper: NotificationDeduper
    geocoder: GeocodingClient
    orchestrator: WeatherCheckOrchestrator

    def close(self) -> None:
        self.conn.close()


def build_app(config: AppConfig, db_path: str) -> App:
    """Construct every service once and wire them explicitly."""
    conn = connect(db_path)
    run_migrations(conn)
    store = StateStore(conn)

    locations = LocationManager(store, config.default_location or DEFAULT_LOCATION)
    deduper = NotificationDeduper(store)
    client = OpenMeteoClient(
        base_url=config.forecast.base_url,
        user_agent=config.forecast.user_agent,
        timeout=config.forecast.timeout_seconds,
        max_retries=config.forecast.max_retries,
        retry_base_delay=config.forecast.retry_base_delay,
        forecast_days=config.forecast.forecast_days,
    )
    geocoder = GeocodingClient(
        base_url=config.geocoding.base_url,
        user_agent=config.geocoding.user_agent,
        timeout=config.geocoding.timeout_seconds,
        limit=config.geocoding.result_limit,
    )
    orchestrator = WeatherCheckOrchestrator(
        locations,
        client,
        deduper,
        build_notifier(config.notifications),
        conn=conn,
        request_delay_ms=config.ops.request_delay_ms,
    )
    return App(conn, store, locations, deduper, geocoder, orchestrator)
