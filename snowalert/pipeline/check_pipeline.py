"""Check cycle orchestration: fetch, score, update locations, notify."""

import json
import logging
import os
import sqlite3
import threading
import time
import uuid
from dataclasses import replace

from snowalert.forecast.builder import build_daily_forecasts
from snowalert.forecast.evaluator import evaluate, format_alert_message, format_alert_title
from snowalert.ingest.openmeteo_client import OpenMeteoClient, parse_daily_response
from snowalert.models.alert import AlertCandidate, AlertEvaluation
from snowalert.models.common import utc_now
from snowalert.models.location import Location
from snowalert.models.reporting import CheckSummary
from snowalert.notify.deduper import NotificationDeduper
from snowalert.notify.notifier import Notifier
from snowalert.storage import run_repo, state_repo
from snowalert.tracking.location_manager import LocationManager

logger = logging.getLogger(__name__)

CHECK_LOCK_STALE_SECONDS = 1800  # a crashed holder is taken over after 30 minutes


class WeatherCheckOrchestrator:
    """Runs one check cycle at a time over all tracked locations.

    A trigger that arrives while a cycle is running is dropped, whether the
    running cycle belongs to this process or, through the database lock, to
    another one sharing the same database.
    """

    def __init__(
        self,
        locations: LocationManager,
        client: OpenMeteoClient,
        deduper: NotificationDeduper,
        notifier: Notifier | None,
        conn: sqlite3.Connection | None = None,
        request_delay_ms: int = 0,
    ):
        self.locations = locations
        self.client = client
        self.deduper = deduper
        self.notifier = notifier
        self.conn = conn
        self.request_delay_ms = request_delay_ms
        self._cycle_lock = threading.Lock()
        self._owner = f"{os.getpid()}-{uuid.uuid4().hex[:8]}"

    @property
    def is_checking(self) -> bool:
        return self._cycle_lock.locked()

    def check_all(self) -> CheckSummary | None:
        """Run a full cycle. Returns None if one is already in flight."""
        if not self._cycle_lock.acquire(blocking=False):
            logger.info("Check already in progress, ignoring trigger")
            return None
        try:
            if not self._claim_shared_lock():
                logger.info("Check already running in another process, ignoring trigger")
                return None
            try:
                return self._run_cycle()
            finally:
                self._release_shared_lock()
        finally:
            self._cycle_lock.release()

    def check_location(self, location: Location) -> tuple[Location, AlertEvaluation]:
        """Fetch and evaluate one location. Raises on fetch or parse failure."""
        raw = self.client.get_daily_forecast(location.latitude, location.longitude)
        response = parse_daily_response(raw)
        days = build_daily_forecasts(response)
        logger.debug("%s: %s", location.name, "; ".join(d.summary for d in days))
        evaluation = evaluate(response, days)

        updated = replace(
            location,
            snow_probability=evaluation.window_max_probability,
            has_snow_expected=evaluation.has_snow_in_window,
            last_checked=utc_now(),
            forecast=evaluation.window_summary,
            daily_forecasts=tuple(days),
        )
        return updated, evaluation

    def _run_cycle(self) -> CheckSummary:
        start_time = time.monotonic()
        summary = CheckSummary(run_id=str(uuid.uuid4()))
        if self.conn is not None:
            run_repo.create_run(self.conn, summary.run_id)

        try:
            self.locations.reload()
            tracked = self.locations.locations
            logger.info("=== Check %s starting for %d locations ===", summary.run_id[:8], len(tracked))

            for i, location in enumerate(tracked):
                if i > 0 and self.request_delay_ms:
                    time.sleep(self.request_delay_ms / 1000)

                summary.locations_checked += 1
                try:
                    updated, evaluation = self.check_location(location)
                except Exception as e:
                    logger.exception("Weather check failed for %s", location.name)
                    summary.locations_failed += 1
                    summary.errors.append(f"{location.name}: {e}")
                    continue

                if self.locations.update_location(updated):
                    summary.locations_updated += 1
                logger.info(
                    "%s: %d%% (days 5-10), %d alert candidates",
                    location.name, evaluation.window_max_probability,
                    len(evaluation.alert_candidates),
                )

                if location.alerts_enabled:
                    self._send_alerts(location, evaluation.alert_candidates, summary)

            summary.max_snow_probability = self.locations.max_snow_probability
            summary.duration_seconds = time.monotonic() - start_time
            self._complete_run(summary, "completed" if not summary.errors else "partial")
            return summary

        except Exception as e:
            logger.exception("Check cycle failed")
            summary.errors.append(str(e))
            summary.duration_seconds = time.monotonic() - start_time
            self._complete_run(summary, "failed", error_message=str(e))
            return summary

    def _send_alerts(
        self, location: Location, candidates: list[AlertCandidate], summary: CheckSummary
    ) -> None:
        summary.alert_candidates += len(candidates)
        if self.notifier is None:
            return
        notifier = self.notifier

        for candidate in candidates:
            key = self.deduper.make_key(location.name, candidate.display_date)
            title = format_alert_title(location.name)
            body = format_alert_message(candidate)
            try:
                sent = self.deduper.fire_once(
                    key, lambda: notifier.deliver(title, candidate.display_date, body)
                )
            except Exception as e:
                logger.warning(
                    "Notification failed for %s %s: %s", location.name, candidate.display_date, e
                )
                summary.notifications_failed += 1
                continue

            if sent:
                logger.info("Snow alert sent for %s %s", location.name, candidate.display_date)
                summary.notifications_sent += 1
            else:
                summary.notifications_suppressed += 1

    def _claim_shared_lock(self) -> bool:
        if self.conn is None:
            return True
        return state_repo.acquire_lock(
            self.conn, state_repo.CHECK_LOCK_KEY, self._owner, CHECK_LOCK_STALE_SECONDS
        )

    def _release_shared_lock(self) -> None:
        if self.conn is not None:
            state_repo.release_lock(self.conn, state_repo.CHECK_LOCK_KEY, self._owner)

    def _complete_run(
        self, summary: CheckSummary, status: str, error_message: str | None = None
    ) -> None:
        if self.conn is None:
            return
        run_repo.complete_run(
            self.conn,
            summary.run_id,
            status,
            summary_json=json.dumps({
                "alert_candidates": summary.alert_candidates,
                "notifications_suppressed": summary.notifications_suppressed,
                "max_snow_probability": summary.max_snow_probability,
                "errors": summary.errors,
            }),
            error_message=error_message,
            locations_checked=summary.locations_checked,
            locations_updated=summary.locations_updated,
            locations_failed=summary.locations_failed,
            notifications_sent=summary.notifications_sent,
            notifications_failed=summary.notifications_failed,
        )
