"""Tests for reporting formatters."""

import json
from datetime import UTC, datetime

from snowalert.models.forecast import ForecastDay
from snowalert.models.location import Location
from snowalert.models.reporting import CheckSummary, RunRecord
from snowalert.reporting.formatters import (
    format_location_status,
    format_status,
    format_summary_json,
    format_summary_text,
)


def _summary(**kwargs) -> CheckSummary:
    defaults = dict(
        run_id="abcdef123456",
        locations_checked=2,
        locations_updated=1,
        locations_failed=1,
        alert_candidates=3,
        notifications_sent=2,
        notifications_suppressed=1,
        max_snow_probability=45,
        duration_seconds=1.5,
        errors=["Flagstaff: timed out"],
    )
    defaults.update(kwargs)
    return CheckSummary(**defaults)


class TestSummaryFormatters:
    def test_text(self):
        text = format_summary_text(_summary())
        assert "Run abcdef12" in text
        assert "2 checked, 1 updated, 1 failed" in text
        assert "3 candidates, 2 sent, 1 already sent today, 0 failed" in text
        assert "Max snow chance (days 5-10): 45%" in text
        assert "  - Flagstaff: timed out" in text
        assert "Duration: 1.5s" in text

    def test_text_without_errors(self):
        assert "Errors" not in format_summary_text(_summary(errors=[]))

    def test_json(self):
        data = json.loads(format_summary_json(_summary()))
        assert data["run_id"] == "abcdef123456"
        assert data["notifications_suppressed"] == 1
        assert data["errors"] == ["Flagstaff: timed out"]


class TestLocationStatus:
    def test_loading_placeholder(self):
        loc = Location(name="Sedona, AZ", latitude=34.87, longitude=-111.76)
        text = format_location_status(loc)
        assert text.startswith("Sedona, AZ — 0% \U0001F514")
        assert "Loading forecast..." in text

    def test_forecast_lines(self):
        loc = Location(
            name="Flagstaff",
            latitude=35.2,
            longitude=-111.65,
            alerts_enabled=False,
            last_checked=datetime(2026, 3, 1, 12, 30, tzinfo=UTC),
            snow_probability=40,
            forecast="Snow possible:\nMar 5: 40% precip, -1°C",
            daily_forecasts=(
                ForecastDay("2026-03-05", "Mar 5", 40, -1.0, 0.0),
                ForecastDay("2026-03-06", "Mar 6", 100, -4.0, 2.5),
            ),
        )
        lines = format_location_status(loc).splitlines()
        assert lines[0] == "Flagstaff — 40%"
        assert "  Mar 5: 40%" in lines
        assert "  Mar 6: 100% (2.5cm)" in lines
        assert "  Snow possible:" in lines
        assert lines[-1] == "  Last checked: 2026-03-01 12:30 UTC"

    def test_status_header_and_last_run(self):
        loc = Location(name="Sedona, AZ", latitude=34.87, longitude=-111.76)
        run = RunRecord(
            run_id="r1",
            status="completed",
            started_at="2026-03-01 12:00:00",
            completed_at="2026-03-01 12:00:05",
            locations_checked=1,
            locations_updated=1,
            notifications_sent=2,
            error_message=None,
        )
        text = format_status([loc], 60, True, run)
        assert text.startswith("❄️ Snow Alert (Days 5-10): 60%")
        assert "Last run: completed at 2026-03-01 12:00:05 (1/1 updated, 2 alerts)" in text
