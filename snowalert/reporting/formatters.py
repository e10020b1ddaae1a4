"""Output formatters for check summaries and location status."""

import json

from snowalert.models.location import Location
from snowalert.models.reporting import CheckSummary, RunRecord

BELL = "\U0001F514"


def format_summary_text(s: CheckSummary) -> str:
    """Plain text summary for logging."""
    lines = [
        f"=== Check Complete | Run {s.run_id[:8]} ===",
        f"Locations: {s.locations_checked} checked, {s.locations_updated} updated, "
        f"{s.locations_failed} failed",
        f"Alerts: {s.alert_candidates} candidates, {s.notifications_sent} sent, "
        f"{s.notifications_suppressed} already sent today, {s.notifications_failed} failed",
        f"Max snow chance (days 5-10): {s.max_snow_probability}%",
    ]
    if s.errors:
        lines.append(f"Errors: {len(s.errors)}")
        lines.extend(f"  - {e}" for e in s.errors)
    lines.append(f"Duration: {s.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_summary_json(s: CheckSummary) -> str:
    """JSON summary for programmatic consumption."""
    data = {
        "run_id": s.run_id,
        "locations_checked": s.locations_checked,
        "locations_updated": s.locations_updated,
        "locations_failed": s.locations_failed,
        "alert_candidates": s.alert_candidates,
        "notifications_sent": s.notifications_sent,
        "notifications_suppressed": s.notifications_suppressed,
        "notifications_failed": s.notifications_failed,
        "max_snow_probability": s.max_snow_probability,
        "duration_seconds": s.duration_seconds,
        "errors": s.errors,
    }
    return json.dumps(data, indent=2)


def format_location_status(location: Location) -> str:
    """One location as shown in the menu: header line plus 11-day forecast."""
    bell = f" {BELL}" if location.alerts_enabled else ""
    lines = [f"{location.name} — {location.snow_probability}%{bell}"]

    if not location.daily_forecasts:
        lines.append("  Loading forecast...")
    else:
        for day in location.daily_forecasts:
            snowfall = f" ({day.snowfall_cm:.1f}cm)" if day.snowfall_cm > 0 else ""
            lines.append(f"  {day.display_date}: {day.snow_probability}%{snowfall}")

    if location.forecast:
        lines.extend(f"  {line}" for line in location.forecast.splitlines())
    if location.last_checked is not None:
        lines.append(f"  Last checked: {location.last_checked:%Y-%m-%d %H:%M} UTC")
    return "\n".join(lines)


def format_status(
    locations: list[Location],
    badge_probability: int,
    snow_expected: bool,
    last_run: RunRecord | None = None,
) -> str:
    icon = "❄️ " if snow_expected else ""
    lines = [f"{icon}Snow Alert (Days 5-10): {badge_probability}%", ""]
    lines.extend(format_location_status(loc) for loc in locations)
    if last_run is not None:
        lines.append("")
        lines.append(
            f"Last run: {last_run.status} at {last_run.completed_at or last_run.started_at} "
            f"({last_run.locations_updated}/{last_run.locations_checked} updated, "
            f"{last_run.notifications_sent} alerts)"
        )
    return "\n".join(lines)
