"""Reporting models for check cycles."""

from dataclasses import dataclass, field


@dataclass
class CheckSummary:
    run_id: str
    locations_checked: int = 0
    locations_updated: int = 0
    locations_failed: int = 0
    alert_candidates: int = 0
    notifications_sent: int = 0
    notifications_suppressed: int = 0
    notifications_failed: int = 0
    max_snow_probability: int = 0
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RunRecord:
    run_id: str
    status: str
    started_at: str
    completed_at: str | None
    locations_checked: int
    locations_updated: int
    notifications_sent: int
    error_message: str | None
