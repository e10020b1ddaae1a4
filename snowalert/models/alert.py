"""Alert evaluation and notification dedup models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SnowDay:
    """A day in the days 5-10 window that meets the snow-day rule."""

    date: str
    display_date: str
    precipitation_probability: int
    min_temperature_c: float
    snowfall_cm: float


@dataclass(frozen=True)
class AlertCandidate:
    date: str
    display_date: str
    snow_probability: int
    snowfall_cm: float


@dataclass(frozen=True)
class AlertEvaluation:
    window_max_probability: int
    has_snow_in_window: bool
    window_summary: str
    alert_candidates: list[AlertCandidate] = field(default_factory=list)
    snow_days: list[SnowDay] = field(default_factory=list)


@dataclass(frozen=True)
class NotificationKey:
    location_name: str
    display_date: str
    day_marker: str  # YYYY-MM-DD of the day the notification fired

    def __str__(self) -> str:
        return f"{self.location_name}-{self.display_date}-{self.day_marker}"
