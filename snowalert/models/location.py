"""Tracked location and geocoding candidate models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from snowalert.models.forecast import ForecastDay


def new_location_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Location:
    name: str
    latitude: float
    longitude: float
    id: str = field(default_factory=new_location_id)
    alerts_enabled: bool = True
    last_checked: datetime | None = None
    snow_probability: int = 0  # max over the days 5-10 window
    has_snow_expected: bool = False
    forecast: str | None = None
    daily_forecasts: tuple[ForecastDay, ...] = ()


@dataclass(frozen=True)
class PlaceCandidate:
    name: str
    display_label: str
    latitude: float
    longitude: float
