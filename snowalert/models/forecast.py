"""Open-Meteo daily forecast models."""

from dataclasses import dataclass, field

DEFAULT_PRECIPITATION_PROBABILITY = 0
DEFAULT_MIN_TEMPERATURE_C = 10.0  # above freezing, suppresses snow
DEFAULT_SNOWFALL_CM = 0.0


@dataclass(frozen=True)
class RawDailyPoint:
    date: str  # YYYY-MM-DD
    precipitation_probability: int | None = None
    min_temperature_c: float | None = None
    snowfall_cm: float | None = None

    @property
    def precip_prob(self) -> int:
        if self.precipitation_probability is None:
            return DEFAULT_PRECIPITATION_PROBABILITY
        return self.precipitation_probability

    @property
    def min_temp(self) -> float:
        if self.min_temperature_c is None:
            return DEFAULT_MIN_TEMPERATURE_C
        return self.min_temperature_c

    @property
    def snowfall(self) -> float:
        if self.snowfall_cm is None:
            return DEFAULT_SNOWFALL_CM
        return self.snowfall_cm


@dataclass(frozen=True)
class RawDailyResponse:
    """Parallel daily arrays indexed by day offset from today (0 = today).

    The value arrays may be shorter than ``time`` or contain nulls.
    """

    time: list[str]
    precipitation_probability_max: list[int | None] = field(default_factory=list)
    temperature_2m_min: list[float | None] = field(default_factory=list)
    snowfall_sum: list[float | None] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.time)

    def point_at(self, offset: int) -> RawDailyPoint:
        return RawDailyPoint(
            date=self.time[offset],
            precipitation_probability=_safe_get(self.precipitation_probability_max, offset),
            min_temperature_c=_safe_get(self.temperature_2m_min, offset),
            snowfall_cm=_safe_get(self.snowfall_sum, offset),
        )

    @classmethod
    def from_points(cls, points: list[RawDailyPoint]) -> "RawDailyResponse":
        return cls(
            time=[p.date for p in points],
            precipitation_probability_max=[p.precipitation_probability for p in points],
            temperature_2m_min=[p.min_temperature_c for p in points],
            snowfall_sum=[p.snowfall_cm for p in points],
        )


@dataclass(frozen=True)
class ForecastDay:
    date: str
    display_date: str
    snow_probability: int
    min_temperature_c: float
    snowfall_cm: float

    @property
    def summary(self) -> str:
        if self.snowfall_cm > 0:
            return f"{self.display_date}: {self.snowfall_cm:.1f}cm snow"
        if self.snow_probability > 0:
            return (
                f"{self.display_date}: {self.snow_probability}% chance, "
                f"{int(self.min_temperature_c)}°C"
            )
        return f"{self.display_date}: {self.snow_probability}%"

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "display_date": self.display_date,
            "snow_probability": self.snow_probability,
            "min_temperature_c": self.min_temperature_c,
            "snowfall_cm": self.snowfall_cm,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ForecastDay":
        return cls(
            date=data["date"],
            display_date=data["display_date"],
            snow_probability=int(data["snow_probability"]),
            min_temperature_c=float(data["min_temperature_c"]),
            snowfall_cm=float(data["snowfall_cm"]),
        )


def _safe_get(values: list, index: int):
    if 0 <= index < len(values):
        return values[index]
    return None
