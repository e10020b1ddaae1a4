"""Builds the 11-day display series from a raw daily response."""

from datetime import date

from snowalert.forecast.scorer import score
from snowalert.models.forecast import ForecastDay, RawDailyResponse

DISPLAY_DAYS = 11  # today + 10


def build_daily_forecasts(response: RawDailyResponse) -> list[ForecastDay]:
    """Build ForecastDay entries for day offsets 0-10, truncated to available data."""
    forecasts: list[ForecastDay] = []
    for offset in range(min(DISPLAY_DAYS, len(response))):
        point = response.point_at(offset)
        forecasts.append(
            ForecastDay(
                date=point.date,
                display_date=format_display_date(point.date),
                snow_probability=score(point.precip_prob, point.min_temp, point.snowfall),
                min_temperature_c=point.min_temp,
                snowfall_cm=point.snowfall,
            )
        )
    return forecasts


def format_display_date(date_str: str) -> str:
    """Format 'YYYY-MM-DD' as 'Mar 5'. Unparsable input is returned as-is."""
    try:
        d = date.fromisoformat(date_str)
    except (ValueError, TypeError):
        return date_str
    return f"{d:%b} {d.day}"
