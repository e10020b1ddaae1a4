"""Alert evaluation: days 5-10 outlook and 11-day notification candidates."""

from snowalert.forecast.builder import format_display_date
from snowalert.forecast.scorer import SNOW_PROBABILITY_THRESHOLD, is_snow_day, score
from snowalert.models.alert import AlertCandidate, AlertEvaluation, SnowDay
from snowalert.models.forecast import ForecastDay, RawDailyResponse

WINDOW_START = 5
WINDOW_END = 10  # inclusive
NO_SNOW_SUMMARY = "No snow expected in days 5-10"


def analyze_window(response: RawDailyResponse) -> tuple[list[SnowDay], int]:
    """Scan day offsets 5-10 for snow days and the max effective probability.

    A response with fewer than 6 days leaves the window empty.
    """
    snow_days: list[SnowDay] = []
    max_probability = 0

    end = min(WINDOW_END, len(response) - 1)
    for offset in range(WINDOW_START, end + 1):
        point = response.point_at(offset)
        precip, min_temp, snowfall = point.precip_prob, point.min_temp, point.snowfall

        max_probability = max(max_probability, score(precip, min_temp, snowfall))

        if is_snow_day(precip, min_temp, snowfall):
            snow_days.append(
                SnowDay(
                    date=point.date,
                    display_date=format_display_date(point.date),
                    precipitation_probability=precip,
                    min_temperature_c=min_temp,
                    snowfall_cm=snowfall,
                )
            )

    return snow_days, max_probability


def format_window_summary(snow_days: list[SnowDay]) -> str:
    if not snow_days:
        return NO_SNOW_SUMMARY

    lines = ["Snow possible:"]
    for day in snow_days:
        if day.snowfall_cm > 0:
            lines.append(f"{day.display_date}: {day.snowfall_cm:.1f}cm snow")
        else:
            lines.append(
                f"{day.display_date}: {day.precipitation_probability}% precip, "
                f"{day.min_temperature_c:.0f}°C"
            )
    return "\n".join(lines)


def select_alert_candidates(days: list[ForecastDay]) -> list[AlertCandidate]:
    """Every day in the display series whose effective probability exceeds 20."""
    return [
        AlertCandidate(
            date=day.date,
            display_date=day.display_date,
            snow_probability=day.snow_probability,
            snowfall_cm=day.snowfall_cm,
        )
        for day in days
        if day.snow_probability > SNOW_PROBABILITY_THRESHOLD
    ]


def evaluate(response: RawDailyResponse, days: list[ForecastDay]) -> AlertEvaluation:
    snow_days, max_probability = analyze_window(response)
    return AlertEvaluation(
        window_max_probability=max_probability,
        has_snow_in_window=bool(snow_days),
        window_summary=format_window_summary(snow_days),
        alert_candidates=select_alert_candidates(days),
        snow_days=snow_days,
    )


def format_alert_title(location_name: str) -> str:
    return f"Snow Alert for {location_name}!"


def format_alert_message(candidate: AlertCandidate) -> str:
    if candidate.snowfall_cm > 0:
        return f"{candidate.snowfall_cm:.1f}cm of snow expected"
    return f"{candidate.snow_probability}% chance of snow"
