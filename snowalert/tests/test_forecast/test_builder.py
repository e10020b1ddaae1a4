"""Tests for the 11-day display series."""

from snowalert.forecast.builder import build_daily_forecasts, format_display_date
from snowalert.ingest.openmeteo_client import parse_daily_response
from snowalert.models.forecast import ForecastDay, RawDailyPoint, RawDailyResponse


def _response(n: int) -> RawDailyResponse:
    return RawDailyResponse.from_points([
        RawDailyPoint(f"2026-01-{i + 1:02d}", 50, -2.0, 0.0) for i in range(n)
    ])


class TestBuildDailyForecasts:
    def test_sedona_fixture(self, sedona_raw):
        days = build_daily_forecasts(parse_daily_response(sedona_raw))

        assert len(days) == 11
        assert [d.date for d in days] == [f"2026-03-{i:02d}" for i in range(1, 12)]
        assert [d.snow_probability for d in days] == [0, 0, 0, 45, 0, 100, 15, 35, 0, 0, 0]
        assert days[5].display_date == "Mar 6"
        assert days[5].snowfall_cm == 2.5

    def test_never_more_than_eleven(self):
        assert len(build_daily_forecasts(_response(16))) == 11

    def test_short_response_truncates(self):
        for n in (0, 1, 4, 10, 11):
            days = build_daily_forecasts(_response(n))
            assert len(days) == min(11, n)

    def test_ascending_order(self):
        days = build_daily_forecasts(_response(16))
        assert [d.date for d in days] == sorted(d.date for d in days)

    def test_nulls_use_defaults(self, sedona_raw):
        day4 = build_daily_forecasts(parse_daily_response(sedona_raw))[4]
        assert day4.min_temperature_c == 10.0
        assert day4.snowfall_cm == 0.0
        assert day4.snow_probability == 0

    def test_value_arrays_shorter_than_dates(self):
        response = RawDailyResponse(
            time=["2026-02-01", "2026-02-02", "2026-02-03"],
            precipitation_probability_max=[60],
            temperature_2m_min=[-1.0, -1.0],
            snowfall_sum=[],
        )
        days = build_daily_forecasts(response)
        assert [d.snow_probability for d in days] == [60, 0, 0]
        assert days[2].min_temperature_c == 10.0

    def test_offset_three_scores_precip_when_freezing(self):
        points = [RawDailyPoint(f"2026-03-{i + 1:02d}", 0, 10.0, 0.0) for i in range(11)]
        points[3] = RawDailyPoint("2026-03-04", 45, -1.0, 0.0)
        days = build_daily_forecasts(RawDailyResponse.from_points(points))
        assert days[3].snow_probability == 45


class TestFormatDisplayDate:
    def test_month_and_day(self):
        assert format_display_date("2026-03-05") == "Mar 5"
        assert format_display_date("2026-12-25") == "Dec 25"

    def test_unparsable_passthrough(self):
        assert format_display_date("tomorrow") == "tomorrow"


class TestForecastDaySummary:
    def test_snowfall(self):
        day = ForecastDay("2026-03-05", "Mar 5", 100, -3.0, 2.5)
        assert day.summary == "Mar 5: 2.5cm snow"

    def test_freezing_chance(self):
        day = ForecastDay("2026-03-05", "Mar 5", 40, -1.0, 0.0)
        assert day.summary == "Mar 5: 40% chance, -1°C"

    def test_no_chance(self):
        day = ForecastDay("2026-03-05", "Mar 5", 0, 8.0, 0.0)
        assert day.summary == "Mar 5: 0%"
