"""Tests for the Open-Meteo client with mocked httpx."""

from unittest.mock import patch

import httpx
import pytest
import respx

from snowalert.errors import ForecastParseError
from snowalert.ingest.openmeteo_client import OpenMeteoClient, parse_daily_response

FORECAST_URL = "https://test-meteo.example.com/v1/forecast"


@pytest.fixture
def client() -> OpenMeteoClient:
    return OpenMeteoClient(
        base_url="https://test-meteo.example.com",
        max_retries=1,
        retry_base_delay=0.01,
    )


class TestGetDailyForecast:
    @respx.mock
    def test_success(self, client: OpenMeteoClient, sedona_raw: dict):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=sedona_raw))

        result = client.get_daily_forecast(34.8697, -111.761)
        assert len(result["daily"]["time"]) == 16

    @respx.mock
    def test_query_params(self, client: OpenMeteoClient, sedona_raw: dict):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=sedona_raw))

        client.get_daily_forecast(34.8697, -111.761)

        params = route.calls[0].request.url.params
        assert params["latitude"] == "34.8697"
        assert params["longitude"] == "-111.761"
        assert params["daily"] == "snowfall_sum,precipitation_probability_max,temperature_2m_min"
        assert params["timezone"] == "auto"
        assert params["forecast_days"] == "16"
        assert "snowalert" in route.calls[0].request.headers["user-agent"]

    @respx.mock
    def test_retry_on_429(self, client: OpenMeteoClient, sedona_raw: dict):
        route = respx.get(FORECAST_URL).mock(
            side_effect=[
                httpx.Response(429),
                httpx.Response(200, json=sedona_raw),
            ]
        )

        with patch("snowalert.ingest.openmeteo_client.time.sleep"):
            result = client.get_daily_forecast(34.8697, -111.761)
        assert "daily" in result
        assert route.call_count == 2

    @respx.mock
    def test_exhausted_retries(self, client: OpenMeteoClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(503))

        with patch("snowalert.ingest.openmeteo_client.time.sleep"), pytest.raises(httpx.HTTPStatusError):
            client.get_daily_forecast(34.8697, -111.761)

    @respx.mock
    def test_timeout_retried_then_raised(self, client: OpenMeteoClient):
        route = respx.get(FORECAST_URL).mock(side_effect=httpx.ReadTimeout("slow"))

        with patch("snowalert.ingest.openmeteo_client.time.sleep"), pytest.raises(httpx.ReadTimeout):
            client.get_daily_forecast(34.8697, -111.761)
        assert route.call_count == 2

    @respx.mock
    def test_client_error_not_retried(self, client: OpenMeteoClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(400))

        with pytest.raises(httpx.HTTPStatusError):
            client.get_daily_forecast(91.0, 0.0)
        assert route.call_count == 1


class TestParseDailyResponse:
    def test_sedona(self, sedona_raw: dict):
        response = parse_daily_response(sedona_raw)

        assert len(response) == 16
        assert response.precipitation_probability_max[4] is None
        point = response.point_at(5)
        assert point.date == "2026-03-06"
        assert point.precip_prob == 60
        assert point.min_temp == -3.0
        assert point.snowfall == 2.5

    def test_null_point_defaults(self, sedona_raw: dict):
        point = parse_daily_response(sedona_raw).point_at(4)
        assert point.precip_prob == 0
        assert point.min_temp == 10.0
        assert point.snowfall == 0.0

    def test_missing_value_arrays(self):
        response = parse_daily_response({"daily": {"time": ["2026-03-01"]}})
        point = response.point_at(0)
        assert (point.precip_prob, point.min_temp, point.snowfall) == (0, 10.0, 0.0)

    def test_missing_daily_raises(self):
        with pytest.raises(ForecastParseError):
            parse_daily_response({"error": True, "reason": "bad latitude"})

    def test_missing_time_raises(self):
        with pytest.raises(ForecastParseError):
            parse_daily_response({"daily": {"snowfall_sum": [0.0]}})
