"""Open-Meteo daily forecast API client with retry and rate limit handling."""

import logging
import time

import httpx

from snowalert.errors import ForecastParseError
from snowalert.models.forecast import RawDailyResponse

logger = logging.getLogger(__name__)

OPEN_METEO_BASE_URL = "https://api.open-meteo.com"
DEFAULT_USER_AGENT = "snowalert/0.1.0"
DAILY_FIELDS = ("snowfall_sum", "precipitation_probability_max", "temperature_2m_min")
RETRYABLE_STATUS_CODES = (429, 503)


class OpenMeteoClient:
    def __init__(
        self,
        base_url: str = OPEN_METEO_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_base_delay: float = 5.0,
        forecast_days: int = 16,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.forecast_days = forecast_days

    def get_daily_forecast(self, latitude: float, longitude: float) -> dict:
        """Fetch daily snowfall, precipitation probability and min temperature.

        Retries on 503/429 and transport errors with exponential backoff.
        """
        url = f"{self.base_url}/v1/forecast"
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "daily": ",".join(DAILY_FIELDS),
            "timezone": "auto",
            "forecast_days": self.forecast_days,
        }
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        last_error: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                resp = httpx.get(url, params=params, headers=headers, timeout=self.timeout)
                if resp.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Open-Meteo returned %d for (%.4f, %.4f), retrying in %.1fs (attempt %d/%d)",
                        resp.status_code, latitude, longitude, delay, attempt + 1, self.max_retries,
                    )
                    time.sleep(delay)
                    continue
                resp.raise_for_status()
                return resp.json()
            except httpx.RequestError as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Open-Meteo request error, retrying in %.1fs: %s", delay, e
                    )
                    time.sleep(delay)
                    continue
                raise

        assert last_error is not None
        raise last_error


def parse_daily_response(raw: dict) -> RawDailyResponse:
    """Extract the parallel daily arrays from an Open-Meteo response.

    Missing value arrays are treated as all-null; a missing ``daily.time``
    array is an error.
    """
    daily = raw.get("daily")
    if not isinstance(daily, dict):
        raise ForecastParseError("Open-Meteo response has no 'daily' object")

    times = daily.get("time")
    if not isinstance(times, list):
        raise ForecastParseError("Open-Meteo response has no 'daily.time' array")

    return RawDailyResponse(
        time=[str(t) for t in times],
        precipitation_probability_max=[
            None if v is None else int(round(v))
            for v in daily.get("precipitation_probability_max") or []
        ],
        temperature_2m_min=[
            None if v is None else float(v)
            for v in daily.get("temperature_2m_min") or []
        ],
        snowfall_sum=[
            None if v is None else float(v)
            for v in daily.get("snowfall_sum") or []
        ],
    )
