"""Place search against the Nominatim (OpenStreetMap) geocoder."""

import logging

import httpx

from snowalert.models.location import PlaceCandidate

logger = logging.getLogger(__name__)

NOMINATIM_BASE_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "snowalert/0.1.0"


class GeocodingClient:
    def __init__(
        self,
        base_url: str = NOMINATIM_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15.0,
        limit: int = 8,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.limit = limit

    def search(self, query: str) -> list[PlaceCandidate]:
        """Search for cities matching free text.

        Nominatim requires a descriptive User-Agent; requests without one
        are rejected.
        """
        query = query.strip()
        if not query:
            return []

        params = {
            "q": query,
            "format": "json",
            "limit": self.limit,
            "addressdetails": 0,
            "featuretype": "city",
        }
        resp = httpx.get(
            f"{self.base_url}/search",
            params=params,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        results = _parse_results(resp.json())
        logger.info("Geocoding %r returned %d candidates", query, len(results))
        return results


def _parse_results(raw: list[dict]) -> list[PlaceCandidate]:
    candidates: list[PlaceCandidate] = []
    for item in raw:
        try:
            lat = float(item["lat"])
            lon = float(item["lon"])
        except (KeyError, TypeError, ValueError):
            continue

        parts = [p.strip() for p in item.get("display_name", "").split(",") if p.strip()]
        name = item.get("name") or (parts[0] if parts else "Unknown")
        label = ", ".join(parts[1:3])

        candidates.append(
            PlaceCandidate(name=name, display_label=label, latitude=lat, longitude=lon)
        )
    return candidates
