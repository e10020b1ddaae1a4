"""Fallback location seeded whenever the tracked set is empty."""

from snowalert.config.schema import LocationConfig

DEFAULT_LOCATION = LocationConfig(
    name="Sedona, AZ",
    latitude=34.8697,
    longitude=-111.7610,
)
