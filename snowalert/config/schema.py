"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field


class NotifierBackend(StrEnum):
    LOG = "log"
    MACOS = "macos"      # osascript notification center
    WEBHOOK = "webhook"  # JSON POST


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class ForecastApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.open-meteo.com"
    forecast_days: int = Field(default=16, ge=1, le=16)
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=3, ge=0)
    retry_base_delay: float = Field(default=5.0, ge=0.0)
    user_agent: str = "snowalert/0.1.0"


class GeocodingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://nominatim.openstreetmap.org"
    result_limit: int = Field(default=8, ge=1, le=50)
    timeout_seconds: float = Field(default=15.0, gt=0.0)
    user_agent: str = "snowalert/0.1.0"


class NotificationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = True
    backend: NotifierBackend = NotifierBackend.LOG
    webhook_url: str = ""


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    check_interval_minutes: int = Field(default=360, ge=1)
    request_delay_ms: int = Field(default=0, ge=0)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast: ForecastApiConfig = ForecastApiConfig()
    geocoding: GeocodingConfig = GeocodingConfig()
    notifications: NotificationConfig = NotificationConfig()
    ops: OpsConfig = OpsConfig()
    default_location: LocationConfig | None = None
