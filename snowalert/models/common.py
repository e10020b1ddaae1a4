"""Common helpers shared across models."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def local_today() -> date:
    """Calendar day in the local timezone, used as the dedup day marker."""
    return date.today()
