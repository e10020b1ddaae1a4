"""Notification delivery backends."""

import logging
import os
import subprocess
from typing import Protocol

import httpx

from snowalert.config.schema import NotificationConfig, NotifierBackend
from snowalert.errors import NotificationError

logger = logging.getLogger(__name__)

OSASCRIPT_TIMEOUT = 10.0


class Notifier(Protocol):
    def deliver(self, title: str, subtitle: str, body: str) -> None:
        """Deliver one notification or raise NotificationError."""
        ...


class LogNotifier:
    def deliver(self, title: str, subtitle: str, body: str) -> None:
        logger.warning("%s | %s | %s", title, subtitle, body)


class MacNotifier:
    """macOS Notification Center via osascript.

    Text is passed through environment variables so forecast strings
    cannot inject AppleScript.
    """

    SCRIPT = (
        'display notification (system attribute "SA_BODY") '
        'with title (system attribute "SA_TITLE") '
        'subtitle (system attribute "SA_SUBTITLE") '
        'sound name "default"'
    )

    def deliver(self, title: str, subtitle: str, body: str) -> None:
        env = {**os.environ, "SA_TITLE": title, "SA_SUBTITLE": subtitle, "SA_BODY": body}
        try:
            result = subprocess.run(
                ["osascript", "-e", self.SCRIPT],
                capture_output=True,
                text=True,
                env=env,
                timeout=OSASCRIPT_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise NotificationError(f"osascript failed: {e}") from e
        if result.returncode != 0:
            err = result.stderr.strip() or result.stdout.strip()
            raise NotificationError(f"osascript failed: {err}")


class WebhookNotifier:
    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    def deliver(self, title: str, subtitle: str, body: str) -> None:
        payload = {"title": title, "subtitle": subtitle, "body": body}
        try:
            resp = httpx.post(self.url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationError(f"webhook delivery failed: {e}") from e


def build_notifier(config: NotificationConfig) -> Notifier | None:
    """Create the configured backend, or None when notifications are off."""
    if not config.enabled:
        return None
    if config.backend == NotifierBackend.MACOS:
        return MacNotifier()
    if config.backend == NotifierBackend.WEBHOOK:
        if not config.webhook_url:
            raise ValueError("notifications.webhook_url is required for the webhook backend")
        return WebhookNotifier(config.webhook_url)
    return LogNotifier()
