"""Discord webhook client for sending notifications."""

import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from .messages import NotificationMessage, Severity
from .rate_limiter import RateLimitBackoff

log = structlog.get_logger()


def build_payload(message: NotificationMessage) -> dict[str, Any]:
    """Build the webhook JSON body for a notification."""
    return {
        "content": "",
        "embeds": [
            {
                "title": message.title,
                "description": message.description,
                "color": message.color,
            }
        ],
    }


class DiscordClient:
    """Discord webhook client that waits out rate limits."""

    def __init__(
        self,
        webhook_url: str,
        backoff: RateLimitBackoff | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.webhook_url = webhook_url
        self.backoff = backoff or RateLimitBackoff()
        self.client = client or httpx.Client(timeout=timeout)
        self._sleep = sleep

    def send(self, message: NotificationMessage) -> bool:
        """Deliver a notification.

        A 429 response is retried after the server's wait hint, with no
        limit on attempts. Connection failures are not retried; the message
        is dropped. Any other response ends delivery.

        Args:
            message: The notification to deliver

        Returns:
            True if the webhook accepted the message, False otherwise
        """
        payload = build_payload(message)

        while True:
            try:
                # post() reads the whole body and releases the connection
                response = self.client.post(self.webhook_url, json=payload)
            except httpx.RequestError as e:
                log.error("Webhook request failed", title=message.title, error=str(e))
                return False

            if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
                wait = self.backoff.wait_seconds(response.headers)
                log.warning("Webhook rate limited", title=message.title, wait_seconds=wait)
                self._sleep(wait)
                continue

            if response.is_success:
                log.info(
                    "Notification sent",
                    title=message.title,
                    status=response.status_code,
                    body=response.text,
                )
            else:
                log.warning(
                    "Webhook rejected notification",
                    title=message.title,
                    status=response.status_code,
                    body=response.text,
                )
            return response.is_success

    def send_test(self) -> bool:
        """Send a test notification to verify the webhook is working."""
        return self.send(
            NotificationMessage(
                title="Test Notification",
                description="Notifier is configured correctly.",
                severity=Severity.INFO,
            )
        )

    def close(self) -> None:
        self.client.close()
