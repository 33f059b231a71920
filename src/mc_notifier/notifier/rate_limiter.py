"""Backoff policy for webhook rate limiting (HTTP 429)."""

import math
from collections.abc import Mapping

# Checked in order; Discord sends the first, generic servers the second.
# Not X-RateLimit-Reset: Discord sends that as an epoch timestamp, not a wait.
RETRY_AFTER_HEADERS = ("X-RateLimit-Reset-After", "Retry-After")


class RateLimitBackoff:
    """Decides how long to wait after a "too many requests" response.

    The server's hint is read in seconds, possibly fractional, and truncated
    to whole seconds. A missing or unusable hint means waiting the default.
    """

    def __init__(
        self,
        default_wait: int = 1,
        headers: tuple[str, ...] = RETRY_AFTER_HEADERS,
    ):
        self.default_wait = default_wait
        self.headers = headers

    def parse_hint(self, value: str | None) -> int | None:
        """Parse a header value to whole seconds.

        Returns:
            Seconds to wait, or None if the value is missing or unusable
        """
        if value is None or not value.strip():
            return None
        try:
            seconds = float(value)
        except ValueError:
            return None
        if not math.isfinite(seconds) or seconds < 0:
            return None
        return int(seconds)

    def wait_seconds(self, headers: Mapping[str, str]) -> int:
        """Get seconds to wait before retrying, given response headers."""
        for name in self.headers:
            seconds = self.parse_hint(headers.get(name))
            if seconds is not None:
                return seconds
        return self.default_wait
