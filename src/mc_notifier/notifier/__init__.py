"""Server log notifier.

Provides log tailing, event classification, rate-limit-aware delivery and
Discord webhook notifications.
"""

from .classifier import (
    DEFAULT_RULES,
    Classifier,
    Event,
    EventKind,
    Rule,
    build_rules,
)
from .daemon import NotifierDaemon, run_notifier
from .discord import DiscordClient, build_payload
from .dispatcher import Dispatcher
from .messages import (
    COLOR_HIGHLIGHT,
    COLOR_INFO,
    COLOR_SUCCESS,
    NotificationMessage,
    Severity,
    format_event,
)
from .rate_limiter import RateLimitBackoff
from .tailer import LogTailer

__all__ = [
    # Daemon
    "NotifierDaemon",
    "run_notifier",
    "Dispatcher",
    "LogTailer",
    # Discord client
    "DiscordClient",
    "build_payload",
    "RateLimitBackoff",
    # Classifier
    "Classifier",
    "Event",
    "EventKind",
    "Rule",
    "DEFAULT_RULES",
    "build_rules",
    # Messages
    "NotificationMessage",
    "Severity",
    "format_event",
    "COLOR_INFO",
    "COLOR_HIGHLIGHT",
    "COLOR_SUCCESS",
]
