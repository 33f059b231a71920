"""Notification messages built from classified events."""

from dataclasses import dataclass
from enum import Enum

from .classifier import Event, EventKind

# Discord embed colors
COLOR_INFO = 43519  # Blue
COLOR_HIGHLIGHT = 16311836  # Yellow
COLOR_SUCCESS = 12118406  # Green


class Severity(Enum):
    """Notification severity, rendered as the embed color."""

    INFO = "info"  # Server lifecycle
    HIGHLIGHT = "highlight"  # Player comings and goings
    SUCCESS = "success"  # Achievements

    @property
    def color(self) -> int:
        return _COLORS[self]


_COLORS = {
    Severity.INFO: COLOR_INFO,
    Severity.HIGHLIGHT: COLOR_HIGHLIGHT,
    Severity.SUCCESS: COLOR_SUCCESS,
}


@dataclass(frozen=True)
class NotificationMessage:
    """A notification ready for delivery."""

    title: str
    description: str
    severity: Severity

    @property
    def color(self) -> int:
        return self.severity.color


def format_event(event: Event) -> NotificationMessage:
    """Turn an event into the notification announcing it."""
    if event.kind == EventKind.SERVER_STARTING:
        return NotificationMessage("Server starting... Please wait", "", Severity.INFO)
    if event.kind == EventKind.SERVER_STARTED:
        return NotificationMessage("Server started! Ready to join!", "", Severity.INFO)
    if event.kind == EventKind.SERVER_STOPPING:
        return NotificationMessage("Server stopping...", "", Severity.INFO)
    if event.kind == EventKind.PLAYER_JOINED:
        return NotificationMessage(f"{event.player} joined the game", "", Severity.HIGHLIGHT)
    if event.kind == EventKind.PLAYER_LEFT:
        return NotificationMessage(f"{event.player} left the game", "", Severity.HIGHLIGHT)
    if event.kind == EventKind.ADVANCEMENT:
        return NotificationMessage(
            f"{event.player} has made the advancement",
            event.advancement,
            Severity.SUCCESS,
        )
    raise ValueError(f"No message format for event kind {event.kind}")
