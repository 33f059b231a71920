"""Single consumer turning queued log lines into notifications."""

import queue
import threading
from collections.abc import Callable
from datetime import datetime

import structlog

from .classifier import Classifier, EventKind
from .discord import DiscordClient
from .messages import NotificationMessage, format_event

log = structlog.get_logger()


class Dispatcher:
    """Classifies lines and delivers notifications one at a time.

    Delivery is synchronous, so a rate-limited webhook holds back later
    lines and notifications go out in the order events happened. Exactly
    one thread may run the dispatcher; player sessions are not locked.
    """

    def __init__(
        self,
        classifier: Classifier,
        client: DiscordClient,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.classifier = classifier
        self.client = client
        self._clock = clock
        # Player name -> join time
        self.sessions: dict[str, datetime] = {}

    def _track_session(self, kind: EventKind, player: str) -> None:
        if kind == EventKind.PLAYER_JOINED:
            self.sessions[player] = self._clock()
        elif kind == EventKind.PLAYER_LEFT:
            joined = self.sessions.pop(player, None)
            if joined is not None:
                log.debug(
                    "Player session ended",
                    player=player,
                    seconds=int((self._clock() - joined).total_seconds()),
                )

    def handle_line(self, line: str) -> NotificationMessage | None:
        """Process a single log line and deliver a notification if needed.

        Returns:
            The notification that was delivered (or attempted), or None if
            the line is not an event
        """
        event = self.classifier.classify(line)
        if event is None:
            return None

        self._track_session(event.kind, event.player)
        message = format_event(event)
        log.debug("Event detected", kind=event.kind.value, title=message.title)
        self.client.send(message)
        return message

    def run(self, lines: "queue.Queue[str]", stop_event: threading.Event) -> None:
        """Drain the queue in arrival order until stopped."""
        while not stop_event.is_set():
            try:
                line = lines.get(timeout=0.5)
            except queue.Empty:
                continue

            try:
                self.handle_line(line)
            except Exception:
                log.exception("Unexpected error handling log line", line=line[:200])
            finally:
                lines.task_done()
