"""Notifier daemon that tails a server log and posts events to Discord."""

import queue
import threading
from pathlib import Path

import click
import structlog

from mc_notifier.config import Config

from .classifier import DEFAULT_RULES, Classifier, Rule, build_rules
from .discord import DiscordClient
from .dispatcher import Dispatcher
from .rate_limiter import RateLimitBackoff
from .tailer import LogTailer

log = structlog.get_logger()


class NotifierDaemon:
    """Main notifier daemon: one tailer thread feeding one dispatcher thread."""

    def __init__(
        self,
        log_file: Path,
        webhook_url: str,
        rules: tuple[Rule, ...] = DEFAULT_RULES,
        poll_interval: float = 0.5,
        queue_size: int = 2,
        request_timeout: float = 10.0,
        default_retry_after: int = 1,
        follow_rotation: bool = True,
        echo_lines: bool = True,
    ):
        """Initialize the notifier daemon.

        Args:
            log_file: Server log to follow
            webhook_url: Discord webhook URL
            rules: Classification rules, in evaluation order
            poll_interval: Seconds between checks when the log is idle
            queue_size: Capacity of the line queue between tailer and dispatcher
            request_timeout: Webhook request timeout in seconds
            default_retry_after: Seconds to wait on 429 without a usable hint
            follow_rotation: Reopen the log path when it is replaced
            echo_lines: Print every log line read to stdout
        """
        self.log_file = Path(log_file)
        self.classifier = Classifier(rules=rules)
        self.discord = DiscordClient(
            webhook_url,
            backoff=RateLimitBackoff(default_wait=default_retry_after),
            timeout=request_timeout,
        )
        self.dispatcher = Dispatcher(self.classifier, self.discord)

        self._stop_event = threading.Event()
        self.lines: queue.Queue[str] = queue.Queue(maxsize=queue_size)
        self.tailer = LogTailer(
            self.log_file,
            self.lines,
            poll_interval=poll_interval,
            follow_rotation=follow_rotation,
            echo=echo_lines,
            exclude=self.classifier.is_chat,
            stop_event=self._stop_event,
        )
        self._dispatch_thread: threading.Thread | None = None
        self._stopped = False

    def run(self) -> None:
        """Start the notifier daemon and tail until stopped.

        Raises:
            OSError: The log file cannot be opened
        """
        # Fail before starting any thread if the log is unreadable
        self.tailer.open()

        log.info("Starting notifier daemon", log_file=str(self.log_file))
        self._dispatch_thread = threading.Thread(
            target=self.dispatcher.run,
            args=(self.lines, self._stop_event),
            name="dispatcher",
            daemon=True,
        )
        self._dispatch_thread.start()

        click.echo("Start")
        try:
            self.tailer.run()
        except KeyboardInterrupt:
            log.info("Received shutdown signal")
        finally:
            self.stop()
            click.echo("End")

    def stop(self) -> None:
        """Stop the notifier daemon. Lines still queued are dropped."""
        if self._stopped:
            return
        self._stopped = True
        log.info("Stopping notifier daemon", pending_lines=self.lines.qsize())
        self._stop_event.set()

        thread = self._dispatch_thread
        if thread is not None:
            thread.join(timeout=1.0)
            if thread.is_alive():
                # Stuck waiting out a rate limit; it dies with the process
                log.warning("Dispatcher still delivering at shutdown")
                return
        self.discord.close()


def run_notifier(log_file: Path, webhook_url: str, config: Config | None = None) -> None:
    """Run the notifier daemon.

    Args:
        log_file: Server log to follow
        webhook_url: Discord webhook URL
        config: Tuning options (default: built-in defaults)

    Raises:
        OSError: The log file cannot be opened
        ValueError: A configured pattern is invalid
    """
    config = config or Config()
    daemon = NotifierDaemon(
        log_file=log_file,
        webhook_url=webhook_url,
        rules=build_rules(config.patterns),
        poll_interval=config.poll_interval,
        queue_size=config.queue_size,
        request_timeout=config.request_timeout,
        default_retry_after=config.default_retry_after,
        follow_rotation=config.follow_rotation,
        echo_lines=config.echo_lines,
    )
    daemon.run()
