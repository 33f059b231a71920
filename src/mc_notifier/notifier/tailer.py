"""Log file tailer that follows appends, truncation and rotation."""

import os
import queue
import threading
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

import click
import structlog

log = structlog.get_logger()


class LogTailer:
    """Reads lines appended to a log file and hands them to a queue.

    Only new activity is observed: the file is read from its end at open.
    The hand-off blocks while the queue is full, so a slow consumer slows
    reading down instead of piling up pending lines.
    """

    def __init__(
        self,
        path: Path,
        lines: "queue.Queue[str]",
        poll_interval: float = 0.5,
        follow_rotation: bool = True,
        echo: bool = True,
        exclude: Callable[[str], bool] | None = None,
        stop_event: threading.Event | None = None,
    ):
        """Initialize the tailer.

        Args:
            path: Log file to follow
            lines: Queue receiving each complete line (terminator stripped)
            poll_interval: Seconds to sleep when no new data is available
            follow_rotation: Reopen the path when it is replaced by a new file
            echo: Print every line read to stdout
            exclude: Predicate for lines that are echoed but never queued
            stop_event: Set to stop the tail loop
        """
        self.path = Path(path)
        self.lines = lines
        self.poll_interval = poll_interval
        self.follow_rotation = follow_rotation
        self.echo = echo
        self.exclude = exclude
        self._stop_event = stop_event or threading.Event()

        self._file: BinaryIO | None = None
        self._file_ref: tuple[int, int] | None = None
        # Bytes of a line still being written
        self._partial = b""

    @property
    def position(self) -> int:
        """Byte offset of the next read."""
        if self._file is None:
            return 0
        return self._file.tell()

    def open(self) -> None:
        """Open the log file and seek to its end.

        Raises:
            OSError: The file is missing or unreadable
        """
        self._file = open(self.path, "rb")
        stat = os.fstat(self._file.fileno())
        self._file_ref = (stat.st_dev, stat.st_ino)
        self._file.seek(0, os.SEEK_END)
        self._partial = b""
        log.info("Log file opened", path=str(self.path), size=stat.st_size)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def read_line(self) -> str | None:
        """Read the next complete line.

        Returns:
            The line without its terminator, or None when no complete line
            is available yet
        """
        assert self._file is not None, "open() must be called first"

        chunk = self._file.readline()
        if not chunk:
            return None
        if not chunk.endswith(b"\n"):
            self._partial += chunk
            return None

        data = self._partial + chunk
        self._partial = b""
        return data.decode("utf-8", errors="replace").rstrip("\r\n")

    def check_truncation(self) -> bool:
        """Rewind to the start if the file shrank below our position.

        Returns:
            True if truncation was detected
        """
        assert self._file is not None, "open() must be called first"

        position = self._file.tell()
        size = os.fstat(self._file.fileno()).st_size
        if position <= size:
            return False

        log.warning("Log truncation detected", path=str(self.path), position=position, size=size)
        self._file.seek(0, os.SEEK_SET)
        self._partial = b""
        return True

    def check_rotation(self) -> bool:
        """Reopen the path if it now names a different file.

        A path that does not exist (between rename and recreate) is not a
        rotation yet; the current file keeps being read.

        Returns:
            True if the file was reopened
        """
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return False

        if (stat.st_dev, stat.st_ino) == self._file_ref:
            return False

        log.info("Log rotation detected", path=str(self.path))
        # Lines written just before the rename are still in the old file
        while True:
            line = self.read_line()
            if line is None:
                break
            self._emit(line)
        if self._partial:
            self._emit(self._partial.decode("utf-8", errors="replace").rstrip("\r\n"))
        self.close()
        self._file = open(self.path, "rb")
        self._file_ref = (stat.st_dev, stat.st_ino)
        self._partial = b""
        return True

    def _hand_off(self, line: str) -> None:
        """Queue a line, waiting for room unless stopped."""
        while not self._stop_event.is_set():
            try:
                self.lines.put(line, timeout=self.poll_interval)
                return
            except queue.Full:
                continue

    def _emit(self, line: str) -> None:
        """Echo a line and queue it unless excluded."""
        if self.echo:
            click.echo(line)
        if self.exclude is not None and self.exclude(line):
            return
        self._hand_off(line)

    def run(self) -> None:
        """Tail the file until stopped or a read error occurs."""
        if self._file is None:
            self.open()

        try:
            while not self._stop_event.is_set():
                line = self.read_line()
                if line is None:
                    if self._stop_event.wait(self.poll_interval):
                        break
                    self.check_truncation()
                    if self.follow_rotation:
                        self.check_rotation()
                    continue

                self._emit(line)
        except OSError as e:
            log.error("Log tail stopped", path=str(self.path), error=str(e))
        finally:
            self.close()

    def stop(self) -> None:
        self._stop_event.set()
