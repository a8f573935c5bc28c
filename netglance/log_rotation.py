"""Head+tail retention for the append-only application log.

The log keeps the first ``head_lines`` lines (startup context) and the last
``tail_lines`` lines (recent activity); everything in between is dropped
when the file grows past ``head_lines + tail_lines``.
"""

import logging
import os
from pathlib import Path
from typing import Protocol

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


def retain_head_tail(lines: list[str], head_lines: int, tail_lines: int) -> list[str]:
    """Return the first head_lines and last tail_lines of lines, in order (pure function).

    Lines are returned unchanged when there is nothing to drop.
    """
    if len(lines) <= head_lines + tail_lines:
        return list(lines)
    tail = lines[len(lines) - tail_lines:] if tail_lines else []
    return lines[:head_lines] + tail


class Rotator(Protocol):
    """Anything the scheduler can ask to bound the log."""

    def rotate_if_needed(self) -> bool:
        ...


class LogRotator:
    """Rewrites a text file to head+tail retention."""

    def __init__(self, path: str | os.PathLike, head_lines: int = 200, tail_lines: int = 200):
        if head_lines < 0 or tail_lines < 0:
            raise ValueError("head_lines and tail_lines must be non-negative")
        self.path = Path(path)
        self.head_lines = head_lines
        self.tail_lines = tail_lines

    @property
    def threshold(self) -> int:
        return self.head_lines + self.tail_lines

    def line_count(self) -> int:
        """Count lines in the log file (0 if it does not exist)."""
        if not self.path.exists():
            return 0
        with self.path.open("r", encoding="utf-8", errors="replace") as f:
            return sum(1 for _ in f)

    def rotate_if_needed(self) -> bool:
        """Rotate the file if it holds more than head+tail lines.

        Returns:
            True if the file was rewritten
        """
        if self.line_count() <= self.threshold:
            return False

        with self.path.open("r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
        kept = retain_head_tail(lines, self.head_lines, self.tail_lines)

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            f.writelines(kept)
        os.replace(tmp_path, self.path)

        logger.debug(
            "Log rotated: path=%s, lines=%d -> %d", self.path, len(lines), len(kept)
        )
        return True


class LogSignals(QObject):
    """Signals emitted by HeadTailFileHandler."""

    lines_appended = Signal(int)  # total lines written so far


class HeadTailFileHandler(logging.FileHandler):
    """FileHandler that reports every ``check_every`` appended lines.

    Lines are counted in the formatted output, so a record carrying a
    traceback counts once per line it writes.

    The handler does not rotate by itself; whoever listens to
    ``signals.lines_appended`` decides when to call rotate_if_needed(),
    which is safe against concurrent emit() calls.
    """

    def __init__(
        self,
        filename: str | os.PathLike,
        head_lines: int = 200,
        tail_lines: int = 200,
        check_every: int = 100,
        encoding: str = "utf-8",
    ):
        if check_every <= 0:
            raise ValueError("check_every must be positive")
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        super().__init__(filename, mode="a", encoding=encoding)
        self.rotator = LogRotator(filename, head_lines, tail_lines)
        self.check_every = check_every
        self.lines_written = 0
        self.signals = LogSignals()

    def emit(self, record):
        super().emit(record)
        lines = self.format(record).count("\n") + 1
        before = self.lines_written
        self.lines_written += lines
        if self.lines_written // self.check_every > before // self.check_every:
            self.signals.lines_appended.emit(self.lines_written)

    def rotate_if_needed(self) -> bool:
        """Rotate the underlying file with the stream closed."""
        self.acquire()
        try:
            if self.stream is not None:
                self.stream.flush()
                self.stream.close()
                self.stream = None  # reopened lazily by the next emit()
            return self.rotator.rotate_if_needed()
        finally:
            self.release()
