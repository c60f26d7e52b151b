"""
Session Logger - writes timestamped, sequence-numbered trace lines.

SRP: This class has one responsibility - formatting trace lines and
delivering them to the configured log target.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional
from dataclasses import dataclass, field

from .errors import ConfigurationError
from .models import LogTarget, LogTargetKind

LINE_FORMAT = "%06d %03d %s\n"


@dataclass
class LogEntry:
    """
    Represents a single trace line.

    elapsed_ms is measured from the session start, counter is the number of
    steps begun when the line was written.
    """
    elapsed_ms: int
    counter: int
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return LINE_FORMAT % (self.elapsed_ms, self.counter, self.message)


class SessionLogger:
    """
    Delivers trace lines to a buffer-like destination or a file.

    Buffer targets are handed to append_to_buffer (usually the host's method
    of the same name); file targets are opened in append mode per line so
    the log survives the host being killed mid-session.
    """

    def __init__(
        self,
        target: Optional[LogTarget],
        clock: Callable[[], float],
        append_to_buffer: Optional[Callable[[str, str], None]] = None,
        max_entries: int = 1000,
    ):
        """
        Args:
            target: Where lines go; None disables logging
            clock: Monotonic clock in seconds, shared with the scheduler
            append_to_buffer: Sink for buffer targets, called with (name, text)
            max_entries: Maximum number of entries to keep in memory
        """
        self._target = target
        self._clock = clock
        self._append_to_buffer = append_to_buffer
        self._log_entries: List[LogEntry] = []
        self._max_entries = max_entries
        if target is not None:
            # Fail at setup time rather than on the first line.
            if target.resolved_kind() is LogTargetKind.BUFFER and append_to_buffer is None:
                raise ConfigurationError("Buffer log target needs a host with append_to_buffer")

    @property
    def target(self) -> Optional[LogTarget]:
        return self._target

    def log(self, message: str, counter: int, start_time: Optional[float]) -> Optional[LogEntry]:
        """Format and append one line. No-op without a target."""
        if self._target is None:
            return None
        elapsed = 0.0 if start_time is None else self._clock() - start_time
        entry = LogEntry(elapsed_ms=max(0, int(round(elapsed * 1000))), counter=counter, message=message)
        self._write(str(entry))
        self._add_entry(entry)
        return entry

    def get_recent_logs(self, count: int = 10) -> List[LogEntry]:
        return self._log_entries[-count:]

    def get_all_logs(self) -> List[LogEntry]:
        """Returns all log entries."""
        return self._log_entries.copy()

    def clear_logs(self) -> None:
        self._log_entries.clear()

    def export_logs_to_file(self, filepath: str) -> bool:
        """
        Export the in-memory history to a text file.

        Returns:
            bool: True if export was successful
        """
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                for entry in self._log_entries:
                    f.write(str(entry))
            return True
        except OSError as e:
            print(f"Failed to export logs: {e}")
            return False

    def _write(self, line: str) -> None:
        kind = self._target.resolved_kind()
        if kind is LogTargetKind.FILE:
            path = Path(self._target.name)
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(line)
        elif kind is LogTargetKind.BUFFER:
            self._append_to_buffer(self._target.name, line)

    def _add_entry(self, entry: LogEntry) -> None:
        self._log_entries.append(entry)
        # Trim old entries if we exceed max
        if len(self._log_entries) > self._max_entries:
            self._log_entries = self._log_entries[-self._max_entries:]
