"""Alert sinks for rule notifications."""

from datetime import datetime

import pandas as pd
from loguru import logger

from src.automon.domain.models import AlertEvent
from src.automon.domain.protocols import AlertSink


class InMemoryAlertSink(AlertSink):
    """Simple in-memory alert storage for testing and small deployments."""

    def __init__(self):
        self.events: list[AlertEvent] = []

    def notify(self, rule_name: str) -> None:
        """Record an alert."""
        self.events.append(AlertEvent(timestamp=datetime.now(), rule_name=rule_name))

    def rule_names(self) -> list[str]:
        """Names of alerted rules, in order."""
        return [event.rule_name for event in self.events]

    def to_dataframe(self) -> pd.DataFrame:
        """Convert stored alerts to DataFrame."""
        if not self.events:
            return pd.DataFrame()

        return pd.DataFrame([event.to_dict() for event in self.events])

    def clear(self):
        """Clear all stored alerts."""
        self.events.clear()

    def __len__(self):
        return len(self.events)


class CSVAlertSink(AlertSink):
    """Alert sink that writes to CSV file incrementally."""

    def __init__(self, filepath: str, mode: str = "w", buffer_size: int = 100):
        """
        Initialize CSV sink.

        Args:
            filepath: Path to CSV file
            mode: 'w' for overwrite, 'a' for append
            buffer_size: Write every N alerts
        """
        self.filepath = filepath
        self.mode = mode
        self._buffer: list[AlertEvent] = []
        self._buffer_size = buffer_size
        self._header_written = mode == "a"

    def notify(self, rule_name: str) -> None:
        """Buffer alert and write when buffer full."""
        self._buffer.append(AlertEvent(timestamp=datetime.now(), rule_name=rule_name))

        if len(self._buffer) >= self._buffer_size:
            self.flush()

    def flush(self):
        """Write buffered alerts to CSV."""
        if not self._buffer:
            return

        df = pd.DataFrame([event.to_dict() for event in self._buffer])

        df.to_csv(
            self.filepath,
            mode="a" if self._header_written else "w",
            header=not self._header_written,
            index=False,
        )

        self._header_written = True
        self._buffer.clear()
        logger.debug(f"Flushed {len(df)} alerts to {self.filepath}")

    def to_dataframe(self) -> pd.DataFrame:
        """Read all alerts from CSV."""
        try:
            return pd.read_csv(self.filepath, parse_dates=["timestamp"])
        except FileNotFoundError:
            return pd.DataFrame()

    def __del__(self):
        """Ensure buffer is flushed on destruction."""
        self.flush()


class LoggingAlertSink(AlertSink):
    """Alert sink that only logs."""

    def __init__(self, level: str = "WARNING"):
        self.level = level

    def notify(self, rule_name: str) -> None:
        logger.log(self.level, f"ALERT: rule '{rule_name}' satisfied")
