"""Domain models for the rule engine."""

import weakref
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from src.automon.domain.exceptions import InvalidReferenceError


class RuleState(StrEnum):
    """Lifecycle of a rule."""

    UNCONFIGURED = "unconfigured"  # No expression text yet
    CONFIGURED = "configured"  # Expression set, not subscribed
    ACTIVATED = "activated"  # Validated and receiving updates


@dataclass(frozen=True)
class SensorRef:
    """Non-owning reference to a sensor bound to a rule."""

    identifier: str  # e.g., "s010D"
    command: str  # e.g., "010D"
    handle: weakref.ref = field(repr=False, compare=False)

    @property
    def alive(self) -> bool:
        return self.handle() is not None

    def resolve(self) -> Any:
        """Return the referenced sensor, raising if it no longer exists."""
        sensor = self.handle()
        if sensor is None:
            raise InvalidReferenceError("sensor instance no longer exists", identifier=self.identifier)
        return sensor

    def refers_to(self, sensor: Any) -> bool:
        return self.handle() is sensor


@dataclass
class AlertEvent:
    """Represents a rule becoming satisfied."""

    timestamp: datetime
    rule_name: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for DataFrame/storage."""
        return {
            "timestamp": self.timestamp,
            "rule_name": self.rule_name,
            **self.metadata,
        }
