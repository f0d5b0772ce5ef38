"""Protocols (interfaces) for rule engine collaborators."""

from collections.abc import Callable, Iterable, Mapping
from typing import Protocol, runtime_checkable


SensorListener = Callable[[float], None]


@runtime_checkable
class SensorInput(Protocol):
    """Interface for a named stream of numeric readings."""

    @property
    def command(self) -> str:
        """Stable command code identifying the sensor (e.g., "010D")."""
        ...

    @property
    def change_count(self) -> int:
        """Number of updates delivered so far."""
        ...

    def subscribe(self, callback: SensorListener) -> None:
        """Register a listener called with each new value."""
        ...

    def unsubscribe(self, callback: SensorListener) -> None:
        """Remove a previously registered listener."""
        ...


@runtime_checkable
class AlertSink(Protocol):
    """Interface for receiving rule alerts."""

    def notify(self, rule_name: str) -> None:
        """Called once each time a rule becomes satisfied."""
        ...


class ExpressionEvaluator(Protocol):
    """Interface for evaluating boolean expressions over named numeric variables."""

    reserved_names: frozenset[str]

    def check(self, expression: str, identifiers: Iterable[str]) -> None:
        """
        Pre-flight check of an expression.

        Args:
            expression: Rule text (e.g., "s010D < 30 && s0C00 > 150")
            identifiers: Variable names that will be bound at evaluation time

        Raises:
            UnevaluableExpressionError: If the text cannot be evaluated
        """
        ...

    def evaluate(self, expression: str, bindings: Mapping[str, float]) -> bool:
        """
        Evaluate an expression against variable bindings.

        Raises:
            ExpressionRuntimeError: If evaluation fails
        """
        ...
