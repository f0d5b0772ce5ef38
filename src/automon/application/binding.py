"""Per-rule variable bindings for expression evaluation."""

from loguru import logger

from src.automon.domain.exceptions import ExpressionRuntimeError, UnevaluableExpressionError
from src.automon.domain.protocols import ExpressionEvaluator
from src.automon.infrastructure.expression import PythonExpressionEvaluator


class ExpressionBinding:
    """
    Holds the current value of every identifier a rule can reference.

    Each rule owns exactly one binding, so rules watching the same sensors
    never see each other's values.
    """

    def __init__(self, evaluator: ExpressionEvaluator | None = None):
        self.evaluator = evaluator if evaluator is not None else PythonExpressionEvaluator()
        self._slots: dict[str, float] = {}

    def register(self, identifier: str) -> None:
        """Create a slot at 0.0 unless one already exists."""
        if identifier not in self._slots:
            self._slots[identifier] = 0.0
            logger.debug(f"Registered slot {identifier}")

    def set_value(self, identifier: str, value: float) -> None:
        if identifier not in self._slots:
            raise KeyError(f"No slot registered for {identifier}")
        self._slots[identifier] = float(value)

    def get_value(self, identifier: str) -> float:
        return self._slots[identifier]

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._slots

    @property
    def identifiers(self) -> frozenset[str]:
        return frozenset(self._slots)

    @property
    def slots(self) -> dict[str, float]:
        """Copy of the current values."""
        return dict(self._slots)

    def check(self, expression: str) -> None:
        """Raise UnevaluableExpressionError if expression can't run against these slots."""
        self.evaluator.check(expression, self._slots.keys())

    def can_evaluate(self, expression: str) -> bool:
        try:
            self.check(expression)
        except UnevaluableExpressionError:
            return False
        return True

    def evaluate(self, expression: str) -> bool:
        """
        Evaluate against current slot values.

        Raises:
            ExpressionRuntimeError: On any failure inside the evaluator
        """
        try:
            return bool(self.evaluator.evaluate(expression, self._slots))
        except ExpressionRuntimeError:
            raise
        except Exception as e:
            raise ExpressionRuntimeError(expression, e) from e
