"""Edge-triggered rule evaluation over live sensor readings."""

from src.automon.application import ExpressionBinding, Rule, RuleEngine
from src.automon.domain import AlertEvent, RuleError, RuleState
from src.automon.infrastructure import (
    CSVAlertSink,
    InMemoryAlertSink,
    LoggingAlertSink,
    ObservableSensor,
    PythonExpressionEvaluator,
)

__all__ = [
    "ExpressionBinding",
    "Rule",
    "RuleEngine",
    "AlertEvent",
    "RuleError",
    "RuleState",
    "CSVAlertSink",
    "InMemoryAlertSink",
    "LoggingAlertSink",
    "ObservableSensor",
    "PythonExpressionEvaluator",
]
