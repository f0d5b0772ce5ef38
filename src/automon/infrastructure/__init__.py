"""Infrastructure layer for the rule engine."""

from src.automon.infrastructure.alert_sink import CSVAlertSink, InMemoryAlertSink, LoggingAlertSink
from src.automon.infrastructure.expression import PythonExpressionEvaluator
from src.automon.infrastructure.logging import LoggingContext, configure_logging
from src.automon.infrastructure.sensor import ObservableSensor

__all__ = [
    "CSVAlertSink",
    "InMemoryAlertSink",
    "LoggingAlertSink",
    "PythonExpressionEvaluator",
    "LoggingContext",
    "configure_logging",
    "ObservableSensor",
]
