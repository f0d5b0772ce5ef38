"""Domain layer for the rule engine."""

from src.automon.domain.exceptions import (
    DuplicateRuleError,
    EmptyRuleError,
    ExpressionRuntimeError,
    InvalidReferenceError,
    RuleError,
    UnevaluableExpressionError,
    UnresolvedIdentifierError,
)
from src.automon.domain.identifiers import extract_commands, sensor_identifier
from src.automon.domain.models import AlertEvent, RuleState, SensorRef
from src.automon.domain.protocols import AlertSink, ExpressionEvaluator, SensorInput

__all__ = [
    "AlertEvent",
    "RuleState",
    "SensorRef",
    "AlertSink",
    "ExpressionEvaluator",
    "SensorInput",
    "DuplicateRuleError",
    "EmptyRuleError",
    "ExpressionRuntimeError",
    "InvalidReferenceError",
    "RuleError",
    "UnevaluableExpressionError",
    "UnresolvedIdentifierError",
    "extract_commands",
    "sensor_identifier",
]
