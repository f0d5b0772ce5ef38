"""Application layer for the rule engine."""

from src.automon.application.binding import ExpressionBinding
from src.automon.application.engine import RuleEngine
from src.automon.application.rule import Rule

__all__ = ["ExpressionBinding", "Rule", "RuleEngine"]
