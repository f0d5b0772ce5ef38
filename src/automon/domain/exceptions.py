"""Custom exceptions for the rule engine."""


class RuleError(Exception):
    """Base exception for all rule engine errors."""

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize rule error.

        Args:
            message: Human-readable error message
            details: Optional dict with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidReferenceError(RuleError):
    """Raised when a sensor handle is missing, not a sensor, or has expired."""

    def __init__(self, reason: str, identifier: str | None = None):
        details = {"reason": reason}
        if identifier:
            details["identifier"] = identifier
        super().__init__(message=f"Invalid sensor reference: {reason}", details=details)


class EmptyRuleError(RuleError):
    """Raised when a rule is activated without expression text."""

    def __init__(self, rule_name: str):
        super().__init__(
            message=f"Rule '{rule_name}' has no expression",
            details={"rule_name": rule_name},
        )


class UnresolvedIdentifierError(RuleError):
    """Raised when an identifier in the expression has no (or no unique) bound sensor."""

    def __init__(self, rule_name: str, command: str, reason: str = "no bound sensor"):
        super().__init__(
            message=f"Rule '{rule_name}' references '{command}': {reason}",
            details={"rule_name": rule_name, "command": command, "reason": reason},
        )
        self.command = command


class UnevaluableExpressionError(RuleError):
    """Raised when the expression evaluator rejects the rule text."""

    def __init__(self, expression: str, reason: str):
        super().__init__(
            message=f"Cannot evaluate expression '{expression}': {reason}",
            details={"expression": expression, "reason": reason},
        )


class ExpressionRuntimeError(RuleError):
    """Raised when evaluating an already validated expression fails."""

    def __init__(self, expression: str, original_error: Exception):
        super().__init__(
            message=f"Evaluation of '{expression}' failed: {original_error}",
            details={
                "expression": expression,
                "original_error": str(original_error),
                "original_error_type": type(original_error).__name__,
            },
        )


class DuplicateRuleError(RuleError):
    """Raised when registering a rule whose name is already taken."""

    def __init__(self, rule_name: str):
        super().__init__(
            message=f"Rule '{rule_name}' is already registered",
            details={"rule_name": rule_name},
        )
