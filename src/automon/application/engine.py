"""RuleEngine application service owning a set of rules."""

from collections.abc import Callable, Iterable

from loguru import logger

from src.config import EngineConfig
from src.automon.application.rule import Rule
from src.automon.domain.exceptions import DuplicateRuleError, RuleError
from src.automon.domain.protocols import AlertSink, ExpressionEvaluator, SensorInput
from src.automon.infrastructure.alert_sink import InMemoryAlertSink
from src.automon.infrastructure.expression import PythonExpressionEvaluator


class RuleEngine:
    """
    Registry of rules sharing one configuration and one alert sink.

    Every rule gets its own evaluator and binding, so rules watching the same
    sensors stay independent.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        alert_sink: AlertSink | None = None,
        evaluator_factory: Callable[[], ExpressionEvaluator] | None = None,
    ):
        """
        Initialize rule engine.

        Args:
            config: Configuration shared by all rules
            alert_sink: Where alerts go (defaults to in-memory)
            evaluator_factory: Builds one evaluator per rule
        """
        self.config = config if config is not None else EngineConfig()
        self.alert_sink = alert_sink if alert_sink is not None else InMemoryAlertSink()
        self.evaluator_factory = evaluator_factory or PythonExpressionEvaluator
        self._rules: dict[str, Rule] = {}

        logger.info(
            f"Initialized RuleEngine with prefix={self.config.identifier_prefix!r}, "
            f"matching={self.config.identifier_matching}"
        )

    def create_rule(self, name: str, expression: str, sensors: Iterable[SensorInput] = ()) -> Rule:
        """
        Build and register a rule. The rule is not activated.

        Raises:
            DuplicateRuleError: If name is taken
            InvalidReferenceError: If a sensor is invalid
        """
        if name in self._rules:
            raise DuplicateRuleError(name)

        rule = Rule(name, config=self.config, evaluator=self.evaluator_factory())
        for sensor in sensors:
            rule.add_sensor(sensor)
        rule.set_rule(expression)

        self.add_rule(rule)
        return rule

    def add_rule(self, rule: Rule) -> None:
        """Register a rule and attach the engine's alert sink."""
        name = rule.get_rule_name()
        if name in self._rules:
            raise DuplicateRuleError(name)

        rule.add_alert_sink(self.alert_sink)
        self._rules[name] = rule
        logger.debug(f"Registered rule '{name}'")

    def get_rule(self, name: str) -> Rule | None:
        return self._rules.get(name)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules.values())

    def __len__(self):
        return len(self._rules)

    def activate_all(self) -> dict[str, RuleError]:
        """
        Activate every registered rule.

        Returns:
            Mapping of rule name to the error that kept it inactive
        """
        failures: dict[str, RuleError] = {}

        for name, rule in self._rules.items():
            try:
                rule.activate()
            except RuleError as e:
                logger.error(f"Failed to activate rule '{name}': {e}")
                failures[name] = e

        logger.info(f"Activated {len(self._rules) - len(failures)}/{len(self._rules)} rules")
        return failures

    def shutdown(self) -> None:
        """Release all sensor subscriptions."""
        for rule in self._rules.values():
            rule.deactivate()

        logger.info(f"RuleEngine shut down ({len(self._rules)} rules)")

    def get_statistics(self) -> dict:
        """Get statistics about engine state."""
        commands = {ref.command for rule in self._rules.values() for ref in rule.bound_sensors}

        return {
            "num_rules": len(self._rules),
            "num_active": sum(1 for rule in self._rules.values() if rule.activated),
            "num_satisfied": sum(1 for rule in self._rules.values() if rule.satisfied),
            "num_sensors": len(commands),
            "total_alerts": len(self.alert_sink) if hasattr(self.alert_sink, "__len__") else None,
        }
