"""Rule: a named boolean expression over live sensor readings."""

import weakref

from loguru import logger

from src.config import EngineConfig
from src.automon.application.binding import ExpressionBinding
from src.automon.domain.exceptions import (
    EmptyRuleError,
    ExpressionRuntimeError,
    InvalidReferenceError,
    UnresolvedIdentifierError,
)
from src.automon.domain.identifiers import extract_commands, sensor_identifier
from src.automon.domain.models import RuleState, SensorRef
from src.automon.domain.protocols import AlertSink, ExpressionEvaluator, SensorInput, SensorListener
from src.automon.infrastructure.logging import LoggingContext


class Rule:
    """
    Edge-triggered rule over a set of sensors.

    Sensors are added with add_sensor(), the expression is set with set_rule()
    and activate() validates both and subscribes to every sensor. From then on
    each reading updates the rule's own binding and re-evaluates the
    expression. Alert sinks are notified once per transition from not
    satisfied to satisfied; the reverse transition is silent.

    Example:
        rule = Rule("Cold engine revving")
        rule.add_sensor(coolant)  # command "010D"
        rule.add_sensor(rpm)  # command "0C00"
        rule.set_rule("s010D < 30 && s0C00 > 150")
        rule.add_alert_sink(sink)
        rule.activate()
    """

    def __init__(
        self,
        name: str = "",
        config: EngineConfig | None = None,
        evaluator: ExpressionEvaluator | None = None,
    ):
        self.config = config if config is not None else EngineConfig()
        self._name = name
        self._expression = ""
        self._sensors: list[SensorRef] = []
        self._binding = ExpressionBinding(evaluator)
        self._alert_sinks: list[AlertSink] = []
        self._handlers: list[tuple[SensorRef, SensorListener]] = []
        self._satisfied = False
        self._activated = False

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_rule(self, expression: str) -> None:
        """Store the expression verbatim; validation happens in activate()."""
        self._expression = expression
        if self.activated:
            logger.warning(f"Rule '{self._name}' changed while active; call activate() to re-validate")

    def get_rule(self) -> str:
        return self._expression

    def set_rule_name(self, name: str) -> None:
        self._name = name

    def get_rule_name(self) -> str:
        return self._name

    def validate_rule(self) -> bool:
        """Only checks that an expression is set."""
        return self._expression != ""

    def add_sensor(self, sensor: SensorInput) -> None:
        """
        Bind a sensor to this rule.

        Creates a slot for the sensor's identifier at 0.0. Does not subscribe;
        that happens in activate().

        Raises:
            InvalidReferenceError: If sensor is None or not a SensorInput
        """
        if sensor is None:
            logger.warning(f"Rule '{self._name}': rejected null sensor")
            raise InvalidReferenceError("sensor is None")

        if not isinstance(sensor, SensorInput):
            raise InvalidReferenceError(f"{type(sensor).__name__} does not implement SensorInput")

        if any(ref.refers_to(sensor) for ref in self._sensors):
            logger.debug(f"Rule '{self._name}': sensor {sensor.command} already bound")
            return

        try:
            handle = weakref.ref(sensor)
        except TypeError as e:
            raise InvalidReferenceError(f"cannot reference {type(sensor).__name__}: {e}") from e

        command = sensor.command
        identifier = sensor_identifier(command, self.config.identifier_prefix)

        self._sensors.append(SensorRef(identifier=identifier, command=command, handle=handle))
        self._binding.register(identifier)

        logger.info(f"Rule '{self._name}': added sensor {command} as {identifier}")

    # -------------------------------------------------------------------------
    # Alert sinks
    # -------------------------------------------------------------------------

    def add_alert_sink(self, sink: AlertSink) -> None:
        if sink not in self._alert_sinks:
            self._alert_sinks.append(sink)

    def remove_alert_sink(self, sink: AlertSink) -> None:
        if sink in self._alert_sinks:
            self._alert_sinks.remove(sink)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def satisfied(self) -> bool:
        return self._satisfied

    @property
    def activated(self) -> bool:
        return self._activated

    @property
    def state(self) -> RuleState:
        if self.activated:
            return RuleState.ACTIVATED
        if self.validate_rule():
            return RuleState.CONFIGURED
        return RuleState.UNCONFIGURED

    @property
    def bound_sensors(self) -> tuple[SensorRef, ...]:
        return tuple(self._sensors)

    @property
    def slots(self) -> dict[str, float]:
        return self._binding.slots

    # -------------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------------

    def activate(self) -> None:
        """
        Validate the rule and subscribe to all bound sensors.

        Checks run in order and the first failure aborts without touching
        subscriptions: expression set, all sensor references alive, every
        identifier in the expression matched by exactly one bound sensor, and
        the evaluator accepts the expression.

        Raises:
            EmptyRuleError: Expression not set
            InvalidReferenceError: A bound sensor no longer exists
            UnresolvedIdentifierError: Identifier with no or several matching sensors
            UnevaluableExpressionError: Evaluator rejects the expression
        """
        with LoggingContext(rule_name=self._name):
            if not self.validate_rule():
                raise EmptyRuleError(self._name)

            sensors = [(ref, ref.resolve()) for ref in self._sensors]

            self._resolve_identifiers()
            self._binding.check(self._expression)

            # Re-activation replaces the previous subscriptions
            self.deactivate()

            for ref, sensor in sensors:
                handler = self._make_handler(ref)
                sensor.subscribe(handler)
                self._handlers.append((ref, handler))

            self._activated = True

            logger.info(f"Rule '{self._name}' activated with {len(sensors)} sensors: {self._expression}")

    def _resolve_identifiers(self) -> None:
        commands = extract_commands(
            self._expression,
            prefix=self.config.identifier_prefix,
            mode=self.config.identifier_matching,
            token_width=self.config.coarse_token_width,
            reserved=self._binding.evaluator.reserved_names,
        )

        for command in commands:
            matches = [ref for ref in self._sensors if ref.command == command]
            if not matches:
                raise UnresolvedIdentifierError(self._name, command)
            if len(matches) > 1:
                raise UnresolvedIdentifierError(self._name, command, reason="matches several bound sensors")

    def _make_handler(self, ref: SensorRef) -> SensorListener:
        def handler(value: float) -> None:
            self.on_sensor_value_changed(ref.resolve(), value)

        return handler

    def deactivate(self) -> None:
        """Unsubscribe from every sensor. Safe to call on a rule that never activated."""
        if not self._activated and not self._handlers:
            return

        for ref, handler in self._handlers:
            sensor = ref.handle()
            if sensor is not None:
                sensor.unsubscribe(handler)

        self._handlers.clear()
        self._activated = False
        logger.info(f"Rule '{self._name}' deactivated")

    # -------------------------------------------------------------------------
    # Live updates
    # -------------------------------------------------------------------------

    def on_sensor_value_changed(self, sensor: SensorInput, value: float) -> None:
        """
        Store a new reading and re-check the rule.

        If another bound sensor has expired since activation, the error is
        logged once and the rule deactivates itself instead of raising into
        the notifying sensor. Call activate() again after re-binding.
        """
        identifier = sensor_identifier(sensor.command, self.config.identifier_prefix)

        if identifier not in self._binding:
            logger.warning(f"Rule '{self._name}': ignoring update from unbound sensor {sensor.command}")
            return

        self._binding.set_value(identifier, value)
        logger.debug(f"Rule '{self._name}': {identifier} = {value}")

        try:
            self.check_if_satisfied()
        except InvalidReferenceError as e:
            logger.error(f"Rule '{self._name}' lost a bound sensor, deactivating: {e.message}")
            self.deactivate()

    def check_if_satisfied(self) -> bool:
        """
        Evaluate the rule and alert on a rising edge.

        Until every bound sensor has reported at least min_sensor_updates
        times the expression is not evaluated: the stored state is left
        untouched and True is returned. A fault while evaluating counts as
        not satisfied.

        Returns:
            Current satisfied state (or True while waiting for sensors)
        """
        with LoggingContext(rule_name=self._name):
            for ref in self._sensors:
                sensor = ref.resolve()
                if sensor.change_count < self.config.min_sensor_updates:
                    logger.debug(f"Rule '{self._name}': waiting for first reading from {ref.command}")
                    return True

            try:
                result = self._binding.evaluate(self._expression)
            except ExpressionRuntimeError as e:
                logger.warning(f"Rule '{self._name}' evaluation failed, treating as not satisfied: {e}")
                result = False

            if result and not self._satisfied:
                self._satisfied = True
                self._send_alert()
            elif not result:
                self._satisfied = False

            return self._satisfied

    def _send_alert(self) -> None:
        logger.info(f"🔔 Rule '{self._name}' satisfied: {self._expression}")

        for sink in list(self._alert_sinks):
            try:
                sink.notify(self._name)
            except Exception as e:
                logger.error(f"Alert sink {type(sink).__name__} failed for rule '{self._name}': {e}")

    def __repr__(self) -> str:
        return f"Rule(name={self._name!r}, expression={self._expression!r}, state={self.state.value})"

