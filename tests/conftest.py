"""Shared fixtures for the rule engine test suite."""

import pytest
from loguru import logger

from src.automon.application.rule import Rule
from src.automon.infrastructure.alert_sink import InMemoryAlertSink
from src.automon.infrastructure.sensor import ObservableSensor

COLD_REV_EXPRESSION = "s010D < 30 && s0C00 > 150"


@pytest.fixture
def coolant() -> ObservableSensor:
    """Coolant temperature sensor (command 010D)."""
    return ObservableSensor("010D", name="Coolant Temperature", unit="°C")


@pytest.fixture
def rpm() -> ObservableSensor:
    """Engine RPM sensor (command 0C00)."""
    return ObservableSensor("0C00", name="Engine RPM", unit="rpm")


@pytest.fixture
def sink() -> InMemoryAlertSink:
    return InMemoryAlertSink()


@pytest.fixture
def cold_rev_expression() -> str:
    return COLD_REV_EXPRESSION


@pytest.fixture
def cold_rev_rule(coolant, rpm, sink) -> Rule:
    """Activated rule: cold engine at high revs."""
    rule = Rule("Cold engine revving")
    rule.add_sensor(coolant)
    rule.add_sensor(rpm)
    rule.set_rule(COLD_REV_EXPRESSION)
    rule.add_alert_sink(sink)
    rule.activate()
    return rule


@pytest.fixture
def log_messages():
    """Collect loguru output emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG", format="{level} | {message}")
    yield messages
    logger.remove(handler_id)
