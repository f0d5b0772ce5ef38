"""
Tests for logging configuration and context propagation.
"""

from __future__ import annotations

import sys

import pytest
from loguru import logger

from src.config import LoggingConfig
from src.automon.application.rule import Rule
from src.automon.infrastructure.logging import (
    LoggingContext,
    configure_logging,
    context_filter,
    get_logging_context,
)


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestLoggingContext:
    def test_sets_and_resets(self) -> None:
        assert "rule_name" not in get_logging_context()

        with LoggingContext(rule_name="cold"):
            assert get_logging_context()["rule_name"] == "cold"

        assert "rule_name" not in get_logging_context()

    def test_nested_contexts_merge(self) -> None:
        with LoggingContext(rule_name="cold"):
            with LoggingContext(sensor="010D"):
                assert get_logging_context() == {"rule_name": "cold", "sensor": "010D"}
            assert get_logging_context() == {"rule_name": "cold"}

    def test_filter_copies_context_into_record(self) -> None:
        record = {"extra": {}}

        with LoggingContext(rule_name="cold"):
            assert context_filter(record) is True

        assert record["extra"] == {"rule_name": "cold"}


class TestConfigureLogging:
    def test_file_sink_receives_context(self, tmp_path, restore_logger) -> None:
        log_file = tmp_path / "automon.log"
        configure_logging(LoggingConfig(file=str(log_file), level="DEBUG"))

        with LoggingContext(rule_name="cold"):
            logger.info("evaluating")
        logger.remove()

        content = log_file.read_text()
        assert "evaluating" in content
        assert "'rule_name': 'cold'" in content

    def test_rule_activation_logs_rule_name(self, coolant, log_messages) -> None:
        rule = Rule("cold")
        rule.add_sensor(coolant)
        rule.set_rule("s010D < 30")
        rule.activate()

        assert any("Rule 'cold' activated" in msg for msg in log_messages)
