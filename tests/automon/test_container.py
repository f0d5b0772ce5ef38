"""
Tests for dependency injection wiring.
"""

from __future__ import annotations

import pytest

from src.config import AppConfig, EngineConfig
from src.automon.application.engine import RuleEngine
from src.automon.infrastructure import container as container_module
from src.automon.infrastructure.container import get_container, init_container


@pytest.fixture(autouse=True)
def reset_container(monkeypatch):
    monkeypatch.setattr(container_module, "_container", None)


def test_get_container_before_init() -> None:
    with pytest.raises(RuntimeError):
        get_container()


def test_init_container_returns_global() -> None:
    container = init_container(AppConfig().model_dump())
    assert get_container() is container


def test_rule_engine_singleton() -> None:
    container = init_container(AppConfig().model_dump())

    engine = container.rule_engine()

    assert isinstance(engine, RuleEngine)
    assert container.rule_engine() is engine
    assert engine.alert_sink is container.alert_sink()


def test_engine_config_from_dict() -> None:
    config = AppConfig().model_dump()
    config["engine"]["identifier_prefix"] = "x"
    config["engine"]["identifier_matching"] = "coarse"

    engine = init_container(config).rule_engine()

    assert engine.config.identifier_prefix == "x"
    assert engine.config.identifier_matching == "coarse"


def test_evaluator_factory_gives_fresh_instances() -> None:
    engine = init_container(AppConfig().model_dump()).rule_engine()

    first = engine.evaluator_factory()
    second = engine.evaluator_factory()

    assert first is not second


def test_partial_engine_config_keeps_defaults() -> None:
    engine = init_container({"engine": {"identifier_matching": "coarse"}}).rule_engine()

    assert engine.config.identifier_matching == "coarse"
    assert engine.config.identifier_prefix == "s"
    assert engine.config.coarse_token_width == 4
    assert engine.config.min_sensor_updates == 1


def test_empty_config_uses_defaults() -> None:
    engine = init_container({}).rule_engine()

    assert engine.config == EngineConfig()


def test_missing_keys_fall_back_to_environment(monkeypatch) -> None:
    monkeypatch.setenv("AUTOMON_IDENTIFIER_PREFIX", "x")

    engine = init_container({"engine": {"min_sensor_updates": 2}}).rule_engine()

    assert engine.config.identifier_prefix == "x"
    assert engine.config.min_sensor_updates == 2
