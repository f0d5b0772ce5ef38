"""Dependency injection container for the rule engine."""

from dependency_injector import containers, providers

from src.config import EngineConfig
from src.automon.application.engine import RuleEngine
from src.automon.infrastructure.alert_sink import InMemoryAlertSink
from src.automon.infrastructure.expression import PythonExpressionEvaluator


def build_engine_config(section: dict | None) -> EngineConfig:
    """Build EngineConfig from the given keys; missing ones fall back to env and defaults."""
    values = {key: value for key, value in (section or {}).items() if value is not None}
    return EngineConfig(**values)


class EngineContainer(containers.DeclarativeContainer):
    """Dependency injection container for the rule engine."""

    config = providers.Configuration()

    engine_config = providers.Singleton(build_engine_config, config.engine)

    # One evaluator per rule
    evaluator = providers.Factory(PythonExpressionEvaluator)

    alert_sink = providers.Singleton(InMemoryAlertSink)

    rule_engine = providers.Singleton(
        RuleEngine,
        config=engine_config,
        alert_sink=alert_sink,
        evaluator_factory=evaluator.provider,
    )


# Global container instance
_container: EngineContainer | None = None


def init_container(config: dict) -> EngineContainer:
    """Initialize the global container."""
    global _container
    _container = EngineContainer()
    _container.config.from_dict(config)
    return _container


def get_container() -> EngineContainer:
    """Get the global container instance."""
    if _container is None:
        raise RuntimeError("Container not initialized. Call init_container() first.")
    return _container
