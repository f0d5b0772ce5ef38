"""In-process sensor implementing the SensorInput contract."""

from loguru import logger

from src.automon.domain.protocols import SensorInput, SensorListener


class ObservableSensor(SensorInput):
    """
    Sensor fed by its owner through update().

    Every update is counted and pushed to all listeners in subscription
    order. A failing listener is logged and does not stop delivery.
    """

    def __init__(self, command: str, name: str | None = None, unit: str | None = None):
        self._command = command
        self.name = name or command
        self.unit = unit
        self.value: float | None = None
        self._change_count = 0
        self._listeners: list[SensorListener] = []

    @property
    def command(self) -> str:
        return self._command

    @property
    def change_count(self) -> int:
        return self._change_count

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: SensorListener) -> None:
        self._listeners.append(callback)

    def unsubscribe(self, callback: SensorListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def update(self, value: float) -> None:
        """Record a new reading and notify listeners."""
        self.value = float(value)
        self._change_count += 1

        for listener in list(self._listeners):
            try:
                listener(self.value)
            except Exception as e:
                logger.error(f"Listener failed for sensor {self._command}: {e}")

    def __repr__(self) -> str:
        return f"ObservableSensor(command={self._command!r}, value={self.value}, changes={self._change_count})"
