"""Общие фикстуры для тестов панели управления."""

from datetime import datetime

import pytest

from rover_panel.hw.bluetooth_stub import SimulatedTransport
from rover_panel.hw.transport import Transport, TransportError
from rover_panel.panel import ControlPanel


class FailingTransport(Transport):
    """Транспорт, который всегда падает при отправке."""

    name = "failing"

    def __init__(self) -> None:
        self.attempts: list[str] = []

    def send(self, code: str) -> None:
        self.attempts.append(code)
        raise TransportError("link down", backend=self.name)


def fixed_clock() -> datetime:
    return datetime(2024, 5, 1, 14, 3, 7)


@pytest.fixture
def transport() -> SimulatedTransport:
    return SimulatedTransport()


@pytest.fixture
def panel(transport: SimulatedTransport) -> ControlPanel:
    """Панель с заглушкой Bluetooth и фиксированным временем."""
    return ControlPanel(transport=transport, mine_reset_delay_s=0.05, clock=fixed_clock)
