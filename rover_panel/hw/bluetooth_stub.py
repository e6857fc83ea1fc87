"""
Bluetooth link stub.
TODO: Replace with a real Bluetooth serial link to the Arduino rover.
"""

import logging

from rover_panel.hw.transport import Transport

logger = logging.getLogger(__name__)


class SimulatedTransport(Transport):
    """Запоминает отправленные коды вместо реальной передачи."""

    name = "bluetooth-stub"

    def __init__(self) -> None:
        self.sent: list[str] = []

    def send(self, code: str) -> None:
        logger.info("Simulating sending Bluetooth command: %s", code)
        self.sent.append(code)
