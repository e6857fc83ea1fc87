"""
Command transport interface.
Any link to the rover (Bluetooth, serial, ...) implements Transport so the
dispatcher never depends on the concrete backend.
"""

from abc import ABC, abstractmethod


class Transport(ABC):
    """Канал передачи кодов команд на ровер."""

    name: str = "transport"

    @abstractmethod
    def send(self, code: str) -> None:
        """
        Передать код команды (fire-and-forget, подтверждение не ждём).

        Args:
            code: Короткий код команды ("F", "P-", ...)

        Raises:
            TransportError: Если команду не удалось передать
        """
        ...


class TransportError(Exception):
    """Raised when a command cannot be handed to the rover link."""

    def __init__(self, message: str, backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend
