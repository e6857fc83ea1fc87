"""Контекст сессии панели управления ровером."""

import logging
from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel

from rover_panel.command_log import Clock, CommandLog
from rover_panel.hw.bluetooth_stub import SimulatedTransport
from rover_panel.hw.transport import Transport
from rover_panel.messages import CommandLogEntry, Intent
from rover_panel.nodes.dispatcher import CommandDispatcher
from rover_panel.nodes.mine import MineDetector
from rover_panel.nodes.stream import StreamSessionManager
from rover_panel.surface import ViewingSurface

logger = logging.getLogger(__name__)

StateListener = Callable[[], None]


class LogEntryView(BaseModel):
    timestamp: str
    kind: str
    text: str
    code: str | None = None
    line: str


class StreamView(BaseModel):
    camera_address: str
    is_active: bool
    viewing_url: str
    attempt: int


class PanelState(BaseModel):
    mine_detected: bool
    stream: StreamView
    log: list[LogEntryView]


def entry_view(entry: CommandLogEntry) -> LogEntryView:
    return LogEntryView(
        timestamp=entry.timestamp,
        kind=entry.kind.value,
        text=entry.text,
        code=entry.code,
        line=entry.render(),
    )


class ControlPanel:
    """
    Состояние одной сессии панели: журнал, индикатор мин и сессия потока.

    Создаётся пустым (журнал пуст, поток Idle, тревоги нет).
    close() завершает сессию: отменяет таймеры и останавливает поток.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        surface: ViewingSurface | None = None,
        mine_reset_delay_s: float | None = None,
        cancel_pending_reset: bool | None = None,
        clock: Clock = datetime.now,
    ) -> None:
        self.transport = transport or SimulatedTransport()
        self.log = CommandLog(clock=clock)
        self.mine = MineDetector(mine_reset_delay_s, cancel_pending_reset)
        self.dispatcher = CommandDispatcher(self.transport, self.log, self.mine)
        self.stream = StreamSessionManager(self.log, surface)
        self._listeners: list[StateListener] = []
        self._closed = False

        self.log.add_listener(lambda _entry: self._notify())
        self.mine.add_listener(lambda _detected: self._notify())

    @property
    def mine_detected(self) -> bool:
        return self.mine.detected

    def add_listener(self, listener: StateListener) -> None:
        """Подписаться на любое изменение состояния панели."""
        self._listeners.append(listener)

    def dispatch(self, intent: Intent | str) -> CommandLogEntry | None:
        return self.dispatcher.dispatch(intent)

    def start_stream(self, address: str) -> CommandLogEntry:
        return self.stream.start_stream(address)

    def stop_stream(self) -> CommandLogEntry:
        return self.stream.stop_stream()

    def on_viewing_failure(self, attempt: int | None = None) -> CommandLogEntry | None:
        return self.stream.on_viewing_failure(attempt)

    def snapshot(self) -> PanelState:
        session = self.stream.session
        return PanelState(
            mine_detected=self.mine.detected,
            stream=StreamView(
                camera_address=session.camera_address,
                is_active=session.is_active,
                viewing_url=session.viewing_url,
                attempt=session.attempt,
            ),
            log=[entry_view(e) for e in self.log.all()],
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.mine.cancel()
        if self.stream.is_active:
            self.stream.stop_stream()
        self._listeners.clear()
        logger.info("Control panel session closed (%d log entries)", len(self.log))

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
