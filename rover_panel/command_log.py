"""Журнал команд текущей сессии панели управления."""

import logging
from collections.abc import Callable, Iterator
from datetime import datetime

from rover_panel.config import config
from rover_panel.messages import CommandLogEntry, LogKind

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
AppendListener = Callable[[CommandLogEntry], None]


class CommandLog:
    """
    Append-only журнал в памяти.

    Записи хранятся в порядке добавления, без удаления и без ограничения
    размера. Журнал живёт ровно столько, сколько сессия панели.
    """

    def __init__(self, clock: Clock = datetime.now, time_format: str | None = None) -> None:
        self._entries: list[CommandLogEntry] = []
        self._clock = clock
        self._time_format = time_format or config.log.time_format
        self._listeners: list[AppendListener] = []

    def add_listener(self, listener: AppendListener) -> None:
        self._listeners.append(listener)

    def append(self, entry: CommandLogEntry) -> None:
        self._entries.append(entry)
        logger.info("%s", entry.render())
        for listener in self._listeners:
            listener(entry)

    def record(self, kind: LogKind, text: str, code: str | None = None) -> CommandLogEntry:
        """Создать запись с текущим локальным временем и добавить её в журнал."""
        entry = CommandLogEntry(
            timestamp=self._clock().strftime(self._time_format),
            kind=kind,
            text=text,
            code=code,
        )
        self.append(entry)
        return entry

    def all(self) -> list[CommandLogEntry]:
        """Все записи, от старых к новым."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CommandLogEntry]:
        return iter(list(self._entries))
