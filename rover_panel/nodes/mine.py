import asyncio
import logging
from collections.abc import Callable

from rover_panel.config import config

logger = logging.getLogger(__name__)

ChangeListener = Callable[[bool], None]


class MineDetector:
    """
    Индикатор обнаружения мины.

    Сигнал M включает тревогу сразу и планирует сброс через reset_delay_s
    на текущем event loop. При cancel_pending_reset=True новый сигнал
    заменяет ранее запланированный сброс; иначе каждый сигнал держит свой
    таймер и ранний сброс может погасить более позднюю тревогу.
    """

    def __init__(
        self,
        reset_delay_s: float | None = None,
        cancel_pending_reset: bool | None = None,
    ) -> None:
        self.reset_delay_s = config.mine.reset_delay_s if reset_delay_s is None else reset_delay_s
        self.cancel_pending_reset = (
            config.mine.cancel_pending_reset if cancel_pending_reset is None else cancel_pending_reset
        )
        self._detected = False
        self._pending: set[asyncio.TimerHandle] = set()
        self._listeners: list[ChangeListener] = []

    @property
    def detected(self) -> bool:
        return self._detected

    @property
    def pending_resets(self) -> int:
        return len(self._pending)

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    @staticmethod
    def can_schedule() -> bool:
        """Есть ли запущенный event loop для таймера сброса."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        return True

    def trigger(self) -> None:
        """Включить тревогу и запланировать её сброс. Требует запущенный event loop."""
        loop = asyncio.get_running_loop()

        if self.cancel_pending_reset:
            self.cancel()

        self._set_detected(True)

        handle: asyncio.TimerHandle

        def _reset() -> None:
            self._pending.discard(handle)
            self._set_detected(False)

        handle = loop.call_later(self.reset_delay_s, _reset)
        self._pending.add(handle)
        logger.debug("Mine alert reset scheduled in %.2fs", self.reset_delay_s)

    def cancel(self) -> None:
        """Отменить все запланированные сбросы, состояние флага не трогаем."""
        for handle in self._pending:
            handle.cancel()
        self._pending.clear()

    def _set_detected(self, value: bool) -> None:
        if value == self._detected:
            return
        self._detected = value
        if value:
            logger.warning("Mine detected!")
        else:
            logger.info("Mine alert cleared")
        for listener in self._listeners:
            listener(value)
