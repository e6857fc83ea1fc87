"""Поверхность отображения в браузере: <img> на странице панели."""

import logging

from rover_panel.surface import FailureCallback, ViewingSurface

logger = logging.getLogger(__name__)


class BrowserViewingSurface(ViewingSurface):
    """
    Браузер сам грузит поток в <img> и сообщает об ошибке загрузки
    через /api/stream/failure или WebSocket. Колбэк ошибки хранится
    на каждую попытку и срабатывает не более одного раза.
    """

    def __init__(self) -> None:
        self.url = ""
        self._attempt: int | None = None
        self._on_failure: FailureCallback | None = None

    def render(self, url: str, attempt: int, on_failure: FailureCallback) -> None:
        self.url = url
        self._attempt = attempt
        self._on_failure = on_failure
        logger.info("Browser surface bound to %s (attempt %d)", url, attempt)

    def clear(self) -> None:
        self.url = ""
        self._attempt = None
        self._on_failure = None

    def report_failure(self, attempt: int | None = None) -> bool:
        """
        Ошибка загрузки <img> из браузера.

        Returns:
            True, если колбэк был вызван; False для уже отработанной
            или устаревшей попытки
        """
        callback = self._on_failure
        if callback is None or (attempt is not None and attempt != self._attempt):
            logger.debug("Dropping failure report for exhausted attempt %s", attempt)
            return False
        # One-shot: forget the callback before running it
        self._on_failure = None
        callback()
        return True
