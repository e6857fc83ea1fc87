import logging

from rover_panel.command_log import CommandLog
from rover_panel.config import config
from rover_panel.messages import CommandLogEntry, LogKind, StreamSession
from rover_panel.surface import NullViewingSurface, ViewingSurface

logger = logging.getLogger(__name__)


class StreamSessionManager:
    """
    Сессия просмотра потока ESP32-CAM.

    Состояния: Idle и Streaming. Streaming означает "пытаемся показать
    или показываем", подтверждения, что поток жив, нет.
    """

    def __init__(self, log: CommandLog, surface: ViewingSurface | None = None) -> None:
        self._log = log
        self._surface = surface or NullViewingSurface()
        self.session = StreamSession()

    @property
    def is_active(self) -> bool:
        return self.session.is_active

    @property
    def viewing_url(self) -> str:
        return self.session.viewing_url

    def start_stream(self, address: str) -> CommandLogEntry:
        if not address:
            return self._log.record(LogKind.STREAM_MISSING_ADDRESS, "Please enter ESP32-CAM IP address.")

        url = config.stream.viewing_url(address)
        self.session.camera_address = address
        self.session.viewing_url = url
        self.session.is_active = True
        self.session.attempt += 1
        attempt = self.session.attempt

        entry = self._log.record(LogKind.STREAM_STARTED, f"Attempting to stream from: {url}")
        self._surface.render(url, attempt, lambda: self.on_viewing_failure(attempt))
        return entry

    def stop_stream(self) -> CommandLogEntry:
        self._deactivate()
        return self._log.record(LogKind.STREAM_STOPPED, "Video stream stopped.")

    def on_viewing_failure(self, attempt: int | None = None) -> CommandLogEntry | None:
        """
        Обработать ошибку загрузки потока.

        Срабатывает один раз на попытку: отчёты в состоянии Idle или для
        устаревшей попытки игнорируются. Повторной попытки не делаем.
        """
        if not self.session.is_active:
            logger.debug("Ignoring viewing failure while idle (attempt=%s)", attempt)
            return None
        if attempt is not None and attempt != self.session.attempt:
            logger.debug("Ignoring stale viewing failure (attempt=%s, current=%s)", attempt, self.session.attempt)
            return None

        logger.warning("Camera stream failed to load: %s", self.session.viewing_url)
        self._deactivate()
        return self._log.record(
            LogKind.STREAM_FAILED,
            "Error: Could not load camera stream. Check IP or connection.",
        )

    def _deactivate(self) -> None:
        self.session.viewing_url = ""
        self.session.is_active = False
        self._surface.clear()
