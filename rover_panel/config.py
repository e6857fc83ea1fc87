from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """Настройки веб-сервера"""
    host: str = Field("0.0.0.0", description="Адрес для привязки сервера")
    port: int = Field(8000, ge=1, le=65535, description="Порт сервера")
    reload: bool = Field(False, description="Auto-reload при изменении кода (для разработки)")
    frontend_dir: str = Field("frontend", description="Каталог со статикой (относительно корня проекта)")


class MineConfig(BaseModel):
    """Настройки индикатора обнаружения мин"""
    reset_delay_s: float = Field(3.0, gt=0.0, le=60.0, description="Через сколько секунд сбрасывается тревога")
    # False - старое поведение: каждый сигнал M держит свой таймер сброса
    cancel_pending_reset: bool = Field(True, description="Новый сигнал M отменяет ранее запланированный сброс")


class StreamConfig(BaseModel):
    """Настройки видеопотока ESP32-CAM"""
    scheme: str = Field("http", description="Схема URL потока")
    path: str = Field("/stream", description="Путь потока на камере (/stream или /cam.jpg)")

    def viewing_url(self, address: str) -> str:
        """Собрать URL потока по адресу камеры"""
        return f"{self.scheme}://{address}{self.path}"


class LogConfig(BaseModel):
    """Настройки журнала команд и логирования"""
    time_format: str = Field("%H:%M:%S", description="Формат времени в журнале команд")
    level: str = Field("INFO", description="Уровень логирования приложения")
    format: str = Field(
        "%(levelname)s:     %(name)s - %(message)s",
        description="Формат строк логирования",
    )


class Config(BaseModel):
    """Главная конфигурация приложения"""
    server: ServerConfig = ServerConfig()
    mine: MineConfig = MineConfig()
    stream: StreamConfig = StreamConfig()
    log: LogConfig = LogConfig()


# Глобальный экземпляр конфигурации
config = Config()
