"""Интерфейс поверхности отображения видеопотока."""

from abc import ABC, abstractmethod
from collections.abc import Callable

FailureCallback = Callable[[], None]


class ViewingSurface(ABC):
    """
    Поверхность, которая показывает поток по URL (например, <img> в браузере).

    Поверхность сама загружает и отрисовывает поток. При ошибке загрузки
    она должна вызвать on_failure ровно один раз на попытку.
    """

    @abstractmethod
    def render(self, url: str, attempt: int, on_failure: FailureCallback) -> None:
        """
        Начать показ потока.

        Args:
            url: URL потока камеры
            attempt: Номер попытки показа
            on_failure: Вызывается один раз, если поток не удалось загрузить
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Прекратить показ потока."""
        ...


class NullViewingSurface(ViewingSurface):
    """Поверхность без отображения (headless режим, тесты)."""

    def render(self, url: str, attempt: int, on_failure: FailureCallback) -> None:
        pass

    def clear(self) -> None:
        pass
