"""Тесты для поверхности отображения в браузере."""

from rover_panel.messages import LogKind
from rover_panel.panel import ControlPanel
from rover_panel.web.surface import BrowserViewingSurface


def test_report_failure_fires_once() -> None:
    """Колбэк ошибки срабатывает не больше одного раза на попытку."""
    surface = BrowserViewingSurface()
    calls: list[int] = []
    surface.render("http://10.0.0.5/stream", 1, lambda: calls.append(1))

    assert surface.report_failure(1) is True
    assert surface.report_failure(1) is False
    assert surface.report_failure() is False
    assert calls == [1]


def test_report_failure_for_other_attempt_is_dropped() -> None:
    """Отчёт для чужой попытки не вызывает колбэк."""
    surface = BrowserViewingSurface()
    calls: list[int] = []
    surface.render("http://10.0.0.5/stream", 2, lambda: calls.append(2))

    assert surface.report_failure(1) is False
    assert calls == []


def test_clear_forgets_callback() -> None:
    """После clear() ошибки больше не доставляются."""
    surface = BrowserViewingSurface()
    surface.render("http://10.0.0.5/stream", 1, lambda: None)

    surface.clear()

    assert surface.url == ""
    assert surface.report_failure(1) is False


def test_surface_bound_to_panel_session() -> None:
    """Панель с браузерной поверхностью: ошибка из браузера завершает поток."""
    surface = BrowserViewingSurface()
    panel = ControlPanel(surface=surface)

    panel.start_stream("10.0.0.5")
    assert surface.url == "http://10.0.0.5/stream"

    surface.report_failure(1)

    assert panel.stream.is_active is False
    assert surface.url == ""
    assert [e.kind for e in panel.log.all()] == [LogKind.STREAM_STARTED, LogKind.STREAM_FAILED]
