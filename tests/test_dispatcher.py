"""Тесты для диспетчера команд."""

import asyncio

import pytest

from rover_panel.command_log import CommandLog
from rover_panel.hw.bluetooth_stub import SimulatedTransport
from rover_panel.messages import CommandCode, Intent, LogKind
from rover_panel.nodes.dispatcher import CommandDispatcher, resolve_intent
from rover_panel.nodes.mine import MineDetector

from conftest import FailingTransport, fixed_clock


def _dispatcher(transport=None) -> tuple[CommandDispatcher, CommandLog, MineDetector]:
    log = CommandLog(clock=fixed_clock)
    mine = MineDetector(reset_delay_s=0.05)
    return CommandDispatcher(transport or SimulatedTransport(), log, mine), log, mine


@pytest.mark.parametrize(
    ("intent", "code"),
    [
        ("forward", "F"),
        ("backward", "B"),
        ("left", "L"),
        ("right", "R"),
        ("stop", "S"),
        ("pan-left", "P-"),
        ("pan-right", "P+"),
        ("tilt-up", "T+"),
        ("tilt-down", "T-"),
        ("shoot", "G"),
    ],
)
def test_dispatch_maps_intent_to_code(intent: str, code: str) -> None:
    """Каждое намерение даёт ровно одну запись с нужным кодом."""
    transport = SimulatedTransport()
    dispatcher, log, mine = _dispatcher(transport)

    entry = dispatcher.dispatch(intent)

    assert entry is not None
    assert len(log) == 1
    assert log.all()[0].code == code
    assert log.all()[0].text == f"Sent command: {code}"
    assert transport.sent == [code]
    assert mine.detected is False


def test_dispatch_accepts_enum_members() -> None:
    """Намерение можно передать членом Intent."""
    dispatcher, log, _ = _dispatcher()

    dispatcher.dispatch(Intent.TILT_UP)

    assert log.all()[0].code == "T+"


@pytest.mark.parametrize("intent", ["jump", "", "FORWARD", None, 42])
def test_unknown_intent_is_ignored(intent: object) -> None:
    """Неизвестное намерение не пишет в журнал и ничего не отправляет."""
    transport = SimulatedTransport()
    dispatcher, log, _ = _dispatcher(transport)

    assert dispatcher.dispatch(intent) is None  # type: ignore[arg-type]
    assert len(log) == 0
    assert transport.sent == []


def test_unknown_intent_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    """Для диагностики неизвестное намерение пишется в warning."""
    dispatcher, _, _ = _dispatcher()

    dispatcher.dispatch("jump")

    assert "Ignoring unknown intent" in caplog.text


def test_resolve_intent() -> None:
    """Таблица намерений полная, M доступен только как сигнал ровера."""
    assert resolve_intent("mine-detected") is CommandCode.MINE
    assert resolve_intent("pan-right") is CommandCode.PAN_RIGHT
    assert resolve_intent("nope") is None


def test_mine_code_raises_alert() -> None:
    """Код M сразу включает тревогу и пишет обычную запись команды."""

    async def _run_test() -> None:
        dispatcher, log, mine = _dispatcher()

        dispatcher.send_command(CommandCode.MINE)

        assert mine.detected is True
        assert log.all()[0].code == "M"
        assert mine.pending_resets == 1

    asyncio.run(_run_test())


def test_transport_failure_replaces_command_entry() -> None:
    """Ошибка транспорта: вместо записи команды пишется запись об ошибке."""
    transport = FailingTransport()
    dispatcher, log, _ = _dispatcher(transport)

    entry = dispatcher.dispatch("forward")

    assert transport.attempts == ["F"]
    assert entry is not None
    assert entry.kind is LogKind.SEND_FAILED
    assert entry.text == "Failed to send command: F"
    assert [e.kind for e in log.all()] == [LogKind.SEND_FAILED]


def test_transport_failure_skips_mine_alert() -> None:
    """Если M не ушёл в транспорт, тревога не включается."""

    async def _run_test() -> None:
        dispatcher, _, mine = _dispatcher(FailingTransport())

        dispatcher.send_command(CommandCode.MINE)

        assert mine.detected is False
        assert mine.pending_resets == 0

    asyncio.run(_run_test())
