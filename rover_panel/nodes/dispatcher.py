import logging

from rover_panel.command_log import CommandLog
from rover_panel.hw.transport import Transport, TransportError
from rover_panel.messages import CommandCode, CommandLogEntry, Intent, LogKind
from rover_panel.nodes.mine import MineDetector

logger = logging.getLogger(__name__)

INTENT_CODES: dict[Intent, CommandCode] = {
    Intent.FORWARD: CommandCode.FORWARD,
    Intent.BACKWARD: CommandCode.BACKWARD,
    Intent.LEFT: CommandCode.LEFT,
    Intent.RIGHT: CommandCode.RIGHT,
    Intent.STOP: CommandCode.STOP,
    Intent.PAN_LEFT: CommandCode.PAN_LEFT,
    Intent.PAN_RIGHT: CommandCode.PAN_RIGHT,
    Intent.TILT_UP: CommandCode.TILT_UP,
    Intent.TILT_DOWN: CommandCode.TILT_DOWN,
    Intent.SHOOT: CommandCode.SHOOT,
    Intent.MINE_DETECTED: CommandCode.MINE,
}


def resolve_intent(intent: object) -> CommandCode | None:
    """Код команды для намерения или None, если намерение неизвестно."""
    if not isinstance(intent, str):
        return None
    try:
        return INTENT_CODES.get(Intent(intent))
    except ValueError:
        return None


class CommandDispatcher:
    def __init__(self, transport: Transport, log: CommandLog, mine: MineDetector) -> None:
        self._transport = transport
        self._log = log
        self._mine = mine

    def dispatch(self, intent: Intent | str) -> CommandLogEntry | None:
        code = resolve_intent(intent)
        if code is None:
            logger.warning("Ignoring unknown intent: %r", intent)
            return None
        return self.send_command(code)

    def send_command(self, code: CommandCode) -> CommandLogEntry:
        # The alert reset needs a running loop; without one the M is dropped before any side effect
        if code is CommandCode.MINE and not self._mine.can_schedule():
            logger.error("No running event loop to time the mine alert reset, dropping %s", code.value)
            return self._log.record(LogKind.SEND_FAILED, f"Failed to send command: {code.value}", code=code.value)

        try:
            self._transport.send(code.value)
        except TransportError as e:
            logger.error("Transport %s failed to send %s: %s", e.backend or self._transport.name, code.value, e)
            return self._log.record(LogKind.SEND_FAILED, f"Failed to send command: {code.value}", code=code.value)

        entry = self._log.record(LogKind.COMMAND, f"Sent command: {code.value}", code=code.value)

        # Placeholder for the inbound 'M' the rover sends when its proximity sensor fires
        if code is CommandCode.MINE:
            self._mine.trigger()

        return entry
