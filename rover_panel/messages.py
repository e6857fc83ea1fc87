from dataclasses import dataclass
from enum import Enum


class Intent(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    LEFT = "left"
    RIGHT = "right"
    STOP = "stop"
    PAN_LEFT = "pan-left"
    PAN_RIGHT = "pan-right"
    TILT_UP = "tilt-up"
    TILT_DOWN = "tilt-down"
    SHOOT = "shoot"
    # Simulated inbound signal from the rover, never bound to a control
    MINE_DETECTED = "mine-detected"


class CommandCode(str, Enum):
    FORWARD = "F"
    BACKWARD = "B"
    LEFT = "L"
    RIGHT = "R"
    STOP = "S"
    PAN_LEFT = "P-"
    PAN_RIGHT = "P+"
    TILT_UP = "T+"
    TILT_DOWN = "T-"
    SHOOT = "G"
    MINE = "M"


MOVEMENT_INTENTS = (Intent.FORWARD, Intent.BACKWARD, Intent.LEFT, Intent.RIGHT, Intent.STOP)
PAN_INTENTS = (Intent.PAN_LEFT, Intent.PAN_RIGHT)
TILT_INTENTS = (Intent.TILT_UP, Intent.TILT_DOWN)


class LogKind(str, Enum):
    COMMAND = "command"
    SEND_FAILED = "send_failed"
    STREAM_MISSING_ADDRESS = "stream_missing_address"
    STREAM_STARTED = "stream_started"
    STREAM_STOPPED = "stream_stopped"
    STREAM_FAILED = "stream_failed"


@dataclass(frozen=True)
class CommandLogEntry:
    timestamp: str  # local time, formatted with config.log.time_format
    kind: LogKind
    text: str
    code: str | None = None  # set for command entries only

    def render(self) -> str:
        return f"[{self.timestamp}] {self.text}"


@dataclass
class StreamSession:
    camera_address: str = ""
    is_active: bool = False
    viewing_url: str = ""
    attempt: int = 0  # bumped on every successful start
