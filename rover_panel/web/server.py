import asyncio
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from rover_panel import event_bus
from rover_panel.bus import STATE_TOPIC, EventBus
from rover_panel.config import config
from rover_panel.messages import MOVEMENT_INTENTS, PAN_INTENTS, TILT_INTENTS, CommandCode, Intent
from rover_panel.panel import ControlPanel, PanelState
from rover_panel.web.surface import BrowserViewingSurface

logger = logging.getLogger(__name__)


def _frontend_dir() -> Path:
    # Relative paths resolve against the working directory the server is started from
    return Path(config.server.frontend_dir)


class CommandRequest(BaseModel):
    intent: str


class StreamStartRequest(BaseModel):
    address: str


class StreamFailureRequest(BaseModel):
    attempt: int | None = None


class RoverSignalRequest(BaseModel):
    code: str


def _report_failure(request_or_ws: Request | WebSocket, attempt: int | None) -> None:
    surface: BrowserViewingSurface | None = request_or_ws.app.state.surface
    if surface is not None:
        surface.report_failure(attempt)
    else:
        request_or_ws.app.state.panel.on_viewing_failure(attempt)


def _apply_message(ws: WebSocket, msg: dict[str, Any]) -> None:
    panel: ControlPanel = ws.app.state.panel
    msg_type = msg.get("type")

    if msg_type == "command":
        panel.dispatch(str(msg.get("intent", "")))

    elif msg_type == "stream_start":
        panel.start_stream(str(msg.get("address", "")))

    elif msg_type == "stream_stop":
        panel.stop_stream()

    elif msg_type == "stream_failure":
        attempt = msg.get("attempt")
        _report_failure(ws, attempt if isinstance(attempt, int) else None)

    else:
        logger.warning("Unknown control message type: %r", msg_type)


def create_app(
    panel: ControlPanel | None = None,
    surface: BrowserViewingSurface | None = None,
    bus: EventBus | None = None,
) -> FastAPI:
    """Build the web app around one control panel session."""
    if panel is None:
        surface = surface or BrowserViewingSurface()
        panel = ControlPanel(surface=surface)
    bus = bus or event_bus

    # Keep push tasks alive until they finish
    pending: set[asyncio.Task[None]] = set()

    def _on_panel_change() -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop means no connected clients to push to
            return
        state = panel.snapshot().model_dump()
        task = loop.create_task(bus.publish_state(state))
        pending.add(task)
        task.add_done_callback(_on_push_done)

    def _on_push_done(task: asyncio.Task[None]) -> None:
        pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("State push failed: %s", exc, exc_info=exc)

    panel.add_listener(_on_panel_change)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Rover control panel ready")
        yield
        panel.close()
        for task in list(pending):
            task.cancel()

    app = FastAPI(title="Rover Control Center", lifespan=lifespan)
    app.state.panel = panel
    app.state.surface = surface
    app.state.bus = bus
    frontend_dir = _frontend_dir()
    if not frontend_dir.is_dir():
        logger.warning("Frontend directory %s not found (cwd-relative), static assets are unavailable", frontend_dir)
    app.mount("/static", StaticFiles(directory=frontend_dir, check_dir=False), name="static")
    app.state.push_tasks = pending

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/")
    async def index() -> FileResponse:
        return FileResponse(_frontend_dir() / "index.html")

    @app.get("/api/config")
    async def get_config() -> dict[str, Any]:
        """Конфигурация для фронтенда"""
        return {
            "intents": {
                "movement": [i.value for i in MOVEMENT_INTENTS],
                "pan": [i.value for i in PAN_INTENTS],
                "tilt": [i.value for i in TILT_INTENTS],
                "shoot": Intent.SHOOT.value,
            },
            "stream": {
                "url_template": config.stream.viewing_url("{address}"),
            },
            "mine": {
                "reset_delay_ms": int(panel.mine.reset_delay_s * 1000),
            },
        }

    @app.get("/api/state", response_model=PanelState)
    async def get_state() -> PanelState:
        return panel.snapshot()

    @app.post("/api/command", response_model=PanelState)
    async def post_command(body: CommandRequest) -> PanelState:
        panel.dispatch(body.intent)
        return panel.snapshot()

    @app.post("/api/stream/start", response_model=PanelState)
    async def post_stream_start(body: StreamStartRequest) -> PanelState:
        panel.start_stream(body.address)
        return panel.snapshot()

    @app.post("/api/stream/stop", response_model=PanelState)
    async def post_stream_stop() -> PanelState:
        panel.stop_stream()
        return panel.snapshot()

    @app.post("/api/stream/failure", response_model=PanelState)
    async def post_stream_failure(body: StreamFailureRequest, request: Request) -> PanelState:
        _report_failure(request, body.attempt)
        return panel.snapshot()

    @app.post("/api/rover/signal", response_model=PanelState)
    async def post_rover_signal(body: RoverSignalRequest) -> PanelState:
        """Simulated inbound signal from the rover (only 'M' is known)."""
        if body.code != CommandCode.MINE.value:
            raise HTTPException(status_code=400, detail=f"Unsupported rover signal: {body.code}")
        panel.dispatcher.send_command(CommandCode.MINE)
        return panel.snapshot()

    @app.websocket("/ws/control")
    async def ws_control(ws: WebSocket) -> None:
        await ws.accept()

        async def push_state(state: dict[str, Any]) -> None:
            try:
                await ws.send_json({"type": "state", **state})
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug("Dropping state push to closed socket: %s", e)

        await bus.subscribe(STATE_TOPIC, push_state)
        try:
            await ws.send_json({"type": "state", **panel.snapshot().model_dump()})
            while True:
                msg_text = await ws.receive_text()
                try:
                    msg = json.loads(msg_text)
                except json.JSONDecodeError as e:
                    await ws.send_json({"type": "error", "detail": f"Invalid JSON: {e}"})
                    continue
                if not isinstance(msg, dict):
                    await ws.send_json({"type": "error", "detail": "Expected a JSON object"})
                    continue
                _apply_message(ws, msg)

        except WebSocketDisconnect:
            logger.info("Control socket disconnected")
        finally:
            await bus.unsubscribe(STATE_TOPIC, push_state)

    return app


app = create_app()
