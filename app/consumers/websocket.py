import asyncio
import contextlib
import json
import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from app.algorithms.state import DashboardState
from app.publishers.broadcast import Connection
from app.utils.schemas import REGISTER_WORKER, WorkerRegistration

logger = logging.getLogger("dashboard")


class WebSocketConsumer:
    """Serves one push-channel client for the lifetime of its socket."""

    def __init__(self, websocket: WebSocket, state: DashboardState):
        self.websocket = websocket
        self.state = state
        self.connection: Connection | None = None

    async def run(self):
        # Registered before the handshake completes so no broadcast can slip
        # between the catch-up snapshot and the first incremental event.
        self.connection = self.state.connect()
        logger.info("[Dashboard] new connection %s", self.connection.id)

        sender: asyncio.Task | None = None
        try:
            await self.websocket.accept()
            sender = asyncio.create_task(self._pump(self.connection))
            while True:
                message = await self.websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = (message.get("bytes") or b"").decode("utf-8", errors="replace")
                self.handle_message(raw)
        except WebSocketDisconnect:
            pass
        finally:
            logger.info("[Dashboard] connection closed %s", self.connection.id)
            self.state.disconnect(self.connection.id)
            if sender is not None:
                sender.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await sender

    def handle_message(self, raw: str) -> None:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Invalid frame from %s: %s", self.connection.id, e)
            return
        if not isinstance(message, dict):
            logger.warning("Invalid frame from %s: expected an object", self.connection.id)
            return

        event = message.get("event")
        if event != REGISTER_WORKER:
            logger.warning("Ignoring unknown event %r from %s", event, self.connection.id)
            return

        try:
            registration = WorkerRegistration.model_validate(message.get("data") or {})
        except ValidationError as e:
            logger.warning("Invalid registration from %s: %s", self.connection.id, e)
            return
        self.state.presence.register(self.connection.id, registration.name)

    async def _pump(self, connection: Connection):
        try:
            while True:
                event = await connection.queue.get()
                await self.websocket.send_json(event)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.info("[Dashboard] send failed for %s: %s", connection.id, e)
            self.state.hub.close(connection.id)
