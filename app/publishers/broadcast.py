import asyncio
import logging
import uuid
from typing import Any

from app.utils.metrics import connections_active, events_broadcast

logger = logging.getLogger(__name__)


class Connection:
    """One push-channel client. Outbound events are queued in commit order."""

    def __init__(self, connection_id: str | None = None):
        self.id = connection_id or uuid.uuid4().hex
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def send(self, event: dict[str, Any]) -> None:
        self.queue.put_nowait(event)

    def pending(self) -> list[dict[str, Any]]:
        """Drain and return everything queued so far without waiting."""
        events = []
        while not self.queue.empty():
            events.append(self.queue.get_nowait())
        return events


class BroadcastHub:
    """Registry of open connections.

    Nothing here awaits: every enqueue happens in the caller's event-loop
    step, so a mutation and its broadcast are never split by another handler.
    """

    def __init__(self):
        self._connections: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def open(self, connection_id: str | None = None) -> Connection:
        conn = Connection(connection_id)
        self._connections[conn.id] = conn
        connections_active.set(len(self._connections))
        return conn

    def close(self, connection_id: str) -> None:
        if self._connections.pop(connection_id, None) is not None:
            connections_active.set(len(self._connections))

    def unicast(self, connection_id: str, event: dict[str, Any]) -> bool:
        conn = self._connections.get(connection_id)
        if conn is None:
            return False
        conn.send(event)
        return True

    def broadcast(self, event: dict[str, Any]) -> int:
        for conn in self._connections.values():
            conn.send(event)
        events_broadcast.labels(event=event["event"]).inc()
        logger.debug(
            "[Dashboard] broadcast event=%s connections=%d", event["event"], len(self._connections)
        )
        return len(self._connections)
