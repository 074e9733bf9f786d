import logging

from app.publishers.broadcast import BroadcastHub
from app.utils.metrics import workers_online
from app.utils.schemas import WORKER_UPDATE, WorkerRecord, envelope

logger = logging.getLogger(__name__)


class PresenceTracker:
    """Maps a live connection id to the worker that registered on it.

    Clients always receive the full worker list, never a delta.
    """

    def __init__(self, hub: BroadcastHub, anonymous_name: str = "Anonymous Worker"):
        self.hub = hub
        self.anonymous_name = anonymous_name
        self._workers: dict[str, WorkerRecord] = {}

    def register(self, connection_id: str, name: str | None = None) -> WorkerRecord:
        record = WorkerRecord(id=connection_id, name=name or self.anonymous_name)
        # Overwriting an existing key keeps its position in the list.
        self._workers[connection_id] = record
        workers_online.set(len(self._workers))
        logger.info("[Dashboard] worker registered name=%s connection=%s", record.name, connection_id)
        self._publish()
        return record

    def unregister(self, connection_id: str) -> bool:
        record = self._workers.pop(connection_id, None)
        if record is None:
            return False
        workers_online.set(len(self._workers))
        logger.info("[Dashboard] worker offline name=%s connection=%s", record.name, connection_id)
        self._publish()
        return True

    def list_workers(self) -> list[WorkerRecord]:
        return list(self._workers.values())

    def snapshot(self) -> dict:
        return envelope(WORKER_UPDATE, self.list_workers())

    def _publish(self) -> None:
        self.hub.broadcast(self.snapshot())
