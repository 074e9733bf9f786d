from app.algorithms.presence import PresenceTracker
from app.algorithms.store import Store
from app.publishers.broadcast import BroadcastHub, Connection
from app.utils.config import Settings
from app.utils.schemas import INITIAL_JOBS, envelope


class DashboardState:
    """All mutable server state, built once per app and handed to handlers."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or Settings()
        self.hub = BroadcastHub()
        self.store = Store(self.hub, unknown_worker_id=settings.unknown_worker_id)
        self.presence = PresenceTracker(self.hub, anonymous_name=settings.anonymous_worker_name)

    def connect(self, connection_id: str | None = None) -> Connection:
        """Open a connection and queue its catch-up snapshot ahead of any broadcast."""
        conn = self.hub.open(connection_id)
        self.hub.unicast(conn.id, self.presence.snapshot())
        self.hub.unicast(conn.id, envelope(INITIAL_JOBS, self.store.list_jobs()))
        return conn

    def disconnect(self, connection_id: str) -> bool:
        """Drop the connection, then its worker record. True if a worker went offline."""
        self.hub.close(connection_id)
        return self.presence.unregister(connection_id)
