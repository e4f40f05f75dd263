"""
MongoDB connection handle for async operations.
Owns the motor client and tracks whether the server is ready to serve queries.
"""

import asyncio
from enum import Enum
from typing import Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import monitoring
from pymongo.errors import PyMongoError

logger = structlog.get_logger(__name__)


class ConnectionState(str, Enum):
    """Readiness of the store connection."""
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    CONNECTING = "connecting"
    DISCONNECTING = "disconnecting"


class _TopologyListener(monitoring.TopologyListener):
    """Feeds driver topology changes back into the connection state."""

    def __init__(self, connection: "MongoConnection"):
        self.connection = connection

    def opened(self, event):
        pass

    def description_changed(self, event):
        description = event.new_description
        self.connection._on_topology_change(
            description.has_readable_server(),
            topology_type=description.topology_type_name,
        )

    def closed(self, event):
        pass


class MongoConnection:
    """
    Process-wide MongoDB connection with readiness tracking.

    The driver reconnects on its own; topology events move the state between
    connected and disconnected so callers can fail fast while no member of the
    deployment can serve reads.
    """

    def __init__(
        self,
        connection_url: str,
        database_name: str,
        server_selection_timeout_ms: int = 5000
    ):
        """
        Initialize the connection handle.

        Args:
            connection_url: MongoDB connection URL
            database_name: Database used when the URL does not name one
            server_selection_timeout_ms: How long a query waits for a server
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._state = ConnectionState.DISCONNECTED
        self._closed = False

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    def _set_state(self, state: ConnectionState, **context) -> None:
        if state == self._state:
            return
        previous = self._state
        self._state = state
        logger.info("MongoDB connection state changed",
                    previous=previous.value,
                    state=state.value,
                    **context)

    def _on_topology_change(self, readable: bool, **context) -> None:
        # Monitor threads can still report after the client was closed
        if self._closed or self._state == ConnectionState.DISCONNECTING:
            return
        if readable:
            self._set_state(ConnectionState.CONNECTED, **context)
        elif self._state != ConnectionState.CONNECTING:
            self._set_state(ConnectionState.DISCONNECTED, **context)

    async def connect(self) -> None:
        """
        Create the client and probe the server.

        A failed probe leaves the handle disconnected instead of raising; the
        driver keeps monitoring the deployment and the state recovers once a
        member becomes readable.
        """
        self._closed = False
        self._set_state(ConnectionState.CONNECTING)
        self.client = AsyncIOMotorClient(
            self.connection_url,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            event_listeners=[_TopologyListener(self)],
        )
        self.database = self.client.get_default_database(self.database_name)

        try:
            await self.client.admin.command('ping')
        except PyMongoError as e:
            logger.error("Failed to connect to MongoDB",
                         database=self.database.name,
                         error=str(e))
            self._set_state(ConnectionState.DISCONNECTED)
            return

        self._set_state(ConnectionState.CONNECTED)
        logger.info("Successfully connected to MongoDB", database=self.database.name)

    async def wait_until_connected(self, poll_interval: float = 0.5) -> None:
        """Block until the handle reports connected; no timeout."""
        if self.is_connected:
            return
        logger.info("Waiting for MongoDB", state=self._state.value)
        while not self.is_connected:
            await asyncio.sleep(poll_interval)

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self._closed = True
            self._set_state(ConnectionState.DISCONNECTING)
            self.client.close()
            self._set_state(ConnectionState.DISCONNECTED)
            logger.info("Disconnected from MongoDB")
