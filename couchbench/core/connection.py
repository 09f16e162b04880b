"""Lifecycle of the single shared store connection.

The harness runs one binding instance per worker thread, and every
instance calls ``init`` and ``cleanup``. The connection itself is built
once per process and reference counted: each successful ``init`` takes a
reference, each ``cleanup`` drops one, and the last ``cleanup`` closes
it. Creation and teardown happen under one lock, while operations only
read the handle and take no lock at all.
"""

import logging
import threading

from .errors import StoreConnectionError
from .models import ConnectionParams
from .ports import Connector, ConnectionPort

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Owns the lazily created connection and its teardown."""

    def __init__(self, connector: Connector):
        """Initialize with no live connection.

        Args:
            connector: Callable that opens a connection from ConnectionParams.
        """
        self._connector = connector
        self._lock = threading.Lock()
        self._connection: ConnectionPort | None = None
        self._refs = 0

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @property
    def refcount(self) -> int:
        """Number of ``init`` calls not yet matched by ``cleanup``."""
        return self._refs

    @property
    def connection(self) -> ConnectionPort:
        """The live connection.

        Raises:
            StoreConnectionError: If ``init`` has not succeeded yet.
        """
        connection = self._connection
        if connection is None:
            raise StoreConnectionError("connection is not initialized")
        return connection

    def init(self, params: ConnectionParams) -> ConnectionPort:
        """Take a reference, opening the connection unless one is live.

        Concurrent callers block until the first one finishes; all of them
        get the same connection back.

        Raises:
            StoreConnectionError: If the connector fails. Nothing is retried,
                no reference is taken and the manager stays empty, so a
                later call may try again.
        """
        with self._lock:
            if self._connection is None:
                logger.info(f"Connecting to {params.host} (bucket {params.bucket})")
                try:
                    self._connection = self._connector(params)
                except Exception as e:
                    logger.error(f"Failed to connect to {params.host}: {e}")
                    raise StoreConnectionError(
                        f"failed to connect to {params.host}: {e}"
                    ) from e
                logger.info("Connection established")

            self._refs += 1
            return self._connection

    def cleanup(self) -> None:
        """Drop one reference and close the connection on the last one.

        Safe to call more often than ``init``: without a live connection
        it does nothing.
        """
        with self._lock:
            connection = self._connection
            if connection is None:
                return

            self._refs = max(self._refs - 1, 0)
            if self._refs > 0:
                logger.debug(f"Connection still held by {self._refs} binding(s)")
                return

            self._connection = None
            try:
                connection.close()
            except Exception as e:
                logger.warning(f"Error while closing connection: {e}", exc_info=True)
            else:
                logger.info("Connection closed")


_shared_managers: dict[Connector, ConnectionManager] = {}
_shared_lock = threading.Lock()


def shared_manager(connector: Connector) -> ConnectionManager:
    """Process-wide ConnectionManager for a connector.

    Binding instances created with the same connector share one manager
    and therefore one connection.
    """
    with _shared_lock:
        manager = _shared_managers.get(connector)
        if manager is None:
            manager = ConnectionManager(connector)
            _shared_managers[connector] = manager
        return manager
