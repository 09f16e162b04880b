"""Fake store ports for testing.

In-memory CollectionPort and ConnectionPort implementations that record
every call for test assertions, plus a connector that counts how many
connections were opened.
"""

import threading
import time
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from couchbench.core.models import ConnectionParams, WriteOptions
from couchbench.core.ports import CollectionPort, ConnectionPort


class DocumentExistsError(Exception):
    """Raised by FakeCollection.insert for an existing ID."""


class DocumentMissingError(Exception):
    """Raised by FakeCollection.replace/remove for a missing ID."""


class FakeCollection(CollectionPort):
    """In-memory document collection.

    Set ``fail_with`` to make every call raise that exception, which
    stands in for timeouts, unmet durability and transport errors.
    """

    def __init__(self):
        """Initialize with no documents."""
        self.documents: dict[str, dict[str, Any]] = {}
        self.get_calls: list[tuple[str, timedelta]] = []
        self.write_calls: list[tuple[str, str, WriteOptions]] = []
        self.fail_with: Exception | None = None

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def get(self, doc_id: str, timeout: timedelta) -> Mapping[str, Any] | None:
        self.get_calls.append((doc_id, timeout))
        self._maybe_fail()
        document = self.documents.get(doc_id)
        return dict(document) if document is not None else None

    def insert(
        self, doc_id: str, content: Mapping[str, str], options: WriteOptions
    ) -> None:
        self.write_calls.append(("insert", doc_id, options))
        self._maybe_fail()
        if doc_id in self.documents:
            raise DocumentExistsError(doc_id)
        self.documents[doc_id] = dict(content)

    def replace(
        self, doc_id: str, content: Mapping[str, str], options: WriteOptions
    ) -> None:
        self.write_calls.append(("replace", doc_id, options))
        self._maybe_fail()
        if doc_id not in self.documents:
            raise DocumentMissingError(doc_id)
        self.documents[doc_id] = dict(content)

    def remove(self, doc_id: str, options: WriteOptions) -> None:
        self.write_calls.append(("remove", doc_id, options))
        self._maybe_fail()
        if doc_id not in self.documents:
            raise DocumentMissingError(doc_id)
        del self.documents[doc_id]


class FakeConnection(ConnectionPort):
    """Connection wrapping a FakeCollection."""

    def __init__(self, collection: FakeCollection, params: ConnectionParams):
        self._collection = collection
        self.params = params
        self.closed = False

    @property
    def collection(self) -> FakeCollection:
        return self._collection

    def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Connector that hands out FakeConnections over one shared collection.

    Args:
        delay: Seconds to sleep while "connecting", to widen race windows.
        fail_with: Exception raised instead of connecting.
    """

    def __init__(self, delay: float = 0.0, fail_with: Exception | None = None):
        self.collection = FakeCollection()
        self.connections: list[FakeConnection] = []
        self.delay = delay
        self.fail_with = fail_with
        self._lock = threading.Lock()

    @property
    def connect_count(self) -> int:
        return len(self.connections)

    def __call__(self, params: ConnectionParams) -> FakeConnection:
        if self.delay:
            time.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        connection = FakeConnection(self.collection, params)
        with self._lock:
            self.connections.append(connection)
        return connection
