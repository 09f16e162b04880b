"""Port interfaces for the couchbench binding.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driving Port** (the benchmark harness calls into core)
   - DB: Uniform CRUD contract shared by every harness binding

2. **Driven Ports** (core calls out to adapters)
   - Connector: Opens a connection from ConnectionParams
   - ConnectionPort: A live connection and its teardown
   - CollectionPort: Key-value operations on one document collection
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any, TypeAlias

from .models import ConnectionParams, ReadResult, Status, WriteOptions


# ============================================================================
# DRIVING PORT (Harness calls into core)
# ============================================================================


class DB(ABC):
    """Interface a benchmark harness drives.

    One concrete binding among others the harness can select. The harness
    typically creates one instance per worker thread and calls ``init``
    on each before issuing operations, then ``cleanup`` on each at the end.
    """

    @abstractmethod
    def init(self) -> None:
        """Prepare the binding for use.

        Raises:
            DBError: If configuration is invalid or the store is unreachable.
        """

    @abstractmethod
    def cleanup(self) -> None:
        """Release resources held by the binding. Safe to call repeatedly."""

    @abstractmethod
    def read(
        self, table: str, key: str, fields: set[str] | None = None
    ) -> ReadResult:
        """Read a record.

        Args:
            table: Logical table name.
            key: Record key.
            fields: Fields to return. None or empty returns all fields.

        Returns:
            ReadResult with OK and the fields, NOT_FOUND, or ERROR.
        """

    @abstractmethod
    def insert(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        """Create a new record. Fails if it already exists."""

    @abstractmethod
    def update(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        """Replace an existing record. Fails if it does not exist."""

    @abstractmethod
    def delete(self, table: str, key: str) -> Status:
        """Remove a record."""

    @abstractmethod
    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: set[str] | None = None,
    ) -> Status:
        """Range scan starting at ``start_key``."""


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class CollectionPort(ABC):
    """Port for key-value access to a single document collection.

    Implementations translate WriteOptions into store-native durability
    and timeout settings. Every method is a single attempt; retries are
    the store client's concern.
    """

    @abstractmethod
    def get(self, doc_id: str, timeout: timedelta) -> Mapping[str, Any] | None:
        """Fetch a document's content.

        Returns:
            The document content, or None if no such document exists.

        Raises:
            Exception: On timeout or transport failure.
        """

    @abstractmethod
    def insert(
        self, doc_id: str, content: Mapping[str, str], options: WriteOptions
    ) -> None:
        """Create a document.

        Raises:
            Exception: If the document exists, the durability requirement
                cannot be met, or the call times out.
        """

    @abstractmethod
    def replace(
        self, doc_id: str, content: Mapping[str, str], options: WriteOptions
    ) -> None:
        """Replace an existing document.

        Raises:
            Exception: If the document is missing or the write fails.
        """

    @abstractmethod
    def remove(self, doc_id: str, options: WriteOptions) -> None:
        """Remove a document.

        Raises:
            Exception: If the document is missing or the write fails.
        """


class ConnectionPort(ABC):
    """A live connection to the store."""

    @property
    @abstractmethod
    def collection(self) -> CollectionPort:
        """The collection all operations are issued against."""

    @abstractmethod
    def close(self) -> None:
        """Release cluster and environment resources."""


Connector: TypeAlias = Callable[[ConnectionParams], ConnectionPort]
