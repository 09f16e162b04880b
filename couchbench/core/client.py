"""Durability-aware CRUD binding for the benchmark harness.

Translates harness operations into collection calls. Writes carry the
durability policy and timeout resolved at ``init``; reads carry the
timeout. Every failure of an individual operation is reported as
``Status.ERROR`` without further detail.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .connection import ConnectionManager
from .durability import describe
from .identity import format_id
from .models import ReadResult, ResolvedConfig, Status, WriteOptions
from .ports import DB, CollectionPort
from .projection import encode_values, extract_fields

logger = logging.getLogger(__name__)

ConfigResolver = Callable[[Mapping[str, str]], ResolvedConfig]


class DocumentStoreClient(DB):
    """DB binding backed by a shared document store connection."""

    def __init__(
        self,
        properties: Mapping[str, str],
        connections: ConnectionManager,
        resolver: ConfigResolver,
    ):
        """Initialize an unconnected binding.

        Args:
            properties: Raw harness properties.
            connections: Manager of the shared connection.
            resolver: Turns properties into a ResolvedConfig.
        """
        self._properties = dict(properties)
        self._connections = connections
        self._resolver = resolver
        self._config: ResolvedConfig | None = None
        self._write_options: WriteOptions | None = None
        self._acquired = False

    @property
    def config(self) -> ResolvedConfig | None:
        return self._config

    def init(self) -> None:
        """Resolve configuration and make sure the connection is open.

        Raises:
            ConfigurationError: If a property is invalid.
            StoreConnectionError: If the store cannot be reached.
        """
        if self._config is None:
            config = self._resolver(self._properties)
            self._write_options = config.write_options
            self._config = config
            logger.info(
                f"Durability {describe(config.durability)}, "
                f"kv timeout {config.kv_timeout_millis}ms"
            )
        if not self._acquired:
            self._connections.init(self._config.connection)
            self._acquired = True

    def cleanup(self) -> None:
        """Release this binding's hold on the shared connection.

        The connection closes once every binding that initialized has
        cleaned up. Repeated calls release nothing further.
        """
        if self._acquired:
            self._acquired = False
            self._connections.cleanup()

    def _collection(self) -> CollectionPort:
        return self._connections.connection.collection

    def _options(self) -> WriteOptions:
        if self._write_options is None:
            raise RuntimeError("binding is not initialized")
        return self._write_options

    def read(
        self, table: str, key: str, fields: set[str] | None = None
    ) -> ReadResult:
        """Fetch a record; only a missing document yields NOT_FOUND."""
        try:
            content = self._collection().get(
                format_id(table, key), self._options().timeout
            )
            if content is None:
                return ReadResult(Status.NOT_FOUND)
            return ReadResult(Status.OK, extract_fields(content, fields))
        except Exception:
            return ReadResult(Status.ERROR)

    def insert(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        try:
            self._collection().insert(
                format_id(table, key), encode_values(values), self._options()
            )
        except Exception:
            return Status.ERROR
        return Status.OK

    def update(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        try:
            self._collection().replace(
                format_id(table, key), encode_values(values), self._options()
            )
        except Exception:
            return Status.ERROR
        return Status.OK

    def delete(self, table: str, key: str) -> Status:
        try:
            self._collection().remove(format_id(table, key), self._options())
        except Exception:
            return Status.ERROR
        return Status.OK

    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: set[str] | None = None,
    ) -> Status:
        """Range scans are not supported by this binding."""
        return Status.NOT_IMPLEMENTED
