"""Couchbase adapters built on the Couchbase Python SDK 4.x.

- connection.py: Cluster connection and the ``connect`` Connector
- collection.py: CollectionPort with durability option mapping
"""

from collections.abc import Mapping

from couchbench.config import resolve_config
from couchbench.core.client import DocumentStoreClient
from couchbench.core.connection import shared_manager

from .connection import connect


def create_client(properties: Mapping[str, str]) -> DocumentStoreClient:
    """Binding instance for one harness worker.

    All instances in a process share a single cluster connection.
    """
    return DocumentStoreClient(
        properties,
        connections=shared_manager(connect),
        resolver=resolve_config,
    )


__all__ = ["create_client"]
