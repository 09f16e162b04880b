"""Fake implementations of core ports for testing.

These in-memory implementations allow core binding logic to be tested
without a cluster:

- FakeCollection: In-memory documents with call capture
- FakeConnection: Connection over a FakeCollection
- FakeConnector: Connector counting opened connections
"""

from .store import (
    DocumentExistsError,
    DocumentMissingError,
    FakeCollection,
    FakeConnection,
    FakeConnector,
)

__all__ = [
    "DocumentExistsError",
    "DocumentMissingError",
    "FakeCollection",
    "FakeConnection",
    "FakeConnector",
]
