"""Couchbase collection adapter.

Implements CollectionPort on top of a Couchbase Python SDK 4.x
``Collection``. Durability policies map onto SDK options as follows:

- LevelDurability  -> ServerDurability(level)
- LegacyDurability -> ClientDurability(replicate_to, persist_to),
  omitted entirely when both counts are zero
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from couchbase.collection import Collection
from couchbase.durability import (
    ClientDurability,
    DurabilityLevel,
    PersistToExtended,
    ReplicateTo,
    ServerDurability,
)
from couchbase.exceptions import DocumentNotFoundException
from couchbase.options import GetOptions, InsertOptions, RemoveOptions, ReplaceOptions

from couchbench.core.models import (
    DurabilityPolicy,
    LegacyDurability,
    LevelDurability,
    WriteOptions,
)
from couchbench.core.models import DurabilityLevel as Level
from couchbench.core.ports import CollectionPort

_LEVELS = {
    Level.NONE: DurabilityLevel.NONE,
    Level.MAJORITY: DurabilityLevel.MAJORITY,
    Level.MAJORITY_AND_PERSIST_TO_ACTIVE: DurabilityLevel.MAJORITY_AND_PERSIST_TO_ACTIVE,
    Level.PERSIST_TO_MAJORITY: DurabilityLevel.PERSIST_TO_MAJORITY,
}

# PersistTo stops at THREE; the extended enum also carries FOUR
_PERSIST_TO = {
    0: PersistToExtended.NONE,
    1: PersistToExtended.ONE,
    2: PersistToExtended.TWO,
    3: PersistToExtended.THREE,
    4: PersistToExtended.FOUR,
}

_REPLICATE_TO = {
    0: ReplicateTo.NONE,
    1: ReplicateTo.ONE,
    2: ReplicateTo.TWO,
    3: ReplicateTo.THREE,
}


def sdk_durability(
    policy: DurabilityPolicy,
) -> ServerDurability | ClientDurability | None:
    """SDK durability option for a policy, or None for no requirement."""
    if isinstance(policy, LevelDurability):
        return ServerDurability(level=_LEVELS[policy.level])
    if isinstance(policy, LegacyDurability):
        if policy.is_none:
            return None
        return ClientDurability(
            replicate_to=_REPLICATE_TO[policy.replicate_to],
            persist_to=_PERSIST_TO[policy.persist_to],
        )
    raise TypeError(f"Unsupported durability policy: {policy!r}")


def _write_kwargs(options: WriteOptions) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"timeout": options.timeout}
    durability = sdk_durability(options.durability)
    if durability is not None:
        kwargs["durability"] = durability
    return kwargs


class CouchbaseCollection(CollectionPort):
    """CollectionPort backed by an SDK collection."""

    def __init__(self, collection: Collection):
        self._collection = collection

    def get(self, doc_id: str, timeout: timedelta) -> Mapping[str, Any] | None:
        try:
            result = self._collection.get(doc_id, GetOptions(timeout=timeout))
        except DocumentNotFoundException:
            return None
        return result.content_as[dict]

    def insert(
        self, doc_id: str, content: Mapping[str, str], options: WriteOptions
    ) -> None:
        self._collection.insert(
            doc_id, dict(content), InsertOptions(**_write_kwargs(options))
        )

    def replace(
        self, doc_id: str, content: Mapping[str, str], options: WriteOptions
    ) -> None:
        self._collection.replace(
            doc_id, dict(content), ReplaceOptions(**_write_kwargs(options))
        )

    def remove(self, doc_id: str, options: WriteOptions) -> None:
        self._collection.remove(doc_id, RemoveOptions(**_write_kwargs(options)))
