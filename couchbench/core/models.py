"""Domain models for the couchbench binding.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum, IntEnum
from typing import TypeAlias


class Status(Enum):
    """Outcome of a single harness operation.

    This is the whole vocabulary the harness sees. A timeout, a conflict
    and a network failure all surface as ERROR.
    """

    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


@dataclass(frozen=True)
class ReadResult:
    """Status of a read plus the projected fields (empty unless OK)."""

    status: Status
    fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Record:
    """A logical harness record: table, key and string-valued fields."""

    table: str
    key: str
    fields: dict[str, str] = field(default_factory=dict)


class DurabilityLevel(IntEnum):
    """Server-side durability levels, indexed by their configuration value."""

    NONE = 0
    MAJORITY = 1
    MAJORITY_AND_PERSIST_TO_ACTIVE = 2
    PERSIST_TO_MAJORITY = 3


@dataclass(frozen=True)
class LegacyDurability:
    """Client-observed durability: nodes to persist to and replicate to."""

    persist_to: int = 0
    replicate_to: int = 0

    def __post_init__(self) -> None:
        """Validate persist/replicate counts on creation."""
        if not 0 <= self.persist_to <= 4:
            raise ValueError(f"persist_to must be between 0 and 4, got {self.persist_to}")
        if not 0 <= self.replicate_to <= 3:
            raise ValueError(
                f"replicate_to must be between 0 and 3, got {self.replicate_to}"
            )

    @property
    def is_none(self) -> bool:
        return self.persist_to == 0 and self.replicate_to == 0


@dataclass(frozen=True)
class LevelDurability:
    """Server-enforced durability level."""

    level: DurabilityLevel


DurabilityPolicy: TypeAlias = LegacyDurability | LevelDurability


@dataclass(frozen=True)
class WriteOptions:
    """Options applied to every mutation: durability policy and timeout."""

    durability: DurabilityPolicy
    timeout: timedelta


@dataclass(frozen=True)
class ConnectionParams:
    """Everything needed to open the cluster connection."""

    host: str = "127.0.0.1"
    bucket: str = "ycsb"
    username: str = "Administrator"
    password: str = field(default="password", repr=False)
    kv_timeout_millis: int = 10000
    kv_endpoints: int = 1
    enable_mutation_tokens: bool = True

    @property
    def kv_timeout(self) -> timedelta:
        return timedelta(milliseconds=self.kv_timeout_millis)


@dataclass(frozen=True)
class ResolvedConfig:
    """Validated binding configuration, resolved once at init."""

    durability: DurabilityPolicy
    kv_timeout_millis: int
    connection: ConnectionParams

    @property
    def write_options(self) -> WriteOptions:
        return WriteOptions(
            durability=self.durability,
            timeout=timedelta(milliseconds=self.kv_timeout_millis),
        )
