"""Core domain logic for the couchbench binding.

This package contains zero external dependencies and represents
the pure binding logic: durability policy resolution, the shared
connection lifecycle and the CRUD translation layer. The store SDK
is reached only through the ports in ``ports``.
"""

from .models import (
    ConnectionParams,
    DurabilityLevel,
    DurabilityPolicy,
    LegacyDurability,
    LevelDurability,
    ReadResult,
    Record,
    ResolvedConfig,
    Status,
    WriteOptions,
)

__all__ = [
    "ConnectionParams",
    "DurabilityLevel",
    "DurabilityPolicy",
    "LegacyDurability",
    "LevelDurability",
    "ReadResult",
    "Record",
    "ResolvedConfig",
    "Status",
    "WriteOptions",
]
