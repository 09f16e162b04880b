"""Durability policy resolution.

Two mutually exclusive ways of asking for durable writes exist:

- Legacy: the client observes the write being persisted to and/or
  replicated to a number of nodes (``persistTo`` / ``replicateTo``).
- Level: the server enforces a durability level (``durability``).

A configured level always wins; the legacy counts are then ignored.
"""

from .errors import ConfigurationError
from .models import DurabilityLevel, DurabilityPolicy, LegacyDurability, LevelDurability

MAX_PERSIST_TO = 4
MAX_REPLICATE_TO = 3


def _check_range(key: str, value: int, upper: int) -> int:
    if not 0 <= value <= upper:
        raise ConfigurationError(
            f'"couchbase.{key}" must be between 0 and {upper}', key=key
        )
    return value


def parse_persist_to(value: int) -> int:
    """Validate a legacy persist count (0-4)."""
    return _check_range("persistTo", value, MAX_PERSIST_TO)


def parse_replicate_to(value: int) -> int:
    """Validate a legacy replicate count (0-3)."""
    return _check_range("replicateTo", value, MAX_REPLICATE_TO)


def parse_durability_level(value: int) -> DurabilityLevel:
    """Map a configured level (0-3) onto a DurabilityLevel."""
    _check_range("durability", value, int(max(DurabilityLevel)))
    return DurabilityLevel(value)


def resolve_durability(
    level: int | None = None,
    persist_to: int = 0,
    replicate_to: int = 0,
) -> DurabilityPolicy:
    """Select the durability policy for the lifetime of a binding.

    Args:
        level: Configured durability level, or None when unset.
        persist_to: Legacy persist count, used only when level is None.
        replicate_to: Legacy replicate count, used only when level is None.

    Returns:
        LevelDurability if a level is configured, LegacyDurability otherwise.

    Raises:
        ConfigurationError: If the value in effect is out of range.
    """
    if level is not None:
        return LevelDurability(level=parse_durability_level(level))
    return LegacyDurability(
        persist_to=parse_persist_to(persist_to),
        replicate_to=parse_replicate_to(replicate_to),
    )


def describe(policy: DurabilityPolicy) -> str:
    """Human-readable summary of a policy for log lines."""
    if isinstance(policy, LevelDurability):
        return f"level={policy.level.name}"
    return f"persist_to={policy.persist_to} replicate_to={policy.replicate_to}"
