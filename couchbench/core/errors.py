"""Error taxonomy for the couchbench binding.

Only configuration and connection problems are raised to the harness, and
only from ``init``. Failures of individual operations never leave the
binding as exceptions; they are reported as ``Status.ERROR``.
"""


class DBError(Exception):
    """Base class for errors the harness treats as fatal."""


class ConfigurationError(DBError):
    """A configuration property is malformed or out of range."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class StoreConnectionError(DBError):
    """The store connection could not be established or is not open."""
