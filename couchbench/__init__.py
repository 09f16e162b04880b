"""couchbench: a Couchbase binding for key-value benchmark harnesses."""

__version__ = "0.1.0"
