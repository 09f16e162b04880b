"""Document ID derivation.

Every operation addresses a record as ``<table>:<key>``. The separator is
not escaped, so callers must keep it out of table names; otherwise two
distinct (table, key) pairs can map onto the same document.
"""

KEY_SEPARATOR = ":"


def format_id(table: str, key: str) -> str:
    """Turn a table and key into the store document ID."""
    return f"{table}{KEY_SEPARATOR}{key}"
