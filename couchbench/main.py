"""Composition root for the couchbench binding.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

The ``couchbench`` command runs a smoke workload against a live cluster:
every worker thread gets its own binding instance (as a benchmark harness
would create them), all of them sharing one connection, and drives each
record through insert, read, update, read, delete and a final read.
"""

import json
import logging
import random
import string
import sys
from collections import Counter
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from couchbench.config import Settings, load_settings
from couchbench.core.errors import DBError
from couchbench.core.models import Record, Status
from couchbench.core.ports import DB

# (operation, expected status) for each step of a record's life
SMOKE_STEPS = (
    ("insert", Status.OK),
    ("read", Status.OK),
    ("update", Status.OK),
    ("read", Status.OK),
    ("delete", Status.OK),
    ("read", Status.NOT_FOUND),
)


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_dict["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_dict)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    logging.basicConfig(level=level, handlers=[handler])


def _random_values(field_count: int, field_length: int) -> dict[str, str]:
    alphabet = string.ascii_letters + string.digits
    return {
        f"field{i}": "".join(random.choices(alphabet, k=field_length))
        for i in range(field_count)
    }


def run_worker(db: DB, settings: Settings, worker_id: int) -> Counter[tuple[str, Status, Status]]:
    """Drive one binding instance through the smoke steps.

    Returns:
        Counter keyed by (operation, expected status, actual status).
    """
    outcomes: Counter[tuple[str, Status, Status]] = Counter()
    for n in range(settings.record_count):
        key = f"user{worker_id}-{n}"
        for operation, expected in SMOKE_STEPS:
            if operation == "insert" or operation == "update":
                record = Record(
                    settings.table,
                    key,
                    _random_values(settings.field_count, settings.field_length),
                )
                status = getattr(db, operation)(record.table, record.key, record.fields)
            elif operation == "read":
                status = db.read(settings.table, key).status
            else:
                status = db.delete(settings.table, key)
            outcomes[(operation, expected, status)] += 1
    return outcomes


def run_smoke(
    settings: Settings,
    client_factory: Callable[[Mapping[str, str]], DB],
) -> bool:
    """Run the smoke workload across ``settings.threads`` workers.

    Returns:
        True if every operation returned its expected status.

    Raises:
        DBError: If a binding fails to initialize.
    """
    logger = logging.getLogger(__name__)
    properties = settings.client_properties()
    clients = [client_factory(properties) for _ in range(settings.threads)]

    totals: Counter[tuple[str, Status, Status]] = Counter()
    try:
        with ThreadPoolExecutor(max_workers=settings.threads) as pool:
            # every worker initializes concurrently; only one connection is built
            list(pool.map(lambda db: db.init(), clients))
            futures = [
                pool.submit(run_worker, db, settings, worker_id)
                for worker_id, db in enumerate(clients)
            ]
            for future in futures:
                totals.update(future.result())
    finally:
        for db in clients:
            db.cleanup()

    ok = True
    for (operation, expected, actual), count in sorted(
        totals.items(), key=lambda item: (item[0][0], item[0][2].value)
    ):
        if actual is expected:
            logger.info(f"{operation}: {count} x {actual.value}")
        else:
            ok = False
            logger.warning(
                f"{operation}: {count} x {actual.value} (expected {expected.value})"
            )
    return ok


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Every operation returned its expected status
        1: Fatal configuration or connection error, or unexpected statuses
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)

    # Lazy import for the Couchbase SDK dependency
    from couchbench.adapters.couchbase import create_client

    logger.info(
        f"Running {settings.record_count} records x {settings.threads} threads "
        f"against table {settings.table}"
    )
    try:
        ok = run_smoke(settings, create_client)
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except DBError as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)

    if not ok:
        logger.error("Smoke run finished with unexpected statuses")
        sys.exit(1)
    logger.info("Smoke run finished")


if __name__ == "__main__":
    main()
