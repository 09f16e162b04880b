"""Couchbase cluster connection adapter.

Opens the cluster, waits for it to be ready and exposes the default
collection of the configured bucket. Implements ConnectionPort; ``connect``
is the Connector handed to ConnectionManager.
"""

import logging
from datetime import timedelta

from couchbase.auth import PasswordAuthenticator
from couchbase.cluster import Cluster
from couchbase.options import ClusterOptions, ClusterTimeoutOptions

from couchbench.core.models import ConnectionParams
from couchbench.core.ports import CollectionPort, ConnectionPort

from .collection import CouchbaseCollection

logger = logging.getLogger(__name__)

READY_TIMEOUT = timedelta(seconds=10)


class CouchbaseConnection(ConnectionPort):
    """A connected cluster and the default collection of one bucket."""

    def __init__(self, cluster: Cluster, bucket_name: str):
        self._cluster = cluster
        self._collection = CouchbaseCollection(
            cluster.bucket(bucket_name).default_collection()
        )

    @property
    def collection(self) -> CollectionPort:
        return self._collection

    def close(self) -> None:
        self._cluster.close()


def connection_string(host: str) -> str:
    """Connection string for a host, passing full URLs through unchanged."""
    if "://" in host:
        return host
    return f"couchbase://{host}"


def connect(params: ConnectionParams) -> CouchbaseConnection:
    """Open a cluster connection.

    Raises:
        CouchbaseException: If the cluster is unreachable, authentication
            fails or the bucket does not become ready in time.
    """
    options = ClusterOptions(
        PasswordAuthenticator(params.username, params.password),
        timeout_options=ClusterTimeoutOptions(kv_timeout=params.kv_timeout),
        enable_mutation_tokens=params.enable_mutation_tokens,
    )
    if params.kv_endpoints != 1:
        # the SDK sizes its KV connections itself
        logger.info(f"kvEndpoints={params.kv_endpoints} is not configurable, ignoring")

    cluster = Cluster(connection_string(params.host), options)
    try:
        cluster.wait_until_ready(READY_TIMEOUT)
        connection = CouchbaseConnection(cluster, params.bucket)
    except Exception:
        cluster.close()
        raise
    logger.info(f"Opened bucket {params.bucket} on {params.host}")
    return connection
