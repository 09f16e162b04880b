"""External adapters for the couchbench binding.

This package contains all external dependencies (the Couchbase SDK)
and provides implementations of the core port interfaces.

Adapter Organization:

- couchbase/: Cluster connection and collection access via the Couchbase SDK
"""
