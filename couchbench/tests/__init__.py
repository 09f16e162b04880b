"""Test suite for the couchbench binding.

Organized into three categories:

1. core/: Unit tests for core binding logic
   - No external dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for the Couchbase adapter
   - SDK objects are mocked; no cluster required
   - Skipped when the couchbase package is not installed

3. fakes/: Port implementations for testing
   - In-memory CollectionPort, ConnectionPort and Connector
"""
