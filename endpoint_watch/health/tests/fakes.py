"""
Test doubles for the health package.
"""

from endpoint_watch.health.store import StatusStore


class MemoryStore(StatusStore):
    """In-memory StatusStore that records every write."""

    def __init__(self, entries=None):
        self.entries = dict(entries or {})
        self.puts = []

    def get(self, key):
        return self.entries.get(key)

    def put(self, key, value, expiration=None):
        self.puts.append((key, value, expiration))
        self.entries[key] = value
