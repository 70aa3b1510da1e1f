"""
Health store - Lightweight key-value persistence for the last classification.

The prober and the status responder only need ``get``/``put`` with an
optional expiration, so any key-value service can stand in for StatusStore.
The default implementation keeps everything in a single JSON file.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# Store file structure
# {
#   "endpoint-status--<host>": {
#     "value": str,
#     "expiration": Optional[int],  # Unix seconds
#   }
# }


class StatusStore:
    """Key-value store interface used by the prober and status responder."""

    def get(self, key: str) -> Optional[str]:
        """Return the value under key, or None if absent or expired."""
        raise NotImplementedError

    def put(self, key: str, value: str, expiration: Optional[int] = None) -> None:
        """Store value under key, expiring at the given Unix time if set."""
        raise NotImplementedError


class JsonFileStore(StatusStore):
    """
    StatusStore backed by a JSON file.

    Expired entries are not removed eagerly; ``get`` treats them as absent and
    the next ``put`` on the same key overwrites them.
    """

    def __init__(self, store_dir: Optional[Path] = None, clock=time.time):
        """
        Initialize the store.

        Args:
            store_dir: Directory containing status.json. If None, uses .watch/
                       in the current working directory
            clock: Callable returning the current Unix time
        """
        if store_dir is None:
            store_dir = Path.cwd() / ".watch"
        self.store_dir = Path(store_dir)
        self.store_file = self.store_dir / "status.json"
        self.clock = clock

    def get(self, key: str) -> Optional[str]:
        entry = self._load().get(key)
        if not isinstance(entry, dict):
            return None

        expiration = entry.get("expiration")
        if expiration is None:
            return entry.get("value")

        if isinstance(expiration, bool) or not isinstance(expiration, (int, float)):
            logger.error(
                "Ignoring entry %s with malformed expiration: %r", key, expiration
            )
            return None

        if expiration <= self.clock():
            logger.debug("Entry %s expired at %s", key, expiration)
            return None

        return entry.get("value")

    def put(self, key: str, value: str, expiration: Optional[int] = None) -> None:
        entries = self._load()
        entries[key] = {"value": value, "expiration": expiration}
        self._save(entries)

    def _load(self) -> Dict[str, Any]:
        if not self.store_file.exists():
            logger.debug("Store file not found: %s. Starting fresh.", self.store_file)
            return {}

        try:
            with open(self.store_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except Exception as e:
            logger.error("Failed to load store: %s", e, exc_info=True)
            return {}

        if not isinstance(data, dict):
            logger.error("Ignoring malformed store file: %s", self.store_file)
            return {}
        return data

    def _save(self, entries: Dict[str, Any]) -> None:
        tmp_file = self.store_file.with_suffix(".json.tmp")
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_file, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2)
            # Atomic replace
            tmp_file.replace(self.store_file)
        except Exception as e:
            logger.error("Failed to save store: %s", e, exc_info=True)
            return

        logger.debug("Saved %d entries to %s", len(entries), self.store_file)


def open_store(store_dir: Optional[Path] = None) -> StatusStore:
    """Return the default store for a configured directory."""
    return JsonFileStore(store_dir)
