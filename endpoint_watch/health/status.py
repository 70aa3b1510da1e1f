"""
Health status - Plain-text rendering of the last stored classification.
"""

import logging
from typing import Optional

from endpoint_watch.health import checks, store
from endpoint_watch.health.config import WatchConfig

logger = logging.getLogger(__name__)


def render_status(
    config: WatchConfig, status_store: Optional[store.StatusStore] = None
) -> str:
    """
    Render the stored classification of the target.

    Args:
        config: Watch configuration
        status_store: Store holding the last classification. If None, uses the
                      JSON file store in config.store_dir

    Returns:
        ``"<host> is <status>"``, with ``unknown`` when nothing is stored
    """
    if status_store is None:
        status_store = store.open_store(config.store_dir)

    health = checks.parse_health(status_store.get(config.status_key))
    label = health.value if health is not None else "unknown"
    return f"{config.target_host} is {label}"
