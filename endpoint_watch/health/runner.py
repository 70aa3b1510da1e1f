"""
Health runner - One scheduled probe of the watched target.

This module coordinates probing, comparing with the stored classification,
notifying on transitions and persisting the new classification.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from endpoint_watch.health import checks, notify, store
from endpoint_watch.health.checks import Health
from endpoint_watch.health.config import WatchConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeOutcome:
    """What one run of the prober observed and did."""

    host: str
    key: str
    previous: Optional[Health]
    current: Health
    message: str
    changed: bool
    notified: bool = False
    expiration: Optional[int] = None


def run_probe(
    config: WatchConfig,
    status_store: Optional[store.StatusStore] = None,
    now: Optional[datetime] = None,
) -> ProbeOutcome:
    """
    Probe the target once and record a transition if the classification changed.

    Args:
        config: Watch configuration
        status_store: Store holding the last classification. If None, uses the
                      JSON file store in config.store_dir
        now: Current time, used for the notification timestamp and expiration

    Returns:
        ProbeOutcome describing the run. Probe failures are reported as
        Health.FAILED, never raised.
    """
    if status_store is None:
        status_store = store.open_store(config.store_dir)
    if now is None:
        now = datetime.now(timezone.utc)

    host = config.target_host
    key = config.status_key

    previous = checks.parse_health(status_store.get(key))
    result = checks.probe(config.target_url, config.timeout_ms)

    if result.health == previous:
        logger.info("%s is still %s (%s)", host, result.health.value, result.message)
        return ProbeOutcome(
            host=host,
            key=key,
            previous=previous,
            current=result.health,
            message=result.message,
            changed=False,
        )

    logger.info(
        "%s changed from %s to %s (%s)",
        host,
        previous.value if previous is not None else "unknown",
        result.health.value,
        result.message,
    )

    notified = notify.notify(
        config, host, config.target_url, result.health, result.message, now=now
    )

    expiration = next_expiration(config.reset_hour, now)
    status_store.put(key, result.health.value, expiration=expiration)

    return ProbeOutcome(
        host=host,
        key=key,
        previous=previous,
        current=result.health,
        message=result.message,
        changed=True,
        notified=notified,
        expiration=expiration,
    )


def next_expiration(reset_hour: Optional[int], now: datetime) -> Optional[int]:
    """
    Compute when a stored classification should expire.

    Args:
        reset_hour: UTC hour of day (0-23), or None to disable expiry
        now: Current time (timezone-aware)

    Returns:
        Unix seconds of the next occurrence of reset_hour:00:00 UTC strictly
        after now, or None if expiry is disabled
    """
    if reset_hour is None:
        return None

    now_utc = now.astimezone(timezone.utc)
    reset_at = now_utc.replace(hour=reset_hour, minute=0, second=0, microsecond=0)
    # Hour already passed today
    if reset_at <= now_utc:
        reset_at += timedelta(days=1)
    return int(reset_at.timestamp())
