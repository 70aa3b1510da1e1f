"""
Health checks - Probe the target and classify the outcome.

This module provides the health classification and the bounded-time HTTP
probe that produces it.
"""

import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests  # type: ignore

logger = logging.getLogger(__name__)


class Health(str, Enum):
    """
    Health classification of the target.

    The value is the tag persisted in the store and shown by the status
    responder. "Unknown" is not a member: it is the absence of a
    classification (None).
    """

    OK = "healthy"
    ERROR = "unhealthy"
    FAILED = "dead"


@dataclass(frozen=True)
class ProbeResult:
    """Classification of one probe plus a human-readable result message."""

    health: Health
    message: str


def parse_health(value: Optional[str]) -> Optional[Health]:
    """
    Parse a stored tag into a classification.

    Args:
        value: Stored tag, or None if nothing is stored

    Returns:
        Matching Health member, or None for absent or unrecognized values
    """
    if value is None:
        return None
    try:
        return Health(value)
    except ValueError:
        logger.warning("Unrecognized stored health value: %r", value)
        return None


def check_status(status_code: int) -> bool:
    """
    Check if HTTP status code is successful.

    Args:
        status_code: HTTP status code

    Returns:
        True if status code is 200-299
    """
    return 200 <= status_code < 300


def classify_response(response: requests.Response) -> ProbeResult:
    """Classify a response that arrived before the deadline."""
    health = Health.OK if check_status(response.status_code) else Health.ERROR
    return ProbeResult(health, f"{response.status_code} ({response.reason})")


def _fetch_into(future: Future, url: str) -> None:
    if not future.set_running_or_notify_cancel():
        return
    try:
        future.set_result(requests.get(url, allow_redirects=True))
    except Exception as e:  # handed to the waiting caller
        future.set_exception(e)


def probe(url: str, timeout_ms: int) -> ProbeResult:
    """
    GET the target once, bounded by a deadline.

    The request runs in a daemon thread and the caller waits at most
    ``timeout_ms`` for it. When the deadline passes first the request is
    abandoned, not cancelled: the thread keeps running until the request
    finishes on its own and its result is discarded.

    Args:
        url: Target URL
        timeout_ms: Deadline in milliseconds

    Returns:
        ProbeResult. Network errors and the deadline produce Health.FAILED;
        nothing is raised.
    """
    future: Future = Future()
    worker = threading.Thread(
        target=_fetch_into, args=(future, url), name="probe", daemon=True
    )
    worker.start()

    try:
        response = future.result(timeout=timeout_ms / 1000.0)
    except FutureTimeoutError:
        logger.error("Probe of %s timed out after %dms", url, timeout_ms)
        return ProbeResult(Health.FAILED, "Timeout")
    except Exception as e:
        logger.error("Probe of %s failed: %s", url, e)
        return ProbeResult(Health.FAILED, str(e) or e.__class__.__name__)

    result = classify_response(response)
    logger.info("Probe of %s: %s", url, result.message)
    return result
