"""
Shared test fixtures.
"""

import pytest

from endpoint_watch.health.config import WatchConfig
from endpoint_watch.health.tests.fakes import MemoryStore


@pytest.fixture
def memory_store():
    """Empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def watch_config():
    """Configuration watching httpbin.org with a Slack webhook."""
    return WatchConfig(
        target_url="https://httpbin.org",
        timeout_ms=5000,
        slack_webhook_url="https://hooks.slack.com/services/T000/B000/XXXX",
    )
