"""
Health module - Watchdog for a single HTTP endpoint.

This module probes the watched target, keeps its last health classification
in a key-value store, and sends Slack notifications on state transitions.
"""

from endpoint_watch.health.config import load_config
from endpoint_watch.health.runner import run_probe
from endpoint_watch.health.status import render_status

__all__ = ["load_config", "render_status", "run_probe"]
