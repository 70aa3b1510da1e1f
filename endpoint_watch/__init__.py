"""Endpoint Watch - HTTP endpoint watchdog with Slack transition alerts."""

__version__ = "0.1.0"
