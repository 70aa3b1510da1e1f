"""
Health configuration - Loads and validates watch configuration.

Configuration comes from environment variables, optionally overridden by a
JSON file using the same keys. The result is an explicit WatchConfig value
that is passed to the prober, the status responder and the notifier.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_PORTS = {"http": 80, "https": 443}

# Recognized keys
# {
#   "TARGET_URL": str,                   # required, absolute http(s) URL
#   "TIMEOUT_MS": int,                   # probe deadline, default 5000
#   "SLACK_WEBHOOK_URL": Optional[str],  # disables notification if absent
#   "RESET_HOURS_IN_UTC": Optional[int], # 0-23, disables expiry if absent
#   "STATUS_STORE_DIR": Optional[str],   # JSON store directory, default .watch/
# }
CONFIG_KEYS = (
    "TARGET_URL",
    "TIMEOUT_MS",
    "SLACK_WEBHOOK_URL",
    "RESET_HOURS_IN_UTC",
    "STATUS_STORE_DIR",
)


class ConfigError(ValueError):
    """Raised when the configuration cannot describe a target to watch."""


@dataclass(frozen=True)
class WatchConfig:
    """Validated configuration for one watched target."""

    target_url: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    slack_webhook_url: Optional[str] = None
    reset_hour: Optional[int] = None
    store_dir: Optional[Path] = None

    @property
    def target_host(self) -> str:
        """Host component of the target URL, see url_host."""
        return url_host(self.target_url)

    @property
    def status_key(self) -> str:
        """Storage key shared by the prober and the status responder."""
        return status_key_for(self.target_host)


def url_host(url: str) -> str:
    """
    Host of a URL as a browser reports it.

    Userinfo is dropped, the hostname is lowercased and the port is kept only
    when it is not the default for the scheme.

    Args:
        url: Absolute URL

    Returns:
        Host such as ``httpbin.org`` or ``localhost:8080``

    Raises:
        ValueError: If the URL carries an invalid port
    """
    parsed = urlparse(url)
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"

    port = parsed.port
    if port is not None and port != DEFAULT_PORTS.get(parsed.scheme):
        host = f"{host}:{port}"
    return host


def status_key_for(host: str) -> str:
    """
    Build the storage key for a target host.

    Args:
        host: Host component of the target URL

    Returns:
        Key of the form ``endpoint-status--<host with dots as dashes>``
    """
    return "endpoint-status--" + host.replace(".", "-")


def load_config(
    config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> WatchConfig:
    """
    Load watch configuration from the environment and an optional JSON file.

    Args:
        config_path: Path to a JSON object with the same keys as the
                     environment variables. Its values win over the environment.
        environ: Mapping to read instead of os.environ

    Returns:
        Validated WatchConfig

    Raises:
        ConfigError: If TARGET_URL is missing or invalid, or the file is unusable
    """
    if environ is None:
        environ = os.environ

    raw: dict = {key: environ[key] for key in CONFIG_KEYS if key in environ}

    if config_path is not None:
        raw.update(_load_config_file(config_path))

    config = _validate_config(raw)
    logger.debug(
        "Loaded watch config for %s (timeout=%dms, webhook=%s, reset_hour=%s)",
        config.target_host,
        config.timeout_ms,
        "set" if config.slack_webhook_url else "unset",
        config.reset_hour,
    )
    return config


def _load_config_file(config_path: str) -> dict:
    config_file = Path(config_path)
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {config_path}")

    unknown = set(data) - set(CONFIG_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))

    return {key: data[key] for key in CONFIG_KEYS if key in data}


def _validate_config(raw: Mapping[str, Any]) -> WatchConfig:
    """
    Validate raw configuration values.

    Only the target URL is mandatory; malformed optional values fall back to
    their default (feature disabled) instead of failing.
    """
    target_url = raw.get("TARGET_URL")
    if not target_url or not isinstance(target_url, str):
        raise ConfigError("Missing required setting: TARGET_URL")

    parsed = urlparse(target_url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ConfigError(f"TARGET_URL must be an absolute http(s) URL: {target_url}")
    try:
        parsed.port
    except ValueError:
        raise ConfigError(f"TARGET_URL has an invalid port: {target_url}")

    webhook_url = raw.get("SLACK_WEBHOOK_URL") or None
    store_dir = raw.get("STATUS_STORE_DIR") or None

    return WatchConfig(
        target_url=target_url,
        timeout_ms=parse_timeout_ms(raw.get("TIMEOUT_MS")),
        slack_webhook_url=webhook_url,
        reset_hour=parse_reset_hour(raw.get("RESET_HOURS_IN_UTC")),
        store_dir=Path(store_dir) if store_dir else None,
    )


def parse_timeout_ms(value: Any) -> int:
    """
    Parse the probe timeout in milliseconds.

    Returns:
        The parsed value, or DEFAULT_TIMEOUT_MS if absent or not a positive integer
    """
    if value is None or value == "":
        return DEFAULT_TIMEOUT_MS
    try:
        timeout_ms = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid TIMEOUT_MS %r, using %d", value, DEFAULT_TIMEOUT_MS)
        return DEFAULT_TIMEOUT_MS
    if timeout_ms <= 0:
        logger.warning("Invalid TIMEOUT_MS %r, using %d", value, DEFAULT_TIMEOUT_MS)
        return DEFAULT_TIMEOUT_MS
    return timeout_ms


def parse_reset_hour(value: Any) -> Optional[int]:
    """
    Parse the UTC reset hour.

    Returns:
        Hour 0-23, or None (expiry disabled) if absent or malformed
    """
    if value is None or value == "":
        return None
    try:
        hour = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric RESET_HOURS_IN_UTC: %r", value)
        return None
    if not 0 <= hour <= 23:
        logger.warning("Ignoring out-of-range RESET_HOURS_IN_UTC: %r", value)
        return None
    return hour
