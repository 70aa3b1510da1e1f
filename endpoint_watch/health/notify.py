"""
Health notifications - Slack webhook message for state transitions.

This module renders the transition message and posts it to the configured
Slack Incoming Webhook. Delivery is best-effort: failures are logged and
reported through the return value, never raised.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests  # type: ignore

from endpoint_watch.health.checks import Health
from endpoint_watch.health.config import WatchConfig

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT_SECONDS = 10

COLOR_MAP = {
    Health.OK: "#008888",
    Health.ERROR: "#FF8800",
    Health.FAILED: "#880000",
}
EMOJI_MAP = {
    Health.OK: ":white_check_mark:",
    Health.ERROR: ":warning:",
    Health.FAILED: ":x:",
}
ALERT_LEVELS = (Health.ERROR, Health.FAILED)


def color_of(health: Optional[Health]) -> str:
    """Attachment color for a classification, gray when unknown."""
    return COLOR_MAP.get(health, "gray")  # type: ignore[arg-type]


def emoji_of(health: Optional[Health]) -> str:
    """Headline emoji for a classification, question mark when unknown."""
    return EMOJI_MAP.get(health, ":question:")  # type: ignore[arg-type]


def _label(health: Optional[Health]) -> str:
    return health.value if health is not None else "unknown"


def build_payload(
    host: str,
    target_url: str,
    health: Optional[Health],
    result_message: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the Slack message for a transition.

    Args:
        host: Target host
        target_url: Target URL
        health: New classification
        result_message: Probe result ("200 (OK)", "Timeout", ...)
        now: Time of the transition, defaults to the current UTC time

    Returns:
        Payload dict ready to be sent as JSON. ``text`` is only present for
        ERROR and FAILED, so that only those ping the channel.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    label = _label(health)
    unix_time = int(now.timestamp())
    iso_time = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    iso_time = iso_time.replace("+00:00", "Z")

    payload: Dict[str, Any] = {
        "attachments": [
            {
                "color": color_of(health),
                "blocks": [
                    {
                        "type": "section",
                        "text": {
                            "type": "mrkdwn",
                            "text": f"{emoji_of(health)} *{host} is {label}*",
                        },
                    },
                    {
                        "type": "section",
                        "fields": [
                            {"type": "mrkdwn", "text": f"*Target URL*\n{target_url}"},
                            {"type": "mrkdwn", "text": f"*Result*\n{result_message}"},
                        ],
                    },
                    {
                        "type": "context",
                        "elements": [
                            {
                                "type": "mrkdwn",
                                "text": (
                                    f"<!date^{unix_time}"
                                    "^{date_short_pretty} {time_secs}"
                                    f"|{iso_time}>"
                                ),
                            }
                        ],
                    },
                ],
            }
        ],
    }

    if health in ALERT_LEVELS:
        payload["text"] = f"<!channel> {host} is {label}"

    return payload


def notify(
    config: WatchConfig,
    host: str,
    target_url: str,
    health: Optional[Health],
    result_message: str,
    now: Optional[datetime] = None,
) -> bool:
    """
    Send a transition notification to the configured Slack webhook.

    Args:
        config: Watch configuration (webhook URL)
        host: Target host
        target_url: Target URL
        health: New classification
        result_message: Probe result message
        now: Time of the transition

    Returns:
        True if the webhook accepted the message, False if no webhook is
        configured or delivery failed
    """
    if not config.slack_webhook_url:
        logger.debug("No Slack webhook configured, skipping notification")
        return False

    payload = build_payload(host, target_url, health, result_message, now=now)
    return _send_slack_webhook(config.slack_webhook_url, payload)


def _send_slack_webhook(webhook_url: str, payload: Dict[str, Any]) -> bool:
    """
    Post a payload to a Slack Incoming Webhook.

    Args:
        webhook_url: Slack webhook URL
        payload: Message payload

    Returns:
        True if sent successfully, False otherwise
    """
    try:
        response = requests.post(
            webhook_url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=WEBHOOK_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except Exception as e:
        logger.error("Failed to send Slack webhook: %s", e, exc_info=True)
        return False

    logger.info("Sent Slack notification")
    return True
