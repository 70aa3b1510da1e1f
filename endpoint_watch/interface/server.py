"""
Status server - HTTP endpoint answering with the target's last known status.

Every request, whatever the method or path, returns 200 with a plain-text
body such as ``httpbin.org is healthy``.
"""

import logging
from typing import Optional

from flask import Flask, Response

from endpoint_watch.health.config import WatchConfig
from endpoint_watch.health.status import render_status
from endpoint_watch.health.store import StatusStore

logger = logging.getLogger(__name__)

ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: WatchConfig, status_store: Optional[StatusStore] = None
) -> Flask:
    """
    Build the status application.

    Args:
        config: Watch configuration
        status_store: Store to read from. If None, uses the JSON file store
                      in config.store_dir

    Returns:
        Flask application
    """
    app = Flask(__name__)

    @app.route("/", defaults={"path": ""}, methods=ANY_METHOD)
    @app.route("/<path:path>", methods=ANY_METHOD)
    def status(path: str) -> Response:
        body = render_status(config, status_store)
        logger.debug("Status query /%s -> %s", path, body)
        return Response(body, status=200, mimetype="text/plain")

    return app
