#!/usr/bin/env python3
"""
Endpoint Watch CLI - Command-line interface for endpoint monitoring.

Usage:
    python -m endpoint_watch.interface.watch probe [--config watch.json]
    python -m endpoint_watch.interface.watch status
    python -m endpoint_watch.interface.watch serve [--host 0.0.0.0] [--port 8080]

Configuration is read from the environment (TARGET_URL, TIMEOUT_MS,
SLACK_WEBHOOK_URL, RESET_HOURS_IN_UTC, STATUS_STORE_DIR), optionally
overridden by a JSON file given with --config.

Exit codes for probe:
    0: Target is healthy
    1: Configuration error
    2: Target is unhealthy (non-2xx response)
    3: Target is dead (timeout or network failure)
"""

import argparse
import logging
import sys
from typing import List, Optional

from endpoint_watch.health import load_config, render_status, run_probe
from endpoint_watch.health.checks import Health
from endpoint_watch.health.config import ConfigError
from endpoint_watch.interface.server import create_app

EXIT_CODES = {Health.OK: 0, Health.ERROR: 2, Health.FAILED: 3}


def setup_logging(verbose: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="endpoint-watch",
        description="Watch a single HTTP endpoint and report state transitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes (probe):
  0  - Target is healthy
  1  - Configuration error
  2  - Target is unhealthy
  3  - Target is dead

Examples:
  TARGET_URL=https://httpbin.org endpoint-watch probe
  endpoint-watch --config watch.json status
  endpoint-watch serve --port 8080
        """,
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to a JSON config file (keys as the environment variables)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "probe", help="Probe the target once and notify on a transition"
    )
    subparsers.add_parser("status", help="Print the last stored status")

    serve = subparsers.add_parser("serve", help="Serve the status over HTTP")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8080, help="Bind port")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code, see module docstring
    """
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    if args.command == "status":
        print(render_status(config))
        return 0

    if args.command == "serve":
        logger.info(
            "Serving status of %s on %s:%d", config.target_host, args.host, args.port
        )
        create_app(config).run(host=args.host, port=args.port)
        return 0

    logger.info("Probing %s", config.target_url)
    try:
        outcome = run_probe(config)
    except KeyboardInterrupt:
        logger.error("Probe interrupted by user")
        return 130
    except Exception as e:
        logger.error("Probe failed: %s", e, exc_info=True)
        return 3

    logger.info(
        "Probe completed: %s is %s%s",
        outcome.host,
        outcome.current.value,
        " (changed)" if outcome.changed else "",
    )
    return EXIT_CODES[outcome.current]


if __name__ == "__main__":
    sys.exit(main())
