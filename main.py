#!/usr/bin/env python3
"""
certkeeper - automated TLS certificate management.

Usage:
    python main.py run <config.yaml>
    python main.py status [--json]
    python main.py serve [--host <host>] [--port <port>]
    python main.py version
"""

import argparse
import json
import logging
import sys
from datetime import timedelta

from dotenv import load_dotenv
load_dotenv()  # Load .env file if present

from config.settings import (
    CERTS_DIR,
    CHECK_INTERVAL_HOURS,
    COMMIT,
    LOG_FORMAT,
    LOG_LEVEL,
    STATE_DB_PATH,
    VERSION,
    WEB_HOST,
    WEB_PORT,
)
from tracker.errors import StorageError
from tracker.reports import format_status_table
from web.services import get_orchestrator, get_state_store, get_status_reporter

logger = logging.getLogger("certkeeper")


# ============================================================
# Commands
# ============================================================

def cmd_run(args):
    """Run the certificate manager as a continuous daemon."""
    from tracker.scheduler import CycleDriver

    store = get_state_store()
    logger.info("Starting certificate manager daemon...")
    logger.info("State store path: %s", STATE_DB_PATH)
    logger.info("Certs path: %s", CERTS_DIR)

    driver = CycleDriver(get_orchestrator(store), args.config)
    driver.run_forever(timedelta(hours=CHECK_INTERVAL_HOURS))
    return 0


def cmd_status(args):
    """Display the status of all managed certificates."""
    reporter = get_status_reporter(get_state_store())
    rows = reporter.report()
    if args.json:
        print(json.dumps([row.to_dict() for row in rows], indent=2))
    else:
        print(format_status_table(rows))
    return 0


def cmd_serve(args):
    """Serve the read-only status API."""
    from web import create_app

    get_state_store()  # fail fast if the store is unusable
    app = create_app()
    app.run(host=args.host, port=args.port)
    return 0


def cmd_version(args):
    print(f"certkeeper version: {VERSION}, commit: {COMMIT}")
    return 0


# ============================================================
# Parser
# ============================================================

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="certkeeper",
        description="A daemon for automated TLS certificate management.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    run = subparsers.add_parser("run", help="Run the certificate manager as a continuous daemon")
    run.add_argument("config", help="Path to the YAML configuration file")
    run.set_defaults(func=cmd_run)

    status = subparsers.add_parser("status", help="Display the status of all managed certificates")
    status.add_argument("--json", action="store_true", help="Output as JSON")
    status.set_defaults(func=cmd_status)

    serve = subparsers.add_parser("serve", help="Serve the read-only status API")
    serve.add_argument("--host", default=WEB_HOST, help="Bind address")
    serve.add_argument("--port", type=int, default=WEB_PORT, help="Bind port")
    serve.set_defaults(func=cmd_serve)

    version = subparsers.add_parser("version", help="Display the build version and commit hash")
    version.set_defaults(func=cmd_version)

    return parser


def main(argv=None):
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help(sys.stderr)
        return 1

    try:
        return args.func(args)
    except StorageError as e:
        logger.error("State store setup failed: %s", e)
        return 1
    except OSError as e:
        logger.error("Setup failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
