#!/usr/bin/env python3
"""
Civic Data ETL Service
======================

Long-running process that enriches the civic database on a schedule.

Usage:
    python etl.py

The service will:
1. Load configuration from the environment (.env is honoured)
2. Exit with status 1 if the database settings are missing
3. Register the candidate, bill, embedding and news jobs on cron triggers
4. Block until SIGINT/SIGTERM, then shut the scheduler down and exit 0

Individual jobs can be run once with `flask run-job <name>`.
"""

import sys
import os
import signal
import logging

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import create_app
from app.errors import ConfigurationError
from app.scheduler import init_scheduler, start_scheduler, shutdown_scheduler

logger = logging.getLogger('etl')


def main():
    try:
        app = create_app()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Missing configuration: {e}. Please check your environment variables.")
        return 1

    init_scheduler(app, blocking=True)

    def handle_stop(signum, frame):
        logger.info("ETL service stopping...")
        shutdown_scheduler()

    signal.signal(signal.SIGTERM, handle_stop)
    signal.signal(signal.SIGINT, handle_stop)

    try:
        start_scheduler()
    except (KeyboardInterrupt, SystemExit):
        shutdown_scheduler()

    logger.info("ETL service stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
