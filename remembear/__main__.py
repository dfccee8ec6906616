"""
Remembear runner

Usage:
    python -m remembear start --snapshot data/remembear.json
"""
import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import List, Optional, TextIO

from .config import ConfigError, Settings, load_env_file, setup_logging
from .integrations import IntegrationManager
from .scheduler import Scheduler, SchedulerError
from .schedule import ScheduleError
from .snapshot import Snapshot, SnapshotError, load_snapshot

logger = logging.getLogger("remembear.runner")

QUEUE_EMPTY = "Scheduler queue is empty"
STOPPED = "Scheduler stopped"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="remembear", description="CLI tool for recurring reminders")
    commands = parser.add_subparsers(dest="command", required=True)

    start = commands.add_parser("start", help="Start the scheduler")
    start.add_argument("--snapshot", help="JSON file with users and reminders")
    start.add_argument("--config", help="JSON config file")
    return parser


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Settings from a config file or defaults, with environment overrides."""
    if config_path is None:
        return Settings.from_env()
    load_env_file()
    settings = Settings.load(config_path)
    settings.apply_env(os.environ)
    return settings


async def start(
    settings: Settings,
    snapshot: Snapshot,
    stop_event: Optional[asyncio.Event] = None,
    stream: Optional[TextIO] = None,
) -> str:
    """
    Run the scheduler over a snapshot.

    Returns:
        Message describing why the scheduler returned
    """
    users = snapshot.user_directory()
    integrations = IntegrationManager.from_settings(
        settings, preferences=snapshot.preferences, stream=stream
    )
    scheduler = Scheduler(snapshot.to_reminders(), users, integrations)

    logger.info(
        f"Starting scheduler with {len(scheduler.reminders)} reminder(s), "
        f"{len(integrations)} integration(s)"
    )
    await scheduler.run(stop_event)

    return QUEUE_EMPTY if scheduler.is_idle() else STOPPED


async def _serve(settings: Settings, snapshot: Snapshot) -> str:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop_event.set)
        except (NotImplementedError, RuntimeError):
            logger.debug(f"Signal {signum} handler unavailable on this platform")
    return await start(settings, snapshot, stop_event)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 1

    setup_logging(settings.log_level, settings.json_logs, settings.log_file)

    try:
        snapshot = load_snapshot(args.snapshot or settings.snapshot_path)
        print(asyncio.run(_serve(settings, snapshot)))
    except (SnapshotError, ScheduleError, SchedulerError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(e, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
