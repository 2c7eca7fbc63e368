import argparse, logging, time
from typing import Optional, Sequence

from . import __version__
from .config import RepairConfig
from .errors import ConfigurationError, RepairError
from .eventlog import EventLog
from .logging_util import setup_logging
from .models import RunOutcome, RunResult
from .orchestrator import record_exit, run_once
from .reporting import print_schedule, print_status
from .schedule import DAY_NAMES

log = logging.getLogger(__name__)


def _start_logging(config: RepairConfig) -> None:
    log_status = setup_logging(config)
    log.info("== Cassandra node repair %s ==", __version__)
    log.info("Logging to stdout and writing logfile to: %s", config.log_file)
    log.info(log_status)


def _run(args) -> int:
    start = time.monotonic()
    try:
        config = RepairConfig.from_env()
    except ConfigurationError as e:
        # Still leave the terminal line and run/exit event behind, using the default locations
        config = RepairConfig.logging_only()
        _start_logging(config)
        log.error("%s: %s", type(e).__name__, e)
        print(f"Error: {e}")
        result = RunResult(RunOutcome.FAILURE, duration=time.monotonic() - start,
                           reason=f"{type(e).__name__}: {e}")
        record_exit(result, EventLog(config.events_file))
        return result.exit_code

    _start_logging(config)
    result = run_once(config, dry_run=args.dry_run)
    return result.exit_code


def _schedule(args) -> int:
    config = RepairConfig.from_env()
    setup_logging(config, to_file=False)
    print_schedule(config, day=args.day, output_json=args.json)
    return 0


def _status(args) -> int:
    config = RepairConfig.from_env()
    setup_logging(config, to_file=False)
    print_status(config, args.hostname)
    return 0
def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="repairtool",
        description="Leaderless, weekly-rotating Cassandra anti-entropy repair",
    )
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    # Subcommand for one repair cycle (meant to run from cron/systemd on every node)
    parser_run = subparsers.add_parser("run", help="Run one repair cycle on this node")
    parser_run.add_argument("--dry-run", "-n", action="store_true",
                            help="Fetch status and select modes, but do not start any repair")
    parser_run.set_defaults(func=_run)

    # Subcommand for the weekly rotation as seen from this node
    parser_schedule = subparsers.add_parser("schedule", help="Show which UN node is due on which day (read-only)")
    parser_schedule.add_argument("--day", choices=DAY_NAMES, default=None, help="Weekday to mark as due (default: today)")
    parser_schedule.add_argument("--json", nargs="?", const="-", metavar="FILE",
                                 help="Output JSON to stdout (no FILE) or write to FILE; skips table")
    parser_schedule.set_defaults(func=_schedule)

    # Subcommand for one node's repair status
    parser_status = subparsers.add_parser("status", help="Show the Percent Repaired of a node")
    parser_status.add_argument("hostname", help="Node address")
    parser_status.set_defaults(func=_status)

    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except RepairError as e:
        # `run` turns its own failures into a RunResult; this covers the read-only commands
        log.error("%s: %s", type(e).__name__, e)
        print(f"Error: {e}")
        return 1
