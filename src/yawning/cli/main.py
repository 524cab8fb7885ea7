"""
Command-line interface for Yawning.

Yawning lets a heterogeneous-core machine take a nap: it keeps ordinary
processes on efficiency cores and, in balance mode, moves hot processes to
performance cores while the system is under heavy load.

    yawning start [options]   Start the background power-saving loop
    yawning stop              Stop the running instance and clean the PID file
    yawning help              Show this help message
    yawning run [options]     Run the loop in the foreground

Running `yawning` without a command is equivalent to `yawning start`.
"""

import argparse
import dataclasses
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from ..config import apply_scheduler_overrides, get_config, get_config_path, set_config_path
from ..models.config import AppConfig, SchedulerConfig, SelectionMode
from ..orchestration import run_worker, start_daemon, stop_daemon
from ..system.affinity import create_hinter
from ..validation import ValidationError, handle_cli_error

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

COMMANDS = ["start", "stop", "help", "run"]

EPILOG = """\
examples:
  start with defaults (global scan, foreground tracking, balance mode):
    sudo yawning start
  only manage browsers and Electron apps:
    sudo yawning start -p "Google Chrome" -p "Electron" -B -b 80 -c 150 -f
  stop the background loop:
    sudo yawning stop

Any -p pattern disables the global scan, whatever the order of -g and -p.
Depending on your security settings, some operations may require sudo.
"""


class ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors with exit code 1, like other configuration errors."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="yawning",
        description="Let your machine take a nap: steer processes between efficiency and performance cores.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="start",
        choices=COMMANDS,
        help="Action to perform (default: start).",
    )
    parser.add_argument(
        "-p",
        "--pattern",
        dest="patterns",
        action="append",
        metavar="PATTERN",
        help="Process name pattern to manage (repeatable). Disables the global scan.",
    )
    parser.add_argument(
        "-g",
        "--global",
        dest="global_scan",
        action="store_true",
        help="Global scan: manage all processes not owned by root or service accounts.",
    )
    foreground = parser.add_mutually_exclusive_group()
    foreground.add_argument(
        "-f",
        "--foreground",
        dest="track_foreground",
        action="store_const",
        const=True,
        help="Also assign the current frontmost app to efficiency cores.",
    )
    foreground.add_argument(
        "--no-foreground",
        dest="track_foreground",
        action="store_const",
        const=False,
        help="Do not track the frontmost app.",
    )
    balance = parser.add_mutually_exclusive_group()
    balance.add_argument(
        "-B",
        "--balance",
        dest="balance_mode",
        action="store_const",
        const=True,
        help="Balance mode: under heavy load, move hot processes to performance cores.",
    )
    balance.add_argument(
        "--no-balance",
        dest="balance_mode",
        action="store_const",
        const=False,
        help="Disable balance mode.",
    )
    parser.add_argument(
        "-b",
        "--balance-threshold",
        metavar="THRESHOLD",
        help="Per-process CPU threshold for balance mode (default 80).",
    )
    parser.add_argument(
        "-c",
        "--cpu-threshold",
        metavar="THRESHOLD",
        help="Total system CPU threshold for balance mode, 100 per busy core (default 150).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_const",
        const=True,
        help="Log the hints instead of applying them.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help=f"Configuration file (default: {get_config_path()}).",
    )
    parser.add_argument(
        "--pid-file",
        type=Path,
        metavar="PATH",
        help="Where the background worker's PID is recorded.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )
    return parser


def resolve_scheduler_config(
    args: argparse.Namespace, base: SchedulerConfig
) -> SchedulerConfig:
    """
    Layer the parsed command-line options over the file configuration.

    Raises:
        ValidationError: If an option value is invalid
    """
    overrides = {
        "name_patterns": args.patterns,
        "selection_mode": SelectionMode.GLOBAL if args.global_scan else None,
        "track_foreground": args.track_foreground,
        "balance_mode": args.balance_mode,
        "per_process_threshold": args.balance_threshold,
        "total_load_threshold": args.cpu_threshold,
        "dry_run": args.dry_run,
    }
    return apply_scheduler_overrides(base, overrides)


def resolve_app_config(args: argparse.Namespace, base: AppConfig) -> AppConfig:
    """Apply the daemon-level options (PID file, log level)."""
    changes = {}
    if args.pid_file is not None:
        changes["pid_file"] = args.pid_file.expanduser()
    if args.log_level is not None:
        changes["log_level"] = args.log_level
    if not changes:
        return base
    return dataclasses.replace(base, daemon=dataclasses.replace(base.daemon, **changes))


def build_worker_args(args: argparse.Namespace) -> List[str]:
    """Rebuild the options forwarded from `start` to the detached `run` worker."""
    worker_args = [f"--pattern={pattern}" for pattern in args.patterns or []]
    if args.global_scan:
        worker_args.append("--global")
    if args.track_foreground is not None:
        worker_args.append("--foreground" if args.track_foreground else "--no-foreground")
    if args.balance_mode is not None:
        worker_args.append("--balance" if args.balance_mode else "--no-balance")
    if args.balance_threshold is not None:
        worker_args.append(f"--balance-threshold={args.balance_threshold}")
    if args.cpu_threshold is not None:
        worker_args.append(f"--cpu-threshold={args.cpu_threshold}")
    if args.dry_run:
        worker_args.append("--dry-run")
    worker_args.append(f"--config={get_config_path().resolve()}")
    if args.pid_file is not None:
        worker_args.append(f"--pid-file={args.pid_file.expanduser().resolve()}")
    if args.log_level is not None:
        worker_args.append(f"--log-level={args.log_level}")
    return worker_args


def main_cli(argv: Optional[List[str]] = None) -> int:
    """
    Main command-line interface for Yawning.

    Configuration errors (bad options, invalid config file, no usable
    affinity back-end) are reported and end the process with exit code 1
    before any scanning starts.

    Args:
        argv: Command-line arguments, defaults to sys.argv[1:]

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "help":
        parser.print_help()
        return 0

    if args.config is not None:
        set_config_path(args.config.expanduser())

    try:
        app_config = resolve_app_config(args, get_config())
    except (ValidationError, tomllib.TOMLDecodeError, OSError) as e:
        handle_cli_error(error=e, context="loading configuration", exit_code=1, logger=logger)

    logging.getLogger().setLevel(app_config.daemon.log_level)

    if args.command == "stop":
        return stop_daemon(app_config)

    try:
        scheduler_config = resolve_scheduler_config(args, app_config.scheduler)
        hinter = create_hinter(scheduler_config)
    except ValidationError as e:
        handle_cli_error(error=e, context="validating options", exit_code=1, logger=logger)

    if args.command == "run":
        return run_worker(app_config, scheduler_config, hinter)
    return start_daemon(app_config, build_worker_args(args))


if __name__ == "__main__":
    sys.exit(main_cli())
