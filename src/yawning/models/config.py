"""
Configuration data models.

This module contains the settings resolved once at startup: how candidate
processes are selected, the balance-mode thresholds, the interval limits and
the daemon bookkeeping paths.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_PER_PROCESS_THRESHOLD = 80.0
DEFAULT_TOTAL_LOAD_THRESHOLD = 150.0
DEFAULT_INITIAL_INTERVAL = 50
DEFAULT_PID_FILE = Path("/tmp/yawning.pid")
DEFAULT_LOG_FILE = Path("/tmp/yawning.log")


class SelectionMode(Enum):
    """How the candidate set is built for each scan cycle."""

    BY_NAME = "by_name"
    GLOBAL = "global"


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Settings for the scan loop, loaded from `[scheduler]` in `config.toml`
    and overridden by command-line options.
    """

    selection_mode: SelectionMode = SelectionMode.GLOBAL
    # Regex patterns matched against each process's command line.
    name_patterns: Tuple[str, ...] = ()
    # Hint the frontmost application to efficiency cores every cycle.
    track_foreground: bool = True
    # Move hot processes to performance cores while the system is loaded.
    balance_mode: bool = True
    # Per-process CPU percentage above which a process counts as heavy.
    per_process_threshold: float = DEFAULT_PER_PROCESS_THRESHOLD
    # Aggregate CPU percentage (100 = one busy core) above which balance mode engages.
    total_load_threshold: float = DEFAULT_TOTAL_LOAD_THRESHOLD

    # Owners skipped in global mode; names starting with "_" are always skipped.
    excluded_users: Tuple[str, ...] = ("root", "Apple")
    initial_interval: int = DEFAULT_INITIAL_INTERVAL
    # Upper bound for the scan interval, None keeps growth unbounded.
    max_interval: Optional[int] = None
    # Hint the scheduler's own process to efficiency cores when the loop starts.
    pin_self: bool = True
    # Log hints instead of applying them.
    dry_run: bool = False
    # Core ranges (e.g. "4-7") used where affinity is set through CPU masks.
    efficiency_cores: str = ""
    performance_cores: str = ""
    # Seconds spent priming CPU counters of newly seen processes.
    sample_interval: float = 0.1

    def __post_init__(self):
        # Name patterns and global scanning are mutually exclusive.
        if self.name_patterns and self.selection_mode is not SelectionMode.BY_NAME:
            object.__setattr__(self, "selection_mode", SelectionMode.BY_NAME)


@dataclass(frozen=True)
class DaemonConfig:
    """
    Settings for the background worker, loaded from `[daemon]` in `config.toml`.
    """

    # Holds the PID of the running worker; absence means not running.
    pid_file: Path = DEFAULT_PID_FILE
    # Output of the detached worker is appended here.
    log_file: Path = DEFAULT_LOG_FILE
    log_level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
