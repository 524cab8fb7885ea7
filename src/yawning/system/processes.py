"""
Candidate process selection.

This module produces the set of process IDs examined in one scan cycle,
either every process owned by a regular user or the processes whose
command line matches one of the configured name patterns.
"""

import logging
import os
import re
from typing import Iterable, List, Optional, Set

import psutil

from ..models.config import SchedulerConfig, SelectionMode

logger = logging.getLogger(__name__)


def is_system_account(username: Optional[str], excluded_users: Iterable[str]) -> bool:
    """Return True for owners that global mode must leave alone.

    Unknown owners, the excluded users and service accounts whose name
    starts with an underscore (the macOS convention) all count.
    """
    if not username:
        return True
    # Windows reports DOMAIN\\user
    short_name = username.rsplit("\\", 1)[-1]
    return short_name in excluded_users or short_name.startswith("_")


def display_command(name: Optional[str], cmdline: Optional[List[str]]) -> str:
    """Build the command string that name patterns are matched against."""
    if cmdline:
        return " ".join(cmdline)
    return name or ""


class ProcessSource:
    """
    Lists candidate PIDs according to the selection mode.

    Attributes:
        config: The resolved scheduler configuration.
        own_pid: PID of the scheduler itself, never returned as a candidate.
    """

    def __init__(self, config: SchedulerConfig, own_pid: Optional[int] = None):
        self.config = config
        self.own_pid = own_pid if own_pid is not None else os.getpid()
        self._patterns = [re.compile(pattern) for pattern in config.name_patterns]

    def list_candidates(self) -> Set[int]:
        """
        Return the candidate PIDs for the current cycle.

        Returns:
            Set of PIDs; empty when the process table cannot be read.
        """
        try:
            if self.config.selection_mode is SelectionMode.BY_NAME:
                pids = self._list_by_name()
            else:
                pids = self._list_global()
        except (psutil.Error, OSError) as e:
            logger.warning(f"Process enumeration failed, skipping this cycle: {e}")
            return set()

        pids.discard(self.own_pid)
        return pids

    def matches(self, command: str) -> bool:
        """Check a command string against the configured name patterns."""
        return any(pattern.search(command) for pattern in self._patterns)

    def _list_global(self) -> Set[int]:
        pids = set()
        for proc in psutil.process_iter(["pid", "username"]):
            try:
                info = proc.info
                if not is_system_account(info.get("username"), self.config.excluded_users):
                    pids.add(info["pid"])
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
        return pids

    def _list_by_name(self) -> Set[int]:
        pids = set()
        for proc in psutil.process_iter(["pid", "name", "cmdline"]):
            try:
                info = proc.info
                command = display_command(info.get("name"), info.get("cmdline"))
                if command and self.matches(command):
                    pids.add(info["pid"])
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
        return pids


def describe_process(pid: int) -> str:
    """Return a short human-readable name for log messages."""
    try:
        name = psutil.Process(pid).name()
    except (psutil.Error, OSError):
        return f"PID {pid}"
    return name or f"PID {pid}"
