"""
PID file for the background worker.

The file holds the PID of the running worker. Absence means nothing is
running; a file naming a dead process is stale and gets removed.
"""

import logging
from pathlib import Path
from typing import Optional

import psutil

logger = logging.getLogger(__name__)


class PidFile:
    """Reads, writes and clears the worker PID record."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> Optional[int]:
        """
        Return the recorded PID, or None if missing or unreadable.

        A file whose content is not a positive integer is treated as stale
        and removed.
        """
        try:
            content = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Cannot read PID file {self.path}: {e}")
            return None

        if not content.isdigit() or int(content) <= 0:
            logger.warning(f"PID file {self.path} is invalid ({content!r}), removing it")
            self.clear()
            return None
        return int(content)

    def write(self, pid: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{pid}\n", encoding="utf-8")
        logger.debug(f"PID file written: {self.path} ({pid})")

    def clear(self) -> None:
        try:
            self.path.unlink()
            logger.debug(f"PID file removed: {self.path}")
        except FileNotFoundError:
            pass

    def running_pid(self) -> Optional[int]:
        """
        Return the recorded PID if that process is alive.

        A stale record (dead process) is cleared.
        """
        pid = self.read()
        if pid is None:
            return None
        if is_process_alive(pid):
            return pid
        logger.info(f"Found PID file but process {pid} is not running; cleaned up.")
        self.clear()
        return None


def is_process_alive(pid: int) -> bool:
    """True when the PID exists and is not a zombie."""
    try:
        if not psutil.pid_exists(pid):
            return False
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return False
    except psutil.Error:
        # Exists but belongs to someone else
        return True
