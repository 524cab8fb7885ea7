"""
Core-affinity hint back-ends.

This module defines the capability the classifier uses to move a process to
efficiency or performance cores, and its platform implementations:

- TaskPolicyHinter: macOS `taskpolicy`, which lowers a process to the
  background (efficiency-core) QoS tier or lifts it back out.
- CpuSetHinter: explicit CPU masks through psutil, for platforms where the
  efficiency and performance cores are listed in the configuration.
- DryRunHinter: logs the hints without touching any process.
"""

import logging
import platform
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

import psutil

from ..models.config import SchedulerConfig
from ..models.runtime import CoreClass
from ..validation import ValidationError
from .commands import is_tool_available, run_command

logger = logging.getLogger(__name__)


class AffinityHinter(ABC):
    """
    Abstract affinity hint capability.

    Implementations apply a hint to one process and report whether it took
    effect. They must not raise for per-process failures such as an exited
    process or a permission error.
    """

    name = "abstract"

    @abstractmethod
    def apply(self, pid: int, core_class: CoreClass) -> bool:
        """
        Hint a process towards a class of cores.

        Args:
            pid: Target process ID
            core_class: Efficiency or performance cores

        Returns:
            True if the hint was applied, False otherwise
        """
        pass


class TaskPolicyHinter(AffinityHinter):
    """Applies hints with the macOS `taskpolicy` tool."""

    name = "taskpolicy"

    FLAGS: Dict[CoreClass, str] = {
        CoreClass.EFFICIENCY: "-b",
        CoreClass.PERFORMANCE: "-B",
    }

    def __init__(self, executable: str = "taskpolicy"):
        self.executable = executable

    def apply(self, pid: int, core_class: CoreClass) -> bool:
        command = [self.executable, self.FLAGS[core_class], "-p", str(pid)]
        return_code, _, stderr = run_command(command)
        if return_code != 0:
            logger.debug(
                f"taskpolicy failed for PID {pid} ({core_class.value}): {stderr.strip()}"
            )
            return False
        return True


class CpuSetHinter(AffinityHinter):
    """
    Applies hints by restricting a process to an explicit set of cores.

    Attributes:
        available_cores: Logical cores present on this machine.
        core_sets: Cores used for each core class.
    """

    name = "cpuset"

    def __init__(self, efficiency_cores: str, performance_cores: str):
        self.available_cores = self._get_available_cores()
        self.core_sets: Dict[CoreClass, List[int]] = {
            CoreClass.EFFICIENCY: parse_core_range_string(efficiency_cores),
            CoreClass.PERFORMANCE: parse_core_range_string(performance_cores),
        }
        for core_class, cores in self.core_sets.items():
            if not self._validate_core_ids(cores):
                raise ValidationError(
                    f"Invalid {core_class.value} cores '{format_core_list(cores)}', "
                    f"available: {format_core_list(self.available_cores)}",
                    field_name=f"scheduler.{core_class.value}_cores",
                )
        logger.info(
            f"CPU-set hints: efficiency cores {format_core_list(self.core_sets[CoreClass.EFFICIENCY])}, "
            f"performance cores {format_core_list(self.core_sets[CoreClass.PERFORMANCE])}"
        )

    def _get_available_cores(self) -> List[int]:
        """Get list of available CPU cores."""
        try:
            return list(range(psutil.cpu_count(logical=True) or 0))
        except Exception as e:
            logger.warning(f"Failed to get CPU count: {e}")
            return []

    def _validate_core_ids(self, core_ids: List[int]) -> bool:
        """Validate core IDs against available cores."""
        if not core_ids:
            return False
        return all(core_id in self.available_cores for core_id in core_ids)

    def apply(self, pid: int, core_class: CoreClass) -> bool:
        try:
            psutil.Process(pid).cpu_affinity(self.core_sets[core_class])
            return True
        except (psutil.Error, OSError, ValueError) as e:
            logger.debug(f"Failed to set affinity for PID {pid}: {e}")
            return False


class DryRunHinter(AffinityHinter):
    """Records hints instead of applying them."""

    name = "dry-run"

    def __init__(self):
        self.applied: List[Tuple[int, CoreClass]] = []

    def apply(self, pid: int, core_class: CoreClass) -> bool:
        logger.info(f"[DRY-RUN] PID {pid} -> {core_class.value} cores")
        self.applied.append((pid, core_class))
        return True


def parse_core_range_string(core_str: str) -> List[int]:
    """
    Parse a CPU core range string like '1,2,4-7' into a sorted list.

    Example:
        >>> parse_core_range_string("1,2,4-7")
        [1, 2, 4, 5, 6, 7]
    """
    cores = set()
    if not core_str or not core_str.strip():
        return []

    try:
        for part in core_str.split(","):
            part = part.strip()
            if "-" in part:
                start, end = map(int, part.split("-"))
                cores.update(range(start, end + 1))
            else:
                cores.add(int(part))
    except ValueError as e:
        logger.warning(f"Failed to parse core range string '{core_str}': {e}")
        return []

    return sorted(cores)


def format_core_list(cores: List[int]) -> str:
    """Format core list into compact string representation, e.g. '0-3,6'."""
    if not cores:
        return ""

    sorted_cores = sorted(cores)
    ranges = []
    start = end = sorted_cores[0]

    for core in sorted_cores[1:]:
        if core == end + 1:
            end = core
            continue
        ranges.append(str(start) if start == end else f"{start}-{end}")
        start = end = core

    ranges.append(str(start) if start == end else f"{start}-{end}")
    return ",".join(ranges)


def create_hinter(config: SchedulerConfig, system: Optional[str] = None) -> AffinityHinter:
    """
    Pick the affinity back-end for this machine.

    Args:
        config: Resolved scheduler configuration
        system: Platform name override, defaults to platform.system()

    Returns:
        An AffinityHinter instance

    Raises:
        ValidationError: If no back-end can be used with this configuration
    """
    if config.dry_run:
        return DryRunHinter()

    system = (system or platform.system()).lower()
    if system == "darwin" and is_tool_available("taskpolicy"):
        return TaskPolicyHinter()

    if config.efficiency_cores and config.performance_cores:
        return CpuSetHinter(config.efficiency_cores, config.performance_cores)

    raise ValidationError(
        "No affinity back-end available: 'taskpolicy' was not found and "
        "scheduler.efficiency_cores / scheduler.performance_cores are not configured "
        "(use --dry-run to only log hints)"
    )
