"""
Runtime data models.

This module contains data structures used while the scan loop runs: the
core classes a hint can target, per-candidate classification outcomes and
the summary of one scan cycle.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional


class CoreClass(Enum):
    """Target of an affinity hint."""

    EFFICIENCY = "efficiency"
    PERFORMANCE = "performance"


class Outcome(Enum):
    """Result of classifying one candidate process in one cycle."""

    # A hint moved the process to efficiency cores.
    NEW_EFFICIENCY = "new_efficiency"
    # A hint moved the process to performance cores.
    NEW_PERFORMANCE = "new_performance"
    # The process already sits in the class it was assigned; no hint issued.
    UNCHANGED = "unchanged"
    # The hint call failed; the process is re-evaluated next cycle.
    FAILED = "failed"


class LoopState(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class CycleReport:
    """
    Summary of a single scan cycle. Built for logging and tests, never stored.
    """

    candidates: int
    foreground_pid: Optional[int]
    total_load: Optional[float]
    new_efficiency: int = 0
    new_performance: int = 0
    unchanged: int = 0
    failed: int = 0
    next_interval: int = 0
    efficiency_pids: FrozenSet[int] = field(default_factory=frozenset)
    performance_pids: FrozenSet[int] = field(default_factory=frozenset)

    def record(self, outcome: Outcome) -> None:
        """Count an outcome returned by the classifier."""
        if outcome is Outcome.NEW_EFFICIENCY:
            self.new_efficiency += 1
        elif outcome is Outcome.NEW_PERFORMANCE:
            self.new_performance += 1
        elif outcome is Outcome.UNCHANGED:
            self.unchanged += 1
        else:
            self.failed += 1
