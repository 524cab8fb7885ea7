"""
Bookkeeping of the core class each process was last moved to.

The scheduler only issues a hint when a process changes class, so it has to
remember where it believes every process currently sits. Entries for exited
processes are never removed: a dead PID does not come back as a candidate,
so its entry is simply never consulted again.
"""

from typing import FrozenSet, Optional, Set, Tuple

from ..models.runtime import CoreClass


class AffinityState:
    """
    Two disjoint PID sets: processes on efficiency and on performance cores.

    Only the classifier mutates this, and only after a hint succeeded.
    """

    def __init__(self):
        self._on_efficiency: Set[int] = set()
        self._on_performance: Set[int] = set()

    def is_efficiency(self, pid: int) -> bool:
        return pid in self._on_efficiency

    def is_performance(self, pid: int) -> bool:
        return pid in self._on_performance

    def class_of(self, pid: int) -> Optional[CoreClass]:
        if pid in self._on_efficiency:
            return CoreClass.EFFICIENCY
        if pid in self._on_performance:
            return CoreClass.PERFORMANCE
        return None

    def mark_efficiency(self, pid: int) -> None:
        self._on_performance.discard(pid)
        self._on_efficiency.add(pid)

    def mark_performance(self, pid: int) -> None:
        self._on_efficiency.discard(pid)
        self._on_performance.add(pid)

    def mark(self, pid: int, core_class: CoreClass) -> None:
        if core_class is CoreClass.EFFICIENCY:
            self.mark_efficiency(pid)
        else:
            self.mark_performance(pid)

    @property
    def on_efficiency(self) -> FrozenSet[int]:
        return frozenset(self._on_efficiency)

    @property
    def on_performance(self) -> FrozenSet[int]:
        return frozenset(self._on_performance)

    def snapshot(self) -> Tuple[FrozenSet[int], FrozenSet[int]]:
        """Return (on_efficiency, on_performance) as immutable copies."""
        return self.on_efficiency, self.on_performance

    def __len__(self) -> int:
        return len(self._on_efficiency) + len(self._on_performance)
