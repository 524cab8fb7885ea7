"""
Heavy/light classification of candidate processes.

Every candidate is light by default and is hinted to efficiency cores. In
balance mode a candidate becomes heavy for the current cycle when the whole
system is loaded above ``total_load_threshold`` and the process itself uses
more than ``per_process_threshold``; heavy processes are hinted to
performance cores. A hint is only issued when the process changes class,
which keeps steady processes free of repeated system calls.
"""

import logging
from typing import Optional

from ..models.config import SchedulerConfig
from ..models.runtime import CoreClass, Outcome
from ..system.affinity import AffinityHinter
from ..system.cpu import CpuSampler
from ..system.processes import describe_process
from .state import AffinityState

logger = logging.getLogger(__name__)


def is_heavy(total_load: float, process_load: float, config: SchedulerConfig) -> bool:
    """Both thresholds must be exceeded strictly."""
    return (
        total_load > config.total_load_threshold
        and process_load > config.per_process_threshold
    )


class Classifier:
    """
    Decides the core class of each candidate and applies the hint.

    Decisions depend only on the PID's own sample, the cycle's total load
    and the PID's own entry in the affinity state, so the order in which
    candidates are classified does not change the result.

    Attributes:
        config: Resolved scheduler configuration.
        state: Shared affinity bookkeeping.
        hinter: Capability that applies the hints.
        sampler: Source of per-process CPU samples.
    """

    def __init__(
        self,
        config: SchedulerConfig,
        state: AffinityState,
        hinter: AffinityHinter,
        sampler: CpuSampler,
    ):
        self.config = config
        self.state = state
        self.hinter = hinter
        self.sampler = sampler

    def classify(self, pid: int, total_load: Optional[float] = None) -> Outcome:
        """
        Classify one candidate for this cycle and hint it if its class changed.

        Args:
            pid: Candidate process ID
            total_load: Aggregate load sampled for this cycle; only used in
                balance mode

        Returns:
            Outcome of the classification. Only Outcome.NEW_EFFICIENCY
            shortens the scan interval.
        """
        if self.config.balance_mode and total_load is not None:
            process_load = self.sampler.sample_process(pid)
            if is_heavy(total_load, process_load, self.config):
                if self.state.is_performance(pid):
                    return Outcome.UNCHANGED
                if not self.hinter.apply(pid, CoreClass.PERFORMANCE):
                    return Outcome.FAILED
                self.state.mark_performance(pid)
                logger.info(
                    f"[BALANCE] PID {pid} using CPU {process_load:.1f}%, "
                    f"assigned to performance cores"
                )
                return Outcome.NEW_PERFORMANCE

        if self.state.is_efficiency(pid):
            return Outcome.UNCHANGED
        if not self.hinter.apply(pid, CoreClass.EFFICIENCY):
            return Outcome.FAILED
        self.state.mark_efficiency(pid)
        logger.info(f'Assigned "{describe_process(pid)}" (PID {pid}) to efficiency cores')
        return Outcome.NEW_EFFICIENCY

    def assign_foreground(self, pid: int) -> bool:
        """
        Hint the frontmost process to efficiency cores.

        Unlike classify(), the hint is issued every cycle whatever the
        recorded state, and it never counts as a new assignment.

        Returns:
            True if the hint was applied
        """
        if not self.hinter.apply(pid, CoreClass.EFFICIENCY):
            logger.debug(f"Foreground PID {pid} could not be assigned")
            return False
        self.state.mark_efficiency(pid)
        logger.info(f"Frontmost app PID {pid} assigned to efficiency cores")
        return True
