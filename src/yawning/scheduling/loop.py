"""
The scan loop.

One cycle lists the candidates, resolves the foreground application,
samples the system load once, classifies every candidate, recomputes the
scan interval and then waits. Cycles run strictly one after another until a
stop is requested; the wait is the only point where a stop takes effect.
"""

import logging
import os
import threading
from typing import Optional

from ..models.config import SchedulerConfig
from ..models.runtime import CoreClass, CycleReport, LoopState, Outcome
from ..system.affinity import AffinityHinter
from ..system.cpu import CpuSampler
from ..system.foreground import ForegroundResolver
from ..system.processes import ProcessSource
from .classifier import Classifier
from .interval import IntervalController
from .state import AffinityState

logger = logging.getLogger(__name__)


class ScanLoop:
    """
    Orchestrates scan cycles.

    All collaborators are injected so a cycle can be run against fakes.
    The affinity state and the interval belong to the loop alone, so no
    locking is needed.
    """

    def __init__(
        self,
        config: SchedulerConfig,
        hinter: AffinityHinter,
        process_source: Optional[ProcessSource] = None,
        sampler: Optional[CpuSampler] = None,
        foreground: Optional[ForegroundResolver] = None,
        state: Optional[AffinityState] = None,
    ):
        self.config = config
        self.hinter = hinter
        self.process_source = process_source or ProcessSource(config)
        self.sampler = sampler or CpuSampler(config.sample_interval)
        self.foreground = foreground or ForegroundResolver(config.track_foreground)
        self.state = state if state is not None else AffinityState()
        self.interval = IntervalController(config.initial_interval, config.max_interval)
        self.classifier = Classifier(config, self.state, hinter, self.sampler)
        self.loop_state = LoopState.STOPPED
        self.cycles = 0
        self._stop_event = threading.Event()

    def run_cycle(self) -> CycleReport:
        """
        Run a single scan cycle.

        Returns:
            CycleReport with the counts for this cycle and the next interval.
        """
        logger.info("Scanning processes...")
        candidates = self.process_source.list_candidates()

        foreground_pid = None
        if self.config.track_foreground:
            foreground_pid = self.foreground.resolve()
            if foreground_pid is not None:
                self.classifier.assign_foreground(foreground_pid)
                # The foreground process is not subject to the heavy/light test.
                candidates.discard(foreground_pid)

        total_load = None
        if self.config.balance_mode:
            self.sampler.prime(candidates)
            total_load = self.sampler.sample_total()
            logger.debug(f"Total CPU load: {total_load:.1f}%")

        report = CycleReport(
            candidates=len(candidates),
            foreground_pid=foreground_pid,
            total_load=total_load,
        )
        for pid in sorted(candidates):
            outcome = self.classifier.classify(pid, total_load)
            report.record(outcome)
            if outcome is Outcome.NEW_EFFICIENCY:
                self.interval.record_new_assignment()

        report.next_interval = self.interval.finish_cycle()
        report.efficiency_pids, report.performance_pids = self.state.snapshot()
        self.cycles += 1

        logger.info(
            f"Cycle {self.cycles}: {report.candidates} candidates, "
            f"{report.new_efficiency} to efficiency, {report.new_performance} to performance, "
            f"{report.failed} failed. Next scan in {report.next_interval} seconds..."
        )
        return report

    def pin_self(self) -> bool:
        """Hint the scheduler's own process to efficiency cores."""
        own_pid = os.getpid()
        if self.hinter.apply(own_pid, CoreClass.EFFICIENCY):
            logger.info(f"Scheduler (PID {own_pid}) pinned to efficiency cores")
            return True
        logger.warning(f"Could not pin scheduler (PID {own_pid}) to efficiency cores")
        return False

    def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """
        Run cycles until stop is requested.

        Args:
            max_cycles: Stop after this many cycles; None runs indefinitely.
        """
        self.loop_state = LoopState.RUNNING
        logger.info(
            f"Scan loop started (mode: {self.config.selection_mode.value}, "
            f"foreground: {self.config.track_foreground}, balance: {self.config.balance_mode}, "
            f"hints: {self.hinter.name})"
        )
        if self.config.pin_self:
            self.pin_self()

        try:
            while not self._stop_event.is_set():
                try:
                    report = self.run_cycle()
                    wait_seconds = report.next_interval
                except Exception as e:
                    # Keep scanning; the next cycle starts from a fresh listing.
                    logger.error(f"Scan cycle failed: {type(e).__name__}: {e}", exc_info=True)
                    wait_seconds = self.interval.seconds
                if max_cycles is not None and self.cycles >= max_cycles:
                    break
                self._stop_event.wait(wait_seconds)
        finally:
            self.loop_state = LoopState.STOPPED
            logger.info("Scan loop stopped")

    def request_stop(self) -> None:
        """Ask the loop to exit; takes effect during the end-of-cycle wait."""
        self._stop_event.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()
