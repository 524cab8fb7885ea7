"""
CPU usage sampling.

This module reports the aggregate system load and the load of individual
processes using psutil. psutil measures CPU usage between two calls, so the
sampler keeps one `psutil.Process` handle per candidate and primes handles
for processes it has not seen before.
"""

import logging
import time
from typing import Dict, Iterable

import psutil

logger = logging.getLogger(__name__)


class CpuSampler:
    """
    Samples system-wide and per-process CPU utilisation.

    Percentages follow the `top` convention: 100 means one fully busy core,
    so both values can exceed 100 on multi-core machines.

    Attributes:
        sample_interval: Seconds to wait after priming new process handles.
    """

    def __init__(self, sample_interval: float = 0.1):
        self.sample_interval = sample_interval
        self._processes: Dict[int, psutil.Process] = {}
        # The first call only establishes the baseline for the next one.
        try:
            psutil.cpu_percent(interval=None, percpu=True)
        except (psutil.Error, OSError) as e:
            logger.warning(f"Failed to initialise system CPU sampling: {e}")

    def prime(self, pids: Iterable[int]) -> int:
        """
        Prepare per-process counters for the given candidate set.

        Handles for PIDs not in ``pids`` are dropped. New PIDs get a handle
        whose counter is primed; if any were primed the sampler sleeps once
        for ``sample_interval`` so their first sample is meaningful.

        Returns:
            Number of newly primed processes.
        """
        wanted = set(pids)
        for pid in list(self._processes):
            if pid not in wanted:
                del self._processes[pid]

        primed = 0
        for pid in wanted - set(self._processes):
            try:
                process = psutil.Process(pid)
                process.cpu_percent(interval=None)
            except (psutil.Error, OSError):
                continue
            self._processes[pid] = process
            primed += 1

        if primed and self.sample_interval > 0:
            time.sleep(self.sample_interval)
        return primed

    def sample_total(self) -> float:
        """
        Aggregate CPU load since the previous call, summed over all cores.

        Returns:
            Load percentage (100 per fully busy core), 0.0 on failure.
        """
        try:
            return float(sum(psutil.cpu_percent(interval=None, percpu=True)))
        except (psutil.Error, OSError) as e:
            logger.warning(f"Failed to sample system CPU load: {e}")
            return 0.0

    def sample_process(self, pid: int) -> float:
        """
        CPU load of one process since its previous sample.

        Returns:
            Load percentage, 0.0 when the process is gone or unreadable.
        """
        process = self._processes.get(pid)
        try:
            if process is None:
                process = psutil.Process(pid)
                self._processes[pid] = process
            return float(process.cpu_percent(interval=None))
        except (psutil.NoSuchProcess, psutil.ZombieProcess):
            self._processes.pop(pid, None)
            return 0.0
        except (psutil.Error, OSError) as e:
            logger.debug(f"Failed to sample CPU for PID {pid}: {e}")
            return 0.0
