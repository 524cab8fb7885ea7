"""
Integration tests for the scan loop.

Tests the complete workflow from a configuration file through option
resolution, candidate selection over a scripted process table, balance-mode
classification and the interval across several cycles.
"""

import pytest

from conftest import FakeForeground, FakeSampler
from yawning.config.validators import apply_scheduler_overrides, validate_app_config
from yawning.models.runtime import CoreClass
from yawning.scheduling.loop import ScanLoop
from yawning.system.affinity import DryRunHinter
from yawning.system.processes import ProcessSource


@pytest.mark.integration
class TestScanLoopIntegration:
    """Multi-cycle runs of the scan loop against scripted collaborators."""

    def build_loop(self, scheduler_config, sampler, foreground_pid=None):
        self.hinter = DryRunHinter()
        return ScanLoop(
            scheduler_config,
            self.hinter,
            process_source=ProcessSource(scheduler_config, own_pid=0),
            sampler=sampler,
            foreground=FakeForeground(foreground_pid),
        )

    def test_global_scan_workflow(self, sample_config_data, mock_psutil_processes):
        """Quiet system, then a load spike, then calm again."""
        # 1. Configuration from file plus command-line overrides
        config = validate_app_config(sample_config_data).scheduler
        config = apply_scheduler_overrides(config, {"per_process_threshold": "80", "total_load_threshold": "150"})

        sampler = FakeSampler(total=30, loads={501: 10, 502: 5, 503: 1})
        loop = self.build_loop(config, sampler, foreground_pid=501)

        # 2. First cycle: foreground hinted, two other user processes land on efficiency cores
        report = loop.run_cycle()
        assert report.candidates == 2
        assert report.new_efficiency == 2
        assert report.next_interval == 45
        assert report.efficiency_pids == {501, 502, 503}

        # 3. Load spike: Slack renderer gets hot while the machine is busy
        sampler.total = 320
        sampler.loads[502] = 190
        report = loop.run_cycle()
        assert report.new_performance == 1
        assert report.performance_pids == {502}
        assert report.next_interval == 46

        # 4. Load drops: the renderer returns to efficiency cores and the interval shortens
        sampler.total = 60
        sampler.loads[502] = 3
        report = loop.run_cycle()
        assert report.new_efficiency == 1
        assert report.performance_pids == frozenset()
        assert report.next_interval == 44

        assert [(pid, core) for pid, core in self.hinter.applied if pid == 502] == [
            (502, CoreClass.EFFICIENCY),
            (502, CoreClass.PERFORMANCE),
            (502, CoreClass.EFFICIENCY),
        ]
        # The frontmost app is hinted every cycle
        assert self.hinter.applied.count((501, CoreClass.EFFICIENCY)) == 3

    def test_name_selection_workflow(self, sample_config_data, mock_psutil_processes):
        """Name patterns pick processes regardless of owner."""
        config = apply_scheduler_overrides(
            validate_app_config(sample_config_data).scheduler,
            {"name_patterns": ["Google Chrome", "launchd"], "track_foreground": False},
        )
        loop = self.build_loop(config, FakeSampler(total=10))

        report = loop.run_cycle()

        assert report.efficiency_pids == {1, 501}
        assert report.foreground_pid is None

    def test_quiet_system_interval_growth(self, sample_config_data, mock_psutil_processes):
        """Once everything is assigned, the interval only grows."""
        config = validate_app_config(sample_config_data).scheduler
        loop = self.build_loop(config, FakeSampler(total=10))

        intervals = [loop.run_cycle().next_interval for _ in range(5)]

        # 50 -> 47 -> 44 -> 41 (three new assignments) -> 42, then +1 per cycle
        assert intervals == [42, 43, 44, 45, 46]
        assert len(self.hinter.applied) == 3
