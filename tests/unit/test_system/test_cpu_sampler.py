"""
Unit tests for CpuSampler with psutil patched out.
"""

from unittest.mock import MagicMock, patch

import psutil
import pytest

from yawning.system.cpu import CpuSampler


@pytest.fixture
def mock_psutil():
    """Patch the psutil calls made by the sampler."""
    with patch("yawning.system.cpu.psutil.cpu_percent") as mock_cpu_percent, patch(
        "yawning.system.cpu.psutil.Process"
    ) as mock_process, patch("yawning.system.cpu.time.sleep") as mock_sleep:
        mock_cpu_percent.return_value = [90.0, 70.0, 5.0, 0.0]
        handles = {}

        def make_process(pid):
            if pid == 404:
                raise psutil.NoSuchProcess(pid)
            handle = MagicMock(name=f"Process({pid})")
            handle.cpu_percent.return_value = float(pid % 100)
            handles[pid] = handle
            return handle

        mock_process.side_effect = make_process
        yield {
            "cpu_percent": mock_cpu_percent,
            "Process": mock_process,
            "sleep": mock_sleep,
            "handles": handles,
        }


@pytest.mark.unit
class TestCpuSampler:
    """Test cases for system and per-process sampling."""

    def test_baseline_taken_on_creation(self, mock_psutil):
        CpuSampler()
        mock_psutil["cpu_percent"].assert_called_once_with(interval=None, percpu=True)

    def test_total_is_sum_over_cores(self, mock_psutil):
        sampler = CpuSampler()
        assert sampler.sample_total() == 165.0

    def test_total_failure_reads_as_idle(self, mock_psutil):
        sampler = CpuSampler()
        mock_psutil["cpu_percent"].side_effect = OSError("no /proc/stat")
        assert sampler.sample_total() == 0.0

    def test_prime_new_processes_sleeps_once(self, mock_psutil):
        sampler = CpuSampler(sample_interval=0.25)

        assert sampler.prime([101, 102, 103]) == 3

        mock_psutil["sleep"].assert_called_once_with(0.25)
        for handle in mock_psutil["handles"].values():
            handle.cpu_percent.assert_called_once_with(interval=None)

    def test_known_processes_not_primed_again(self, mock_psutil):
        sampler = CpuSampler(sample_interval=0.25)
        sampler.prime([101, 102])
        mock_psutil["sleep"].reset_mock()

        assert sampler.prime([101, 102]) == 0
        mock_psutil["sleep"].assert_not_called()

    def test_prime_drops_stale_handles(self, mock_psutil):
        sampler = CpuSampler()
        sampler.prime([101, 102])
        sampler.prime([102])
        assert set(sampler._processes) == {102}

    def test_prime_skips_exited_processes(self, mock_psutil):
        sampler = CpuSampler()
        assert sampler.prime([101, 404]) == 1

    def test_zero_interval_never_sleeps(self, mock_psutil):
        sampler = CpuSampler(sample_interval=0.0)
        sampler.prime([101])
        mock_psutil["sleep"].assert_not_called()

    def test_sample_process_reuses_handle(self, mock_psutil):
        sampler = CpuSampler()
        sampler.prime([185])

        assert sampler.sample_process(185) == 85.0
        assert sampler.sample_process(185) == 85.0
        assert mock_psutil["Process"].call_count == 1

    def test_sample_exited_process(self, mock_psutil):
        sampler = CpuSampler()
        sampler.prime([101])
        mock_psutil["handles"][101].cpu_percent.side_effect = psutil.NoSuchProcess(101)

        assert sampler.sample_process(101) == 0.0
        assert 101 not in sampler._processes

    def test_sample_unknown_pid(self, mock_psutil):
        sampler = CpuSampler()
        assert sampler.sample_process(404) == 0.0

    def test_sample_access_denied(self, mock_psutil):
        sampler = CpuSampler()
        sampler.prime([101])
        mock_psutil["handles"][101].cpu_percent.side_effect = psutil.AccessDenied(101)
        assert sampler.sample_process(101) == 0.0
