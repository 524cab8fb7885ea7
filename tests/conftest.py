"""
Pytest configuration and shared fixtures for the Yawning test suite.

This module provides common fixtures, in-memory fakes for the operating
system collaborators and test configuration.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple
from unittest.mock import Mock, patch

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from yawning.models.config import SchedulerConfig, SelectionMode  # noqa: E402
from yawning.models.runtime import CoreClass  # noqa: E402
from yawning.system.affinity import AffinityHinter  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Fakes for the OS collaborators
# ============================================================================


class FakeProcessSource:
    """Returns a fixed candidate set, changeable between cycles."""

    def __init__(self, pids=()):
        self.pids: Set[int] = set(pids)
        self.calls = 0

    def list_candidates(self) -> Set[int]:
        self.calls += 1
        return set(self.pids)


class FakeSampler:
    """Serves scripted CPU loads; unknown PIDs sample as idle."""

    def __init__(self, total: float = 0.0, loads: Optional[Dict[int, float]] = None):
        self.total = total
        self.loads: Dict[int, float] = dict(loads or {})
        self.primed: List[Set[int]] = []
        self.total_calls = 0

    def prime(self, pids) -> int:
        self.primed.append(set(pids))
        return 0

    def sample_total(self) -> float:
        self.total_calls += 1
        return self.total

    def sample_process(self, pid: int) -> float:
        return self.loads.get(pid, 0.0)


class FakeForeground:
    def __init__(self, pid: Optional[int] = None):
        self.pid = pid

    def resolve(self) -> Optional[int]:
        return self.pid


class RecordingHinter(AffinityHinter):
    """Records every hint; PIDs in ``failing`` report failure."""

    name = "recording"

    def __init__(self, failing=()):
        self.calls: List[Tuple[int, CoreClass]] = []
        self.failing: Set[int] = set(failing)

    def apply(self, pid: int, core_class: CoreClass) -> bool:
        self.calls.append((pid, core_class))
        return pid not in self.failing

    def calls_for(self, pid: int) -> List[CoreClass]:
        return [core_class for called_pid, core_class in self.calls if called_pid == pid]


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def scheduler_config():
    """Default configuration: global scan, foreground and balance mode on."""
    return SchedulerConfig(
        selection_mode=SelectionMode.GLOBAL,
        track_foreground=True,
        balance_mode=True,
        per_process_threshold=80,
        total_load_threshold=150,
        pin_self=False,
        sample_interval=0.0,
    )


@pytest.fixture
def hinter():
    return RecordingHinter()


@pytest.fixture
def fakes():
    """Bundle of fake OS collaborators for ScanLoop tests."""
    return {
        "source": FakeProcessSource(),
        "sampler": FakeSampler(),
        "foreground": FakeForeground(),
    }


@pytest.fixture
def sample_config_data():
    """Sample config.toml contents for testing."""
    return {
        "scheduler": {
            "selection_mode": "global",
            "name_patterns": [],
            "track_foreground": True,
            "balance_mode": True,
            "per_process_threshold": 80,
            "total_load_threshold": 150,
            "excluded_users": ["root"],
            "initial_interval": 50,
            "max_interval": 0,
            "pin_self": True,
            "dry_run": False,
            "efficiency_cores": "",
            "performance_cores": "",
            "sample_interval": 0.1,
        },
        "daemon": {
            "pid_file": "/tmp/yawning-test.pid",
            "log_file": "/tmp/yawning-test.log",
            "log_level": "INFO",
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    config_path = temp_dir / "config.toml"
    with open(config_path, "w") as f:
        toml.dump(sample_config_data, f)
    return config_path


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_psutil_processes():
    """Patch psutil.process_iter with a scripted process table."""

    def make_process(pid, username, name, cmdline):
        proc = Mock()
        proc.info = {
            "pid": pid,
            "username": username,
            "name": name,
            "cmdline": cmdline,
        }
        return proc

    table = [
        make_process(1, "root", "launchd", ["/sbin/launchd"]),
        make_process(88, "_windowserver", "WindowServer", ["/System/WindowServer"]),
        make_process(501, "alice", "Google Chrome", ["/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"]),
        make_process(502, "alice", "Slack", ["/Applications/Slack.app/Contents/MacOS/Slack", "--type=renderer"]),
        make_process(503, "alice", "zsh", ["-zsh"]),
        make_process(504, None, "mystery", []),
    ]

    with patch("yawning.system.processes.psutil.process_iter") as mock_iter:
        mock_iter.side_effect = lambda attrs=None: iter(table)
        yield {"process_iter": mock_iter, "table": table}


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    from yawning.config import clear_config_cache, get_config_path, set_config_path

    original_config_path = get_config_path()

    yield

    clear_config_cache()
    set_config_path(original_config_path)
