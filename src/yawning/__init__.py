"""
Yawning: a user-space power/performance scheduler for heterogeneous-core machines.

The scheduler periodically inspects running processes, classifies each one
as light (efficiency cores) or heavy (performance cores while the system is
under load) and issues core-affinity hints accordingly. The scan interval
adapts on its own: it grows while the system is quiet and shrinks when new
processes need to be scheduled.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Configuration and runtime data structures
- validation: Input validation and error handling
- system: Process listing, CPU sampling, foreground lookup and affinity hints
- scheduling: Affinity bookkeeping, classifier, scan interval and scan loop
- orchestration: PID file, signal handling and worker lifecycle
- cli: Command-line interface

Usage:
    From command line:
        yawning start [options]
        yawning stop

    Programmatically:
        from yawning import ScanLoop, SchedulerConfig, DryRunHinter
        loop = ScanLoop(SchedulerConfig(), DryRunHinter())
        report = loop.run_cycle()
"""

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .cli import main_cli
from .scheduling import (
    AffinityState,
    Classifier,
    IntervalController,
    ScanLoop,
    next_interval,
)

# Model classes for external use
from .models import (
    AppConfig,
    CoreClass,
    CycleReport,
    DaemonConfig,
    Outcome,
    SchedulerConfig,
    SelectionMode,
)

# System adapters
from .system import (
    AffinityHinter,
    CpuSampler,
    DryRunHinter,
    ForegroundResolver,
    ProcessSource,
    create_hinter,
)

from .validation import ValidationError

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "main_cli",
    # Scheduling
    "AffinityState",
    "Classifier",
    "IntervalController",
    "ScanLoop",
    "next_interval",
    # Models
    "AppConfig",
    "CoreClass",
    "CycleReport",
    "DaemonConfig",
    "Outcome",
    "SchedulerConfig",
    "SelectionMode",
    # System adapters
    "AffinityHinter",
    "CpuSampler",
    "DryRunHinter",
    "ForegroundResolver",
    "ProcessSource",
    "create_hinter",
    # Validation
    "ValidationError",
]
