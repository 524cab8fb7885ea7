"""
Data models for the yawning package.

Configuration models are immutable and resolved once at startup; runtime
models describe a single scan cycle and are discarded afterwards.
"""

from .config import (
    DEFAULT_INITIAL_INTERVAL,
    DEFAULT_PER_PROCESS_THRESHOLD,
    DEFAULT_TOTAL_LOAD_THRESHOLD,
    AppConfig,
    DaemonConfig,
    SchedulerConfig,
    SelectionMode,
)
from .runtime import CoreClass, CycleReport, LoopState, Outcome

__all__ = [
    # Configuration
    "DEFAULT_INITIAL_INTERVAL",
    "DEFAULT_PER_PROCESS_THRESHOLD",
    "DEFAULT_TOTAL_LOAD_THRESHOLD",
    "AppConfig",
    "DaemonConfig",
    "SchedulerConfig",
    "SelectionMode",
    # Runtime
    "CoreClass",
    "CycleReport",
    "LoopState",
    "Outcome",
]
