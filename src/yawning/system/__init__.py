"""
System interaction for the scheduler.

This module isolates every operating-system query and action behind narrow
classes so the scheduling logic can be exercised with fakes:

- ProcessSource lists candidate processes
- CpuSampler reports system and per-process CPU load
- ForegroundResolver finds the frontmost application
- AffinityHinter implementations apply efficiency/performance core hints
"""

from .affinity import (
    AffinityHinter,
    CpuSetHinter,
    DryRunHinter,
    TaskPolicyHinter,
    create_hinter,
    format_core_list,
    parse_core_range_string,
)
from .commands import is_tool_available, run_command
from .cpu import CpuSampler
from .foreground import ForegroundResolver
from .processes import ProcessSource, describe_process, is_system_account

__all__ = [
    # Affinity hints
    "AffinityHinter",
    "CpuSetHinter",
    "DryRunHinter",
    "TaskPolicyHinter",
    "create_hinter",
    "format_core_list",
    "parse_core_range_string",
    # Commands
    "is_tool_available",
    "run_command",
    # Sampling and selection
    "CpuSampler",
    "ForegroundResolver",
    "ProcessSource",
    "describe_process",
    "is_system_account",
]
