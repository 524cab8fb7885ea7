"""
Worker lifecycle: PID file, signal handling and start/stop/run control.
"""

from .daemon import run_worker, start_daemon, stop_daemon
from .pidfile import PidFile, is_process_alive
from .signal_handler import SignalHandler

__all__ = [
    "PidFile",
    "SignalHandler",
    "is_process_alive",
    "run_worker",
    "start_daemon",
    "stop_daemon",
]
