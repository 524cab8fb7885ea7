"""
Lifecycle of the background worker.

`start` launches the scan loop as a detached process and records its PID,
`stop` signals the recorded process and clears the record, and `run`
executes the loop in the current process (this is what the detached worker
runs).
"""

import logging
import os
import subprocess
import sys
from typing import List, Optional

import psutil

from ..models.config import AppConfig, SchedulerConfig
from ..scheduling.loop import ScanLoop
from ..system.affinity import AffinityHinter, create_hinter
from .pidfile import PidFile
from .signal_handler import SignalHandler

logger = logging.getLogger(__name__)

STOP_TIMEOUT = 5.0


def worker_command(worker_args: List[str]) -> List[str]:
    """Command line of the detached worker."""
    return [sys.executable, "-m", "yawning", "run", *worker_args]


def start_daemon(app_config: AppConfig, worker_args: List[str]) -> int:
    """
    Launch the scan loop in the background unless it is already running.

    The configuration has already been validated by the caller, so startup
    errors surface here rather than in the detached worker's log.

    Args:
        app_config: Resolved application configuration
        worker_args: Options forwarded to `yawning run`

    Returns:
        Process exit code (0 on success or when already running)
    """
    pid_file = PidFile(app_config.daemon.pid_file)
    existing_pid = pid_file.running_pid()
    if existing_pid is not None:
        logger.info(
            f"Yawning is already running (PID: {existing_pid}). To stop: yawning stop"
        )
        return 0

    log_file = app_config.daemon.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)
    command = worker_command(worker_args)
    logger.debug(f"Launching worker: {command}")
    with open(log_file, "ab") as log_handle:
        process = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=log_handle,
            stderr=subprocess.STDOUT,
            start_new_session=True,
            close_fds=True,
        )

    pid_file.write(process.pid)
    logger.info(
        f"Yawning started (PID: {process.pid}). Logs: {log_file}. Use 'yawning stop' to stop."
    )
    return 0


def stop_daemon(app_config: AppConfig, timeout: float = STOP_TIMEOUT) -> int:
    """
    Stop the recorded background worker and clear the PID file.

    Returns:
        Process exit code (0 unless the worker could not be signalled)
    """
    pid_file = PidFile(app_config.daemon.pid_file)
    pid = pid_file.read()
    if pid is None:
        logger.info("No running Yawning instance found.")
        return 0

    exit_code = 0
    try:
        process = psutil.Process(pid)
        process.terminate()
        try:
            process.wait(timeout=timeout)
        except psutil.TimeoutExpired:
            logger.warning(f"Yawning (PID: {pid}) did not exit within {timeout}s")
        logger.info(f"Yawning stopped (PID: {pid}).")
    except psutil.NoSuchProcess:
        logger.info("Found PID file but process not running; cleaned up.")
    except psutil.AccessDenied:
        logger.error(f"Permission denied stopping PID {pid}; try again with sudo.")
        exit_code = 1
    finally:
        if exit_code == 0:
            pid_file.clear()
    return exit_code


def run_worker(
    app_config: AppConfig,
    scheduler_config: SchedulerConfig,
    hinter: Optional[AffinityHinter] = None,
    max_cycles: Optional[int] = None,
) -> int:
    """
    Run the scan loop in this process until it is signalled to stop.

    Args:
        app_config: Resolved application configuration (daemon settings)
        scheduler_config: Resolved scheduler configuration
        hinter: Affinity back-end; chosen from the configuration when None
        max_cycles: Limit on the number of cycles, None for no limit

    Returns:
        Process exit code
    """
    pid_file = PidFile(app_config.daemon.pid_file)
    own_pid = os.getpid()
    existing_pid = pid_file.running_pid()
    if existing_pid is not None and existing_pid != own_pid:
        logger.info(f"Yawning is already running (PID: {existing_pid}).")
        return 0
    pid_file.write(own_pid)

    loop = ScanLoop(scheduler_config, hinter or create_hinter(scheduler_config))
    try:
        with SignalHandler(loop):
            loop.run_forever(max_cycles=max_cycles)
    finally:
        if pid_file.read() == own_pid:
            pid_file.clear()
    return 0
