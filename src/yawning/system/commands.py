"""
Command execution utilities.

This module runs the small platform tools the scheduler relies on
(`taskpolicy`, `osascript`, `xdotool`) and checks for their presence.
"""

import logging
import shutil
import subprocess
from typing import List, Tuple

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 5.0


def run_command(
    command: List[str], timeout: float = DEFAULT_COMMAND_TIMEOUT
) -> Tuple[int, str, str]:
    """Execute a command and capture its output with robust error handling.

    Args:
        command: Program and arguments, executed without a shell.
        timeout: Seconds to wait before giving up on the command.

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is -1 when the command could not be run or timed out.

    Note:
        Uses UTF-8 encoding with error replacement for robust text handling.
    """
    logger.debug(f"Executing command: {command}")
    try:
        process = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError:
        logger.debug(f"Command not found: {command[0]}")
        return -1, "", f"Error: Command not found '{command[0]}'"
    except subprocess.TimeoutExpired:
        logger.debug(f"Command timed out after {timeout}s: {command}")
        return -1, "", f"Error: Command timed out after {timeout}s"
    except OSError as e:
        logger.warning(f"Failed to run {command[0]}: {type(e).__name__}: {e}")
        return -1, "", f"An unexpected error occurred: {e}"


def is_tool_available(name: str) -> bool:
    """Check whether an executable is found in the system PATH."""
    return shutil.which(name) is not None
