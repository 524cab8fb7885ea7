"""
Frontmost application lookup.

macOS asks System Events through `osascript`; X11 desktops on Linux use
`xdotool`. Anything else, or any failure, yields no foreground process.
"""

import logging
import platform
from typing import Dict, List, Optional

from .commands import run_command

logger = logging.getLogger(__name__)

FOREGROUND_COMMANDS: Dict[str, List[str]] = {
    "darwin": [
        "osascript",
        "-e",
        'tell application "System Events" to get unix id of first process whose frontmost is true',
    ],
    "linux": ["xdotool", "getactivewindow", "getwindowpid"],
}


class ForegroundResolver:
    """Reports the PID of the frontmost application."""

    def __init__(self, enabled: bool = True, system: Optional[str] = None):
        self.enabled = enabled
        self.system = (system or platform.system()).lower()
        self.command = FOREGROUND_COMMANDS.get(self.system)

    def resolve(self) -> Optional[int]:
        """
        Return the frontmost process ID, or None when unavailable or disabled.
        """
        if not self.enabled or self.command is None:
            return None

        return_code, stdout, stderr = run_command(self.command)
        if return_code != 0:
            logger.debug(f"Foreground lookup failed ({return_code}): {stderr.strip()}")
            return None

        output = stdout.strip()
        if not output.isdigit() or int(output) <= 0:
            logger.debug(f"Unexpected foreground lookup output: {output!r}")
            return None
        return int(output)
