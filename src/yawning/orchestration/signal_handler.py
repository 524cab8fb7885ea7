"""
Signal handling for the scan loop.

SIGTERM (sent by `yawning stop`) and SIGINT ask the running loop to exit.
The loop finishes the current cycle and leaves during its end-of-cycle
wait; hints that were applied stay in place.
"""

import logging
import signal
from typing import Any

from ..scheduling.loop import ScanLoop

logger = logging.getLogger(__name__)


class SignalHandler:
    """
    Manages signal registration and cleanup for a ScanLoop.
    """

    def __init__(self, loop: ScanLoop):
        self.loop = loop
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._signal_handlers_set = False

    def setup_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to the loop's stop request."""
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, self._handle_signal)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, self._handle_signal)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up for scan loop")
        except (ValueError, OSError) as e:
            # signal.signal only works in the main thread
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        if not self._signal_handlers_set:
            return

        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        except (ValueError, OSError) as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._signal_handlers_set = False

    def _handle_signal(self, signum: int, frame: Any) -> None:
        if self.loop.stop_requested:
            logger.warning("Shutdown already in progress.")
            return
        logger.info(f"Signal {signal.strsignal(signum)} received. Stopping scan loop...")
        self.loop.request_stop()

    def __enter__(self) -> "SignalHandler":
        self.setup_signal_handlers()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.cleanup_signal_handlers()
