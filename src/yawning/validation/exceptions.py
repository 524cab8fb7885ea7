"""
Error types and reporting helpers.

Yawning distinguishes two kinds of failure. Per-process problems (an exited
PID, a refused hint) are logged where they happen and never leave the scan
cycle. Configuration problems raise ValidationError and stop the program
before the loop starts; the helpers below log them uniformly and then either
re-raise or exit.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """How loudly an error is reported."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def level(self) -> int:
        return getattr(logging, self.name)


# Records at these severities carry the traceback.
_TRACEBACK_SEVERITIES = (ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL)


class ValidationError(Exception):
    """
    A setting from the config file or the command line is unusable.

    Fatal to startup: the scan loop never begins when one is raised while
    resolving the configuration.

    Attributes:
        field_name: Config key or CLI flag the value came from, if known.
        value: The rejected value.
        severity: How the error should be reported.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log ``error`` as having happened while doing ``context``.

    Args:
        error: The exception being reported
        context: What was being done, e.g. "parsing main configuration file"
        severity: ErrorSeverity or its name ("warning", "critical", ...)
        reraise: Re-raise ``error`` after logging it
        logger: Logger of the calling module; this module's logger if omitted
    """
    if not isinstance(severity, ErrorSeverity):
        severity = ErrorSeverity(str(severity).lower())

    target = logger if logger is not None else logging.getLogger(__name__)
    target.log(
        severity.level,
        f"Error while {context}: {error}",
        exc_info=severity in _TRACEBACK_SEVERITIES,
    )

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Report a problem reading or validating the configuration."""
    handle_error(error, f"{context} (configuration)", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """
    Report a startup error and end the process.

    Keyword Args:
        exit_code: Process exit status, 1 by default
        severity: Defaults to ErrorSeverity.ERROR
        logger: Forwarded to handle_error()
    """
    exit_code = kwargs.pop('exit_code', 1)
    kwargs.setdefault('severity', ErrorSeverity.ERROR)
    handle_error(error, context, reraise=False, **kwargs)
    sys.exit(exit_code)
