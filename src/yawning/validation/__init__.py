"""
Validation and error handling for the yawning package.

This module provides input validation and error handling with consistent
error reporting across the scheduler.
"""

from .exceptions import (
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)
from .validators import (
    validate_boolean,
    validate_cpu_core_range,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_regex_pattern,
)

__all__ = [
    # Core functionality
    "ErrorSeverity",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_cli_error",
    # Validators
    "validate_boolean",
    "validate_cpu_core_range",
    "validate_enum_choice",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_regex_pattern",
]
