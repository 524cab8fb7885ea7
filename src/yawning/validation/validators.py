"""
Value validators for configuration and command-line input.

Each validator returns the normalised value or raises ValidationError with
the offending field name attached, so the message can point at the exact
config key or flag (e.g. ``scheduler.total_load_threshold`` or ``-c``).
"""

import math
import re
from typing import Any, Callable, List, Optional, Union

from .exceptions import ValidationError

Number = Union[int, float]

# "4-7", "0,2,4-5"
_CORE_RANGE_RE = re.compile(r"^\d+(-\d+)?(,\d+(-\d+)?)*$")


def _reject(field_name: str, value: Any, problem: str) -> ValidationError:
    return ValidationError(f"{field_name} {problem}", field_name=field_name, value=value)


def _number_in_range(
    value: Any,
    cast: Callable[[Any], Number],
    kind: str,
    min_value: Number,
    max_value: Optional[Number],
    field_name: str,
) -> Number:
    # TOML and argparse both hand over bools that int()/float() would accept
    if isinstance(value, bool):
        raise _reject(field_name, value, f"must be {kind}, got {value!r}")
    try:
        number = cast(value)
    except (ValueError, TypeError):
        raise _reject(field_name, value, f"must be {kind}, got {value!r}")
    if isinstance(number, float) and math.isnan(number):
        raise _reject(field_name, value, f"must be {kind}, got {value!r}")

    if number < min_value:
        raise _reject(field_name, value, f"must be >= {min_value}, got {number}")
    if max_value is not None and number > max_value:
        raise _reject(field_name, value, f"must be <= {max_value}, got {number}")
    return number


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate an integer setting such as ``initial_interval``.

    Args:
        value: Raw value (int or numeric string)
        min_value: Smallest accepted value
        max_value: Largest accepted value, None for no limit
        field_name: Config key or flag, used in the error message

    Returns:
        The value as int

    Raises:
        ValidationError: If the value is not an integer or out of range
    """
    return _number_in_range(value, int, "an integer", min_value, max_value, field_name)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate a numeric setting such as a CPU threshold.

    Command-line thresholds arrive as strings and are converted here.
    NaN is rejected because it compares false against every threshold.

    Raises:
        ValidationError: If the value is not a number or out of range
    """
    return _number_in_range(value, float, "a number", min_value, max_value, field_name)


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """Accept only real booleans (TOML true/false), not 0/1 or strings."""
    if not isinstance(value, bool):
        raise _reject(field_name, value, f"must be true or false, got {value!r}")
    return value


def validate_regex_pattern(pattern: Any, field_name: str = "pattern") -> str:
    """
    Check that a process name pattern compiles.

    Raises:
        ValidationError: If the pattern is empty or not a valid regex
    """
    if not isinstance(pattern, str) or not pattern:
        raise _reject(field_name, pattern, "must be a non-empty string")
    try:
        re.compile(pattern)
    except re.error as e:
        raise _reject(field_name, pattern, f"is not a valid regex pattern: {e}")
    return pattern


def validate_cpu_core_range(cores: Any, field_name: str = "cores") -> str:
    """
    Check a core list such as "0-3" or "1,3,5-7".

    An empty string means the range is not configured and is accepted.
    Whether the cores exist on this machine is checked later, when the
    affinity back-end is created.

    Returns:
        The range string without surrounding whitespace
    """
    if not isinstance(cores, str):
        raise _reject(field_name, cores, "must be a string")
    cores = cores.strip()
    if cores and not _CORE_RANGE_RE.match(cores):
        raise _reject(field_name, cores, f"must look like '0-3' or '1,3,5-7': {cores}")
    return cores


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Returns:
        The matching entry of ``valid_choices``, so "debug" becomes "DEBUG"
        when matching case-insensitively

    Raises:
        ValidationError: If value is not in choices
    """
    text = str(value)
    for choice in valid_choices:
        if choice == text or (not case_sensitive and choice.lower() == text.lower()):
            return choice
    raise _reject(field_name, value, f"must be one of {valid_choices}, got {value!r}")
