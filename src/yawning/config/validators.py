"""
Configuration validation utilities.

This module turns raw TOML tables into validated configuration models and
layers command-line overrides on top of them.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import (
    DEFAULT_LOG_FILE,
    DEFAULT_PID_FILE,
    AppConfig,
    DaemonConfig,
    SchedulerConfig,
    SelectionMode,
)
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_cpu_core_range,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_regex_pattern,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _validate_patterns(patterns: Any, field_name: str) -> tuple:
    if isinstance(patterns, str):
        patterns = [patterns]
    if not isinstance(patterns, (list, tuple)):
        raise ValidationError(
            f"{field_name} must be a list of strings",
            field_name=field_name,
            value=patterns,
        )
    return tuple(
        validate_regex_pattern(pattern, field_name=f"{field_name}[{i}]")
        for i, pattern in enumerate(patterns)
    )


def _validate_user_list(users: Any, field_name: str) -> tuple:
    if not isinstance(users, (list, tuple)) or not all(
        isinstance(user, str) and user for user in users
    ):
        raise ValidationError(
            f"{field_name} must be a list of non-empty strings",
            field_name=field_name,
            value=users,
        )
    return tuple(users)


def _validate_max_interval(value: Any, initial_interval: int) -> Optional[int]:
    # 0 or a missing key leaves the interval unbounded
    if value is None or value == 0:
        return None
    return validate_positive_integer(
        value,
        min_value=max(1, initial_interval),
        field_name="scheduler.max_interval",
    )


def validate_scheduler_config(scheduler_data: Dict[str, Any]) -> SchedulerConfig:
    """
    Validate and create a SchedulerConfig from raw configuration data.

    Args:
        scheduler_data: Raw `[scheduler]` table from TOML

    Returns:
        Validated SchedulerConfig instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = SchedulerConfig()

    name_patterns = _validate_patterns(
        scheduler_data.get("name_patterns", []), "scheduler.name_patterns"
    )

    selection_mode = SelectionMode(
        validate_enum_choice(
            scheduler_data.get("selection_mode", defaults.selection_mode.value),
            valid_choices=[mode.value for mode in SelectionMode],
            field_name="scheduler.selection_mode",
            case_sensitive=False,
        )
    )
    if selection_mode is SelectionMode.BY_NAME and not name_patterns:
        raise ValidationError(
            "scheduler.selection_mode is 'by_name' but no name_patterns are configured",
            field_name="scheduler.name_patterns",
        )

    initial_interval = validate_positive_integer(
        scheduler_data.get("initial_interval", defaults.initial_interval),
        min_value=1,
        max_value=86400,
        field_name="scheduler.initial_interval",
    )

    config = SchedulerConfig(
        selection_mode=selection_mode,
        name_patterns=name_patterns,
        track_foreground=validate_boolean(
            scheduler_data.get("track_foreground", defaults.track_foreground),
            field_name="scheduler.track_foreground",
        ),
        balance_mode=validate_boolean(
            scheduler_data.get("balance_mode", defaults.balance_mode),
            field_name="scheduler.balance_mode",
        ),
        per_process_threshold=validate_positive_float(
            scheduler_data.get("per_process_threshold", defaults.per_process_threshold),
            min_value=0.0,
            field_name="scheduler.per_process_threshold",
        ),
        total_load_threshold=validate_positive_float(
            scheduler_data.get("total_load_threshold", defaults.total_load_threshold),
            min_value=0.0,
            field_name="scheduler.total_load_threshold",
        ),
        excluded_users=_validate_user_list(
            scheduler_data.get("excluded_users", list(defaults.excluded_users)),
            "scheduler.excluded_users",
        ),
        initial_interval=initial_interval,
        max_interval=_validate_max_interval(
            scheduler_data.get("max_interval"), initial_interval
        ),
        pin_self=validate_boolean(
            scheduler_data.get("pin_self", defaults.pin_self),
            field_name="scheduler.pin_self",
        ),
        dry_run=validate_boolean(
            scheduler_data.get("dry_run", defaults.dry_run),
            field_name="scheduler.dry_run",
        ),
        efficiency_cores=validate_cpu_core_range(
            scheduler_data.get("efficiency_cores", ""),
            field_name="scheduler.efficiency_cores",
        ),
        performance_cores=validate_cpu_core_range(
            scheduler_data.get("performance_cores", ""),
            field_name="scheduler.performance_cores",
        ),
        sample_interval=validate_positive_float(
            scheduler_data.get("sample_interval", defaults.sample_interval),
            min_value=0.0,
            max_value=5.0,
            field_name="scheduler.sample_interval",
        ),
    )
    return config


def validate_daemon_config(daemon_data: Dict[str, Any]) -> DaemonConfig:
    """
    Validate and create a DaemonConfig from raw configuration data.

    Args:
        daemon_data: Raw `[daemon]` table from TOML

    Returns:
        Validated DaemonConfig instance

    Raises:
        ValidationError: If validation fails
    """
    pid_file = daemon_data.get("pid_file", str(DEFAULT_PID_FILE))
    log_file = daemon_data.get("log_file", str(DEFAULT_LOG_FILE))
    for field_name, value in (("daemon.pid_file", pid_file), ("daemon.log_file", log_file)):
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(
                f"{field_name} must be a non-empty path string",
                field_name=field_name,
                value=value,
            )

    log_level = validate_enum_choice(
        daemon_data.get("log_level", "INFO"),
        valid_choices=LOG_LEVELS,
        field_name="daemon.log_level",
        case_sensitive=False,
    )

    return DaemonConfig(
        pid_file=Path(pid_file).expanduser(),
        log_file=Path(log_file).expanduser(),
        log_level=log_level,
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """Validate the whole configuration file contents."""
    scheduler_data = config_data.get("scheduler", {})
    daemon_data = config_data.get("daemon", {})
    for section, data in (("scheduler", scheduler_data), ("daemon", daemon_data)):
        if not isinstance(data, dict):
            raise ValidationError(f"[{section}] must be a table", field_name=section)

    return AppConfig(
        scheduler=validate_scheduler_config(scheduler_data),
        daemon=validate_daemon_config(daemon_data),
    )


def apply_scheduler_overrides(
    base: SchedulerConfig, overrides: Dict[str, Any]
) -> SchedulerConfig:
    """
    Layer command-line overrides on top of a validated SchedulerConfig.

    Keys with a value of None are ignored. Any name pattern switches the
    selection mode to BY_NAME, whichever order the flags were given in.

    Args:
        base: Configuration loaded from file (or defaults)
        overrides: SchedulerConfig field names mapped to new values

    Returns:
        New validated SchedulerConfig instance

    Raises:
        ValidationError: If an override is invalid
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    unknown = set(changes) - {f.name for f in dataclasses.fields(SchedulerConfig)}
    if unknown:
        raise ValidationError(f"Unknown scheduler settings: {sorted(unknown)}")

    if "name_patterns" in changes:
        changes["name_patterns"] = _validate_patterns(
            changes["name_patterns"], "--pattern"
        )
        if not changes["name_patterns"]:
            del changes["name_patterns"]
    if "per_process_threshold" in changes:
        changes["per_process_threshold"] = validate_positive_float(
            changes["per_process_threshold"], min_value=0.0, field_name="-b"
        )
    if "total_load_threshold" in changes:
        changes["total_load_threshold"] = validate_positive_float(
            changes["total_load_threshold"], min_value=0.0, field_name="-c"
        )

    patterns = changes.get("name_patterns", base.name_patterns)
    if patterns:
        changes["selection_mode"] = SelectionMode.BY_NAME
    elif changes.get("selection_mode") is SelectionMode.BY_NAME:
        raise ValidationError("Name selection requires at least one -p PATTERN")

    config = dataclasses.replace(base, **changes)
    logger.debug(f"Resolved scheduler configuration: {config}")
    return config
