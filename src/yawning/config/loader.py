"""
Reading the TOML configuration file.

Only parsing happens here; turning the tables into typed settings is the
job of `validators.py`.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import ErrorSeverity, handle_config_error

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Parse one TOML file.

    Args:
        file_path: File to read
        description: Name used in log and error messages

    Returns:
        The top-level table as a dict

    Raises:
        FileNotFoundError: If ``file_path`` does not exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    logger.debug(f"Reading {description}: {file_path}")
    with open(file_path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            handle_config_error(
                error=e,
                context=f"parsing {file_path}",
                severity=ErrorSeverity.CRITICAL,
                logger=logger,
            )
            raise


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """
    Read `config.toml`, or return an empty table when there is none.

    Yawning runs fine on built-in defaults, so a missing file is only
    worth an info message.
    """
    if not config_path.exists():
        logger.info(f"No configuration file at {config_path}, using built-in defaults")
        return {}
    return load_toml_file(config_path, "main configuration file")
