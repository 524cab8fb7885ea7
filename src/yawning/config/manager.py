"""
Process-wide access to the resolved configuration.

`get_config()` reads and validates `config.toml` on first use and hands out
the same AppConfig afterwards. The CLI points it at another file with
`set_config_path()` (the `--config` option); tests reset it between cases.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import ErrorSeverity, handle_config_error
from .loader import load_main_config
from .validators import validate_app_config

logger = logging.getLogger(__name__)

# --- Configuration singleton ---

_CONFIG: Optional[AppConfig] = None

# <repository>/conf/config.toml
_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"


def set_config_path(config_path: Path) -> None:
    """Use ``config_path`` from now on and drop any cached configuration."""
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.debug(f"Configuration file: {_CONFIG_FILE_PATH}")


def get_config_path() -> Path:
    return _CONFIG_FILE_PATH


def clear_config_cache() -> None:
    """Make the next get_config() call read the file again."""
    global _CONFIG
    _CONFIG = None


def _load_config(config_path: Path) -> AppConfig:
    try:
        app_config = validate_app_config(load_main_config(config_path))
    except Exception as e:
        handle_config_error(
            error=e,
            context=f"loading {config_path}",
            severity=ErrorSeverity.ERROR,
            logger=logger,
        )
        raise
    logger.debug(f"Configuration loaded from {config_path}: {app_config}")
    return app_config


def get_config() -> AppConfig:
    """
    Return the application configuration, loading it on first use.

    Raises:
        ValidationError: If a setting in the file is invalid
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None
