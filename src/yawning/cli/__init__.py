"""
Command-line interface for the yawning package.

This module provides the main CLI entry point for the scheduler.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
