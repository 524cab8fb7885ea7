"""
The adaptive monitoring-and-classification loop.

This module contains the scheduling core: the affinity bookkeeping, the
heavy/light classifier, the self-adjusting scan interval and the loop that
ties them together.
"""

from .classifier import Classifier, is_heavy
from .interval import IntervalController, next_interval
from .loop import ScanLoop
from .state import AffinityState

__all__ = [
    "AffinityState",
    "Classifier",
    "IntervalController",
    "ScanLoop",
    "is_heavy",
    "next_interval",
]
