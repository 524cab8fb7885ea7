"""
Self-adjusting scan interval.

After every cycle the delay before the next scan is recomputed from its
current value:

1. Every process newly moved to efficiency cores during the cycle shortens
   the delay by ASSIGNMENT_DECREMENT seconds while it is above
   DECREMENT_FLOOR. The decrements compound within a cycle.
2. Once per cycle the delay then grows by a step that depends on its size:

   ========== =================
   value      adjustment
   ========== =================
   < 1        reset to 10
   1 - 14     + 25
   15 - 90    + 1
   91 - 120   + 1
   121 - 180  + 2
   181 - 200  + 3
   > 200      + 5
   ========== =================

The net effect is that a quiet system is scanned less and less often, while
bursts of newly scheduled processes pull the interval back down. Without a
configured ``max_interval`` nothing bounds the growth: once no new processes
appear the interval keeps increasing by 5 seconds per cycle.
"""

from typing import Optional

ASSIGNMENT_DECREMENT = 3
DECREMENT_FLOOR = 15
RESET_INTERVAL = 10


def apply_assignment_decrement(current: int) -> int:
    """Shorten the interval for one new efficiency assignment."""
    if current > DECREMENT_FLOOR:
        return current - ASSIGNMENT_DECREMENT
    return current


def tiered_increase(current: int) -> int:
    """Apply the end-of-cycle growth step."""
    if current < 1:
        return RESET_INTERVAL
    if current < 15:
        return current + 25
    if current <= 120:
        return current + 1
    if current <= 180:
        return current + 2
    if current <= 200:
        return current + 3
    return current + 5


def next_interval(
    current: int, new_assignments: int = 0, max_interval: Optional[int] = None
) -> int:
    """
    Compute the next scan interval.

    Args:
        current: Interval in seconds entering the cycle
        new_assignments: Processes newly moved to efficiency cores this cycle
        max_interval: Optional upper bound, None for unbounded growth

    Returns:
        Interval in seconds before the next cycle

    Examples:
        >>> next_interval(50)
        51
        >>> next_interval(50, new_assignments=2)
        45
        >>> next_interval(14)
        39
    """
    value = current
    for _ in range(new_assignments):
        value = apply_assignment_decrement(value)
    value = tiered_increase(value)
    if max_interval is not None:
        value = min(value, max_interval)
    return value


class IntervalController:
    """
    Owns the live scan interval.

    The classifier's new-assignment signal is applied as it happens through
    record_new_assignment(); finish_cycle() applies the growth step once.
    Together they are equivalent to next_interval().
    """

    def __init__(self, initial: int, max_interval: Optional[int] = None):
        self.seconds = initial
        self.max_interval = max_interval

    def record_new_assignment(self) -> None:
        self.seconds = apply_assignment_decrement(self.seconds)

    def finish_cycle(self) -> int:
        """Apply the end-of-cycle adjustment and return the new interval."""
        self.seconds = next_interval(self.seconds, 0, self.max_interval)
        return self.seconds
