"""Short-horizon trend over a metric series"""
from typing import Optional, Sequence

from config.settings import TREND_WINDOW
from services.bands import is_blank


def calculate_trend(values: Sequence[Optional[float]], window: int = TREND_WINDOW) -> float:
    """
    Percentage change between the first and last of the trailing ``window``
    values.

    Returns 0 with fewer than two values, or when either endpoint is
    None, 0 or NaN.
    """
    if not values or len(values) < 2:
        return 0.0

    recent = list(values)[-window:]
    first, last = recent[0], recent[-1]
    if is_blank(first) or is_blank(last):
        return 0.0
    # Not a percentage; kept for parity with the dashboard's original output
    if first == 0:
        return float((last - first) * 100)
    return (last - first) / first * 100
