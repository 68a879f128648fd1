# File: utils/math_utils.py
"""Math and calculation utilities for PetBudget.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - round_stat: Consistent rounding for pet stats
    - clamp: Bound a value to a range
    - clamp_stat: Bound a stat to [STAT_MIN, STAT_MAX] with rounding
    - coerce_number: Best-effort numeric coercion for stored values
    - calculate_average: Mean of a sequence with rounding
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import math
from typing import Any

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for stat rounding
DATA_FLOAT_PRECISION = 2

STAT_MIN = 0.0
STAT_MAX = 100.0


# ==============================================================================
# Stat Arithmetic
# ==============================================================================


def round_stat(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a stat value to the configured precision.

    Prevents float drift from repeated fractional decay
    (e.g., 98.80000000000001 → 98.8).
    """
    return round(value, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-5, 0, 100) → 0
        clamp(50, 0, 100) → 50
    """
    return max(min_val, min(max_val, value))


def clamp_stat(value: float) -> float:
    """Clamp a stat to [STAT_MIN, STAT_MAX] and round it.

    NaN is treated as STAT_MIN so a corrupted value can never escape the range.
    """
    if math.isnan(value):
        return STAT_MIN
    return round_stat(clamp(value, STAT_MIN, STAT_MAX))


def coerce_number(value: Any, default: float) -> float:
    """Coerce a stored value to a finite float.

    Accepts ints, floats and numeric strings. Anything else (None, NaN,
    infinities, junk strings, bools) yields `default`.

    Examples:
        coerce_number("42.5", 100) → 42.5
        coerce_number(None, 100) → 100
        coerce_number("abc", 100) → 100
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not math.isfinite(number):
        return default
    return number


def calculate_average(
    values: Iterable[float], precision: int = DATA_FLOAT_PRECISION
) -> float:
    """Return the rounded arithmetic mean, or 0.0 for an empty sequence."""
    items = list(values)
    if not items:
        return 0.0
    return round(sum(items) / len(items), precision)
