"""Pure Python utilities for PetBudget.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed in this module.

Submodules:
    - dt_utils: Timestamp parsing, day keys, elapsed-unit arithmetic
    - math_utils: Stat clamping, rounding, numeric coercion
    - validation_utils: Pet name, slot and amount validation

Usage:
    from . import dt_utils
    from .math_utils import clamp_stat
"""

from . import dt_utils, math_utils, validation_utils

__all__ = ["dt_utils", "math_utils", "validation_utils"]
