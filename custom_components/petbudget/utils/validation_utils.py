# File: utils/validation_utils.py
"""Input validation utilities for PetBudget.

Pure Python validation with ZERO Home Assistant dependencies. Each validator
returns a ValidationResult instead of raising, so callers can surface the
message and recovery hint directly to the player.

Two layers are checked, in this order:
1. Syntactic: type, emptiness, numeric parsing, character set
2. Semantic: ranges, whitespace rules, banned words
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Any

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

PET_NAME_MIN_LENGTH = 1
PET_NAME_MAX_LENGTH = 30

# Letters and digits from any script, plus spaces, hyphens and apostrophes
_PET_NAME_PATTERN = re.compile(r"^(?:[^\W_]|[\s'\-])+$")

BANNED_NAME_WORDS: tuple[str, ...] = (
    "admin",
    "system",
    "null",
    "undefined",
    "test",
    "delete",
    "drop",
)

SAVE_SLOT_MIN = 1
SAVE_SLOT_MAX = 3


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation check.

    Attributes:
        is_valid: True when the input passed every check
        error: Human-readable problem description (empty when valid)
        recovery: Optional suggestion for fixing the input
    """

    is_valid: bool
    error: str = ""
    recovery: str | None = None


VALID = ValidationResult(is_valid=True)


def _invalid(error: str, recovery: str | None = None) -> ValidationResult:
    return ValidationResult(is_valid=False, error=error, recovery=recovery)


# ==============================================================================
# Pet Names
# ==============================================================================


def validate_pet_name(name: Any) -> ValidationResult:
    """Validate a pet name.

    Rules:
    - Must be text, 1-30 characters after trimming
    - Letters, numbers, spaces, hyphens and apostrophes only
    - No leading or trailing spaces
    - Must not contain a banned word (case-insensitive substring match)
    """
    if not isinstance(name, str):
        return _invalid(
            "Pet name must be text.",
            "Please enter a valid name using letters and numbers.",
        )

    trimmed = name.strip()
    if not trimmed:
        return _invalid(
            "Pet name cannot be empty.",
            f"Please enter a name for your pet ({PET_NAME_MIN_LENGTH}-"
            f"{PET_NAME_MAX_LENGTH} characters).",
        )

    if len(trimmed) > PET_NAME_MAX_LENGTH:
        return _invalid(
            f"Pet name cannot exceed {PET_NAME_MAX_LENGTH} characters.",
            f"Please choose a shorter name (maximum {PET_NAME_MAX_LENGTH} characters).",
        )

    if not _PET_NAME_PATTERN.match(trimmed):
        return _invalid(
            "Pet name can only contain letters, numbers, spaces, hyphens, "
            "and apostrophes.",
            "Please remove any special characters and try again.",
        )

    if name != trimmed:
        return _invalid(
            "Pet name cannot start or end with spaces.",
            "Please remove leading or trailing spaces.",
        )

    lowered = trimmed.lower()
    if any(word in lowered for word in BANNED_NAME_WORDS):
        return _invalid(
            "Pet name contains inappropriate content.",
            "Please choose a different name.",
        )

    return VALID


# ==============================================================================
# Numbers
# ==============================================================================


def validate_numeric(
    value: Any,
    *,
    min_value: float = 0,
    max_value: float = math.inf,
    integer_only: bool = False,
    allow_negative: bool = False,
    field_name: str = "Value",
) -> ValidationResult:
    """Validate a numeric input (number or numeric string)."""
    if isinstance(value, bool):
        return _invalid(
            f"{field_name} must be a valid number.",
            "Please enter a numeric value (e.g., 10, 25.5).",
        )

    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return _invalid(
                f"{field_name} cannot be empty.", "Please enter a number."
            )
        try:
            number = float(stripped)
        except ValueError:
            return _invalid(
                f"{field_name} must be a valid number.",
                "Please enter a numeric value (e.g., 10, 25.5).",
            )
    elif isinstance(value, int | float):
        number = float(value)
    else:
        return _invalid(
            f"{field_name} must be a valid number.",
            "Please enter a numeric value (e.g., 10, 25.5).",
        )

    if math.isnan(number):
        return _invalid(
            f"{field_name} must be a valid number.",
            "Please enter a numeric value (e.g., 10, 25.5).",
        )
    if math.isinf(number):
        return _invalid(
            f"{field_name} must be a finite number.",
            "Please enter a reasonable number.",
        )
    if not allow_negative and number < 0:
        return _invalid(
            f"{field_name} cannot be negative.", "Please enter a positive number."
        )
    if integer_only and not number.is_integer():
        return _invalid(
            f"{field_name} must be a whole number.",
            "Please enter a whole number without decimals.",
        )
    if number < min_value:
        return _invalid(
            f"{field_name} must be at least {min_value:g}. You entered {number:g}.",
            f"Please enter a value between {min_value:g} and {max_value:g}.",
        )
    if number > max_value:
        return _invalid(
            f"{field_name} cannot exceed {max_value:g}. You entered {number:g}.",
            f"Please enter a value between {min_value:g} and {max_value:g}.",
        )
    return VALID


def validate_save_slot(slot: Any) -> ValidationResult:
    """Validate a save slot number (1, 2 or 3)."""
    if slot is None:
        return _invalid(
            "No save slot selected.",
            f"Please select a save slot ({SAVE_SLOT_MIN}-{SAVE_SLOT_MAX}).",
        )
    result = validate_numeric(
        slot,
        min_value=SAVE_SLOT_MIN,
        max_value=SAVE_SLOT_MAX,
        integer_only=True,
        field_name="Save slot",
    )
    if result.is_valid:
        return VALID
    return _invalid(
        "Invalid save slot. Must be 1, 2, or 3.", "Please select a valid save slot."
    )
