"""Pet Engine - Pet lifecycle helpers.

Creation, normalization of loaded snapshots, stat delta application, and
derived read-only views (mood, care score).

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import TYPE_CHECKING, Any
import uuid

from .. import const
from ..utils.dt_utils import dt_now_utc, dt_to_iso
from ..utils.math_utils import calculate_average, clamp_stat, coerce_number
from ..utils.validation_utils import validate_pet_name
from .economy_engine import ActionResult
from .progression_engine import ProgressionEngine

if TYPE_CHECKING:
    from ..type_defs import PetData, PetStats


class PetEngine:
    """Stateless pet lifecycle logic."""

    @staticmethod
    def default_stats() -> PetStats:
        """Every stat starts full."""
        return dict.fromkeys(const.STAT_KEYS, const.DEFAULT_STAT_VALUE)  # type: ignore[return-value]

    @staticmethod
    def create_pet(
        name: Any,
        species: str,
        now: datetime | None = None,
        pet_id: str | None = None,
    ) -> ActionResult:
        """Build a brand new pet.

        New pets start with DEFAULT_STARTING_COINS, full stats, zero XP and the
        Baby stage. Returns a failed result for an invalid name or species.
        """
        name_check = validate_pet_name(name)
        if not name_check.is_valid:
            const.LOGGER.debug("DEBUG: Rejected pet name %r: %s", name, name_check.error)
            return ActionResult(False, None, message=name_check.error)
        if species not in const.SPECIES_OPTIONS:
            return ActionResult(
                False,
                None,
                message=f"Unknown species: {species}. Choose one of "
                f"{', '.join(const.SPECIES_OPTIONS)}.",
            )

        timestamp = dt_to_iso(now or dt_now_utc())
        pet: PetData = {
            const.DATA_PET_ID: pet_id or uuid.uuid4().hex,
            const.DATA_PET_NAME: name,
            const.DATA_PET_SPECIES: species,
            const.DATA_PET_XP: 0,
            const.DATA_PET_AGE_STAGE: const.AGE_STAGE_BABY,
            const.DATA_PET_ACKNOWLEDGED_STAGE: const.AGE_STAGE_BABY,
            const.DATA_PET_STATS: PetEngine.default_stats(),
            const.DATA_PET_COINS: const.DEFAULT_STARTING_COINS,
            const.DATA_PET_LIFETIME_EARNINGS: 0,
            const.DATA_PET_INVENTORY: {},
            const.DATA_PET_TRICKS: [],
            const.DATA_PET_BADGES: [],
            const.DATA_PET_CREATED_AT: timestamp,
            const.DATA_PET_LAST_UPDATED: timestamp,
            const.DATA_PET_LAST_DECAY_AT: timestamp,
            const.DATA_PET_LAST_EVOLUTION_ACK_ID: None,
        }
        return ActionResult(True, pet, message=f"Welcome home, {name}!")

    @staticmethod
    def normalize_pet(raw: dict[str, Any]) -> PetData:
        """Back-fill a loaded snapshot so it satisfies the current schema.

        - Missing inventory, tricks and badges become empty containers
        - Missing last_decay_at falls back to last_updated, then created_at
        - Non-numeric stats are coerced, defaulting to full
        - age_stage is recomputed from XP; acknowledged_stage falls back to the
          stored age_stage so an old save does not replay past evolutions
        """
        pet: dict[str, Any] = copy.deepcopy(raw)

        inventory = pet.get(const.DATA_PET_INVENTORY)
        if not isinstance(inventory, dict):
            inventory = {}
        pet[const.DATA_PET_INVENTORY] = {
            str(item_id): max(0, int(coerce_number(count, 0)))
            for item_id, count in inventory.items()
        }
        for key in (const.DATA_PET_TRICKS, const.DATA_PET_BADGES):
            value = pet.get(key)
            pet[key] = list(dict.fromkeys(value)) if isinstance(value, list) else []

        if not pet.get(const.DATA_PET_LAST_DECAY_AT):
            pet[const.DATA_PET_LAST_DECAY_AT] = pet.get(
                const.DATA_PET_LAST_UPDATED
            ) or pet.get(const.DATA_PET_CREATED_AT)

        stats = pet.get(const.DATA_PET_STATS)
        if not isinstance(stats, dict):
            stats = {}
        pet[const.DATA_PET_STATS] = {
            key: clamp_stat(coerce_number(stats.get(key), const.DEFAULT_STAT_VALUE))
            for key in const.STAT_KEYS
        }

        pet[const.DATA_PET_COINS] = max(
            0, int(coerce_number(pet.get(const.DATA_PET_COINS), 0))
        )
        pet[const.DATA_PET_LIFETIME_EARNINGS] = max(
            0, int(coerce_number(pet.get(const.DATA_PET_LIFETIME_EARNINGS), 0))
        )
        xp = max(0, int(coerce_number(pet.get(const.DATA_PET_XP), 0)))
        pet[const.DATA_PET_XP] = min(xp, const.MAX_XP)

        pet[const.DATA_PET_ACKNOWLEDGED_STAGE] = (
            ProgressionEngine.get_acknowledged_stage(pet)  # type: ignore[arg-type]
        )
        pet[const.DATA_PET_AGE_STAGE] = ProgressionEngine.get_age_stage(
            pet[const.DATA_PET_XP]
        )
        pet.setdefault(const.DATA_PET_LAST_EVOLUTION_ACK_ID, None)
        if pet.get(const.DATA_PET_SPECIES) not in const.SPECIES_OPTIONS:
            pet[const.DATA_PET_SPECIES] = const.SPECIES_CAT
        return pet  # type: ignore[return-value]

    @staticmethod
    def apply_stat_deltas(stats: PetStats, deltas: dict[str, float]) -> PetStats:
        """Return a new stats map with deltas added and every stat clamped."""
        new_stats = dict(stats)
        for stat, delta in deltas.items():
            new_stats[stat] = clamp_stat(new_stats.get(stat, 0) + delta)
        return new_stats  # type: ignore[return-value]

    # =========================================================================
    # DERIVED VIEWS
    # =========================================================================

    @staticmethod
    def get_mood(pet: PetData) -> str:
        """Derive the pet's mood from its stats."""
        stats = pet[const.DATA_PET_STATS]
        if stats[const.STAT_HEALTH] < const.MOOD_SICK_HEALTH_BELOW:
            return const.MOOD_SICK
        if (
            stats[const.STAT_HAPPINESS] < const.MOOD_SAD_HAPPINESS_BELOW
            or stats[const.STAT_HUNGER] < const.MOOD_SAD_HUNGER_BELOW
        ):
            return const.MOOD_SAD
        if (
            stats[const.STAT_ENERGY] > const.MOOD_ENERGETIC_ABOVE
            and stats[const.STAT_HAPPINESS] > const.MOOD_ENERGETIC_ABOVE
        ):
            return const.MOOD_ENERGETIC
        return const.MOOD_HAPPY

    @staticmethod
    def get_care_score(pet: PetData) -> float:
        """Mean of the five stats."""
        stats = pet[const.DATA_PET_STATS]
        return calculate_average(stats[key] for key in const.STAT_KEYS)
