"""Decay Engine - Pure logic for time-based stat decay.

Pet needs fall while the player is away. Decay is computed in whole units
(one minute each) since `last_decay_at`, so applying it twice with the same
`now` is a no-op. A call that lands inside the first minute leaves the
anchor alone; any call that applies decay moves the anchor to `now`.

Per unit:
- Hunger, energy, cleanliness and happiness drop at fixed rates
- Happiness drops faster while hunger, energy or cleanliness is low
- Health drops in proportion to how far the needs sit below their midpoint
- Health recovers slowly while hunger, energy and cleanliness are all healthy

At most DECAY_MAX_UNITS_PER_CALL units are applied per call, so a device
waking after hours away cannot wipe every stat at once. The multiplier
(DEMO_DECAY_MULTIPLIER for demo slots) scales the unit count, never the rates.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_elapsed_units, dt_parse, dt_to_iso
from ..utils.math_utils import STAT_MAX, STAT_MIN, clamp, clamp_stat, coerce_number

if TYPE_CHECKING:
    from ..type_defs import PetData, PetStats


DECAY_UNIT = timedelta(seconds=const.DECAY_UNIT_SECONDS)


class DecayEngine:
    """Stateless decay calculations."""

    @staticmethod
    def get_decay_anchor(pet: PetData) -> datetime | None:
        """Return the instant decay was last applied.

        Older snapshots may lack `last_decay_at`; fall back to `last_updated`,
        then `created_at`.
        """
        for key in (
            const.DATA_PET_LAST_DECAY_AT,
            const.DATA_PET_LAST_UPDATED,
            const.DATA_PET_CREATED_AT,
        ):
            anchor = dt_parse(pet.get(key))
            if anchor is not None:
                return anchor
        return None

    @staticmethod
    def elapsed_units(pet: PetData, now: datetime) -> int:
        """Whole decay units elapsed since the anchor (0 when unknown)."""
        anchor = DecayEngine.get_decay_anchor(pet)
        if anchor is None:
            return 0
        return dt_elapsed_units(anchor, now, DECAY_UNIT)

    @staticmethod
    def decay_stats(stats: PetStats, units: float) -> PetStats:
        """Apply `units` of decay to a stats map and return the clamped result.

        Stages run in order, each clamped and each judged on the values left
        by the stage before: needs decay, then happiness (with low-need
        penalties), then health neglect, then health recovery.
        """
        result = {
            key: coerce_number(stats.get(key), const.DEFAULT_STAT_VALUE)
            for key in const.STAT_KEYS
        }

        def _bounded(value: float) -> float:
            return clamp(value, STAT_MIN, STAT_MAX)

        for stat in (const.STAT_HUNGER, const.STAT_ENERGY, const.STAT_CLEANLINESS):
            result[stat] = _bounded(result[stat] - const.DECAY_RATES[stat] * units)

        happiness_loss = const.DECAY_RATES[const.STAT_HAPPINESS] * units
        for stat, penalty in const.DECAY_HAPPINESS_PENALTIES.items():
            if result[stat] < const.DECAY_LOW_STAT_THRESHOLD:
                happiness_loss += penalty * units
        result[const.STAT_HAPPINESS] = _bounded(
            result[const.STAT_HAPPINESS] - happiness_loss
        )

        neglect = sum(
            weight * max(0.0, const.DECAY_NEGLECT_MIDPOINT - result[stat])
            for stat, weight in const.DECAY_NEGLECT_WEIGHTS.items()
        )
        result[const.STAT_HEALTH] = _bounded(
            result[const.STAT_HEALTH]
            - neglect * const.DECAY_NEGLECT_HEALTH_FACTOR * units
        )

        if all(
            result[stat] >= const.DECAY_RECOVERY_THRESHOLD
            for stat in (const.STAT_HUNGER, const.STAT_ENERGY, const.STAT_CLEANLINESS)
        ):
            result[const.STAT_HEALTH] += (
                const.DECAY_RECOVERY_RATE * const.DECAY_RECOVERY_FACTOR * units
            )

        return {key: clamp_stat(value) for key, value in result.items()}  # type: ignore[return-value]

    @staticmethod
    def apply_decay(
        pet: PetData,
        now: datetime,
        multiplier: float = const.DEFAULT_DECAY_MULTIPLIER,
    ) -> PetData:
        """Return a new pet snapshot with decay applied up to `now`.

        When less than one whole unit has elapsed the result equals the input
        and `last_decay_at` is left alone, so the fractional remainder is
        not lost.
        """
        new_pet = copy.deepcopy(pet)
        units = DecayEngine.elapsed_units(pet, now)
        if units <= 0:
            if DecayEngine.get_decay_anchor(pet) is None:
                const.LOGGER.debug(
                    "DEBUG: Pet %s has no decay anchor, starting clock now",
                    pet.get(const.DATA_PET_ID),
                )
                new_pet[const.DATA_PET_LAST_DECAY_AT] = dt_to_iso(now)
            return new_pet

        applied = min(units, const.DECAY_MAX_UNITS_PER_CALL) * max(multiplier, 0.0)
        if units > const.DECAY_MAX_UNITS_PER_CALL:
            const.LOGGER.debug(
                "DEBUG: Capping decay for pet %s: %s units elapsed, applying %s",
                pet.get(const.DATA_PET_ID),
                units,
                const.DECAY_MAX_UNITS_PER_CALL,
            )

        new_pet[const.DATA_PET_STATS] = DecayEngine.decay_stats(
            pet.get(const.DATA_PET_STATS, {}), applied
        )
        new_pet[const.DATA_PET_LAST_DECAY_AT] = dt_to_iso(now)
        return new_pet
