"""Progression Engine - XP, age stages and evolution events.

Stages are derived from XP through AGE_STAGE_THRESHOLDS (Baby, Young, Adult,
Mature). The stored `age_stage` is a cache of that function and is refreshed
every time XP changes.

Evolution detection compares the current stage with `acknowledged_stage`,
the last stage the player was shown. Event ids are deterministic
("{pet_id}:{from}->{to}") so repeated checks before acknowledgment expose
the same event, and an acknowledged event is never emitted again.

    check_evolution()         acknowledge_evolution()
    acknowledged=0, xp=25 ──► event "p:0->1" ──► acknowledged=1, ack_id="p:0->1"

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Checking never persists anything; acknowledgment returns a new snapshot.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_now_utc, dt_to_iso
from ..utils.math_utils import coerce_number

if TYPE_CHECKING:
    from ..type_defs import PetData


@dataclass(frozen=True)
class EvolutionEvent:
    """A stage crossing the player has not acknowledged yet."""

    id: str
    from_stage: int
    to_stage: int
    at_xp: int


@dataclass
class EvolutionCheck:
    """Result of check_evolution: the pet and the pending event, if any."""

    pet: PetData
    event: EvolutionEvent | None = None


class ProgressionEngine:
    """Stateless XP and stage logic."""

    @staticmethod
    def get_age_stage(xp: float) -> int:
        """Return the stage for an XP total (highest satisfied threshold)."""
        for stage, threshold in const.AGE_STAGE_THRESHOLDS:
            if xp >= threshold:
                return stage
        return const.AGE_STAGE_BABY

    @staticmethod
    def age_label(stage: int) -> str:
        """Human label for a stage ("Baby", "Young", "Adult", "Mature")."""
        return const.AGE_STAGE_LABELS.get(
            stage, const.AGE_STAGE_LABELS[const.AGE_STAGE_BABY]
        )

    @staticmethod
    def event_id(pet_id: str, from_stage: int, to_stage: int) -> str:
        """Deterministic evolution event id."""
        return f"{pet_id}:{from_stage}->{to_stage}"

    @staticmethod
    def get_acknowledged_stage(pet: PetData) -> int:
        """Return the evolution baseline.

        Snapshots written before `acknowledged_stage` existed fall back to
        the stored `age_stage`, then to the stage implied by XP.
        """
        for key in (const.DATA_PET_ACKNOWLEDGED_STAGE, const.DATA_PET_AGE_STAGE):
            value = pet.get(key)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        return ProgressionEngine.get_age_stage(pet.get(const.DATA_PET_XP, 0))

    @staticmethod
    def give_xp(pet: PetData, amount: int, now: datetime | None = None) -> PetData:
        """Return a copy of the pet with XP added (capped) and age_stage refreshed.

        Non-positive amounts return an unchanged copy.
        """
        new_pet = copy.deepcopy(pet)
        if amount <= 0:
            return new_pet
        xp = int(coerce_number(pet.get(const.DATA_PET_XP), 0)) + int(amount)
        new_pet[const.DATA_PET_XP] = min(xp, const.MAX_XP)
        new_pet[const.DATA_PET_AGE_STAGE] = ProgressionEngine.get_age_stage(
            new_pet[const.DATA_PET_XP]
        )
        new_pet[const.DATA_PET_LAST_UPDATED] = dt_to_iso(now or dt_now_utc())
        return new_pet

    @staticmethod
    def check_evolution(pet: PetData) -> EvolutionCheck:
        """Detect an unacknowledged stage crossing."""
        xp = pet.get(const.DATA_PET_XP, 0)
        from_stage = ProgressionEngine.get_acknowledged_stage(pet)
        to_stage = ProgressionEngine.get_age_stage(xp)
        if to_stage <= from_stage:
            return EvolutionCheck(pet)

        event_id = ProgressionEngine.event_id(
            pet[const.DATA_PET_ID], from_stage, to_stage
        )
        if pet.get(const.DATA_PET_LAST_EVOLUTION_ACK_ID) == event_id:
            return EvolutionCheck(pet)

        return EvolutionCheck(
            pet, EvolutionEvent(event_id, from_stage, to_stage, int(xp))
        )

    @staticmethod
    def acknowledge_evolution(
        pet: PetData, event_id: str, now: datetime | None = None
    ) -> PetData:
        """Record that the player saw `event_id` and advance the baseline.

        The target stage is read from the id; an unparseable id only stamps
        the ack id and leaves the baseline where it was.
        """
        new_pet = copy.deepcopy(pet)
        new_pet[const.DATA_PET_LAST_EVOLUTION_ACK_ID] = event_id
        _, _, transition = event_id.rpartition(":")
        _, _, to_part = transition.partition("->")
        try:
            to_stage = int(to_part)
        except ValueError:
            const.LOGGER.warning(
                "WARNING: Evolution event id has no target stage: %s", event_id
            )
        else:
            new_pet[const.DATA_PET_ACKNOWLEDGED_STAGE] = max(
                ProgressionEngine.get_acknowledged_stage(pet), to_stage
            )
        new_pet[const.DATA_PET_LAST_UPDATED] = dt_to_iso(now or dt_now_utc())
        return new_pet
