"""Gamification Manager - XP, evolution, daily quests and badges.

Works on the coordinator's slot session:
- XP awards and evolution detection/acknowledgment (ProgressionEngine)
- Daily quest rollover, progress hooks and reward claims (QuestEngine)
- Badge evaluation and awarding (BadgeEngine)

Evolution and badge events are announced through the dispatcher. Each
evolution event id is announced at most once per session even though
ProgressionEngine re-exposes it on every check until it is acknowledged.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from .. import const
from ..engines.badge_engine import BadgeEngine
from ..engines.economy_engine import ActionResult, EconomyEngine
from ..engines.progression_engine import EvolutionEvent, ProgressionEngine
from ..engines.quest_engine import QuestEngine
from ..utils.dt_utils import dt_day_key, dt_now_utc
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PetBudgetCoordinator
    from ..type_defs import QuestSet


class GamificationManager(BaseManager):
    """Manager for progression, quests and badges."""

    def __init__(self, hass: HomeAssistant, coordinator: PetBudgetCoordinator) -> None:
        """Initialize the GamificationManager."""
        super().__init__(hass, coordinator)
        self._announced_events: set[str] = set()

    async def async_setup(self) -> None:
        """Set up the GamificationManager."""
        const.LOGGER.debug(
            "DEBUG: GamificationManager ready for entry %s", self.entry_id
        )

    def reset_session(self) -> None:
        """Forget announced events (called when another slot is loaded)."""
        self._announced_events.clear()

    # =========================================================================
    # XP & EVOLUTION
    # =========================================================================

    def give_xp(self, amount: int, now: datetime | None = None) -> ActionResult:
        """Award XP to the session pet."""
        session = self.coordinator.session
        pet = self.coordinator.pet
        if session is None or pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        if amount <= 0:
            return ActionResult(
                False, pet, message=const.MSG_INVALID_AMOUNT_FMT.format(amount=amount)
            )
        session[const.DATA_PET] = ProgressionEngine.give_xp(pet, amount, now)
        return ActionResult(
            True, session[const.DATA_PET], message=f"Earned {amount} XP"
        )

    def check_evolution(self) -> EvolutionEvent | None:
        """Return the pending evolution event, announcing it the first time."""
        pet = self.coordinator.pet
        if pet is None:
            return None
        event = ProgressionEngine.check_evolution(pet).event
        if event is not None and event.id not in self._announced_events:
            self._announced_events.add(event.id)
            const.LOGGER.info(
                "INFO: Pet %s evolved from %s to %s",
                pet[const.DATA_PET_NAME],
                ProgressionEngine.age_label(event.from_stage),
                ProgressionEngine.age_label(event.to_stage),
            )
            self.emit(
                const.SIGNAL_SUFFIX_EVOLUTION_DETECTED,
                pet_id=pet[const.DATA_PET_ID],
                event_id=event.id,
                from_stage=event.from_stage,
                to_stage=event.to_stage,
                at_xp=event.at_xp,
            )
        return event

    def acknowledge_evolution(
        self, event_id: str, now: datetime | None = None
    ) -> ActionResult:
        """Mark the pending evolution event as seen."""
        session = self.coordinator.session
        pet = self.coordinator.pet
        if session is None or pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        pending = ProgressionEngine.check_evolution(pet).event
        if pending is None or pending.id != event_id:
            return ActionResult(
                False,
                pet,
                message=const.MSG_EVOLUTION_ACK_MISMATCH_FMT.format(event_id=event_id),
            )
        session[const.DATA_PET] = ProgressionEngine.acknowledge_evolution(
            pet, event_id, now
        )
        return ActionResult(
            True,
            session[const.DATA_PET],
            message=f"{pet[const.DATA_PET_NAME]} is now "
            f"{ProgressionEngine.age_label(pending.to_stage)}!",
        )

    # =========================================================================
    # QUESTS
    # =========================================================================

    def get_quests(self, now: datetime | None = None) -> QuestSet | None:
        """Return today's quest set, rolling the session set over if needed."""
        session = self.coordinator.session
        if session is None:
            return None
        today = dt_day_key(now or dt_now_utc())
        session[const.DATA_QUESTS] = QuestEngine.get_quests(
            session.get(const.DATA_QUESTS), today
        )
        return session[const.DATA_QUESTS]

    def record_action(self, action: str, now: datetime | None = None) -> None:
        """Advance the quest linked to a successful action."""
        quests = self.get_quests(now)
        if quests is None:
            return
        self.coordinator.session[const.DATA_QUESTS] = (  # type: ignore[index]
            QuestEngine.update_quest_progress(quests, action)
        )

    def claim_quest(self, quest_id: str, now: datetime | None = None) -> ActionResult:
        """Claim a ready quest: coins, XP and one Daily Quest income record."""
        session = self.coordinator.session
        pet = self.coordinator.pet
        if session is None or pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        current = now or dt_now_utc()
        quests = self.get_quests(current)
        claim = QuestEngine.claim_quest_reward(quests, quest_id, current)  # type: ignore[arg-type]
        if claim is None:
            return ActionResult(
                False, pet, message=const.MSG_QUEST_NOT_READY_FMT.format(quest_id=quest_id)
            )

        session[const.DATA_QUESTS] = claim.quests
        result = EconomyEngine.give_coins(
            pet,
            claim.coins,
            const.INCOME_SOURCE_QUEST,
            current,
            label=const.MSG_QUEST_LABEL_FMT.format(title=claim.title),
        )
        result.pet = ProgressionEngine.give_xp(result.pet, claim.xp, current)  # type: ignore[arg-type]
        result.message = const.MSG_QUEST_CLAIMED_FMT.format(
            coins=claim.coins, xp=claim.xp
        )
        return self.coordinator.economy_manager.commit(result)

    # =========================================================================
    # BADGES
    # =========================================================================

    def _earned(self) -> list[str]:
        session = self.coordinator.session
        pet = self.coordinator.pet
        earned = list(session.get(const.DATA_BADGES, [])) if session else []
        if pet is not None:
            earned.extend(pet.get(const.DATA_PET_BADGES, []))
        return list(dict.fromkeys(earned))

    def evaluate_badges(self) -> list[str]:
        """Badge ids the session pet qualifies for but has not earned."""
        session = self.coordinator.session
        pet = self.coordinator.pet
        if session is None or pet is None:
            return []
        quests = session.get(const.DATA_QUESTS) or {}
        context = BadgeEngine.build_badge_context(
            pet,
            session[const.DATA_EXPENSES],
            quests.get(const.DATA_QUESTS_CLAIMED_TOTAL, 0),
        )
        return BadgeEngine.evaluate_badges(context, self._earned())

    def award_badges(
        self, badge_ids: list[str], now: datetime | None = None
    ) -> list[str]:
        """Add badges to the pet and slot; returns the ids that were new."""
        session = self.coordinator.session
        pet = self.coordinator.pet
        if session is None or pet is None:
            return []
        already = set(self._earned())
        new_ids = [badge_id for badge_id in dict.fromkeys(badge_ids) if badge_id not in already]
        if not new_ids:
            return []

        session[const.DATA_PET] = BadgeEngine.award_badges(pet, new_ids, now)
        session[const.DATA_BADGES] = list(
            dict.fromkeys([*session.get(const.DATA_BADGES, []), *new_ids])
        )
        for badge_id in new_ids:
            definition = BadgeEngine.get_badge(badge_id) or {}
            const.LOGGER.info(
                "INFO: Pet %s earned badge %s",
                pet[const.DATA_PET_NAME],
                definition.get(const.DATA_BADGE_DEF_NAME, badge_id),
            )
            self.emit(
                const.SIGNAL_SUFFIX_BADGE_EARNED,
                pet_id=pet[const.DATA_PET_ID],
                badge_id=badge_id,
            )
        return new_ids

    def refresh_badges(self, now: datetime | None = None) -> list[str]:
        """Evaluate and award in one step."""
        return self.award_badges(self.evaluate_badges(), now)
