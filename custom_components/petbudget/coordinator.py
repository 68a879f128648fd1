# File: coordinator.py
"""Coordinator for the PetBudget integration.

Holds the active save slot in memory and runs the follow-ups of every
successful operation:

1. Advance the daily quest linked to the action
2. Detect (and announce) a pending evolution
3. Re-evaluate badges
4. Persist the slot through the storage manager
5. Notify listeners (dispatcher signal + coordinator listeners)

The periodic refresh applies stat decay once per tick. A refresh that
lands inside the same decay unit changes nothing.
"""

from __future__ import annotations

from datetime import datetime, timedelta
import random
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .engines.decay_engine import DecayEngine
from .engines.economy_engine import ActionResult
from .engines.ledger_engine import LedgerEngine
from .engines.pet_engine import PetEngine
from .engines.progression_engine import EvolutionEvent
from .engines.quest_engine import QuestEngine
from .managers import EconomyManager, GamificationManager, get_event_signal
from .utils.dt_utils import DATE_RANGE_ALL, dt_day_key, dt_now_utc, dt_to_iso
from .utils.validation_utils import validate_save_slot

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .storage_manager import PetBudgetStorageManager
    from .type_defs import (
        MiniGameReward,
        PetData,
        QuestSet,
        ReportModel,
        SlotState,
        SlotSummary,
    )


class PetBudgetCoordinator(DataUpdateCoordinator):
    """Coordinator for the PetBudget integration.

    One save slot is active at a time; `session` is None until a pet is
    created or a slot is loaded.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        storage_manager: PetBudgetStorageManager,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the PetBudgetCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=const.DEFAULT_DECAY_TICK_MINUTES),
        )
        self.config_entry = config_entry
        self.storage_manager = storage_manager
        self.session: SlotState | None = None
        self.active_slot: int | None = None

        self.economy_manager = EconomyManager(hass, self, rng)
        self.gamification_manager = GamificationManager(hass, self)

    async def async_setup(self) -> None:
        """Set up the managers."""
        await self.economy_manager.async_setup()
        await self.gamification_manager.async_setup()

    @property
    def pet(self) -> PetData | None:
        """The pet in the active slot."""
        if self.session is None:
            return None
        return self.session[const.DATA_PET]

    @property
    def decay_multiplier(self) -> float:
        """Demo slots age faster."""
        if self.session and self.session[const.DATA_META].get(const.DATA_META_DEMO):
            return const.DEMO_DECAY_MULTIPLIER
        return const.DEFAULT_DECAY_MULTIPLIER

    # -------------------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update: one decay pass over the active pet."""
        try:
            if self._apply_decay():
                await self.async_save()
                self._emit_pet_updated()
            return self._snapshot()
        except Exception as err:  # pylint: disable=broad-exception-caught
            raise UpdateFailed(f"Error updating PetBudget data: {err}") from err

    def _snapshot(self) -> dict[str, Any]:
        return dict(self.session) if self.session else {}

    def _emit_pet_updated(self) -> None:
        pet = self.pet
        async_dispatcher_send(
            self.hass,
            get_event_signal(self.config_entry.entry_id, const.SIGNAL_SUFFIX_PET_UPDATED),
            {
                "pet_id": pet[const.DATA_PET_ID] if pet else None,
                "slot": self.active_slot,
            },
        )

    def _notify(self) -> None:
        self._emit_pet_updated()
        self.async_set_updated_data(self._snapshot())

    def _apply_decay(self, now: datetime | None = None) -> bool:
        """Decay the session pet in place. Returns True when anything changed."""
        pet = self.pet
        if pet is None:
            return False
        decayed = DecayEngine.apply_decay(
            pet, now or dt_now_utc(), self.decay_multiplier
        )
        if decayed == pet:
            return False
        self.session[const.DATA_PET] = decayed  # type: ignore[index]
        return True

    async def _async_after_success(
        self,
        result: ActionResult,
        quest_action: str | None = None,
        now: datetime | None = None,
    ) -> ActionResult:
        """Run quest, evolution and badge follow-ups, then persist and notify."""
        if not result.success or self.session is None:
            return result
        if quest_action is not None:
            self.gamification_manager.record_action(quest_action, now)
        self.gamification_manager.check_evolution()
        self.gamification_manager.refresh_badges(now)
        await self.async_save(now)
        self._notify()
        return result

    # -------------------------------------------------------------------------------------
    # Slots
    # -------------------------------------------------------------------------------------

    async def async_create_pet(
        self,
        slot: int,
        name: Any,
        species: str,
        demo: bool = False,
        now: datetime | None = None,
    ) -> ActionResult:
        """Create a pet in a slot, replacing whatever the slot held."""
        slot_check = validate_save_slot(slot)
        if not slot_check.is_valid:
            return ActionResult(False, None, message=slot_check.error)

        current = now or dt_now_utc()
        result = PetEngine.create_pet(name, species, current)
        if not result.success:
            return result

        timestamp = dt_to_iso(current)
        self.session = {
            const.DATA_PET: result.pet,
            const.DATA_EXPENSES: [],
            const.DATA_INCOME: [],
            const.DATA_QUESTS: QuestEngine.create_default_quests(dt_day_key(current)),
            const.DATA_BADGES: [],
            const.DATA_TASK_STATE: [],
            const.DATA_GUIDE_CHECKLIST: None,
            const.DATA_META: {
                const.DATA_META_CREATED_AT: timestamp,
                const.DATA_META_LAST_PLAYED: timestamp,
                const.DATA_META_SLOT_NUMBER: int(slot),
                const.DATA_META_DEMO: demo,
                const.DATA_META_DEMO_SEED_VERSION: None,
                const.DATA_META_LAST_ALLOWANCE_CLAIM: None,
                const.DATA_META_LAST_CHECK_IN: None,
            },
        }
        self.active_slot = int(slot)
        self.gamification_manager.reset_session()

        # A fresh pet replaces the slot's history
        await self.storage_manager.async_delete_slot(self.active_slot)
        const.LOGGER.info(
            "INFO: Created %s %s in slot %s",
            species,
            result.pet[const.DATA_PET_NAME],  # type: ignore[index]
            slot,
        )
        await self.async_save(current)
        self._notify()
        return result

    async def async_load_slot(self, slot: int, now: datetime | None = None) -> bool:
        """Make a stored slot active and catch its pet up on missed decay."""
        state = await self.storage_manager.async_load_all(slot, now)
        if state is None or state[const.DATA_PET] is None:
            const.LOGGER.debug("DEBUG: Slot %s has no pet to load", slot)
            return False

        self.session = state
        self.active_slot = int(slot)
        self.gamification_manager.reset_session()
        self._apply_decay(now)
        self.gamification_manager.get_quests(now)
        self.gamification_manager.check_evolution()
        const.LOGGER.info(
            "INFO: Loaded %s from slot %s", self.pet[const.DATA_PET_NAME], slot  # type: ignore[index]
        )
        await self.async_save(now)
        self._notify()
        return True

    async def async_apply_decay(self, now: datetime | None = None) -> bool:
        """Decay the active pet now. Returns True when stats changed."""
        if not self._apply_decay(now):
            return False
        self.gamification_manager.refresh_badges(now)
        await self.async_save(now)
        self._notify()
        return True

    async def async_save(self, now: datetime | None = None) -> bool:
        """Persist the active slot."""
        session = self.session
        if session is None or self.active_slot is None:
            return False
        meta = session[const.DATA_META]
        saved = await self.storage_manager.async_save_all(
            self.active_slot,
            session[const.DATA_PET],
            expenses=session[const.DATA_EXPENSES],
            income=session[const.DATA_INCOME],
            quests=session[const.DATA_QUESTS],
            badges=session[const.DATA_BADGES],
            task_state=session[const.DATA_TASK_STATE],
            guide_checklist=session[const.DATA_GUIDE_CHECKLIST],
            demo=meta.get(const.DATA_META_DEMO, False),
            demo_seed_version=meta.get(const.DATA_META_DEMO_SEED_VERSION),
            last_allowance_claim=meta.get(const.DATA_META_LAST_ALLOWANCE_CLAIM),
            last_check_in=meta.get(const.DATA_META_LAST_CHECK_IN),
            now=now,
        )
        if saved:
            meta[const.DATA_META_LAST_PLAYED] = dt_to_iso(now or dt_now_utc())
            session[const.DATA_EXPENSES] = LedgerEngine.prune_records(
                session[const.DATA_EXPENSES]
            )
            session[const.DATA_INCOME] = LedgerEngine.prune_records(
                session[const.DATA_INCOME]
            )
        if session[const.DATA_PET] is not None:
            session[const.DATA_PET][const.DATA_PET_EXPENSES] = (  # type: ignore[typeddict-unknown-key]
                LedgerEngine.expense_view(session[const.DATA_EXPENSES])
            )
        return saved

    async def async_delete_slot(self, slot: int) -> bool:
        """Clear a slot, dropping the session when it was the active one."""
        deleted = await self.storage_manager.async_delete_slot(slot)
        if deleted and self.active_slot == slot:
            self.session = None
            self.active_slot = None
            self.gamification_manager.reset_session()
            self._notify()
        return deleted

    async def async_list_slots(self) -> list[SlotSummary]:
        """Summaries of every save slot."""
        return await self.storage_manager.async_list_slots()

    # -------------------------------------------------------------------------------------
    # Actions & economy
    # -------------------------------------------------------------------------------------

    async def async_perform_action(
        self, kind: str, ref: Any = None, now: datetime | None = None
    ) -> ActionResult:
        """Resolve a care action against the active pet."""
        result = self.economy_manager.perform_action(kind, ref, now)
        return await self._async_after_success(result, kind, now)

    async def async_buy_item(
        self, item_id: int | str, now: datetime | None = None
    ) -> ActionResult:
        """Buy one store item."""
        result = self.economy_manager.buy_item(item_id, now)
        return await self._async_after_success(result, const.ACTION_BUY_ITEM, now)

    async def async_give_coins(
        self,
        amount: int,
        source: str = const.INCOME_SOURCE_BONUS,
        now: datetime | None = None,
    ) -> ActionResult:
        """Credit coins to the active pet."""
        result = self.economy_manager.give_coins(amount, source, now)
        return await self._async_after_success(result, now=now)

    async def async_give_xp(self, amount: int, now: datetime | None = None) -> ActionResult:
        """Award XP to the active pet."""
        result = self.gamification_manager.give_xp(amount, now)
        return await self._async_after_success(result, now=now)

    async def async_claim_allowance(self, now: datetime | None = None) -> ActionResult:
        """Claim the weekly allowance."""
        result = self.economy_manager.claim_allowance(now)
        return await self._async_after_success(result, now=now)

    async def async_claim_daily_check_in(
        self, now: datetime | None = None
    ) -> ActionResult:
        """Claim today's check-in bonus."""
        result = self.economy_manager.claim_daily_check_in(now)
        return await self._async_after_success(result, now=now)

    async def async_complete_task(
        self, task_id: str, now: datetime | None = None
    ) -> ActionResult:
        """Complete a task."""
        result = self.economy_manager.complete_task(task_id, now)
        return await self._async_after_success(result, now=now)

    async def async_apply_mini_game_reward(
        self, reward: MiniGameReward, now: datetime | None = None
    ) -> ActionResult:
        """Apply a mini-game reward."""
        result = self.economy_manager.apply_mini_game_reward(reward, now)
        return await self._async_after_success(result, now=now)

    # -------------------------------------------------------------------------------------
    # Progression, quests & badges
    # -------------------------------------------------------------------------------------

    def check_evolution(self) -> EvolutionEvent | None:
        """Pending evolution event for the active pet, if any."""
        return self.gamification_manager.check_evolution()

    async def async_acknowledge_evolution(
        self, event_id: str, now: datetime | None = None
    ) -> ActionResult:
        """Acknowledge the pending evolution event."""
        result = self.gamification_manager.acknowledge_evolution(event_id, now)
        return await self._async_after_success(result, now=now)

    def get_quests(self, now: datetime | None = None) -> QuestSet | None:
        """Today's quests for the active slot."""
        return self.gamification_manager.get_quests(now)

    async def async_claim_quest(
        self, quest_id: str, now: datetime | None = None
    ) -> ActionResult:
        """Claim a completed daily quest."""
        result = self.gamification_manager.claim_quest(quest_id, now)
        return await self._async_after_success(result, now=now)

    def evaluate_badges(self) -> list[str]:
        """Badges the active pet qualifies for but has not earned."""
        return self.gamification_manager.evaluate_badges()

    async def async_award_badges(
        self, badge_ids: list[str], now: datetime | None = None
    ) -> list[str]:
        """Award badges and persist when anything was new."""
        awarded = self.gamification_manager.award_badges(badge_ids, now)
        if awarded:
            await self.async_save(now)
            self._notify()
        return awarded

    async def async_refresh_badges(self, now: datetime | None = None) -> list[str]:
        """Evaluate and award badges."""
        return await self.async_award_badges(self.evaluate_badges(), now)

    # -------------------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------------------

    def build_report(
        self, date_range: str = DATE_RANGE_ALL, now: datetime | None = None
    ) -> ReportModel | None:
        """Spending/earning report for the active slot."""
        if self.session is None:
            return None
        return LedgerEngine.build_report(
            self.session[const.DATA_EXPENSES],
            self.session[const.DATA_INCOME],
            date_range,
            now,
        )

    def export_expenses_csv(self) -> str:
        """Expense log of the active slot as CSV."""
        expenses = self.session[const.DATA_EXPENSES] if self.session else []
        return LedgerEngine.export_expenses_csv(expenses)

    def export_income_csv(self) -> str:
        """Income log of the active slot as CSV."""
        income = self.session[const.DATA_INCOME] if self.session else []
        return LedgerEngine.export_income_csv(income)
