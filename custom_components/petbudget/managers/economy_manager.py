"""Economy Manager - Coin-moving operations on the active slot.

This manager handles everything that moves coins or consumes inventory:
- Care actions and store purchases (via ActionEngine)
- Direct earnings (give_coins)
- Weekly allowance and daily check-in
- Task completion and mini-game rewards
- Appending the resulting ledger record to the session logs

ARCHITECTURE:
- EconomyManager = "The Bank" (STATEFUL, works on the coordinator session)
- ActionEngine / EconomyEngine / RewardsEngine = pure logic (STATELESS)
- The coordinator runs quest, evolution and badge follow-ups and persists.
"""

from __future__ import annotations

from datetime import datetime
import random
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.action_engine import ActionEngine
from ..engines.economy_engine import ActionResult, EconomyEngine
from ..engines.rewards_engine import RewardsEngine
from ..utils.dt_utils import dt_day_key, dt_now_utc, dt_to_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PetBudgetCoordinator
    from ..type_defs import MiniGameReward, SlotState


class EconomyManager(BaseManager):
    """Manager for coin transactions and ledger appends.

    Every public operation returns an ActionResult. On success the session
    pet is replaced and the single ledger record (if any) is appended; on
    failure nothing in the session changes.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PetBudgetCoordinator,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the EconomyManager.

        Args:
            hass: Home Assistant instance
            coordinator: The PetBudget coordinator
            rng: Random source for check-in amounts (injectable for tests)
        """
        super().__init__(hass, coordinator)
        self.rng = rng or random.Random()

    async def async_setup(self) -> None:
        """Set up the EconomyManager."""
        const.LOGGER.debug("DEBUG: EconomyManager ready for entry %s", self.entry_id)

    # =========================================================================
    # SESSION HELPERS
    # =========================================================================

    @property
    def _session(self) -> SlotState | None:
        return self.coordinator.session

    def commit(self, result: ActionResult) -> ActionResult:
        """Fold a successful result into the session.

        Expense records carry a category, income records a source; the record
        is appended to the matching log.
        """
        session = self._session
        if not result.success or session is None:
            return result
        session[const.DATA_PET] = result.pet
        record = result.record
        if record is None:
            return result
        if const.DATA_RECORD_CATEGORY in record:
            session[const.DATA_EXPENSES].append(record)  # type: ignore[arg-type]
            kind = const.TRANSACTION_TYPE_EXPENSE
        else:
            session[const.DATA_INCOME].append(record)  # type: ignore[arg-type]
            kind = const.TRANSACTION_TYPE_INCOME
        self.emit(
            const.SIGNAL_SUFFIX_LEDGER_RECORDED,
            record_type=kind,
            record_id=record[const.DATA_RECORD_ID],
            amount=record[const.DATA_RECORD_AMOUNT],
            label=record[const.DATA_RECORD_LABEL],
        )
        return result

    @staticmethod
    def _no_session() -> ActionResult:
        return ActionResult(False, None, message=const.MSG_NO_ACTIVE_SLOT)

    # =========================================================================
    # ACTIONS & PURCHASES
    # =========================================================================

    def perform_action(
        self, kind: str, ref: Any = None, now: datetime | None = None
    ) -> ActionResult:
        """Resolve a care action (or purchase) against the session pet."""
        if self._session is None:
            return self._no_session()
        result = ActionEngine.perform(kind, self.coordinator.pet, ref, now)
        if not result.success:
            const.LOGGER.debug("DEBUG: Action %s failed: %s", kind, result.message)
        return self.commit(result)

    def buy_item(self, item_id: int | str, now: datetime | None = None) -> ActionResult:
        """Buy one store item."""
        return self.perform_action(const.ACTION_BUY_ITEM, item_id, now)

    def give_coins(
        self,
        amount: int,
        source: str = const.INCOME_SOURCE_BONUS,
        now: datetime | None = None,
    ) -> ActionResult:
        """Credit coins from an earning source."""
        if self._session is None:
            return self._no_session()
        return self.commit(
            EconomyEngine.give_coins(self.coordinator.pet, amount, source, now)
        )

    # =========================================================================
    # ALLOWANCE & CHECK-IN
    # =========================================================================

    def claim_allowance(self, now: datetime | None = None) -> ActionResult:
        """Pay the weekly allowance when its cooldown has passed."""
        session = self._session
        if session is None:
            return self._no_session()
        current = now or dt_now_utc()
        result = RewardsEngine.claim_allowance(
            self.coordinator.pet,
            session[const.DATA_META].get(const.DATA_META_LAST_ALLOWANCE_CLAIM),
            current,
        )
        if result.success:
            session[const.DATA_META][const.DATA_META_LAST_ALLOWANCE_CLAIM] = dt_to_iso(
                current
            )
        return self.commit(result)

    def claim_daily_check_in(self, now: datetime | None = None) -> ActionResult:
        """Pay the once-a-day check-in bonus."""
        session = self._session
        if session is None:
            return self._no_session()
        current = now or dt_now_utc()
        result = RewardsEngine.claim_daily_check_in(
            self.coordinator.pet,
            session[const.DATA_META].get(const.DATA_META_LAST_CHECK_IN),
            current,
            self.rng,
        )
        if result.success:
            session[const.DATA_META][const.DATA_META_LAST_CHECK_IN] = dt_day_key(current)
        return self.commit(result)

    # =========================================================================
    # TASKS & MINI-GAMES
    # =========================================================================

    def complete_task(self, task_id: str, now: datetime | None = None) -> ActionResult:
        """Complete a task and start its cooldown."""
        session = self._session
        if session is None:
            return self._no_session()
        result, task_state = RewardsEngine.complete_task(
            self.coordinator.pet, session[const.DATA_TASK_STATE], task_id, now
        )
        if result.success:
            session[const.DATA_TASK_STATE] = task_state
        return self.commit(result)

    def apply_mini_game_reward(
        self, reward: MiniGameReward, now: datetime | None = None
    ) -> ActionResult:
        """Apply the reward from a finished mini-game round."""
        if self._session is None:
            return self._no_session()
        return self.commit(
            RewardsEngine.apply_mini_game_reward(self.coordinator.pet, reward, now)
        )
