"""Rewards Engine - Earning paths outside of quests.

- Weekly allowance: fixed coins, one claim per ALLOWANCE_COOLDOWN_DAYS
- Daily check-in: a small random coin amount plus XP, once per local day
- Tasks: coins, XP and stat effects, then a per-task cooldown
- Mini-game rewards: coins, happiness, cleanliness and XP from a finished round

Cooldowns and reset windows are pure timestamp comparisons; nothing here
schedules callbacks. Every successful earning produces one income record.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Randomness is injected (random.Random) so tests can pin the outcome.
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta
import random
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    dt_day_key,
    dt_format_duration,
    dt_now_utc,
    dt_parse,
    dt_time_until,
    dt_to_iso,
)
from .economy_engine import ActionResult, EconomyEngine
from .pet_engine import PetEngine
from .progression_engine import ProgressionEngine

if TYPE_CHECKING:
    from ..type_defs import MiniGameReward, PetData, TaskStateEntry


class RewardsEngine:
    """Stateless reward logic."""

    # =========================================================================
    # WEEKLY ALLOWANCE
    # =========================================================================

    @staticmethod
    def time_until_allowance(
        last_claim: str | None, now: datetime | None = None
    ) -> timedelta:
        """Time left before the next allowance (zero when claimable)."""
        last = dt_parse(last_claim)
        if last is None:
            return timedelta()
        return dt_time_until(
            last + timedelta(days=const.ALLOWANCE_COOLDOWN_DAYS), now
        )

    @staticmethod
    def can_claim_allowance(last_claim: str | None, now: datetime | None = None) -> bool:
        """True when the cooldown since the last claim has passed."""
        return RewardsEngine.time_until_allowance(last_claim, now) <= timedelta()

    @staticmethod
    def claim_allowance(
        pet: PetData | None, last_claim: str | None, now: datetime | None = None
    ) -> ActionResult:
        """Pay the weekly allowance.

        The caller records `now` as the slot's last_allowance_claim.
        """
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        current = now or dt_now_utc()
        remaining = RewardsEngine.time_until_allowance(last_claim, current)
        if remaining > timedelta():
            return ActionResult(
                False,
                pet,
                message=const.MSG_ALLOWANCE_NOT_READY_FMT.format(
                    remaining=dt_format_duration(remaining)
                ),
            )
        result = EconomyEngine.give_coins(
            pet, const.WEEKLY_ALLOWANCE_AMOUNT, const.INCOME_SOURCE_ALLOWANCE, current
        )
        result.message = const.MSG_ALLOWANCE_CLAIMED_FMT.format(
            amount=const.WEEKLY_ALLOWANCE_AMOUNT
        )
        return result

    # =========================================================================
    # DAILY CHECK-IN
    # =========================================================================

    @staticmethod
    def can_check_in(last_check_in: str | None, now: datetime | None = None) -> bool:
        """True unless the player already checked in on today's local date."""
        return last_check_in != dt_day_key(now or dt_now_utc())

    @staticmethod
    def claim_daily_check_in(
        pet: PetData | None,
        last_check_in: str | None,
        now: datetime | None = None,
        rng: random.Random | None = None,
    ) -> ActionResult:
        """Pay the daily check-in bonus.

        The caller records dt_day_key(now) as the slot's last_check_in.
        """
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        current = now or dt_now_utc()
        if not RewardsEngine.can_check_in(last_check_in, current):
            return ActionResult(False, pet, message=const.MSG_CHECK_IN_DONE)

        coins = (rng or random.Random()).randint(
            const.DAILY_CHECK_IN_COINS_MIN, const.DAILY_CHECK_IN_COINS_MAX
        )
        result = EconomyEngine.give_coins(
            pet, coins, const.INCOME_SOURCE_CHECK_IN, current
        )
        result.pet = ProgressionEngine.give_xp(
            result.pet, const.DAILY_CHECK_IN_XP, current  # type: ignore[arg-type]
        )
        result.message = const.MSG_CHECK_IN_CLAIMED_FMT.format(
            coins=coins, xp=const.DAILY_CHECK_IN_XP
        )
        return result

    # =========================================================================
    # TASKS
    # =========================================================================

    @staticmethod
    def get_task(task_id: str) -> dict[str, Any] | None:
        """Static definition for one task."""
        for task in const.TASKS:
            if task[const.DATA_TASK_DEF_ID] == task_id:
                return task
        return None

    @staticmethod
    def _state_for(
        task_state: list[TaskStateEntry], task_id: str
    ) -> TaskStateEntry | None:
        for entry in task_state:
            if entry.get(const.DATA_TASK_ID) == task_id:
                return entry
        return None

    @staticmethod
    def time_remaining(
        task_state: list[TaskStateEntry], task_id: str, now: datetime | None = None
    ) -> timedelta:
        """Cooldown left for a task (zero when it can be done)."""
        task = RewardsEngine.get_task(task_id)
        entry = RewardsEngine._state_for(task_state, task_id)
        if task is None or entry is None:
            return timedelta()
        last = dt_parse(entry.get(const.DATA_TASK_LAST_COMPLETED_AT))
        if last is None:
            return timedelta()
        ready_at = last + timedelta(seconds=task[const.DATA_TASK_DEF_COOLDOWN_SECONDS])
        return dt_time_until(ready_at, now)

    @staticmethod
    def can_do_task(
        task_state: list[TaskStateEntry], task_id: str, now: datetime | None = None
    ) -> bool:
        """True for a known task that is off cooldown."""
        if RewardsEngine.get_task(task_id) is None:
            return False
        return RewardsEngine.time_remaining(task_state, task_id, now) <= timedelta()

    @staticmethod
    def complete_task(
        pet: PetData | None,
        task_state: list[TaskStateEntry],
        task_id: str,
        now: datetime | None = None,
    ) -> tuple[ActionResult, list[TaskStateEntry]]:
        """Pay out a task and start its cooldown.

        Returns the result and the new task state list (unchanged on failure).
        """
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET), task_state
        task = RewardsEngine.get_task(task_id)
        if task is None:
            return (
                ActionResult(
                    False, pet, message=const.MSG_UNKNOWN_TASK_FMT.format(task_id=task_id)
                ),
                task_state,
            )
        current = now or dt_now_utc()
        remaining = RewardsEngine.time_remaining(task_state, task_id, current)
        if remaining > timedelta():
            return (
                ActionResult(
                    False,
                    pet,
                    message=const.MSG_TASK_COOLDOWN_FMT.format(
                        name=task[const.DATA_TASK_DEF_NAME],
                        remaining=dt_format_duration(remaining),
                    ),
                ),
                task_state,
            )

        name = task[const.DATA_TASK_DEF_NAME]
        result = EconomyEngine.give_coins(
            pet,
            task[const.DATA_TASK_DEF_COINS],
            const.INCOME_SOURCE_TASK,
            current,
            label=const.MSG_TASK_COMPLETED_FMT.format(name=name),
        )
        new_pet = result.pet
        new_pet[const.DATA_PET_STATS] = PetEngine.apply_stat_deltas(  # type: ignore[index]
            new_pet[const.DATA_PET_STATS],  # type: ignore[index]
            task[const.DATA_TASK_DEF_EFFECTS],
        )
        result.pet = ProgressionEngine.give_xp(
            new_pet, task[const.DATA_TASK_DEF_XP], current  # type: ignore[arg-type]
        )
        result.message = const.MSG_TASK_COMPLETED_FMT.format(name=name)

        new_state = [
            copy.deepcopy(entry)
            for entry in task_state
            if entry.get(const.DATA_TASK_ID) != task_id
        ]
        new_state.append(
            {
                const.DATA_TASK_ID: task_id,
                const.DATA_TASK_LAST_COMPLETED_AT: dt_to_iso(current),
                const.DATA_TASK_IN_PROGRESS: False,
            }
        )
        return result, new_state

    # =========================================================================
    # MINI-GAMES
    # =========================================================================

    @staticmethod
    def apply_mini_game_reward(
        pet: PetData | None, reward: MiniGameReward, now: datetime | None = None
    ) -> ActionResult:
        """Apply a finished round's reward.

        Coins become Mini-Game income; stat gains are clamped. A reward with
        no coins produces no ledger record.
        """
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        current = now or dt_now_utc()
        coins = int(reward.get("coins", 0) or 0)
        record = None
        new_pet = copy.deepcopy(pet)
        if coins > 0:
            earned = EconomyEngine.give_coins(
                pet,
                coins,
                const.INCOME_SOURCE_MINI_GAME,
                current,
                label=const.MSG_MINI_GAME_LABEL_FMT.format(coins=coins),
            )
            new_pet, record = earned.pet, earned.record

        deltas = {
            const.STAT_HAPPINESS: reward.get("happiness", 0) or 0,
            const.STAT_CLEANLINESS: reward.get("cleanliness", 0) or 0,
        }
        new_pet[const.DATA_PET_STATS] = PetEngine.apply_stat_deltas(  # type: ignore[index]
            new_pet[const.DATA_PET_STATS], deltas  # type: ignore[index]
        )
        new_pet = ProgressionEngine.give_xp(
            new_pet, int(reward.get("xp", 0) or 0), current  # type: ignore[arg-type]
        )
        new_pet[const.DATA_PET_LAST_UPDATED] = dt_to_iso(current)
        return ActionResult(True, new_pet, record, const.MSG_MINI_GAME_APPLIED)
