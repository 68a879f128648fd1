"""Badge Engine - Pure badge rule evaluation.

Badges are recomputed from aggregate state after every significant event
(purchase, quest claim, evolution, check-in) instead of tracking what
changed. Evaluation never mutates anything and only reports ids that are
not earned yet, so calling it twice with the same state returns nothing
the second time.

Evaluation Flow:
    1. build_badge_context() aggregates the pet, expense log and claim count
    2. evaluate_badges() runs every registered predicate against the context
    3. award_badges() set-unions the new ids into the pet

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import copy
from datetime import datetime
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_now_utc, dt_to_iso
from .economy_engine import EconomyEngine

if TYPE_CHECKING:
    from ..type_defs import BadgeContext, BadgeDefinition, ExpenseRecord, PetData


# Predicate signature: (context) -> earned?
BadgePredicate = Callable[["BadgeContext"], bool]


class BadgeEngine:
    """Pure logic engine for badge evaluation.

    All methods are static - no instance state.
    """

    # =========================================================================
    # PREDICATE REGISTRY
    # =========================================================================

    _BADGE_HANDLERS: dict[str, BadgePredicate] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Populate _BADGE_HANDLERS on first evaluation."""
        if cls._BADGE_HANDLERS:
            return  # Already registered

        cls._BADGE_HANDLERS = {
            # Financial
            const.BADGE_FIRST_PURCHASE: cls._evaluate_first_purchase,
            const.BADGE_BUDGET_STARTER: cls._evaluate_budget_starter,
            const.BADGE_SMART_SHOPPER: cls._evaluate_smart_shopper,
            # Care
            const.BADGE_CLEAN_FREAK: cls._evaluate_clean_freak,
            const.BADGE_HEALTHY_PET: cls._evaluate_healthy_pet,
            # Milestone / evolution
            const.BADGE_TASK_MASTER: cls._evaluate_task_master,
            const.BADGE_GROWING_UP: cls._evaluate_growing_up,
        }

    @staticmethod
    def _evaluate_first_purchase(context: BadgeContext) -> bool:
        return context["total_care_cost"] > 0

    @staticmethod
    def _evaluate_budget_starter(context: BadgeContext) -> bool:
        return context["total_care_cost"] >= const.BADGE_BUDGET_STARTER_SPEND

    @staticmethod
    def _evaluate_smart_shopper(context: BadgeContext) -> bool:
        used = [
            amount for amount in context["care_cost_by_category"].values() if amount > 0
        ]
        return len(used) >= const.BADGE_SMART_SHOPPER_CATEGORIES

    @staticmethod
    def _evaluate_clean_freak(context: BadgeContext) -> bool:
        return (
            context["stats"][const.STAT_CLEANLINESS]
            >= const.BADGE_CLEAN_FREAK_CLEANLINESS
        )

    @staticmethod
    def _evaluate_healthy_pet(context: BadgeContext) -> bool:
        return context["stats"][const.STAT_HEALTH] >= const.BADGE_HEALTHY_PET_HEALTH

    @staticmethod
    def _evaluate_task_master(context: BadgeContext) -> bool:
        return context["completed_quests_count"] >= const.BADGE_TASK_MASTER_QUESTS

    @staticmethod
    def _evaluate_growing_up(context: BadgeContext) -> bool:
        return context["age_stage"] >= const.AGE_STAGE_YOUNG

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @staticmethod
    def build_badge_context(
        pet: PetData, expenses: list[ExpenseRecord], claimed_total: int
    ) -> BadgeContext:
        """Aggregate the state every badge rule needs."""
        return {
            "total_care_cost": EconomyEngine.get_total_care_cost(expenses),
            "care_cost_by_category": EconomyEngine.get_care_cost_by_category(expenses),
            "completed_quests_count": claimed_total,
            "age_stage": pet.get(const.DATA_PET_AGE_STAGE, const.AGE_STAGE_BABY),
            "stats": dict(pet[const.DATA_PET_STATS]),  # type: ignore[typeddict-item]
        }

    @classmethod
    def evaluate_badges(
        cls, context: BadgeContext, earned: Iterable[str]
    ) -> list[str]:
        """Return badge ids whose rule holds and which are not earned yet.

        Ids come back in definition order.
        """
        cls._register_handlers()
        already = set(earned)
        return [
            badge_id
            for badge_id in const.BADGE_DEFINITIONS
            if badge_id not in already
            and (handler := cls._BADGE_HANDLERS.get(badge_id)) is not None
            and handler(context)
        ]

    @staticmethod
    def award_badges(
        pet: PetData, badge_ids: Iterable[str], now: datetime | None = None
    ) -> PetData:
        """Set-union badge ids into the pet.

        `last_updated` is only stamped when something new was added.
        """
        new_pet = copy.deepcopy(pet)
        badges = new_pet.setdefault(const.DATA_PET_BADGES, [])
        added = False
        for badge_id in badge_ids:
            if badge_id not in badges:
                badges.append(badge_id)
                added = True
        if added:
            new_pet[const.DATA_PET_LAST_UPDATED] = dt_to_iso(now or dt_now_utc())
        return new_pet

    @staticmethod
    def get_badge(badge_id: str) -> BadgeDefinition | None:
        """Static definition for one badge."""
        definition = const.BADGE_DEFINITIONS.get(badge_id)
        if definition is None:
            return None
        return {"id": badge_id, **definition}  # type: ignore[typeddict-item]

    @staticmethod
    def get_all_badges() -> list[BadgeDefinition]:
        """Every badge definition, in display order."""
        return [
            {"id": badge_id, **definition}  # type: ignore[typeddict-item]
            for badge_id, definition in const.BADGE_DEFINITIONS.items()
        ]

