"""Action Engine - Resolve one care action or purchase against a pet.

Every resolver has the shape `(pet, ref, now) -> ActionResult` and checks, in
order:

1. The pet exists
2. Paid actions: the cost is positive and the wallet covers it
3. Feeding: the referenced item is food and at least one is in inventory

Only then are stat deltas applied (clamped), coins deducted, the expense
record built and `last_updated` stamped. A failed resolution returns the
input pet untouched; a successful one returns a new snapshot.

Ledger output per successful call:
- Paid actions and purchases: exactly one expense record
- Feeding: none (the food's cost was recorded when it was bought)
- Free care (clean, rest): none

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
import copy
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_now_utc, dt_to_iso
from .economy_engine import ActionResult, EconomyEngine, InsufficientFundsError
from .pet_engine import PetEngine
from .progression_engine import ProgressionEngine

if TYPE_CHECKING:
    from ..type_defs import PetData


def _finish(
    pet: PetData, deltas: dict[str, float], xp: int, now: datetime
) -> PetData:
    """Apply stat deltas and XP to an already-copied pet and stamp it."""
    pet[const.DATA_PET_STATS] = PetEngine.apply_stat_deltas(
        pet[const.DATA_PET_STATS], deltas
    )
    if xp > 0:
        pet = ProgressionEngine.give_xp(pet, xp, now)
    pet[const.DATA_PET_LAST_UPDATED] = dt_to_iso(now)
    return pet


class ActionEngine:
    """Stateless action resolution."""

    # =========================================================================
    # CATALOG
    # =========================================================================

    @staticmethod
    def get_item(item_id: int | str) -> dict[str, Any] | None:
        """Look up a store item by id (int or numeric string)."""
        try:
            wanted = int(item_id)
        except (TypeError, ValueError):
            return None
        for item in const.STORE_ITEMS:
            if item[const.DATA_ITEM_ID] == wanted:
                return item
        return None

    @staticmethod
    def expense_category_for_item(item: dict[str, Any]) -> str:
        """Map a store item category to its expense category."""
        return const.ITEM_CATEGORY_EXPENSE_MAP.get(
            item.get(const.DATA_ITEM_CATEGORY), const.EXPENSE_CATEGORY_OTHER
        )

    @staticmethod
    def purchase_effects(item: dict[str, Any]) -> dict[str, float]:
        """Immediate stat effects of buying a non-food item (first match wins)."""
        category = item.get(const.DATA_ITEM_CATEGORY)
        name = str(item.get(const.DATA_ITEM_NAME, "")).lower()
        for effect_category, keyword, effects in const.PURCHASE_EFFECTS:
            if effect_category == category and keyword in name:
                return dict(effects)
        return {}

    # =========================================================================
    # PAID HELPER
    # =========================================================================

    @staticmethod
    def _charge(
        pet: PetData,
        cost: int,
        category: str,
        label: str,
        now: datetime,
        nsf_message: str = const.MSG_NOT_ENOUGH_COINS_FMT,
    ) -> tuple[PetData | None, dict[str, Any] | None, str]:
        """Deduct `cost` and build the expense, or explain why not.

        Returns (charged_pet, expense_record, error_message); on failure the
        first two are None.
        """
        try:
            charged = EconomyEngine.spend_coins(pet, cost)
        except InsufficientFundsError as err:
            const.LOGGER.debug(
                "DEBUG: %s refused, short by %s coins", label, err.shortfall
            )
            return (
                None,
                None,
                nsf_message.format(cost=cost, coins=err.current_balance),
            )
        except ValueError as err:
            return None, None, str(err)
        record = EconomyEngine.create_expense_record(cost, category, label, now)
        return charged, record, ""  # type: ignore[return-value]

    # =========================================================================
    # ACTIONS
    # =========================================================================

    @staticmethod
    def feed(
        pet: PetData | None,
        item_id: int | str = const.DEFAULT_FOOD_ITEM_ID,
        now: datetime | None = None,
    ) -> ActionResult:
        """Consume one food item from inventory."""
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        item = ActionEngine.get_item(item_id)
        if item is None:
            return ActionResult(
                False, pet, message=const.MSG_UNKNOWN_ITEM_FMT.format(item_id=item_id)
            )
        if item[const.DATA_ITEM_CATEGORY] != const.ITEM_CATEGORY_FOOD:
            return ActionResult(
                False,
                pet,
                message=const.MSG_NOT_FOOD_FMT.format(name=item[const.DATA_ITEM_NAME]),
            )

        key = str(item[const.DATA_ITEM_ID])
        count = pet.get(const.DATA_PET_INVENTORY, {}).get(key, 0)
        if count <= 0:
            return ActionResult(False, pet, message=const.MSG_NO_FOOD)

        current = now or dt_now_utc()
        new_pet = copy.deepcopy(pet)
        new_pet[const.DATA_PET_INVENTORY][key] = count - 1
        deltas = {
            const.STAT_HUNGER: item.get(
                const.DATA_ITEM_HUNGER_RESTORE, const.DEFAULT_HUNGER_RESTORE
            ),
            const.STAT_HAPPINESS: item.get(
                const.DATA_ITEM_HAPPINESS_BONUS, const.DEFAULT_FOOD_HAPPINESS_BONUS
            ),
            const.STAT_CLEANLINESS: -const.FEED_CLEANLINESS_PENALTY,
        }
        new_pet = _finish(new_pet, deltas, const.FEED_XP, current)
        return ActionResult(
            True,
            new_pet,
            message=const.MSG_FED_FMT.format(name=item[const.DATA_ITEM_NAME]),
        )

    @staticmethod
    def clean(pet: PetData | None, now: datetime | None = None) -> ActionResult:
        """Free care: wash the pet."""
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        new_pet = _finish(
            copy.deepcopy(pet),
            {
                const.STAT_CLEANLINESS: const.CLEAN_CLEANLINESS_GAIN,
                const.STAT_HAPPINESS: const.CLEAN_HAPPINESS_GAIN,
            },
            const.CLEAN_XP,
            now or dt_now_utc(),
        )
        return ActionResult(True, new_pet, message=const.MSG_CLEANED)

    @staticmethod
    def rest(pet: PetData | None, now: datetime | None = None) -> ActionResult:
        """Free care: let the pet sleep."""
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        new_pet = _finish(
            copy.deepcopy(pet),
            {
                const.STAT_ENERGY: const.REST_ENERGY_GAIN,
                const.STAT_HUNGER: -const.REST_HUNGER_COST,
            },
            const.REST_XP,
            now or dt_now_utc(),
        )
        return ActionResult(True, new_pet, message=const.MSG_RESTED)

    @staticmethod
    def paid_activity(
        pet: PetData | None,
        action: str,
        now: datetime | None = None,
        cost: int | None = None,
    ) -> ActionResult:
        """Resolve one of PAID_ACTIONS (play, spa day, training class, park trip)."""
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        definition = const.PAID_ACTIONS.get(action)
        if definition is None:
            return ActionResult(
                False, pet, message=const.MSG_UNKNOWN_ACTION_FMT.format(action=action)
            )

        current = now or dt_now_utc()
        price = definition[const.DATA_ACTION_DEF_COST] if cost is None else cost
        charged, record, error = ActionEngine._charge(
            pet,
            price,
            definition[const.DATA_ACTION_DEF_CATEGORY],
            definition[const.DATA_ACTION_DEF_LABEL],
            current,
        )
        if charged is None:
            return ActionResult(False, pet, message=error)

        new_pet = _finish(
            charged,
            definition[const.DATA_ACTION_DEF_EFFECTS],
            definition[const.DATA_ACTION_DEF_XP],
            current,
        )
        return ActionResult(
            True, new_pet, record, definition[const.DATA_ACTION_DEF_MESSAGE]
        )

    @staticmethod
    def vet_visit(
        pet: PetData | None,
        cost: int = const.DEFAULT_VET_VISIT_COST,
        health_restore: float = const.DEFAULT_VET_HEALTH_RESTORE,
        happiness_bonus: float = 0,
        now: datetime | None = None,
    ) -> ActionResult:
        """Paid health care. Without a happiness bonus the visit is a little stressful."""
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)

        current = now or dt_now_utc()
        charged, record, error = ActionEngine._charge(
            pet,
            cost,
            const.EXPENSE_CATEGORY_HEALTH,
            "Vet Visit",
            current,
            nsf_message=const.MSG_NOT_ENOUGH_COINS_VET_FMT,
        )
        if charged is None:
            return ActionResult(False, pet, message=error)

        deltas = {
            const.STAT_HEALTH: health_restore,
            const.STAT_HAPPINESS: happiness_bonus or -const.VET_HAPPINESS_PENALTY,
        }
        new_pet = _finish(charged, deltas, const.VET_XP, current)
        return ActionResult(True, new_pet, record, const.MSG_VET_VISITED)

    @staticmethod
    def buy_item(
        pet: PetData | None, item_id: int | str, now: datetime | None = None
    ) -> ActionResult:
        """Buy one catalog item: charge, stock inventory, apply immediate effects."""
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        item = ActionEngine.get_item(item_id)
        if item is None:
            return ActionResult(
                False, pet, message=const.MSG_UNKNOWN_ITEM_FMT.format(item_id=item_id)
            )

        current = now or dt_now_utc()
        name = item[const.DATA_ITEM_NAME]
        charged, record, error = ActionEngine._charge(
            pet,
            item[const.DATA_ITEM_PRICE],
            ActionEngine.expense_category_for_item(item),
            const.MSG_PURCHASE_LABEL_FMT.format(name=name),
            current,
        )
        if charged is None:
            return ActionResult(False, pet, message=error)

        key = str(item[const.DATA_ITEM_ID])
        inventory = charged.setdefault(const.DATA_PET_INVENTORY, {})
        inventory[key] = inventory.get(key, 0) + 1
        new_pet = _finish(charged, ActionEngine.purchase_effects(item), 0, current)
        return ActionResult(
            True, new_pet, record, const.MSG_PURCHASED_FMT.format(name=name)
        )

    # =========================================================================
    # DISPATCH
    # =========================================================================

    @staticmethod
    def perform(
        kind: str,
        pet: PetData | None,
        ref: Any = None,
        now: datetime | None = None,
    ) -> ActionResult:
        """Dispatch an action by name.

        `ref` is the food item id for feed, the cost override for paid
        actions (including vet_visit) and the item id for buy_item.
        """
        handlers: dict[str, Callable[[], ActionResult]] = {
            const.ACTION_FEED: lambda: ActionEngine.feed(
                pet, const.DEFAULT_FOOD_ITEM_ID if ref is None else ref, now
            ),
            const.ACTION_CLEAN: lambda: ActionEngine.clean(pet, now),
            const.ACTION_REST: lambda: ActionEngine.rest(pet, now),
            const.ACTION_VET_VISIT: lambda: ActionEngine.vet_visit(
                pet, const.DEFAULT_VET_VISIT_COST if ref is None else ref, now=now
            ),
            const.ACTION_BUY_ITEM: lambda: ActionEngine.buy_item(pet, ref, now),
        }
        for paid in const.PAID_ACTIONS:
            handlers[paid] = lambda paid=paid: ActionEngine.paid_activity(
                pet, paid, now, ref
            )

        handler = handlers.get(kind)
        if handler is None:
            return ActionResult(
                False, pet, message=const.MSG_UNKNOWN_ACTION_FMT.format(action=kind)
            )
        return handler()
