"""Tests for ActionEngine - pure logic, no HA fixtures needed.

Test categories:
- Store purchases (inventory, expense record, NSF)
- Feeding from inventory
- Free care (clean, rest)
- Paid care (play, vet, activities) and dispatch
"""

from __future__ import annotations

import pytest

from custom_components.petbudget import const
from custom_components.petbudget.engines.action_engine import ActionEngine
from custom_components.petbudget.utils.dt_utils import dt_to_iso
from tests.conftest import NOW, create_test_pet

# =============================================================================
# TEST: PURCHASES
# =============================================================================


class TestBuyItem:
    """Test store purchases."""

    def test_buy_basic_food(self) -> None:
        """Buying food charges the price, stocks inventory and logs one expense."""
        pet = create_test_pet()

        result = ActionEngine.buy_item(pet, 1, NOW)

        assert result.success
        assert result.pet[const.DATA_PET_COINS] == 975
        assert result.pet[const.DATA_PET_INVENTORY] == {"1": 1}
        assert result.pet[const.DATA_PET_STATS] == pet[const.DATA_PET_STATS]
        assert result.record[const.DATA_RECORD_AMOUNT] == 25
        assert result.record[const.DATA_RECORD_CATEGORY] == const.EXPENSE_CATEGORY_FOOD
        assert result.record[const.DATA_RECORD_LABEL] == "Purchased Basic Food"
        assert result.record[const.DATA_RECORD_TIMESTAMP] == dt_to_iso(NOW)
        assert result.message == "Successfully purchased Basic Food!"

    def test_buy_stacks_inventory(self) -> None:
        """A second purchase of the same item increments the count."""
        pet = create_test_pet(inventory={"1": 2})

        result = ActionEngine.buy_item(pet, "1", NOW)

        assert result.pet[const.DATA_PET_INVENTORY]["1"] == 3

    def test_buy_toy_applies_happiness(self) -> None:
        """Toys lift happiness immediately."""
        pet = create_test_pet(stats={const.STAT_HAPPINESS: 50})

        result = ActionEngine.buy_item(pet, 8, NOW)

        assert result.pet[const.DATA_PET_STATS][const.STAT_HAPPINESS] == 60
        assert result.record[const.DATA_RECORD_CATEGORY] == const.EXPENSE_CATEGORY_TOYS

    def test_buy_activity_maps_to_activities(self) -> None:
        """Store category 'activity' is recorded as Activities."""
        pet = create_test_pet()

        result = ActionEngine.buy_item(pet, 11, NOW)

        assert (
            result.record[const.DATA_RECORD_CATEGORY]
            == const.EXPENSE_CATEGORY_ACTIVITIES
        )

    def test_buy_without_funds_changes_nothing(self) -> None:
        """An unaffordable purchase returns the same pet and no record."""
        pet = create_test_pet(coins=10)

        result = ActionEngine.buy_item(pet, 1, NOW)

        assert not result.success
        assert result.pet is pet
        assert result.record is None
        assert result.message == "Not enough coins! You need 25 but only have 10."
        assert pet[const.DATA_PET_COINS] == 10
        assert pet[const.DATA_PET_INVENTORY] == {}

    def test_buy_unknown_item(self) -> None:
        """Unknown ids are rejected."""
        result = ActionEngine.buy_item(create_test_pet(), 99, NOW)

        assert not result.success
        assert result.message == "Unknown item: 99."

    def test_buy_without_pet(self) -> None:
        """No pet, no purchase."""
        result = ActionEngine.buy_item(None, 1, NOW)

        assert not result.success
        assert result.message == const.MSG_NO_PET


# =============================================================================
# TEST: FEEDING
# =============================================================================


class TestFeed:
    """Test feeding from inventory."""

    def test_feed_consumes_one_food(self) -> None:
        """Feeding uses one item, restores hunger and records nothing."""
        pet = create_test_pet(inventory={"1": 2}, stats={const.STAT_HUNGER: 50})

        result = ActionEngine.feed(pet, 1, NOW)

        assert result.success
        assert result.record is None
        assert result.pet[const.DATA_PET_INVENTORY]["1"] == 1
        stats = result.pet[const.DATA_PET_STATS]
        assert stats[const.STAT_HUNGER] == 70
        assert stats[const.STAT_HAPPINESS] == 100
        assert stats[const.STAT_CLEANLINESS] == 98
        assert result.pet[const.DATA_PET_XP] == const.FEED_XP
        assert result.pet[const.DATA_PET_COINS] == pet[const.DATA_PET_COINS]
        assert result.message == "You fed your pet Basic Food!"

    def test_feed_with_empty_inventory(self) -> None:
        """No food on hand fails without touching the pet."""
        pet = create_test_pet(stats={const.STAT_HUNGER: 50})

        result = ActionEngine.feed(pet, 1, NOW)

        assert not result.success
        assert result.pet is pet
        assert result.message == const.MSG_NO_FOOD

    def test_feed_zero_count(self) -> None:
        """A zero count is the same as none."""
        pet = create_test_pet(inventory={"1": 0})

        result = ActionEngine.feed(pet, 1, NOW)

        assert not result.success
        assert result.message == const.MSG_NO_FOOD

    def test_feed_non_food(self) -> None:
        """Toys cannot be eaten."""
        pet = create_test_pet(inventory={"8": 1})

        result = ActionEngine.feed(pet, 8, NOW)

        assert not result.success
        assert result.message == "Chew Toy is not food."


# =============================================================================
# TEST: FREE CARE
# =============================================================================


class TestFreeCare:
    """Test clean and rest."""

    def test_clean(self) -> None:
        """Cleaning is free and raises cleanliness."""
        pet = create_test_pet(
            stats={const.STAT_CLEANLINESS: 50, const.STAT_HAPPINESS: 50}
        )

        result = ActionEngine.clean(pet, NOW)

        assert result.success
        assert result.record is None
        assert result.pet[const.DATA_PET_STATS][const.STAT_CLEANLINESS] == 80
        assert result.pet[const.DATA_PET_STATS][const.STAT_HAPPINESS] == 52
        assert result.pet[const.DATA_PET_XP] == 1
        assert result.pet[const.DATA_PET_COINS] == 1000

    def test_rest(self) -> None:
        """Resting restores energy at a small hunger cost."""
        pet = create_test_pet(stats={const.STAT_ENERGY: 40})

        result = ActionEngine.rest(pet, NOW)

        assert result.pet[const.DATA_PET_STATS][const.STAT_ENERGY] == 65
        assert result.pet[const.DATA_PET_STATS][const.STAT_HUNGER] == 97
        assert result.message == const.MSG_RESTED

    def test_clean_without_pet(self) -> None:
        """Free care still needs a pet."""
        result = ActionEngine.clean(None, NOW)

        assert not result.success
        assert result.message == const.MSG_NO_PET


# =============================================================================
# TEST: PAID CARE
# =============================================================================


class TestPaidCare:
    """Test paid actions and the vet."""

    def test_play(self) -> None:
        """Play costs 30 coins and is recorded under Toys."""
        pet = create_test_pet(stats={const.STAT_HAPPINESS: 50})

        result = ActionEngine.paid_activity(pet, const.ACTION_PLAY, NOW)

        assert result.success
        assert result.pet[const.DATA_PET_COINS] == 970
        stats = result.pet[const.DATA_PET_STATS]
        assert stats[const.STAT_HAPPINESS] == 75
        assert stats[const.STAT_ENERGY] == 90
        assert stats[const.STAT_CLEANLINESS] == 95
        assert result.record[const.DATA_RECORD_CATEGORY] == const.EXPENSE_CATEGORY_TOYS
        assert result.record[const.DATA_RECORD_LABEL] == "Play Time"
        assert result.record[const.DATA_RECORD_AMOUNT] == 30

    @pytest.mark.parametrize(
        ("action", "cost", "xp"),
        [
            (const.ACTION_SPA_DAY, 15, 2),
            (const.ACTION_TRAINING_CLASS, 10, 3),
            (const.ACTION_PARK_TRIP, 12, 2),
        ],
    )
    def test_activities(self, action: str, cost: int, xp: int) -> None:
        """Outings are Activities expenses that also grant XP."""
        pet = create_test_pet()

        result = ActionEngine.perform(action, pet, None, NOW)

        assert result.pet[const.DATA_PET_COINS] == 1000 - cost
        assert result.pet[const.DATA_PET_XP] == xp
        assert (
            result.record[const.DATA_RECORD_CATEGORY]
            == const.EXPENSE_CATEGORY_ACTIVITIES
        )

    def test_vet_visit(self) -> None:
        """The vet restores health for a Health expense."""
        pet = create_test_pet(stats={const.STAT_HEALTH: 50})

        result = ActionEngine.vet_visit(pet, now=NOW)

        assert result.success
        assert result.pet[const.DATA_PET_COINS] == 960
        assert result.pet[const.DATA_PET_STATS][const.STAT_HEALTH] == 65
        assert result.pet[const.DATA_PET_STATS][const.STAT_HAPPINESS] == 99
        assert result.record[const.DATA_RECORD_CATEGORY] == const.EXPENSE_CATEGORY_HEALTH
        assert result.record[const.DATA_RECORD_LABEL] == "Vet Visit"

    def test_vet_visit_without_funds(self) -> None:
        """Health care has its own shortfall message."""
        pet = create_test_pet(coins=5)

        result = ActionEngine.vet_visit(pet, now=NOW)

        assert not result.success
        assert result.pet is pet
        assert result.message == (
            "Not enough coins for health care. You need 40 coins but only have 5."
        )

    def test_cost_override(self) -> None:
        """The dispatcher passes `ref` as the cost of a paid action."""
        pet = create_test_pet()

        result = ActionEngine.perform(const.ACTION_SPA_DAY, pet, 5, NOW)

        assert result.pet[const.DATA_PET_COINS] == 995
        assert result.record[const.DATA_RECORD_AMOUNT] == 5

    def test_non_positive_cost_rejected(self) -> None:
        """A zero cost is invalid, not free."""
        pet = create_test_pet()

        result = ActionEngine.perform(const.ACTION_PLAY, pet, 0, NOW)

        assert not result.success
        assert result.message == "Invalid cost: 0. Cost must be greater than 0."

    def test_unknown_action(self) -> None:
        """Unknown kinds fail cleanly."""
        result = ActionEngine.perform("dance", create_test_pet(), None, NOW)

        assert not result.success
        assert result.message == "Unknown action: dance."

    def test_perform_feed_defaults_to_basic_food(self) -> None:
        """Feed without a ref eats Basic Food."""
        pet = create_test_pet(inventory={"1": 1})

        result = ActionEngine.perform(const.ACTION_FEED, pet, None, NOW)

        assert result.success
        assert result.pet[const.DATA_PET_INVENTORY]["1"] == 0
