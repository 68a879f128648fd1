"""Tests for EconomyEngine - pure logic, no HA fixtures needed.

These tests validate coin arithmetic, ledger record construction and
the aggregation helpers badges rely on.
"""

from __future__ import annotations

import pytest

from custom_components.petbudget import const
from custom_components.petbudget.engines.economy_engine import (
    EconomyEngine,
    InsufficientFundsError,
)
from tests.conftest import NOW, create_expense, create_test_pet

# =============================================================================
# TEST: WALLET ARITHMETIC
# =============================================================================


class TestWallet:
    """Test spend_coins / earn_coins."""

    def test_spend_coins(self) -> None:
        """Spending returns a copy with the cost deducted."""
        pet = create_test_pet()

        new_pet = EconomyEngine.spend_coins(pet, 40)

        assert new_pet[const.DATA_PET_COINS] == 960
        assert pet[const.DATA_PET_COINS] == 1000

    def test_spend_exact_balance(self) -> None:
        """Spending down to zero is allowed."""
        pet = create_test_pet(coins=25)

        assert EconomyEngine.spend_coins(pet, 25)[const.DATA_PET_COINS] == 0

    def test_insufficient_funds(self) -> None:
        """Overspending raises with the shortfall."""
        pet = create_test_pet(coins=10)

        with pytest.raises(InsufficientFundsError) as err:
            EconomyEngine.spend_coins(pet, 25)

        assert err.value.pet_id == "pet-1"
        assert err.value.current_balance == 10
        assert err.value.requested_amount == 25
        assert err.value.shortfall == 15

    def test_spend_non_positive(self) -> None:
        """Zero and negative costs are rejected."""
        pet = create_test_pet()

        with pytest.raises(ValueError):
            EconomyEngine.spend_coins(pet, 0)
        with pytest.raises(ValueError):
            EconomyEngine.spend_coins(pet, -5)

    def test_earn_tracks_lifetime(self) -> None:
        """Earning adds to the wallet and the lifetime total."""
        pet = create_test_pet()

        new_pet = EconomyEngine.earn_coins(pet, 20)

        assert new_pet[const.DATA_PET_COINS] == 1020
        assert new_pet[const.DATA_PET_LIFETIME_EARNINGS] == 20

    def test_validate_sufficient_funds(self) -> None:
        """Balance must cover the cost."""
        assert EconomyEngine.validate_sufficient_funds(25, 25)
        assert not EconomyEngine.validate_sufficient_funds(24, 25)


# =============================================================================
# TEST: LEDGER RECORDS
# =============================================================================


class TestRecords:
    """Test expense and income record construction."""

    def test_expense_record_shape(self) -> None:
        """Expense records are positive with a closed category."""
        record = EconomyEngine.create_expense_record(
            -25, const.EXPENSE_CATEGORY_FOOD, "Purchased Basic Food", NOW
        )

        assert record[const.DATA_RECORD_AMOUNT] == 25
        assert record[const.DATA_RECORD_CATEGORY] == const.EXPENSE_CATEGORY_FOOD
        assert record[const.DATA_RECORD_ID].startswith("expense_")

    def test_unknown_category_becomes_other(self) -> None:
        """Categories outside the closed set collapse to Other."""
        record = EconomyEngine.create_expense_record(5, "Snacks", "Treat", NOW)

        assert record[const.DATA_RECORD_CATEGORY] == const.EXPENSE_CATEGORY_OTHER

    def test_zero_amount_rejected(self) -> None:
        """Nothing to record for zero."""
        with pytest.raises(ValueError):
            EconomyEngine.create_income_record(0, const.INCOME_SOURCE_TASK, "x", NOW)

    def test_record_ids_are_unique(self) -> None:
        """Two records made in the same instant still differ."""
        first = EconomyEngine.new_record_id("income", NOW)
        second = EconomyEngine.new_record_id("income", NOW)

        assert first != second
        assert first.split("_")[1] == str(int(NOW.timestamp() * 1000))

    def test_seeded_record_id_is_deterministic(self) -> None:
        """The same seed always gives the same id; a different seed does not."""
        first = EconomyEngine.new_record_id("expense", NOW, "row-a")

        assert EconomyEngine.new_record_id("expense", NOW, "row-a") == first
        assert EconomyEngine.new_record_id("expense", NOW, "row-b") != first


# =============================================================================
# TEST: GIVE COINS
# =============================================================================


class TestGiveCoins:
    """Test give_coins result handling."""

    def test_give_coins(self) -> None:
        """Credits coins and builds one income record."""
        result = EconomyEngine.give_coins(
            create_test_pet(), 15, const.INCOME_SOURCE_BONUS, NOW
        )

        assert result.success
        assert result.pet[const.DATA_PET_COINS] == 1015
        assert result.record[const.DATA_RECORD_SOURCE] == const.INCOME_SOURCE_BONUS
        assert result.record[const.DATA_RECORD_LABEL] == "Earned 15 coins from Bonus"

    def test_give_coins_invalid_amount(self) -> None:
        """Non-positive amounts fail without a record."""
        pet = create_test_pet()

        result = EconomyEngine.give_coins(pet, 0, const.INCOME_SOURCE_BONUS, NOW)

        assert not result.success
        assert result.record is None
        assert result.pet is pet

    def test_give_coins_without_pet(self) -> None:
        """No pet, no coins."""
        result = EconomyEngine.give_coins(None, 5, const.INCOME_SOURCE_BONUS, NOW)

        assert result.message == const.MSG_NO_PET


# =============================================================================
# TEST: AGGREGATION
# =============================================================================


class TestAggregation:
    """Test spend totals."""

    def test_totals_by_category(self) -> None:
        """Every category is present; spend is summed per category."""
        expenses = [
            create_expense("e1", 25),
            create_expense("e2", 30, const.EXPENSE_CATEGORY_TOYS),
            create_expense("e3", 25),
        ]

        totals = EconomyEngine.get_care_cost_by_category(expenses)

        assert EconomyEngine.get_total_care_cost(expenses) == 80
        assert totals[const.EXPENSE_CATEGORY_FOOD] == 50
        assert totals[const.EXPENSE_CATEGORY_TOYS] == 30
        assert totals[const.EXPENSE_CATEGORY_HEALTH] == 0
        assert set(totals) == set(const.EXPENSE_CATEGORY_OPTIONS)
