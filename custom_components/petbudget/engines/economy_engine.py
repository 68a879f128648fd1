"""Economy Engine - Pure logic for coin transactions and ledger records.

This engine provides stateless, pure Python functions for:
- Coin arithmetic (spend/earn) that never drives a balance negative
- Expense and income record construction with positive amounts
- Sufficient funds validation (NSF checks)
- Care cost aggregation (totals and per-category breakdowns)

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data and return
new structures; inputs are never mutated.
State management belongs in EconomyManager.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
import uuid

from .. import const
from ..utils.dt_utils import dt_now_utc, dt_to_iso

if TYPE_CHECKING:
    from ..type_defs import ExpenseRecord, IncomeRecord, PetData


class InsufficientFundsError(Exception):
    """Raised when a withdrawal would result in a negative coin balance.

    Attributes:
        pet_id: The pet whose wallet was charged
        current_balance: Current coin balance
        requested_amount: Amount attempted to withdraw
        shortfall: How much more is needed (requested - current)
    """

    def __init__(
        self,
        pet_id: str,
        current_balance: float,
        requested_amount: float,
    ) -> None:
        """Initialize InsufficientFundsError.

        Args:
            pet_id: The pet whose wallet was charged
            current_balance: Current coin balance
            requested_amount: Amount attempted to withdraw
        """
        self.pet_id = pet_id
        self.current_balance = current_balance
        self.requested_amount = requested_amount
        self.shortfall = requested_amount - current_balance
        super().__init__(
            f"Insufficient funds for pet {pet_id}: "
            f"balance={current_balance}, requested={requested_amount}, "
            f"shortfall={self.shortfall}"
        )


@dataclass
class ActionResult:
    """Outcome of one state-changing operation on a pet.

    On failure `pet` is the unchanged input and `record` is None. On success
    `record` holds the single ledger entry produced, if the operation has a
    monetary side (paid actions and purchases produce an expense, earnings
    produce income, free care produces none).

    Attributes:
        success: Whether the operation was applied
        pet: Resulting pet snapshot (or the untouched input on failure)
        record: Expense or income record to append to the ledger, if any
        message: Player-facing explanation
    """

    success: bool
    pet: PetData | None
    record: ExpenseRecord | IncomeRecord | None = None
    message: str = ""


class EconomyEngine:
    """Pure logic engine for coin calculations and ledger records.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.

    Expense categories (const.EXPENSE_CATEGORY_*): Food, Toys, Health,
    Supplies, Activities, Care, Other.

    Income sources (const.INCOME_SOURCE_*): Task, Daily Quest, Daily Check-In,
    Weekly Allowance, Mini-Game, Bonus, Other.
    """

    @staticmethod
    def new_record_id(
        prefix: str, now: datetime | None = None, seed: str | None = None
    ) -> str:
        """Return a ledger record id.

        Format: "{prefix}_{epoch_millis}_{9 hex chars}", which keeps ids
        roughly time-ordered for humans reading exported CSVs. With a `seed`
        the hex part is derived from it, so the same seed always yields the
        same id.
        """
        current = now or dt_now_utc()
        millis = int(current.timestamp() * 1000)
        suffix = (
            uuid.uuid5(uuid.NAMESPACE_OID, seed) if seed is not None else uuid.uuid4()
        )
        return f"{prefix}_{millis}_{suffix.hex[:9]}"

    @staticmethod
    def validate_sufficient_funds(balance: float, cost: float) -> bool:
        """Check if balance is sufficient for a withdrawal.

        Returns:
            True if balance >= cost, False otherwise (NSF)
        """
        return balance >= cost

    @staticmethod
    def create_expense_record(
        amount: float,
        category: str,
        label: str,
        now: datetime | None = None,
    ) -> ExpenseRecord:
        """Create an expense record.

        Amounts are stored as positive values regardless of the sign passed
        in; unknown categories collapse to Other.

        Raises:
            ValueError: If amount is zero (nothing to record)
        """
        if not amount:
            raise ValueError("Expense amount must be non-zero")
        current = now or dt_now_utc()
        if category not in const.EXPENSE_CATEGORY_OPTIONS:
            category = const.EXPENSE_CATEGORY_OTHER
        return {
            const.DATA_RECORD_ID: EconomyEngine.new_record_id(
                const.RECORD_ID_PREFIX_EXPENSE, current
            ),
            const.DATA_RECORD_TIMESTAMP: dt_to_iso(current),
            const.DATA_RECORD_AMOUNT: abs(amount),
            const.DATA_RECORD_CATEGORY: category,
            const.DATA_RECORD_LABEL: label,
        }

    @staticmethod
    def create_income_record(
        amount: float,
        source: str,
        label: str,
        now: datetime | None = None,
    ) -> IncomeRecord:
        """Create an income record (positive amount, closed source set).

        Raises:
            ValueError: If amount is zero (nothing to record)
        """
        if not amount:
            raise ValueError("Income amount must be non-zero")
        current = now or dt_now_utc()
        if source not in const.INCOME_SOURCE_OPTIONS:
            source = const.INCOME_SOURCE_OTHER
        return {
            const.DATA_RECORD_ID: EconomyEngine.new_record_id(
                const.RECORD_ID_PREFIX_INCOME, current
            ),
            const.DATA_RECORD_TIMESTAMP: dt_to_iso(current),
            const.DATA_RECORD_AMOUNT: abs(amount),
            const.DATA_RECORD_SOURCE: source,
            const.DATA_RECORD_LABEL: label,
        }

    @staticmethod
    def spend_coins(pet: PetData, cost: int) -> PetData:
        """Return a copy of the pet with `cost` coins deducted.

        Raises:
            ValueError: If cost is not positive
            InsufficientFundsError: If the balance cannot cover the cost
        """
        if cost <= 0:
            raise ValueError(const.MSG_INVALID_COST_FMT.format(cost=cost))
        balance = pet[const.DATA_PET_COINS]
        if not EconomyEngine.validate_sufficient_funds(balance, cost):
            raise InsufficientFundsError(pet[const.DATA_PET_ID], balance, cost)
        new_pet = copy.deepcopy(pet)
        new_pet[const.DATA_PET_COINS] = balance - cost
        return new_pet

    @staticmethod
    def earn_coins(pet: PetData, amount: int) -> PetData:
        """Return a copy of the pet with `amount` coins added to wallet and lifetime total.

        Raises:
            ValueError: If amount is not positive
        """
        if amount <= 0:
            raise ValueError(const.MSG_INVALID_AMOUNT_FMT.format(amount=amount))
        new_pet = copy.deepcopy(pet)
        new_pet[const.DATA_PET_COINS] = pet[const.DATA_PET_COINS] + amount
        new_pet[const.DATA_PET_LIFETIME_EARNINGS] = (
            pet.get(const.DATA_PET_LIFETIME_EARNINGS, 0) + amount
        )
        return new_pet

    @staticmethod
    def give_coins(
        pet: PetData | None,
        amount: int,
        source: str,
        now: datetime | None = None,
        label: str | None = None,
    ) -> ActionResult:
        """Credit coins from an earning source and build the income record.

        Fails without mutation for a missing pet or a non-positive amount.
        """
        if pet is None:
            return ActionResult(False, pet, message=const.MSG_NO_PET)
        try:
            new_pet = EconomyEngine.earn_coins(pet, amount)
        except ValueError as err:
            const.LOGGER.debug("DEBUG: give_coins rejected: %s", err)
            return ActionResult(False, pet, message=str(err))

        current = now or dt_now_utc()
        new_pet[const.DATA_PET_LAST_UPDATED] = dt_to_iso(current)
        record = EconomyEngine.create_income_record(
            amount,
            source,
            label
            or const.MSG_EARNED_LABEL_FMT.format(amount=amount, source=source),
            current,
        )
        return ActionResult(True, new_pet, record, record[const.DATA_RECORD_LABEL])

    # =========================================================================
    # AGGREGATION
    # =========================================================================

    @staticmethod
    def get_total_care_cost(expenses: list[ExpenseRecord]) -> float:
        """Sum every expense amount (amounts are positive by construction)."""
        return sum(abs(rec.get(const.DATA_RECORD_AMOUNT, 0)) for rec in expenses)

    @staticmethod
    def get_care_cost_by_category(expenses: list[ExpenseRecord]) -> dict[str, float]:
        """Return total spend per expense category (every category present)."""
        totals: dict[str, float] = dict.fromkeys(const.EXPENSE_CATEGORY_OPTIONS, 0)
        for rec in expenses:
            category = rec.get(const.DATA_RECORD_CATEGORY, const.EXPENSE_CATEGORY_OTHER)
            if category not in totals:
                category = const.EXPENSE_CATEGORY_OTHER
            totals[category] += abs(rec.get(const.DATA_RECORD_AMOUNT, 0))
        return totals
