# File: storage_manager.py
"""Slot persistence for the PetBudget integration.

Sits between the coordinator and an injected SlotRepository and owns the
rules for what a save slot looks like on disk:

save_all:
    Repair the stored and incoming ledger records, merge them by id and
    prune them to the retention cap. Optional fields the caller did not
    pass keep their stored value. Falls back to smaller caps
    (1000 → 500 → 100) when the repository runs out of room. Never raises;
    returns whether the write landed.

load_all:
    Back-fill fields added by later schema versions, repair the ledger,
    migrate legacy quest sentinels and rebuild the pet-level expense view.
    Returns None for an empty slot or any unreadable document.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import TYPE_CHECKING, Any

from . import const
from .engines.ledger_engine import LedgerEngine
from .engines.pet_engine import PetEngine
from .engines.quest_engine import QuestEngine
from .repository import StorageQuotaExceededError
from .utils.dt_utils import dt_now_utc, dt_to_iso
from .utils.validation_utils import validate_save_slot

if TYPE_CHECKING:
    from .repository import SlotRepository
    from .type_defs import (
        ExpenseRecord,
        GuideChecklist,
        IncomeRecord,
        PetData,
        QuestSet,
        SlotState,
        SlotSummary,
        TaskStateEntry,
    )


class PetBudgetStorageManager:
    """Loads, saves and lists save slots through a SlotRepository."""

    def __init__(self, repository: SlotRepository) -> None:
        """Initialize the storage manager.

        Args:
            repository: Backend holding one document per save slot.
        """
        self._repository = repository

    @property
    def repository(self) -> SlotRepository:
        """The backing slot repository."""
        return self._repository

    async def _async_get_raw(self, slot: int) -> dict[str, Any] | None:
        """Read a slot document, treating read failures as an empty slot."""
        try:
            raw = await self._repository.async_get(slot)
        except (OSError, TypeError, ValueError) as err:
            const.LOGGER.error("ERROR: Failed to read save slot %s: %s", slot, err)
            return None
        return raw if isinstance(raw, dict) else None

    # =========================================================================
    # SAVE
    # =========================================================================

    async def async_save_all(
        self,
        slot: int,
        pet: PetData | None,
        expenses: list[ExpenseRecord] | None = None,
        income: list[IncomeRecord] | None = None,
        quests: QuestSet | None = None,
        badges: list[str] | None = None,
        task_state: list[TaskStateEntry] | None = None,
        guide_checklist: GuideChecklist | None = None,
        demo: bool | None = None,
        demo_seed_version: int | None = None,
        last_allowance_claim: str | None = None,
        last_check_in: str | None = None,
        now: datetime | None = None,
    ) -> bool:
        """Merge and persist one slot.

        Optional fields left as None keep their previously stored value.

        Returns:
            True when the repository accepted the write, False otherwise.
        """
        if not validate_save_slot(slot).is_valid:
            const.LOGGER.error("ERROR: Refusing to save invalid slot %r", slot)
            return False

        current = now or dt_now_utc()
        prior = await self._async_get_raw(slot) or {}
        prior_meta: dict[str, Any] = prior.get(const.DATA_META) or {}

        pet_copy: dict[str, Any] | None = copy.deepcopy(pet) if pet else None
        legacy_view: list[dict[str, Any]] = []
        if pet_copy is not None:
            legacy_view = pet_copy.pop(const.DATA_PET_EXPENSES, None) or []

        # Both sides are repaired first so ids match what load hands out
        merged_expenses = LedgerEngine.merge_by_id(
            LedgerEngine.sanitize_expenses(prior.get(const.DATA_EXPENSES), current),
            LedgerEngine.sanitize_expenses([*legacy_view, *(expenses or [])], current),
        )
        merged_income = LedgerEngine.merge_by_id(
            LedgerEngine.sanitize_income(prior.get(const.DATA_INCOME), current),
            LedgerEngine.sanitize_income(income or [], current),
        )

        def _keep(value: Any, stored: Any) -> Any:
            return stored if value is None else value

        stored_badges = prior.get(const.DATA_BADGES)
        if stored_badges is None and pet_copy is not None:
            stored_badges = pet_copy.get(const.DATA_PET_BADGES, [])

        state: dict[str, Any] = {
            const.DATA_PET: pet_copy,
            const.DATA_QUESTS: _keep(quests, prior.get(const.DATA_QUESTS)),
            const.DATA_BADGES: list(_keep(badges, stored_badges) or []),
            const.DATA_TASK_STATE: list(
                _keep(task_state, prior.get(const.DATA_TASK_STATE)) or []
            ),
            const.DATA_GUIDE_CHECKLIST: _keep(
                guide_checklist, prior.get(const.DATA_GUIDE_CHECKLIST)
            ),
            const.DATA_META: {
                const.DATA_META_CREATED_AT: prior_meta.get(const.DATA_META_CREATED_AT)
                or dt_to_iso(current),
                const.DATA_META_LAST_PLAYED: dt_to_iso(current),
                const.DATA_META_SLOT_NUMBER: slot,
                const.DATA_META_DEMO: bool(
                    _keep(demo, prior_meta.get(const.DATA_META_DEMO, False))
                ),
                const.DATA_META_DEMO_SEED_VERSION: _keep(
                    demo_seed_version,
                    prior_meta.get(const.DATA_META_DEMO_SEED_VERSION),
                ),
                const.DATA_META_LAST_ALLOWANCE_CLAIM: _keep(
                    last_allowance_claim,
                    prior_meta.get(const.DATA_META_LAST_ALLOWANCE_CLAIM),
                ),
                const.DATA_META_LAST_CHECK_IN: _keep(
                    last_check_in, prior_meta.get(const.DATA_META_LAST_CHECK_IN)
                ),
            },
        }

        for max_records in const.RETENTION_TIERS:
            state[const.DATA_EXPENSES] = LedgerEngine.prune_records(
                merged_expenses, max_records
            )
            state[const.DATA_INCOME] = LedgerEngine.prune_records(
                merged_income, max_records
            )
            try:
                await self._repository.async_put(slot, state)
            except StorageQuotaExceededError as err:
                const.LOGGER.warning(
                    "WARNING: %s (at %s records per log), trying a smaller history",
                    err,
                    max_records,
                )
                continue
            except (OSError, TypeError, ValueError) as err:
                const.LOGGER.error("ERROR: Failed to save slot %s: %s", slot, err)
                return False
            if max_records != const.DEFAULT_MAX_RECORDS:
                const.LOGGER.warning(
                    "WARNING: Slot %s saved with reduced history (%s records per log)",
                    slot,
                    max_records,
                )
            return True

        const.LOGGER.error(
            "ERROR: Slot %s could not be saved at any retention tier; "
            "changes remain in memory only",
            slot,
        )
        return False

    # =========================================================================
    # LOAD
    # =========================================================================

    async def async_load_all(
        self, slot: int, now: datetime | None = None
    ) -> SlotState | None:
        """Load and repair one slot.

        Returns:
            The slot state, or None for an empty slot or an unreadable document.
        """
        if not validate_save_slot(slot).is_valid:
            return None
        raw = await self._async_get_raw(slot)
        if raw is None:
            return None
        try:
            return self._build_state(slot, raw, now or dt_now_utc())
        except (AttributeError, KeyError, TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Save slot %s is unreadable and will be treated as empty: %s",
                slot,
                err,
            )
            return None

    @staticmethod
    def _build_state(slot: int, raw: dict[str, Any], now: datetime) -> SlotState:
        """Back-fill and sanitize a raw slot document."""
        raw_pet = raw.get(const.DATA_PET)
        pet = PetEngine.normalize_pet(raw_pet) if isinstance(raw_pet, dict) else None

        raw_expenses = raw.get(const.DATA_EXPENSES)
        if not raw_expenses and isinstance(raw_pet, dict):
            # Oldest saves kept expenses on the pet only
            raw_expenses = raw_pet.get(const.DATA_PET_EXPENSES)
        expenses = LedgerEngine.sanitize_expenses(raw_expenses, now)
        income = LedgerEngine.sanitize_income(raw.get(const.DATA_INCOME), now)

        badges = raw.get(const.DATA_BADGES)
        if not isinstance(badges, list):
            badges = []
        if pet is not None:
            badges = list(dict.fromkeys([*badges, *pet[const.DATA_PET_BADGES]]))
            pet[const.DATA_PET_BADGES] = list(badges)
            pet[const.DATA_PET_EXPENSES] = LedgerEngine.expense_view(expenses)

        task_state = raw.get(const.DATA_TASK_STATE)
        guide = raw.get(const.DATA_GUIDE_CHECKLIST)
        meta = raw.get(const.DATA_META)
        if not isinstance(meta, dict):
            meta = {}

        return {
            const.DATA_PET: pet,
            const.DATA_EXPENSES: expenses,
            const.DATA_INCOME: income,
            const.DATA_QUESTS: QuestEngine.migrate_legacy(raw.get(const.DATA_QUESTS)),
            const.DATA_BADGES: badges,
            const.DATA_TASK_STATE: task_state if isinstance(task_state, list) else [],
            const.DATA_GUIDE_CHECKLIST: guide if isinstance(guide, dict) else None,
            const.DATA_META: {
                const.DATA_META_CREATED_AT: meta.get(const.DATA_META_CREATED_AT)
                or dt_to_iso(now),
                const.DATA_META_LAST_PLAYED: meta.get(const.DATA_META_LAST_PLAYED)
                or dt_to_iso(now),
                const.DATA_META_SLOT_NUMBER: slot,
                const.DATA_META_DEMO: bool(meta.get(const.DATA_META_DEMO, False)),
                const.DATA_META_DEMO_SEED_VERSION: meta.get(
                    const.DATA_META_DEMO_SEED_VERSION
                ),
                const.DATA_META_LAST_ALLOWANCE_CLAIM: meta.get(
                    const.DATA_META_LAST_ALLOWANCE_CLAIM
                ),
                const.DATA_META_LAST_CHECK_IN: meta.get(const.DATA_META_LAST_CHECK_IN),
            },
        }  # type: ignore[typeddict-item]

    # =========================================================================
    # DELETE / LIST
    # =========================================================================

    async def async_delete_slot(self, slot: int) -> bool:
        """Clear a slot. Returns False for an invalid slot or a failed delete."""
        if not validate_save_slot(slot).is_valid:
            return False
        try:
            await self._repository.async_delete(slot)
        except OSError as err:
            const.LOGGER.error("ERROR: Failed to delete slot %s: %s", slot, err)
            return False
        return True

    async def async_list_slots(self) -> list[SlotSummary]:
        """Summaries of every save slot for a slot picker."""
        summaries: list[SlotSummary] = []
        for slot in const.SAVE_SLOTS:
            raw = await self._async_get_raw(slot)
            pet = raw.get(const.DATA_PET) if raw else None
            meta = (raw.get(const.DATA_META) if raw else None) or {}
            if not isinstance(pet, dict):
                pet = None
            summaries.append(
                {
                    const.DATA_SUMMARY_SLOT_NUMBER: slot,
                    const.DATA_SUMMARY_EXISTS: pet is not None,
                    const.DATA_SUMMARY_PET_NAME: pet.get(const.DATA_PET_NAME)
                    if pet
                    else None,
                    const.DATA_SUMMARY_PET_STAGE: PetEngine.normalize_pet(pet)[
                        const.DATA_PET_AGE_STAGE
                    ]
                    if pet
                    else None,
                    const.DATA_SUMMARY_PET_XP: pet.get(const.DATA_PET_XP) if pet else None,
                    const.DATA_SUMMARY_LAST_PLAYED: meta.get(const.DATA_META_LAST_PLAYED),
                }
            )
        return summaries
