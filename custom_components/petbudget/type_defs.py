"""Type definitions for PetBudget data structures.

ARCHITECTURE DECISION: HYBRID APPROACH (TypedDict + dict[str, Any])
===================================================================

1. **TypedDict for STATIC structures** (fixed keys known at design time):
   - Pet snapshot, stats, ledger records, quests, slot metadata

2. **dict[str, Any] for DYNAMIC structures** (keys determined at runtime):
   - Inventory (item id → count), guide checklist items, report breakdowns

Persisted structures arrive from JSON and may be missing keys written by a
newer schema, so loaders must back-fill with `.get()` defaults.
TypedDict is STATIC ANALYSIS ONLY and enforces nothing at runtime.

IMPORTANT: This file must NOT import from coordinator.py or any module that
imports the coordinator, to avoid circular dependencies.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

PetId = str
RecordId = str
QuestId = str
BadgeId = str
TaskId = str
SlotNumber = int
ISODatetime = str  # ISO 8601 UTC datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"

QuestStatus = Literal["unclaimed", "claimable", "claimed"]
DateRange = Literal["today", "last7days", "last30days", "all"]


# =============================================================================
# Pet
# =============================================================================


class PetStats(TypedDict):
    """Five care stats, each clamped to [0, 100]."""

    hunger: float
    happiness: float
    health: float
    energy: float
    cleanliness: float


class PetData(TypedDict):
    """Pet snapshot.

    `age_stage` mirrors the XP threshold function and is refreshed whenever
    XP changes. `acknowledged_stage` is the last stage the player has been
    shown, and is the baseline for evolution detection.
    """

    id: PetId
    name: str
    species: str
    xp: int
    age_stage: int
    acknowledged_stage: int
    stats: PetStats
    coins: int
    lifetime_earnings: int
    inventory: dict[str, int]
    tricks: list[str]
    badges: list[BadgeId]
    created_at: ISODatetime
    last_updated: ISODatetime
    last_decay_at: ISODatetime
    last_evolution_ack_id: str | None
    # Legacy expense view, only present on snapshots returned by load_all
    expenses: NotRequired[list["ExpenseRecord"]]


# =============================================================================
# Ledger
# =============================================================================


class ExpenseRecord(TypedDict):
    """One expense. Amount is always positive."""

    id: RecordId
    timestamp: ISODatetime
    amount: int | float
    category: str
    label: str


class IncomeRecord(TypedDict):
    """One income entry. Amount is always positive."""

    id: RecordId
    timestamp: ISODatetime
    amount: int | float
    source: str
    label: str


class RecentTransaction(TypedDict):
    """Flattened expense or income row for the recent-activity list."""

    type: Literal["expense", "income"]
    id: RecordId
    label: str
    amount: int | float
    timestamp: ISODatetime


class DailyAmount(TypedDict):
    """One point of a per-day series."""

    date: ISODate
    amount: int | float


class ReportModel(TypedDict):
    """Aggregated finance report for a date range."""

    total_spent: float
    total_earned: float
    net: float
    spent_by_category: dict[str, float]
    earned_by_source: dict[str, float]
    daily_spent_series: list[DailyAmount]
    daily_earned_series: list[DailyAmount]
    recent_transactions: list[RecentTransaction]


# =============================================================================
# Quests, Tasks, Badges
# =============================================================================


class QuestData(TypedDict):
    """A daily quest and its claim state."""

    id: QuestId
    title: str
    description: str
    difficulty: str
    goal: int
    progress: int
    reward_coins: int
    reward_xp: int
    status: QuestStatus
    completed_at: ISODatetime | None


class QuestSet(TypedDict):
    """Daily quest set keyed by its reset day."""

    daily: list[QuestData]
    last_reset: ISODate
    claimed_total: int


class TaskStateEntry(TypedDict):
    """Cooldown tracking for one task."""

    task_id: TaskId
    last_completed_at: ISODatetime | None
    in_progress: bool


class BadgeContext(TypedDict):
    """Aggregate state the badge rules are evaluated against."""

    total_care_cost: float
    care_cost_by_category: dict[str, float]
    completed_quests_count: int
    age_stage: int
    stats: PetStats


class BadgeDefinition(TypedDict):
    """Static badge metadata."""

    id: BadgeId
    name: str
    description: str
    category: str


class MiniGameReward(TypedDict, total=False):
    """Reward granted after a mini-game round (all fields optional)."""

    coins: int
    happiness: float
    cleanliness: float
    xp: int


# =============================================================================
# Save Slots
# =============================================================================


class GuideChecklist(TypedDict):
    """Free-form daily guide checklist."""

    date: ISODate | None
    items: dict[str, Any]
    streak: int


class SlotMeta(TypedDict):
    """Slot metadata."""

    created_at: ISODatetime
    last_played: ISODatetime
    slot_number: SlotNumber
    demo: bool
    demo_seed_version: NotRequired[int | None]
    last_allowance_claim: NotRequired[ISODatetime | None]
    last_check_in: NotRequired[ISODate | None]


class SlotState(TypedDict):
    """Everything persisted for one save slot."""

    pet: PetData | None
    expenses: list[ExpenseRecord]
    income: list[IncomeRecord]
    quests: QuestSet | None
    badges: list[BadgeId]
    task_state: list[TaskStateEntry]
    guide_checklist: GuideChecklist | None
    meta: SlotMeta


class SlotSummary(TypedDict):
    """Slot picker row returned by list_slots."""

    slot_number: SlotNumber
    exists: bool
    pet_name: str | None
    pet_stage: int | None
    pet_xp: int | None
    last_played: ISODatetime | None
