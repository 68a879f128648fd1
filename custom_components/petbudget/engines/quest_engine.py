"""Quest Engine - Daily quest set, progress hooks and the claim protocol.

Quest lifecycle (one per reset day):

    unclaimed ──(progress reaches goal)──► claimable ──(claim)──► claimed

A quest can be claimed exactly once per reset cycle: claiming requires the
claimable status and an unset `completed_at`, and stamps both. Claimed
quests never accept more progress.

When the stored set's `last_reset` is not today, get_quests() hands back a
fresh default set. The lifetime `claimed_total` counter survives the reset.

Older saves marked claimed quests with progress -1; migrate_legacy() converts
those to the tagged status.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
The caller awards the coins and XP and writes the income record.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_now_utc, dt_to_iso
from ..utils.math_utils import coerce_number

if TYPE_CHECKING:
    from ..type_defs import QuestData, QuestSet


@dataclass
class QuestClaim:
    """Reward authorized by a successful claim."""

    quest_id: str
    title: str
    coins: int
    xp: int
    quests: QuestSet


class QuestEngine:
    """Stateless quest logic."""

    @staticmethod
    def create_default_quests(today: str, claimed_total: int = 0) -> QuestSet:
        """Return a fresh default quest set for `today`."""
        daily: list[QuestData] = []
        for definition in const.DEFAULT_DAILY_QUESTS:
            quest = dict(definition)
            quest[const.DATA_QUEST_PROGRESS] = 0
            quest[const.DATA_QUEST_STATUS] = const.QUEST_STATUS_UNCLAIMED
            quest[const.DATA_QUEST_COMPLETED_AT] = None
            daily.append(quest)  # type: ignore[arg-type]
        return {
            const.DATA_QUESTS_DAILY: daily,
            const.DATA_QUESTS_LAST_RESET: today,
            const.DATA_QUESTS_CLAIMED_TOTAL: claimed_total,
        }

    @staticmethod
    def get_quests(quest_set: QuestSet | None, today: str) -> QuestSet:
        """Return the quest set for `today`, resetting it on day rollover.

        The caller is responsible for persisting a replaced set.
        """
        if quest_set is None:
            return QuestEngine.create_default_quests(today)
        if quest_set.get(const.DATA_QUESTS_LAST_RESET) != today:
            const.LOGGER.debug(
                "DEBUG: Daily quests rolled over from %s to %s",
                quest_set.get(const.DATA_QUESTS_LAST_RESET),
                today,
            )
            return QuestEngine.create_default_quests(
                today, quest_set.get(const.DATA_QUESTS_CLAIMED_TOTAL, 0)
            )
        return copy.deepcopy(quest_set)

    @staticmethod
    def migrate_legacy(quest_set: dict[str, Any] | None) -> QuestSet | None:
        """Convert a stored quest set to the tagged-status schema.

        - progress -1 becomes status claimed with progress = goal
        - other quests get a status derived from progress
        - a missing claimed_total is estimated from today's claimed quests
        """
        if not isinstance(quest_set, dict):
            return None
        migrated = copy.deepcopy(quest_set)
        daily = migrated.get(const.DATA_QUESTS_DAILY)
        if not isinstance(daily, list):
            daily = []
        claimed_today = 0
        for quest in daily:
            goal = int(coerce_number(quest.get(const.DATA_QUEST_GOAL), 1))
            progress = int(coerce_number(quest.get(const.DATA_QUEST_PROGRESS), 0))
            status = quest.get(const.DATA_QUEST_STATUS)
            if progress == const.LEGACY_QUEST_CLAIMED_PROGRESS:
                status = const.QUEST_STATUS_CLAIMED
                progress = goal
            elif status not in (
                const.QUEST_STATUS_UNCLAIMED,
                const.QUEST_STATUS_CLAIMABLE,
                const.QUEST_STATUS_CLAIMED,
            ):
                status = (
                    const.QUEST_STATUS_CLAIMABLE
                    if progress >= goal
                    else const.QUEST_STATUS_UNCLAIMED
                )
            quest[const.DATA_QUEST_GOAL] = goal
            quest[const.DATA_QUEST_PROGRESS] = max(0, min(progress, goal))
            quest[const.DATA_QUEST_STATUS] = status
            quest.setdefault(const.DATA_QUEST_COMPLETED_AT, None)
            if status == const.QUEST_STATUS_CLAIMED:
                claimed_today += 1
        migrated[const.DATA_QUESTS_DAILY] = daily
        migrated.setdefault(const.DATA_QUESTS_CLAIMED_TOTAL, claimed_today)
        return migrated  # type: ignore[return-value]

    # =========================================================================
    # QUERIES
    # =========================================================================

    @staticmethod
    def _find(quest_set: QuestSet, quest_id: str) -> QuestData | None:
        for quest in quest_set.get(const.DATA_QUESTS_DAILY, []):
            if quest[const.DATA_QUEST_ID] == quest_id:
                return quest
        return None

    @staticmethod
    def get_status(quest_set: QuestSet, quest_id: str) -> str | None:
        """Return the quest's status, or None for an unknown id."""
        quest = QuestEngine._find(quest_set, quest_id)
        return None if quest is None else quest[const.DATA_QUEST_STATUS]

    @staticmethod
    def is_quest_ready(quest: QuestData) -> bool:
        """True when the goal is met and the reward has not been taken."""
        return (
            quest.get(const.DATA_QUEST_STATUS) == const.QUEST_STATUS_CLAIMABLE
            and quest.get(const.DATA_QUEST_PROGRESS, 0) >= quest[const.DATA_QUEST_GOAL]
            and not quest.get(const.DATA_QUEST_COMPLETED_AT)
        )

    @staticmethod
    def get_ready_quests(quest_set: QuestSet) -> list[QuestData]:
        """All quests whose reward can be claimed right now."""
        return [
            quest
            for quest in quest_set.get(const.DATA_QUESTS_DAILY, [])
            if QuestEngine.is_quest_ready(quest)
        ]

    # =========================================================================
    # MUTATIONS (return new sets)
    # =========================================================================

    @staticmethod
    def update_quest_progress(quest_set: QuestSet, action: str) -> QuestSet:
        """Advance the quest linked to `action` by one step.

        Actions without a linked quest, quests already at their goal and
        claimed quests are left alone.
        """
        new_set = copy.deepcopy(quest_set)
        quest_id = const.QUEST_ACTION_MAP.get(action)
        if quest_id is None:
            return new_set
        quest = QuestEngine._find(new_set, quest_id)
        if quest is None or quest[const.DATA_QUEST_STATUS] == const.QUEST_STATUS_CLAIMED:
            return new_set

        goal = quest[const.DATA_QUEST_GOAL]
        if quest[const.DATA_QUEST_PROGRESS] >= goal:
            return new_set
        quest[const.DATA_QUEST_PROGRESS] += 1
        if quest[const.DATA_QUEST_PROGRESS] >= goal:
            quest[const.DATA_QUEST_STATUS] = const.QUEST_STATUS_CLAIMABLE
        return new_set

    @staticmethod
    def claim_quest_reward(
        quest_set: QuestSet, quest_id: str, now: datetime | None = None
    ) -> QuestClaim | None:
        """Authorize a quest's reward once.

        Returns None (and changes nothing) unless the quest is ready.
        """
        new_set = copy.deepcopy(quest_set)
        quest = QuestEngine._find(new_set, quest_id)
        if quest is None or not QuestEngine.is_quest_ready(quest):
            const.LOGGER.debug("DEBUG: Quest %s is not ready to claim", quest_id)
            return None

        quest[const.DATA_QUEST_STATUS] = const.QUEST_STATUS_CLAIMED
        quest[const.DATA_QUEST_COMPLETED_AT] = dt_to_iso(now or dt_now_utc())
        new_set[const.DATA_QUESTS_CLAIMED_TOTAL] = (
            new_set.get(const.DATA_QUESTS_CLAIMED_TOTAL, 0) + 1
        )
        return QuestClaim(
            quest_id=quest_id,
            title=quest[const.DATA_QUEST_TITLE],
            coins=quest[const.DATA_QUEST_REWARD_COINS],
            xp=quest[const.DATA_QUEST_REWARD_XP],
            quests=new_set,
        )
