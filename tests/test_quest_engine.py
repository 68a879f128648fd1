"""Tests for QuestEngine - daily quest lifecycle, no HA fixtures needed.

Test categories:
- Default set and day rollover
- Progress hooks
- The claim-once protocol
- Migration of the legacy -1 sentinel
"""

from __future__ import annotations

from custom_components.petbudget import const
from custom_components.petbudget.engines.quest_engine import QuestEngine
from tests.conftest import NOW

TODAY = "2026-03-14"
TOMORROW = "2026-03-15"


def _quest(quest_set: dict, quest_id: str) -> dict:
    return next(
        quest for quest in quest_set[const.DATA_QUESTS_DAILY] if quest["id"] == quest_id
    )


def _progress(quest_set: dict, action: str, times: int) -> dict:
    for _ in range(times):
        quest_set = QuestEngine.update_quest_progress(quest_set, action)
    return quest_set


# =============================================================================
# TEST: DEFAULT SET & ROLLOVER
# =============================================================================


class TestQuestSet:
    """Test the daily set."""

    def test_default_quests(self) -> None:
        """Four quests, all unclaimed at zero progress."""
        quests = QuestEngine.create_default_quests(TODAY)

        ids = [quest["id"] for quest in quests[const.DATA_QUESTS_DAILY]]
        assert ids == [
            const.QUEST_CLEAN_PET,
            const.QUEST_PLAY_PET,
            const.QUEST_FEED_PET,
            const.QUEST_HEALTH_CHECK,
        ]
        for quest in quests[const.DATA_QUESTS_DAILY]:
            assert quest[const.DATA_QUEST_PROGRESS] == 0
            assert quest[const.DATA_QUEST_STATUS] == const.QUEST_STATUS_UNCLAIMED
            assert quest[const.DATA_QUEST_COMPLETED_AT] is None
        assert quests[const.DATA_QUESTS_LAST_RESET] == TODAY
        assert quests[const.DATA_QUESTS_CLAIMED_TOTAL] == 0

    def test_missing_set_creates_default(self) -> None:
        """No stored set means a fresh one."""
        assert QuestEngine.get_quests(None, TODAY) == (
            QuestEngine.create_default_quests(TODAY)
        )

    def test_same_day_keeps_progress(self) -> None:
        """Within a day the stored set is returned as-is."""
        quests = _progress(
            QuestEngine.create_default_quests(TODAY), const.ACTION_FEED, 2
        )

        same = QuestEngine.get_quests(quests, TODAY)

        assert _quest(same, const.QUEST_FEED_PET)[const.DATA_QUEST_PROGRESS] == 2

    def test_rollover_resets_but_keeps_total(self) -> None:
        """A new day resets every quest; the lifetime total survives."""
        quests = _progress(
            QuestEngine.create_default_quests(TODAY), const.ACTION_CLEAN, 1
        )
        quests = QuestEngine.claim_quest_reward(
            quests, const.QUEST_CLEAN_PET, NOW
        ).quests

        rolled = QuestEngine.get_quests(quests, TOMORROW)

        assert rolled[const.DATA_QUESTS_LAST_RESET] == TOMORROW
        assert rolled[const.DATA_QUESTS_CLAIMED_TOTAL] == 1
        assert (
            _quest(rolled, const.QUEST_CLEAN_PET)[const.DATA_QUEST_STATUS]
            == const.QUEST_STATUS_UNCLAIMED
        )


# =============================================================================
# TEST: PROGRESS
# =============================================================================


class TestQuestProgress:
    """Test action hooks."""

    def test_feed_three_times_makes_claimable(self) -> None:
        """feed_pet (goal 3) becomes claimable on the third feed."""
        quests = QuestEngine.create_default_quests(TODAY)

        quests = _progress(quests, const.ACTION_FEED, 2)
        assert (
            _quest(quests, const.QUEST_FEED_PET)[const.DATA_QUEST_STATUS]
            == const.QUEST_STATUS_UNCLAIMED
        )

        quests = _progress(quests, const.ACTION_FEED, 1)
        feed = _quest(quests, const.QUEST_FEED_PET)
        assert feed[const.DATA_QUEST_PROGRESS] == 3
        assert feed[const.DATA_QUEST_STATUS] == const.QUEST_STATUS_CLAIMABLE

    def test_progress_stops_at_goal(self) -> None:
        """Extra actions do not push progress past the goal."""
        quests = _progress(
            QuestEngine.create_default_quests(TODAY), const.ACTION_FEED, 5
        )

        assert _quest(quests, const.QUEST_FEED_PET)[const.DATA_QUEST_PROGRESS] == 3

    def test_unlinked_action_changes_nothing(self) -> None:
        """Rest has no quest."""
        quests = QuestEngine.create_default_quests(TODAY)

        assert QuestEngine.update_quest_progress(quests, const.ACTION_REST) == quests

    def test_vet_visit_completes_health_check(self) -> None:
        """A vet visit finishes the one-step health check."""
        quests = _progress(
            QuestEngine.create_default_quests(TODAY), const.ACTION_VET_VISIT, 1
        )

        assert [quest["id"] for quest in QuestEngine.get_ready_quests(quests)] == [
            const.QUEST_HEALTH_CHECK
        ]


# =============================================================================
# TEST: CLAIM PROTOCOL
# =============================================================================


class TestQuestClaim:
    """Test claim-once semantics."""

    def test_claim_ready_quest(self) -> None:
        """A claimable quest pays its reward once."""
        quests = _progress(
            QuestEngine.create_default_quests(TODAY), const.ACTION_FEED, 3
        )

        claim = QuestEngine.claim_quest_reward(quests, const.QUEST_FEED_PET, NOW)

        assert claim is not None
        assert claim.coins == 30
        assert claim.xp == 3
        feed = _quest(claim.quests, const.QUEST_FEED_PET)
        assert feed[const.DATA_QUEST_STATUS] == const.QUEST_STATUS_CLAIMED
        assert feed[const.DATA_QUEST_COMPLETED_AT] is not None
        assert claim.quests[const.DATA_QUESTS_CLAIMED_TOTAL] == 1

    def test_second_claim_refused(self) -> None:
        """Claiming again returns None."""
        quests = _progress(
            QuestEngine.create_default_quests(TODAY), const.ACTION_FEED, 3
        )
        claimed = QuestEngine.claim_quest_reward(quests, const.QUEST_FEED_PET, NOW)

        assert (
            QuestEngine.claim_quest_reward(claimed.quests, const.QUEST_FEED_PET, NOW)
            is None
        )

    def test_claim_incomplete_refused(self) -> None:
        """Progress short of the goal cannot be claimed."""
        quests = _progress(
            QuestEngine.create_default_quests(TODAY), const.ACTION_FEED, 2
        )

        assert QuestEngine.claim_quest_reward(quests, const.QUEST_FEED_PET, NOW) is None

    def test_claimed_quest_ignores_progress(self) -> None:
        """More feeding after a claim does not reopen the quest."""
        quests = _progress(
            QuestEngine.create_default_quests(TODAY), const.ACTION_FEED, 3
        )
        claimed = QuestEngine.claim_quest_reward(quests, const.QUEST_FEED_PET, NOW)

        after = QuestEngine.update_quest_progress(claimed.quests, const.ACTION_FEED)

        assert QuestEngine.get_status(after, const.QUEST_FEED_PET) == (
            const.QUEST_STATUS_CLAIMED
        )

    def test_unknown_quest(self) -> None:
        """Unknown ids are neither claimable nor have a status."""
        quests = QuestEngine.create_default_quests(TODAY)

        assert QuestEngine.claim_quest_reward(quests, "nope", NOW) is None
        assert QuestEngine.get_status(quests, "nope") is None


# =============================================================================
# TEST: LEGACY MIGRATION
# =============================================================================


class TestQuestMigration:
    """Test conversion of older quest sets."""

    def test_negative_progress_becomes_claimed(self) -> None:
        """progress -1 meant claimed."""
        legacy = {
            "daily": [
                {"id": const.QUEST_CLEAN_PET, "title": "Keep It Clean", "goal": 1,
                 "progress": -1, "reward_coins": 20, "reward_xp": 1},
                {"id": const.QUEST_FEED_PET, "title": "Well Fed", "goal": 3,
                 "progress": 3, "reward_coins": 30, "reward_xp": 3},
                {"id": const.QUEST_PLAY_PET, "title": "Playtime", "goal": 2,
                 "progress": 1, "reward_coins": 30, "reward_xp": 2},
            ],
            "last_reset": TODAY,
        }

        migrated = QuestEngine.migrate_legacy(legacy)

        clean = _quest(migrated, const.QUEST_CLEAN_PET)
        assert clean[const.DATA_QUEST_STATUS] == const.QUEST_STATUS_CLAIMED
        assert clean[const.DATA_QUEST_PROGRESS] == 1
        assert (
            _quest(migrated, const.QUEST_FEED_PET)[const.DATA_QUEST_STATUS]
            == const.QUEST_STATUS_CLAIMABLE
        )
        assert (
            _quest(migrated, const.QUEST_PLAY_PET)[const.DATA_QUEST_STATUS]
            == const.QUEST_STATUS_UNCLAIMED
        )
        assert migrated[const.DATA_QUESTS_CLAIMED_TOTAL] == 1

    def test_migrated_claimed_quest_cannot_be_claimed(self) -> None:
        """The sentinel never turns back into a payable reward."""
        legacy = {
            "daily": [
                {"id": const.QUEST_CLEAN_PET, "title": "Keep It Clean", "goal": 1,
                 "progress": -1, "reward_coins": 20, "reward_xp": 1},
            ],
            "last_reset": TODAY,
        }

        migrated = QuestEngine.migrate_legacy(legacy)

        assert QuestEngine.claim_quest_reward(migrated, const.QUEST_CLEAN_PET, NOW) is None

    def test_non_dict_is_none(self) -> None:
        """Garbage yields no quest set."""
        assert QuestEngine.migrate_legacy(None) is None
        assert QuestEngine.migrate_legacy(["x"]) is None
