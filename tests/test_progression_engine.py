"""Tests for ProgressionEngine - XP, stages and evolution events."""

from __future__ import annotations

import pytest

from custom_components.petbudget import const
from custom_components.petbudget.engines.progression_engine import ProgressionEngine
from tests.conftest import NOW, create_test_pet

# =============================================================================
# TEST: STAGES
# =============================================================================


class TestAgeStage:
    """Test XP thresholds."""

    @pytest.mark.parametrize(
        ("xp", "stage"),
        [(0, 0), (19, 0), (20, 1), (59, 1), (60, 2), (119, 2), (120, 3), (9999, 3)],
    )
    def test_thresholds(self, xp: int, stage: int) -> None:
        """The highest satisfied threshold wins."""
        assert ProgressionEngine.get_age_stage(xp) == stage

    def test_labels(self) -> None:
        """Stages have human labels; unknown stages read as Baby."""
        assert ProgressionEngine.age_label(const.AGE_STAGE_YOUNG) == "Young"
        assert ProgressionEngine.age_label(const.AGE_STAGE_MATURE) == "Mature"
        assert ProgressionEngine.age_label(42) == "Baby"


# =============================================================================
# TEST: XP
# =============================================================================


class TestGiveXp:
    """Test XP awards."""

    def test_give_xp_updates_stage(self) -> None:
        """25 XP moves a Baby to Young."""
        pet = create_test_pet()

        new_pet = ProgressionEngine.give_xp(pet, 25, NOW)

        assert new_pet[const.DATA_PET_XP] == 25
        assert new_pet[const.DATA_PET_AGE_STAGE] == const.AGE_STAGE_YOUNG
        assert pet[const.DATA_PET_XP] == 0

    def test_xp_is_capped(self) -> None:
        """XP never exceeds MAX_XP."""
        pet = create_test_pet(xp=9990)

        assert ProgressionEngine.give_xp(pet, 50, NOW)[const.DATA_PET_XP] == const.MAX_XP

    def test_non_positive_xp_is_noop(self) -> None:
        """Zero or negative awards return an unchanged copy."""
        pet = create_test_pet(xp=10)

        assert ProgressionEngine.give_xp(pet, 0, NOW) == pet
        assert ProgressionEngine.give_xp(pet, -5, NOW) == pet


# =============================================================================
# TEST: EVOLUTION EVENTS
# =============================================================================


class TestEvolution:
    """Test detection and acknowledgment of stage crossings."""

    def test_crossing_emits_event(self) -> None:
        """Crossing into Young produces one pending event."""
        pet = ProgressionEngine.give_xp(create_test_pet(), 25, NOW)

        event = ProgressionEngine.check_evolution(pet).event

        assert event is not None
        assert event.id == "pet-1:0->1"
        assert event.from_stage == const.AGE_STAGE_BABY
        assert event.to_stage == const.AGE_STAGE_YOUNG
        assert event.at_xp == 25

    def test_event_repeats_until_acknowledged(self) -> None:
        """The engine keeps exposing the same event id."""
        pet = ProgressionEngine.give_xp(create_test_pet(), 25, NOW)

        first = ProgressionEngine.check_evolution(pet).event
        second = ProgressionEngine.check_evolution(pet).event

        assert first == second

    def test_acknowledge_clears_event(self) -> None:
        """After acknowledging, the same crossing is not reported again."""
        pet = ProgressionEngine.give_xp(create_test_pet(), 25, NOW)
        event = ProgressionEngine.check_evolution(pet).event

        acked = ProgressionEngine.acknowledge_evolution(pet, event.id, NOW)

        assert acked[const.DATA_PET_ACKNOWLEDGED_STAGE] == const.AGE_STAGE_YOUNG
        assert acked[const.DATA_PET_LAST_EVOLUTION_ACK_ID] == event.id
        assert ProgressionEngine.check_evolution(acked).event is None

    def test_skipped_stage_is_one_event(self) -> None:
        """Jumping two stages at once is a single event."""
        pet = ProgressionEngine.give_xp(create_test_pet(), 25, NOW)
        pet = ProgressionEngine.acknowledge_evolution(pet, "pet-1:0->1", NOW)
        pet = ProgressionEngine.give_xp(pet, 100, NOW)

        event = ProgressionEngine.check_evolution(pet).event

        assert event.id == "pet-1:1->3"

    def test_no_event_below_threshold(self) -> None:
        """No crossing, no event."""
        pet = ProgressionEngine.give_xp(create_test_pet(), 5, NOW)

        assert ProgressionEngine.check_evolution(pet).event is None

    def test_legacy_snapshot_uses_stored_stage(self) -> None:
        """Without acknowledged_stage the stored age_stage is the baseline."""
        pet = create_test_pet(xp=70, age_stage=const.AGE_STAGE_ADULT)
        pet.pop(const.DATA_PET_ACKNOWLEDGED_STAGE)

        assert ProgressionEngine.get_acknowledged_stage(pet) == const.AGE_STAGE_ADULT
        assert ProgressionEngine.check_evolution(pet).event is None

    def test_unparseable_ack_keeps_baseline(self) -> None:
        """A malformed id is stamped but does not move the baseline."""
        pet = ProgressionEngine.give_xp(create_test_pet(), 25, NOW)

        acked = ProgressionEngine.acknowledge_evolution(pet, "garbage", NOW)

        assert acked[const.DATA_PET_ACKNOWLEDGED_STAGE] == const.AGE_STAGE_BABY
        assert acked[const.DATA_PET_LAST_EVOLUTION_ACK_ID] == "garbage"
