"""Tests for DecayEngine - pure logic, no HA fixtures needed.

Test categories:
- Whole-unit decay and the per-call cap
- Idempotence for repeated calls with the same `now`
- Anchor fallbacks for older snapshots
- Clamping and low-stat penalties
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from custom_components.petbudget import const
from custom_components.petbudget.engines.decay_engine import DecayEngine
from custom_components.petbudget.utils.dt_utils import dt_to_iso
from tests.conftest import NOW, create_test_pet

# =============================================================================
# TEST: WHOLE-UNIT DECAY
# =============================================================================


class TestApplyDecay:
    """Test decay applied over elapsed minutes."""

    def test_five_minutes_of_decay(self) -> None:
        """Each need drops by its rate per elapsed minute."""
        pet = create_test_pet()
        later = NOW + timedelta(minutes=5)

        decayed = DecayEngine.apply_decay(pet, later)
        stats = decayed[const.DATA_PET_STATS]

        assert stats[const.STAT_HUNGER] == pytest.approx(94.0)
        assert stats[const.STAT_ENERGY] == pytest.approx(95.5)
        assert stats[const.STAT_CLEANLINESS] == pytest.approx(97.0)
        assert stats[const.STAT_HAPPINESS] == pytest.approx(98.0)
        # Healthy needs let health recover, clamped at the top
        assert stats[const.STAT_HEALTH] == pytest.approx(100.0)
        assert decayed[const.DATA_PET_LAST_DECAY_AT] == dt_to_iso(later)

    def test_input_pet_not_mutated(self) -> None:
        """apply_decay returns a new snapshot."""
        pet = create_test_pet()
        DecayEngine.apply_decay(pet, NOW + timedelta(minutes=5))

        assert pet[const.DATA_PET_STATS][const.STAT_HUNGER] == 100.0
        assert pet[const.DATA_PET_LAST_DECAY_AT] == dt_to_iso(NOW)

    def test_long_absence_is_capped(self) -> None:
        """Hours away apply at most DECAY_MAX_UNITS_PER_CALL units."""
        pet = create_test_pet()
        later = NOW + timedelta(hours=3)

        decayed = DecayEngine.apply_decay(pet, later)
        stats = decayed[const.DATA_PET_STATS]

        assert stats[const.STAT_HUNGER] == pytest.approx(88.0)
        assert stats[const.STAT_ENERGY] == pytest.approx(91.0)
        assert decayed[const.DATA_PET_LAST_DECAY_AT] == dt_to_iso(later)

    def test_multiplier_scales_units(self) -> None:
        """A demo multiplier of 2 doubles the applied units."""
        pet = create_test_pet()

        decayed = DecayEngine.apply_decay(
            pet, NOW + timedelta(minutes=5), const.DEMO_DECAY_MULTIPLIER
        )

        assert decayed[const.DATA_PET_STATS][const.STAT_HUNGER] == pytest.approx(88.0)

    def test_zero_multiplier_only_moves_anchor(self) -> None:
        """Multiplier 0 leaves stats alone but consumes the elapsed time."""
        pet = create_test_pet()
        later = NOW + timedelta(minutes=5)

        decayed = DecayEngine.apply_decay(pet, later, 0)

        assert decayed[const.DATA_PET_STATS] == pet[const.DATA_PET_STATS]
        assert decayed[const.DATA_PET_LAST_DECAY_AT] == dt_to_iso(later)


# =============================================================================
# TEST: IDEMPOTENCE
# =============================================================================


class TestDecayIdempotence:
    """Test that decay is never applied twice for the same interval."""

    def test_same_now_twice_is_noop(self) -> None:
        """Applying decay twice with the same `now` equals applying it once."""
        pet = create_test_pet()
        later = NOW + timedelta(minutes=7)

        once = DecayEngine.apply_decay(pet, later)
        twice = DecayEngine.apply_decay(once, later)

        assert twice == once

    def test_less_than_one_unit_keeps_anchor(self) -> None:
        """Inside the first minute nothing changes, so the remainder is kept."""
        pet = create_test_pet()

        result = DecayEngine.apply_decay(pet, NOW + timedelta(seconds=45))

        assert result == pet
        assert result[const.DATA_PET_LAST_DECAY_AT] == dt_to_iso(NOW)

    def test_remainder_counts_toward_next_call(self) -> None:
        """45 s then another 30 s adds up to one whole unit."""
        pet = create_test_pet()

        first = DecayEngine.apply_decay(pet, NOW + timedelta(seconds=45))
        second = DecayEngine.apply_decay(first, NOW + timedelta(seconds=75))

        assert second[const.DATA_PET_STATS][const.STAT_HUNGER] == pytest.approx(98.8)

    def test_clock_going_backwards_is_noop(self) -> None:
        """A `now` before the anchor applies nothing."""
        pet = create_test_pet()

        result = DecayEngine.apply_decay(pet, NOW - timedelta(hours=1))

        assert result == pet


# =============================================================================
# TEST: ANCHOR FALLBACK
# =============================================================================


class TestDecayAnchor:
    """Test anchor resolution for snapshots missing last_decay_at."""

    def test_falls_back_to_last_updated(self) -> None:
        """Without last_decay_at the clock starts at last_updated."""
        pet = create_test_pet()
        pet.pop(const.DATA_PET_LAST_DECAY_AT)
        pet[const.DATA_PET_LAST_UPDATED] = dt_to_iso(NOW - timedelta(minutes=2))

        assert DecayEngine.elapsed_units(pet, NOW) == 2

    def test_falls_back_to_created_at(self) -> None:
        """Without last_updated either, created_at is used."""
        pet = create_test_pet()
        pet.pop(const.DATA_PET_LAST_DECAY_AT)
        pet.pop(const.DATA_PET_LAST_UPDATED)

        assert DecayEngine.get_decay_anchor(pet) == NOW
        assert DecayEngine.elapsed_units(pet, NOW + timedelta(minutes=3)) == 3

    def test_epoch_millis_anchor(self) -> None:
        """Older saves stored epoch milliseconds."""
        pet = create_test_pet()
        pet[const.DATA_PET_LAST_DECAY_AT] = int(NOW.timestamp() * 1000)

        assert DecayEngine.elapsed_units(pet, NOW + timedelta(minutes=4)) == 4

    def test_no_anchor_starts_clock(self) -> None:
        """A pet with no timestamps is stamped, not decayed."""
        pet = create_test_pet()
        for key in (
            const.DATA_PET_LAST_DECAY_AT,
            const.DATA_PET_LAST_UPDATED,
            const.DATA_PET_CREATED_AT,
        ):
            pet.pop(key)

        result = DecayEngine.apply_decay(pet, NOW)

        assert result[const.DATA_PET_STATS] == pet[const.DATA_PET_STATS]
        assert result[const.DATA_PET_LAST_DECAY_AT] == dt_to_iso(NOW)


# =============================================================================
# TEST: CLAMPING & PENALTIES
# =============================================================================


class TestDecayStats:
    """Test the per-unit stat rules."""

    def test_stats_never_leave_range(self) -> None:
        """A neglected pet bottoms out at 0 rather than going negative."""
        pet = create_test_pet(
            stats={
                const.STAT_HUNGER: 1,
                const.STAT_ENERGY: 0.5,
                const.STAT_CLEANLINESS: 0,
                const.STAT_HAPPINESS: 2,
                const.STAT_HEALTH: 1,
            }
        )

        decayed = DecayEngine.apply_decay(pet, NOW + timedelta(minutes=10))

        for value in decayed[const.DATA_PET_STATS].values():
            assert 0 <= value <= 100
        assert decayed[const.DATA_PET_STATS][const.STAT_HUNGER] == 0

    def test_low_hunger_penalizes_happiness_and_health(self) -> None:
        """Hunger under 30 costs extra happiness; under 50 it erodes health."""
        stats = {
            const.STAT_HUNGER: 20.0,
            const.STAT_ENERGY: 100.0,
            const.STAT_CLEANLINESS: 100.0,
            const.STAT_HAPPINESS: 100.0,
            const.STAT_HEALTH: 100.0,
        }

        result = DecayEngine.decay_stats(stats, 1)

        assert result[const.STAT_HUNGER] == pytest.approx(18.8)
        assert result[const.STAT_HAPPINESS] == pytest.approx(99.0)
        # Neglect is measured on the decayed hunger (18.8)
        assert result[const.STAT_HEALTH] == pytest.approx(99.63)

    def test_need_crossing_threshold_penalizes_same_call(self) -> None:
        """Hunger decaying below 30 costs happiness in that same call."""
        stats = {
            const.STAT_HUNGER: 30.5,
            const.STAT_ENERGY: 100.0,
            const.STAT_CLEANLINESS: 100.0,
            const.STAT_HAPPINESS: 100.0,
            const.STAT_HEALTH: 100.0,
        }

        result = DecayEngine.decay_stats(stats, 1)

        assert result[const.STAT_HUNGER] == pytest.approx(29.3)
        assert result[const.STAT_HAPPINESS] == pytest.approx(99.0)
        assert result[const.STAT_HEALTH] == pytest.approx(99.75)

    def test_recovery_judged_after_decay(self) -> None:
        """Needs that fall under 60 during the call block recovery."""
        stats = {
            const.STAT_HUNGER: 60.5,
            const.STAT_ENERGY: 100.0,
            const.STAT_CLEANLINESS: 100.0,
            const.STAT_HAPPINESS: 100.0,
            const.STAT_HEALTH: 90.0,
        }

        result = DecayEngine.decay_stats(stats, 1)

        assert result[const.STAT_HUNGER] == pytest.approx(59.3)
        assert result[const.STAT_HEALTH] == pytest.approx(90.0)

    def test_non_numeric_stat_treated_as_full(self) -> None:
        """Junk stat values decay from the default."""
        stats = {const.STAT_HUNGER: "abc"}

        result = DecayEngine.decay_stats(stats, 1)

        assert result[const.STAT_HUNGER] == pytest.approx(98.8)
        assert set(result) == set(const.STAT_KEYS)
