"""
tests/test_levels.py — Level Table & Progress Projection
=========================================================
"""

from __future__ import annotations

import pytest

from meeple.constants import (
    LEVELS,
    MAX_LEVEL,
    calculate_level,
    get_level,
    get_xp_for_next_level,
)
from meeple.services.reputation_service import level_progress_for_xp

THRESHOLDS = [0, 100, 250, 500, 900, 1400, 2000, 2800, 4000, 6000]


class TestLevelTable:
    def test_levels_contiguous_from_one(self):
        assert [d.level for d in LEVELS] == list(range(1, len(LEVELS) + 1))

    def test_thresholds_ascending(self):
        assert [d.xp_required for d in LEVELS] == THRESHOLDS

    def test_get_level_off_ladder(self):
        assert get_level(0) is None
        assert get_level(MAX_LEVEL + 1) is None
        assert get_level(3).name == "Knight"


class TestCalculateLevel:
    def test_zero_is_commoner(self):
        d = calculate_level(0)
        assert (d.level, d.name) == (1, "Commoner")

    def test_99_and_100(self):
        assert calculate_level(99).level == 1
        assert calculate_level(100).level == 2

    @pytest.mark.parametrize("level,threshold", list(enumerate(THRESHOLDS, start=1)))
    def test_boundary_exactness(self, level, threshold):
        assert calculate_level(threshold).level == level
        if threshold > 0:
            assert calculate_level(threshold - 1).level == level - 1

    def test_beyond_max(self):
        assert calculate_level(1_000_000).level == MAX_LEVEL

    def test_monotonic(self):
        previous = 0
        for xp in range(0, 7000, 7):
            level = calculate_level(xp).level
            assert level >= previous
            previous = level


class TestXPForNextLevel:
    def test_from_zero(self):
        assert get_xp_for_next_level(0) == 100

    def test_mid_level(self):
        assert get_xp_for_next_level(260) == 240

    def test_max_level_is_zero(self):
        assert get_xp_for_next_level(6000) == 0
        assert get_xp_for_next_level(9999) == 0


class TestLevelProgress:
    def test_start_of_ladder(self):
        p = level_progress_for_xp(0)
        assert p.current_level == 1
        assert p.progress_percentage == 0

    def test_halfway(self):
        # Level 2 spans 100..250
        p = level_progress_for_xp(175)
        assert p.current_level == 2
        assert p.progress_percentage == pytest.approx(50.0)
        assert p.xp_for_next_level == 75

    def test_max_level_reports_full(self):
        assert level_progress_for_xp(6000).progress_percentage == 100
        assert level_progress_for_xp(50_000).progress_percentage == 100

    def test_always_within_bounds(self):
        for xp in range(0, 8000, 13):
            assert 0 <= level_progress_for_xp(xp).progress_percentage <= 100
