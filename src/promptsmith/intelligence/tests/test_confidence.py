"""Tests for the confidence helpers."""

import pytest

from ..confidence import (
    additive_confidence,
    clamp_confidence,
    competition_penalty,
    create_confidence_result,
    get_confidence_category,
    ratio_confidence,
    round_half_up,
    weighted_confidence,
)


class TestRounding:
    """Test suite for rounding and clamping."""

    def test_halves_round_up(self):
        """Test half-up rounding."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_clamp_bounds(self):
        """Test clamping to 0-100."""
        assert clamp_confidence(150) == 100
        assert clamp_confidence(-7) == 0
        assert clamp_confidence(64.5) == 65


class TestCategories:
    """Test suite for confidence categories."""

    @pytest.mark.parametrize("percentage,category", [
        (0, "low"),
        (49, "low"),
        (50, "medium"),
        (69, "medium"),
        (70, "high"),
        (84, "high"),
        (85, "very-high"),
        (100, "very-high"),
    ])
    def test_category_boundaries(self, percentage, category):
        """Test confidence category boundaries."""
        assert get_confidence_category(percentage) == category

    def test_create_result_clamps_first(self):
        """Test that results are clamped before categorizing."""
        result = create_confidence_result(120)
        assert result.percentage == 100
        assert result.category == "very-high"


class TestStrategies:
    """Test suite for confidence strategies."""

    def test_additive_only_counts_true_conditions(self):
        """Test that only true conditions add their bonus."""
        assert additive_confidence(50, [(True, 20), (False, 15), (True, 5)]) == 75

    def test_additive_is_clamped(self):
        """Test that additive confidence is clamped."""
        assert additive_confidence(90, [(True, 30)]) == 100

    def test_ratio_with_zero_total_uses_fallback(self):
        """Test the fallback for a zero total."""
        assert ratio_confidence(0, 0) == 50
        assert ratio_confidence(0, 0, fallback=30) == 30

    def test_ratio_percentage_and_floor(self):
        """Test ratio percentage and floor."""
        assert ratio_confidence(30, 40) == 75
        assert ratio_confidence(1, 10, min_confidence=40) == 40

    def test_penalty_applies_when_runner_up_is_close(self):
        """Test the competition penalty for a close runner-up."""
        # 100 - 90 < 15, so the penalty applies
        assert competition_penalty(90, 100, 90) == 75

    def test_penalty_respects_floor(self):
        """Test that the penalty respects the floor."""
        assert competition_penalty(50, 10, 10) == 60

    def test_no_penalty_for_clear_winner(self):
        """Test that a clear winner is not penalized."""
        assert competition_penalty(90, 100, 50) == 90

    def test_weighted_mean(self):
        """Test the weighted mean."""
        assert weighted_confidence([(80, 1), (40, 1)]) == 60
        assert weighted_confidence([(90, 3), (50, 1)]) == 80

    def test_weighted_without_weight(self):
        """Test the fallback without weights."""
        assert weighted_confidence([]) == 50
        assert weighted_confidence([(90, 0)]) == 50
