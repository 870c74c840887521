"""
Tests for the markup / commission calculator.
"""

import pytest

from app.services.category_policy import CategoryPolicy
from app.services.markup_commission import (
    calculate_markup_and_commission,
    effective_minimum_markup,
    get_markup_validation_message,
)


# ═══════════════════════════════════════════════════════════════════════════════
# CALCULATION
# ═══════════════════════════════════════════════════════════════════════════════

class TestCalculateMarkupAndCommission:
    """Markup, effective minimum and final commission rate."""

    def test_no_policy_keeps_requested_rate(self):
        result = calculate_markup_and_commission(100, 130, 12)
        assert result.current_markup == pytest.approx(30.0)
        assert result.minimum_markup == 0.0
        assert result.commission_reduction == 0.0
        assert result.final_commission_rate == 12.0
        assert result.is_valid
        assert result.error_message is None

    def test_markup_above_minimum(self):
        result = calculate_markup_and_commission(
            100, 150, 15, CategoryPolicy(minimum_markup=20), 15
        )
        assert result.current_markup == pytest.approx(50.0)
        assert result.minimum_markup == 20.0
        assert result.original_minimum_markup == 20.0
        assert result.final_commission_rate == 15.0
        assert result.is_valid

    def test_commission_given_up_relaxes_minimum(self):
        # Sell at cost with 10% asked out of 15%: minimum drops to 15,
        # the 15-point shortfall takes the remaining 10% away.
        result = calculate_markup_and_commission(
            100, 100, 10, CategoryPolicy(minimum_markup=20), 15
        )
        assert result.current_markup == 0.0
        assert result.minimum_markup == 15.0
        assert result.max_markup_reduction == 15.0
        assert result.commission_reduction == 10.0
        assert result.final_commission_rate == 0.0
        assert result.is_valid

    def test_partial_shortfall(self):
        result = calculate_markup_and_commission(
            100, 115, 15, CategoryPolicy(minimum_markup=20), 15
        )
        assert result.current_markup == pytest.approx(15.0)
        assert result.commission_reduction == pytest.approx(5.0)
        assert result.final_commission_rate == pytest.approx(10.0)
        assert result.is_valid

    def test_minimum_never_negative(self):
        result = calculate_markup_and_commission(
            100, 110, 0, CategoryPolicy(minimum_markup=5), 15
        )
        assert result.minimum_markup == 0.0
        assert result.final_commission_rate == 0.0

    def test_zero_cost_has_zero_markup(self):
        result = calculate_markup_and_commission(0, 50, 10)
        assert result.current_markup == 0.0
        assert result.is_valid

    def test_sell_below_cost_is_invalid(self):
        result = calculate_markup_and_commission(100, 90, 10)
        assert result.current_markup == pytest.approx(-10.0)
        assert not result.is_valid
        assert result.error_message == "Sell price cannot be below cost"

    def test_requested_rate_capped_at_ceiling(self):
        result = calculate_markup_and_commission(100, 130, 20, None, 15)
        assert result.final_commission_rate == 15.0
        assert result.is_valid

    def test_capped_rate_does_not_tighten_minimum(self):
        result = calculate_markup_and_commission(
            100, 100, 10, CategoryPolicy(minimum_markup=30), 5
        )
        assert result.minimum_markup == 30.0
        assert result.max_markup_reduction == 5.0
        assert result.commission_reduction == 5.0
        assert result.final_commission_rate == 0.0
        assert result.is_valid

    @pytest.mark.parametrize("current", [15, 16, 40, 100])
    def test_final_rate_never_exceeds_ceiling(self, current):
        result = calculate_markup_and_commission(
            100, 300, current, CategoryPolicy(minimum_markup=20), 15
        )
        assert result.final_commission_rate <= 15.0

    def test_policy_without_minimum(self):
        result = calculate_markup_and_commission(100, 100, 10, CategoryPolicy(), 15)
        assert result.minimum_markup == 0.0
        assert result.final_commission_rate == 10.0

    @pytest.mark.parametrize(
        "cost,sell,current,minimum",
        [
            (100, 100, 10, 20),
            (100, 105, 15, 20),
            (50, 80, 7.5, 40),
            (0, 10, 15, 25),
            (100, 300, 15, 0),
        ],
    )
    def test_final_rate_bounded_by_requested_rate(self, cost, sell, current, minimum):
        result = calculate_markup_and_commission(
            cost, sell, current, CategoryPolicy(minimum_markup=minimum), 15
        )
        assert 0.0 <= result.final_commission_rate <= current


class TestEffectiveMinimumMarkup:

    def test_matches_calculation(self):
        policy = CategoryPolicy(minimum_markup=20)
        assert effective_minimum_markup(10, policy, 15) == 15.0
        assert effective_minimum_markup(15, policy, 15) == 20.0

    def test_no_policy(self):
        assert effective_minimum_markup(10) == 0.0


# ═══════════════════════════════════════════════════════════════════════════════
# MESSAGES
# ═══════════════════════════════════════════════════════════════════════════════

class TestValidationMessage:

    def test_nothing_to_report(self):
        assert get_markup_validation_message(100, 150, 15, CategoryPolicy(minimum_markup=20)) is None

    def test_reduction_message(self):
        message = get_markup_validation_message(
            100, 115, 15, CategoryPolicy(minimum_markup=20), 15
        )
        assert message == "Commission reduced by 5.0% due to markup below minimum (20%)"

    def test_invalid_message(self):
        assert get_markup_validation_message(100, 50, 15) == "Sell price cannot be below cost"
