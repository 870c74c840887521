"""
Markup / commission calculator.

Every category carries a minimum markup. An agent can sell an item below
that markup by giving up part of their commission:
- commission already given up (ceiling - requested rate) relaxes the
  minimum markup one point for one point
- any remaining markup shortfall is taken out of the requested rate

Invalid configurations are reported through is_valid / error_message so the
caller can render them inline; nothing here raises.
"""

from dataclasses import dataclass
from typing import Optional

from app.services.category_policy import CategoryPolicy

DEFAULT_AGENT_COMMISSION_RATE = 15.0


@dataclass(frozen=True)
class MarkupCommissionCalculation:
    """Result of calculate_markup_and_commission (all values in percent)."""
    minimum_markup: float  # effective minimum, after relaxation
    current_markup: float
    max_markup_reduction: float
    commission_reduction: float  # additional reduction forced by the shortfall
    final_commission_rate: float
    is_valid: bool
    error_message: Optional[str] = None
    original_minimum_markup: float = 0.0


def effective_minimum_markup(
    current_commission_rate: float,
    category_policy: Optional[CategoryPolicy] = None,
    agent_commission_rate: float = DEFAULT_AGENT_COMMISSION_RATE,
) -> float:
    """Category minimum markup, lowered by the commission the agent already gave up."""
    original = _policy_minimum(category_policy)
    given_up = agent_commission_rate - min(current_commission_rate, agent_commission_rate)
    return max(0.0, original - given_up)


def calculate_markup_and_commission(
    cost: float,
    sell_price: float,
    current_commission_rate: float,
    category_policy: Optional[CategoryPolicy] = None,
    agent_commission_rate: float = DEFAULT_AGENT_COMMISSION_RATE,
) -> MarkupCommissionCalculation:
    """
    Compute markup and the commission rate left after enforcing the
    category minimum markup.

    Args:
        cost: Buy cost of the item
        sell_price: Unit sell price
        current_commission_rate: Commission % the agent asks for on this item
        category_policy: Minimum markup policy of the item's category (optional)
        agent_commission_rate: Agent's maximum commission %

    Returns:
        MarkupCommissionCalculation
    """
    cost = float(cost)
    sell_price = float(sell_price)
    current_commission_rate = float(current_commission_rate)
    agent_commission_rate = float(agent_commission_rate)
    # The requested rate never goes above the agent ceiling
    current_commission_rate = min(current_commission_rate, agent_commission_rate)

    original_minimum = _policy_minimum(category_policy)
    given_up = agent_commission_rate - current_commission_rate
    minimum = max(0.0, original_minimum - given_up)

    # cost == 0 has no meaningful markup
    current_markup = ((sell_price - cost) / cost) * 100 if cost > 0 else 0.0

    max_markup_reduction = min(minimum, agent_commission_rate)

    shortfall = max(0.0, minimum - current_markup)
    additional_reduction = min(shortfall, current_commission_rate)

    final_commission_rate = max(0.0, current_commission_rate - additional_reduction)

    # NOTE: given_up is counted again here together with additional_reduction;
    # kept as-is until the intended rule is confirmed.
    exceeds_ceiling = (given_up + additional_reduction) > agent_commission_rate
    is_valid = current_markup >= 0 and not exceeds_ceiling

    error_message = None
    if current_markup < 0:
        error_message = "Sell price cannot be below cost"
    elif exceeds_ceiling:
        error_message = (
            f"Reducing markup below {_fmt(minimum)}% would require more commission "
            f"reduction than available ({_fmt(agent_commission_rate)}%)"
        )

    return MarkupCommissionCalculation(
        minimum_markup=minimum,
        current_markup=current_markup,
        max_markup_reduction=max_markup_reduction,
        commission_reduction=additional_reduction,
        final_commission_rate=final_commission_rate,
        is_valid=is_valid,
        error_message=error_message,
        original_minimum_markup=original_minimum,
    )


def get_markup_validation_message(
    cost: float,
    sell_price: float,
    current_commission_rate: float,
    category_policy: Optional[CategoryPolicy] = None,
    agent_commission_rate: float = DEFAULT_AGENT_COMMISSION_RATE,
) -> Optional[str]:
    """
    Human-readable message for a price change, or None when nothing to report.
    """
    calculation = calculate_markup_and_commission(
        cost,
        sell_price,
        current_commission_rate,
        category_policy,
        agent_commission_rate,
    )

    if not calculation.is_valid:
        return calculation.error_message or "Invalid markup configuration"

    if calculation.commission_reduction > 0:
        return (
            f"Commission reduced by {calculation.commission_reduction:.1f}% due to "
            f"markup below minimum ({_fmt(calculation.minimum_markup)}%)"
        )

    return None


def _policy_minimum(category_policy: Optional[CategoryPolicy]) -> float:
    if category_policy is None or category_policy.minimum_markup is None:
        return 0.0
    return float(category_policy.minimum_markup)


def _fmt(value: float) -> str:
    """15.0 -> '15', 12.5 -> '12.5'"""
    return f"{value:g}"
