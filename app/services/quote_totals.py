"""
Quote totals by charge type (MRC / NRC).
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class QuoteTotals:
    mrc_total: float
    nrc_total: float
    total_amount: float


def line_total(unit_price: float | Decimal, quantity: float | int) -> Decimal:
    """total_price of a quote line."""
    return Decimal(str(unit_price)) * Decimal(str(quantity))


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _amount(value: Any) -> Decimal:
    """Numeric value of a total_price; blank or non-numeric counts as 0."""
    try:
        amount = Decimal(str(value or 0))
    except InvalidOperation:
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def calculate_totals_by_charge_type(items: Iterable[Any]) -> QuoteTotals:
    """
    Sum total_price of MRC lines and of NRC lines.
    Items can be ORM rows, pydantic models or plain dicts. Lines with any
    other charge type are not counted.
    """
    # Decimal keeps the sums independent of item order
    mrc_total = Decimal("0")
    nrc_total = Decimal("0")

    for item in items:
        charge_type = _field(item, "charge_type")
        charge_type = getattr(charge_type, "value", charge_type)
        total_price = _amount(_field(item, "total_price"))

        if charge_type == "MRC":
            mrc_total += total_price
        elif charge_type == "NRC":
            nrc_total += total_price

    return QuoteTotals(
        mrc_total=float(mrc_total),
        nrc_total=float(nrc_total),
        total_amount=float(mrc_total + nrc_total),
    )
