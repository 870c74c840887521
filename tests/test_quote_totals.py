"""
Tests for MRC / NRC quote totals.
"""

import itertools
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.models.quote import ChargeType
from app.services.quote_totals import calculate_totals_by_charge_type, line_total


class TestLineTotal:

    def test_unit_price_times_quantity(self):
        assert line_total(19.99, 3) == Decimal("59.97")

    def test_decimal_input(self):
        assert line_total(Decimal("0.10"), 3) == Decimal("0.30")


class TestTotalsByChargeType:

    def test_empty(self):
        totals = calculate_totals_by_charge_type([])
        assert totals.mrc_total == 0.0
        assert totals.nrc_total == 0.0
        assert totals.total_amount == 0.0

    def test_split_by_charge_type(self):
        items = [
            {"charge_type": "MRC", "total_price": 100},
            {"charge_type": "NRC", "total_price": 250.5},
            {"charge_type": "MRC", "total_price": 49.5},
        ]
        totals = calculate_totals_by_charge_type(items)
        assert totals.mrc_total == 149.5
        assert totals.nrc_total == 250.5
        assert totals.total_amount == 400.0

    def test_other_charge_types_ignored(self):
        items = [
            {"charge_type": "MRC", "total_price": 10},
            {"charge_type": "OTHER", "total_price": 1000},
            {"charge_type": None, "total_price": 5},
        ]
        totals = calculate_totals_by_charge_type(items)
        assert totals.total_amount == 10.0

    def test_non_numeric_total_counts_as_zero(self):
        items = [
            {"charge_type": "MRC", "total_price": "abc"},
            {"charge_type": "MRC", "total_price": "NaN"},
            {"charge_type": "MRC", "total_price": "12.5"},
            {"charge_type": "NRC", "total_price": None},
        ]
        totals = calculate_totals_by_charge_type(items)
        assert totals.mrc_total == 12.5
        assert totals.nrc_total == 0.0

    def test_objects_and_enums(self):
        items = [
            SimpleNamespace(charge_type=ChargeType.MRC, total_price=Decimal("12.34")),
            SimpleNamespace(charge_type=ChargeType.NRC, total_price=None),
        ]
        totals = calculate_totals_by_charge_type(items)
        assert totals.mrc_total == 12.34
        assert totals.nrc_total == 0.0

    def test_order_independent(self):
        items = [
            {"charge_type": "MRC", "total_price": 0.1},
            {"charge_type": "MRC", "total_price": 0.2},
            {"charge_type": "MRC", "total_price": 0.3},
            {"charge_type": "NRC", "total_price": 1e-7},
            {"charge_type": "NRC", "total_price": 99.99},
        ]
        results = {
            calculate_totals_by_charge_type(list(p))
            for p in itertools.permutations(items)
        }
        assert len(results) == 1
        assert results.pop().mrc_total == 0.6

    def test_total_is_sum_of_parts(self):
        items = [
            {"charge_type": "MRC", "total_price": 33.33},
            {"charge_type": "NRC", "total_price": 66.67},
        ]
        totals = calculate_totals_by_charge_type(items)
        assert totals.total_amount == 100.0
        assert totals.total_amount == pytest.approx(totals.mrc_total + totals.nrc_total)
