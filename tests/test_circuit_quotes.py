"""
Tests for carrier ordering on circuit quotes.
"""

import uuid
from types import SimpleNamespace

from app.api.circuit_quotes import apply_carrier_order


def carriers(*orders):
    return [SimpleNamespace(id=uuid.uuid4(), display_order=order) for order in orders]


class TestCarrierOrder:
    """display_order is always a gapless 0..n-1 sequence after a reorder."""

    def test_full_list(self):
        a, b, c = carriers(0, 1, 2)
        apply_carrier_order([a, b, c], [c.id, a.id, b.id])
        assert [c.display_order, a.display_order, b.display_order] == [0, 1, 2]

    def test_partial_list_renumbers_the_rest(self):
        a, b, c, d = carriers(0, 1, 2, 3)
        apply_carrier_order([a, b, c, d], [d.id])
        assert [d.display_order, a.display_order, b.display_order, c.display_order] == [0, 1, 2, 3]

    def test_no_duplicate_positions(self):
        rows = carriers(0, 1, 2, 3, 4)
        apply_carrier_order(rows, [rows[3].id, rows[1].id])
        assert sorted(r.display_order for r in rows) == [0, 1, 2, 3, 4]

    def test_repeated_id_counted_once(self):
        a, b = carriers(0, 1)
        apply_carrier_order([a, b], [b.id, b.id])
        assert (b.display_order, a.display_order) == (0, 1)
