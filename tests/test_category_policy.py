"""
Tests for category policy lookup.
"""

import uuid
from decimal import Decimal
from types import SimpleNamespace

from app.services.category_policy import (
    CategoryPolicy,
    get_category_policy,
    get_item_category_policy,
)


class TestFromCategory:

    def test_missing_category(self):
        assert CategoryPolicy.from_category(None) is None

    def test_decimal_minimum(self):
        policy = CategoryPolicy.from_category(SimpleNamespace(minimum_markup=Decimal("22.50")))
        assert policy == CategoryPolicy(minimum_markup=22.5)

    def test_no_minimum(self):
        policy = CategoryPolicy.from_category(SimpleNamespace(minimum_markup=None))
        assert policy == CategoryPolicy()


class TestLookups:

    async def test_no_category_id(self, fake_session):
        assert await get_category_policy(fake_session, None) is None
        assert fake_session.executed == []

    async def test_no_item_id(self, fake_session):
        assert await get_item_category_policy(fake_session, None) is None
        assert fake_session.executed == []

    async def test_category_found(self, session_with):
        session = session_with(SimpleNamespace(minimum_markup=Decimal("20")))
        policy = await get_category_policy(session, uuid.uuid4())
        assert policy.minimum_markup == 20.0

    async def test_item_category_found(self, session_with):
        category_id = uuid.uuid4()
        session = session_with(category_id, SimpleNamespace(minimum_markup=Decimal("12")))
        policy = await get_item_category_policy(session, uuid.uuid4())
        assert policy.minimum_markup == 12.0
        assert len(session.executed) == 2

    async def test_item_without_category(self, session_with):
        session = session_with(None)
        assert await get_item_category_policy(session, uuid.uuid4()) is None
        assert len(session.executed) == 1
