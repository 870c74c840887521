"""
Tests for the commission precedence chain.
"""

import logging
import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from app.services.commission_resolver import (
    CommissionSource,
    calculate_commission,
    make_client_override_lookup,
    resolve_commission,
)

AGENT_ID = uuid.uuid4()
CLIENT_INFO_ID = uuid.uuid4()
AGENTS = [
    SimpleNamespace(id=AGENT_ID, commission_rate=12),
    SimpleNamespace(id=uuid.uuid4(), commission_rate=8),
]


def override_lookup(value):
    calls = []

    async def lookup(client_info_id):
        calls.append(client_info_id)
        return value

    lookup.calls = calls
    return lookup


class TestPrecedence:

    async def test_quote_override_wins(self):
        lookup = override_lookup(18.0)
        resolution = await resolve_commission(
            1000, AGENT_ID, AGENTS, CLIENT_INFO_ID, quote_override=20, lookup_client_override=lookup
        )
        assert resolution.source == CommissionSource.QUOTE_OVERRIDE
        assert resolution.rate == 20.0
        assert resolution.amount == pytest.approx(200.0)
        assert lookup.calls == []

    async def test_zero_quote_override_is_an_override(self):
        resolution = await resolve_commission(1000, AGENT_ID, AGENTS, quote_override=0)
        assert resolution.source == CommissionSource.QUOTE_OVERRIDE
        assert resolution.amount == 0.0

    async def test_client_override_before_agent_rate(self):
        lookup = override_lookup(18.0)
        resolution = await resolve_commission(
            1000, AGENT_ID, AGENTS, CLIENT_INFO_ID, lookup_client_override=lookup
        )
        assert resolution.source == CommissionSource.CLIENT_OVERRIDE
        assert resolution.amount == pytest.approx(180.0)
        assert lookup.calls == [CLIENT_INFO_ID]

    async def test_falls_through_to_agent_rate(self):
        resolution = await resolve_commission(
            1000, AGENT_ID, AGENTS, CLIENT_INFO_ID, lookup_client_override=override_lookup(None)
        )
        assert resolution.source == CommissionSource.AGENT_RATE
        assert resolution.rate == 12.0
        assert resolution.amount == pytest.approx(120.0)

    async def test_agent_matched_by_string_id(self):
        agents = [{"id": str(AGENT_ID), "commission_rate": 10}]
        resolution = await resolve_commission(500, AGENT_ID, agents)
        assert resolution.amount == pytest.approx(50.0)

    async def test_agent_without_rate_gives_zero(self):
        agents = [SimpleNamespace(id=AGENT_ID, commission_rate=None)]
        resolution = await resolve_commission(500, AGENT_ID, agents)
        assert resolution.source == CommissionSource.AGENT_RATE
        assert resolution.amount == 0.0

    async def test_unknown_agent_gives_no_commission(self):
        resolution = await resolve_commission(500, uuid.uuid4(), AGENTS)
        assert resolution.source == CommissionSource.NONE
        assert resolution.rate is None
        assert resolution.amount == 0.0

    async def test_calculate_commission_returns_amount(self):
        assert await calculate_commission(1000, AGENT_ID, AGENTS, quote_override=20) == pytest.approx(200.0)


class TestClientOverrideLookup:

    async def test_invalid_id_skips_query(self, fake_session):
        lookup = make_client_override_lookup(fake_session)
        assert await lookup("not-a-uuid") is None
        assert fake_session.executed == []

    async def test_reads_override(self, session_with):
        session = session_with(Decimal("7.50"))
        lookup = make_client_override_lookup(session)
        assert await lookup(CLIENT_INFO_ID) == 7.5
        assert len(session.executed) == 1

    async def test_missing_row(self, fake_session):
        lookup = make_client_override_lookup(fake_session)
        assert await lookup(CLIENT_INFO_ID) is None


class FailingSession:
    """Session whose every query fails like a dropped connection."""

    def __init__(self):
        self.executed = []

    async def execute(self, statement):
        self.executed.append(statement)
        raise OperationalError(str(statement), {}, Exception("connection refused"))


class TestLookupFailure:
    """A failed override read is logged and treated as no override."""

    async def test_lookup_returns_none(self, caplog):
        session = FailingSession()
        lookup = make_client_override_lookup(session)
        with caplog.at_level(logging.WARNING, logger="app.services.commission_resolver"):
            assert await lookup(CLIENT_INFO_ID) is None
        assert len(session.executed) == 1
        assert "Client override lookup failed" in caplog.text

    async def test_resolver_falls_through_to_agent_rate(self):
        resolution = await resolve_commission(
            1000,
            AGENT_ID,
            AGENTS,
            client_info_id=CLIENT_INFO_ID,
            lookup_client_override=make_client_override_lookup(FailingSession()),
        )
        assert resolution.source == CommissionSource.AGENT_RATE
        assert resolution.rate == 12
        assert resolution.amount == pytest.approx(120.0)
