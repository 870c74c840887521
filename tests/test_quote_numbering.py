"""
Tests for quote number allocation.
"""

from app.models.quote import QuoteNumberSequence
from app.services.quote_numbering import get_next_quote_number


class TestQuoteNumbering:

    async def test_first_number_is_3500(self, fake_session):
        assert await get_next_quote_number(fake_session) == "3500"
        assert len(fake_session.added) == 1
        assert fake_session.flushed == 1

    async def test_increments_existing_sequence(self, session_with):
        seq = QuoteNumberSequence(last_quote_number=3612)
        session = session_with(seq)
        assert await get_next_quote_number(session) == "3613"
        assert seq.last_quote_number == 3613
        assert session.added == []

    async def test_locks_the_sequence_row(self, fake_session):
        await get_next_quote_number(fake_session)
        statement = fake_session.executed[0]
        assert statement._for_update_arg is not None
