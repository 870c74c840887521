"""
Tests for the daily quote expiry statement and the approval guard.
"""

from datetime import date
from types import SimpleNamespace

import pytest

from app.services.quote_expiry import expired_quotes_statement


def test_only_pending_unarchived_overdue_quotes():
    statement = expired_quotes_statement(date(2024, 1, 15))
    where = str(statement.whereclause)
    assert "quotes.status =" in where
    assert "quotes.archived" in where
    assert "quotes.expires_at IS NOT NULL" in where
    assert "quotes.expires_at <" in where


def test_sets_status_to_expired():
    compiled = expired_quotes_statement(date(2024, 1, 15)).compile()
    assert "expired" in compiled.params.values()
    assert "pending" in compiled.params.values()


class TestExpiredQuoteCannotBeAccepted:
    """Approval is refused once a quote is expired or past its expiry date."""

    def _quote(self, status="pending", expires_at=None):
        from app.models.quote import Quote

        return Quote(status=status, expires_at=expires_at)

    def test_expired_status(self):
        from zoneinfo import ZoneInfo
        from app.api.quotes import _is_expired

        assert _is_expired(self._quote(status="expired"), ZoneInfo("UTC"))

    def test_past_expiry_date_not_yet_swept(self):
        from zoneinfo import ZoneInfo
        from app.api.quotes import _is_expired

        assert _is_expired(self._quote(expires_at=date(2000, 1, 1)), ZoneInfo("UTC"))

    def test_open_quote(self):
        from zoneinfo import ZoneInfo
        from app.api.quotes import _is_expired

        assert not _is_expired(self._quote(), ZoneInfo("UTC"))
        assert not _is_expired(self._quote(expires_at=date(2999, 1, 1)), ZoneInfo("UTC"))


class TestPatchOrdering:
    """Fields in a PATCH are applied before the status is checked."""

    def test_new_expiry_date_allows_approval(self):
        from zoneinfo import ZoneInfo
        from app.api.quotes import _apply_quote_update
        from app.models.quote import Quote, QuoteStatus

        quote = Quote(status="pending", expires_at=date(2000, 1, 1))
        _apply_quote_update(
            quote,
            {"expires_at": date(2999, 1, 1), "status": QuoteStatus.APPROVED},
            ZoneInfo("UTC"),
        )
        assert quote.status == "approved"
        assert quote.accepted_at is not None

    def test_past_expiry_date_blocks_approval(self):
        from fastapi import HTTPException
        from zoneinfo import ZoneInfo
        from app.api.quotes import _apply_quote_update
        from app.models.quote import Quote, QuoteStatus

        quote = Quote(status="pending", expires_at=date(2999, 1, 1))
        with pytest.raises(HTTPException) as exc_info:
            _apply_quote_update(
                quote,
                {"expires_at": date(2000, 1, 1), "status": QuoteStatus.APPROVED},
                ZoneInfo("UTC"),
            )
        assert exc_info.value.status_code == 400
        assert quote.status == "pending"


class TestExpiryToday:

    def test_uses_configured_timezone(self, monkeypatch):
        from datetime import datetime
        from zoneinfo import ZoneInfo
        from app.services import quote_expiry

        monkeypatch.setattr(
            quote_expiry,
            "get_settings",
            lambda: SimpleNamespace(default_timezone="Pacific/Kiritimati"),
        )
        assert quote_expiry.expiry_today() == datetime.now(ZoneInfo("Pacific/Kiritimati")).date()
