"""
Quote expiry job.

Runs daily (APScheduler). Pending quotes whose expires_at is before today
are moved to status "expired"; expired quotes can no longer be accepted.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import update

from app.config import get_settings
from app.database import async_session_maker
from app.models.quote import Quote, QuoteStatus
from app.services.date_utils import resolve_timezone, today_in_timezone

logger = logging.getLogger(__name__)


def expired_quotes_statement(today: date):
    """UPDATE moving overdue pending, non-archived quotes to expired."""
    return (
        update(Quote)
        .where(
            Quote.status == QuoteStatus.PENDING.value,
            Quote.archived == False,  # noqa: E712
            Quote.expires_at.isnot(None),
            Quote.expires_at < today,
        )
        .values(status=QuoteStatus.EXPIRED.value)
    )


def expiry_today() -> date:
    """Today in settings.default_timezone."""
    settings = get_settings()
    tz = resolve_timezone(settings.default_timezone, "UTC")
    return date.fromisoformat(today_in_timezone(tz))


async def process_quote_expiry(today: Optional[date] = None) -> int:
    """
    Entry point for the daily expiry job.

    Opens its own DB session (not a request-scoped dependency).
    Returns the number of quotes expired.
    """
    today = today or expiry_today()
    logger.info("Starting quote expiry for date: %s", today)

    async with async_session_maker() as db:
        result = await db.execute(expired_quotes_statement(today))
        await db.commit()

    count = result.rowcount or 0
    if count:
        logger.info("Expired %d quote(s).", count)
    else:
        logger.info("No quotes to expire today.")
    return count
