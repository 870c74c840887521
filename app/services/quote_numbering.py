"""
Quote numbering service - global, sequential quote numbers.

Uses SELECT ... FOR UPDATE on the single sequence row so concurrent
allocations never hand out the same number.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models.quote import QuoteNumberSequence


async def get_next_quote_number(db: AsyncSession) -> str:
    """
    Atomically allocate the next quote number.

    The first number handed out is settings.first_quote_number (3500).
    Caller commits.
    """
    result = await db.execute(
        select(QuoteNumberSequence)
        .order_by(QuoteNumberSequence.id)
        .limit(1)
        .with_for_update()
    )
    seq = result.scalar_one_or_none()

    if seq is None:
        seq = QuoteNumberSequence(
            last_quote_number=get_settings().first_quote_number - 1,
        )
        db.add(seq)
        await db.flush()

    seq.last_quote_number += 1
    return str(seq.last_quote_number)
