"""
Commission resolver - picks the commission rate that applies to a quote.

Priority (first match wins):
1. Quote-level commission override
2. Client-level commission override (client_info.commission_override)
3. Agent default commission rate
4. No commission
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

ClientOverrideLookup = Callable[[Any], Awaitable[Optional[float]]]


class CommissionSource(str, Enum):
    """Where the applied commission rate came from."""
    QUOTE_OVERRIDE = "quote_override"
    CLIENT_OVERRIDE = "client_override"
    AGENT_RATE = "agent_rate"
    NONE = "none"


@dataclass(frozen=True)
class CommissionResolution:
    source: CommissionSource
    rate: Optional[float]
    amount: float


async def _no_client_override(client_info_id: Any) -> Optional[float]:
    return None


def make_client_override_lookup(db: AsyncSession) -> ClientOverrideLookup:
    """
    Build a lookup reading client_info.commission_override.
    A missing row, or a failed read, means "no override".
    """
    from app.models.client_info import ClientInfo

    async def lookup(client_info_id: Any) -> Optional[float]:
        try:
            client_info_uuid = uuid.UUID(str(client_info_id))
        except ValueError:
            return None

        try:
            result = await db.execute(
                select(ClientInfo.commission_override).where(ClientInfo.id == client_info_uuid)
            )
        except SQLAlchemyError as exc:
            logger.warning(
                "Client override lookup failed, falling back to agent rate. client_info_id=%s error=%s",
                client_info_id,
                exc,
            )
            return None

        override = result.scalar_one_or_none()
        return float(override) if override is not None else None

    return lookup


def _field(record: Any, *names: str) -> Any:
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None


def _agent_rate(client_id: Any, clients: Iterable[Any]) -> Optional[float]:
    if client_id is None:
        return None
    for client in clients:
        if str(_field(client, "id")) == str(client_id):
            rate = _field(client, "commission_rate", "commissionRate")
            return float(rate) if rate is not None else 0.0
    return None


async def resolve_commission(
    amount: float,
    client_id: Any,
    clients: Iterable[Any],
    client_info_id: Any = None,
    quote_override: Optional[float] = None,
    lookup_client_override: ClientOverrideLookup = _no_client_override,
) -> CommissionResolution:
    """
    Resolve the commission on a quote amount.

    Args:
        amount: Quote amount the commission applies to
        client_id: Agent the quote belongs to
        clients: Known agents (objects or mappings with id and commission_rate)
        client_info_id: End customer, checked for a client-level override
        quote_override: Quote-level override percent
        lookup_client_override: Async callable returning the client override percent

    Returns:
        CommissionResolution with the source, rate and commission amount
    """
    amount = float(amount)
    clients = list(clients)

    async def from_quote() -> Optional[float]:
        return float(quote_override) if quote_override is not None else None

    async def from_client() -> Optional[float]:
        if not client_info_id:
            return None
        return await lookup_client_override(client_info_id)

    async def from_agent() -> Optional[float]:
        return _agent_rate(client_id, clients)

    strategies = (
        (CommissionSource.QUOTE_OVERRIDE, from_quote),
        (CommissionSource.CLIENT_OVERRIDE, from_client),
        (CommissionSource.AGENT_RATE, from_agent),
    )

    for source, strategy in strategies:
        rate = await strategy()
        if rate is not None:
            return CommissionResolution(
                source=source,
                rate=rate,
                amount=(rate / 100) * amount,
            )

    logger.debug("No commission rate found for client_id=%s", client_id)
    return CommissionResolution(source=CommissionSource.NONE, rate=None, amount=0.0)


async def calculate_commission(
    amount: float,
    client_id: Any,
    clients: Iterable[Any],
    client_info_id: Any = None,
    quote_override: Optional[float] = None,
    lookup_client_override: ClientOverrideLookup = _no_client_override,
) -> float:
    """Commission amount only."""
    resolution = await resolve_commission(
        amount,
        client_id,
        clients,
        client_info_id=client_info_id,
        quote_override=quote_override,
        lookup_client_override=lookup_client_override,
    )
    return resolution.amount
