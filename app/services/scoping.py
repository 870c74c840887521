"""
Visibility rules for clients and quotes.

- admins see everything
- a user associated with an agent sees that agent's clients
- an agent sees the clients assigned to them
- anyone else sees the clients they created
"""

import uuid
from typing import Any, Iterable, List, Optional

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent
from app.models.client_info import ClientInfo
from app.models.quote import Quote
from app.models.user import Profile


async def get_agent_id_for_user(db: AsyncSession, user_id: uuid.UUID) -> Optional[uuid.UUID]:
    """Agent row linked to an auth user, if any."""
    result = await db.execute(select(Agent.id).where(Agent.user_id == user_id))
    return result.scalars().first()


def filter_client_infos(
    profile: Profile,
    client_infos: Iterable[Any],
    own_agent_id: Optional[uuid.UUID] = None,
) -> List[Any]:
    """
    Filter rows already loaded. own_agent_id is the agent row linked to the
    user (if any). An agent with no assigned clients falls back to the
    clients they created.
    """
    client_infos = list(client_infos)

    if profile.is_admin:
        return client_infos

    if profile.associated_agent_id:
        return [c for c in client_infos if c.agent_id == profile.associated_agent_id]

    agent_ids = {profile.id}
    if own_agent_id:
        agent_ids.add(own_agent_id)
    agent_clients = [c for c in client_infos if c.agent_id in agent_ids]
    if agent_clients:
        return agent_clients

    return [c for c in client_infos if c.user_id == profile.id]


def client_scope_query(
    profile: Profile,
    own_agent_id: Optional[uuid.UUID] = None,
) -> Select:
    """SELECT of the client_info rows visible to profile (assigned or created)."""
    query = select(ClientInfo)

    if profile.is_admin:
        return query

    if profile.associated_agent_id:
        return query.where(ClientInfo.agent_id == profile.associated_agent_id)

    agent_ids = [profile.id]
    if own_agent_id:
        agent_ids.append(own_agent_id)

    return query.where(
        or_(
            ClientInfo.agent_id.in_(agent_ids),
            ClientInfo.user_id == profile.id,
        )
    )


def quote_scope_query(
    profile: Profile,
    own_agent_id: Optional[uuid.UUID] = None,
) -> Select:
    """SELECT of the quotes visible to profile."""
    query = select(Quote)

    if profile.is_admin:
        return query

    agent_id = profile.associated_agent_id or own_agent_id
    if agent_id:
        return query.where(or_(Quote.client_id == agent_id, Quote.user_id == profile.id))

    return query.where(Quote.user_id == profile.id)
