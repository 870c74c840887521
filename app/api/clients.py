"""
Client (end customer) endpoints.
Visibility follows the agent scoping rules in app.services.scoping.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import CurrentUser, DbSession, OwnAgentId
from app.models.client_info import ClientInfo
from app.services.scoping import client_scope_query

router = APIRouter()


# ─── Schemas ─────────────────────────────────────────────────────────
class ClientCreate(BaseModel):
    company_name: str = Field(..., min_length=1)
    agent_id: Optional[uuid.UUID] = None
    commission_override: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    revio_id: Optional[str] = None


class ClientUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=1)
    agent_id: Optional[uuid.UUID] = None
    commission_override: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    revio_id: Optional[str] = None


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    company_name: str
    agent_id: Optional[uuid.UUID] = None
    commission_override: Optional[float] = None
    notes: Optional[str] = None
    revio_id: Optional[str] = None
    user_id: uuid.UUID
    created_at: Optional[datetime] = None


# ─── Helpers ─────────────────────────────────────────────────────────
async def _get_client_or_404(db, user, own_agent_id, client_id: uuid.UUID) -> ClientInfo:
    query = client_scope_query(user, own_agent_id).where(ClientInfo.id == client_id)
    result = await db.execute(query)
    client = result.scalar_one_or_none()
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


# ─── Endpoints ───────────────────────────────────────────────────────
@router.get("", response_model=List[ClientResponse])
async def list_clients(
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    """List the clients visible to the current user."""
    query = client_scope_query(user, own_agent_id).order_by(ClientInfo.company_name)
    result = await db.execute(query)
    return [ClientResponse.model_validate(c) for c in result.scalars().all()]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    return ClientResponse.model_validate(
        await _get_client_or_404(db, user, own_agent_id, client_id)
    )


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    """
    Create a client. Agents creating a client without an agent_id get it
    assigned to themselves.
    """
    values = data.model_dump()
    if values["agent_id"] is None and own_agent_id is not None:
        values["agent_id"] = own_agent_id

    client = ClientInfo(user_id=user.id, **values)
    db.add(client)
    await db.commit()
    await db.refresh(client)
    return ClientResponse.model_validate(client)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: uuid.UUID,
    data: ClientUpdate,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    """Update a client, including its commission override."""
    client = await _get_client_or_404(db, user, own_agent_id, client_id)

    update_data = data.model_dump(exclude_unset=True)
    if "agent_id" in update_data and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can reassign a client",
        )

    for field, value in update_data.items():
        setattr(client, field, value)

    await db.commit()
    await db.refresh(client)
    return ClientResponse.model_validate(client)


@router.delete("/{client_id}", status_code=204)
async def delete_client(
    client_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    client = await _get_client_or_404(db, user, own_agent_id, client_id)
    await db.delete(client)
    await db.commit()
    return None
