"""
Agent management endpoints.
Any user can list agents (needed to pick the agent on a quote);
only admins create, edit or delete them.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy import select

from app.api.deps import AdminUser, CurrentUser, DbSession
from app.models.agent import Agent

router = APIRouter()


# ─── Schemas ─────────────────────────────────────────────────────────
class AgentCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    company_name: Optional[str] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    maximum_commission_rate: float = Field(15.0, ge=0, le=100)
    user_id: Optional[uuid.UUID] = None


class AgentUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    company_name: Optional[str] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    maximum_commission_rate: Optional[float] = Field(None, ge=0, le=100)
    user_id: Optional[uuid.UUID] = None


class AgentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    company_name: Optional[str] = None
    commission_rate: Optional[float] = None
    maximum_commission_rate: float
    total_earnings: Optional[float] = None
    last_payment: Optional[datetime] = None
    user_id: Optional[uuid.UUID] = None


# ─── Helpers ─────────────────────────────────────────────────────────
async def _get_agent_or_404(db, agent_id: uuid.UUID) -> Agent:
    result = await db.execute(select(Agent).where(Agent.id == agent_id))
    agent = result.scalar_one_or_none()
    if not agent:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent not found")
    return agent


# ─── Endpoints ───────────────────────────────────────────────────────
@router.get("", response_model=List[AgentResponse])
async def list_agents(
    db: DbSession,
    user: CurrentUser,
):
    """List agents ordered by last name."""
    result = await db.execute(select(Agent).order_by(Agent.last_name, Agent.first_name))
    return [AgentResponse.model_validate(a) for a in result.scalars().all()]


@router.get("/{agent_id}", response_model=AgentResponse)
async def get_agent(
    agent_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
):
    return AgentResponse.model_validate(await _get_agent_or_404(db, agent_id))


@router.post("", response_model=AgentResponse, status_code=201)
async def create_agent(
    data: AgentCreate,
    db: DbSession,
    user: AdminUser,
):
    """Create an agent."""
    agent = Agent(**data.model_dump())
    db.add(agent)
    await db.commit()
    await db.refresh(agent)
    return AgentResponse.model_validate(agent)


@router.patch("/{agent_id}", response_model=AgentResponse)
async def update_agent(
    agent_id: uuid.UUID,
    data: AgentUpdate,
    db: DbSession,
    user: AdminUser,
):
    """Update an agent, including commission rates."""
    agent = await _get_agent_or_404(db, agent_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(agent, field, value)

    await db.commit()
    await db.refresh(agent)
    return AgentResponse.model_validate(agent)


@router.delete("/{agent_id}", status_code=204)
async def delete_agent(
    agent_id: uuid.UUID,
    db: DbSession,
    user: AdminUser,
):
    agent = await _get_agent_or_404(db, agent_id)
    await db.delete(agent)
    await db.commit()
    return None
