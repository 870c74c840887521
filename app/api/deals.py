"""
Deal registration endpoints.
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession
from app.models.deal_registration import DealRegistration

router = APIRouter()

DealStage = Literal["prospecting", "qualification", "proposal", "negotiation", "closed_won", "closed_lost"]
DealStatus = Literal["active", "inactive", "completed"]


# ─── Schemas ─────────────────────────────────────────────────────────
class DealCreate(BaseModel):
    deal_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    deal_value: float = Field(0.0, ge=0)
    stage: DealStage = "prospecting"
    status: DealStatus = "active"
    probability: Optional[int] = Field(None, ge=0, le=100)
    expected_close_date: Optional[dt.date] = None
    notes: Optional[str] = None
    agent_id: Optional[uuid.UUID] = None
    client_info_id: Optional[uuid.UUID] = None


class DealUpdate(BaseModel):
    deal_name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    deal_value: Optional[float] = Field(None, ge=0)
    stage: Optional[DealStage] = None
    status: Optional[DealStatus] = None
    probability: Optional[int] = Field(None, ge=0, le=100)
    expected_close_date: Optional[dt.date] = None
    notes: Optional[str] = None
    agent_id: Optional[uuid.UUID] = None
    client_info_id: Optional[uuid.UUID] = None


class DealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    deal_name: str
    description: Optional[str] = None
    deal_value: float
    stage: str
    status: str
    probability: Optional[int] = None
    expected_close_date: Optional[dt.date] = None
    notes: Optional[str] = None
    agent_id: Optional[uuid.UUID] = None
    client_info_id: Optional[uuid.UUID] = None
    archived: bool
    created_at: Optional[dt.datetime] = None


# ─── Helpers ─────────────────────────────────────────────────────────
async def _get_deal_or_404(db, user, deal_id: uuid.UUID) -> DealRegistration:
    query = select(DealRegistration).where(DealRegistration.id == deal_id)
    if not user.is_admin:
        query = query.where(DealRegistration.user_id == user.id)
    result = await db.execute(query)
    deal = result.scalar_one_or_none()
    if not deal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deal not found")
    return deal


# ─── Endpoints ───────────────────────────────────────────────────────
@router.get("", response_model=List[DealResponse])
async def list_deals(
    db: DbSession,
    user: CurrentUser,
    archived: bool = Query(False),
    stage: Optional[DealStage] = None,
):
    """List deals. Admins see every deal, others their own."""
    query = select(DealRegistration).where(DealRegistration.archived == archived)
    if not user.is_admin:
        query = query.where(DealRegistration.user_id == user.id)
    if stage:
        query = query.where(DealRegistration.stage == stage)

    result = await db.execute(query.order_by(DealRegistration.created_at.desc()))
    return [DealResponse.model_validate(d) for d in result.scalars().all()]


@router.post("", response_model=DealResponse, status_code=201)
async def create_deal(
    data: DealCreate,
    db: DbSession,
    user: CurrentUser,
):
    deal = DealRegistration(user_id=user.id, archived=False, **data.model_dump())
    db.add(deal)
    await db.commit()
    await db.refresh(deal)
    return DealResponse.model_validate(deal)


@router.patch("/{deal_id}", response_model=DealResponse)
async def update_deal(
    deal_id: uuid.UUID,
    data: DealUpdate,
    db: DbSession,
    user: CurrentUser,
):
    deal = await _get_deal_or_404(db, user, deal_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(deal, field, value)

    await db.commit()
    await db.refresh(deal)
    return DealResponse.model_validate(deal)


@router.post("/{deal_id}/archive", response_model=DealResponse)
async def archive_deal(
    deal_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
):
    """Archive a deal (deals are never hard-deleted)."""
    deal = await _get_deal_or_404(db, user, deal_id)
    deal.archived = True
    await db.commit()
    await db.refresh(deal)
    return DealResponse.model_validate(deal)
