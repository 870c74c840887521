"""
Circuit quote endpoints.

A circuit quote collects carrier offers for one location. Carrier quotes
are displayed in display_order and can be reordered by drag and drop.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from app.api.deps import CurrentUser, DbSession
from app.models.circuit_quote import (
    CarrierQuote,
    CircuitQuote,
    CircuitQuoteCategory,
    CircuitQuoteStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ─── Schemas ─────────────────────────────────────────────────────────
class CarrierQuoteBase(BaseModel):
    carrier: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    speed: str = Field(..., min_length=1)
    price: float = Field(0.0, ge=0)
    term: Optional[str] = None
    notes: Optional[str] = None
    color: str = "#3B82F6"
    install_fee: bool = False
    install_fee_amount: Optional[float] = Field(None, ge=0)
    site_survey_needed: bool = False
    no_service: bool = False
    static_ip: bool = False
    static_ip_fee_amount: Optional[float] = Field(None, ge=0)
    static_ip_5: bool = False
    static_ip_5_fee_amount: Optional[float] = Field(None, ge=0)
    other_costs: Optional[float] = Field(None, ge=0)


class CarrierQuoteCreate(CarrierQuoteBase):
    pass


class CarrierQuoteUpdate(BaseModel):
    carrier: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    speed: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    term: Optional[str] = None
    notes: Optional[str] = None
    color: Optional[str] = None
    install_fee: Optional[bool] = None
    install_fee_amount: Optional[float] = Field(None, ge=0)
    site_survey_needed: Optional[bool] = None
    no_service: Optional[bool] = None
    static_ip: Optional[bool] = None
    static_ip_fee_amount: Optional[float] = Field(None, ge=0)
    static_ip_5: Optional[bool] = None
    static_ip_5_fee_amount: Optional[float] = Field(None, ge=0)
    other_costs: Optional[float] = Field(None, ge=0)


class CarrierQuoteResponse(CarrierQuoteBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    circuit_quote_id: uuid.UUID
    display_order: int


class CircuitQuoteCreate(BaseModel):
    client_name: str = Field(..., min_length=1)
    client_info_id: Optional[uuid.UUID] = None
    deal_registration_id: Optional[uuid.UUID] = None
    location: str = Field(..., min_length=1)
    suite: Optional[str] = None
    static_ip: bool = False
    slash_29: bool = False
    dhcp: bool = False
    mikrotik_required: bool = False
    categories: List[str] = Field(default_factory=list)


class CircuitQuoteStatusUpdate(BaseModel):
    status: CircuitQuoteStatus


class CarrierReorder(BaseModel):
    carrier_ids: List[uuid.UUID]


class CircuitQuoteResponse(BaseModel):
    id: uuid.UUID
    client_name: str
    client_info_id: Optional[uuid.UUID] = None
    deal_registration_id: Optional[uuid.UUID] = None
    location: str
    suite: Optional[str] = None
    status: str
    static_ip: bool
    slash_29: bool
    dhcp: bool
    mikrotik_required: bool
    user_id: uuid.UUID
    created_at: Optional[datetime] = None
    categories: List[str] = Field(default_factory=list)
    carriers: List[CarrierQuoteResponse] = Field(default_factory=list)


def circuit_quote_to_response(cq: CircuitQuote) -> CircuitQuoteResponse:
    return CircuitQuoteResponse(
        id=cq.id,
        client_name=cq.client_name,
        client_info_id=cq.client_info_id,
        deal_registration_id=cq.deal_registration_id,
        location=cq.location,
        suite=cq.suite,
        status=cq.status,
        static_ip=cq.static_ip,
        slash_29=cq.slash_29,
        dhcp=cq.dhcp,
        mikrotik_required=cq.mikrotik_required,
        user_id=cq.user_id,
        created_at=cq.created_at,
        categories=[c.category_name for c in cq.categories],
        carriers=[CarrierQuoteResponse.model_validate(c) for c in cq.carriers],
    )


# ─── Helpers ─────────────────────────────────────────────────────────
def _with_children(query):
    return query.options(
        selectinload(CircuitQuote.carriers),
        selectinload(CircuitQuote.categories),
    ).execution_options(populate_existing=True)


async def _get_circuit_quote_or_404(
    db, user, circuit_quote_id: uuid.UUID, with_children: bool = False
) -> CircuitQuote:
    query = select(CircuitQuote).where(CircuitQuote.id == circuit_quote_id)
    if not user.is_admin:
        query = query.where(CircuitQuote.user_id == user.id)
    if with_children:
        query = _with_children(query)

    result = await db.execute(query)
    cq = result.scalar_one_or_none()
    if not cq:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Circuit quote not found")
    return cq


async def _get_carrier_or_404(db, user, carrier_id: uuid.UUID) -> CarrierQuote:
    result = await db.execute(select(CarrierQuote).where(CarrierQuote.id == carrier_id))
    carrier = result.scalar_one_or_none()
    if not carrier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Carrier quote not found")
    # Ownership goes through the parent circuit quote
    await _get_circuit_quote_or_404(db, user, carrier.circuit_quote_id)
    return carrier


# ─── Circuit quotes ──────────────────────────────────────────────────
@router.get("", response_model=List[CircuitQuoteResponse])
async def list_circuit_quotes(
    db: DbSession,
    user: CurrentUser,
    status_filter: Optional[CircuitQuoteStatus] = None,
):
    """List circuit quotes with their carriers and categories."""
    query = select(CircuitQuote)
    if not user.is_admin:
        query = query.where(CircuitQuote.user_id == user.id)
    if status_filter:
        query = query.where(CircuitQuote.status == status_filter.value)

    result = await db.execute(_with_children(query.order_by(CircuitQuote.created_at.desc())))
    return [circuit_quote_to_response(cq) for cq in result.scalars().all()]


@router.post("", response_model=CircuitQuoteResponse, status_code=201)
async def create_circuit_quote(
    data: CircuitQuoteCreate,
    db: DbSession,
    user: CurrentUser,
):
    values = data.model_dump(exclude={"categories"})
    cq = CircuitQuote(
        user_id=user.id,
        status=CircuitQuoteStatus.NEW_PRICING.value,
        **values,
    )
    db.add(cq)
    await db.flush()

    for name in dict.fromkeys(data.categories):
        db.add(CircuitQuoteCategory(circuit_quote_id=cq.id, category_name=name))

    await db.commit()
    cq = await _get_circuit_quote_or_404(db, user, cq.id, with_children=True)
    return circuit_quote_to_response(cq)


@router.patch("/{circuit_quote_id}/status", response_model=CircuitQuoteResponse)
async def update_circuit_quote_status(
    circuit_quote_id: uuid.UUID,
    data: CircuitQuoteStatusUpdate,
    db: DbSession,
    user: CurrentUser,
):
    cq = await _get_circuit_quote_or_404(db, user, circuit_quote_id)
    cq.status = data.status.value
    await db.commit()

    cq = await _get_circuit_quote_or_404(db, user, circuit_quote_id, with_children=True)
    return circuit_quote_to_response(cq)


# ─── Carrier quotes ──────────────────────────────────────────────────
@router.post(
    "/{circuit_quote_id}/carriers",
    response_model=CarrierQuoteResponse,
    status_code=201,
)
async def add_carrier_quote(
    circuit_quote_id: uuid.UUID,
    data: CarrierQuoteCreate,
    db: DbSession,
    user: CurrentUser,
):
    """Add a carrier offer at the end of the list."""
    cq = await _get_circuit_quote_or_404(db, user, circuit_quote_id)

    result = await db.execute(
        select(func.max(CarrierQuote.display_order)).where(
            CarrierQuote.circuit_quote_id == cq.id
        )
    )
    max_order = result.scalar()

    carrier = CarrierQuote(
        circuit_quote_id=cq.id,
        display_order=(max_order + 1) if max_order is not None else 0,
        **data.model_dump(),
    )
    db.add(carrier)
    await db.commit()
    await db.refresh(carrier)
    return CarrierQuoteResponse.model_validate(carrier)


@router.patch("/carriers/{carrier_id}", response_model=CarrierQuoteResponse)
async def update_carrier_quote(
    carrier_id: uuid.UUID,
    data: CarrierQuoteUpdate,
    db: DbSession,
    user: CurrentUser,
):
    carrier = await _get_carrier_or_404(db, user, carrier_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(carrier, field, value)

    await db.commit()
    await db.refresh(carrier)
    return CarrierQuoteResponse.model_validate(carrier)


@router.delete("/carriers/{carrier_id}", status_code=204)
async def delete_carrier_quote(
    carrier_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
):
    carrier = await _get_carrier_or_404(db, user, carrier_id)
    await db.delete(carrier)
    await db.commit()
    return None


def apply_carrier_order(carriers, carrier_ids) -> None:
    """Renumber display_order 0..n-1: listed ids first, then the rest."""
    by_id = {c.id: c for c in carriers}
    ordered = []
    for carrier_id in carrier_ids:
        carrier = by_id.pop(carrier_id, None)
        if carrier is not None:
            ordered.append(carrier)
    ordered.extend(sorted(by_id.values(), key=lambda c: (c.display_order or 0)))

    for position, carrier in enumerate(ordered):
        carrier.display_order = position


@router.put("/{circuit_quote_id}/carriers/order", response_model=CircuitQuoteResponse)
async def reorder_carrier_quotes(
    circuit_quote_id: uuid.UUID,
    data: CarrierReorder,
    db: DbSession,
    user: CurrentUser,
):
    """
    Set display_order from the position of each id in carrier_ids.
    Every id must belong to this circuit quote; carriers left out follow
    the listed ones in their previous order.
    """
    cq = await _get_circuit_quote_or_404(db, user, circuit_quote_id, with_children=True)

    carriers = {c.id: c for c in cq.carriers}
    unknown = [str(cid) for cid in data.carrier_ids if cid not in carriers]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Carrier quotes not on this circuit quote: {', '.join(unknown)}",
        )

    apply_carrier_order(cq.carriers, data.carrier_ids)

    await db.commit()
    logger.debug("Reordered %d carriers on circuit quote %s", len(data.carrier_ids), cq.id)

    cq = await _get_circuit_quote_or_404(db, user, circuit_quote_id, with_children=True)
    return circuit_quote_to_response(cq)
