"""
Pricing endpoints - markup / commission checks and totals for the quote editor.

The editor calls these on every price or commission change; nothing is
persisted here.
"""

import uuid
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession
from app.config import get_settings
from app.models.agent import Agent
from app.services.category_policy import (
    CategoryPolicy,
    get_category_policy,
    get_item_category_policy,
)
from app.services.commission_resolver import make_client_override_lookup, resolve_commission
from app.services.markup_commission import (
    calculate_markup_and_commission,
    get_markup_validation_message,
)
from app.services.quote_totals import calculate_totals_by_charge_type, line_total

router = APIRouter()


# ─── Schemas ─────────────────────────────────────────────────────────
class MarkupCommissionRequest(BaseModel):
    """
    Price check for one quote line.
    The category policy comes from minimum_markup if given, else from
    category_id, else from the category of item_id.
    The ceiling is agent_commission_rate if given, else the maximum rate of
    agent_id, else the configured default.
    """
    cost: float = Field(..., ge=0)
    sell_price: float
    current_commission_rate: float = Field(..., ge=0)
    agent_commission_rate: Optional[float] = Field(None, ge=0)
    minimum_markup: Optional[float] = Field(None, ge=0)
    category_id: Optional[uuid.UUID] = None
    item_id: Optional[uuid.UUID] = None
    agent_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def check_rate_within_ceiling(self):
        if (
            self.agent_commission_rate is not None
            and self.current_commission_rate > self.agent_commission_rate
        ):
            raise ValueError("current_commission_rate cannot exceed agent_commission_rate")
        return self


class MarkupCommissionResponse(BaseModel):
    minimum_markup: float
    original_minimum_markup: float
    current_markup: float
    max_markup_reduction: float
    commission_reduction: float
    final_commission_rate: float
    is_valid: bool
    error_message: Optional[str] = None
    message: Optional[str] = None


class TotalsLine(BaseModel):
    charge_type: Literal["MRC", "NRC"]
    unit_price: float = 0.0
    quantity: float = 1
    total_price: Optional[float] = None  # defaults to unit_price * quantity


class TotalsRequest(BaseModel):
    items: List[TotalsLine] = Field(default_factory=list)


class TotalsResponse(BaseModel):
    mrc_total: float
    nrc_total: float
    total_amount: float


class CommissionRequest(BaseModel):
    amount: float
    client_id: Optional[uuid.UUID] = None  # agent
    client_info_id: Optional[uuid.UUID] = None
    quote_override: Optional[float] = Field(None, ge=0)


class CommissionResponse(BaseModel):
    source: str
    rate: Optional[float] = None
    commission: float


# ─── Endpoints ───────────────────────────────────────────────────────
@router.post("/markup-commission", response_model=MarkupCommissionResponse)
async def check_markup_commission(
    data: MarkupCommissionRequest,
    db: DbSession,
    user: CurrentUser,
):
    """
    Compute markup, effective minimum markup and final commission rate for a line.
    Invalid prices are reported in is_valid / error_message, not as HTTP errors.
    """
    if data.minimum_markup is not None:
        policy: Optional[CategoryPolicy] = CategoryPolicy(minimum_markup=data.minimum_markup)
    elif data.category_id is not None:
        policy = await get_category_policy(db, data.category_id)
    else:
        policy = await get_item_category_policy(db, data.item_id)

    agent_rate = data.agent_commission_rate
    if agent_rate is None and data.agent_id is not None:
        result = await db.execute(
            select(Agent.maximum_commission_rate).where(Agent.id == data.agent_id)
        )
        agent_rate = result.scalar_one_or_none()
    if agent_rate is None:
        agent_rate = get_settings().default_agent_commission_rate
    agent_rate = float(agent_rate)

    if data.current_commission_rate > agent_rate:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Commission rate cannot exceed the agent maximum ({agent_rate:g}%)",
        )

    calculation = calculate_markup_and_commission(
        cost=data.cost,
        sell_price=data.sell_price,
        current_commission_rate=data.current_commission_rate,
        category_policy=policy,
        agent_commission_rate=agent_rate,
    )
    message = get_markup_validation_message(
        data.cost,
        data.sell_price,
        data.current_commission_rate,
        policy,
        agent_rate,
    )

    return MarkupCommissionResponse(
        minimum_markup=calculation.minimum_markup,
        original_minimum_markup=calculation.original_minimum_markup,
        current_markup=calculation.current_markup,
        max_markup_reduction=calculation.max_markup_reduction,
        commission_reduction=calculation.commission_reduction,
        final_commission_rate=calculation.final_commission_rate,
        is_valid=calculation.is_valid,
        error_message=calculation.error_message,
        message=message,
    )


@router.post("/totals", response_model=TotalsResponse)
async def compute_totals(
    data: TotalsRequest,
    user: CurrentUser,
):
    """MRC, NRC and grand totals of unsaved quote lines."""
    lines = [
        {
            "charge_type": line.charge_type,
            "total_price": (
                line.total_price
                if line.total_price is not None
                else line_total(line.unit_price, line.quantity)
            ),
        }
        for line in data.items
    ]
    totals = calculate_totals_by_charge_type(lines)
    return TotalsResponse(
        mrc_total=totals.mrc_total,
        nrc_total=totals.nrc_total,
        total_amount=totals.total_amount,
    )


@router.post("/commission", response_model=CommissionResponse)
async def compute_commission(
    data: CommissionRequest,
    db: DbSession,
    user: CurrentUser,
):
    """
    Commission on an amount: quote override, then client override,
    then the agent's default rate.
    """
    agents = []
    if data.client_id is not None:
        result = await db.execute(select(Agent).where(Agent.id == data.client_id))
        agents = list(result.scalars().all())

    resolution = await resolve_commission(
        amount=data.amount,
        client_id=data.client_id,
        clients=agents,
        client_info_id=data.client_info_id,
        quote_override=data.quote_override,
        lookup_client_override=make_client_override_lookup(db),
    )

    return CommissionResponse(
        source=resolution.source.value,
        rate=resolution.rate,
        commission=resolution.amount,
    )
