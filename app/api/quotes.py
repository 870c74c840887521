"""
Quote endpoints: CRUD, line items, totals, numbering, PDF and email.

amount and commission are never taken from the client; they are
recomputed from the lines every time the quote or its lines change.
"""

import logging
import uuid
import datetime as dt
from decimal import Decimal
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy import delete, func, select
from sqlalchemy.orm import selectinload

from app.api.deps import CurrentUser, DbSession, OwnAgentId, UserTimezone
from app.config import get_settings
from app.models.agent import Agent
from app.models.client_info import ClientInfo
from app.models.item import Item
from app.models.quote import Quote, QuoteItem, QuoteStatus
from app.services.commission_resolver import make_client_override_lookup, resolve_commission
from app.services.date_utils import today_in_timezone
from app.services.email_service import EmailService
from app.services.quote_numbering import get_next_quote_number
from app.services.quote_pdf import generate_quote_pdf, store_quote_pdf
from app.services.quote_totals import QuoteTotals, calculate_totals_by_charge_type, line_total
from app.services.scoping import quote_scope_query

logger = logging.getLogger(__name__)

router = APIRouter()

CARRIER_ITEM_PREFIX = "carrier-"
CENTS = Decimal("0.01")


# ─── Schemas ─────────────────────────────────────────────────────────
class QuoteLineInput(BaseModel):
    """
    A line to write on a quote.
    item_id is a catalog item UUID, or a "carrier-..." id for a line built
    from a carrier quote; the latter creates an inactive catalog item.
    """
    item_id: str
    quantity: int = Field(1, ge=1)
    unit_price: float = Field(0.0, ge=0)
    charge_type: Literal["MRC", "NRC"] = "MRC"
    address_id: Optional[uuid.UUID] = None
    # Used only for carrier- lines
    name: Optional[str] = None
    description: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    category_id: Optional[uuid.UUID] = None


class QuoteCreate(BaseModel):
    client_id: Optional[uuid.UUID] = None
    client_info_id: Optional[uuid.UUID] = None
    quote_number: Optional[str] = None
    date: Optional[dt.date] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    status: QuoteStatus = QuoteStatus.PENDING
    expires_at: Optional[dt.date] = None
    commission_override: Optional[float] = Field(None, ge=0, le=100)
    billing_address: Optional[str] = None
    service_address: Optional[str] = None
    items: List[QuoteLineInput] = Field(default_factory=list)


class QuoteUpdate(BaseModel):
    client_id: Optional[uuid.UUID] = None
    client_info_id: Optional[uuid.UUID] = None
    date: Optional[dt.date] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[QuoteStatus] = None
    expires_at: Optional[dt.date] = None
    commission_override: Optional[float] = Field(None, ge=0, le=100)
    billing_address: Optional[str] = None
    service_address: Optional[str] = None
    accepted_by: Optional[str] = None


class QuoteItemsReplace(BaseModel):
    items: List[QuoteLineInput] = Field(default_factory=list)


class QuoteEmailRequest(BaseModel):
    to: EmailStr
    cc: List[EmailStr] = Field(default_factory=list)
    message: str = ""
    attach_pdf: bool = True


class QuoteItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    item_id: uuid.UUID
    name: Optional[str] = None
    description: Optional[str] = None
    quantity: int
    unit_price: float
    total_price: float
    charge_type: str
    address_id: Optional[uuid.UUID] = None


class QuoteTotalsResponse(BaseModel):
    mrc_total: float
    nrc_total: float
    total_amount: float


class QuoteSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    quote_number: Optional[str] = None
    quote_month: Optional[str] = None
    quote_year: Optional[str] = None
    date: dt.date
    client_id: Optional[uuid.UUID] = None
    client_info_id: Optional[uuid.UUID] = None
    description: Optional[str] = None
    amount: float
    commission: Optional[float] = None
    commission_override: Optional[float] = None
    status: str
    expires_at: Optional[dt.date] = None
    archived: bool
    created_at: Optional[dt.datetime] = None


class QuoteDetailResponse(QuoteSummaryResponse):
    notes: Optional[str] = None
    billing_address: Optional[str] = None
    service_address: Optional[str] = None
    accepted_at: Optional[dt.datetime] = None
    accepted_by: Optional[str] = None
    items: List[QuoteItemResponse] = Field(default_factory=list)
    totals: QuoteTotalsResponse


class QuoteListResponse(BaseModel):
    items: List[QuoteSummaryResponse]
    total: int
    page: int
    page_size: int


class NextQuoteNumberResponse(BaseModel):
    quote_number: str


# ─── Helpers ─────────────────────────────────────────────────────────
def _totals_response(totals: QuoteTotals) -> QuoteTotalsResponse:
    return QuoteTotalsResponse(
        mrc_total=totals.mrc_total,
        nrc_total=totals.nrc_total,
        total_amount=totals.total_amount,
    )


def _item_to_response(line: QuoteItem) -> QuoteItemResponse:
    return QuoteItemResponse(
        id=line.id,
        item_id=line.item_id,
        name=line.item.name if line.item is not None else None,
        description=line.item.description if line.item is not None else None,
        quantity=line.quantity,
        unit_price=line.unit_price,
        total_price=line.total_price,
        charge_type=line.charge_type,
        address_id=line.address_id,
    )


def _quote_to_detail(quote: Quote) -> QuoteDetailResponse:
    summary = QuoteSummaryResponse.model_validate(quote)
    return QuoteDetailResponse(
        **summary.model_dump(),
        notes=quote.notes,
        billing_address=quote.billing_address,
        service_address=quote.service_address,
        accepted_at=quote.accepted_at,
        accepted_by=quote.accepted_by,
        items=[_item_to_response(line) for line in quote.items],
        totals=_totals_response(calculate_totals_by_charge_type(quote.items)),
    )


async def _get_quote_or_404(
    db,
    user,
    own_agent_id,
    quote_id: uuid.UUID,
    with_items: bool = False,
) -> Quote:
    query = quote_scope_query(user, own_agent_id).where(Quote.id == quote_id)
    if with_items:
        query = query.options(
            selectinload(Quote.items).selectinload(QuoteItem.item)
        ).execution_options(populate_existing=True)

    result = await db.execute(query)
    quote = result.scalar_one_or_none()
    if not quote:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
    return quote


def _set_quote_date(quote: Quote, value: dt.date) -> None:
    quote.date = value
    quote.quote_month = f"{value.month:02d}"
    quote.quote_year = str(value.year)


def _is_expired(quote: Quote, tz) -> bool:
    if quote.status == QuoteStatus.EXPIRED.value:
        return True
    today = dt.date.fromisoformat(today_in_timezone(tz))
    return quote.expires_at is not None and quote.expires_at < today


def _apply_quote_update(quote: Quote, update_data: dict, tz) -> None:
    """
    Apply a PATCH payload. Status is applied last so a new expires_at in
    the same payload is taken into account.
    """
    new_date = update_data.pop("date", None)
    if new_date is not None:
        _set_quote_date(quote, new_date)

    new_status = update_data.pop("status", None)

    if "commission_override" in update_data:
        value = update_data.pop("commission_override")
        quote.commission_override = Decimal(str(value)) if value is not None else None

    for field, value in update_data.items():
        setattr(quote, field, value)

    if new_status is None:
        return
    if new_status == QuoteStatus.APPROVED and _is_expired(quote, tz):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This quote has expired and can no longer be accepted.",
        )
    quote.status = new_status.value
    if new_status == QuoteStatus.APPROVED and quote.accepted_at is None:
        quote.accepted_at = dt.datetime.utcnow()


async def _resolve_item_id(db, user, line: QuoteLineInput) -> uuid.UUID:
    """Catalog item for a line, creating an inactive one for carrier lines."""
    if line.item_id.startswith(CARRIER_ITEM_PREFIX):
        item = Item(
            user_id=user.id,
            name=line.name or "Carrier service",
            description=line.description,
            price=Decimal(str(line.unit_price)),
            cost=Decimal(str(line.cost if line.cost is not None else line.unit_price)),
            charge_type=line.charge_type,
            category_id=line.category_id,
            is_active=False,
        )
        db.add(item)
        await db.flush()
        logger.info("Created inactive item %s for carrier line %s", item.id, line.item_id)
        return item.id

    try:
        return uuid.UUID(line.item_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid item_id: {line.item_id}",
        )


async def _write_lines(db, user, quote: Quote, lines: List[QuoteLineInput]) -> List[QuoteItem]:
    """Insert lines for a quote whose previous lines are already gone."""
    written = []
    for line in lines:
        item_id = await _resolve_item_id(db, user, line)
        quote_item = QuoteItem(
            quote_id=quote.id,
            item_id=item_id,
            quantity=line.quantity,
            unit_price=Decimal(str(line.unit_price)),
            total_price=line_total(line.unit_price, line.quantity).quantize(CENTS),
            charge_type=line.charge_type,
            address_id=line.address_id,
        )
        db.add(quote_item)
        written.append(quote_item)
    await db.flush()
    return written


async def _load_lines(db, quote_id: uuid.UUID) -> List[QuoteItem]:
    result = await db.execute(select(QuoteItem).where(QuoteItem.quote_id == quote_id))
    return list(result.scalars().all())


async def _recompute_amounts(db, quote: Quote, lines: List[QuoteItem]) -> None:
    """Set quote.amount from the lines and quote.commission from the resolver."""
    totals = calculate_totals_by_charge_type(lines)

    agents = []
    if quote.client_id is not None:
        result = await db.execute(select(Agent).where(Agent.id == quote.client_id))
        agents = list(result.scalars().all())

    resolution = await resolve_commission(
        amount=totals.total_amount,
        client_id=quote.client_id,
        clients=agents,
        client_info_id=quote.client_info_id,
        quote_override=(
            float(quote.commission_override) if quote.commission_override is not None else None
        ),
        lookup_client_override=make_client_override_lookup(db),
    )

    quote.amount = Decimal(str(totals.total_amount)).quantize(CENTS)
    quote.commission = Decimal(str(resolution.amount)).quantize(CENTS)
    logger.debug(
        "Quote %s recomputed: amount=%s commission=%s source=%s",
        quote.id,
        quote.amount,
        quote.commission,
        resolution.source.value,
    )


# ─── Endpoints ───────────────────────────────────────────────────────
@router.get("", response_model=QuoteListResponse)
async def list_quotes(
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
    archived: bool = Query(False, description="Show archived quotes instead of active ones"),
    status_filter: Optional[QuoteStatus] = Query(None, alias="status"),
    client_info_id: Optional[uuid.UUID] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    """List the quotes visible to the current user, newest first."""
    query = quote_scope_query(user, own_agent_id).where(Quote.archived == archived)

    if status_filter:
        query = query.where(Quote.status == status_filter.value)
    if client_info_id:
        query = query.where(Quote.client_info_id == client_info_id)

    count_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = count_result.scalar() or 0

    query = (
        query.order_by(Quote.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)

    return QuoteListResponse(
        items=[QuoteSummaryResponse.model_validate(q) for q in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/next-number", response_model=NextQuoteNumberResponse)
async def next_quote_number(
    db: DbSession,
    user: CurrentUser,
):
    """Allocate the next quote number."""
    number = await get_next_quote_number(db)
    await db.commit()
    return NextQuoteNumberResponse(quote_number=number)


@router.get("/{quote_id}", response_model=QuoteDetailResponse)
async def get_quote(
    quote_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id, with_items=True)
    return _quote_to_detail(quote)


@router.post("", response_model=QuoteDetailResponse, status_code=201)
async def create_quote(
    data: QuoteCreate,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
    tz: UserTimezone,
):
    """
    Create a quote with its lines.
    The quote number is allocated when not given; the date defaults to
    today in the user's timezone.
    """
    quote = Quote(
        user_id=user.id,
        client_id=data.client_id,
        client_info_id=data.client_info_id,
        quote_number=data.quote_number or await get_next_quote_number(db),
        description=data.description,
        notes=data.notes,
        status=data.status.value,
        expires_at=data.expires_at,
        commission_override=(
            Decimal(str(data.commission_override)) if data.commission_override is not None else None
        ),
        billing_address=data.billing_address,
        service_address=data.service_address,
        amount=Decimal("0.00"),
        archived=False,
    )
    _set_quote_date(quote, data.date or dt.date.fromisoformat(today_in_timezone(tz)))

    validity_days = get_settings().quote_validity_days
    if quote.expires_at is None and validity_days > 0:
        quote.expires_at = quote.date + dt.timedelta(days=validity_days)

    db.add(quote)
    await db.flush()

    lines = await _write_lines(db, user, quote, data.items)
    await _recompute_amounts(db, quote, lines)
    await db.commit()

    logger.info("Quote %s created by %s", quote.quote_number, user.id)
    quote = await _get_quote_or_404(db, user, own_agent_id, quote.id, with_items=True)
    return _quote_to_detail(quote)


@router.patch("/{quote_id}", response_model=QuoteDetailResponse)
async def update_quote(
    quote_id: uuid.UUID,
    data: QuoteUpdate,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
    tz: UserTimezone,
):
    """Update quote fields; amount and commission are recomputed."""
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id)

    _apply_quote_update(quote, data.model_dump(exclude_unset=True), tz)

    await _recompute_amounts(db, quote, await _load_lines(db, quote.id))
    await db.commit()

    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id, with_items=True)
    return _quote_to_detail(quote)


@router.put("/{quote_id}/items", response_model=QuoteDetailResponse)
async def replace_quote_items(
    quote_id: uuid.UUID,
    data: QuoteItemsReplace,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    """Replace all lines of a quote."""
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id)

    await db.execute(delete(QuoteItem).where(QuoteItem.quote_id == quote.id))
    lines = await _write_lines(db, user, quote, data.items)
    await _recompute_amounts(db, quote, lines)
    await db.commit()

    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id, with_items=True)
    return _quote_to_detail(quote)


@router.get("/{quote_id}/totals", response_model=QuoteTotalsResponse)
async def get_quote_totals(
    quote_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id)
    return _totals_response(calculate_totals_by_charge_type(await _load_lines(db, quote.id)))


@router.post("/{quote_id}/archive", response_model=QuoteDetailResponse)
async def archive_quote(
    quote_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id)
    quote.archived = True
    await db.commit()
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id, with_items=True)
    return _quote_to_detail(quote)


@router.post("/{quote_id}/unarchive", response_model=QuoteDetailResponse)
async def unarchive_quote(
    quote_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id)
    quote.archived = False
    await db.commit()
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id, with_items=True)
    return _quote_to_detail(quote)


@router.delete("/{quote_id}", status_code=204)
async def delete_quote(
    quote_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
):
    """Delete a quote and its lines."""
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id)
    await db.execute(delete(QuoteItem).where(QuoteItem.quote_id == quote.id))
    await db.delete(quote)
    await db.commit()
    return None


# ============================================================================
# PDF / Email
# ============================================================================

async def _names_for(db, quote: Quote) -> tuple[Optional[str], Optional[str]]:
    client_name = None
    agent_name = None
    if quote.client_info_id:
        result = await db.execute(
            select(ClientInfo.company_name).where(ClientInfo.id == quote.client_info_id)
        )
        client_name = result.scalar_one_or_none()
    if quote.client_id:
        result = await db.execute(select(Agent).where(Agent.id == quote.client_id))
        agent = result.scalar_one_or_none()
        agent_name = agent.name if agent else None
    return client_name, agent_name


async def _render_pdf(db, quote: Quote, tz) -> bytes:
    client_name, agent_name = await _names_for(db, quote)
    try:
        return await generate_quote_pdf(
            quote,
            list(quote.items),
            tz,
            company_name=get_settings().company_name,
            client_name=client_name,
            agent_name=agent_name,
        )
    except Exception as e:
        logger.error("PDF generation failed for quote %s: %s", quote.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"PDF generation failed: {str(e)}",
        )


@router.get("/{quote_id}/pdf")
async def get_quote_pdf(
    quote_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
    tz: UserTimezone,
):
    """Render the quote as a PDF."""
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id, with_items=True)
    pdf = await _render_pdf(db, quote, tz)
    filename = f"quote-{quote.quote_number or quote.id}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.post("/{quote_id}/generate-pdf")
async def generate_and_store_quote_pdf(
    quote_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
    tz: UserTimezone,
):
    """Render the quote PDF and store it; returns the public URL."""
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id, with_items=True)
    pdf = await _render_pdf(db, quote, tz)

    try:
        pdf_url = await store_quote_pdf(quote, pdf)
    except Exception as e:
        logger.error("PDF upload failed for quote %s: %s", quote.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"PDF upload failed: {str(e)}",
        )

    return {"pdf_url": pdf_url, "generated_at": dt.datetime.utcnow()}


@router.post("/{quote_id}/email")
async def email_quote(
    quote_id: uuid.UUID,
    data: QuoteEmailRequest,
    db: DbSession,
    user: CurrentUser,
    own_agent_id: OwnAgentId,
    tz: UserTimezone,
):
    """Email the quote to a customer, with the PDF attached by default."""
    quote = await _get_quote_or_404(db, user, own_agent_id, quote_id, with_items=True)

    pdf_bytes = await _render_pdf(db, quote, tz) if data.attach_pdf else None
    client_name, _ = await _names_for(db, quote)

    sent = EmailService().send_quote(
        quote,
        to=data.to,
        client_name=client_name or "",
        totals=calculate_totals_by_charge_type(quote.items),
        message=data.message,
        cc=list(data.cc),
        pdf_bytes=pdf_bytes,
    )
    if not sent:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to send email",
        )

    return {"sent": True, "to": data.to}
