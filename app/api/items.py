"""
Catalog item endpoints.
"""

import uuid
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import or_, select

from app.api.deps import AdminUser, CurrentUser, DbSession
from app.models.item import Item

router = APIRouter()


# ─── Schemas ─────────────────────────────────────────────────────────
class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=100)
    price: float = Field(0.0, ge=0)
    cost: float = Field(0.0, ge=0)
    charge_type: Optional[Literal["MRC", "NRC"]] = None
    category_id: Optional[uuid.UUID] = None
    vendor_id: Optional[uuid.UUID] = None
    is_active: bool = True


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=100)
    price: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    charge_type: Optional[Literal["MRC", "NRC"]] = None
    category_id: Optional[uuid.UUID] = None
    vendor_id: Optional[uuid.UUID] = None
    is_active: Optional[bool] = None


class ItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    price: float
    cost: float
    charge_type: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    vendor_id: Optional[uuid.UUID] = None
    is_active: bool


# ─── Helpers ─────────────────────────────────────────────────────────
async def _get_item_or_404(db, item_id: uuid.UUID) -> Item:
    result = await db.execute(select(Item).where(Item.id == item_id))
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return item


# ─── Endpoints ───────────────────────────────────────────────────────
@router.get("", response_model=List[ItemResponse])
async def list_items(
    db: DbSession,
    user: CurrentUser,
    category_id: Optional[uuid.UUID] = None,
    include_inactive: bool = Query(False, description="Include inactive items"),
    search: Optional[str] = Query(None, description="Search by name or SKU"),
):
    """List catalog items."""
    query = select(Item)

    if not include_inactive:
        query = query.where(Item.is_active == True)  # noqa: E712
    if category_id:
        query = query.where(Item.category_id == category_id)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Item.name.ilike(pattern), Item.sku.ilike(pattern)))

    result = await db.execute(query.order_by(Item.name))
    return [ItemResponse.model_validate(i) for i in result.scalars().all()]


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
):
    return ItemResponse.model_validate(await _get_item_or_404(db, item_id))


@router.post("", response_model=ItemResponse, status_code=201)
async def create_item(
    data: ItemCreate,
    db: DbSession,
    user: AdminUser,
):
    """Add an item to the catalog."""
    item = Item(user_id=user.id, **data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return ItemResponse.model_validate(item)


@router.patch("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: uuid.UUID,
    data: ItemUpdate,
    db: DbSession,
    user: AdminUser,
):
    item = await _get_item_or_404(db, item_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(item, field, value)

    await db.commit()
    await db.refresh(item)
    return ItemResponse.model_validate(item)


@router.delete("/{item_id}", status_code=204)
async def delete_item(
    item_id: uuid.UUID,
    db: DbSession,
    user: AdminUser,
):
    """Delete an item. Items used on a quote are deactivated instead."""
    from app.models.quote import QuoteItem

    item = await _get_item_or_404(db, item_id)

    used = await db.execute(select(QuoteItem.id).where(QuoteItem.item_id == item_id).limit(1))
    if used.scalar_one_or_none() is not None:
        item.is_active = False
    else:
        await db.delete(item)

    await db.commit()
    return None
