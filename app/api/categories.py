"""
Category management endpoints.
Categories carry the minimum markup enforced on quote lines.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select

from app.api.deps import AdminUser, CurrentUser, DbSession
from app.models.category import Category, CategoryType

router = APIRouter()


# ─── Schemas ─────────────────────────────────────────────────────────
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[CategoryType] = None
    minimum_markup: Optional[float] = Field(None, ge=0)
    is_active: bool = True
    default_selected: bool = False


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[CategoryType] = None
    minimum_markup: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    default_selected: Optional[bool] = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    minimum_markup: Optional[float] = None
    is_active: bool
    default_selected: bool


# ─── Helpers ─────────────────────────────────────────────────────────
async def _get_category_or_404(db, category_id: uuid.UUID) -> Category:
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


# ─── Endpoints ───────────────────────────────────────────────────────
@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    db: DbSession,
    user: CurrentUser,
    is_active: Optional[bool] = Query(None, description="Filter by active status"),
):
    """List categories."""
    query = select(Category)
    if is_active is not None:
        query = query.where(Category.is_active == is_active)
    result = await db.execute(query.order_by(Category.name))
    return [CategoryResponse.model_validate(c) for c in result.scalars().all()]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: uuid.UUID,
    db: DbSession,
    user: CurrentUser,
):
    return CategoryResponse.model_validate(await _get_category_or_404(db, category_id))


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    db: DbSession,
    user: AdminUser,
):
    """Create a category."""
    values = data.model_dump()
    if data.type is not None:
        values["type"] = data.type.value

    category = Category(user_id=user.id, **values)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: uuid.UUID,
    data: CategoryUpdate,
    db: DbSession,
    user: AdminUser,
):
    """Update a category (name, minimum markup, ...)."""
    category = await _get_category_or_404(db, category_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        if isinstance(value, CategoryType):
            value = value.value
        setattr(category, field, value)

    await db.commit()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: uuid.UUID,
    db: DbSession,
    user: AdminUser,
):
    category = await _get_category_or_404(db, category_id)
    await db.delete(category)
    await db.commit()
    return None
