"""
Category markup policy lookup.
"""

import uuid
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

if TYPE_CHECKING:
    from app.models.category import Category


@dataclass(frozen=True)
class CategoryPolicy:
    """Minimum markup (percent) configured on a category. None means no minimum."""
    minimum_markup: Optional[float] = None

    @classmethod
    def from_category(cls, category: Optional["Category"]) -> Optional["CategoryPolicy"]:
        if category is None:
            return None
        minimum = category.minimum_markup
        return cls(minimum_markup=float(minimum) if minimum is not None else None)


async def get_category_policy(
    db: AsyncSession,
    category_id: Optional[uuid.UUID],
) -> Optional[CategoryPolicy]:
    """Load the policy of a category. Missing id or row gives None."""
    from app.models.category import Category

    if category_id is None:
        return None

    result = await db.execute(select(Category).where(Category.id == category_id))
    return CategoryPolicy.from_category(result.scalar_one_or_none())


async def get_item_category_policy(
    db: AsyncSession,
    item_id: Optional[uuid.UUID],
) -> Optional[CategoryPolicy]:
    """Load the policy of an item's category."""
    from app.models.item import Item

    if item_id is None:
        return None

    result = await db.execute(select(Item.category_id).where(Item.id == item_id))
    category_id = result.scalar_one_or_none()
    return await get_category_policy(db, category_id)
