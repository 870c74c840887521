"""
Item model - catalog product or service that can be added to a quote.
"""

import uuid
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Boolean, DECIMAL, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import OwnedBase

if TYPE_CHECKING:
    from app.models.category import Category


class Item(OwnedBase):
    """
    A catalog item with its buy cost and default sell price.
    Inactive items are hidden from the catalog (e.g. items created on the fly
    from a carrier quote).
    """

    __tablename__ = "items"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sku: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Pricing
    price: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), default=Decimal("0.00"))
    cost: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), default=Decimal("0.00"))

    # MRC | NRC
    charge_type: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)

    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    vendor_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    category: Mapped[Optional["Category"]] = relationship("Category", lazy="raise")

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name='{self.name}', cost={self.cost}, price={self.price})>"
