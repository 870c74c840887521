"""
Category model - product category with its minimum markup policy.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DECIMAL, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import OwnedBase


class CategoryType(str, Enum):
    CIRCUIT = "Circuit"
    NETWORK = "Network"
    MANAGED_SERVICES = "Managed Services"
    AI = "AI"
    VOIP = "VOIP"


class Category(OwnedBase):
    """
    Catalog category. minimum_markup is the markup percentage every item of
    the category must carry unless the agent gives up commission.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    minimum_markup: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(6, 2), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    default_selected: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}', minimum_markup={self.minimum_markup})>"
