"""
Quote, QuoteItem and QuoteNumberSequence models.
"""

import uuid
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, DECIMAL, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, OwnedBase, UUIDPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.item import Item


class ChargeType(str, Enum):
    """Billing classification of a quote line."""
    MRC = "MRC"  # Monthly recurring
    NRC = "NRC"  # One-time


class QuoteStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


class Quote(OwnedBase):
    """
    A customer quote.

    client_id is the agent the quote is written for; client_info_id is the
    end customer. amount and commission are recomputed from the items on
    every save.
    """

    __tablename__ = "quotes"

    client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("agents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    client_info_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("client_info.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Identity
    quote_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    quote_month: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    quote_year: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Money
    amount: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), default=Decimal("0.00"))
    commission: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(12, 2), nullable=True)
    commission_override: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(5, 2), nullable=True)

    # Workflow
    status: Mapped[str] = mapped_column(String(20), default=QuoteStatus.PENDING.value)
    expires_at: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    archived: Mapped[bool] = mapped_column(Boolean, default=False)
    accepted_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Addresses (free text)
    billing_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    service_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    items: Mapped[List["QuoteItem"]] = relationship(
        "QuoteItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, quote_number='{self.quote_number}', amount={self.amount})>"


class QuoteItem(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A line on a quote. total_price is unit_price * quantity, computed when
    the line is written.
    """

    __tablename__ = "quote_items"

    quote_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("items.id", ondelete="RESTRICT"),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(Integer, default=1)
    unit_price: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), default=Decimal("0.00"))
    total_price: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), default=Decimal("0.00"))
    charge_type: Mapped[str] = mapped_column(String(3), default=ChargeType.MRC.value)

    address_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)

    quote: Mapped["Quote"] = relationship("Quote", back_populates="items", lazy="raise")
    item: Mapped["Item"] = relationship("Item", lazy="raise")

    def __repr__(self) -> str:
        return (
            f"<QuoteItem(id={self.id}, quote_id={self.quote_id}, "
            f"charge_type='{self.charge_type}', total_price={self.total_price})>"
        )


class QuoteNumberSequence(Base, TimestampMixin):
    """
    Single global counter for quote numbers.
    Locked with SELECT ... FOR UPDATE when allocating.
    """

    __tablename__ = "quote_number_sequences"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    last_quote_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<QuoteNumberSequence(last_quote_number={self.last_quote_number})>"
