"""
CircuitQuote and CarrierQuote models.
A circuit quote is a connectivity request for a location; each carrier
quote is one carrier's offer for it, compared side by side.
"""

import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional, List

from sqlalchemy import Boolean, DECIMAL, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, OwnedBase, UUIDPrimaryKeyMixin, TimestampMixin


class CircuitQuoteStatus(str, Enum):
    NEW_PRICING = "new_pricing"
    RESEARCHING = "researching"
    COMPLETED = "completed"
    SENT_TO_CUSTOMER = "sent_to_customer"


class CircuitQuote(OwnedBase):
    """A request for circuit pricing at a customer location."""

    __tablename__ = "circuit_quotes"

    client_name: Mapped[str] = mapped_column(Text, nullable=False)
    client_info_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("client_info.id", ondelete="SET NULL"),
        nullable=True,
    )
    deal_registration_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("deal_registrations.id", ondelete="SET NULL"),
        nullable=True,
    )

    location: Mapped[str] = mapped_column(Text, nullable=False)
    suite: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(30), default=CircuitQuoteStatus.NEW_PRICING.value)

    # Requirements
    static_ip: Mapped[bool] = mapped_column(Boolean, default=False)
    slash_29: Mapped[bool] = mapped_column(Boolean, default=False)
    dhcp: Mapped[bool] = mapped_column(Boolean, default=False)
    mikrotik_required: Mapped[bool] = mapped_column(Boolean, default=False)

    carriers: Mapped[List["CarrierQuote"]] = relationship(
        "CarrierQuote",
        back_populates="circuit_quote",
        cascade="all, delete-orphan",
        order_by="CarrierQuote.display_order",
        lazy="raise",
    )
    categories: Mapped[List["CircuitQuoteCategory"]] = relationship(
        "CircuitQuoteCategory",
        cascade="all, delete-orphan",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<CircuitQuote(id={self.id}, client_name='{self.client_name}', status='{self.status}')>"


class CircuitQuoteCategory(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Circuit category requested on a circuit quote (e.g. Fiber, Coax)."""

    __tablename__ = "circuit_quote_categories"

    circuit_quote_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("circuit_quotes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_name: Mapped[str] = mapped_column(Text, nullable=False)


class CarrierQuote(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """One carrier's offer for a circuit quote."""

    __tablename__ = "carrier_quotes"

    circuit_quote_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("circuit_quotes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    carrier: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    speed: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), default=Decimal("0.00"))
    term: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(20), default="#3B82F6")

    install_fee: Mapped[bool] = mapped_column(Boolean, default=False)
    install_fee_amount: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(12, 2), nullable=True)
    site_survey_needed: Mapped[bool] = mapped_column(Boolean, default=False)
    no_service: Mapped[bool] = mapped_column(Boolean, default=False)
    static_ip: Mapped[bool] = mapped_column(Boolean, default=False)
    static_ip_fee_amount: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(12, 2), nullable=True)
    static_ip_5: Mapped[bool] = mapped_column(Boolean, default=False)
    static_ip_5_fee_amount: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(12, 2), nullable=True)
    other_costs: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(12, 2), nullable=True)

    display_order: Mapped[int] = mapped_column(Integer, default=0)

    circuit_quote: Mapped["CircuitQuote"] = relationship(
        "CircuitQuote", back_populates="carriers", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<CarrierQuote(id={self.id}, carrier='{self.carrier}', price={self.price})>"
