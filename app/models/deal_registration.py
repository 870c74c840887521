"""
DealRegistration model - an opportunity registered with a carrier.
"""

import datetime as dt
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DECIMAL, Date, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import OwnedBase


DEAL_STAGES = ("prospecting", "qualification", "proposal", "negotiation", "closed_won", "closed_lost")
DEAL_STATUSES = ("active", "inactive", "completed")


class DealRegistration(OwnedBase):
    """A registered deal, optionally tied to an agent and a client."""

    __tablename__ = "deal_registrations"

    deal_name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    deal_value: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), default=Decimal("0.00"))

    stage: Mapped[str] = mapped_column(String(30), default="prospecting")
    status: Mapped[str] = mapped_column(String(20), default="active")
    probability: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    expected_close_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    agent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("agents.id", ondelete="SET NULL"),
        nullable=True,
    )
    client_info_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("client_info.id", ondelete="SET NULL"),
        nullable=True,
    )

    archived: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<DealRegistration(id={self.id}, deal_name='{self.deal_name}', stage='{self.stage}')>"
