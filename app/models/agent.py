"""
Agent model - a sales agent earning commission on quotes.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import DECIMAL, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, UUIDPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.client_info import ClientInfo


class Agent(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A sales agent.

    commission_rate is the agent's default rate applied to quotes.
    maximum_commission_rate is the ceiling an agent can earn on an item;
    giving up commission below the ceiling relaxes the category minimum markup.
    """

    __tablename__ = "agents"

    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Commission (percent)
    commission_rate: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(5, 2), nullable=True)
    maximum_commission_rate: Mapped[Decimal] = mapped_column(
        DECIMAL(5, 2), default=Decimal("15.00"), nullable=False
    )

    # Earnings
    total_earnings: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(12, 2), nullable=True)
    last_payment: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Auth user linked to this agent (optional)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )

    clients: Mapped[List["ClientInfo"]] = relationship(
        "ClientInfo", back_populates="agent", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Agent(id={self.id}, email='{self.email}', commission_rate={self.commission_rate})>"

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
