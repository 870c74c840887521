"""
ClientInfo model - an end customer, optionally owned by an agent.
"""

import uuid
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from sqlalchemy import DECIMAL, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import OwnedBase

if TYPE_CHECKING:
    from app.models.agent import Agent


class ClientInfo(OwnedBase):
    """
    A customer company.
    commission_override, when set, replaces the agent's default rate on
    every quote for this client (unless the quote has its own override).
    """

    __tablename__ = "client_info"

    company_name: Mapped[str] = mapped_column(Text, nullable=False)
    agent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("agents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    commission_override: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(5, 2), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    revio_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    agent: Mapped[Optional["Agent"]] = relationship(
        "Agent", back_populates="clients", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<ClientInfo(id={self.id}, company_name='{self.company_name}')>"
