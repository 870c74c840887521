"""
SQLAlchemy models for the reseller operations API.
"""

from app.models.base import Base, OwnedBase, TimestampMixin, UUIDPrimaryKeyMixin
from app.models.user import Profile
from app.models.agent import Agent
from app.models.category import Category, CategoryType
from app.models.client_info import ClientInfo
from app.models.item import Item
from app.models.quote import ChargeType, Quote, QuoteItem, QuoteNumberSequence, QuoteStatus
from app.models.deal_registration import DealRegistration
from app.models.circuit_quote import (
    CarrierQuote,
    CircuitQuote,
    CircuitQuoteCategory,
    CircuitQuoteStatus,
)

__all__ = [
    "Base",
    "OwnedBase",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "Profile",
    "Agent",
    "Category",
    "CategoryType",
    "ClientInfo",
    "Item",
    # Quotes
    "ChargeType",
    "Quote",
    "QuoteItem",
    "QuoteNumberSequence",
    "QuoteStatus",
    "DealRegistration",
    # Circuit quotes
    "CarrierQuote",
    "CircuitQuote",
    "CircuitQuoteCategory",
    "CircuitQuoteStatus",
]
