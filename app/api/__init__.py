"""
API routes package.
"""

from app.api import (
    pricing,
    agents,
    categories,
    clients,
    items,
    quotes,
    deals,
    circuit_quotes,
)

__all__ = [
    "pricing",
    "agents",
    "categories",
    "clients",
    "items",
    "quotes",
    "deals",
    "circuit_quotes",
]
