"""
Seed script - Creates demo catalog, agents and clients for development.

Run with: python -m scripts.seed_demo <owner-profile-uuid>
"""

import asyncio
import sys
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import async_session_maker
from app.models.agent import Agent
from app.models.category import Category, CategoryType
from app.models.client_info import ClientInfo
from app.models.item import Item


async def create_categories(db: AsyncSession, owner_id: uuid.UUID) -> dict[str, Category]:
    """Create demo categories with their minimum markups."""
    data = [
        ("Circuit", CategoryType.CIRCUIT, Decimal("20.00")),
        ("Network", CategoryType.NETWORK, Decimal("25.00")),
        ("Managed Services", CategoryType.MANAGED_SERVICES, Decimal("30.00")),
        ("VOIP", CategoryType.VOIP, Decimal("15.00")),
    ]

    categories = {}
    for name, category_type, minimum_markup in data:
        category = Category(
            user_id=owner_id,
            name=name,
            type=category_type.value,
            minimum_markup=minimum_markup,
            is_active=True,
        )
        db.add(category)
        categories[name] = category

    await db.flush()
    print(f"✅ Created {len(categories)} categories")
    return categories


async def create_items(db: AsyncSession, owner_id: uuid.UUID, categories: dict[str, Category]) -> list[Item]:
    """Create demo catalog items."""
    data = [
        ("Dedicated Fiber 1 Gbps", "Circuit", "MRC", Decimal("650.00"), Decimal("899.00")),
        ("Broadband 500 Mbps", "Circuit", "MRC", Decimal("120.00"), Decimal("179.00")),
        ("Circuit Installation", "Circuit", "NRC", Decimal("300.00"), Decimal("500.00")),
        ("Managed Firewall", "Network", "MRC", Decimal("80.00"), Decimal("125.00")),
        ("Managed Wi-Fi (per AP)", "Managed Services", "MRC", Decimal("15.00"), Decimal("25.00")),
        ("Hosted Voice Seat", "VOIP", "MRC", Decimal("12.00"), Decimal("22.00")),
        ("IP Phone", "VOIP", "NRC", Decimal("90.00"), Decimal("149.00")),
    ]

    items = []
    for name, category_name, charge_type, cost, price in data:
        item = Item(
            user_id=owner_id,
            name=name,
            charge_type=charge_type,
            cost=cost,
            price=price,
            category_id=categories[category_name].id,
            is_active=True,
        )
        db.add(item)
        items.append(item)

    await db.flush()
    print(f"✅ Created {len(items)} items")
    return items


async def create_agents_and_clients(db: AsyncSession, owner_id: uuid.UUID) -> list[Agent]:
    """Create demo agents, each with one client."""
    data = [
        ("Dana", "Reyes", "dana@example.com", Decimal("15.00"), None),
        ("Sam", "Okafor", "sam@example.com", Decimal("12.00"), Decimal("10.00")),
    ]

    agents = []
    for first_name, last_name, email, rate, client_override in data:
        agent = Agent(
            first_name=first_name,
            last_name=last_name,
            email=email,
            commission_rate=rate,
        )
        db.add(agent)
        await db.flush()

        db.add(ClientInfo(
            user_id=owner_id,
            company_name=f"{last_name} Holdings",
            agent_id=agent.id,
            commission_override=client_override,
        ))
        agents.append(agent)

    await db.flush()
    print(f"✅ Created {len(agents)} agents with clients")
    return agents


async def main(argv: list[str]):
    if not argv:
        print(__doc__)
        sys.exit(1)
    owner_id = uuid.UUID(argv[0])

    async with async_session_maker() as db:
        existing = await db.execute(select(Category.id).limit(1))
        if existing.scalar_one_or_none() is not None:
            print("⚠ Categories already exist, skipping seed")
            return

        categories = await create_categories(db, owner_id)
        await create_items(db, owner_id, categories)
        await create_agents_and_clients(db, owner_id)
        await db.commit()

    print("🎉 Demo data ready")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
