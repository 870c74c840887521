#!/usr/bin/env python3
"""
Script to create a profile linked to a Supabase Auth account.

Usage:
    python scripts/create_test_user.py <supabase-user-uuid> <email> [role]
"""

import asyncio
import sys
import uuid
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import async_session_maker
from app.models.user import Profile

ROLES = ("admin", "agent", "user")


async def create_profile_if_not_exists(
    db: AsyncSession,
    user_uuid: uuid.UUID,
    email: str,
    role: str,
) -> Profile:
    """Create the profile for a Supabase auth user, or update its role."""
    result = await db.execute(select(Profile).where(Profile.id == user_uuid))
    profile = result.scalar_one_or_none()

    if profile:
        if profile.role != role:
            print(f"✓ Profile '{email}' exists, role {profile.role} -> {role}")
            profile.role = role
        else:
            print(f"✓ Profile '{email}' already exists (ID: {profile.id})")
        return profile

    profile = Profile(id=user_uuid, email=email, role=role)
    db.add(profile)
    await db.flush()

    print(f"✓ Created profile '{email}' (ID: {profile.id}, role: {role})")
    return profile


async def main(argv: list[str]):
    if len(argv) < 2:
        print(__doc__)
        sys.exit(1)

    user_uuid = uuid.UUID(argv[0])
    email = argv[1]
    role = argv[2] if len(argv) > 2 else "admin"
    if role not in ROLES:
        print(f"❌ Unknown role '{role}', expected one of: {', '.join(ROLES)}")
        sys.exit(1)

    async with async_session_maker() as db:
        try:
            profile = await create_profile_if_not_exists(db, user_uuid, email, role)
            await db.commit()
        except Exception as e:
            await db.rollback()
            print(f"❌ Error: {e}")
            raise

    print()
    print("Summary:")
    print(f"  Email: {profile.email}")
    print(f"  Role: {profile.role}")
    print(f"  UUID: {profile.id}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
