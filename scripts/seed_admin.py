"""
Seed Admin User

Creates a user with role Admin, or promotes an existing user to Admin.
The user still signs in through the identity provider; this only records
the role used for authorization.

Usage:
    python scripts/seed_admin.py --email admin@example.com [--name "Site Admin"]
"""

import argparse
import asyncio

from scholarstream.core.database import async_session_maker, engine
from scholarstream.modules.users.models import UserRole
from scholarstream.modules.users.repository import UserRepository


async def seed_admin(email: str, name: str | None) -> None:
    """Create or promote the admin user."""
    email = email.strip().lower()

    async with async_session_maker() as db:
        user, created = await UserRepository.create_if_absent(
            db,
            email=email,
            display_name=name,
            role=UserRole.ADMIN,
        )

        if created:
            print("Admin created successfully!")
        elif user.role != UserRole.ADMIN:
            previous = user.role.value
            user = await UserRepository.update_role(db, user, UserRole.ADMIN)
            print(f"Existing user promoted: {previous} -> {user.role.value}")
        else:
            print(f"Admin already exists: {email}")

        print(f"  Email: {user.email}")
        print(f"  ID: {user.id}")
        print(f"  Role: {user.role.value}")

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or promote a ScholarStream admin user.")
    parser.add_argument("--email", required=True, help="Email the admin signs in with")
    parser.add_argument("--name", default=None, help="Display name for a newly created user")
    args = parser.parse_args()

    asyncio.run(seed_admin(args.email, args.name))


if __name__ == "__main__":
    main()
