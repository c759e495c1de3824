#!/usr/bin/env python3
"""
Create the first National Admin account.

Usage:
    python scripts/create_admin.py [--email EMAIL] [--password PASSWORD] [--name NAME]

Arguments:
    --email: Admin e-mail (default: admin@upnd.zm)
    --password: Admin password (default: upnd2024)
    --name: Display name (default: UPND Admin)

The database URL comes from DATABASE_URL, as for the API. Tables are created
if they do not exist yet.
"""
import argparse
import asyncio
import sys

from partyroll.core.errors import ActionError
from partyroll.db.base import async_session_maker, engine, init_db
from partyroll.models.user import StaffRole
from partyroll.schemas.auth import UserCreate
from partyroll.services.users import create_user


async def create_admin(email: str, password: str, name: str) -> int:
    await init_db()

    async with async_session_maker() as session:
        try:
            user = await create_user(
                session,
                UserCreate(
                    email=email,
                    password=password,
                    name=name,
                    role=StaffRole.NATIONAL_ADMIN,
                    jurisdiction="National",
                    level="National",
                    party_position="System Administrator",
                ),
            )
            await session.commit()
        except ActionError as e:
            print(f"Admin not created: {e.message} ({email})")
            return 1

    await engine.dispose()

    print("Admin user created successfully!")
    print()
    print("Login credentials:")
    print(f"  Email:    {user.email}")
    print(f"  Password: {password}")
    print()
    print("Please change the password after first login!")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Create a National Admin staff account")
    parser.add_argument("--email", default="admin@upnd.zm", help="Admin e-mail address")
    parser.add_argument("--password", default="upnd2024", help="Admin password")
    parser.add_argument("--name", default="UPND Admin", help="Admin display name")
    args = parser.parse_args()

    sys.exit(asyncio.run(create_admin(args.email, args.password, args.name)))


if __name__ == "__main__":
    main()
