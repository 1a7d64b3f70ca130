#!/usr/bin/env python3
"""
Promote an existing user to admin.
Usage: python -m rentals.scripts.make_admin someone@rentals.io
"""

import argparse
import asyncio
import sys

from rentals.core.exceptions import RentalsError
from rentals.db.database import SessionLocal, engine
from rentals.domain.value_objects.email import Email
from rentals.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl


async def make_user_admin(email: str, session_factory=SessionLocal) -> bool:
    """Set isadmin on the user holding ``email``. False when there is none."""
    async with session_factory() as db:
        unit_of_work = UnitOfWorkImpl(db)
        async with unit_of_work:
            user = await unit_of_work.users.get_by_email(Email(email))
            if user is None:
                print(f"❌ User with email '{email}' not found!")
                return False

            if user.isadmin:
                print(f"ℹ️  '{email}' is already an admin")
                return True

            user.set_admin(True)
            await unit_of_work.users.update(user)
            await unit_of_work.commit()

    print(f"✅ Successfully made '{email}' an admin!")
    print(f"📋 User: {user.name} <{user.email}>, id {user.id}")
    print("The new flag takes effect at the user's next sign-in.")
    return True


async def main(email: str) -> int:
    try:
        ok = await make_user_admin(email)
    except ValueError as e:
        print(f"❌ {e}")
        return 2
    except RentalsError as e:
        print(f"❌ Error: {e}")
        return 1
    finally:
        await engine.dispose()
    return 0 if ok else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Promote a user to admin")
    parser.add_argument("email", help="email address of an existing user")
    args = parser.parse_args()
    print(f"🔑 Making {args.email} an admin...")
    sys.exit(asyncio.run(main(args.email)))
