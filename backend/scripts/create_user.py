"""
NoteFlow Backend — User Provisioning Script
=============================================

What:  Creates a sign-in account (idempotent: re-running is harmless).
Why:   Notes can only be created for an existing user, and there is no
       public registration endpoint.
How:   Opens one session, calls AuthService.create_user and commits.

Usage (from backend/):
    python -m scripts.create_user demo@noteflow.com --name "Demo User"
    NOTEFLOW_USER_PASSWORD=secret python -m scripts.create_user demo@noteflow.com

The password is read from NOTEFLOW_USER_PASSWORD, or prompted for.
"""

import argparse
import asyncio
import getpass
import logging
import os
import sys

from noteflow.database import async_session_factory, dispose_engine
from noteflow.exceptions import NoteFlowError
from noteflow.services.auth_service import auth_service

logger = logging.getLogger("noteflow.scripts.create_user")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a NoteFlow user.")
    parser.add_argument("email", help="Login email (stored lowercase)")
    parser.add_argument("--name", default=None, help="Display name")
    return parser.parse_args(argv)


async def create_user(email: str, password: str, name=None) -> int:
    try:
        async with async_session_factory() as session:
            user = await auth_service.create_user(session, email, password, name=name)
            await session.commit()
            logger.info("User ready: id=%s email=%s name=%s", user.id, user.email, user.name)
            return 0
    except NoteFlowError as e:
        logger.error("Could not create user: %s", e.message)
        return 1
    finally:
        await dispose_engine()


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args(argv)
    password = os.environ.get("NOTEFLOW_USER_PASSWORD") or getpass.getpass("Password: ")
    if not password:
        logger.error("A password is required")
        return 1
    return asyncio.run(create_user(args.email, password, name=args.name))


if __name__ == "__main__":
    sys.exit(main())
