"""
NoteFlow Backend — Authentication Service
===========================================

What:  Password sign-in and user provisioning.
Why:   Keeps bcrypt and user lookups out of the route handlers.
How:   bcrypt for hashing/verification; users looked up by lowercased email.
Who:   Called by POST /auth/signin and by scripts/create_user.py.

Security:
    - Unknown email and wrong password produce the same error, so the
      endpoint cannot be used to discover which emails are registered.
    - bcrypt only looks at the first 72 bytes of a password; longer inputs
      are truncated consistently on both hash and verify.
"""

import logging
from typing import Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from noteflow.config import settings
from noteflow.exceptions import AuthenticationError, DatabaseError, NoteFlowError
from noteflow.models import User

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Return a bcrypt hash (as text) of the given password."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    A stored value that is not a bcrypt hash (e.g. a placeholder written by
    hand into the database) never matches.
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password is not a valid bcrypt hash")
        return False


class AuthService:
    """Sign-in and user provisioning against the users table."""

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def sign_in(self, db: AsyncSession, email: str, password: str) -> User:
        """
        Verify credentials and return the matching user.

        Raises:
            AuthenticationError: unknown email or wrong password (→ 401)
            DatabaseError: lookup failed (→ 500)
        """
        try:
            user = await self.get_user_by_email(db, email)
        except Exception as e:
            logger.error("Database error during sign-in: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to sign in. Please try again.")

        if user is None or not verify_password(password, user.password):
            logger.info("Failed sign-in attempt for %s", email.lower())
            raise AuthenticationError()

        logger.info("User signed in: %s", user.id)
        return user

    async def create_user(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> User:
        """
        Create a user, or return the existing one with that email.

        Idempotent so provisioning scripts can be re-run safely; an existing
        user's password is left untouched.
        """
        try:
            existing = await self.get_user_by_email(db, email)
            if existing is not None:
                logger.info("User already exists: %s", existing.email)
                return existing

            user = User(email=email.lower(), name=name, password=hash_password(password))
            db.add(user)
            await db.flush()
            logger.info("User created: %s (%s)", user.id, user.email)
            return user
        except NoteFlowError:
            raise
        except Exception as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create user",
                context={"error_type": type(e).__name__},
            )


auth_service = AuthService()
