"""Credential store for user accounts.

Provides business logic for user identity:
- Signup with bcrypt-hashed passwords
- Credential verification that does not reveal which emails exist
- Preference updates

bcrypt runs in the threadpool so a slow hash never blocks the event loop.
"""

import logging
from functools import lru_cache

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from voxstory.core.security import hash_password, verify_password
from voxstory.models.user import User

logger = logging.getLogger(__name__)


class CredentialStoreError(Exception):
    """Base exception for credential store errors."""
    pass


class DuplicateIdentityError(CredentialStoreError):
    """A user with this email already exists."""
    pass


class AuthFailureError(CredentialStoreError):
    """Unknown email or wrong password."""
    pass


@lru_cache
def dummy_password_hash(rounds: int | None) -> str:
    """Hash checked against for unknown emails, computed once per cost factor."""
    return hash_password("not-a-real-password", rounds=rounds)


class CredentialStore:
    """Service for creating and authenticating users."""

    def __init__(self, db: AsyncSession, hash_rounds: int | None = None):
        self.db = db
        self.hash_rounds = hash_rounds

    async def create(self, email: str, password: str) -> User:
        """Create a new user with default preferences.

        Args:
            email: Login email, stored exactly as given
            password: Plain text password; only its hash is persisted

        Returns:
            Created user

        Raises:
            DuplicateIdentityError: If the email is already registered
        """
        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none() is not None:
            raise DuplicateIdentityError("User already exists")

        password_hash = await run_in_threadpool(hash_password, password, self.hash_rounds)
        user = User(email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent signup for the same email
            await self.db.rollback()
            raise DuplicateIdentityError("User already exists") from e

        await self.db.refresh(user)
        logger.info("Created user %s", user.id)
        return user

    async def verify(self, email: str, password: str) -> User:
        """Check a login attempt.

        Raises:
            AuthFailureError: If the email is unknown or the password is wrong
        """
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            # Keep timing close to a wrong-password attempt
            stored_hash = await run_in_threadpool(dummy_password_hash, self.hash_rounds)
            await run_in_threadpool(verify_password, password, stored_hash)
            raise AuthFailureError("Invalid credentials")

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            raise AuthFailureError("Invalid credentials")

        return user

    async def get(self, user_id: str) -> User | None:
        """Get a user by id."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def update_preferences(self, user_id: str, genre: str, voice: str) -> None:
        """Overwrite both preference strings for a user.

        Any string is accepted for either value.
        """
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(favorite_genre=genre, favorite_voice=voice)
        )
        await self.db.commit()
