"""Password login and user lookup."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.auth.password import verify_password
from smartseed.middleware.exceptions import AccountDisabledError, AuthenticationError
from smartseed.models.user import User, UserRole

logger = logging.getLogger("smartseed.auth")


async def authenticate(email: str, password: str, db: AsyncSession) -> User:
    """Return the user for a valid email/password pair.

    Unknown email and wrong password give the same error so callers
    cannot tell which accounts exist.
    """
    user = (
        await db.execute(select(User).where(User.email == email))
    ).scalar_one_or_none()

    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise AuthenticationError()
    if not user.is_active:
        raise AccountDisabledError()

    logger.info("User %s logged in", user.email)
    return user


async def list_users(db: AsyncSession, role: UserRole | None = None) -> list[User]:
    stmt = select(User).order_by(User.name)
    if role is not None:
        stmt = stmt.where(User.role == role)
    result = await db.execute(stmt)
    return list(result.scalars().all())
