from typing import Optional

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """Accounts are keyed by their lowercased email."""

    @staticmethod
    async def create(db: AsyncSession, user: User) -> User:
        user.email = normalize_email(user.email)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        # Rows written before normalization may still be mixed case
        result = await db.execute(
            select(User).where(func.lower(User.email) == normalize_email(email))
        )
        return result.scalars().first()

    @staticmethod
    async def email_taken(db: AsyncSession, email: str) -> bool:
        result = await db.execute(
            select(exists().where(func.lower(User.email) == normalize_email(email)))
        )
        return bool(result.scalar())
