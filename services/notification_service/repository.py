from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Notification


class NotificationRepository:

    @staticmethod
    async def create(db: AsyncSession, notification: Notification) -> Notification:
        db.add(notification)
        await db.commit()
        await db.refresh(notification)
        return notification

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: str, limit: int):
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return result.scalars().all()

    @staticmethod
    async def list_for_admin(db: AsyncSession, limit: int):
        result = await db.execute(
            select(Notification)
            .where(Notification.is_admin.is_(True))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return result.scalars().all()

    @staticmethod
    async def count_unread(db: AsyncSession, user_id: Optional[str] = None, admin: bool = False) -> int:
        stmt = select(func.count(Notification.id)).where(Notification.is_read.is_(False))
        if admin:
            stmt = stmt.where(Notification.is_admin.is_(True))
        else:
            stmt = stmt.where(Notification.user_id == user_id)
        result = await db.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def get_for_user(db: AsyncSession, notification_id: int, user_id: str):
        result = await db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return result.scalars().first()

    @staticmethod
    async def mark_read(db: AsyncSession, notification: Notification) -> Notification:
        notification.is_read = True
        notification.read_at = datetime.now(timezone.utc)
        await db.commit()
        return notification

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount
