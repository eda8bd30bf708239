from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFound
from shared.security import Principal

from .repository import NotificationRepository
from .schemas import NotificationListResponse


class NotificationService:

    @staticmethod
    async def list_for(db: AsyncSession, principal: Principal, limit: int) -> NotificationListResponse:
        if principal.is_admin:
            notifications = await NotificationRepository.list_for_admin(db, limit)
            unread = await NotificationRepository.count_unread(db, admin=True)
        else:
            notifications = await NotificationRepository.list_for_user(db, principal.recipient, limit)
            unread = await NotificationRepository.count_unread(db, principal.recipient)
        return NotificationListResponse(notifications=notifications, unread_count=unread)

    @staticmethod
    async def mark_read(db: AsyncSession, principal: Principal, notification_id: int):
        notification = await NotificationRepository.get_for_user(db, notification_id, principal.recipient)
        if not notification:
            raise NotFound("Notification not found")
        return await NotificationRepository.mark_read(db, notification)

    @staticmethod
    async def mark_all_read(db: AsyncSession, principal: Principal) -> int:
        return await NotificationRepository.mark_all_read(db, principal.recipient)
