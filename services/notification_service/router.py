from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import Principal, get_current_principal, get_current_user, require_admin

from .schemas import MarkReadRequest, NotificationListResponse
from .service import NotificationService

router = APIRouter(tags=["Notifications"])


@router.get("/notifications", response_model=NotificationListResponse)
async def user_notifications(
    limit: int = Query(default=20, ge=1, le=200),
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService.list_for(db, Principal(user_id=user_id), limit)


@router.get("/admin/notifications", response_model=NotificationListResponse)
async def admin_notifications(
    limit: int = Query(default=50, ge=1, le=500),
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService.list_for(db, principal, limit)


@router.post("/notifications/mark-read")
async def mark_read(
    payload: MarkReadRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    await NotificationService.mark_read(db, principal, payload.notification_id)
    return {"success": True, "message": "Notification marked as read"}


@router.post("/notifications/mark-all-read")
async def mark_all_read(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    updated = await NotificationService.mark_all_read(db, principal)
    return {"success": True, "message": "All notifications marked as read", "updated": updated}
