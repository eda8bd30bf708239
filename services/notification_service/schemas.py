from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel

from shared.schemas import CamelModel


class NotificationType(str, Enum):
    ORDER_PLACED = "order_placed"
    ORDER_CANCELLED = "order_cancelled"
    ORDER_STATUS_UPDATED = "order_status_updated"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    NEW_COMMENT = "new_comment"
    COMMENT_REPLY = "comment_reply"


Priority = Literal["low", "medium", "high", "urgent"]


class NotificationCreate(BaseModel):
    """A notification row waiting to be written."""

    user_id: str
    type: NotificationType
    title: str
    message: str
    is_admin: bool = False
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    action_url: Optional[str] = None
    priority: Priority = "medium"
    payload: Dict[str, Any] = {}


class NotificationResponse(CamelModel):
    id: int
    user_id: str
    is_admin: bool
    type: str
    title: str
    message: str
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    action_url: Optional[str] = None
    priority: str
    payload: Dict[str, Any] = {}
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class NotificationListResponse(CamelModel):
    success: bool = True
    notifications: List[NotificationResponse]
    unread_count: int


class MarkReadRequest(CamelModel):
    notification_id: int
