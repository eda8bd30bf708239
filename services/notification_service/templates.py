"""Template registry: maps each domain event type to the notification rows it produces.

Templates are pure. They never touch the database, so the Notifier can treat
every rendered row as an independent best-effort write.
"""
from typing import Callable, Dict, List

from shared.security import ADMIN_SUBJECT

from .events import (
    CommentPosted,
    CommentReplied,
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    StockDepleted,
    StockLow,
)
from .schemas import NotificationCreate, NotificationType

STATUS_PHRASES = {
    "Order Placed": "has been placed",
    "Packing": "is being packed",
    "Shipped": "has been shipped",
    "Out for delivery": "is out for delivery",
    "Delivered": "has been delivered successfully",
    "Cancelled": "has been cancelled",
}


def short_order_ref(order_id: int) -> str:
    return f"#{order_id:06d}"


def status_phrase(status: str) -> str:
    return STATUS_PHRASES.get(status, f"status changed to {status}")


def _excerpt(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def order_placed(event: OrderPlaced) -> List[NotificationCreate]:
    ref = short_order_ref(event.order_id)
    customer = {"customerName": event.customer_name, "customerEmail": event.customer_email}
    admin_title = "New Guest Order" if event.is_guest else "New Order"
    rows = []
    if event.user_id is not None:
        rows.append(NotificationCreate(
            user_id=str(event.user_id),
            type=NotificationType.ORDER_PLACED,
            title="Order Placed Successfully!",
            message=f"Your order {ref} has been placed. Total: ${event.amount:.2f}",
            related_id=str(event.order_id),
            related_type="order",
            action_url=f"/orders/{event.order_id}",
            payload={
                "orderId": event.order_id,
                "amount": event.amount,
                "itemsCount": event.items_count,
                **customer,
            },
        ))
    rows.append(NotificationCreate(
        user_id=ADMIN_SUBJECT,
        is_admin=True,
        type=NotificationType.ORDER_PLACED,
        title=admin_title,
        message=f"New order {ref} from {event.customer_name}. Amount: ${event.amount:.2f}",
        related_id=str(event.order_id),
        related_type="order",
        action_url=f"/admin/orders/{event.order_id}",
        priority="high",
        payload={
            "orderId": event.order_id,
            "amount": event.amount,
            "itemsCount": event.items_count,
            "isGuest": event.is_guest,
            **customer,
        },
    ))
    return rows


def order_cancelled(event: OrderCancelled) -> List[NotificationCreate]:
    ref = short_order_ref(event.order_id)
    reason_suffix = f" Reason: {event.reason}" if event.reason else ""
    rows = []
    if event.user_id is not None:
        actor = "You have" if event.cancelled_by == "user" else "Admin has"
        rows.append(NotificationCreate(
            user_id=str(event.user_id),
            type=NotificationType.ORDER_CANCELLED,
            title="Order Cancelled",
            message=f"{actor} cancelled order {ref}.{reason_suffix}",
            related_id=str(event.order_id),
            related_type="order",
            action_url=f"/orders/{event.order_id}",
            payload={
                "orderId": event.order_id,
                "cancelledBy": event.cancelled_by,
                "reason": event.reason,
                "amount": event.amount,
                "customerName": event.customer_name,
            },
        ))
    # Admins hear about cancellations they did not make, and about every guest
    # order since a guest has no feed of their own
    if event.cancelled_by == "user" or event.is_guest:
        by_customer = event.cancelled_by == "user"
        canceller = event.customer_name if by_customer else "admin"
        rows.append(NotificationCreate(
            user_id=ADMIN_SUBJECT,
            is_admin=True,
            type=NotificationType.ORDER_CANCELLED,
            title="Order Cancelled by Customer" if by_customer else "Guest Order Cancelled",
            message=f"Order {ref} cancelled by {canceller}.{reason_suffix}",
            related_id=str(event.order_id),
            related_type="order",
            action_url=f"/admin/orders/{event.order_id}",
            payload={
                "orderId": event.order_id,
                "customerName": event.customer_name,
                "reason": event.reason,
                "amount": event.amount,
                "isGuest": event.is_guest,
            },
        ))
    return rows


def order_status_changed(event: OrderStatusChanged) -> List[NotificationCreate]:
    if event.user_id is None:
        return []
    return [NotificationCreate(
        user_id=str(event.user_id),
        type=NotificationType.ORDER_STATUS_UPDATED,
        title="Order Status Updated",
        message=f"Your order {short_order_ref(event.order_id)} {status_phrase(event.new_status)}.",
        related_id=str(event.order_id),
        related_type="order",
        action_url=f"/orders/{event.order_id}",
        payload={
            "orderId": event.order_id,
            "oldStatus": event.old_status,
            "newStatus": event.new_status,
            "amount": event.amount,
        },
    )]


def stock_low(event: StockLow) -> List[NotificationCreate]:
    return [NotificationCreate(
        user_id=ADMIN_SUBJECT,
        is_admin=True,
        type=NotificationType.LOW_STOCK,
        title="Low Stock Alert",
        message=f'Product "{event.product_name}" is running low. Current stock: {event.quantity}',
        related_id=str(event.product_id),
        related_type="product",
        action_url="/admin/products",
        priority="high",
        payload={
            "productId": event.product_id,
            "productName": event.product_name,
            "currentStock": event.quantity,
        },
    )]


def stock_depleted(event: StockDepleted) -> List[NotificationCreate]:
    return [NotificationCreate(
        user_id=ADMIN_SUBJECT,
        is_admin=True,
        type=NotificationType.OUT_OF_STOCK,
        title="Out of Stock Alert",
        message=f'Product "{event.product_name}" is now out of stock.',
        related_id=str(event.product_id),
        related_type="product",
        action_url="/admin/products",
        priority="urgent",
        payload={"productId": event.product_id, "productName": event.product_name},
    )]


def comment_posted(event: CommentPosted) -> List[NotificationCreate]:
    return [NotificationCreate(
        user_id=ADMIN_SUBJECT,
        is_admin=True,
        type=NotificationType.NEW_COMMENT,
        title="New Comment Received",
        message=f'New comment on {event.target_type} "{event.target_name}" by {event.author}',
        related_id=str(event.comment_id),
        related_type="comment",
        action_url="/admin/comments",
        priority="medium",
        payload={
            "commentId": event.comment_id,
            "author": event.author,
            "targetType": event.target_type,
            "targetName": event.target_name,
            "content": _excerpt(event.content, 100),
        },
    )]


def comment_replied(event: CommentReplied) -> List[NotificationCreate]:
    # Anonymous comments have nobody to notify
    if event.comment_user_id is None:
        return []
    return [NotificationCreate(
        user_id=str(event.comment_user_id),
        type=NotificationType.COMMENT_REPLY,
        title="Reply to Your Comment",
        message=f"{event.reply_author} replied to your comment on {event.target_type}",
        related_id=str(event.comment_id),
        related_type="comment",
        action_url=f"/{event.target_type}/{event.target_id}",
        payload={
            "commentId": event.comment_id,
            "replyAuthor": event.reply_author,
            "targetType": event.target_type,
            "originalComment": _excerpt(event.content, 50),
        },
    )]


TEMPLATE_REGISTRY: Dict[type, Callable[..., List[NotificationCreate]]] = {
    OrderPlaced: order_placed,
    OrderCancelled: order_cancelled,
    OrderStatusChanged: order_status_changed,
    StockLow: stock_low,
    StockDepleted: stock_depleted,
    CommentPosted: comment_posted,
    CommentReplied: comment_replied,
}


def render(event) -> List[NotificationCreate]:
    """Look up the template for an event and render its notification rows."""
    template = TEMPLATE_REGISTRY.get(type(event))
    if template is None:
        raise ValueError(f"No template registered for event: {type(event).__name__}")
    return template(event)
