"""Tests for the event-to-notification templates and the Notifier."""

import asyncio

import pytest

from services.notification_service.events import (
    CommentPosted,
    CommentReplied,
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    StockDepleted,
    StockLow,
)
from services.notification_service.notifier import Notifier
from services.notification_service.schemas import NotificationType
from services.notification_service.templates import render, short_order_ref, status_phrase


def placed(user_id=7):
    return OrderPlaced(
        order_id=42, user_id=user_id, amount=75.5, items_count=2,
        customer_name="Alice", customer_email="alice@example.com",
    )


def cancelled(cancelled_by):
    return OrderCancelled(
        order_id=42, user_id=7, amount=75.5, cancelled_by=cancelled_by,
        reason="stock issue", customer_name="Alice",
    )


class TestOrderTemplates:
    def test_order_ref(self):
        assert short_order_ref(42) == "#000042"

    def test_order_placed_fans_out_to_user_and_admin(self):
        user_row, admin_row = render(placed())

        assert user_row.user_id == "7"
        assert user_row.is_admin is False
        assert user_row.message == "Your order #000042 has been placed. Total: $75.50"
        assert admin_row.user_id == "admin"
        assert admin_row.is_admin is True
        assert admin_row.priority == "high"
        assert admin_row.message == "New order #000042 from Alice. Amount: $75.50"
        for row in (user_row, admin_row):
            assert row.type is NotificationType.ORDER_PLACED
            assert row.payload["customerName"] == "Alice"
            assert row.payload["customerEmail"] == "alice@example.com"

    def test_order_placed_without_user_only_notifies_admin(self):
        [row] = render(placed(user_id=None))
        assert row.is_admin is True

    def test_user_cancel_notifies_admin_too(self):
        rows = render(cancelled("user"))
        assert [r.user_id for r in rows] == ["7", "admin"]
        assert rows[0].message == "You have cancelled order #000042. Reason: stock issue"

    def test_guest_order_title(self):
        event = OrderPlaced(
            order_id=42, user_id=None, amount=10, items_count=1,
            customer_name="Grace", customer_email="grace@example.com", is_guest=True,
        )
        [row] = render(event)
        assert row.title == "New Guest Order"
        assert row.payload["isGuest"] is True

    def test_admin_cancel_of_guest_order_still_reaches_admin(self):
        event = OrderCancelled(
            order_id=42, user_id=None, amount=10, cancelled_by="admin",
            reason="fraud", customer_name="Grace", is_guest=True,
        )
        [row] = render(event)
        assert row.is_admin is True
        assert row.title == "Guest Order Cancelled"
        assert row.message == "Order #000042 cancelled by admin. Reason: fraud"

    def test_admin_cancel_only_notifies_user(self):
        [row] = render(cancelled("admin"))
        assert row.user_id == "7"
        assert row.message.startswith("Admin has cancelled order #000042.")

    @pytest.mark.parametrize(
        "status, phrase",
        [
            ("Packing", "is being packed"),
            ("Shipped", "has been shipped"),
            ("Out for delivery", "is out for delivery"),
            ("Delivered", "has been delivered successfully"),
            ("On hold", "status changed to On hold"),
        ],
    )
    def test_status_phrases(self, status, phrase):
        assert status_phrase(status) == phrase
        event = OrderStatusChanged(order_id=42, user_id=7, amount=10, old_status="Order Placed", new_status=status)
        [row] = render(event)
        assert row.message == f"Your order #000042 {phrase}."


class TestStockAndCommentTemplates:
    def test_low_stock(self):
        [row] = render(StockLow(product_id=3, product_name="Desk Lamp", quantity=2))
        assert row.is_admin is True
        assert row.priority == "high"
        assert row.message == 'Product "Desk Lamp" is running low. Current stock: 2'

    def test_depleted(self):
        [row] = render(StockDepleted(product_id=3, product_name="Desk Lamp"))
        assert row.type is NotificationType.OUT_OF_STOCK
        assert row.priority == "urgent"

    def test_comment_posted_goes_to_admin(self):
        event = CommentPosted(
            comment_id=1, author="Bob", target_type="product", target_id=3,
            target_name="Desk Lamp", content="x" * 150,
        )
        [row] = render(event)
        assert row.is_admin is True
        assert row.payload["content"] == "x" * 100 + "..."

    def test_anonymous_comment_reply_notifies_nobody(self):
        event = CommentReplied(
            comment_id=1, comment_user_id=None, reply_author="Admin",
            target_type="product", target_id=3, content="thanks",
        )
        assert render(event) == []

    def test_unregistered_event(self):
        with pytest.raises(ValueError, match="No template registered"):
            render(object())


class TestNotifier:
    def test_delivery_failures_are_dropped(self):
        class BrokenSession:
            async def __aenter__(self):
                raise RuntimeError("database unavailable")

            async def __aexit__(self, *exc):
                return False

        notifier = Notifier(session_factory=BrokenSession)

        delivered = asyncio.run(notifier.publish(placed()))

        assert delivered == 0

    def test_render_failure_is_dropped(self):
        notifier = Notifier(session_factory=None)
        assert asyncio.run(notifier.publish(object())) == 0
