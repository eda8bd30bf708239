import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.repository import UserRepository
from services.cart_service.repository import CartRepository
from services.catalog_service.models import Product
from services.catalog_service.repository import ProductRepository
from services.notification_service.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    StockDepleted,
    StockLow,
)
from services.notification_service.notifier import Notifier
from shared.config import settings
from shared.errors import (
    Forbidden,
    NotFound,
    OutOfStock,
    ProductUnavailable,
    StoreError,
    ValidationError,
)
from shared.observability import (
    ecomm_order_cancellations_total,
    ecomm_order_placement_duration_seconds,
    ecomm_orders_placed_total,
    ecomm_stock_alerts_total,
)
from shared.security import Principal

from .lifecycle import Actor, OrderStatus, is_terminal, next_status
from .models import Order, OrderItem
from .repository import OrderRepository
from .schemas import (
    CustomerDetails,
    GuestOrderDetail,
    GuestOrderSummary,
    OrderLineIn,
    PlaceOrderRequest,
    PlaceOrderResponse,
    StockCheckResponse,
)

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

CANCELLATION_REASONS = [
    "Changed my mind",
    "Found better price elsewhere",
    "Delivery time too long",
    "Ordered by mistake",
    "Product not required anymore",
    "Payment issues",
    "Duplicate order",
    "Shipping address issues",
    "Other",
]

# Parts of the delivery address shown to an unauthenticated guest
GUEST_ADDRESS_FIELDS = ("street", "city", "state", "zipcode")


def resolve_customer_details(
    profile: CustomerDetails, override: Optional[CustomerDetails]
) -> CustomerDetails:
    """Profile values, replaced field by field by any non-blank override.

    An override email that doesn't look like an email rejects the whole order.
    """
    resolved = profile.model_dump()
    if override is None:
        return CustomerDetails(**resolved)

    for field, value in override.model_dump().items():
        if value is None or not value.strip():
            continue
        value = value.strip()
        if field == "email" and not EMAIL_PATTERN.match(value):
            raise ValidationError("Invalid email format")
        resolved[field] = value
    return CustomerDetails(**resolved)


def _digits(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def guest_email_matches(order: Order, email: Optional[str]) -> bool:
    return bool(email) and (order.customer_email or "").strip().lower() == email.strip().lower()


def guest_phone_matches(order: Order, phone: Optional[str]) -> bool:
    """The last four digits given must appear in the phone stored on the order."""
    given = _digits(phone)
    return len(given) >= 4 and given[-4:] in _digits(order.customer_phone)


def guest_view(order: Order) -> GuestOrderDetail:
    """The order as a guest may see it: no contact details and a partial address."""
    address = {key: order.address[key] for key in GUEST_ADDRESS_FIELDS if key in (order.address or {})}
    return GuestOrderDetail.model_validate(order).model_copy(update={"address": address})


def _as_product_id(ref) -> Optional[int]:
    if ref is None or isinstance(ref, bool):
        return None
    if isinstance(ref, int):
        return ref
    ref = ref.strip()
    return int(ref) if ref.isdigit() else None


@dataclass
class ValidatedLine:
    line: OrderLineIn
    product: Optional[Product]  # None only for deal lines with no live product


async def _resolve_product(db: AsyncSession, line: OrderLineIn) -> Optional[Product]:
    for ref in (line.id, line.legacy_id, line.product_id):
        product_id = _as_product_id(ref)
        if product_id is None:
            continue
        product = await ProductRepository.get_product_by_id(db, product_id)
        if product:
            return product
    if line.name:
        return await ProductRepository.get_published_by_name(db, line.name)
    return None


async def validate_lines(db: AsyncSession, lines: List[OrderLineIn]) -> List[ValidatedLine]:
    """Read-only pass over the cart. Raises on the first line that can't be sold."""
    validated = []
    requested: Dict[int, int] = {}

    for line in lines:
        product = await _resolve_product(db, line)

        if product is None:
            if line.is_from_deal:
                logger.warning("deal_line_without_product", name=line.name)
                validated.append(ValidatedLine(line=line, product=None))
                continue
            raise NotFound(f'Product "{line.name or line.id or line.product_id}" not found')

        if not product.is_orderable:
            raise ProductUnavailable(product.name)

        # Several lines may point at the same product; stock must cover their sum
        requested[product.id] = requested.get(product.id, 0) + line.quantity
        if product.quantity < requested[product.id]:
            raise OutOfStock(product.name, product.quantity, requested[product.id])

        validated.append(ValidatedLine(line=line, product=product))

    return validated


def _snapshot(validated: ValidatedLine) -> OrderItem:
    line, product = validated.line, validated.product
    price = line.price
    image = line.image
    category = line.category
    if product is not None:
        if not price:
            price = product.discount_price or product.price
        if not image and product.images:
            image = product.images[0]
        category = category or product.category

    return OrderItem(
        product_id=product.id if product else None,
        name=product.name if product else line.name,
        quantity=line.quantity,
        price=price,
        image=image,
        category=category,
        is_from_deal=line.is_from_deal,
        deal_name=line.deal_name,
        deal_image=line.deal_image,
        deal_description=line.deal_description,
    )


async def _deduct_stock(db: AsyncSession, validated: List[ValidatedLine]) -> list:
    """Stages one conditional decrement per product; returns the stock alerts to raise."""
    totals: Dict[int, int] = {}
    products: Dict[int, Product] = {}
    for entry in validated:
        if entry.product is None:
            continue
        products[entry.product.id] = entry.product
        totals[entry.product.id] = totals.get(entry.product.id, 0) + entry.line.quantity

    alerts = []
    for product_id, quantity in totals.items():
        product = products[product_id]
        if not await ProductRepository.deduct_stock(db, product_id, quantity):
            # Another order took the stock between validation and now
            await db.refresh(product)
            raise OutOfStock(product.name, product.quantity, quantity)

        await db.refresh(product)
        logger.info(
            "stock_deducted",
            product_id=product_id,
            quantity=quantity,
            remaining=product.quantity,
        )
        if product.quantity == 0:
            alerts.append(StockDepleted(product_id=product_id, product_name=product.name))
            ecomm_stock_alerts_total.labels(kind="out_of_stock").inc()
        elif product.quantity <= settings.LOW_STOCK_THRESHOLD:
            alerts.append(StockLow(product_id=product_id, product_name=product.name, quantity=product.quantity))
            ecomm_stock_alerts_total.labels(kind="low_stock").inc()
    return alerts


class OrderService:

    @staticmethod
    async def place_order(
        db: AsyncSession, user_id: Optional[int], data: PlaceOrderRequest, notifier: Notifier
    ) -> PlaceOrderResponse:
        """Checkout for a signed-in user, or for a guest when ``user_id`` is None."""
        started = time.perf_counter()
        log = logger.bind(user_id=user_id, guest=user_id is None, lines=len(data.items))
        try:
            order, events = await OrderService._place(db, user_id, data)
        except StoreError as e:
            ecomm_orders_placed_total.labels(status="rejected").inc()
            log.info("order_rejected", error=e.kind, message=e.message)
            raise

        ecomm_orders_placed_total.labels(status="success").inc()
        ecomm_order_placement_duration_seconds.observe(time.perf_counter() - started)
        log.info("order_placed", order_id=order.id, amount=order.amount)

        await notifier.publish_all(events)

        return PlaceOrderResponse(
            order_id=order.id,
            delivery_charges=order.delivery_charges,
            customer_details=CustomerDetails(**order.customer_details),
        )

    @staticmethod
    async def _place(db: AsyncSession, user_id: Optional[int], data: PlaceOrderRequest):
        is_guest = user_id is None

        # 1. Client input
        if not data.items:
            raise ValidationError("No items in order")
        if data.amount <= 0:
            raise ValidationError("Invalid order amount")
        if not data.address:
            raise ValidationError("Address is required")

        # 2-3. Customer details: account profile, then request overrides.
        # Guests have no profile and must send all three.
        if is_guest:
            customer = resolve_customer_details(CustomerDetails(), data.customer_details)
            if not (customer.name and customer.email and customer.phone):
                raise ValidationError("Customer details (name, email, phone) are required")
        else:
            user = await UserRepository.get_by_id(db, user_id)
            if not user:
                raise NotFound("User not found")
            profile = CustomerDetails(name=user.name, email=user.email, phone=user.phone)
            customer = resolve_customer_details(profile, data.customer_details)

        # 4-5. Validate every line before touching anything
        validated = await validate_lines(db, data.items)

        # 6-9. Deduct, persist, clear the cart: one transaction
        try:
            alerts = await _deduct_stock(db, validated)
            order = Order(
                user_id=user_id,
                is_guest=is_guest,
                items=[_snapshot(entry) for entry in validated],
                amount=float(data.amount),
                delivery_charges=data.delivery_charges,
                address=data.address,
                customer_name=customer.name,
                customer_email=customer.email,
                customer_phone=customer.phone,
                payment_method="COD",
                payment=False,
                status=OrderStatus.ORDER_PLACED.value,
            )
            OrderRepository.add_order(db, order)
            if not is_guest:
                await CartRepository.clear_cart(db, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        placed = OrderPlaced(
            order_id=order.id,
            user_id=order.user_id,
            amount=order.amount,
            items_count=len(order.items),
            customer_name=customer.name or "Customer",
            customer_email=customer.email or "",
            is_guest=is_guest,
        )
        return order, [*alerts, placed]

    @staticmethod
    async def list_orders(db: AsyncSession):
        return await OrderRepository.list_orders(db)

    @staticmethod
    async def list_user_orders(db: AsyncSession, user_id: int):
        return await OrderRepository.list_user_orders(db, user_id)

    @staticmethod
    async def get_order(db: AsyncSession, principal: Principal, order_id: int) -> Order:
        order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFound("Order not found")
        if principal.is_admin:
            return order
        if order.is_guest:
            raise Forbidden("Please verify your email/phone to view this guest order")
        if order.user_id != principal.user_id:
            raise Forbidden("Unauthorized to view this order")
        return order

    @staticmethod
    async def list_guest_orders(
        db: AsyncSession, email: Optional[str], phone: Optional[str]
    ) -> List[GuestOrderSummary]:
        """Guest orders matching the email and/or containing the phone digits."""
        email, phone = _blank_to_none(email), _blank_to_none(phone)
        if not email and not phone:
            raise ValidationError("Email or phone is required to find guest orders")

        orders = await OrderRepository.list_guest_orders(db, email)
        if phone:
            given = _digits(phone)
            orders = [o for o in orders if len(given) >= 4 and given in _digits(o.customer_phone)]
        return [GuestOrderSummary.model_validate(o) for o in orders]

    @staticmethod
    async def _guest_order(db: AsyncSession, order_id: int, for_update: bool = False) -> Order:
        if for_update:
            order = await OrderRepository.get_order_for_update(db, order_id)
        else:
            order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFound("Order not found")
        if not order.is_guest:
            raise ValidationError("This is not a guest order")
        return order

    @staticmethod
    async def get_guest_order(
        db: AsyncSession, order_id: int, email: Optional[str], phone: Optional[str]
    ) -> Order:
        """Every identifier the guest supplies has to match the order."""
        email, phone = _blank_to_none(email), _blank_to_none(phone)
        if not email and not phone:
            raise ValidationError("Email or phone is required to verify guest order")

        order = await OrderService._guest_order(db, order_id)
        if email and not guest_email_matches(order, email):
            raise Forbidden("Email does not match this order")
        if phone and not guest_phone_matches(order, phone):
            raise Forbidden("Phone number does not match this order")
        return order

    @staticmethod
    async def cancel_guest_order(
        db: AsyncSession,
        order_id: int,
        reason: str,
        email: Optional[str],
        phone: Optional[str],
        notifier: Notifier,
    ) -> Order:
        """Guest self-cancel. Either identifier matching is enough; the user rules apply."""
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Cancellation reason is required")
        email, phone = _blank_to_none(email), _blank_to_none(phone)
        if not email and not phone:
            raise ValidationError("Email or phone is required to cancel guest order")

        order = await OrderService._guest_order(db, order_id, for_update=True)
        if not (guest_email_matches(order, email) or guest_phone_matches(order, phone)):
            logger.warning("guest_verification_failed", order_id=order_id)
            raise Forbidden("Unable to verify your identity. Please check your email/phone.")

        next_status(order.status, OrderStatus.CANCELLED.value, Actor.USER)
        return await OrderService._cancel(db, order, Actor.USER, reason, notifier)

    @staticmethod
    async def update_status(
        db: AsyncSession,
        order_id: int,
        status: str,
        cancellation_reason: Optional[str],
        notifier: Notifier,
    ) -> Order:
        """Admin status change. Cancelling through here restores stock like a user cancel."""
        order = await OrderRepository.get_order_for_update(db, order_id)
        if not order:
            raise NotFound("Order not found")

        target = next_status(order.status, status, Actor.ADMIN)
        if target is OrderStatus.CANCELLED:
            reason = (cancellation_reason or "").strip() or "Cancelled by admin"
            return await OrderService._cancel(db, order, Actor.ADMIN, reason, notifier)

        old_status = order.status
        order.status = target.value
        order.updated_at = datetime.now(timezone.utc)
        await db.commit()
        logger.info(
            "order_status_updated",
            order_id=order.id,
            old_status=old_status,
            new_status=order.status,
            terminal=is_terminal(order.status),
        )

        await notifier.publish(OrderStatusChanged(
            order_id=order.id,
            user_id=order.user_id,
            amount=order.amount,
            old_status=old_status,
            new_status=order.status,
        ))
        return order

    @staticmethod
    async def cancel_order(
        db: AsyncSession, user_id: int, order_id: int, reason: str, notifier: Notifier
    ) -> Order:
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Cancellation reason is required")

        order = await OrderRepository.get_order_for_update(db, order_id)
        if not order:
            raise NotFound("Order not found")
        if order.user_id != user_id:
            raise Forbidden("Unauthorized to cancel this order")

        next_status(order.status, OrderStatus.CANCELLED.value, Actor.USER)
        return await OrderService._cancel(db, order, Actor.USER, reason, notifier)

    @staticmethod
    async def _cancel(db: AsyncSession, order: Order, actor: Actor, reason: str, notifier: Notifier) -> Order:
        try:
            # Exact inverse of placement: a delta, whatever stock is now
            for item in order.items:
                if item.product_id is None:
                    continue
                if not await ProductRepository.restore_stock(db, item.product_id, item.quantity):
                    logger.warning(
                        "stock_restore_skipped",
                        order_id=order.id,
                        product_id=item.product_id,
                        reason="product no longer exists",
                    )

            now = datetime.now(timezone.utc)
            order.status = OrderStatus.CANCELLED.value
            order.cancellation_reason = reason
            order.cancelled_at = now
            order.cancelled_by = actor.value
            order.updated_at = now
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        ecomm_order_cancellations_total.labels(cancelled_by=actor.value).inc()
        logger.info("order_cancelled", order_id=order.id, cancelled_by=actor.value)

        await notifier.publish(OrderCancelled(
            order_id=order.id,
            user_id=order.user_id,
            amount=order.amount,
            cancelled_by=actor.value,
            reason=reason,
            customer_name=order.customer_name or "Customer",
            is_guest=order.is_guest,
        ))
        return order

    @staticmethod
    async def check_stock(db: AsyncSession, product_id: int, quantity: int) -> StockCheckResponse:
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFound("Product not found")

        if not product.is_orderable:
            return StockCheckResponse(
                success=False,
                message="Product is not available",
                available=False,
                available_quantity=0,
            )
        if product.quantity < quantity:
            return StockCheckResponse(
                success=False,
                message=f"Only {product.quantity} items available",
                available=False,
                available_quantity=product.quantity,
            )
        return StockCheckResponse(
            message="Product available",
            available=True,
            available_quantity=product.quantity,
        )
