from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.notification_service.notifier import Notifier, get_notifier
from shared.config import settings
from shared.config.database import get_db
from shared.security import (
    Principal,
    get_current_principal,
    get_current_user,
    get_optional_principal,
    limiter,
    require_admin,
)

from .schemas import (
    CancelOrderRequest,
    CancellationReasonsResponse,
    GuestCancelRequest,
    GuestCancelResponse,
    GuestLookupRequest,
    GuestOrderDetailResponse,
    GuestOrderDetailsRequest,
    GuestOrderListResponse,
    OrderDetailResponse,
    OrderListResponse,
    OrderMutationResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    StatusUpdateRequest,
    StockCheckRequest,
    StockCheckResponse,
)
from .service import CANCELLATION_REASONS, OrderService, guest_view

router = APIRouter(tags=["Orders"])


@router.post("/place", response_model=PlaceOrderResponse)
@limiter.limit(settings.ORDER_RATE_LIMIT)
async def place_order(
    request: Request,                      # slowapi reads the caller key from it
    payload: PlaceOrderRequest,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Cash-on-delivery checkout. Without a token the order is placed as a guest."""
    if principal is not None and principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This action requires a customer account",
        )
    user_id = principal.user_id if principal else None
    return await OrderService.place_order(db, user_id, payload, notifier)


@router.get("/list", response_model=OrderListResponse)
async def list_orders(
    _: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return OrderListResponse(orders=await OrderService.list_orders(db))


@router.post("/userorders", response_model=OrderListResponse)
async def user_orders(
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return OrderListResponse(orders=await OrderService.list_user_orders(db, user_id))


@router.get("/cancellation-reasons", response_model=CancellationReasonsResponse)
async def cancellation_reasons():
    return CancellationReasonsResponse(cancellation_reasons=CANCELLATION_REASONS)


@router.post("/check-stock", response_model=StockCheckResponse)
async def check_stock(payload: StockCheckRequest, db: AsyncSession = Depends(get_db)):
    return await OrderService.check_stock(db, payload.product_id, payload.quantity)


@router.post("/status", response_model=OrderMutationResponse)
async def update_status(
    payload: StatusUpdateRequest,
    _: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    order = await OrderService.update_status(
        db, payload.order_id, payload.status, payload.cancellation_reason, notifier
    )
    return OrderMutationResponse(message="Order status updated", order=order)


@router.post("/cancel", response_model=OrderMutationResponse)
async def cancel_order(
    payload: CancelOrderRequest,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    order = await OrderService.cancel_order(
        db, user_id, payload.order_id, payload.cancellation_reason, notifier
    )
    return OrderMutationResponse(message="Order cancelled successfully", order=order)


@router.post("/guest-orders", response_model=GuestOrderListResponse)
@limiter.limit(settings.GUEST_LOOKUP_RATE_LIMIT)
async def guest_orders(
    request: Request,
    payload: GuestLookupRequest,
    db: AsyncSession = Depends(get_db),
):
    orders = await OrderService.list_guest_orders(db, payload.email, payload.phone)
    return GuestOrderListResponse(orders=orders, count=len(orders))


@router.post("/guest-order-details", response_model=GuestOrderDetailResponse)
@limiter.limit(settings.GUEST_LOOKUP_RATE_LIMIT)
async def guest_order_details(
    request: Request,
    payload: GuestOrderDetailsRequest,
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService.get_guest_order(db, payload.order_id, payload.email, payload.phone)
    return GuestOrderDetailResponse(order=guest_view(order))


@router.post("/cancel-guest", response_model=GuestCancelResponse)
@limiter.limit(settings.GUEST_LOOKUP_RATE_LIMIT)
async def cancel_guest_order(
    request: Request,
    payload: GuestCancelRequest,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    order = await OrderService.cancel_guest_order(
        db, payload.order_id, payload.cancellation_reason, payload.email, payload.phone, notifier
    )
    return GuestCancelResponse(message="Order cancelled successfully", order=guest_view(order))


@router.get("/{order_id:int}", response_model=OrderDetailResponse)
async def get_order(
    order_id: int,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    return OrderDetailResponse(order=await OrderService.get_order(db, principal, order_id))
