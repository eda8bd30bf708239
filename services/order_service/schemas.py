from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from shared.schemas import CamelModel

ItemRef = Union[int, str]


class OrderLineIn(CamelModel):
    """One cart line as the storefront sends it.

    The product may be referenced by ``id``, ``_id`` or ``productId``,
    or only by name. Deal lines may carry no live product at all.
    """

    id: Optional[ItemRef] = None
    legacy_id: Optional[ItemRef] = Field(default=None, alias="_id")
    product_id: Optional[ItemRef] = None
    name: str = ""
    quantity: int = Field(..., ge=1)
    price: float = Field(default=0, ge=0)
    image: Optional[str] = None
    category: Optional[str] = None
    is_from_deal: bool = False
    deal_name: Optional[str] = None
    deal_image: Optional[str] = None
    deal_description: Optional[str] = None


class CustomerDetails(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class PlaceOrderRequest(CamelModel):
    # Left permissive so the service can answer with message-first errors
    items: List[OrderLineIn] = []
    amount: float = 0
    address: Optional[Dict[str, Any]] = None
    delivery_charges: float = Field(default=0, ge=0)
    customer_details: Optional[CustomerDetails] = None


class PlaceOrderResponse(CamelModel):
    success: bool = True
    message: str = "Order Placed Successfully"
    order_id: int
    delivery_charges: float
    customer_details: CustomerDetails


class OrderItemResponse(CamelModel):
    product_id: Optional[int] = None
    name: str
    quantity: int
    price: float
    image: Optional[str] = None
    category: Optional[str] = None
    is_from_deal: bool = False
    deal_name: Optional[str] = None
    deal_image: Optional[str] = None
    deal_description: Optional[str] = None


class OrderResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    is_guest: bool = False
    items: List[OrderItemResponse]
    amount: float
    delivery_charges: float
    address: Dict[str, Any]
    customer_details: CustomerDetails
    payment_method: str
    payment: bool
    status: str
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None
    date: datetime
    updated_at: Optional[datetime] = None


class OrderListResponse(CamelModel):
    success: bool = True
    orders: List[OrderResponse]


class OrderDetailResponse(CamelModel):
    success: bool = True
    order: OrderResponse


class OrderMutationResponse(CamelModel):
    success: bool = True
    message: str
    order: OrderResponse


class StatusUpdateRequest(CamelModel):
    order_id: int
    status: str
    cancellation_reason: Optional[str] = None


class CancelOrderRequest(CamelModel):
    order_id: int
    cancellation_reason: str = ""


class StockCheckRequest(CamelModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class StockCheckResponse(CamelModel):
    success: bool = True
    message: str
    available: bool
    available_quantity: int


class CancellationReasonsResponse(CamelModel):
    success: bool = True
    cancellation_reasons: List[str]


class GuestLookupRequest(CamelModel):
    email: Optional[str] = None
    phone: Optional[str] = None


class GuestOrderDetailsRequest(GuestLookupRequest):
    order_id: int


class GuestCancelRequest(GuestLookupRequest):
    order_id: int
    cancellation_reason: str = ""


class GuestOrderItem(CamelModel):
    name: str
    quantity: int
    price: float
    image: Optional[str] = None


class GuestOrderSummary(CamelModel):
    """What a guest may see after proving they know the order's email or phone.

    Contact details stay out: the caller may only know one of them.
    """

    id: int
    items: List[GuestOrderItem]
    amount: float
    delivery_charges: float
    status: str
    date: datetime
    customer_name: Optional[str] = None


class GuestOrderDetail(GuestOrderSummary):
    address: Dict[str, Any]
    is_guest: bool = True
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None


class GuestOrderListResponse(CamelModel):
    success: bool = True
    orders: List[GuestOrderSummary]
    count: int


class GuestOrderDetailResponse(CamelModel):
    success: bool = True
    order: GuestOrderDetail


class GuestCancelResponse(CamelModel):
    success: bool = True
    message: str
    order: GuestOrderDetail
