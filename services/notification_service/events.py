"""Domain events handed to the Notifier at the end of each workflow step."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OrderPlaced:
    order_id: int
    user_id: Optional[int]
    amount: float
    items_count: int
    customer_name: str
    customer_email: str
    is_guest: bool = False


@dataclass(frozen=True)
class OrderCancelled:
    order_id: int
    user_id: Optional[int]
    amount: float
    cancelled_by: str  # "user" or "admin"
    reason: str
    customer_name: str
    is_guest: bool = False


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: int
    user_id: Optional[int]
    amount: float
    old_status: str
    new_status: str


@dataclass(frozen=True)
class StockLow:
    product_id: int
    product_name: str
    quantity: int


@dataclass(frozen=True)
class StockDepleted:
    product_id: int
    product_name: str


@dataclass(frozen=True)
class CommentPosted:
    comment_id: int
    author: str
    target_type: str  # "product" or "deal"
    target_id: int
    target_name: str
    content: str


@dataclass(frozen=True)
class CommentReplied:
    comment_id: int
    comment_user_id: Optional[int]
    reply_author: str
    target_type: str
    target_id: int
    content: str
