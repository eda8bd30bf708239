"""Order status rules as an explicit transition table.

Every status change, whether an admin update or a user cancellation, is
checked here. Nothing else in the codebase compares status strings.
"""
from enum import Enum
from typing import Dict, Tuple

from shared.errors import InvalidTransition, ValidationError


class OrderStatus(str, Enum):
    PENDING = "Pending"
    ORDER_PLACED = "Order Placed"
    PACKING = "Packing"
    SHIPPED = "Shipped"
    OUT_FOR_DELIVERY = "Out for delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class Actor(str, Enum):
    USER = "user"
    ADMIN = "admin"


FULFILMENT_SEQUENCE = (
    OrderStatus.PENDING,
    OrderStatus.ORDER_PLACED,
    OrderStatus.PACKING,
    OrderStatus.SHIPPED,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})
USER_CANCELLABLE = frozenset({OrderStatus.PENDING, OrderStatus.ORDER_PLACED})

Transition = Tuple[OrderStatus, Actor, OrderStatus]


def _build_transitions() -> Dict[Transition, OrderStatus]:
    table: Dict[Transition, OrderStatus] = {}
    for position, current in enumerate(FULFILMENT_SEQUENCE):
        if current in TERMINAL_STATUSES:
            continue
        for later in FULFILMENT_SEQUENCE[position + 1:]:
            table[(current, Actor.ADMIN, later)] = later
        table[(current, Actor.ADMIN, OrderStatus.CANCELLED)] = OrderStatus.CANCELLED
        if current in USER_CANCELLABLE:
            table[(current, Actor.USER, OrderStatus.CANCELLED)] = OrderStatus.CANCELLED
    return table


TRANSITIONS = _build_transitions()


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Unknown order status '{value}'. Expected one of: {allowed}")


def is_terminal(status: str) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def next_status(current: str, target: str, actor: Actor) -> OrderStatus:
    """Returns the status to move to, or raises InvalidTransition naming why not."""
    current_status = parse_status(current)
    target_status = parse_status(target)

    allowed = TRANSITIONS.get((current_status, actor, target_status))
    if allowed is not None:
        return allowed

    if current_status in TERMINAL_STATUSES:
        raise InvalidTransition(
            f"Order is already {current_status.value} and can no longer be updated"
        )
    if actor is Actor.USER and target_status is OrderStatus.CANCELLED:
        raise InvalidTransition(
            f"Order cannot be cancelled as it is already {current_status.value.lower()}"
        )
    if actor is Actor.USER:
        raise InvalidTransition("Customers can only cancel orders")
    raise InvalidTransition(
        f"Cannot move order from {current_status.value} to {target_status.value}"
    )
