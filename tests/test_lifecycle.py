"""Tests for the order status transition table."""

import pytest

from services.order_service.lifecycle import (
    FULFILMENT_SEQUENCE,
    TRANSITIONS,
    Actor,
    OrderStatus,
    is_terminal,
    next_status,
)
from shared.errors import InvalidTransition, ValidationError


class TestAdminTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            ("Order Placed", "Packing"),
            ("Packing", "Shipped"),
            ("Shipped", "Out for delivery"),
            ("Out for delivery", "Delivered"),
            ("Pending", "Order Placed"),
        ],
    )
    def test_next_step(self, current, target):
        assert next_status(current, target, Actor.ADMIN) is OrderStatus(target)

    def test_skipping_ahead_is_allowed(self):
        assert next_status("Order Placed", "Delivered", Actor.ADMIN) is OrderStatus.DELIVERED

    @pytest.mark.parametrize("current", ["Pending", "Order Placed", "Packing", "Shipped", "Out for delivery"])
    def test_cancel_from_any_open_state(self, current):
        assert next_status(current, "Cancelled", Actor.ADMIN) is OrderStatus.CANCELLED

    def test_backward_move(self):
        with pytest.raises(InvalidTransition) as exc:
            next_status("Shipped", "Packing", Actor.ADMIN)
        assert exc.value.message == "Cannot move order from Shipped to Packing"

    def test_same_state(self):
        with pytest.raises(InvalidTransition, match="Cannot move order from Packing to Packing"):
            next_status("Packing", "Packing", Actor.ADMIN)


class TestUserTransitions:
    @pytest.mark.parametrize("current", ["Pending", "Order Placed"])
    def test_cancel_inside_window(self, current):
        assert next_status(current, "Cancelled", Actor.USER) is OrderStatus.CANCELLED

    @pytest.mark.parametrize("current", ["Packing", "Shipped", "Out for delivery"])
    def test_cancel_outside_window(self, current):
        with pytest.raises(InvalidTransition) as exc:
            next_status(current, "Cancelled", Actor.USER)
        assert exc.value.message == f"Order cannot be cancelled as it is already {current.lower()}"

    def test_users_only_cancel(self):
        with pytest.raises(InvalidTransition, match="Customers can only cancel orders"):
            next_status("Order Placed", "Delivered", Actor.USER)


class TestTerminalStates:
    @pytest.mark.parametrize("terminal", ["Delivered", "Cancelled"])
    @pytest.mark.parametrize("actor", [Actor.USER, Actor.ADMIN])
    def test_nothing_leaves_a_terminal_state(self, terminal, actor):
        for target in OrderStatus:
            with pytest.raises(InvalidTransition) as exc:
                next_status(terminal, target.value, actor)
            assert exc.value.message == f"Order is already {terminal} and can no longer be updated"

    def test_table_has_no_exit_from_terminal_states(self):
        assert not [key for key in TRANSITIONS if is_terminal(key[0].value)]

    def test_is_terminal(self):
        assert is_terminal("Delivered")
        assert is_terminal("Cancelled")
        assert not any(is_terminal(s.value) for s in FULFILMENT_SEQUENCE[:-1])


def test_unknown_status_is_a_validation_error():
    with pytest.raises(ValidationError, match="Unknown order status 'Lost'"):
        next_status("Order Placed", "Lost", Actor.ADMIN)
