"""Tests for the guest-cart merge."""

from services.cart_service.merge import merge_carts


def test_sums_quantities_per_key():
    assert merge_carts({"a": 1, "b": 2}, {"a": 3}) == {"a": 4, "b": 2}


def test_empty_guest_keeps_server_cart():
    assert merge_carts({}, {"a": 3}) == {"a": 3}


def test_empty_server_takes_guest_cart():
    assert merge_carts({"a": 2}, {}) == {"a": 2}


def test_non_positive_guest_quantities_are_ignored():
    assert merge_carts({"a": 0, "b": -1, "c": 2}, {"a": 1}) == {"a": 1, "c": 2}


def test_inputs_are_not_mutated():
    guest, server = {"a": 1}, {"a": 1}
    merge_carts(guest, server)
    assert guest == {"a": 1}
    assert server == {"a": 1}
