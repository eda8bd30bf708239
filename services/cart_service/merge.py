"""Guest-cart / server-cart reconciliation, run once when a guest logs in."""
from typing import Dict, Mapping

CartLines = Dict[str, int]


def merge_carts(guest: Mapping[str, int], server: Mapping[str, int]) -> CartLines:
    """Sum quantities per key. Non-positive guest quantities are ignored."""
    merged: CartLines = {key: qty for key, qty in server.items() if qty > 0}
    for key, qty in guest.items():
        if qty <= 0:
            continue
        merged[key] = merged.get(key, 0) + qty
    return merged
