from .setup import setup_observability
from .metrics import (
    ecomm_orders_placed_total,
    ecomm_order_placement_duration_seconds,
    ecomm_order_cancellations_total,
    ecomm_stock_alerts_total,
    ecomm_notification_failures_total
)
