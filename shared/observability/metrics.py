from prometheus_client import Counter, Histogram

# Business Metrics
ecomm_orders_placed_total = Counter(
    "ecomm_orders_placed_total",
    "Total order placements processed",
    ["status"]  # Labels: 'success', 'rejected'
)

ecomm_order_placement_duration_seconds = Histogram(
    "ecomm_order_placement_duration_seconds",
    "Order placement duration in seconds"
)

ecomm_order_cancellations_total = Counter(
    "ecomm_order_cancellations_total",
    "Total orders cancelled",
    ["cancelled_by"]  # Labels: 'user', 'admin'
)

ecomm_stock_alerts_total = Counter(
    "ecomm_stock_alerts_total",
    "Stock alerts raised after deduction",
    ["kind"]  # Labels: 'low_stock', 'out_of_stock'
)

ecomm_notification_failures_total = Counter(
    "ecomm_notification_failures_total",
    "Notification inserts that failed and were dropped",
    ["type"]
)
