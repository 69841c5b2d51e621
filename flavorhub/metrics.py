from prometheus_client import Counter

USERS_REGISTERED = Counter(
    "flavorhub_users_registered_total",
    "Accounts created",
    ["role"],  # customer | partner
)

ORDERS_CREATED = Counter(
    "flavorhub_orders_created_total",
    "Orders opened by customers",
)

ORDER_STATUS_CHANGES = Counter(
    "flavorhub_order_status_changes_total",
    "Order status transitions",
    ["status"],
)

RESERVATION_STATUS_CHANGES = Counter(
    "flavorhub_reservation_status_changes_total",
    "Reservation status transitions",
    ["status"],
)

PAYMENT_OUTCOMES = Counter(
    "flavorhub_payment_outcomes_total",
    "Payment status transitions by resulting status",
    ["outcome"],  # processing | completed | failed | refunded
)
