from milkledger.ledger.aggregation import get_daily_product_sales, get_dashboard_stats
from milkledger.ledger.balance import make_payment, reconcile_customer
from milkledger.ledger.filters import get_filtered_orders, get_filtered_payments
from milkledger.ledger.orders import add_order, delete_order, toggle_order_status, update_order
from milkledger.ledger.statements import build_report, build_statements, period_range, running_balance

__all__ = [
    "add_order",
    "build_report",
    "build_statements",
    "delete_order",
    "get_daily_product_sales",
    "get_dashboard_stats",
    "get_filtered_orders",
    "get_filtered_payments",
    "make_payment",
    "period_range",
    "reconcile_customer",
    "running_balance",
    "toggle_order_status",
    "update_order",
]
