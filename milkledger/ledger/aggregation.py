from typing import Dict, List

from milkledger.ledger.balance import ZERO
from milkledger.ledger.filters import day_filter, get_filtered_orders, get_filtered_payments, order_matches
from milkledger.schemas import DashboardStats, OrderStatus, ProductSale
from milkledger.store import RecordStore


def get_dashboard_stats(store: RecordStore, as_of=None) -> DashboardStats:
    """Sales and collections for one calendar day plus global order counts.

    The day window is inclusive at both ends. ``as_of`` defaults to today.
    """
    window = day_filter(as_of)
    day_orders = get_filtered_orders(store, window)
    day_payments = get_filtered_payments(store, window)
    return DashboardStats(
        daily_selling=sum((o.total_amount for o in day_orders), ZERO),
        daily_collection=sum((p.amount for p in day_payments), ZERO),
        total_customers=len(store.customers),
        total_orders=len(store.orders),
        pending_orders=sum(1 for o in store.orders if o.status == OrderStatus.PENDING),
        delivered_orders=sum(1 for o in store.orders if o.status == OrderStatus.DELIVERED),
        total_pending=sum((c.pending_balance for c in store.customers), ZERO),
    )


def get_daily_product_sales(store: RecordStore, day=None) -> List[ProductSale]:
    """Quantity sold per product on one day, in order of first appearance."""
    window = day_filter(day)
    # Stored order, not the newest-first listing, decides first appearance
    day_orders = [o for o in store.orders if order_matches(o, window)]
    totals: Dict[str, ProductSale] = {}
    for order in day_orders:
        for item in order.items:
            sale = totals.get(item.product_id)
            if sale is None:
                totals[item.product_id] = ProductSale(product_name=item.product_name, total_quantity=item.quantity)
            else:
                sale.total_quantity += item.quantity
    return list(totals.values())
