import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from milkledger.core.errors import ValidationFailure
from milkledger.ledger.balance import ZERO, on_order_created
from milkledger.ledger.filters import to_datetime
from milkledger.schemas import Order, OrderItem, OrderLine, OrderStatus
from milkledger.store import RecordStore

logger = logging.getLogger(__name__)


def _as_line(line) -> OrderLine:
    if isinstance(line, OrderLine):
        return line
    if isinstance(line, dict):
        return OrderLine(**line)
    product_id, quantity = line
    return OrderLine(product_id=product_id, quantity=quantity)


def snapshot_items(store: RecordStore, lines: Iterable) -> List[OrderItem]:
    """Copy the current product name and price into each order line."""
    try:
        lines = [_as_line(line) for line in lines]
    except (TypeError, ValueError) as e:
        raise ValidationFailure(f"Invalid order line: {e}") from e
    if not lines:
        raise ValidationFailure("An order needs at least one item")
    items = []
    for line in lines:
        product = store.get_product(line.product_id)
        items.append(OrderItem(
            product_id=product.id,
            product_name=product.name,
            quantity=line.quantity,
            price=product.price,
        ))
    return items


def order_total(items: Iterable[OrderItem]) -> Decimal:
    return sum((it.line_total for it in items), ZERO)


def _status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationFailure(f"Unknown order status {value!r}")


def add_order(store: RecordStore, customer_id: str, items, status=OrderStatus.PENDING,
              order_date=None) -> Order:
    status = _status(status)
    when = to_datetime(order_date if order_date is not None else date.today())
    customer = store.get_customer(customer_id)
    lines = snapshot_items(store, items)
    total = order_total(lines)
    order = Order(
        customer_id=customer.id,
        customer_name=customer.name,
        items=lines,
        total_amount=total,
        status=status,
        order_date=when,
        delivery_date=datetime.now() if status == OrderStatus.DELIVERED else None,
    )
    store.insert_order(order)
    on_order_created(store, customer.id, total)
    logger.info("Created order %s for customer %s totalling %s", order.id, customer.id, total)
    return order


def update_order(store: RecordStore, order_id: str, customer_id: Optional[str] = None,
                 items=None, status=None, order_date=None) -> Order:
    """Replace the given fields of an order.

    Customer balances are not touched: an edited total or owner is only
    reflected in the aggregates after ``reconcile_customer``.
    """
    order = store.get_order(order_id)
    changes = {}
    if customer_id is not None and customer_id != order.customer_id:
        customer = store.get_customer(customer_id)
        changes["customer_id"] = customer.id
        changes["customer_name"] = customer.name
    if items is not None:
        lines = snapshot_items(store, items)
        changes["items"] = lines
        changes["total_amount"] = order_total(lines)
    if order_date is not None:
        changes["order_date"] = to_datetime(order_date)
    if status is not None:
        status = _status(status)
        if status != order.status:
            changes["status"] = status
            changes["delivery_date"] = datetime.now() if status == OrderStatus.DELIVERED else None
    updated = order.model_copy(update=changes)
    store.replace_order(updated)
    return updated


def toggle_order_status(store: RecordStore, order_id: str) -> Order:
    order = store.get_order(order_id)
    new_status = OrderStatus.DELIVERED if order.status == OrderStatus.PENDING else OrderStatus.PENDING
    return update_order(store, order_id, status=new_status)


def delete_order(store: RecordStore, order_id: str):
    # Billed amounts stay on the customer's aggregates
    store.remove_order(order_id)
    logger.info("Deleted order %s", order_id)
