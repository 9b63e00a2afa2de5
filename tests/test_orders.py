from datetime import datetime
from decimal import Decimal

import pytest

from milkledger.core.errors import NotFound, ValidationFailure
from milkledger.ledger import add_order, delete_order, toggle_order_status, update_order
from milkledger.schemas import OrderStatus


def test_add_order_snapshots_products_and_totals(store, milk, curd, alice):
    order = add_order(store, alice.id, [(milk.id, 2), {"product_id": curd.id, "quantity": 3}],
                      order_date="2024-03-15")

    assert order.customer_name == "Alice"
    assert [(it.product_name, it.quantity, it.price) for it in order.items] == [
        ("Cow Milk 1L", 2, Decimal("60")),
        ("Curd 500g", 3, Decimal("35")),
    ]
    assert order.total_amount == Decimal("225")
    assert order.status == OrderStatus.PENDING
    assert order.delivery_date is None
    assert order.order_date == datetime(2024, 3, 15)

    customer = store.get_customer(alice.id)
    assert customer.total_orders == 1
    assert customer.total_amount == Decimal("225")
    assert customer.pending_balance == Decimal("225")


def test_price_change_does_not_touch_existing_orders(store, milk, alice):
    order = add_order(store, alice.id, [(milk.id, 1)])
    store.update_product(milk.id, price=Decimal("70"), name="Buffalo Milk 1L")

    stored = store.get_order(order.id)
    assert stored.total_amount == Decimal("60")
    assert stored.items[0].product_name == "Cow Milk 1L"


def test_order_created_as_delivered_gets_delivery_date(store, milk, alice):
    order = add_order(store, alice.id, [(milk.id, 1)], status="delivered")
    assert order.status == OrderStatus.DELIVERED
    assert order.delivery_date is not None


@pytest.mark.parametrize("items", [[], [("missing-qty",)], [("x", 0)]])
def test_bad_items_are_rejected_before_any_write(store, milk, alice, items):
    with pytest.raises(ValidationFailure):
        add_order(store, alice.id, items)
    assert store.orders == []
    assert store.get_customer(alice.id).total_orders == 0


def test_unknown_references(store, milk, alice):
    with pytest.raises(NotFound):
        add_order(store, "ghost", [(milk.id, 1)])
    with pytest.raises(NotFound):
        add_order(store, alice.id, [("ghost", 1)])
    with pytest.raises(ValidationFailure):
        add_order(store, alice.id, [(milk.id, 1)], status="cancelled")
    assert store.orders == []


def test_update_order_replaces_fields_without_rebilling(store, milk, curd, alice, bob):
    order = add_order(store, alice.id, [(milk.id, 1)], order_date="2024-03-01")

    updated = update_order(store, order.id, customer_id=bob.id, items=[(curd.id, 4)], order_date="2024-03-02")

    assert updated.customer_name == "Bob"
    assert updated.total_amount == Decimal("140")
    assert updated.order_date == datetime(2024, 3, 2)
    assert store.get_order(order.id) == updated
    assert store.get_customer(alice.id).total_amount == Decimal("60")
    assert store.get_customer(bob.id).total_amount == 0


def test_toggle_status_sets_and_clears_delivery_date(store, milk, alice):
    order = add_order(store, alice.id, [(milk.id, 1)])

    delivered = toggle_order_status(store, order.id)
    assert delivered.status == OrderStatus.DELIVERED
    assert delivered.delivery_date is not None

    pending = toggle_order_status(store, order.id)
    assert pending.status == OrderStatus.PENDING
    assert pending.delivery_date is None


def test_delete_order_keeps_billing(store, milk, alice):
    order = add_order(store, alice.id, [(milk.id, 1)])
    delete_order(store, order.id)
    assert store.orders == []
    assert store.get_customer(alice.id).total_amount == Decimal("60")
    with pytest.raises(NotFound):
        delete_order(store, order.id)
