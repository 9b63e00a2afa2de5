from datetime import date
from decimal import Decimal

from milkledger.ledger import add_order, get_daily_product_sales, get_dashboard_stats, make_payment


def test_daily_selling_only_counts_that_day(store, milk, alice):
    store.update_product(milk.id, price=Decimal("50"))
    add_order(store, alice.id, [(milk.id, 1)], order_date="2024-03-15T09:00")
    store.update_product(milk.id, price=Decimal("30"))
    add_order(store, alice.id, [(milk.id, 1)], status="delivered", order_date="2024-03-16")
    make_payment(store, alice.id, "20", "2024-03-15T18:00")
    make_payment(store, alice.id, "5", "2024-03-14")

    stats = get_dashboard_stats(store, "2024-03-15")

    assert stats.daily_selling == Decimal("50")
    assert stats.daily_collection == Decimal("20")
    assert stats.total_customers == 1
    assert stats.total_orders == 2
    assert stats.pending_orders == 1
    assert stats.delivered_orders == 1
    assert stats.total_pending == Decimal("55")


def test_day_boundaries_are_included(store, milk, alice):
    add_order(store, alice.id, [(milk.id, 1)], order_date="2024-03-15T00:00:00")
    add_order(store, alice.id, [(milk.id, 2)], order_date="2024-03-15T23:59:59.999999")
    add_order(store, alice.id, [(milk.id, 4)], order_date="2024-03-16T00:00:00")

    assert get_dashboard_stats(store, "2024-03-15").daily_selling == Decimal("180")


def test_stats_are_a_pure_function_of_state(store, milk, alice):
    add_order(store, alice.id, [(milk.id, 1)], order_date="2024-03-15")
    assert get_dashboard_stats(store, "2024-03-15") == get_dashboard_stats(store, "2024-03-15")


def test_stats_default_to_today(store, milk, alice):
    add_order(store, alice.id, [(milk.id, 1)], order_date=date.today())
    assert get_dashboard_stats(store).daily_selling == Decimal("60")


def test_empty_store(store):
    stats = get_dashboard_stats(store, "2024-03-15")
    assert stats.daily_selling == 0
    assert stats.total_orders == 0


def test_product_sales_keep_first_appearance_order(store, milk, curd, alice, bob):
    add_order(store, alice.id, [(curd.id, 1), (milk.id, 2)], order_date="2024-03-15T06:00")
    store.update_product(milk.id, name="Cow Milk (new pack)")
    add_order(store, bob.id, [(milk.id, 3)], order_date="2024-03-15T07:00")
    add_order(store, bob.id, [(milk.id, 10)], order_date="2024-03-14")

    sales = get_daily_product_sales(store, "2024-03-15")

    assert [(s.product_name, s.total_quantity) for s in sales] == [
        ("Curd 500g", 1),
        ("Cow Milk 1L", 5),
    ]


def test_product_sales_for_quiet_day(store):
    assert get_daily_product_sales(store, "2024-03-15") == []
