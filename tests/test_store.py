from decimal import Decimal
import json

import pytest

from milkledger.core.errors import NotFound, StorageCorrupted, ValidationFailure
from milkledger.ledger import add_order, make_payment
from milkledger.schemas import OrderStatus
from milkledger.store import RecordStore, RedisBackend
from tests.conftest import FakeRedis


def test_add_customer_starts_with_zero_aggregates(store):
    c = store.add_customer("Meena", "98111", "Ward 4")
    assert c.total_orders == 0
    assert c.total_amount == 0
    assert c.paid_amount == 0
    assert c.pending_balance == 0
    assert store.get_customer(c.id) == c


def test_add_customer_requires_name(store):
    with pytest.raises(ValidationFailure):
        store.add_customer("  ")
    assert store.customers == []


def test_update_product_is_partial(store, milk):
    updated = store.update_product(milk.id, price=Decimal("65"))
    assert updated.name == "Cow Milk 1L"
    assert updated.price == Decimal("65")
    assert store.get_product(milk.id).price == Decimal("65")


def test_update_product_rejects_negative_price(store, milk):
    with pytest.raises(ValidationFailure):
        store.update_product(milk.id, price=Decimal("-1"))
    assert store.get_product(milk.id).price == Decimal("60")


def test_updates_reject_blank_names(store, milk, alice):
    with pytest.raises(ValidationFailure):
        store.update_customer(alice.id, name="   ")
    with pytest.raises(ValidationFailure):
        store.update_product(milk.id, name="")
    assert store.get_customer(alice.id).name == "Alice"
    assert store.get_product(milk.id).name == "Cow Milk 1L"


def test_update_customer_cannot_write_aggregates(store, alice):
    with pytest.raises(ValidationFailure):
        store.update_customer(alice.id, pending_balance=Decimal("0"))


def test_unknown_ids_raise_not_found(store):
    with pytest.raises(NotFound):
        store.update_product("nope", name="x")
    with pytest.raises(NotFound):
        store.delete_customer("nope")
    with pytest.raises(NotFound):
        store.remove_order("nope")


def test_delete_customer_cascades_orders_not_payments(store, milk, alice, bob):
    add_order(store, alice.id, [(milk.id, 1)], order_date="2024-01-01")
    add_order(store, alice.id, [(milk.id, 2)], order_date="2024-01-02")
    kept = add_order(store, bob.id, [(milk.id, 1)], order_date="2024-01-02")
    make_payment(store, alice.id, Decimal("50"), "2024-01-03")

    store.delete_customer(alice.id)

    assert [o.id for o in store.orders] == [kept.id]
    assert [p.customer_name for p in store.list_payments()] == ["Alice"]


def test_search(store, milk, curd, alice, bob):
    add_order(store, alice.id, [(milk.id, 1)])
    add_order(store, bob.id, [(curd.id, 1)], status=OrderStatus.DELIVERED)
    assert [p.name for p in store.list_products("CURD")] == ["Curd 500g"]
    assert [c.name for c in store.list_customers("9800000002")] == ["Bob"]
    assert [c.name for c in store.list_customers("dairy lane")] == ["Alice", "Bob"]
    assert [o.customer_name for o in store.list_orders(search="milk")] == ["Alice"]
    assert [o.customer_name for o in store.list_orders(status=OrderStatus.DELIVERED)] == ["Bob"]


def test_collections_are_written_back_and_reloaded(backend, store, milk, alice):
    add_order(store, alice.id, [(milk.id, 3)], order_date="2024-02-01")
    make_payment(store, alice.id, "100", "2024-02-02")

    reloaded = RecordStore(backend)
    assert [p.name for p in reloaded.products] == ["Cow Milk 1L"]
    customer = reloaded.get_customer(alice.id)
    assert customer.total_amount == Decimal("180")
    assert customer.pending_balance == Decimal("80")
    assert reloaded.orders[0].items[0].price == Decimal("60")
    assert reloaded.payments[0].amount == Decimal("100")


def test_redis_backend_stores_json_lists():
    fake = FakeRedis()
    store = RecordStore(RedisBackend(fake, prefix="test"))
    store.add_product("Paneer", Decimal("80"))

    raw = json.loads(fake.data["test:products"])
    assert raw[0]["name"] == "Paneer"
    assert raw[0]["price"] == "80"
    assert RecordStore(RedisBackend(fake, prefix="test")).products[0].name == "Paneer"


def test_unreadable_collection_stops_the_store_from_loading():
    fake = FakeRedis()
    truncated = '[{"id": "c1", "name": "Alice"'
    fake.data["test:customers"] = truncated

    with pytest.raises(StorageCorrupted):
        RecordStore(RedisBackend(fake, prefix="test"))

    assert fake.data["test:customers"] == truncated


def test_non_list_collection_is_rejected():
    fake = FakeRedis()
    fake.data["test:products"] = '{"id": "p1"}'
    with pytest.raises(StorageCorrupted):
        RedisBackend(fake, prefix="test").load("products")
