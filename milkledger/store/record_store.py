import logging
from decimal import Decimal
from typing import Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from milkledger.core.errors import NotFound, ValidationFailure
from milkledger.schemas import Customer, Order, OrderStatus, Payment, Product, User

logger = logging.getLogger(__name__)

COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "products": Product,
    "customers": Customer,
    "orders": Order,
    "payments": Payment,
    "users": User,
}

PRODUCT_FIELDS = {"name", "price"}
CUSTOMER_FIELDS = {"name", "phone", "address"}


class RecordStore:
    """Holds the ledger collections and writes each one back after a change.

    The store only keeps data consistent at the record level (ids, cascades,
    field validation). Money-affecting operations live in ``milkledger.ledger``
    and call the mutators here.
    """

    def __init__(self, backend):
        self.backend = backend
        self.products: List[Product] = self._load("products")
        self.customers: List[Customer] = self._load("customers")
        self.orders: List[Order] = self._load("orders")
        self.payments: List[Payment] = self._load("payments")
        self.users: List[User] = self._load("users")

    def _load(self, collection: str):
        model = COLLECTIONS[collection]
        return [model.model_validate(raw) for raw in self.backend.load(collection)]

    def _persist(self, collection: str):
        records = getattr(self, collection)
        self.backend.save(collection, [r.model_dump(mode="json") for r in records])

    @staticmethod
    def _find(records, record_id: str, kind: str):
        for r in records:
            if r.id == record_id:
                return r
        raise NotFound(kind, record_id)

    @staticmethod
    def _apply(record, fields: dict, allowed: set, kind: str):
        unknown = set(fields) - allowed
        if unknown:
            raise ValidationFailure(f"Cannot update {kind} field(s): {', '.join(sorted(unknown))}")
        if "name" in fields and not str(fields["name"] or "").strip():
            raise ValidationFailure(f"{kind.capitalize()} name is required")
        data = record.model_dump()
        data.update(fields)
        try:
            return type(record).model_validate(data)
        except ValidationError as e:
            raise ValidationFailure(str(e)) from e

    @staticmethod
    def _replace(records, updated):
        for i, r in enumerate(records):
            if r.id == updated.id:
                records[i] = updated
                return

    # --- products ---

    def add_product(self, name: str, price) -> Product:
        if not name or not name.strip():
            raise ValidationFailure("Product name is required")
        try:
            product = Product(name=name, price=price)
        except ValidationError as e:
            raise ValidationFailure(str(e)) from e
        self.products.append(product)
        self._persist("products")
        logger.info("Added product %s (%s)", product.id, product.name)
        return product

    def get_product(self, product_id: str) -> Product:
        return self._find(self.products, product_id, "Product")

    def list_products(self, search: Optional[str] = None) -> List[Product]:
        if not search:
            return list(self.products)
        term = search.lower()
        return [p for p in self.products if term in p.name.lower()]

    def update_product(self, product_id: str, **fields) -> Product:
        product = self._apply(self.get_product(product_id), fields, PRODUCT_FIELDS, "product")
        self._replace(self.products, product)
        self._persist("products")
        return product

    def delete_product(self, product_id: str):
        self.get_product(product_id)
        self.products = [p for p in self.products if p.id != product_id]
        self._persist("products")
        logger.info("Deleted product %s", product_id)

    # --- customers ---

    def add_customer(self, name: str, phone: str = "", address: str = "") -> Customer:
        if not name or not name.strip():
            raise ValidationFailure("Customer name is required")
        customer = Customer(name=name, phone=phone, address=address)
        self.customers.append(customer)
        self._persist("customers")
        logger.info("Added customer %s (%s)", customer.id, customer.name)
        return customer

    def get_customer(self, customer_id: str) -> Customer:
        return self._find(self.customers, customer_id, "Customer")

    def list_customers(self, search: Optional[str] = None) -> List[Customer]:
        if not search:
            return list(self.customers)
        term = search.lower()
        return [
            c for c in self.customers
            if term in c.name.lower() or search in c.phone or term in c.address.lower()
        ]

    def update_customer(self, customer_id: str, **fields) -> Customer:
        customer = self._apply(self.get_customer(customer_id), fields, CUSTOMER_FIELDS, "customer")
        self._replace(self.customers, customer)
        self._persist("customers")
        return customer

    def set_customer_totals(self, customer_id: str, total_orders: int, total_amount: Decimal,
                            paid_amount: Decimal, pending_balance: Decimal) -> Customer:
        customer = self.get_customer(customer_id)
        customer.total_orders = total_orders
        customer.total_amount = total_amount
        customer.paid_amount = paid_amount
        customer.pending_balance = pending_balance
        self._persist("customers")
        return customer

    def delete_customer(self, customer_id: str):
        """Remove a customer and their orders. Payments are kept."""
        self.get_customer(customer_id)
        self.customers = [c for c in self.customers if c.id != customer_id]
        before = len(self.orders)
        self.orders = [o for o in self.orders if o.customer_id != customer_id]
        self._persist("customers")
        self._persist("orders")
        logger.info("Deleted customer %s and %d order(s)", customer_id, before - len(self.orders))

    # --- orders ---

    def insert_order(self, order: Order) -> Order:
        self.orders.append(order)
        self._persist("orders")
        return order

    def get_order(self, order_id: str) -> Order:
        return self._find(self.orders, order_id, "Order")

    def list_orders(self, search: Optional[str] = None, status: Optional[OrderStatus] = None) -> List[Order]:
        result = list(self.orders)
        if status is not None:
            result = [o for o in result if o.status == status]
        if search:
            term = search.lower()
            result = [
                o for o in result
                if term in o.customer_name.lower()
                or any(term in it.product_name.lower() for it in o.items)
            ]
        return result

    def replace_order(self, order: Order) -> Order:
        self.get_order(order.id)
        self._replace(self.orders, order)
        self._persist("orders")
        return order

    def remove_order(self, order_id: str):
        self.get_order(order_id)
        self.orders = [o for o in self.orders if o.id != order_id]
        self._persist("orders")

    # --- payments (append-only) ---

    def insert_payment(self, payment: Payment) -> Payment:
        self.payments.append(payment)
        self._persist("payments")
        return payment

    def list_payments(self) -> List[Payment]:
        return list(self.payments)

    # --- users ---

    def add_user(self, user: User) -> User:
        self.users.append(user)
        self._persist("users")
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        return next((u for u in self.users if u.email.lower() == email), None)
