from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Optional
import uuid

from pydantic import BaseModel, BeforeValidator, EmailStr, Field, computed_field


def new_id() -> str:
    return uuid.uuid4().hex


def parse_datetime(value):
    """Coerce ISO strings, dates and datetimes onto one naive local timeline.

    ``"2024-03-15"`` becomes midnight of that day; offset-aware values are
    converted to local time before the offset is dropped.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


When = Annotated[datetime, BeforeValidator(parse_datetime)]


class OrderStatus(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"


# --- stored records ---

class Product(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    price: Decimal = Field(ge=0)
    created_at: When = Field(default_factory=datetime.now)

class Customer(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    phone: str = ''
    address: str = ''
    total_orders: int = 0
    total_amount: Decimal = Decimal('0')
    paid_amount: Decimal = Decimal('0')
    pending_balance: Decimal = Decimal('0')
    created_at: When = Field(default_factory=datetime.now)

class OrderItem(BaseModel):
    product_id: str
    product_name: str
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

class Order(BaseModel):
    id: str = Field(default_factory=new_id)
    customer_id: str
    customer_name: str
    items: List[OrderItem]
    total_amount: Decimal
    status: OrderStatus = OrderStatus.PENDING
    order_date: When
    delivery_date: Optional[When] = None
    created_at: When = Field(default_factory=datetime.now)

class Payment(BaseModel):
    id: str = Field(default_factory=new_id)
    customer_id: str
    customer_name: str
    amount: Decimal = Field(gt=0)
    payment_date: When
    created_at: When = Field(default_factory=datetime.now)

class User(BaseModel):
    id: str = Field(default_factory=new_id)
    email: EmailStr
    name: str
    password_hash: str
    created_at: When = Field(default_factory=datetime.now)


# --- request payloads ---

class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0)

class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = ''
    address: str = ''
class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None

class OrderLine(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
class OrderCreate(BaseModel):
    customer_id: str
    items: List[OrderLine] = Field(min_length=1)
    status: OrderStatus = OrderStatus.PENDING
    order_date: Optional[When] = None
class OrderUpdate(BaseModel):
    customer_id: Optional[str] = None
    items: Optional[List[OrderLine]] = Field(default=None, min_length=1)
    status: Optional[OrderStatus] = None
    order_date: Optional[When] = None

class PaymentCreate(BaseModel):
    # Positivity is checked by the ledger so every caller gets the same error
    amount: Decimal
    payment_date: Optional[When] = None

class RegisterPayload(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)
class LoginPayload(BaseModel):
    email: EmailStr
    password: str
class UserRead(BaseModel):
    id: str
    email: EmailStr
    name: str
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'


# --- filters and computed views ---

class LedgerFilter(BaseModel):
    """Criteria shared by order/payment listings and statements.

    Every field is optional; a missing field imposes no constraint.

    - ``date_from`` / ``date_to``: inclusive bounds on the order or payment
      date, compared at full date-time resolution.
    - ``customer_id``: exact owner match.
    - ``product_id``: orders only; some line item must reference it.
    - ``status``: orders only; exact status match.
    """
    date_from: Optional[When] = None
    date_to: Optional[When] = None
    customer_id: Optional[str] = None
    product_id: Optional[str] = None
    status: Optional[OrderStatus] = None

class DashboardStats(BaseModel):
    daily_selling: Decimal
    daily_collection: Decimal
    total_customers: int
    total_orders: int
    pending_orders: int
    delivered_orders: int
    total_pending: Decimal

class ProductSale(BaseModel):
    product_name: str
    total_quantity: int

class Transaction(BaseModel):
    date: datetime
    kind: str  # "order" | "payment"
    description: str
    billed: Decimal
    paid: Decimal
    customer_name: str

class CustomerStatement(BaseModel):
    customer_id: str
    customer_name: str
    transactions: List[Transaction] = []
    total_billed: Decimal = Decimal('0')
    total_paid: Decimal = Decimal('0')

    @computed_field
    @property
    def pending(self) -> Decimal:
        # Period figure, may go negative when the customer overpaid in the window
        return self.total_billed - self.total_paid

class StatementReport(BaseModel):
    business_name: str
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    statements: List[CustomerStatement]
    total_billed: Decimal
    total_paid: Decimal

    @computed_field
    @property
    def total_pending(self) -> Decimal:
        return self.total_billed - self.total_paid

class LedgerEntry(BaseModel):
    id: str
    date: datetime
    kind: str
    description: str
    items: Optional[List[OrderItem]] = None
    change: Decimal
    balance: Decimal
