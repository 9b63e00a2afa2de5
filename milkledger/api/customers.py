from fastapi import APIRouter, Depends
from typing import List, Optional

from milkledger.api.deps import get_store
from milkledger.ledger import make_payment, reconcile_customer, running_balance
from milkledger.schemas import Customer, CustomerCreate, CustomerUpdate, LedgerEntry, Payment, PaymentCreate
from milkledger.store import RecordStore

router = APIRouter()

@router.get('/', response_model=List[Customer])
def list_customers(q: Optional[str] = None, store: RecordStore = Depends(get_store)):
    return store.list_customers(search=q)

@router.post('/', response_model=Customer, status_code=201)
def create_customer(payload: CustomerCreate, store: RecordStore = Depends(get_store)):
    return store.add_customer(payload.name, payload.phone, payload.address)

@router.get('/{customer_id}', response_model=Customer)
def get_customer(customer_id: str, store: RecordStore = Depends(get_store)):
    return store.get_customer(customer_id)

@router.patch('/{customer_id}', response_model=Customer)
def update_customer(customer_id: str, payload: CustomerUpdate, store: RecordStore = Depends(get_store)):
    return store.update_customer(customer_id, **payload.model_dump(exclude_unset=True))

@router.delete('/{customer_id}', status_code=204)
def delete_customer(customer_id: str, store: RecordStore = Depends(get_store)):
    store.delete_customer(customer_id)

@router.get('/{customer_id}/ledger', response_model=List[LedgerEntry])
def customer_ledger(customer_id: str, store: RecordStore = Depends(get_store)):
    return running_balance(store, customer_id)

@router.post('/{customer_id}/payments', response_model=Payment, status_code=201)
def record_payment(customer_id: str, payload: PaymentCreate, store: RecordStore = Depends(get_store)):
    return make_payment(store, customer_id, payload.amount, payload.payment_date)

@router.post('/{customer_id}/reconcile', response_model=Customer)
def reconcile(customer_id: str, store: RecordStore = Depends(get_store)):
    return reconcile_customer(store, customer_id)
