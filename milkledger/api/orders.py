from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from milkledger.api.deps import get_store, ledger_filter
from milkledger.ledger import add_order, delete_order, get_filtered_orders, toggle_order_status, update_order
from milkledger.schemas import LedgerFilter, Order, OrderCreate, OrderUpdate
from milkledger.store import RecordStore

router = APIRouter()

@router.get('/', response_model=List[Order])
def list_orders(
    q: Optional[str] = Query(default=None, description="Match customer or product name"),
    flt: LedgerFilter = Depends(ledger_filter),
    store: RecordStore = Depends(get_store),
):
    orders = get_filtered_orders(store, flt)
    if q:
        matching = {o.id for o in store.list_orders(search=q)}
        orders = [o for o in orders if o.id in matching]
    return orders

@router.post('/', response_model=Order, status_code=201)
def create_order(payload: OrderCreate, store: RecordStore = Depends(get_store)):
    return add_order(store, payload.customer_id, payload.items, payload.status, payload.order_date)

@router.get('/{order_id}', response_model=Order)
def get_order(order_id: str, store: RecordStore = Depends(get_store)):
    return store.get_order(order_id)

@router.patch('/{order_id}', response_model=Order)
def edit_order(order_id: str, payload: OrderUpdate, store: RecordStore = Depends(get_store)):
    return update_order(store, order_id, **payload.model_dump(exclude_unset=True, exclude_none=True))

@router.post('/{order_id}/toggle-status', response_model=Order)
def toggle_status(order_id: str, store: RecordStore = Depends(get_store)):
    return toggle_order_status(store, order_id)

@router.delete('/{order_id}', status_code=204)
def remove_order(order_id: str, store: RecordStore = Depends(get_store)):
    delete_order(store, order_id)
