from fastapi import APIRouter, Depends
from typing import List, Optional

from milkledger.api.deps import get_store
from milkledger.schemas import Product, ProductCreate, ProductUpdate
from milkledger.store import RecordStore

router = APIRouter()

@router.get('/', response_model=List[Product])
def list_products(q: Optional[str] = None, store: RecordStore = Depends(get_store)):
    return store.list_products(search=q)

@router.get('/{product_id}', response_model=Product)
def get_product(product_id: str, store: RecordStore = Depends(get_store)):
    return store.get_product(product_id)

@router.post('/', response_model=Product, status_code=201)
def create_product(payload: ProductCreate, store: RecordStore = Depends(get_store)):
    return store.add_product(payload.name, payload.price)

@router.patch('/{product_id}', response_model=Product)
def update_product(product_id: str, payload: ProductUpdate, store: RecordStore = Depends(get_store)):
    return store.update_product(product_id, **payload.model_dump(exclude_unset=True))

@router.delete('/{product_id}', status_code=204)
def delete_product(product_id: str, store: RecordStore = Depends(get_store)):
    store.delete_product(product_id)
