# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import ProductCreate, ProductOut, ProductPage, ProductUpdate
from storefront.services.product_service import ProductService
from storefront.utils.settings import DEFAULT_PAGE_SIZE

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductPage)
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    db: Session = Depends(get_db),
):
    return ProductService(db).list_products(page, limit)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except StorefrontError as e:
        raise to_http(e)


@router.post("", response_model=ProductOut, status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return ProductService(db).create_product(payload)


@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    try:
        return ProductService(db).update_product(product_id, payload)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        ProductService(db).deactivate_product(product_id)
    except StorefrontError as e:
        raise to_http(e)
