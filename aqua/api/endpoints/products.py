# aqua/api/endpoints/products.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_current_user, get_db_session
from aqua.core.rbac import RequireCapability
from aqua.models.user import User
from aqua.schemas.product import ProductCreate, ProductPage, ProductRead, ProductUpdate
from aqua.services.product_service import (
    create_product,
    get_product,
    list_products,
    remove_product,
    update_product,
)

router = APIRouter(prefix="/api/products", tags=["Products"])

require_catalog_manager = RequireCapability("can_manage_products")


@router.get("/", response_model=ProductPage)
async def list_products_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    category: str = Query(""),
    is_active: Optional[bool] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user),
):
    return await list_products(
        session, page=page, limit=limit, search=search, category=category, is_active=is_active
    )


@router.get("/{product_id}", response_model=ProductRead)
async def get_product_endpoint(
    product_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user),
):
    product = await get_product(session, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product_endpoint(
    data: ProductCreate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_catalog_manager),
):
    return await create_product(session, data.model_dump())


@router.patch("/{product_id}", response_model=ProductRead)
async def update_product_endpoint(
    product_id: UUID,
    data: ProductUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_catalog_manager),
):
    product = await get_product(session, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return await update_product(session, product, data.model_dump(exclude_unset=True))


@router.delete("/{product_id}")
async def delete_product_endpoint(
    product_id: UUID,
    hard_delete: bool = Query(False),
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_catalog_manager),
):
    product = await get_product(session, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    await remove_product(session, product, hard_delete=hard_delete)

    if hard_delete:
        return {"detail": "Product deleted successfully"}
    return {"detail": "Product deactivated successfully"}
