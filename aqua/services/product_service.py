# aqua/services/product_service.py

import math
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aqua.models.product import Product


async def get_product(session: AsyncSession, product_id: UUID) -> Product | None:
    return await session.get(Product, product_id)


async def list_products(
    session: AsyncSession,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    category: str = "",
    is_active: Optional[bool] = None,
) -> dict:
    query = select(Product)

    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
    if category:
        query = query.where(Product.category == category)
    if is_active is not None:
        query = query.where(Product.is_active == is_active)

    total = (await session.execute(
        select(func.count()).select_from(query.subquery())
    )).scalar_one()

    result = await session.execute(
        query.order_by(Product.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )

    return {
        "products": result.scalars().all(),
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if limit else 0,
        },
    }


async def create_product(session: AsyncSession, data: dict) -> Product:
    product = Product(**data)
    session.add(product)
    await session.commit()
    await session.refresh(product)
    return product


async def update_product(session: AsyncSession, product: Product, changes: dict) -> Product:
    for field, value in changes.items():
        # description is the only column that can be cleared
        if value is None and field != "description":
            continue
        setattr(product, field, value)
    product.updated_at = datetime.utcnow()

    session.add(product)
    await session.commit()
    await session.refresh(product)
    return product


async def remove_product(session: AsyncSession, product: Product, hard_delete: bool = False) -> Product | None:
    """Soft delete (is_active=False) by default; hard_delete removes the row."""
    if hard_delete:
        await session.delete(product)
        await session.commit()
        return None

    return await update_product(session, product, {"is_active": False})
