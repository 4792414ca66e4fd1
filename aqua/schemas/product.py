from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from aqua.schemas.customer import Pagination


class ProductCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category: str
    unit_price: float = Field(ge=0)
    unit_type: str = "piece"
    is_active: bool = True


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    unit_price: Optional[float] = Field(default=None, ge=0)
    unit_type: Optional[str] = None
    is_active: Optional[bool] = None


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    category: str
    unit_price: float
    unit_type: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductPage(BaseModel):
    products: List[ProductRead]
    pagination: Pagination
