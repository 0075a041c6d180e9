from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.shared.schemas import Money, ResponseBaseModel

# ===== REQUEST SCHEMAS =====

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del producto")
    description: str = Field(..., min_length=1, description="Descripción del producto")
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Precio unitario")

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)

# ===== RESPONSE SCHEMAS =====

class ProductResponse(ResponseBaseModel):
    id: int
    name: str
    description: str
    price: Money
    created_at: datetime
    updated_at: datetime
