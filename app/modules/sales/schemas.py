from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator

from app.shared.schemas import Money, ResponseBaseModel

# ==================== REQUEST SCHEMAS ====================

class SaleCreateRequest(BaseModel):
    product_id: int = Field(
        ...,
        gt=0,
        validation_alias=AliasChoices("product_id", "product"),
        description="ID del producto vendido"
    )
    amount: Optional[Decimal] = Field(
        None,
        gt=0,
        max_digits=12,
        decimal_places=2,
        description="Monto de la venta; por defecto el precio actual del producto"
    )

class SaleUpdateRequest(BaseModel):
    """
    Actualización de una venta. No incluye is_commission_paid (solo cambia
    vía marcado masivo) y no recalcula la comisión.
    """
    product_id: Optional[int] = Field(
        None,
        gt=0,
        validation_alias=AliasChoices("product_id", "product")
    )
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)

class MarkCommissionsPaidRequest(BaseModel):
    agent_id: int = Field(..., gt=0, description="Agente cuyas comisiones se pagan")
    start_date: datetime = Field(..., description="Inicio del rango (inclusive)")
    end_date: Optional[datetime] = Field(None, description="Fin del rango (inclusive); por defecto ahora")

    @model_validator(mode="after")
    def validate_range(self):
        if self.end_date is not None and self.start_date > self.end_date:
            raise ValueError("start_date debe ser anterior o igual a end_date")
        return self

# ==================== RESPONSE SCHEMAS ====================

class AgentInfo(ResponseBaseModel):
    id: int
    name: str
    email: str

class ProductInfo(ResponseBaseModel):
    id: int
    name: str
    price: Money

class SaleResponse(ResponseBaseModel):
    id: int
    amount: Money
    commission: Money
    is_commission_paid: bool
    agent: AgentInfo
    product: ProductInfo
    created_at: datetime
    updated_at: datetime

class UserSalesByDateResponse(BaseModel):
    total_sales: Money = Decimal("0")
    total_commission: Money = Decimal("0")

class AgentCommissionSummary(BaseModel):
    agent: AgentInfo
    total_sales_amount: Money
    total_commission: Money

class MarkCommissionsPaidResponse(BaseModel):
    modified_count: int

class EmailDispatchResponse(BaseModel):
    message: str
    jobs_enqueued: int
