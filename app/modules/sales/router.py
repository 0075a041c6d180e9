# app/modules/sales/router.py
import re
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.core.auth.dependencies import get_current_user, require_roles
from app.core.exceptions import ValidationError
from app.shared.database.models import User
from app.shared.notifications import NotificationQueue
from app.shared.notifications.dependencies import get_notification_queue
from .schemas import (
    AgentCommissionSummary, EmailDispatchResponse, MarkCommissionsPaidRequest,
    MarkCommissionsPaidResponse, SaleCreateRequest, SaleResponse,
    SaleUpdateRequest, UserSalesByDateResponse
)
from .service import SalesService

router = APIRouter(prefix="/sales", tags=["Sales"])

def get_sales_service(
    db: Session = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notification_queue)
) -> SalesService:
    return SalesService(
        db,
        notifications=notifications,
        commission_rate=settings.sales_commission_percentage
    )

# Un "+02:00" sin codificar llega como " 02:00" tras decodificar el query string
SPACED_OFFSET = re.compile(r"(\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?) (\d{2}:?\d{2})$")

def parse_date(value: Optional[str], field: str) -> Optional[datetime]:
    """
    Fecha ISO 8601 del query string; vacía equivale a no enviada.
    Acepta "Z" y offsets positivos con el "+" sin codificar.
    """
    if value is None or not value.strip():
        return None
    try:
        return datetime.fromisoformat(SPACED_OFFSET.sub(r"\1+\2", value.strip()))
    except ValueError:
        raise ValidationError(f"{field} no es una fecha válida: {value}")

def parse_required_date(value: str, field: str) -> datetime:
    parsed = parse_date(value, field)
    if parsed is None:
        raise ValidationError(f"{field} es requerido")
    return parsed

# ==================== REGISTRO ====================

@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def record_sale(
    sale_data: SaleCreateRequest,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """
    Registrar una venta del usuario autenticado.

    - **product_id**: producto vendido (también acepta `product`)
    - **amount**: monto; si se omite se usa el precio actual del producto
    """
    return await service.record_sale(sale_data, agent_id=current_user.id)

@router.get("", response_model=List[SaleResponse])
async def list_sales(
    current_user: User = Depends(require_roles(["admin"])),
    service: SalesService = Depends(get_sales_service)
):
    return await service.find_all()

# ==================== CONSULTAS DEL AGENTE ====================

@router.get("/user", response_model=List[SaleResponse])
async def get_user_sales(
    email: Optional[str] = Query(None, description="Email del agente; por defecto el usuario autenticado"),
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    if email:
        return await service.find_user_sales_by_email(email)
    return await service.find_user_sales(current_user.id)

@router.get("/user/grouped", response_model=List[AgentCommissionSummary])
async def get_grouped_unpaid_commission(
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """Totales de ventas y comisiones pendientes por agente"""
    return await service.grouped_agent_unpaid_commission()

@router.get("/user/date", response_model=UserSalesByDateResponse)
async def get_user_sales_by_date(
    start_date: str = Query(..., description="Inicio del rango (inclusive), ISO 8601"),
    end_date: Optional[str] = Query(None, description="Fin del rango (inclusive); por defecto ahora"),
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    return await service.get_user_sales_by_date(
        start_date=parse_required_date(start_date, "start_date"),
        end_date=parse_date(end_date, "end_date"),
        agent_id=current_user.id
    )

# ==================== REPORTES ====================

@router.get("/email", response_model=EmailDispatchResponse)
async def send_sales_by_email(
    start_date: str = Query(..., description="Inicio del periodo (inclusive), ISO 8601"),
    end_date: Optional[str] = Query(None, description="Fin del periodo (exclusivo); por defecto ahora"),
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    """Encolar un reporte de ventas por agente para el periodo"""
    return await service.send_user_sales_by_email(
        start_date=parse_required_date(start_date, "start_date"),
        end_date=parse_date(end_date, "end_date")
    )

@router.patch("/commissions/paid", response_model=MarkCommissionsPaidResponse)
async def mark_commissions_as_paid(
    payload: MarkCommissionsPaidRequest,
    current_user: User = Depends(require_roles(["admin"])),
    service: SalesService = Depends(get_sales_service)
):
    return await service.mark_commissions_as_paid(
        agent_id=payload.agent_id,
        start_date=payload.start_date,
        end_date=payload.end_date
    )

# ==================== VENTA INDIVIDUAL ====================

@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: int,
    current_user: User = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service)
):
    return await service.find_one(sale_id)

@router.patch("/{sale_id}", response_model=SaleResponse)
async def update_sale(
    sale_id: int,
    update_data: SaleUpdateRequest,
    current_user: User = Depends(require_roles(["admin"])),
    service: SalesService = Depends(get_sales_service)
):
    return await service.update(sale_id, update_data)

@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sale(
    sale_id: int,
    current_user: User = Depends(require_roles(["admin"])),
    service: SalesService = Depends(get_sales_service)
):
    await service.remove(sale_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
