"""
Tarea mensual: aviso de comisiones pendientes a cada agente.
"""
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.config.database import SessionLocal
from app.shared.notifications import NotificationQueue
from .service import SalesService


async def send_unpaid_commission_report(
    queue: NotificationQueue,
    session_factory: Callable[[], Session] = SessionLocal,
    commission_rate: Optional[Decimal] = None
) -> int:
    """Abre su propia sesión; se ejecuta fuera de cualquier request"""
    db = session_factory()
    try:
        service = SalesService(db, notifications=queue, commission_rate=commission_rate)
        return await service.send_unpaid_commission_by_email()
    finally:
        db.close()
