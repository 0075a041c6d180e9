# app/modules/sales/service.py
import asyncio
import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from itertools import groupby
from typing import List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import (
    InternalError, NotFoundError, NotificationDispatchError, ValidationError
)
from app.shared.database.models import Product, Sale, User
from app.shared.notifications import EmailJob, NotificationQueue
from .reports import render_pending_commission, render_sales_report
from .repository import SalesRepository
from .schemas import (
    AgentCommissionSummary, AgentInfo, EmailDispatchResponse,
    MarkCommissionsPaidResponse, ProductInfo, SaleCreateRequest, SaleResponse,
    SaleUpdateRequest, UserSalesByDateResponse
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

SALES_REPORT_SENT_MESSAGE = "Reportes de ventas enviados correctamente"


def to_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Fechas con zona horaria se convierten a UTC naive (como se almacenan)"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class SalesService:
    """
    Motor de comisiones y reportes.

    La comisión se calcula una sola vez al registrar la venta con la tasa
    vigente; cambios posteriores de tasa o de precio no la modifican.
    """

    def __init__(
        self,
        db: Session,
        notifications: Optional[NotificationQueue] = None,
        commission_rate: Optional[Union[Decimal, float, str]] = None
    ):
        self.db = db
        self.repository = SalesRepository(db)
        self.notifications = notifications
        if commission_rate is None:
            commission_rate = settings.sales_commission_percentage
        self.commission_rate = Decimal(str(commission_rate))

    # ==================== COMISIONES ====================

    def calculate_commission(self, amount: Union[Decimal, float, int, str]) -> Decimal:
        return Decimal(str(amount)) * self.commission_rate

    async def record_sale(self, sale_data: SaleCreateRequest, agent_id: int) -> SaleResponse:
        product = self.repository.get_product(sale_data.product_id)
        if not product:
            raise NotFoundError(f"Producto {sale_data.product_id} no encontrado")

        agent = self.repository.get_user(agent_id)
        if not agent:
            raise NotFoundError(f"Agente {agent_id} no encontrado")

        amount = sale_data.amount if sale_data.amount is not None else product.price
        amount = to_cents(amount)
        commission = self.calculate_commission(amount)

        sale = self.repository.create_sale(
            amount=amount,
            commission=commission,
            agent_id=agent.id,
            product_id=product.id
        )
        logger.info(
            f"💰 Venta {sale.id} registrada: agente {agent.id}, producto {product.id}, "
            f"monto {amount}, comisión {commission}"
        )
        return self._build_sale_response(sale, agent, product)

    async def get_user_sales_by_date(
        self,
        start_date: datetime,
        end_date: Optional[datetime],
        agent_id: int
    ) -> UserSalesByDateResponse:
        """
        Totales del agente en el rango cerrado [start_date, end_date].
        Un rango vacío o invertido da totales en cero.
        """
        start_date, end_date = self._normalize_range(start_date, end_date)
        if start_date > end_date:
            return UserSalesByDateResponse()
        total_sales, total_commission = self.repository.get_agent_totals_between(
            agent_id, start_date, end_date
        )
        return UserSalesByDateResponse(
            total_sales=total_sales,
            total_commission=total_commission
        )

    async def grouped_agent_unpaid_commission(self) -> List[AgentCommissionSummary]:
        summaries = []
        for agent_id, total_amount, total_commission, agent in self.repository.get_unpaid_totals_by_agent():
            if agent is None:
                raise NotFoundError(f"Agente {agent_id} no encontrado")
            summaries.append(AgentCommissionSummary(
                agent=AgentInfo.model_validate(agent),
                total_sales_amount=total_amount,
                total_commission=total_commission
            ))
        return summaries

    async def mark_commissions_as_paid(
        self,
        agent_id: int,
        start_date: datetime,
        end_date: Optional[datetime] = None
    ) -> MarkCommissionsPaidResponse:
        start_date, end_date = self._resolve_range(start_date, end_date)
        modified = self.repository.mark_commissions_paid(agent_id, start_date, end_date)
        logger.info(
            f"Comisiones pagadas: agente {agent_id}, {modified} ventas "
            f"entre {start_date.isoformat()} y {end_date.isoformat()}"
        )
        return MarkCommissionsPaidResponse(modified_count=modified)

    # ==================== REPORTES POR CORREO ====================

    async def send_user_sales_by_email(
        self,
        start_date: datetime,
        end_date: Optional[datetime] = None
    ) -> EmailDispatchResponse:
        """
        Un reporte por agente con sus ventas en [start_date, end_date).
        Retorna cuando todos los correos fueron aceptados por la cola.
        """
        start_date, end_date = self._resolve_range(start_date, end_date)
        rows = self.repository.get_sales_in_period(start_date, end_date)

        jobs = []
        for _, agent_rows in groupby(rows, key=lambda row: row[0].agent_id):
            sales = [self._build_sale_response(*row) for row in agent_rows]
            agent = sales[0].agent
            subject, html_body = render_sales_report(agent, sales, start_date, end_date)
            jobs.append(EmailJob(subject=subject, recipient=agent.email, html_body=html_body))

        enqueued = await self._enqueue_all(jobs)
        logger.info(f"📊 Reporte de ventas: {enqueued} correos encolados")
        return EmailDispatchResponse(message=SALES_REPORT_SENT_MESSAGE, jobs_enqueued=enqueued)

    async def send_unpaid_commission_by_email(self) -> int:
        """Aviso de comisión pendiente a cada agente con ventas sin pagar"""
        summaries = await self.grouped_agent_unpaid_commission()
        jobs = []
        for summary in summaries:
            subject, html_body = render_pending_commission(summary)
            jobs.append(EmailJob(subject=subject, recipient=summary.agent.email, html_body=html_body))

        enqueued = await self._enqueue_all(jobs)
        logger.info(f"📊 Comisiones pendientes: {enqueued} correos encolados")
        return enqueued

    # ==================== CONSULTAS ====================

    async def find_all(self) -> List[SaleResponse]:
        return [self._build_sale_response(*row) for row in self.repository.get_all_sales()]

    async def find_one(self, sale_id: int) -> SaleResponse:
        row = self.repository.get_sale_with_references(sale_id)
        if not row:
            raise NotFoundError(f"Venta {sale_id} no encontrada")
        return self._build_sale_response(*row)

    async def find_user_sales(self, agent_id: int) -> List[SaleResponse]:
        return [self._build_sale_response(*row) for row in self.repository.get_sales_by_agent(agent_id)]

    async def find_user_sales_by_email(self, email: str) -> List[SaleResponse]:
        user = self.repository.get_user_by_email(email)
        if not user:
            raise NotFoundError(f"Usuario {email} no encontrado")
        return await self.find_user_sales(user.id)

    # ==================== MODIFICACIONES ====================

    async def update(self, sale_id: int, update_data: SaleUpdateRequest) -> SaleResponse:
        """Actualiza monto y/o producto. La comisión registrada se conserva."""
        sale = self._get_or_404(sale_id)
        changes = update_data.model_dump(exclude_unset=True, exclude_none=True)

        if "product_id" in changes and not self.repository.get_product(changes["product_id"]):
            raise NotFoundError(f"Producto {changes['product_id']} no encontrado")
        if "amount" in changes:
            changes["amount"] = to_cents(changes["amount"])

        if changes:
            self.repository.update_sale(sale, changes)
            logger.info(f"Venta {sale_id} actualizada: {sorted(changes)}")

        return await self.find_one(sale_id)

    async def remove(self, sale_id: int) -> None:
        sale = self._get_or_404(sale_id)
        self.repository.delete_sale(sale)
        logger.info(f"Venta {sale_id} eliminada")

    # ==================== AUXILIARES ====================

    def _get_or_404(self, sale_id: int) -> Sale:
        sale = self.repository.get_sale_by_id(sale_id)
        if not sale:
            raise NotFoundError(f"Venta {sale_id} no encontrada")
        return sale

    def _build_sale_response(
        self,
        sale: Sale,
        agent: Optional[User],
        product: Optional[Product]
    ) -> SaleResponse:
        if agent is None:
            raise NotFoundError(f"Agente {sale.agent_id} de la venta {sale.id} no encontrado")
        if product is None:
            raise NotFoundError(f"Producto {sale.product_id} de la venta {sale.id} no encontrado")

        return SaleResponse(
            id=sale.id,
            amount=sale.amount,
            commission=sale.commission,
            is_commission_paid=sale.is_commission_paid,
            agent=AgentInfo.model_validate(agent),
            product=ProductInfo.model_validate(product),
            created_at=sale.created_at,
            updated_at=sale.updated_at
        )

    def _normalize_range(
        self,
        start_date: datetime,
        end_date: Optional[datetime]
    ) -> Tuple[datetime, datetime]:
        return normalize_datetime(start_date), normalize_datetime(end_date) or datetime.utcnow()

    def _resolve_range(
        self,
        start_date: datetime,
        end_date: Optional[datetime]
    ) -> Tuple[datetime, datetime]:
        start_date, end_date = self._normalize_range(start_date, end_date)
        if start_date > end_date:
            raise ValidationError("start_date debe ser anterior o igual a end_date")
        return start_date, end_date

    async def _enqueue_all(self, jobs: List[EmailJob]) -> int:
        """
        Encola todos los trabajos aunque alguno falle. Si hubo fallos se
        lanza NotificationDispatchError; los ya aceptados no se revierten.
        """
        if not jobs:
            return 0
        if self.notifications is None:
            raise InternalError("Cola de notificaciones no disponible")

        results = await asyncio.gather(
            *(self.notifications.enqueue(job) for job in jobs),
            return_exceptions=True
        )

        failed = 0
        for job, result in zip(jobs, results):
            if isinstance(result, Exception):
                failed += 1
                logger.error(f"❌ No se pudo encolar correo para {job.recipient}: {result}")

        if failed:
            raise NotificationDispatchError(failed=failed, total=len(jobs))
        return len(jobs)
