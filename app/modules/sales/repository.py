# app/modules/sales/repository.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.shared.database.models import Sale, User, Product

# Venta junto a sus referencias resueltas (None si el referente ya no existe)
SaleRow = Tuple[Sale, Optional[User], Optional[Product]]

class SalesRepository:
    """
    Repositorio de ventas. Las referencias a agente y producto se resuelven
    con outer joins explícitos para que un referente borrado sea visible.
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== REFERENCIAS ====================

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    # ==================== ESCRITURA ====================

    def create_sale(
        self,
        amount: Decimal,
        commission: Decimal,
        agent_id: int,
        product_id: int
    ) -> Sale:
        try:
            sale = Sale(
                amount=amount,
                commission=commission,
                is_commission_paid=False,
                agent_id=agent_id,
                product_id=product_id
            )
            self.db.add(sale)
            self.db.commit()
            self.db.refresh(sale)
            return sale
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def update_sale(self, sale: Sale, update_data: dict) -> Sale:
        try:
            for key, value in update_data.items():
                setattr(sale, key, value)
            self.db.commit()
            self.db.refresh(sale)
            return sale
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def delete_sale(self, sale: Sale) -> None:
        try:
            self.db.delete(sale)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def mark_commissions_paid(
        self,
        agent_id: int,
        start_date: datetime,
        end_date: datetime
    ) -> int:
        """
        Marcar como pagadas las comisiones pendientes del agente en
        [start_date, end_date] con un único UPDATE. Retorna filas modificadas.
        """
        try:
            rows_updated = self.db.query(Sale).filter(
                Sale.agent_id == agent_id,
                Sale.created_at >= start_date,
                Sale.created_at <= end_date,
                Sale.is_commission_paid.is_(False)
            ).update(
                {Sale.is_commission_paid: True, Sale.updated_at: datetime.utcnow()},
                synchronize_session=False
            )
            self.db.commit()
            return rows_updated
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    # ==================== LECTURA ====================

    def _query_with_references(self):
        return self.db.query(Sale, User, Product).outerjoin(
            User, User.id == Sale.agent_id
        ).outerjoin(
            Product, Product.id == Sale.product_id
        )

    def get_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).filter(Sale.id == sale_id).first()

    def get_sale_with_references(self, sale_id: int) -> Optional[SaleRow]:
        return self._query_with_references().filter(Sale.id == sale_id).first()

    def get_all_sales(self) -> List[SaleRow]:
        return self._query_with_references().order_by(Sale.id).all()

    def get_sales_by_agent(self, agent_id: int) -> List[SaleRow]:
        return self._query_with_references().filter(
            Sale.agent_id == agent_id
        ).order_by(Sale.created_at, Sale.id).all()

    def get_sales_in_period(self, start_date: datetime, end_date: datetime) -> List[SaleRow]:
        """Ventas en [start_date, end_date) ordenadas por agente y fecha"""
        return self._query_with_references().filter(
            Sale.created_at >= start_date,
            Sale.created_at < end_date
        ).order_by(Sale.agent_id, Sale.created_at, Sale.id).all()

    # ==================== AGREGACIONES ====================

    def get_agent_totals_between(
        self,
        agent_id: int,
        start_date: datetime,
        end_date: datetime
    ) -> Tuple[Decimal, Decimal]:
        """Suma de montos y comisiones del agente en [start_date, end_date]"""
        total_sales, total_commission = self.db.query(
            func.coalesce(func.sum(Sale.amount), 0),
            func.coalesce(func.sum(Sale.commission), 0)
        ).filter(
            Sale.agent_id == agent_id,
            Sale.created_at >= start_date,
            Sale.created_at <= end_date
        ).one()

        return Decimal(str(total_sales or 0)), Decimal(str(total_commission or 0))

    def get_unpaid_totals_by_agent(self) -> List[Tuple[int, Decimal, Decimal, Optional[User]]]:
        """
        Totales de ventas con comisión pendiente agrupados por agente,
        con el usuario resuelto (None si fue eliminado)
        """
        totals = self.db.query(
            Sale.agent_id.label("agent_id"),
            func.sum(Sale.amount).label("total_sales_amount"),
            func.sum(Sale.commission).label("total_commission")
        ).filter(
            Sale.is_commission_paid.is_(False)
        ).group_by(Sale.agent_id).subquery()

        results = self.db.query(
            totals.c.agent_id,
            totals.c.total_sales_amount,
            totals.c.total_commission,
            User
        ).outerjoin(
            User, User.id == totals.c.agent_id
        ).order_by(totals.c.agent_id).all()

        return [
            (agent_id, Decimal(str(total_amount)), Decimal(str(total_commission)), user)
            for agent_id, total_amount, total_commission, user in results
        ]
