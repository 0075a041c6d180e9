"""
Plantillas HTML de los reportes de ventas y comisiones enviados por correo.
"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from html import escape
from typing import List, Tuple

from .schemas import AgentCommissionSummary, AgentInfo, SaleResponse

CENT = Decimal("0.01")


def format_money(value: Decimal) -> str:
    """1379.97 -> '$1,379.97'"""
    return f"${Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP):,}"


def _format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def render_sales_report(
    agent: AgentInfo,
    sales: List[SaleResponse],
    start_date: datetime,
    end_date: datetime
) -> Tuple[str, str]:
    """Retorna (asunto, cuerpo html) del reporte de ventas de un agente en el periodo"""
    subject = (
        f"Reporte de ventas del {_format_date(start_date)} "
        f"al {_format_date(end_date)}"
    )

    total_amount = sum((sale.amount for sale in sales), Decimal("0"))
    total_commission = sum((sale.commission for sale in sales), Decimal("0"))

    rows = "".join(
        "<tr>"
        f"<td>{escape(sale.product.name)}</td>"
        f"<td>{format_money(sale.amount)}</td>"
        f"<td>{format_money(sale.commission)}</td>"
        "</tr>"
        for sale in sales
    )

    html_body = (
        f"<h2>Hola {escape(agent.name)}</h2>"
        f"<p>Estas son tus ventas entre el {_format_date(start_date)} "
        f"y el {_format_date(end_date)}:</p>"
        "<table>"
        "<thead><tr><th>Producto</th><th>Monto</th><th>Comisión</th></tr></thead>"
        f"<tbody>{rows}</tbody>"
        "</table>"
        f"<p>Total vendido: <strong>{format_money(total_amount)}</strong></p>"
        f"<p>Total comisión: <strong>{format_money(total_commission)}</strong></p>"
    )
    return subject, html_body


def render_pending_commission(summary: AgentCommissionSummary) -> Tuple[str, str]:
    """Retorna (asunto, cuerpo html) del aviso mensual de comisión pendiente"""
    subject = "Comisión pendiente de pago"
    html_body = (
        f"<h2>Hola {escape(summary.agent.name)}</h2>"
        "<p>Tienes comisiones pendientes de pago.</p>"
        f"<p>Total vendido: <strong>{format_money(summary.total_sales_amount)}</strong></p>"
        f"<p>Comisión pendiente: <strong>{format_money(summary.total_commission)}</strong></p>"
    )
    return subject, html_body
