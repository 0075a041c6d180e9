"""
Unit tests for the email report templates.
"""

from datetime import datetime
from decimal import Decimal

from app.modules.sales.reports import format_money, render_pending_commission, render_sales_report
from app.modules.sales.schemas import AgentCommissionSummary, AgentInfo, ProductInfo, SaleResponse

AGENT = AgentInfo(id=1, name='Ana <Agente>', email='ana@acme.com')


def make_sale(sale_id, product_name, amount, commission):
    return SaleResponse(
        id=sale_id,
        amount=Decimal(amount),
        commission=Decimal(commission),
        is_commission_paid=False,
        agent=AGENT,
        product=ProductInfo(id=sale_id, name=product_name, price=Decimal(amount)),
        created_at=datetime(2024, 1, 10),
        updated_at=datetime(2024, 1, 10)
    )


class TestFormatMoney:

    def test_thousands_separator(self):
        assert format_money(Decimal('46249')) == '$46,249.00'

    def test_rounds_to_cents(self):
        assert format_money(Decimal('1379.965')) == '$1,379.97'


class TestRenderSalesReport:

    def test_subject_has_date_range(self):
        subject, _ = render_sales_report(AGENT, [], datetime(2024, 1, 1), datetime(2024, 2, 1))
        assert subject == 'Reporte de ventas del 2024-01-01 al 2024-02-01'

    def test_body_lists_sales_and_totals(self):
        sales = [
            make_sale(1, 'Laptop', '45999.00', '1379.97'),
            make_sale(2, 'Mouse', '250.00', '7.50')
        ]
        _, body = render_sales_report(AGENT, sales, datetime(2024, 1, 1), datetime(2024, 2, 1))

        assert body.count('<tr><td>') == 2
        assert '<td>Laptop</td><td>$45,999.00</td><td>$1,379.97</td>' in body
        assert '$46,249.00' in body
        assert '$1,387.47' in body

    def test_escapes_html(self):
        _, body = render_sales_report(AGENT, [], datetime(2024, 1, 1), datetime(2024, 2, 1))
        assert 'Ana &lt;Agente&gt;' in body


class TestRenderPendingCommission:

    def test_body_has_totals(self):
        summary = AgentCommissionSummary(
            agent=AGENT,
            total_sales_amount=Decimal('1000.00'),
            total_commission=Decimal('30.00')
        )
        subject, body = render_pending_commission(summary)

        assert subject == 'Comisión pendiente de pago'
        assert '$1,000.00' in body
        assert '$30.00' in body
