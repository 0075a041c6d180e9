"""
Unit tests for commission calculation.
"""

from decimal import Decimal

import pytest

from app.modules.sales.service import SalesService, normalize_datetime, to_cents


class TestCalculateCommission:
    """calculate_commission is a pure function of amount and rate."""

    def test_known_value(self, session):
        service = SalesService(session, commission_rate=Decimal('0.03'))
        assert service.calculate_commission(45999) == Decimal('1379.97')

    def test_keeps_sub_cent_precision(self, session):
        service = SalesService(session, commission_rate=Decimal('0.05'))
        assert service.calculate_commission(Decimal('10.01')) == Decimal('0.5005')

    def test_linear_in_amount(self, session):
        service = SalesService(session, commission_rate=Decimal('0.05'))
        single = service.calculate_commission(Decimal('120.50'))
        double = service.calculate_commission(Decimal('241.00'))
        assert double == single * 2

    def test_zero_amount_gives_zero(self, session):
        service = SalesService(session, commission_rate=Decimal('0.05'))
        assert service.calculate_commission(0) == 0

    def test_float_input_uses_decimal_text(self, session):
        service = SalesService(session, commission_rate=Decimal('0.1'))
        assert service.calculate_commission(0.3) == Decimal('0.03')

    @pytest.mark.parametrize('rate', ['0.03', 0.03, Decimal('0.03')])
    def test_rate_accepts_several_types(self, session, rate):
        service = SalesService(session, commission_rate=rate)
        assert service.commission_rate == Decimal('0.03')

    def test_default_rate_comes_from_settings(self, session):
        from app.config.settings import settings
        service = SalesService(session)
        assert service.commission_rate == Decimal(str(settings.sales_commission_percentage))


class TestHelpers:

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal('0.005')) == Decimal('0.01')
        assert to_cents(Decimal('10.994')) == Decimal('10.99')

    def test_normalize_naive_is_unchanged(self):
        from datetime import datetime
        value = datetime(2024, 1, 1, 12)
        assert normalize_datetime(value) is value

    def test_normalize_aware_to_naive_utc(self):
        from datetime import datetime, timedelta, timezone
        value = datetime(2024, 1, 1, 7, tzinfo=timezone(timedelta(hours=-5)))
        assert normalize_datetime(value) == datetime(2024, 1, 1, 12)


class TestParseDate:
    """Query-string dates."""

    def test_offset_with_plus_decoded_as_space(self):
        from datetime import datetime, timedelta, timezone
        from app.modules.sales.router import parse_date
        expected = datetime(2024, 1, 15, 12, tzinfo=timezone(timedelta(hours=2)))
        assert parse_date('2024-01-15T12:00:00 02:00', 'start_date') == expected

    def test_zulu_suffix(self):
        from datetime import datetime, timezone
        from app.modules.sales.router import parse_date
        assert parse_date('2024-01-15T12:00:00Z', 'start_date') == datetime(2024, 1, 15, 12, tzinfo=timezone.utc)

    def test_negative_offset_and_plain_date(self):
        from datetime import datetime, timedelta, timezone
        from app.modules.sales.router import parse_date
        bogota = timezone(timedelta(hours=-5))
        assert parse_date('2024-01-15T07:00:00-05:00', 'start_date') == datetime(2024, 1, 15, 7, tzinfo=bogota)
        assert parse_date('2024-01-15', 'start_date') == datetime(2024, 1, 15)

    def test_blank_is_missing_and_garbage_is_rejected(self):
        from app.core.exceptions import ValidationError
        from app.modules.sales.router import parse_date
        assert parse_date('  ', 'end_date') is None
        with pytest.raises(ValidationError):
            parse_date('ayer', 'start_date')
