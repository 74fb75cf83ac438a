# services/session-service/src/tests/unit/test_pricing.py
"""
Unit Tests for price calculation
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from apps.core.services import calculate_price


def discount(amount):
    return SimpleNamespace(amount=Decimal(amount))


class TestCalculatePrice:

    def test_no_discount(self):
        assert calculate_price(Decimal('100.00')) == Decimal('100.00')

    @pytest.mark.parametrize('base, amount, expected', [
        ('100.00', '20.00', '80.00'),
        ('100.00', '100.00', '0.00'),
        ('49.99', '0.99', '49.00'),
        ('0.00', '0.00', '0.00'),
    ])
    def test_discount_subtracted(self, base, amount, expected):
        assert calculate_price(Decimal(base), discount(amount)) == Decimal(expected)

    @pytest.mark.parametrize('base, amount', [
        ('100.00', '100.01'),
        ('10.00', '250.00'),
        ('0.00', '5.00'),
    ])
    def test_clamped_at_zero(self, base, amount):
        assert calculate_price(Decimal(base), discount(amount)) == Decimal('0.00')

    def test_accepts_non_decimal_input(self):
        assert calculate_price('75', discount('25.5')) == Decimal('49.50')
