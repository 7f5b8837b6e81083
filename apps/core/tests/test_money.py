import pytest
from decimal import Decimal

from apps.core.exceptions import InvalidAmountError
from apps.core.money import cents_to_amount, clamp_ratio, round_cents, to_amount


class TestToAmount:

    @pytest.mark.parametrize('value,expected', [
        ('12.50', Decimal('12.50')),
        ('7', Decimal('7.00')),
        (3, Decimal('3.00')),
        (0.1, Decimal('0.10')),
        (Decimal('99.99'), Decimal('99.99')),
    ])
    def test_accepts(self, value, expected):
        assert to_amount(value) == expected

    @pytest.mark.parametrize('value', [
        None, True, 'abc', '', 'NaN', 'Infinity', '-0.01', '0', 0, '1.001',
    ])
    def test_rejects(self, value):
        with pytest.raises(InvalidAmountError):
            to_amount(value)

    def test_zero_allowed_when_asked(self):
        assert to_amount('0', allow_zero=True) == Decimal('0.00')

    def test_field_name_in_message(self):
        with pytest.raises(InvalidAmountError, match='Pledge amount'):
            to_amount('-3', field='Pledge amount')


class TestHelpers:

    @pytest.mark.parametrize('value,expected', [
        (Decimal('36.665'), Decimal('36.67')),
        (Decimal('36.664'), Decimal('36.66')),
        (Decimal('100') / 3, Decimal('33.33')),
    ])
    def test_round_cents_half_up(self, value, expected):
        assert round_cents(value) == expected

    @pytest.mark.parametrize('numerator,denominator,expected', [
        (Decimal('50'), Decimal('100'), Decimal('0.5')),
        (Decimal('150'), Decimal('100'), Decimal('1')),
        (Decimal('-5'), Decimal('100'), Decimal('0')),
        (Decimal('5'), Decimal('0'), Decimal('0')),
    ])
    def test_clamp_ratio(self, numerator, denominator, expected):
        assert clamp_ratio(numerator, denominator) == expected

    def test_cents_to_amount(self):
        assert cents_to_amount(12345) == Decimal('123.45')
        assert cents_to_amount(None) == Decimal('0.00')
