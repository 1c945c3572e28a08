"""Tests for DTO utility functions."""

from decimal import Decimal

from src.services.dto_utils import (
    cost_to_string,
    decimal_to_json,
    round_currency,
    round_price,
    to_decimal,
)


class TestToDecimal:
    """Tests for to_decimal function."""

    def test_float_goes_through_string(self):
        """0.1 becomes Decimal('0.1'), not its binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_decimal_passthrough(self):
        value = Decimal("2.50")
        assert to_decimal(value) is value

    def test_int_and_string(self):
        assert to_decimal(3) == Decimal("3")
        assert to_decimal("4.25") == Decimal("4.25")


class TestRounding:
    """Tests for round_currency and round_price."""

    def test_round_currency_half_up(self):
        assert round_currency(Decimal("12.345")) == Decimal("12.35")
        assert round_currency(Decimal("0.005")) == Decimal("0.01")
        assert round_currency(Decimal("12.344")) == Decimal("12.34")

    def test_round_currency_pads_to_two_places(self):
        assert str(round_currency(80)) == "80.00"

    def test_round_price_whole_units(self):
        assert round_price(Decimal("304.2857")) == Decimal("304")
        assert round_price(Decimal("12.5")) == Decimal("13")
        assert round_price(Decimal("13.5")) == Decimal("14")
        assert round_price(Decimal("0.49")) == Decimal("0")


class TestDecimalToJson:
    """Tests for decimal_to_json function."""

    def test_whole_units_become_int(self):
        result = decimal_to_json(Decimal("304"))
        assert result == 304
        assert isinstance(result, int)

    def test_currency_becomes_float(self):
        result = decimal_to_json(Decimal("12.30"))
        assert result == 12.3
        assert isinstance(result, float)


class TestCostToString:
    """Tests for cost_to_string function."""

    def test_none_returns_zero(self):
        """None value returns '0.00'."""
        assert cost_to_string(None) == "0.00"

    def test_decimal_value(self):
        """Decimal values are formatted correctly."""
        assert cost_to_string(Decimal("12.34")) == "12.34"
        assert cost_to_string(Decimal("0")) == "0.00"
        assert cost_to_string(Decimal("100")) == "100.00"

    def test_decimal_rounding(self):
        """Decimal values are rounded to 2 places using ROUND_HALF_UP."""
        assert cost_to_string(Decimal("12.345")) == "12.35"  # Round up
        assert cost_to_string(Decimal("12.344")) == "12.34"  # Round down
        assert cost_to_string(Decimal("12.3449")) == "12.34"  # Round down
        assert cost_to_string(Decimal("12.3450")) == "12.35"  # Round up at .5

    def test_float_value(self):
        """Float values are formatted correctly."""
        assert cost_to_string(12.34) == "12.34"
        assert cost_to_string(12.3) == "12.30"
        assert cost_to_string(12.0) == "12.00"

    def test_int_value(self):
        """Integer values are formatted with decimals."""
        assert cost_to_string(12) == "12.00"
        assert cost_to_string(0) == "0.00"

    def test_string_value(self):
        """String numeric values are parsed and formatted."""
        assert cost_to_string("12.34") == "12.34"
        assert cost_to_string("15.999") == "16.00"

    def test_negative_values(self):
        """Negative values are handled correctly."""
        assert cost_to_string(Decimal("-12.34")) == "-12.34"
        assert cost_to_string(-12.345) == "-12.35"
