"""
Tests for result display formatting.
"""

from app.calculations.formatting import format_currency, format_percentage, format_periods


class TestCurrency:
    """Test currency formatting."""

    def test_brazilian_real(self):
        """Test default pt-BR/BRL formatting."""
        assert format_currency(1280.93) == "R$\u00a01.280,93"

    def test_thousands_grouping(self):
        """Test grouping of large values."""
        assert format_currency(1234567.891) == "R$\u00a01.234.567,89"

    def test_us_dollar(self):
        """Test en-US/USD formatting."""
        assert format_currency(1280.93, "en-US", "USD") == "$1,280.93"

    def test_negative_value(self):
        """Test the sign goes before the symbol."""
        assert format_currency(-5, "en-US", "USD") == "-$5.00"

    def test_negative_rounding_to_zero(self):
        """Test tiny negatives do not render as negative zero."""
        assert format_currency(-0.001, "en-US", "USD") == "$0.00"

    def test_unknown_currency_uses_code(self):
        """Test unknown currencies fall back to their ISO code."""
        assert format_currency(1000, "en-US", "JPY") == "JPY1,000.00"

    def test_unknown_locale_uses_english_separators(self):
        """Test unknown locales fall back to en-US separators."""
        assert format_currency(1000, "xx-XX", "USD") == "$1,000.00"


class TestPeriods:
    """Test period count formatting."""

    def test_singular_portuguese(self):
        assert format_periods(1) == "1 mês"

    def test_plural_portuguese(self):
        assert format_periods(12) == "12 meses"

    def test_english(self):
        """Test English labels."""
        assert format_periods(1, "en-US") == "1 month"
        assert format_periods(3, "en-US") == "3 months"


class TestPercentage:
    """Test percentage formatting."""

    def test_default_precision(self):
        assert format_percentage(1.0) == "1.0000%"

    def test_custom_precision(self):
        assert format_percentage(12.68250301, 2) == "12.68%"
