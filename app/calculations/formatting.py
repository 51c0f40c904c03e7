"""
Display Formatting

Currency, period-count and percentage rendering for calculation results.
"""

from typing import Dict, Tuple

DEFAULT_LOCALE = "pt-BR"
DEFAULT_CURRENCY = "BRL"

# locale -> (thousands separator, decimal separator, symbol/amount pattern)
_NUMBER_FORMATS: Dict[str, Tuple[str, str, str]] = {
    "pt-BR": (".", ",", "{symbol}\u00a0{amount}"),
    "en-US": (",", ".", "{symbol}{amount}"),
    "en-GB": (",", ".", "{symbol}{amount}"),
}

_CURRENCY_SYMBOLS: Dict[str, str] = {
    "BRL": "R$",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

_PERIOD_LABELS: Dict[str, Tuple[str, str]] = {
    "pt": ("mês", "meses"),
    "en": ("month", "months"),
}


def _group_number(value: float, thousands: str, decimal: str) -> str:
    """Render a non-negative number with two decimals and the given separators."""
    text = f"{value:,.2f}"
    return text.replace(",", "X").replace(".", decimal).replace("X", thousands)


def format_currency(
    value: float, locale: str = DEFAULT_LOCALE, currency: str = DEFAULT_CURRENCY
) -> str:
    """
    Format a value as a currency amount.

    Args:
        value: Amount to format
        locale: Locale tag (e.g., "pt-BR", "en-US")
        currency: ISO 4217 currency code (e.g., "BRL")

    Returns:
        Formatted string, e.g. "R$ 1.280,93" for pt-BR/BRL (non-breaking space)
    """
    thousands, decimal, pattern = _NUMBER_FORMATS.get(locale, _NUMBER_FORMATS["en-US"])
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    amount = _group_number(abs(value), thousands, decimal)
    formatted = pattern.format(symbol=symbol, amount=amount)

    if value < 0 and amount.strip("0,.") != "":
        return f"-{formatted}"
    return formatted


def format_periods(periods: int, locale: str = DEFAULT_LOCALE) -> str:
    """Format a period count with a pluralized unit, e.g. "12 meses"."""
    language = locale.split("-")[0].lower()
    singular, plural = _PERIOD_LABELS.get(language, _PERIOD_LABELS["en"])
    return f"{periods} {singular if periods == 1 else plural}"


def format_percentage(value: float, decimals: int = 4) -> str:
    """Format a percentage value, e.g. 1.0 -> "1.0000%"."""
    return f"{value:.{decimals}f}%"
