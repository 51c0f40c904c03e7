"""
Rate Conversions

Compound-equivalent conversions between periodic and annual rates,
both expressed in percent.
"""

DEFAULT_PERIODS_PER_YEAR = 12


def periodic_to_annual(rate: float, periods_per_year: int = DEFAULT_PERIODS_PER_YEAR) -> float:
    """Convert a periodic rate to its effective annual rate, e.g. 1% monthly -> 12.6825%."""
    return (((1 + rate / 100) ** periods_per_year) - 1) * 100


def annual_to_periodic(rate: float, periods_per_year: int = DEFAULT_PERIODS_PER_YEAR) -> float:
    """Convert an effective annual rate to the equivalent periodic rate."""
    return (((1 + rate / 100) ** (1 / periods_per_year)) - 1) * 100
