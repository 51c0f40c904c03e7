"""
Financial Calculation Engine

Solves the missing field of the savings, lump-sum and loan relationships
between periods, periodic rate, periodic payment and terminal amount.
"""

from app.calculations import accumulation, amortization, lump_sum, rate_solver, rates
from app.calculations.accumulation import AccumulationCalculator, AccumulationRequest
from app.calculations.amortization import AmortizationCalculator, AmortizationRequest
from app.calculations.base import CalculationResult, SolveOutcome
from app.calculations.errors import DomainError, DomainErrorKind
from app.calculations.lump_sum import LumpSumCalculator, LumpSumRequest

__all__ = [
    "accumulation",
    "amortization",
    "lump_sum",
    "rate_solver",
    "rates",
    "AccumulationCalculator",
    "AccumulationRequest",
    "AmortizationCalculator",
    "AmortizationRequest",
    "LumpSumCalculator",
    "LumpSumRequest",
    "CalculationResult",
    "SolveOutcome",
    "DomainError",
    "DomainErrorKind",
]
