"""
Loan Amortization Calculations

Fixed-installment loan (price table):

    financed_value = ((1 - (1 + j)^-n) / j) * installment

Also generates the amortization schedule for a solved loan.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from app.calculations.base import Calculator, CalculationRequest
from app.calculations.errors import (
    GENERIC_ERROR_MESSAGE,
    INSTALLMENT_TOO_SMALL_MESSAGE,
    PERIODS_FAILED_MESSAGE,
    DomainError,
    DomainErrorKind,
)
from app.calculations.rate_solver import RateFunction, solve_rate, to_percentage


class AmortizationField(str, Enum):
    """Fields of the fixed-installment loan relationship."""

    PERIODS = "periods"
    RATE = "rate"
    INSTALLMENT = "installment"
    FINANCED_VALUE = "financed_value"


@dataclass(frozen=True)
class AmortizationRequest(CalculationRequest):
    """Loan inputs; leave out (or target) the field to solve."""

    field_type = AmortizationField

    periods: Optional[int] = None
    rate: Optional[float] = None
    installment: Optional[float] = None
    financed_value: Optional[float] = None
    target: Optional[AmortizationField] = None


def _annuity_factor(periods: float, j: float) -> float:
    """Present value of one unit paid at the end of each period."""
    return (1 - (1 + j) ** -periods) / j


def calculate_financed_value(periods: int, rate: float, installment: float) -> float:
    """
    Calculate the principal a fixed installment can finance.

    Args:
        periods: Number of installments
        rate: Periodic interest rate in percent
        installment: Installment paid each period

    Returns:
        Financed principal
    """
    j = rate / 100
    if j == 0:
        return periods * installment
    return _annuity_factor(periods, j) * installment


def calculate_installment(periods: int, rate: float, financed_value: float) -> float:
    """
    Calculate the fixed installment for a loan.

    Matches Excel's PMT() with the sign flipped.
    """
    j = rate / 100
    if j == 0:
        return financed_value / periods
    return (financed_value * j) / (1 - (1 + j) ** -periods)


def calculate_periods(rate: float, installment: float, financed_value: float) -> int:
    """
    Calculate how many installments pay off the loan.

    Partial periods count as a full period.

    Raises:
        DomainError: If the installment does not cover the period interest
    """
    j = rate / 100
    if j == 0:
        return math.ceil(financed_value / installment)

    term = 1 - (financed_value * j / installment)

    if term <= 0:
        raise DomainError(DomainErrorKind.INVALID_RANGE, INSTALLMENT_TOO_SMALL_MESSAGE)

    periods = -math.log(term) / math.log(1 + j)

    if periods <= 0 or not math.isfinite(periods):
        raise DomainError(DomainErrorKind.INVALID_RANGE, PERIODS_FAILED_MESSAGE)

    return math.ceil(periods)


def amortization_residuals(
    periods: int, installment: float, financed_value: float
) -> Tuple[RateFunction, RateFunction]:
    """Residual f(j) = financed(j) - financed_value and its derivative."""

    def residual(j: float) -> float:
        return _annuity_factor(periods, j) * installment - financed_value

    def derivative(j: float) -> float:
        power_neg = (1 + j) ** -periods
        return installment * (
            -(1 - power_neg) / (j * j) + periods * power_neg / (j * (1 + j))
        )

    return residual, derivative


def calculate_rate(periods: int, installment: float, financed_value: float) -> float:
    """
    Calculate the periodic rate (in percent, 4 decimals) implied by a loan.

    Raises:
        DomainError: If the rate search diverges or does not converge
    """
    residual, derivative = amortization_residuals(periods, installment, financed_value)
    return to_percentage(solve_rate(residual, derivative))


def generate_schedule(financed_value: float, rate: float, periods: int) -> List[Dict]:
    """
    Generate a full amortization schedule.

    Args:
        financed_value: Loan principal amount
        rate: Periodic interest rate in percent
        periods: Number of installments

    Returns:
        List of amortization rows

    Raises:
        DomainError: If the payments grow beyond floating-point range
    """
    schedule = []
    balance = financed_value
    j = rate / 100
    try:
        installment = calculate_installment(periods, rate, financed_value)
    except ArithmeticError as e:
        raise DomainError(DomainErrorKind.CALCULATION_FAILED, GENERIC_ERROR_MESSAGE) from e

    for period in range(1, periods + 1):
        interest = balance * j

        if period < periods:
            principal_pmt = min(installment - interest, balance)
        else:
            # Last installment absorbs the rounding residue
            principal_pmt = balance

        payment = principal_pmt + interest
        ending_balance = balance - principal_pmt

        if not (math.isfinite(payment) and math.isfinite(ending_balance)):
            raise DomainError(DomainErrorKind.CALCULATION_FAILED, GENERIC_ERROR_MESSAGE)

        schedule.append(
            {
                "period": period,
                "beginning_balance": round(balance, 2),
                "payment": round(payment, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(max(0, ending_balance), 2),
            }
        )

        balance = max(0.0, ending_balance)

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row["interest"] for row in schedule)


class AmortizationCalculator(Calculator):
    """Solves whichever loan field is missing."""

    field_type = AmortizationField
    solvers = {
        AmortizationField.PERIODS.value: calculate_periods,
        AmortizationField.RATE.value: calculate_rate,
        AmortizationField.INSTALLMENT.value: calculate_installment,
        AmortizationField.FINANCED_VALUE.value: calculate_financed_value,
    }
