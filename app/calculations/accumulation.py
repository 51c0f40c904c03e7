"""
Savings Accumulation Calculations

Ordinary savings plan with a fixed deposit at the start of every period:

    final_value = (1 + j) * ((1 + j)^n - 1) / j * deposit

Rates are percentages per period (e.g., 1.0 for 1%).
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from app.calculations.base import Calculator, CalculationRequest
from app.calculations.errors import (
    FINAL_NOT_GREATER_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    PERIODS_FAILED_MESSAGE,
    DomainError,
    DomainErrorKind,
)
from app.calculations.rate_solver import RateFunction, solve_rate, to_percentage


class AccumulationField(str, Enum):
    """Fields of the savings plan relationship."""

    PERIODS = "periods"
    RATE = "rate"
    DEPOSIT = "deposit"
    FINAL_VALUE = "final_value"


@dataclass(frozen=True)
class AccumulationRequest(CalculationRequest):
    """Savings plan inputs; leave out (or target) the field to solve."""

    field_type = AccumulationField

    periods: Optional[int] = None
    rate: Optional[float] = None
    deposit: Optional[float] = None
    final_value: Optional[float] = None
    target: Optional[AccumulationField] = None


def _growth_factor(periods: float, j: float) -> float:
    """Accumulated value of one unit deposited at the start of each period."""
    one_plus_j = 1 + j
    return one_plus_j * ((one_plus_j ** periods) - 1) / j


def calculate_final_value(periods: int, rate: float, deposit: float) -> float:
    """
    Calculate the accumulated value of a savings plan.

    Args:
        periods: Number of deposits
        rate: Periodic interest rate in percent
        deposit: Deposit made each period

    Returns:
        Accumulated value after the last period
    """
    j = rate / 100
    if j == 0:
        return periods * deposit
    return _growth_factor(periods, j) * deposit


def calculate_deposit(periods: int, rate: float, final_value: float) -> float:
    """Calculate the deposit needed to reach final_value."""
    j = rate / 100
    if j == 0:
        return final_value / periods
    one_plus_j = 1 + j
    return (final_value * j) / (one_plus_j * ((one_plus_j ** periods) - 1))


def calculate_periods(rate: float, deposit: float, final_value: float) -> int:
    """
    Calculate how many periods it takes to reach final_value.

    Partial periods count as a full period.

    Raises:
        DomainError: If final_value cannot be reached under this rate
    """
    j = rate / 100
    if j == 0:
        return math.ceil(final_value / deposit)

    one_plus_j = 1 + j
    term = (final_value * j) / (one_plus_j * deposit) + 1

    if term <= 0:
        raise DomainError(DomainErrorKind.INVALID_RANGE, FINAL_NOT_GREATER_MESSAGE)

    periods = math.log(term) / math.log(one_plus_j)

    if periods <= 0 or not math.isfinite(periods):
        raise DomainError(DomainErrorKind.INVALID_RANGE, PERIODS_FAILED_MESSAGE)

    return math.ceil(periods)


def accumulation_residuals(
    periods: int, deposit: float, final_value: float
) -> Tuple[RateFunction, RateFunction]:
    """Residual f(j) = accumulated(j) - final_value and its derivative."""

    def residual(j: float) -> float:
        return _growth_factor(periods, j) * deposit - final_value

    def derivative(j: float) -> float:
        one_plus_j = 1 + j
        power = one_plus_j ** periods
        return deposit * (
            (power - 1) / j
            + one_plus_j * periods * one_plus_j ** (periods - 1) / j
            - one_plus_j * (power - 1) / (j * j)
        )

    return residual, derivative


def calculate_rate(periods: int, deposit: float, final_value: float) -> float:
    """
    Calculate the periodic rate (in percent, 4 decimals) that grows deposits to final_value.

    Raises:
        DomainError: If final_value does not exceed deposit or no rate is found
    """
    if final_value <= deposit:
        raise DomainError(DomainErrorKind.INVALID_RANGE, FINAL_NOT_GREATER_MESSAGE)

    residual, derivative = accumulation_residuals(periods, deposit, final_value)
    return to_percentage(solve_rate(residual, derivative))


def generate_schedule(deposit: float, rate: float, periods: int) -> List[Dict]:
    """
    Generate the period-by-period balance of a savings plan.

    Args:
        deposit: Deposit made at the start of each period
        rate: Periodic interest rate in percent
        periods: Number of periods

    Returns:
        List of schedule rows

    Raises:
        DomainError: If the balance grows beyond floating-point range
    """
    schedule = []
    balance = 0.0
    j = rate / 100

    for period in range(1, periods + 1):
        beginning_balance = balance
        interest = (beginning_balance + deposit) * j
        balance = beginning_balance + deposit + interest

        if not math.isfinite(balance):
            raise DomainError(DomainErrorKind.CALCULATION_FAILED, GENERIC_ERROR_MESSAGE)

        schedule.append(
            {
                "period": period,
                "beginning_balance": round(beginning_balance, 2),
                "deposit": round(deposit, 2),
                "interest": round(interest, 2),
                "ending_balance": round(balance, 2),
            }
        )

    return schedule


class AccumulationCalculator(Calculator):
    """Solves whichever savings-plan field is missing."""

    field_type = AccumulationField
    solvers = {
        AccumulationField.PERIODS.value: calculate_periods,
        AccumulationField.RATE.value: calculate_rate,
        AccumulationField.DEPOSIT.value: calculate_deposit,
        AccumulationField.FINAL_VALUE.value: calculate_final_value,
    }
