"""
Lump-Sum Compounding Calculations

Single amount compounded once per period:

    future_value = present_value * (1 + j)^n

All four inverses have closed forms, so no iterative search is needed.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from app.calculations.base import Calculator, CalculationRequest
from app.calculations.errors import (
    FUTURE_NOT_GREATER_MESSAGE,
    PERIODS_FAILED_MESSAGE,
    PERIODS_NOT_POSITIVE_MESSAGE,
    RATE_FAILED_MESSAGE,
    ZERO_RATE_PERIODS_MESSAGE,
    DomainError,
    DomainErrorKind,
)
from app.calculations.rate_solver import to_percentage


class LumpSumField(str, Enum):
    """Fields of the single compounding relationship."""

    PERIODS = "periods"
    RATE = "rate"
    PRESENT_VALUE = "present_value"
    FUTURE_VALUE = "future_value"


@dataclass(frozen=True)
class LumpSumRequest(CalculationRequest):
    """Lump-sum inputs; leave out (or target) the field to solve."""

    field_type = LumpSumField

    periods: Optional[int] = None
    rate: Optional[float] = None
    present_value: Optional[float] = None
    future_value: Optional[float] = None
    target: Optional[LumpSumField] = None


def calculate_future_value(periods: int, rate: float, present_value: float) -> float:
    """Compound present_value for the given number of periods."""
    return present_value * ((1 + rate / 100) ** periods)


def calculate_present_value(periods: int, rate: float, future_value: float) -> float:
    """Discount future_value back the given number of periods."""
    return future_value / ((1 + rate / 100) ** periods)


def check_growth(present_value: float, future_value: float) -> None:
    """Raise unless future_value exceeds present_value."""
    if future_value <= present_value:
        raise DomainError(DomainErrorKind.INVALID_RANGE, FUTURE_NOT_GREATER_MESSAGE)


def calculate_periods(rate: float, present_value: float, future_value: float) -> int:
    """
    Calculate how many periods present_value needs to grow into future_value.

    Raises:
        DomainError: If future_value does not exceed present_value, the rate
            is zero, or no positive period count exists
    """
    j = rate / 100

    check_growth(present_value, future_value)

    if j == 0:
        raise DomainError(DomainErrorKind.INVALID_RANGE, ZERO_RATE_PERIODS_MESSAGE)

    periods = math.log(future_value / present_value) / math.log(1 + j)

    if periods <= 0 or not math.isfinite(periods):
        raise DomainError(DomainErrorKind.INVALID_RANGE, PERIODS_FAILED_MESSAGE)

    return math.ceil(periods)


def calculate_rate(periods: int, present_value: float, future_value: float) -> float:
    """
    Calculate the periodic rate (in percent, 4 decimals) that grows
    present_value into future_value.

    Raises:
        DomainError: If future_value does not exceed present_value, periods is
            not positive, or the rate is not positive
    """
    check_growth(present_value, future_value)

    if periods <= 0:
        raise DomainError(DomainErrorKind.INVALID_RANGE, PERIODS_NOT_POSITIVE_MESSAGE)

    j = (future_value / present_value) ** (1 / periods) - 1

    if j <= 0 or not math.isfinite(j):
        raise DomainError(DomainErrorKind.INVALID_RANGE, RATE_FAILED_MESSAGE)

    return to_percentage(j)


class LumpSumCalculator(Calculator):
    """Solves whichever lump-sum field is missing."""

    field_type = LumpSumField
    solvers = {
        LumpSumField.PERIODS.value: calculate_periods,
        LumpSumField.RATE.value: calculate_rate,
        LumpSumField.PRESENT_VALUE.value: calculate_present_value,
        LumpSumField.FUTURE_VALUE.value: calculate_future_value,
    }

    def _check_model_inputs(self, inputs: Dict[str, float]) -> None:
        # Growth is checked before the generic range checks
        present_value = inputs.get(LumpSumField.PRESENT_VALUE.value)
        future_value = inputs.get(LumpSumField.FUTURE_VALUE.value)
        if present_value is not None and future_value is not None:
            check_growth(present_value, future_value)
