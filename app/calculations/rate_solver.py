"""
Periodic Rate Solver

Implements a bounded Newton-Raphson search for the periodic rate, shared by
every model whose rate has no closed-form inverse. Each model supplies its
own residual and hand-derived derivative.
"""

import logging
import math
from typing import Callable

from app.calculations.errors import (
    RATE_DIVERGED_MESSAGE,
    RATE_NON_CONVERGENT_MESSAGE,
    DomainError,
    DomainErrorKind,
)

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 0.0001
DEFAULT_GUESS = 0.01

# Valid periodic rates lie in (MIN_RATE, MAX_RATE]
MIN_RATE = 0.0
MAX_RATE = 1.0

RateFunction = Callable[[float], float]


def solve_rate(
    residual: RateFunction,
    derivative: RateFunction,
    guess: float = DEFAULT_GUESS,
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = TOLERANCE,
) -> float:
    """
    Find the periodic rate that zeroes the residual using Newton-Raphson.

    Args:
        residual: f(j), zero at the wanted rate
        derivative: f'(j)
        guess: Initial rate as decimal (default 0.01 = 1%)
        max_iterations: Iteration cap
        tolerance: Convergence threshold on the step size

    Returns:
        Periodic rate as decimal (e.g., 0.01 for 1%)

    Raises:
        DomainError: DIVERGED if a step leaves (0, 1], NON_CONVERGENT if the
            iteration cap is reached
    """
    rate = guess

    for iteration in range(max_iterations):
        slope = derivative(rate)
        if slope == 0 or not math.isfinite(slope):
            logger.warning(f"Rate search stopped at {rate}: derivative is {slope}")
            raise DomainError(DomainErrorKind.DIVERGED, RATE_DIVERGED_MESSAGE)

        new_rate = rate - residual(rate) / slope

        if abs(new_rate - rate) < tolerance:
            logger.debug(f"Rate search converged to {new_rate} after {iteration + 1} steps")
            return new_rate

        rate = new_rate

        if not math.isfinite(rate) or rate <= MIN_RATE or rate > MAX_RATE:
            logger.warning(f"Rate search diverged to {rate} after {iteration + 1} steps")
            raise DomainError(DomainErrorKind.DIVERGED, RATE_DIVERGED_MESSAGE)

    logger.warning(f"Rate search did not converge in {max_iterations} steps")
    raise DomainError(DomainErrorKind.NON_CONVERGENT, RATE_NON_CONVERGENT_MESSAGE)


def to_percentage(rate: float, decimals: int = 4) -> float:
    """Convert a decimal rate to a percentage rounded to the given decimals."""
    return round(rate * 100, decimals)
