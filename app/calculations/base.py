"""
Calculator Framework

Shared request/result types and the "solve for the missing field" dispatch
used by the accumulation, lump-sum and amortization calculators.
"""

import logging
import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Callable, ClassVar, Dict, Optional, Type

from app.calculations.errors import (
    GENERIC_ERROR_MESSAGE,
    PERIODS_NOT_POSITIVE_MESSAGE,
    DomainError,
    DomainErrorKind,
)
from app.calculations.formatting import (
    DEFAULT_CURRENCY,
    DEFAULT_LOCALE,
    format_currency,
    format_percentage,
    format_periods,
)

logger = logging.getLogger(__name__)

PERIODS = "periods"
RATE = "rate"

_LABELS = {
    "periods": "número de meses",
    "rate": "taxa de juros",
    "deposit": "depósito mensal",
    "final_value": "valor final",
    "present_value": "capital atual",
    "future_value": "valor futuro",
    "installment": "parcela",
    "financed_value": "valor financiado",
}


@dataclass(frozen=True)
class CalculationRequest:
    """
    Four optional inputs of a model plus an optional explicit target.

    None means "not provided"; zero is a provided value.
    """

    field_type: ClassVar[Type[Enum]]

    def values(self) -> Dict[Enum, Optional[float]]:
        """Map each field tag to its provided value (or None)."""
        return {
            self.field_type(f.name): getattr(self, f.name)
            for f in fields(self)
            if f.name != "target"
        }


@dataclass(frozen=True)
class CalculationResult:
    """Solved field, its numeric value, and the display string."""

    field: Enum
    value: float
    formatted_value: str

    def to_dict(self) -> dict:
        return {
            "field": self.field.value,
            "value": self.value,
            "formatted_value": self.formatted_value,
        }


@dataclass(frozen=True)
class SolveOutcome:
    """Either a result or a tagged error, never both."""

    result: Optional[CalculationResult] = None
    error: Optional[DomainError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None

    @property
    def error_kind(self) -> Optional[DomainErrorKind]:
        return self.error.kind if self.error else None


Solver = Callable[..., float]


class Calculator:
    """
    Base class for the three cash-flow calculators.

    Subclasses declare their field enum and the module-level function that solves each field.
    """

    field_type: ClassVar[Type[Enum]]
    solvers: ClassVar[Dict[str, Solver]] = {}

    def __init__(self, locale: str = DEFAULT_LOCALE, currency: str = DEFAULT_CURRENCY):
        self.locale = locale
        self.currency = currency

    def resolve_target(self, request: CalculationRequest) -> Optional[Enum]:
        """
        Decide which field to solve.

        Returns None when the request does not leave exactly one field to solve.
        """
        values = request.values()
        target = getattr(request, "target", None)

        if target is not None:
            target = self.field_type(target)
            missing = [f for f, v in values.items() if f is not target and v is None]
            return None if missing else target

        missing = [f for f, v in values.items() if v is None]
        return missing[0] if len(missing) == 1 else None

    def solve(self, request: CalculationRequest) -> Optional[CalculationResult]:
        """
        Solve the request's missing field.

        Returns:
            CalculationResult, or None when the request is incomplete

        Raises:
            DomainError: If the field has no valid solution
        """
        target = self.resolve_target(request)
        if target is None:
            logger.debug(f"{type(self).__name__}: request has no single field to solve")
            return None

        inputs = {
            f.value: v for f, v in request.values().items() if f is not target
        }
        self._check_model_inputs(inputs)
        self._validate_inputs(inputs)

        try:
            value = self.solvers[target.value](**inputs)
        except DomainError:
            raise
        except (ArithmeticError, ValueError) as e:
            logger.warning(f"{type(self).__name__} failed solving {target.value}: {e}")
            raise DomainError(DomainErrorKind.CALCULATION_FAILED, GENERIC_ERROR_MESSAGE) from e

        if not math.isfinite(value):
            logger.warning(f"{type(self).__name__} solved {target.value} out of range: {value}")
            raise DomainError(DomainErrorKind.CALCULATION_FAILED, GENERIC_ERROR_MESSAGE)

        return self._build_result(target, value)

    def try_solve(self, request: CalculationRequest) -> SolveOutcome:
        """Like solve(), but returns failures as a SolveOutcome instead of raising."""
        try:
            return SolveOutcome(result=self.solve(request))
        except DomainError as e:
            return SolveOutcome(error=e)

    def _check_model_inputs(self, inputs: Dict[str, float]) -> None:
        """Model-specific preconditions that take precedence over range checks."""

    def _validate_inputs(self, inputs: Dict[str, float]) -> None:
        for name, value in inputs.items():
            if not math.isfinite(value):
                raise DomainError(
                    DomainErrorKind.INVALID_RANGE,
                    f"O valor informado para {_label(name)} deve ser um número finito.",
                )
            if name == RATE:
                if value <= -100:
                    raise DomainError(
                        DomainErrorKind.INVALID_RANGE,
                        "A taxa de juros deve ser maior que -100%.",
                    )
            elif name == PERIODS:
                if value <= 0:
                    raise DomainError(DomainErrorKind.INVALID_RANGE, PERIODS_NOT_POSITIVE_MESSAGE)
            elif value <= 0:
                raise DomainError(
                    DomainErrorKind.INVALID_RANGE,
                    f"O valor informado para {_label(name)} deve ser maior que zero.",
                )

    def _build_result(self, target: Enum, value: float) -> CalculationResult:
        if target.value == PERIODS:
            periods = int(value)
            return CalculationResult(
                field=target,
                value=periods,
                formatted_value=format_periods(periods, self.locale),
            )

        if target.value == RATE:
            return CalculationResult(
                field=target,
                value=round(value, 4),
                formatted_value=format_percentage(value),
            )

        return CalculationResult(
            field=target,
            value=round(value, 2),
            formatted_value=format_currency(value, self.locale, self.currency),
        )


def _label(name: str) -> str:
    """Display label for a field name, e.g. "final_value" -> "valor final"."""
    return _LABELS.get(name, name.replace("_", " "))
