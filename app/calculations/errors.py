"""
Calculation Errors

Every failed inversion raises DomainError tagged with a DomainErrorKind,
so callers can branch on the kind and still show the message.
"""

from enum import Enum


class DomainErrorKind(str, Enum):
    """Closed set of reasons a calculation can fail."""

    INVALID_RANGE = "invalid_range"
    DIVERGED = "diverged"
    NON_CONVERGENT = "non_convergent"
    CALCULATION_FAILED = "calculation_failed"


class DomainError(ValueError):
    """Raised when the requested value has no valid solution."""

    def __init__(self, kind: DomainErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


GENERIC_ERROR_MESSAGE = "Erro ao calcular valores."

# Display messages shared by the models
FINAL_NOT_GREATER_MESSAGE = (
    "O valor final deve ser maior que o depósito mensal para este tipo de investimento."
)
FUTURE_NOT_GREATER_MESSAGE = "O valor futuro deve ser maior que o capital atual para este cálculo."
INSTALLMENT_TOO_SMALL_MESSAGE = (
    "A parcela deve ser maior que os juros do valor financiado para este cálculo."
)
ZERO_RATE_PERIODS_MESSAGE = "A taxa de juros não pode ser zero para calcular o número de meses."
PERIODS_NOT_POSITIVE_MESSAGE = "O número de meses deve ser maior que zero para este cálculo."
PERIODS_FAILED_MESSAGE = "Não foi possível calcular o número de meses com os valores fornecidos."
RATE_FAILED_MESSAGE = "Não foi possível calcular a taxa de juros com os valores fornecidos."
RATE_DIVERGED_MESSAGE = (
    "Não foi possível encontrar uma taxa de juros válida com os valores fornecidos."
)
RATE_NON_CONVERGENT_MESSAGE = "Não foi possível calcular a taxa de juros. Tente valores diferentes."
