"""
Financial calculation API endpoints.

Each solve endpoint accepts the four fields of its model, leaves one out
(or names it in `target`), and returns the solved value.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.calculations import accumulation, amortization, rates
from app.calculations.accumulation import (
    AccumulationCalculator,
    AccumulationField,
    AccumulationRequest,
)
from app.calculations.amortization import (
    AmortizationCalculator,
    AmortizationField,
    AmortizationRequest,
)
from app.calculations.base import Calculator, CalculationRequest
from app.calculations.errors import DomainError
from app.calculations.formatting import format_percentage
from app.calculations.lump_sum import LumpSumCalculator, LumpSumField, LumpSumRequest
from app.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

INCOMPLETE_REQUEST_DETAIL = "Provide exactly three of the four fields, or name the field to solve in 'target'."

MAX_SCHEDULE_PERIODS = 1200


class CalculationResponse(BaseModel):
    """Solved field with its value and display string."""

    field: str
    value: float
    formatted_value: str


class AccumulationInput(BaseModel):
    """Input for the savings plan calculator."""

    periods: Optional[int] = None
    rate: Optional[float] = None
    deposit: Optional[float] = None
    final_value: Optional[float] = None
    target: Optional[AccumulationField] = None


class LumpSumInput(BaseModel):
    """Input for the lump-sum compounding calculator."""

    periods: Optional[int] = None
    rate: Optional[float] = None
    present_value: Optional[float] = None
    future_value: Optional[float] = None
    target: Optional[LumpSumField] = None


class AmortizationInput(BaseModel):
    """Input for the loan calculator."""

    periods: Optional[int] = None
    rate: Optional[float] = None
    installment: Optional[float] = None
    financed_value: Optional[float] = None
    target: Optional[AmortizationField] = None


def _calculator(calculator_class) -> Calculator:
    settings = get_settings()
    return calculator_class(locale=settings.default_locale, currency=settings.default_currency)


def _solve(calculator: Calculator, request: CalculationRequest) -> CalculationResponse:
    outcome = calculator.try_solve(request)

    if outcome.error is not None:
        logger.info(f"{type(calculator).__name__} rejected {request}: {outcome.error.message}")
        raise HTTPException(status_code=400, detail=outcome.error.to_dict())

    if outcome.result is None:
        raise HTTPException(status_code=422, detail=INCOMPLETE_REQUEST_DETAIL)

    return CalculationResponse(**outcome.result.to_dict())


@router.post("/accumulation", response_model=CalculationResponse)
async def calculate_accumulation(inputs: AccumulationInput):
    """Solve the missing field of a savings plan."""
    return _solve(_calculator(AccumulationCalculator), AccumulationRequest(**inputs.model_dump()))


@router.post("/lump-sum", response_model=CalculationResponse)
async def calculate_lump_sum(inputs: LumpSumInput):
    """Solve the missing field of a lump-sum investment."""
    return _solve(_calculator(LumpSumCalculator), LumpSumRequest(**inputs.model_dump()))


@router.post("/amortization", response_model=CalculationResponse)
async def calculate_amortization(inputs: AmortizationInput):
    """Solve the missing field of a fixed-installment loan."""
    return _solve(_calculator(AmortizationCalculator), AmortizationRequest(**inputs.model_dump()))


class AccumulationScheduleInput(BaseModel):
    """Input for a savings plan schedule."""

    deposit: float = Field(..., gt=0)
    rate: float = Field(..., gt=-100)
    periods: int = Field(..., ge=1, le=MAX_SCHEDULE_PERIODS)


class AmortizationScheduleInput(BaseModel):
    """Input for a loan amortization schedule."""

    financed_value: float = Field(..., gt=0)
    rate: float = Field(..., gt=-100)
    periods: int = Field(..., ge=1, le=MAX_SCHEDULE_PERIODS)


@router.post("/accumulation/schedule")
async def calculate_accumulation_schedule(inputs: AccumulationScheduleInput):
    """Generate the balance of a savings plan period by period."""
    try:
        schedule = accumulation.generate_schedule(
            deposit=inputs.deposit,
            rate=inputs.rate,
            periods=inputs.periods,
        )
    except DomainError as e:
        logger.info(f"Savings schedule rejected {inputs}: {e.message}")
        raise HTTPException(status_code=400, detail=e.to_dict())

    return {
        "schedule": schedule,
        "total_deposits": sum(row["deposit"] for row in schedule),
        "total_interest": sum(row["interest"] for row in schedule),
        "final_value": schedule[-1]["ending_balance"],
    }


@router.post("/amortization/schedule")
async def calculate_amortization_schedule(inputs: AmortizationScheduleInput):
    """Generate a loan amortization schedule."""
    try:
        schedule = amortization.generate_schedule(
            financed_value=inputs.financed_value,
            rate=inputs.rate,
            periods=inputs.periods,
        )
    except DomainError as e:
        logger.info(f"Loan schedule rejected {inputs}: {e.message}")
        raise HTTPException(status_code=400, detail=e.to_dict())

    return {
        "schedule": schedule,
        "total_interest": amortization.calculate_total_interest(schedule),
        "total_principal": sum(row["principal"] for row in schedule),
    }


class AnnualRateInput(BaseModel):
    """Input for periodic to annual rate conversion."""

    rate: float = Field(..., gt=-100)
    periods_per_year: Optional[int] = Field(None, ge=1)


class AnnualRateResponse(BaseModel):
    """Effective annual rate equivalent to a periodic rate."""

    periodic_rate: float
    annual_rate: float
    formatted_value: str


@router.post("/rates/annual", response_model=AnnualRateResponse)
async def calculate_annual_rate(inputs: AnnualRateInput):
    """Convert a periodic rate into its effective annual rate."""
    periods_per_year = inputs.periods_per_year or get_settings().periods_per_year
    annual_rate = rates.periodic_to_annual(inputs.rate, periods_per_year)

    return AnnualRateResponse(
        periodic_rate=inputs.rate,
        annual_rate=round(annual_rate, 4),
        formatted_value=format_percentage(annual_rate),
    )
