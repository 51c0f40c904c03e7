"""
Tests for the Newton-Raphson rate solver.
"""

import pytest

from app.calculations.errors import (
    RATE_DIVERGED_MESSAGE,
    RATE_NON_CONVERGENT_MESSAGE,
    DomainError,
    DomainErrorKind,
)
from app.calculations.rate_solver import solve_rate, to_percentage
from app.calculations.accumulation import accumulation_residuals, calculate_final_value
from app.calculations.amortization import amortization_residuals, calculate_installment


class TestSolverPolicy:
    """Test convergence, divergence and exhaustion of the generic loop."""

    def test_converges_on_linear_residual(self):
        """Test a linear residual converges to its root."""
        rate = solve_rate(lambda j: j - 0.05, lambda j: 1.0)
        assert abs(rate - 0.05) < 1e-12

    def test_step_below_zero_diverges(self):
        """Test a step to a non-positive rate fails immediately."""
        with pytest.raises(DomainError) as exc_info:
            solve_rate(lambda j: j + 0.5, lambda j: 1.0)
        assert exc_info.value.kind == DomainErrorKind.DIVERGED
        assert exc_info.value.message == RATE_DIVERGED_MESSAGE

    def test_step_above_one_diverges(self):
        """Test a step beyond 100% per period fails immediately."""
        with pytest.raises(DomainError) as exc_info:
            solve_rate(lambda j: j - 5, lambda j: 1.0)
        assert exc_info.value.kind == DomainErrorKind.DIVERGED

    def test_zero_derivative_diverges(self):
        """Test a flat residual is reported as divergence."""
        with pytest.raises(DomainError) as exc_info:
            solve_rate(lambda j: j - 0.05, lambda j: 0.0)
        assert exc_info.value.kind == DomainErrorKind.DIVERGED

    def test_oscillation_exhausts_iterations(self):
        """Test a search bouncing between 1% and 99% hits the iteration cap."""
        calls = []

        def residual(j):
            calls.append(j)
            return j - 0.5

        with pytest.raises(DomainError) as exc_info:
            solve_rate(residual, lambda j: 0.5)

        assert exc_info.value.kind == DomainErrorKind.NON_CONVERGENT
        assert len(calls) == 100
        assert exc_info.value.message == RATE_NON_CONVERGENT_MESSAGE

    def test_custom_iteration_cap(self):
        """Test the iteration cap is configurable."""
        with pytest.raises(DomainError) as exc_info:
            solve_rate(lambda j: j - 0.5, lambda j: 0.5, max_iterations=3)
        assert exc_info.value.kind == DomainErrorKind.NON_CONVERGENT

    def test_to_percentage_rounds_to_four_decimals(self):
        """Test decimal rate conversion to percentage."""
        assert to_percentage(0.0123456) == 1.2346


class TestModelResiduals:
    """Test the hand-derived residual/derivative pairs."""

    def test_accumulation_residual_zero_at_true_rate(self):
        """Test the residual vanishes at the rate that produced final_value."""
        final_value = calculate_final_value(10, 3.0, 100)
        residual, _ = accumulation_residuals(10, 100, final_value)
        assert abs(residual(0.03)) < 1e-9

    def test_accumulation_derivative_matches_finite_difference(self):
        """Test the analytic derivative against a central difference."""
        residual, derivative = accumulation_residuals(10, 100, 1200)
        h = 1e-6
        numeric = (residual(0.03 + h) - residual(0.03 - h)) / (2 * h)
        assert abs(derivative(0.03) - numeric) < 1e-3

    def test_amortization_derivative_matches_finite_difference(self):
        """Test the analytic derivative against a central difference."""
        residual, derivative = amortization_residuals(24, 528.71, 10000)
        h = 1e-6
        numeric = (residual(0.02 + h) - residual(0.02 - h)) / (2 * h)
        assert abs(derivative(0.02) - numeric) < 1e-2

    def test_accumulation_rate_reproduces_final_value(self):
        """Test the solved rate substituted back gives the target within 0.01."""
        residual, derivative = accumulation_residuals(10, 100, 1200)
        rate = solve_rate(residual, derivative)
        assert abs(calculate_final_value(10, to_percentage(rate), 100) - 1200) < 0.01

    def test_amortization_rate_reproduces_installment(self):
        """Test the solved loan rate reproduces the installment."""
        residual, derivative = amortization_residuals(36, 350, 10000)
        rate = solve_rate(residual, derivative)
        assert abs(calculate_installment(36, rate * 100, 10000) - 350) < 0.01
