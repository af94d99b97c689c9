"""Shared boundary for incentive calculators.

Every calculator is a pure function of a claim. The ``calculator_boundary``
decorator guarantees that nothing raised inside one escapes to the caller.
Failures come back as ``CalculationResult(success=False)``.
"""

import functools
import logging
from collections.abc import Callable
from typing import TypeVar

from claimcalc.models import CalculationResult

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=CalculationResult)


def failure(
    error: str, result_cls: type[CalculationResult] = CalculationResult
) -> CalculationResult:
    """Build a failed calculation result."""
    return result_cls(success=False, error=error)


def calculator_boundary(
    label: str,
    result_cls: type[CalculationResult] = CalculationResult,
) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """Catch unexpected exceptions raised by a calculator.

    Args:
        label: Claim category used in log and error messages.
        result_cls: Result model returned on failure.

    Returns:
        Decorator wrapping a calculator function.
    """

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> R:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                logger.exception("Error calculating %s incentive", label)
                return failure(f"Calculation failed: {exc}", result_cls)

        return wrapper

    return decorator
