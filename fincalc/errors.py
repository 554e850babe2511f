"""
errors.py -- Error messages and the calculation wrapper.

Two policies, kept apart:
  safe degradation -- @safe_calculation(ResultModel) turns any unexpected
                      exception into ResultModel(error=MSG_CALCULATION_FAILED),
                      i.e. an all-zero result with an empty breakdown.
  hard validation  -- calculators with categorical input rules build an
                      error result up front (see utils/validator.py).

Callers always get a result model back; errors travel in its `error` field.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

MSG_CALCULATION_FAILED = "Calculation failed"
MSG_PERIOD_TOO_LONG = "Investment period too long"
MSG_TENURE_TOO_LONG = "Loan tenure too long"
MSG_COMPOUNDING_TOO_LONG = "Calculation period too long"
MSG_NO_MARGIN = "Selling price must exceed variable cost"

R = TypeVar("R", bound=BaseModel)


def error_result(result_cls: type[R], message: str) -> R:
    """Zero-valued result of `result_cls` carrying `message`."""
    return result_cls(error=message)


def safe_calculation(result_cls: type[R]) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """
    Decorate a calculator so it never raises.

    The fallback is built from `result_cls` defaults, so every result model
    must be constructible with no arguments besides `error`.
    """

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> R:
            try:
                return func(*args, **kwargs)
            except Exception:
                logger.exception("%s raised; returning zero-valued result", func.__name__)
                return error_result(result_cls, MSG_CALCULATION_FAILED)

        return wrapper

    return decorator
