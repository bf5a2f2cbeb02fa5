"""
Price conversion and the best-effort wrapper used by the pricing lookups.

Pricing degrades silently: a failed lookup hands back a safe default
instead of an exception. Storage operations do the opposite, so the
degrade path is kept explicit here rather than sprinkled through callers.
"""

import functools
import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def best_effort(
    fallback: Callable[..., T],
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorate an async lookup so any failure returns `fallback(*args, **kwargs)`.

    The fallback receives the same arguments as the lookup, which lets it
    echo an input back. Errors are logged at warning level, never raised.
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.warning(
                    "Lookup failed, using fallback",
                    extra={"lookup": func.__name__, "error": str(e)}
                )
                return fallback(*args, **kwargs)
        return wrapper
    return decorator


def round_half_away_from_zero(value: Any, places: int = 2) -> Any:
    """
    Round on the scaled value so 0.125 -> 0.13 and -0.125 -> -0.13.

    Decimal input stays Decimal (ROUND_HALF_UP is away from zero there).
    """
    if isinstance(value, Decimal):
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)

    scale = 10 ** places
    scaled = value * scale
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / scale


def convert_price(price: Any, exchange_rate: Any) -> Any:
    """
    Convert `price` by `exchange_rate`, rounded to 2 decimal places.

    Returns `price` unchanged if the arithmetic fails (e.g. non-numeric input).
    """
    try:
        return round_half_away_from_zero(price * exchange_rate)
    except Exception as e:
        logger.warning(
            "Price conversion failed, returning original price",
            extra={"price": repr(price), "exchange_rate": repr(exchange_rate), "error": str(e)}
        )
        return price
