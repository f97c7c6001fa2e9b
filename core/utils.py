import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# Injected wherever "now" matters so tests can pin time
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float, places: int) -> float:
    """Round like the stored scores always have: halves go away from zero.

    Goes through the shortest decimal repr so 62.125 rounds to 62.13 rather
    than to the binary neighbour Python's round() would pick.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def to_float(value: Any) -> Optional[float]:
    """Convert Decimal/int/str numerics to float, passing None through."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug(f"Could not convert {value!r} to float")
        return None


def format_score(score: float) -> str:
    """Render a score without trailing zeros (75.0 -> '75', 72.5 -> '72.5')."""
    return f"{float(score):g}"
