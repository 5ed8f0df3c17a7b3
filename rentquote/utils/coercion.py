import logging
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)


def coerce_positive_int(value, default: int = 1) -> int:
    """Turn form input into a positive integer, falling back to ``default``.

    Quantity and day fields arrive from free-text inputs; anything that is
    not a number, or is zero or negative, becomes ``default`` instead of
    reaching the calculators.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        logger.debug(f"Coerced non-numeric input {value!r} to {default}")
        return default
    if not number.is_finite() or number < 1:
        return default
    return int(number)


def clamp_quantity(quantity: int, available: int) -> int:
    """Cap a line quantity at the catalog's available count when one is known."""
    if available >= 1 and quantity > available:
        logger.warning(f"Quantity {quantity} exceeds available {available}, clamped")
        return available
    return quantity
