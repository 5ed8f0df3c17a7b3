from dataclasses import dataclass
from decimal import Decimal

from rentquote.core.money import ZERO

# (upper distance bound in km, handling fee); beyond the last bound the fee is 40
HANDLING_FEE_BANDS = (
    (Decimal("10"), Decimal("287")),
    (Decimal("50"), Decimal("198")),
    (Decimal("100"), Decimal("87")),
)
LONG_DISTANCE_HANDLING_FEE = Decimal("40")


@dataclass(frozen=True)
class TransportCost:
    base_cost: Decimal
    handling_fee: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.base_cost + self.handling_fee


def handling_fee(kilometers: Decimal) -> Decimal:
    for upper_bound, fee in HANDLING_FEE_BANDS:
        if kilometers <= upper_bound:
            return fee
    return LONG_DISTANCE_HANDLING_FEE


def transport_cost(rate_per_km: Decimal, kilometers: Decimal, with_handling_fee: bool = False) -> TransportCost:
    """Per-kilometre vehicle charge, optionally with the guest catalog handling fee."""
    base = rate_per_km * kilometers
    fee = handling_fee(kilometers) if with_handling_fee else ZERO
    return TransportCost(base_cost=base, handling_fee=fee)
