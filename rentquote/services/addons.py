from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence

from rentquote.core.enums import AdditionalItemType
from rentquote.core.money import ZERO, round_money
from rentquote.schemas.catalog import Equipment
from rentquote.schemas.quote import AdditionalSnapshot, SelectedAdditionalItem


@dataclass(frozen=True)
class AddOnCosts:
    additional_cost: Decimal = ZERO
    accessories_cost: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.additional_cost + self.accessories_cost


def snapshot_selection(
    equipment: Equipment,
    selected: Sequence[SelectedAdditionalItem],
) -> List[AdditionalSnapshot]:
    """Freeze selected add-ons so later catalog price edits cannot touch the line."""
    catalog = {item.id: item for item in equipment.additional}
    snapshots = []
    for choice in selected:
        source = catalog.get(choice.id)
        if choice.price_per_day is None and source is None:
            raise ValueError(
                f"Additional item {choice.id} is not offered with equipment {equipment.id}"
            )
        snapshots.append(AdditionalSnapshot(
            id=choice.id,
            name=choice.name or (source.name if source else f"#{choice.id}"),
            type=choice.type or (source.type if source else AdditionalItemType.ADDITIONAL),
            price_per_day=round_money(
                choice.price_per_day if choice.price_per_day is not None else source.price_per_day
            ),
            quantity=choice.quantity,
        ))
    return snapshots


def aggregate(selected: Sequence[AdditionalSnapshot], days: int) -> AddOnCosts:
    """Sum per-day add-on charges over the rental period, split by item type."""
    additional_cost = ZERO
    accessories_cost = ZERO
    for item in selected:
        cost = item.price_per_day * max(item.quantity or 1, 1) * days
        if item.type == AdditionalItemType.ACCESSORY:
            accessories_cost += cost
        else:
            additional_cost += cost
    return AddOnCosts(additional_cost=additional_cost, accessories_cost=accessories_cost)
