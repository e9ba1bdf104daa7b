"""Result aggregation: per-stock usage and area totals for a search result."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from nesting.domain.value_objects import (
    DemandPiece,
    NestingError,
    SearchResult,
    StockLayout,
    StockUnit,
)

# Relative slack for float sums of areas.
_AREA_TOLERANCE = 1e-9


@dataclass(frozen=True)
class StockUsage:
    """How many units of one stock type a result consumes."""

    stock_id: str
    name: str
    size_label: str
    area: float
    count: int
    price: float | None = None
    weight: float | None = None

    @property
    def consumed_area(self) -> float:
        return self.area * self.count


@dataclass(frozen=True)
class NestingSummary:
    """Aggregated view of a finished search.

    Attributes:
        usages: Per-stock usage, sorted by count descending.
        consumed_area: Total stock area consumed.
        demand_area: Total area of all demand piece instances.
        waste_area: consumed_area - demand_area.
        layouts: Layouts in search order, unchanged.
        total_price: Sum of unit prices, if every used stock has a price.
        total_weight: Sum of unit weights, if every used stock has a weight.
    """

    usages: tuple[StockUsage, ...]
    consumed_area: float
    demand_area: float
    waste_area: float
    layouts: tuple[StockLayout, ...]
    total_price: float | None = None
    total_weight: float | None = None

    @property
    def waste_percentage(self) -> float:
        if self.consumed_area == 0:
            return 0.0
        return self.waste_area / self.consumed_area * 100

    @property
    def total_units(self) -> int:
        return sum(usage.count for usage in self.usages)


def aggregate(
    result: SearchResult,
    pieces: Sequence[DemandPiece],
    stocks: Sequence[StockUnit],
) -> NestingSummary:
    """Convert a raw search result into per-stock counts and area totals.

    Raises:
        NestingError: If the result consumes less area than the demand
            covers, i.e. its layouts cannot hold every piece.
    """
    by_id = {stock.id: stock for stock in stocks}

    usages = [
        StockUsage(
            stock_id=stock_id,
            name=by_id[stock_id].name,
            size_label=by_id[stock_id].size_label,
            area=by_id[stock_id].area,
            count=count,
            price=by_id[stock_id].price,
            weight=by_id[stock_id].weight,
        )
        for stock_id, count in result.counts.items()
        if count > 0
    ]
    usages.sort(key=lambda usage: usage.count, reverse=True)

    demand_area = sum(piece.area for piece in pieces)
    if result.total_area < demand_area * (1 - _AREA_TOLERANCE):
        raise NestingError(
            f"Result consumes {result.total_area:g} but demand covers {demand_area:g}"
        )

    total_price = None
    if usages and all(usage.price is not None for usage in usages):
        total_price = sum(usage.price * usage.count for usage in usages)
    total_weight = None
    if usages and all(usage.weight is not None for usage in usages):
        total_weight = sum(usage.weight * usage.count for usage in usages)

    return NestingSummary(
        usages=tuple(usages),
        consumed_area=result.total_area,
        demand_area=demand_area,
        waste_area=max(result.total_area - demand_area, 0.0),
        layouts=result.layouts,
        total_price=total_price,
        total_weight=total_weight,
    )
