"""Feasibility assessment of demand against a stock catalog.

Runs before the combination search so that impossible requests are answered
with a structured diagnostic instead of an expensive failed search.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from nesting.domain.value_objects import (
    DemandPiece,
    NestingMode,
    PackingProfile,
    StockUnit,
)

logger = logging.getLogger(__name__)


def fits_within(width: float, length: float, area_width: float, area_length: float) -> bool:
    """Check whether a rectangle fits an area in either orientation."""
    if area_width <= 0 or area_length <= 0:
        return False
    return (width <= area_width and length <= area_length) or (
        length <= area_width and width <= area_length
    )


def fits_stock(
    piece: DemandPiece,
    stock: StockUnit,
    border: float = 0.0,
    mode: NestingMode = NestingMode.SHEET,
) -> bool:
    """Stock-level fit test.

    Sheet mode: the piece fits the stock area inside the border in either
    orientation. Length mode: the piece is not rotated; its width must not
    exceed the bar width and its length must fit between the trimmed ends.
    Pieces restricted to other stock units never fit.
    """
    if not piece.allows(stock):
        return False
    if mode is NestingMode.LENGTH:
        usable_length = stock.usable_length(border)
        return usable_length > 0 and piece.width <= stock.width and piece.length <= usable_length
    return fits_within(
        piece.width,
        piece.length,
        stock.usable_width(border),
        stock.usable_length(border),
    )


@dataclass(frozen=True)
class FeasibilityReport:
    """Outcome of checking demand pieces against the stock catalog.

    Attributes:
        unusable_pieces: Pieces that fit no stock unit under any orientation.
        considered_stock: Stock units the pieces were checked against.
        stock_summaries: One display line per considered stock unit.
        profile_limited_pieces: Unusable pieces that would fit some stock
            unit if the profile's border inset were not applied.
    """

    unusable_pieces: tuple[DemandPiece, ...]
    considered_stock: tuple[StockUnit, ...]
    stock_summaries: tuple[str, ...] = ()
    profile_limited_pieces: tuple[DemandPiece, ...] = ()

    @property
    def is_feasible(self) -> bool:
        return not self.unusable_pieces

    @property
    def unusable_templates(self) -> list[str]:
        """Template ids with at least one unusable piece, in demand order."""
        return list(dict.fromkeys(piece.id for piece in self.unusable_pieces))


def summarize_stock(stock: StockUnit, border: float, mode: NestingMode) -> str:
    if mode is NestingMode.LENGTH:
        base = f"{stock.name} ({stock.length:g})"
        if border > 0:
            return f"{base} -> usable {max(stock.usable_length(border), 0):g}"
        return base

    base = f"{stock.name} ({stock.size_label})"
    if border > 0:
        usable_width = max(stock.usable_width(border), 0)
        usable_length = max(stock.usable_length(border), 0)
        return f"{base} -> usable {usable_length:g}×{usable_width:g}"
    return base


def assess_feasibility(
    pieces: Sequence[DemandPiece],
    stocks: Sequence[StockUnit],
    profile: PackingProfile | None = None,
    mode: NestingMode = NestingMode.SHEET,
) -> FeasibilityReport:
    """Partition demand into pieces that fit some stock unit and those that fit none.

    Args:
        pieces: Expanded demand piece instances.
        stocks: Stock catalog to check against.
        profile: Packing profile; only its border inset matters here.
        mode: Sheet or length nesting.

    Returns:
        FeasibilityReport listing the unusable pieces and the stock considered.
    """
    profile = profile or PackingProfile()
    border = profile.border_inset

    unusable: list[DemandPiece] = []
    profile_limited: list[DemandPiece] = []
    for piece in pieces:
        if any(fits_stock(piece, stock, border, mode) for stock in stocks):
            continue
        unusable.append(piece)
        if border > 0 and any(fits_stock(piece, stock, 0.0, mode) for stock in stocks):
            profile_limited.append(piece)

    if unusable:
        logger.info(
            "%d of %d demand pieces fit no stock unit", len(unusable), len(pieces)
        )

    return FeasibilityReport(
        unusable_pieces=tuple(unusable),
        considered_stock=tuple(stocks),
        stock_summaries=tuple(summarize_stock(s, border, mode) for s in stocks),
        profile_limited_pieces=tuple(profile_limited),
    )
