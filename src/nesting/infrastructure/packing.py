"""Single-stock packing algorithms.

Given one stock unit and a set of demand pieces, place as many pieces as
possible on that unit. Three algorithms are provided:

- A rotation-aware heuristic backed by the rectpack max-rects packer, used
  for free sheet nesting.
- A deterministic shelf (row) packer, used when only straight guillotine
  cuts are allowed.
- A one-dimensional packer for length nesting, laying pieces end to end.

Pieces that cannot be placed are left out of the layout; that is not an
error at this level.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal

import rectpack

from nesting.contracts.protocols import RectanglePacker
from nesting.domain.services.feasibility import fits_stock
from nesting.domain.value_objects import (
    DemandPiece,
    NestingMode,
    PackingProfile,
    PlacedPiece,
    StockLayout,
    StockUnit,
)

logger = logging.getLogger(__name__)

# rectpack compares dimensions exactly; work on a fixed decimal grid.
_GRID = Decimal("0.001")

DEFAULT_PACK_ALGOS = (rectpack.MaxRectsBaf, rectpack.MaxRectsBssf)
DEFAULT_SORT_ALGOS = (
    rectpack.SORT_AREA,
    rectpack.SORT_PERI,
    rectpack.SORT_LSIDE,
    rectpack.SORT_SSIDE,
    rectpack.SORT_RATIO,
)


@dataclass(frozen=True)
class PackOutcome:
    """Result of packing one stock unit.

    Attributes:
        layout: Layout of the placed pieces (possibly empty).
        placed_ids: Instance ids of the pieces that were placed.
    """

    layout: StockLayout
    placed_ids: frozenset[str]

    @property
    def is_empty(self) -> bool:
        return not self.placed_ids


def _grid_up(value: float) -> Decimal:
    return Decimal(str(value)).quantize(_GRID, rounding=ROUND_CEILING)


def _grid_down(value: float) -> Decimal:
    return Decimal(str(value)).quantize(_GRID, rounding=ROUND_FLOOR)


class RectpackPacker:
    """Rotation-aware max-rects packing on top of rectpack.

    Spacing is modelled by inflating every piece and the bin by the margin,
    so neighbouring pieces end up exactly `spacing` apart at minimum and the
    last piece in a row may touch the border. The border shrinks the bin and
    offsets every coordinate.

    Each combination of placement algorithm and input ordering is tried and
    the run placing the most area wins; earlier runs win ties.

    Attributes:
        pack_algos: rectpack placement algorithms to try, best-area-fit first.
        sort_algos: rectpack input orderings to try.
    """

    def __init__(
        self,
        pack_algos: Sequence[type] = DEFAULT_PACK_ALGOS,
        sort_algos: Sequence = DEFAULT_SORT_ALGOS,
    ) -> None:
        if not pack_algos or not sort_algos:
            raise ValueError("At least one pack and one sort algorithm are required")
        self.pack_algos = tuple(pack_algos)
        self.sort_algos = tuple(sort_algos)

    def pack(
        self,
        pieces: Sequence[DemandPiece],
        bin_size: tuple[float, float],
        spacing: float,
        border: float,
    ) -> list[PlacedPiece]:
        if not pieces:
            return []

        bin_width = _grid_down(bin_size[0] - 2 * border + spacing)
        bin_length = _grid_down(bin_size[1] - 2 * border + spacing)
        if bin_width <= 0 or bin_length <= 0:
            return []

        inflated = [
            (_grid_up(piece.width + spacing), _grid_up(piece.length + spacing))
            for piece in pieces
        ]
        total_area = sum(piece.area for piece in pieces)

        best: list[PlacedPiece] = []
        best_area = 0.0
        for pack_algo in self.pack_algos:
            for sort_algo in self.sort_algos:
                placements = self._run(
                    pieces, inflated, bin_width, bin_length, border, pack_algo, sort_algo
                )
                area = sum(p.piece.area for p in placements)
                if area > best_area:
                    best, best_area = placements, area
                if best_area >= total_area:
                    return best
        return best

    def _run(
        self,
        pieces: Sequence[DemandPiece],
        inflated: list[tuple[Decimal, Decimal]],
        bin_width: Decimal,
        bin_length: Decimal,
        border: float,
        pack_algo: type,
        sort_algo,
    ) -> list[PlacedPiece]:
        packer = rectpack.newPacker(
            mode=rectpack.PackingMode.Offline,
            bin_algo=rectpack.PackingBin.BFF,
            pack_algo=pack_algo,
            sort_algo=sort_algo,
            rotation=True,
        )
        packer.add_bin(bin_width, bin_length)
        for index, (width, length) in enumerate(inflated):
            packer.add_rect(width, length, rid=index)
        packer.pack()

        offset = Decimal(str(border))
        placements: list[PlacedPiece] = []
        for _, x, y, width, _, rid in packer.rect_list():
            piece = pieces[rid]
            rotated = piece.width != piece.length and width != inflated[rid][0]
            placements.append(
                PlacedPiece(
                    piece=piece,
                    x=float(offset + Decimal(x)),
                    y=float(offset + Decimal(y)),
                    placed_width=piece.length if rotated else piece.width,
                    placed_length=piece.width if rotated else piece.length,
                    rotated=rotated,
                )
            )
        placements.sort(key=lambda p: (p.y, p.x))
        return placements


def _outcome(stock: StockUnit, placements: Sequence[PlacedPiece]) -> PackOutcome:
    return PackOutcome(
        layout=StockLayout.for_stock(stock, tuple(placements)),
        placed_ids=frozenset(p.piece.instance_id for p in placements),
    )


def pack_heuristic(
    stock: StockUnit,
    pieces: Sequence[DemandPiece],
    profile: PackingProfile,
    packer: RectanglePacker | None = None,
) -> PackOutcome:
    """Pack a stock unit with the rotation-aware heuristic.

    Args:
        stock: Stock unit to fill.
        pieces: Candidate demand pieces.
        profile: Margin and border settings.
        packer: Placement capability; defaults to RectpackPacker.

    Returns:
        PackOutcome with the placements the packer managed.
    """
    border = profile.border_inset
    pool = [piece for piece in pieces if fits_stock(piece, stock, border)]
    if not pool:
        return _outcome(stock, ())

    packer = packer or RectpackPacker()
    placements = packer.pack(
        pool, (stock.width, stock.length), profile.margin_gap, border
    )
    return _outcome(stock, placements)


def _shelf_positions(
    pieces: Sequence[DemandPiece],
    usable_width: float,
    usable_length: float,
    margin: float,
    border: float,
) -> list[tuple[DemandPiece, float, float]]:
    """Row-by-row placement of unrotated pieces.

    Pieces are grouped by exact (width, length), groups are taken largest
    area first. Each row is filled left to right; a piece that would cross
    the usable width opens a new row, and the first piece that would cross
    the usable length ends placement for the whole sheet. Every group
    closes its last row.
    """
    groups: dict[tuple[float, float], list[DemandPiece]] = {}
    for piece in pieces:
        groups.setdefault((piece.width, piece.length), []).append(piece)
    ordered = sorted(groups.items(), key=lambda item: item[0][0] * item[0][1], reverse=True)

    positions: list[tuple[DemandPiece, float, float]] = []
    x = y = border
    row_height = 0.0
    for (width, length), members in ordered:
        for piece in members:
            if x + width > usable_width + border:
                x = border
                y += row_height + margin
                row_height = 0.0
            if y + length > usable_length + border:
                return positions
            positions.append((piece, x, y))
            x += width + margin
            row_height = max(row_height, length)
        if row_height > 0:
            x = border
            y += row_height + margin
            row_height = 0.0
    return positions


def pack_straight_cuts(
    stock: StockUnit,
    pieces: Sequence[DemandPiece],
    profile: PackingProfile,
) -> PackOutcome:
    """Pack a stock unit with the straight-cut shelf algorithm.

    Rows run along the stock width. The same rows are also tried along the
    stock length (every piece turned the same way) and the layout placing
    more pieces, then more area, is kept. Either way all cuts are
    edge-to-edge.
    """
    border = profile.border_inset
    margin = profile.margin_gap
    usable_width = stock.usable_width(border)
    usable_length = stock.usable_length(border)

    pool = [piece for piece in pieces if fits_stock(piece, stock, border)]
    if not pool:
        return _outcome(stock, ())

    along_width = [
        PlacedPiece(piece=piece, x=x, y=y, placed_width=piece.width, placed_length=piece.length)
        for piece, x, y in _shelf_positions(
            [p for p in pool if p.width <= usable_width and p.length <= usable_length],
            usable_width,
            usable_length,
            margin,
            border,
        )
    ]
    # Transposed frame: rows run along the stock length.
    along_length = [
        PlacedPiece(
            piece=piece,
            x=y,
            y=x,
            placed_width=piece.length,
            placed_length=piece.width,
            rotated=piece.width != piece.length,
        )
        for piece, x, y in _shelf_positions(
            [p for p in pool if p.width <= usable_length and p.length <= usable_width],
            usable_length,
            usable_width,
            margin,
            border,
        )
    ]

    def score(placements: list[PlacedPiece]) -> tuple[int, float]:
        return len(placements), sum(p.piece.area for p in placements)

    best = along_width if score(along_width) >= score(along_length) else along_length
    logger.debug(
        "Straight cuts on '%s': %d along width, %d along length",
        stock.id,
        len(along_width),
        len(along_length),
    )
    return _outcome(stock, best)


def pack_length(
    stock: StockUnit,
    pieces: Sequence[DemandPiece],
    profile: PackingProfile,
) -> PackOutcome:
    """Pack a bar for length nesting.

    Pieces are taken longest first and laid end to end from the trimmed
    start of the bar with the margin as saw kerf. A piece that no longer
    fits is skipped and shorter pieces are still tried. The border trims
    the bar ends only.
    """
    border = profile.border_inset
    pool = [piece for piece in pieces if fits_stock(piece, stock, border, NestingMode.LENGTH)]
    if not pool:
        return _outcome(stock, ())

    end = stock.length - border
    cursor = border
    placements: list[PlacedPiece] = []
    for piece in sorted(pool, key=lambda p: p.length, reverse=True):
        if cursor + piece.length > end:
            continue
        placements.append(
            PlacedPiece(
                piece=piece,
                x=0.0,
                y=cursor,
                placed_width=piece.width,
                placed_length=piece.length,
            )
        )
        cursor += piece.length + profile.margin_gap
    return _outcome(stock, placements)


def pack_single_stock(
    stock: StockUnit,
    pieces: Sequence[DemandPiece],
    profile: PackingProfile,
    mode: NestingMode = NestingMode.SHEET,
    packer: RectanglePacker | None = None,
) -> PackOutcome:
    """Pack one stock unit with the algorithm the mode and profile call for."""
    if mode is NestingMode.LENGTH:
        outcome = pack_length(stock, pieces, profile)
    elif profile.straight_cuts_only:
        outcome = pack_straight_cuts(stock, pieces, profile)
    else:
        outcome = pack_heuristic(stock, pieces, profile, packer)

    logger.debug(
        "Packed %d of %d pieces on '%s'",
        len(outcome.placed_ids),
        len(pieces),
        stock.id,
    )
    return outcome
