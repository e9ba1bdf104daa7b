"""Tests for single-stock packing.

Tests cover:
- Rotation-aware heuristic on top of rectpack (bounds, spacing, overlap)
- Straight-cut shelf packing along both stock axes
- One-dimensional length packing with kerf
- Dispatch by mode and profile
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations

import pytest

from nesting.contracts import RectanglePacker
from nesting.domain import (
    DemandPiece,
    DemandRequest,
    NestingMode,
    PackingProfile,
    PlacedPiece,
    StockUnit,
    expand_demand,
)
from nesting.infrastructure import (
    RectpackPacker,
    pack_heuristic,
    pack_length,
    pack_single_stock,
    pack_straight_cuts,
)


def pieces_of(*requests: tuple[str, float, float, int], mode: NestingMode = NestingMode.SHEET) -> list[DemandPiece]:
    return expand_demand(
        [DemandRequest(template_id=t, width=w, length=l, quantity=q) for t, w, l, q in requests],
        mode,
    )


def assert_within(placements: Sequence[PlacedPiece], stock: StockUnit, border: float) -> None:
    for p in placements:
        assert p.x >= border
        assert p.y >= border
        assert p.right_edge <= stock.width - border
        assert p.top_edge <= stock.length - border


def assert_spaced(placements: Sequence[PlacedPiece], gap: float) -> None:
    for a, b in combinations(placements, 2):
        assert (
            a.right_edge + gap <= b.x
            or b.right_edge + gap <= a.x
            or a.top_edge + gap <= b.y
            or b.top_edge + gap <= a.y
        ), f"{a.piece.instance_id} and {b.piece.instance_id} are closer than {gap}"


class RecordingPacker:
    """Packer double that places nothing and records its calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], tuple[float, float], float, float]] = []

    def pack(self, pieces, bin_size, spacing, border):
        self.calls.append(([p.instance_id for p in pieces], bin_size, spacing, border))
        return []


class TestRectpackPacker:
    """Tests for the rotation-aware heuristic."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(RectpackPacker(), RectanglePacker)

    def test_requires_algorithms(self) -> None:
        with pytest.raises(ValueError):
            RectpackPacker(pack_algos=())

    def test_six_shelves_on_one_sheet(
        self, full_sheet: StockUnit, machine_profile: PackingProfile
    ) -> None:
        pieces = pieces_of(("P", 400, 300, 6))

        outcome = pack_heuristic(full_sheet, pieces, machine_profile)

        assert len(outcome.placed_ids) == 6
        placements = outcome.layout.placements
        assert_within(placements, full_sheet, border=10)
        assert_spaced(placements, gap=10)

    def test_placed_dimensions_follow_rotation(self, full_sheet: StockUnit) -> None:
        pieces = pieces_of(("P", 400, 300, 6))
        outcome = pack_heuristic(full_sheet, pieces, PackingProfile())
        for p in outcome.layout.placements:
            if p.rotated:
                assert (p.placed_width, p.placed_length) == (400, 300)
            else:
                assert (p.placed_width, p.placed_length) == (300, 400)

    def test_partial_fill_leaves_out_pieces(self) -> None:
        stock = StockUnit(id="S", name="S", width=100, length=100)
        pieces = pieces_of(("P", 60, 60, 3))

        outcome = pack_heuristic(stock, pieces, PackingProfile())

        assert len(outcome.placed_ids) == 1
        assert not outcome.is_empty

    def test_needs_rotation_to_fit(self) -> None:
        stock = StockUnit(id="S", name="S", width=500, length=100)
        pieces = pieces_of(("P", 100, 500, 1))

        outcome = pack_heuristic(stock, pieces, PackingProfile())

        (placed,) = outcome.layout.placements
        assert placed.rotated
        assert (placed.placed_width, placed.placed_length) == (500, 100)

    def test_no_overlap_with_mixed_sizes(self) -> None:
        stock = StockUnit(id="S", name="S", width=1220, length=2440)
        pieces = pieces_of(("A", 600, 700, 3), ("B", 300, 450, 4), ("C", 200, 200, 5))

        outcome = pack_heuristic(stock, pieces, PackingProfile(margin_gap=3))

        assert_within(outcome.layout.placements, stock, border=0)
        assert_spaced(outcome.layout.placements, gap=3)

    def test_fractional_border_keeps_coordinates_on_grid(self) -> None:
        stock = StockUnit(id="S", name="S", width=10.2, length=10.2)
        pieces = pieces_of(("A", 0.2, 3.3, 6), ("B", 1.1, 0.7, 4))

        outcome = pack_heuristic(stock, pieces, PackingProfile(border_inset=0.1))

        placements = outcome.layout.placements
        assert len(placements) == 10
        for p in placements:
            assert p.x == round(p.x, 3)
            assert p.y == round(p.y, 3)
            assert p.x >= 0.1 and p.y >= 0.1
            assert p.right_edge <= 10.1 + 1e-9
            assert p.top_edge <= 10.1 + 1e-9
        assert not any(a.overlaps(b) for a, b in combinations(placements, 2))

    def test_only_fitting_pieces_reach_packer(self) -> None:
        stock = StockUnit(id="S", name="S", width=100, length=100)
        pieces = pieces_of(("OK", 50, 50, 1), ("BIG", 150, 150, 1))
        packer = RecordingPacker()

        outcome = pack_heuristic(stock, pieces, PackingProfile(margin_gap=2, border_inset=1), packer)

        assert packer.calls == [(["OK#1"], (100, 100), 2, 1)]
        assert outcome.is_empty

    def test_no_candidates_skips_packer(self) -> None:
        stock = StockUnit(id="S", name="S", width=100, length=100)
        packer = RecordingPacker()

        outcome = pack_heuristic(stock, pieces_of(("BIG", 150, 150, 1)), PackingProfile(), packer)

        assert packer.calls == []
        assert outcome.layout.stock_id == "S"


class TestStraightCuts:
    """Tests for the straight-cut shelf packer."""

    def test_rows_along_width(self, full_sheet: StockUnit) -> None:
        pieces = pieces_of(("P", 300, 400, 6))

        outcome = pack_straight_cuts(full_sheet, pieces, PackingProfile())

        positions = [(p.x, p.y) for p in outcome.layout.placements]
        assert positions == [(0, 0), (300, 0), (600, 0), (0, 400), (300, 400), (600, 400)]
        assert not any(p.rotated for p in outcome.layout.placements)

    def test_strip_uses_rows_along_length(self) -> None:
        stock = StockUnit(id="S2", name="Strip", width=2000, length=100)
        pieces = pieces_of(("Q", 500, 100, 5))

        outcome = pack_straight_cuts(stock, pieces, PackingProfile(straight_cuts_only=True))

        assert len(outcome.placed_ids) == 4
        assert "Q#5" not in outcome.placed_ids
        placements = outcome.layout.placements
        assert [(p.x, p.y) for p in placements] == [(0, 0), (500, 0), (1000, 0), (1500, 0)]
        assert all(p.rotated for p in placements)
        assert all((p.placed_width, p.placed_length) == (500, 100) for p in placements)

    def test_group_closes_its_row(self, full_sheet: StockUnit) -> None:
        pieces = pieces_of(("A", 500, 500, 1), ("B", 100, 100, 2))

        outcome = pack_straight_cuts(full_sheet, pieces, PackingProfile())

        by_id = {p.piece.instance_id: p for p in outcome.layout.placements}
        assert (by_id["A#1"].x, by_id["A#1"].y) == (0, 0)
        assert (by_id["B#1"].x, by_id["B#1"].y) == (0, 500)
        assert (by_id["B#2"].x, by_id["B#2"].y) == (100, 500)

    def test_stops_when_length_is_exceeded(self) -> None:
        stock = StockUnit(id="S", name="S", width=100, length=250)
        pieces = pieces_of(("P", 100, 100, 3))

        outcome = pack_straight_cuts(stock, pieces, PackingProfile())

        assert len(outcome.placed_ids) == 2

    def test_margin_and_border(self, full_sheet: StockUnit, machine_profile: PackingProfile) -> None:
        pieces = pieces_of(("P", 100, 100, 2))

        outcome = pack_straight_cuts(full_sheet, pieces, machine_profile)

        assert [(p.x, p.y) for p in outcome.layout.placements] == [(10, 10), (120, 10)]
        assert_within(outcome.layout.placements, full_sheet, border=10)

    def test_cut_lines_are_edge_to_edge(self, full_sheet: StockUnit) -> None:
        pieces = pieces_of(("A", 300, 350, 4), ("B", 200, 250, 6))

        outcome = pack_straight_cuts(full_sheet, pieces, PackingProfile())

        # Pieces sharing a row share its top coordinate.
        rows: dict[float, list[PlacedPiece]] = {}
        for p in outcome.layout.placements:
            rows.setdefault(p.y, []).append(p)
        for members in rows.values():
            assert len({p.placed_length for p in members}) == 1
        assert_spaced(outcome.layout.placements, gap=0)


class TestPackLength:
    """Tests for one-dimensional length packing."""

    def test_longest_first_with_kerf(self) -> None:
        bar = StockUnit(id="B", name="Bar", width=40, length=3000)
        pieces = pieces_of(("L", 40, 2500, 1), ("M", 40, 900, 1), ("S", 40, 400, 1), mode=NestingMode.LENGTH)

        outcome = pack_length(bar, pieces, PackingProfile(margin_gap=5))

        assert outcome.placed_ids == frozenset({"L#1", "S#1"})
        assert [(p.x, p.y) for p in outcome.layout.placements] == [(0, 0), (0, 2505)]

    def test_border_trims_ends(self) -> None:
        bar = StockUnit(id="B", name="Bar", width=40, length=1000)
        pieces = pieces_of(("P", 40, 491, 2), mode=NestingMode.LENGTH)

        outcome = pack_length(bar, pieces, PackingProfile(border_inset=10))

        assert [p.y for p in outcome.layout.placements] == [10]

    def test_ignores_wider_pieces(self) -> None:
        bar = StockUnit(id="B", name="Bar", width=40, length=1000)
        pieces = pieces_of(("W", 60, 100, 1), mode=NestingMode.LENGTH)
        assert pack_length(bar, pieces, PackingProfile()).is_empty


class TestPackSingleStock:
    """Algorithm selection."""

    def test_length_mode(self) -> None:
        bar = StockUnit(id="B", name="Bar", width=40, length=1000)
        pieces = pieces_of(("P", 40, 300, 3), mode=NestingMode.LENGTH)

        outcome = pack_single_stock(bar, pieces, PackingProfile(), NestingMode.LENGTH)

        assert len(outcome.placed_ids) == 3
        assert all(p.x == 0 for p in outcome.layout.placements)

    def test_straight_cuts_bypass_packer(self, full_sheet: StockUnit) -> None:
        packer = RecordingPacker()

        outcome = pack_single_stock(
            full_sheet,
            pieces_of(("P", 100, 100, 2)),
            PackingProfile(straight_cuts_only=True),
            packer=packer,
        )

        assert packer.calls == []
        assert len(outcome.placed_ids) == 2

    def test_free_rotation_uses_packer(self, full_sheet: StockUnit) -> None:
        packer = RecordingPacker()

        pack_single_stock(full_sheet, pieces_of(("P", 100, 100, 2)), PackingProfile(), packer=packer)

        assert len(packer.calls) == 1
