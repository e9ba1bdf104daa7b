"""Best-combination search over stock types.

Branch and bound: pack one stock unit, remove the pieces it placed, recurse
on the remainder. Branches that cannot beat the best known total area are
pruned, and subproblems are memoized by the exact set of remaining
demand handles.

All search state (memo table, step counter, deadline) lives in a
_SearchRun allocated per top-level call and discarded on return, so
independent searches can run side by side.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass

from nesting.contracts.protocols import RectanglePacker
from nesting.domain.services.demand import DemandPool
from nesting.domain.services.feasibility import fits_stock
from nesting.domain.value_objects import (
    DemandPiece,
    NestingMode,
    PackingProfile,
    SearchResult,
    StockUnit,
)
from nesting.infrastructure.packing import PackOutcome, RectpackPacker, pack_single_stock

logger = logging.getLogger(__name__)

EMPTY_RESULT = SearchResult(total_area=0.0, counts={}, layouts=())


@dataclass(frozen=True)
class SearchBudget:
    """Optional limits a host can put on a search.

    When a limit is reached, subproblems still open are finished with a
    greedy fill instead of exhaustive search.

    Attributes:
        max_steps: Maximum number of search nodes to expand.
        time_limit: Maximum wall-clock seconds.
    """

    max_steps: int | None = None
    time_limit: float | None = None

    def __post_init__(self) -> None:
        if self.max_steps is not None and self.max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive")


@dataclass(frozen=True)
class SearchOutcome:
    """Result of a top-level search.

    Attributes:
        result: Best combination found, or None if demand could not be
            placed completely.
        explored: Number of search nodes expanded.
        budget_exhausted: True if the budget cut the search short and part
            of the result came from the greedy fill.
    """

    result: SearchResult | None
    explored: int
    budget_exhausted: bool = False


@dataclass(frozen=True)
class _MemoEntry:
    """Memoized subproblem.

    Either an exact result, or a floor: no combination cheaper than
    `floor` exists for that remaining demand.
    """

    result: SearchResult | None
    floor: float = math.inf


class _SearchRun:
    """State of a single top-level search call."""

    def __init__(
        self,
        pool: DemandPool,
        stocks: Sequence[StockUnit],
        profile: PackingProfile,
        mode: NestingMode,
        packer: RectanglePacker,
        budget: SearchBudget,
    ) -> None:
        self.pool = pool
        self.profile = profile
        self.mode = mode
        self.packer = packer
        self.budget = budget
        # Largest first for early pruning; id breaks ties deterministically.
        self.stocks = sorted(stocks, key=lambda s: (-s.area, s.id))
        self.fits = {
            stock.id: frozenset(
                handle
                for handle in range(len(pool))
                if fits_stock(pool[handle], stock, profile.border_inset, mode)
            )
            for stock in self.stocks
        }
        self.memo: dict[frozenset[int], _MemoEntry] = {}
        self.pack_cache: dict[tuple[str, frozenset[int]], PackOutcome] = {}
        self.steps = 0
        self.exhausted = False
        self.deadline = (
            time.monotonic() + budget.time_limit if budget.time_limit is not None else None
        )

    def _over_budget(self) -> bool:
        if self.exhausted:
            return True
        if self.budget.max_steps is not None and self.steps >= self.budget.max_steps:
            self.exhausted = True
        elif self.deadline is not None and time.monotonic() > self.deadline:
            self.exhausted = True
        if self.exhausted:
            logger.warning(
                "Search budget exhausted after %d steps; finishing greedily", self.steps
            )
        return self.exhausted

    def pack(self, stock: StockUnit, candidates: frozenset[int]) -> tuple[PackOutcome, frozenset[int]]:
        """Pack a stock unit against candidate handles; return the placed handles too."""
        key = (stock.id, candidates)
        outcome = self.pack_cache.get(key)
        if outcome is None:
            outcome = pack_single_stock(
                stock, self.pool.resolve(candidates), self.profile, self.mode, self.packer
            )
            self.pack_cache[key] = outcome
        placed = frozenset(self.pool.handle_of(i) for i in outcome.placed_ids)
        return outcome, placed

    def search(
        self, remaining: frozenset[int], bound: float
    ) -> tuple[SearchResult | None, float]:
        """Find the cheapest combination covering `remaining` below `bound`.

        Args:
            remaining: Handles of the demand still to place.
            bound: Total area the result has to beat.

        Returns:
            (result, tightened_bound). The result is None when no
            combination cheaper than `bound` exists; the tightened bound is
            `bound` or the result's total area, whichever is lower.
        """
        if not remaining:
            return EMPTY_RESULT, min(bound, 0.0)

        entry = self.memo.get(remaining)
        if entry is not None:
            if entry.result is not None:
                if entry.result.total_area < bound:
                    return entry.result, entry.result.total_area
                return None, bound
            if bound <= entry.floor:
                return None, bound

        if self._over_budget():
            result = self.greedy(remaining)
            if result is not None and result.total_area < bound:
                return result, result.total_area
            return None, bound

        self.steps += 1
        best: SearchResult | None = None
        best_bound = bound

        for stock in self.stocks:
            candidates = remaining & self.fits[stock.id]
            if not candidates:
                continue
            if stock.area >= best_bound:
                continue
            outcome, placed = self.pack(stock, candidates)
            if not placed:
                continue

            sub_result, _ = self.search(remaining - placed, best_bound - stock.area)
            if sub_result is None:
                continue

            total = stock.area + sub_result.total_area
            if total < best_bound:
                counts = dict(sub_result.counts)
                counts[stock.id] = counts.get(stock.id, 0) + 1
                best = SearchResult(
                    total_area=total,
                    counts=counts,
                    layouts=(outcome.layout, *sub_result.layouts),
                )
                best_bound = total

        if best is not None:
            self.memo[remaining] = _MemoEntry(result=best)
        elif not self.exhausted:
            self.memo[remaining] = _MemoEntry(result=None, floor=bound)
        return best, best_bound

    def greedy(self, remaining: frozenset[int]) -> SearchResult | None:
        """Fill greedily: repeatedly take the stock unit with the best utilization."""
        total = 0.0
        counts: dict[str, int] = {}
        layouts = []
        while remaining:
            choice: tuple[float, StockUnit, PackOutcome, frozenset[int]] | None = None
            for stock in self.stocks:
                candidates = remaining & self.fits[stock.id]
                if not candidates:
                    continue
                outcome, placed = self.pack(stock, candidates)
                if not placed:
                    continue
                utilization = outcome.layout.used_area / stock.area
                if choice is None or utilization > choice[0]:
                    choice = (utilization, stock, outcome, placed)
            if choice is None:
                return None
            _, stock, outcome, placed = choice
            total += stock.area
            counts[stock.id] = counts.get(stock.id, 0) + 1
            layouts.append(outcome.layout)
            remaining = remaining - placed
        return SearchResult(total_area=total, counts=counts, layouts=tuple(layouts))


def find_best_combination(
    pieces: Sequence[DemandPiece],
    stocks: Sequence[StockUnit],
    profile: PackingProfile | None = None,
    mode: NestingMode = NestingMode.SHEET,
    packer: RectanglePacker | None = None,
    budget: SearchBudget | None = None,
) -> SearchOutcome:
    """Search for the stock combination with the least total area.

    Args:
        pieces: Expanded demand piece instances.
        stocks: Stock catalog; each entry can be used any number of times.
        profile: Packing profile; defaults to no margin and no border.
        mode: Sheet or length nesting.
        packer: Rotation-aware placement capability for free sheet nesting.
        budget: Optional step/time limits.

    Returns:
        SearchOutcome; its result is None if the demand cannot be placed.
    """
    run = _SearchRun(
        pool=DemandPool(pieces),
        stocks=stocks,
        profile=profile or PackingProfile(),
        mode=mode,
        packer=packer or RectpackPacker(),
        budget=budget or SearchBudget(),
    )
    result, _ = run.search(run.pool.all_handles(), math.inf)

    logger.info(
        "Search explored %d nodes (%d memo entries): %s",
        run.steps,
        len(run.memo),
        f"total area {result.total_area:g}" if result is not None else "no solution",
    )
    return SearchOutcome(result=result, explored=run.steps, budget_exhausted=run.exhausted)
