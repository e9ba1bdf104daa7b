"""Application commands (use cases) for stock nesting."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from nesting.contracts.protocols import RectanglePacker
from nesting.domain import (
    DemandRequest,
    FailureKind,
    InvalidJobError,
    NestingMode,
    PackingProfile,
    StockUnit,
    aggregate,
    assess_feasibility,
    expand_demand,
)
from nesting.infrastructure.packing import RectpackPacker

from .dtos import NestingJob, NestingOutput
from .search import SearchBudget, find_best_combination

logger = logging.getLogger(__name__)


class NestCommand:
    """Command to find the cheapest stock combination for a demand list.

    Validation problems are raised before any work starts. Infeasible or
    exhausted requests come back as a NestingOutput with `failure` set;
    the caller decides whether that is a user-facing error.
    """

    def __init__(self, packer: RectanglePacker | None = None) -> None:
        self.packer = packer or RectpackPacker()

    def check(self, job: NestingJob) -> NestingOutput:
        """Run validation and the feasibility assessment only.

        Raises:
            InvalidJobError: If the job is inconsistent.
            InvalidDimensionError: If a template id is duplicated.
        """
        errors = job.validate()
        if errors:
            raise InvalidJobError(errors)

        pieces = expand_demand(job.demand, job.mode)
        report = assess_feasibility(pieces, job.stock, job.profile, job.mode)
        output = NestingOutput(pieces=pieces, feasibility=report)
        if not report.is_feasible:
            output.failure = (
                FailureKind.PROFILE_MISMATCH
                if len(report.profile_limited_pieces) == len(report.unusable_pieces)
                else FailureKind.NO_FEASIBLE_STOCK
            )
            output.errors = [
                f"Piece '{piece.name}' ({piece.width:g}x{piece.length:g}) fits no stock unit"
                for piece in report.unusable_pieces
            ]
        return output

    def execute(self, job: NestingJob) -> NestingOutput:
        """Execute the nesting command.

        Args:
            job: Stock catalog, demand, profile and search limits.

        Returns:
            NestingOutput with the aggregated summary, or with `failure`
            and `errors` describing why demand cannot be met.

        Raises:
            InvalidJobError: If the job is inconsistent.
            InvalidDimensionError: If a template id is duplicated.
        """
        output = self.check(job)
        if output.failure is not None:
            logger.info("Nesting skipped: %s", output.failure.value)
            return output

        outcome = find_best_combination(
            output.pieces,
            job.stock,
            job.profile,
            job.mode,
            self.packer,
            job.budget,
        )
        output.explored = outcome.explored
        output.budget_exhausted = outcome.budget_exhausted

        if outcome.result is None:
            output.failure = FailureKind.PACKING_EXHAUSTED
            output.errors = ["Could not place all demand on the available stock"]
            return output

        output.summary = aggregate(outcome.result, output.pieces, job.stock)
        logger.info(
            "Nested %d pieces on %d stock units, waste %.1f%%",
            len(output.pieces),
            output.summary.total_units,
            output.summary.waste_percentage,
        )
        return output


def find_best_for_sheets(
    demand: Sequence[DemandRequest],
    stock: Sequence[StockUnit],
    profile: PackingProfile | None = None,
    budget: SearchBudget | None = None,
) -> NestingOutput:
    """Sheet nesting; free rotation unless the profile asks for straight cuts."""
    job = NestingJob(
        stock=list(stock),
        demand=list(demand),
        profile=profile or PackingProfile(),
        mode=NestingMode.SHEET,
        budget=budget or SearchBudget(),
    )
    return NestCommand().execute(job)


def find_best_for_lengths(
    demand: Sequence[DemandRequest],
    stock: Sequence[StockUnit],
    profile: PackingProfile | None = None,
    budget: SearchBudget | None = None,
) -> NestingOutput:
    """Length nesting of bars, margin acting as saw kerf."""
    job = NestingJob(
        stock=list(stock),
        demand=list(demand),
        profile=profile or PackingProfile(),
        mode=NestingMode.LENGTH,
        budget=budget or SearchBudget(),
    )
    return NestCommand().execute(job)
