"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from nesting.application.search import SearchBudget
from nesting.domain import (
    DemandPiece,
    DemandRequest,
    FailureKind,
    FeasibilityReport,
    NestingMode,
    NestingSummary,
    PackingProfile,
    StockUnit,
)


@dataclass
class NestingJob:
    """Input DTO for one nesting request."""

    stock: list[StockUnit]
    demand: list[DemandRequest]
    profile: PackingProfile = field(default_factory=PackingProfile)
    mode: NestingMode = NestingMode.SHEET
    budget: SearchBudget = field(default_factory=SearchBudget)

    def validate(self) -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        if not self.stock:
            errors.append("Stock catalog is empty")
        if not self.demand:
            errors.append("Demand list is empty")

        stock_ids = [stock.id for stock in self.stock]
        duplicates = sorted({sid for sid in stock_ids if stock_ids.count(sid) > 1})
        if duplicates:
            errors.append(f"Duplicate stock ids: {', '.join(duplicates)}")

        known = set(stock_ids)
        for request in self.demand:
            if request.allowed_stock_ids is None:
                continue
            unknown = sorted(request.allowed_stock_ids - known)
            if unknown:
                errors.append(
                    f"Demand '{request.template_id}' references unknown stock: "
                    f"{', '.join(unknown)}"
                )
        return errors


@dataclass
class NestingOutput:
    """Output DTO for a nesting request.

    Attributes:
        pieces: Expanded demand instances the request was solved for.
        summary: Aggregated result when all demand was placed.
        feasibility: Feasibility report (always set once input is valid).
        failure: Why the request could not be satisfied, if it could not.
        errors: Human-readable error messages.
        explored: Number of search nodes expanded.
        budget_exhausted: True if the search budget ran out.
    """

    pieces: list[DemandPiece] = field(default_factory=list)
    summary: NestingSummary | None = None
    feasibility: FeasibilityReport | None = None
    failure: FailureKind | None = None
    errors: list[str] = field(default_factory=list)
    explored: int = 0
    budget_exhausted: bool = False

    @property
    def is_valid(self) -> bool:
        """Check if the request was fully satisfied."""
        return self.summary is not None and not self.errors
