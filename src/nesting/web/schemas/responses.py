"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class UnusablePieceSchema(BaseModel):
    """A demand piece that fits no stock unit."""

    template_id: str = Field(..., description="Demand template id")
    instance_id: str = Field(..., description="Expanded instance id")
    name: str = Field(..., description="Piece name")
    width: float = Field(..., description="Piece width")
    length: float = Field(..., description="Piece length")


class FeasibilitySchema(BaseModel):
    """Feasibility report."""

    is_feasible: bool = Field(..., description="Whether every piece fits some stock")
    unusable_pieces: list[UnusablePieceSchema] = Field(default_factory=list)
    profile_limited: list[str] = Field(
        default_factory=list,
        description="Unusable instances that would fit without the border inset",
    )
    considered_stock: list[str] = Field(default_factory=list, description="Stock ids checked")
    stock_summaries: list[str] = Field(default_factory=list)


class PlacementSchema(BaseModel):
    """A piece placed on a stock unit."""

    template_id: str
    instance_id: str
    x: float
    y: float
    width: float = Field(..., description="Extent along the stock width")
    length: float = Field(..., description="Extent along the stock length")
    rotated: bool = False


class LayoutSchema(BaseModel):
    """Layout of one consumed stock unit."""

    stock_id: str
    name: str
    size: str
    area: float
    width: float
    length: float
    placements: list[PlacementSchema] = Field(default_factory=list)


class StockUsageSchema(BaseModel):
    """Consumption of one stock type."""

    stock_id: str
    name: str
    size: str
    area: float
    count: int


class SummarySchema(BaseModel):
    """Aggregated nesting result."""

    counts: dict[str, int] = Field(..., description="Stock id to units consumed")
    usages: list[StockUsageSchema] = Field(default_factory=list)
    consumed_area: float
    demand_area: float
    waste_area: float
    waste_percentage: float
    total_price: float | None = None
    total_weight: float | None = None
    layouts: list[LayoutSchema] = Field(default_factory=list)


class NestingResultSchema(BaseModel):
    """Response for a nesting request."""

    is_valid: bool = Field(..., description="Whether all demand was placed")
    failure: str | None = Field(default=None, description="Failure kind, if any")
    errors: list[str] = Field(default_factory=list, description="Error messages")
    explored: int = Field(default=0, description="Search nodes expanded")
    budget_exhausted: bool = False
    feasibility: FeasibilitySchema | None = None
    summary: SummarySchema | None = None


class FeasibilityResultSchema(BaseModel):
    """Response for a feasibility check. No search is run."""

    is_feasible: bool = Field(..., description="Whether every piece fits some stock unit")
    failure: str | None = Field(default=None, description="Failure kind, if any")
    errors: list[str] = Field(default_factory=list, description="Error messages")
    feasibility: FeasibilitySchema


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )
