"""Pydantic schemas for the REST API."""

from nesting.web.schemas.requests import FeasibilityRequest, NestRequest
from nesting.web.schemas.responses import (
    ErrorResponseSchema,
    FeasibilityResultSchema,
    FeasibilitySchema,
    LayoutSchema,
    NestingResultSchema,
    PlacementSchema,
    StockUsageSchema,
    SummarySchema,
    UnusablePieceSchema,
)

__all__ = [
    "ErrorResponseSchema",
    "FeasibilityRequest",
    "FeasibilityResultSchema",
    "FeasibilitySchema",
    "LayoutSchema",
    "NestRequest",
    "NestingResultSchema",
    "PlacementSchema",
    "StockUsageSchema",
    "SummarySchema",
    "UnusablePieceSchema",
]
