"""Domain layer - nesting value objects and pure services."""

from .services import (
    DemandPool,
    FeasibilityReport,
    NestingSummary,
    StockUsage,
    aggregate,
    assess_feasibility,
    expand_demand,
    fits_stock,
    normalize,
    signature,
)
from .value_objects import (
    DemandPiece,
    DemandRequest,
    FailureKind,
    InvalidDimensionError,
    InvalidJobError,
    NestingError,
    NestingMode,
    PackingProfile,
    PlacedPiece,
    SearchResult,
    StockLayout,
    StockUnit,
)

__all__ = [
    "DemandPiece",
    "DemandPool",
    "DemandRequest",
    "FailureKind",
    "FeasibilityReport",
    "InvalidDimensionError",
    "InvalidJobError",
    "NestingError",
    "NestingMode",
    "NestingSummary",
    "PackingProfile",
    "PlacedPiece",
    "SearchResult",
    "StockLayout",
    "StockUnit",
    "StockUsage",
    "aggregate",
    "assess_feasibility",
    "expand_demand",
    "fits_stock",
    "normalize",
    "signature",
]
