"""Domain services for demand handling, feasibility and aggregation."""

from .aggregation import NestingSummary, StockUsage, aggregate
from .demand import DemandPool, expand_demand, normalize, signature
from .feasibility import (
    FeasibilityReport,
    assess_feasibility,
    fits_stock,
    fits_within,
    summarize_stock,
)

__all__ = [
    "DemandPool",
    "FeasibilityReport",
    "NestingSummary",
    "StockUsage",
    "aggregate",
    "assess_feasibility",
    "expand_demand",
    "fits_stock",
    "fits_within",
    "normalize",
    "signature",
    "summarize_stock",
]
