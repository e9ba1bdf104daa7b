"""Infrastructure layer - packing algorithms and formatters."""

from .formatters import FeasibilityFormatter, JsonResultExporter, SummaryFormatter
from .packing import (
    PackOutcome,
    RectpackPacker,
    pack_heuristic,
    pack_length,
    pack_single_stock,
    pack_straight_cuts,
)

__all__ = [
    "FeasibilityFormatter",
    "JsonResultExporter",
    "PackOutcome",
    "RectpackPacker",
    "SummaryFormatter",
    "pack_heuristic",
    "pack_length",
    "pack_single_stock",
    "pack_straight_cuts",
]
