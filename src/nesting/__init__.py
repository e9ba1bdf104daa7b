"""Stock nesting: choose stock units and placements that cover a demand list."""

__version__ = "1.0.0"
