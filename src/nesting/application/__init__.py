"""Application layer - use cases and orchestration."""

from .commands import NestCommand, find_best_for_lengths, find_best_for_sheets
from .dtos import NestingJob, NestingOutput
from .search import SearchBudget, SearchOutcome, find_best_combination

__all__ = [
    "NestCommand",
    "NestingJob",
    "NestingOutput",
    "SearchBudget",
    "SearchOutcome",
    "find_best_combination",
    "find_best_for_lengths",
    "find_best_for_sheets",
]
