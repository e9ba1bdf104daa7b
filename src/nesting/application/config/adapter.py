"""Conversion of validated job configuration into domain objects."""

from __future__ import annotations

from nesting.application.config.schema import NestingJobConfig
from nesting.application.dtos import NestingJob
from nesting.application.search import SearchBudget
from nesting.domain import DemandRequest, PackingProfile, StockUnit


def config_to_job(
    config: NestingJobConfig,
    max_steps: int | None = None,
    time_limit: float | None = None,
) -> NestingJob:
    """Build a NestingJob from a job configuration.

    Args:
        config: Validated job configuration.
        max_steps: Overrides the configured step limit when given.
        time_limit: Overrides the configured time limit when given.

    Returns:
        NestingJob ready for NestCommand.
    """
    stock = [
        StockUnit(
            id=entry.id,
            name=entry.name or entry.id,
            width=entry.width,
            length=entry.length,
            price=entry.price,
            weight=entry.weight,
        )
        for entry in config.stock
    ]
    demand = [
        DemandRequest(
            template_id=entry.template_id,
            name=entry.name,
            width=entry.width,
            length=entry.length,
            quantity=entry.quantity,
            allowed_stock_ids=(
                frozenset(entry.allowed_stock_ids)
                if entry.allowed_stock_ids is not None
                else None
            ),
        )
        for entry in config.demand
    ]
    profile = PackingProfile(
        margin_gap=config.profile.margin_gap,
        border_inset=config.profile.border_inset,
        straight_cuts_only=config.profile.straight_cuts_only,
    )
    budget = SearchBudget(
        max_steps=max_steps if max_steps is not None else config.search.max_steps,
        time_limit=time_limit if time_limit is not None else config.search.time_limit,
    )
    return NestingJob(
        stock=stock,
        demand=demand,
        profile=profile,
        mode=config.mode,
        budget=budget,
    )
