"""Pytest configuration and shared fixtures for nesting tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from nesting.domain import DemandRequest, PackingProfile, StockUnit

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "jobs"


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def jobs_path() -> Path:
    """Directory holding the JSON job fixtures."""
    return FIXTURES_PATH


@pytest.fixture
def full_sheet() -> StockUnit:
    """A 1000x1000 sheet."""
    return StockUnit(id="S1", name="Full sheet", width=1000, length=1000, price=40.0)


@pytest.fixture
def half_sheet() -> StockUnit:
    """A 500x1000 sheet."""
    return StockUnit(id="H1", name="Half sheet", width=500, length=1000, price=22.0)


@pytest.fixture
def shelf_demand() -> list[DemandRequest]:
    """Six 400x300 shelves."""
    return [DemandRequest(template_id="P", name="Shelf", width=400, length=300, quantity=6)]


@pytest.fixture
def machine_profile() -> PackingProfile:
    """Profile with a 10 unit kerf and a 10 unit border."""
    return PackingProfile(margin_gap=10, border_inset=10)
