"""Pydantic models for nesting job configuration files.

A job file describes the stock catalog, the demand list, the packing profile
and optional search limits:

    {
      "schema_version": "1.0",
      "mode": "sheet",
      "stock": [{"id": "S1", "name": "Full sheet", "width": 1000, "length": 1000}],
      "demand": [{"template_id": "P", "width": 400, "length": 300, "quantity": 6}],
      "profile": {"margin_gap": 10, "border_inset": 10, "straight_cuts_only": false}
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nesting.domain.value_objects import NestingMode

# Version 1.0: Initial schema (sheet and length nesting)
# Version 1.1: Added per-template allowed_stock_ids and search limits
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})


class StockConfig(BaseModel):
    """A stock catalog entry."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = ""
    width: float = Field(..., gt=0)
    length: float = Field(..., gt=0)
    price: float | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)


class DemandConfig(BaseModel):
    """A demand request: a piece template and how many copies are needed."""

    model_config = ConfigDict(extra="forbid")

    template_id: str = Field(..., min_length=1)
    name: str = ""
    width: float = Field(..., gt=0)
    length: float = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1)
    allowed_stock_ids: list[str] | None = Field(
        default=None,
        description="Stock ids this template may be cut from (all if omitted)",
    )


class ProfileConfig(BaseModel):
    """Packing profile of the cutting machine."""

    model_config = ConfigDict(extra="forbid")

    margin_gap: float = Field(default=0.0, ge=0)
    border_inset: float = Field(default=0.0, ge=0)
    straight_cuts_only: bool = False


class SearchConfig(BaseModel):
    """Optional limits on the combination search."""

    model_config = ConfigDict(extra="forbid")

    max_steps: int | None = Field(default=None, ge=1)
    time_limit: float | None = Field(default=None, gt=0)


class NestingJobConfig(BaseModel):
    """Root model of a nesting job file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = "1.0"
    mode: NestingMode = NestingMode.SHEET
    stock: list[StockConfig] = Field(..., min_length=1)
    demand: list[DemandConfig] = Field(..., min_length=1)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported schema version '{v}'. "
                f"Supported: {', '.join(sorted(SUPPORTED_VERSIONS))}"
            )
        return v

    @model_validator(mode="after")
    def validate_references(self) -> NestingJobConfig:
        """Stock ids must be unique and demand may only reference known stock."""
        ids = [stock.id for stock in self.stock]
        duplicates = sorted({sid for sid in ids if ids.count(sid) > 1})
        if duplicates:
            raise ValueError(f"Duplicate stock ids: {', '.join(duplicates)}")

        templates = [demand.template_id for demand in self.demand]
        repeated = sorted({tid for tid in templates if templates.count(tid) > 1})
        if repeated:
            raise ValueError(f"Duplicate demand template ids: {', '.join(repeated)}")

        known = set(ids)
        for demand in self.demand:
            unknown = sorted(set(demand.allowed_stock_ids or ()) - known)
            if unknown:
                raise ValueError(
                    f"Demand '{demand.template_id}' references unknown stock: "
                    f"{', '.join(unknown)}"
                )
        return self
