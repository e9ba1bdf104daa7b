"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class NestRequest(BaseModel):
    """Request for nesting a job."""

    config: dict[str, Any] = Field(..., description="Nesting job JSON")
    max_steps: int | None = Field(
        default=None, ge=1, description="Override the job's search step limit"
    )
    time_limit: float | None = Field(
        default=None, gt=0, le=60, description="Override the job's search time limit (seconds)"
    )


class FeasibilityRequest(BaseModel):
    """Request for a feasibility check of a job."""

    config: dict[str, Any] = Field(..., description="Nesting job JSON")
