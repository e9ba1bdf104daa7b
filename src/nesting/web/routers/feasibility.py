"""Feasibility check endpoint."""

from fastapi import APIRouter

from nesting.application.config import config_to_job, load_config_from_dict
from nesting.web.dependencies import ExporterDep, NestCommandDep
from nesting.web.schemas.requests import FeasibilityRequest
from nesting.web.schemas.responses import ErrorResponseSchema, FeasibilityResultSchema

router = APIRouter(prefix="/feasibility", tags=["feasibility"])


@router.post(
    "",
    response_model=FeasibilityResultSchema,
    responses={422: {"model": ErrorResponseSchema}},
)
def check_feasibility(
    request: FeasibilityRequest,
    command: NestCommandDep,
    exporter: ExporterDep,
) -> FeasibilityResultSchema:
    """Report which pieces fit no stock unit, without running the search."""
    job = config_to_job(load_config_from_dict(request.config))
    output = command.check(job)
    data = exporter.to_dict(output)
    return FeasibilityResultSchema(
        is_feasible=output.failure is None,
        failure=data["failure"],
        errors=data["errors"],
        feasibility=data["feasibility"],
    )
