"""Nesting endpoints."""

import logging

from fastapi import APIRouter

from nesting.application.config import config_to_job, load_config_from_dict
from nesting.web.dependencies import ExporterDep, NestCommandDep
from nesting.web.schemas.requests import NestRequest
from nesting.web.schemas.responses import ErrorResponseSchema, NestingResultSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nest", tags=["nest"])

# Seconds; applied when neither the request nor the job sets a time limit.
DEFAULT_TIME_LIMIT = 2.4


@router.post(
    "",
    response_model=NestingResultSchema,
    responses={422: {"model": ErrorResponseSchema}},
)
def nest_job(
    request: NestRequest,
    command: NestCommandDep,
    exporter: ExporterDep,
) -> NestingResultSchema:
    """Find the cheapest stock combination for a job.

    An infeasible job is not an HTTP error: the response carries
    `is_valid: false` with the failure kind and messages. Malformed jobs
    are rejected with 422. Searches without a configured time limit are
    capped at DEFAULT_TIME_LIMIT seconds and finish greedily past it.
    """
    config = load_config_from_dict(request.config)
    time_limit = request.time_limit
    if time_limit is None and config.search.time_limit is None:
        time_limit = DEFAULT_TIME_LIMIT
    job = config_to_job(config, max_steps=request.max_steps, time_limit=time_limit)
    result = command.execute(job)
    if not result.is_valid:
        logger.info("Job could not be nested: %s", result.errors)
    return NestingResultSchema.model_validate(exporter.to_dict(result))
