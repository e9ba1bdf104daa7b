"""Error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nesting.application.config import ConfigError
from nesting.domain import InvalidDimensionError, InvalidJobError, NestingError


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details or None,
            },
        )

    @app.exception_handler(InvalidJobError)
    async def invalid_job_handler(request: Request, exc: InvalidJobError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "Invalid nesting job",
                "error_type": "invalid_job",
                "details": [{"message": e} for e in exc.errors],
            },
        )

    @app.exception_handler(InvalidDimensionError)
    async def invalid_dimension_handler(
        request: Request, exc: InvalidDimensionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": str(exc),
                "error_type": "invalid_dimension",
                "details": None,
            },
        )

    @app.exception_handler(NestingError)
    async def nesting_error_handler(request: Request, exc: NestingError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": str(exc),
                "error_type": "nesting",
                "details": None,
            },
        )
