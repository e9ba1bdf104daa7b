"""FastAPI dependency injection for nesting services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from nesting.application import NestCommand
from nesting.infrastructure import JsonResultExporter


@lru_cache(maxsize=1)
def get_nest_command() -> NestCommand:
    """Get cached NestCommand instance."""
    return NestCommand()


def get_exporter() -> JsonResultExporter:
    return JsonResultExporter()


# Type aliases for cleaner endpoint signatures
NestCommandDep = Annotated[NestCommand, Depends(get_nest_command)]
ExporterDep = Annotated[JsonResultExporter, Depends(get_exporter)]
