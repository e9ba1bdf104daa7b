"""Job configuration loading for nesting requests.

Public API:
    - NestingJobConfig: Root configuration model
    - StockConfig, DemandConfig, ProfileConfig, SearchConfig: Section models
    - load_config: Load a job from a JSON file
    - load_config_from_dict: Load a job from a dictionary
    - ConfigError: Exception for configuration errors
    - config_to_job: Convert a configuration into a NestingJob

Example:
    >>> from pathlib import Path
    >>> from nesting.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("job.json"))
    ...     print(f"{len(config.demand)} demand templates")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from nesting.application.config.adapter import config_to_job
from nesting.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from nesting.application.config.schema import (
    SUPPORTED_VERSIONS,
    DemandConfig,
    NestingJobConfig,
    ProfileConfig,
    SearchConfig,
    StockConfig,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "ConfigError",
    "DemandConfig",
    "NestingJobConfig",
    "ProfileConfig",
    "SearchConfig",
    "StockConfig",
    "config_to_job",
    "load_config",
    "load_config_from_dict",
]
