"""CLI command implementations for the nesting application.

This package contains subcommands for the nest CLI, including:
- validate: Validate a job file
"""

from nesting.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "validate_command"]
