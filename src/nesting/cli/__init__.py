"""Command line interface for the nesting engine."""
