"""REST API for stock nesting."""
