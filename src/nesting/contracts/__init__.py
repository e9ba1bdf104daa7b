"""Contracts shared between the application and infrastructure layers."""

from .protocols import RectanglePacker

__all__ = ["RectanglePacker"]
