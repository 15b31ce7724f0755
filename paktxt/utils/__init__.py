"""Utilities for paktxt."""

from .formatters import format_size

__all__ = ["format_size"]
