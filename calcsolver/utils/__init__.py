"""Utilities: error hierarchy and number formatting."""

from .formatting import format_number, format_buffer, parse_number

__all__ = ["format_number", "format_buffer", "parse_number"]
