"""Tiered football film analytics engine."""

__version__ = "0.1.0"
