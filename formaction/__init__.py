"""Validated form actions with a uniform response envelope."""

__version__ = "0.1.0"
