"""Utility helpers for ogmo_schema."""

from .logging_config import setup_logging

__all__ = ["setup_logging"]
