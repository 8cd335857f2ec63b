"""Logging setup shared by the command-line host."""

from .logging import configure_logging

__all__ = ["configure_logging"]
