"""Reprocess adapters."""

from .http import HttpReprocessAdapter

__all__ = ["HttpReprocessAdapter"]
