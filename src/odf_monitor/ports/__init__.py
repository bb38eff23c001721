"""Ports - interfaces for external dependencies."""

from .disciplines import DisciplineReferencePort
from .documents import DocumentStorePort
from .reprocess import ReprocessPort

__all__ = ["DisciplineReferencePort", "DocumentStorePort", "ReprocessPort"]
