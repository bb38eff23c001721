"""Domain layer - core business logic."""

from .models import (
    ComparisonMode,
    ContentKind,
    DocumentFilters,
    DocumentPage,
    OdfDocument,
    Pagination,
)

__all__ = [
    "ComparisonMode",
    "ContentKind",
    "DocumentFilters",
    "DocumentPage",
    "OdfDocument",
    "Pagination",
]
