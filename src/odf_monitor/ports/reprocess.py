"""Reprocess port - interface for triggering upstream re-processing."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import ReprocessResult


class ReprocessPort(ABC):
    """Interface for asking the ingestion backend to reprocess a document."""

    @abstractmethod
    def reprocess(
        self, document_id: str, backend_url: str | None = None
    ) -> "ReprocessResult":
        """Request reprocessing.

        backend_url overrides the configured backend for this call.
        """
        pass
