"""Document store port - interface for the ODF document collection."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..domain.models import OdfDocument


class DocumentStorePort(ABC):
    """Interface for querying stored ODF documents.

    Predicates and pipelines use MongoDB query syntax. Implementations raise
    UpstreamUnavailableError when the store cannot be reached.
    """

    @abstractmethod
    def find(
        self,
        predicate: dict[str, Any],
        sort: list[tuple[str, int]],
        skip: int | None = None,
        limit: int | None = None,
    ) -> list["OdfDocument"]:
        """Return matching documents in sort order."""
        pass

    @abstractmethod
    def count(self, predicate: dict[str, Any]) -> int:
        """Count documents matching predicate."""
        pass

    @abstractmethod
    def find_by_id(self, document_id: str) -> "OdfDocument | None":
        """Return the document with this id, or None."""
        pass

    @abstractmethod
    def find_one(self, predicate: dict[str, Any]) -> "OdfDocument | None":
        pass

    @abstractmethod
    def aggregate(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Run an aggregation pipeline on the store's query engine.

        Large intermediate results may spill to disk.
        """
        pass
