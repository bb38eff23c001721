"""Domain services - orchestrate document queries."""

import logging
from typing import Any

from ..ports.documents import DocumentStorePort
from ..ports.reprocess import ReprocessPort
from .comparison import DocumentComparator
from .content import parse_content
from .disciplines import DisciplineResolver, normalize_discipline
from .errors import DisciplineNotFoundError, DocumentNotFoundError, OdfMonitorError
from .models import (
    DocumentFilters,
    DocumentPage,
    OdfDocument,
    Pagination,
    RawComparison,
    ReprocessResult,
    StructuredComparison,
)
from .query import DOCUMENT_SORT, build_document_query, document_code_query

logger = logging.getLogger(__name__)


class OdfDocumentService:
    """Read-side operations over the ODF document catalog."""

    def __init__(
        self,
        documents: DocumentStorePort,
        disciplines: DisciplineResolver,
        comparator: DocumentComparator,
        reprocessor: ReprocessPort | None = None,
    ) -> None:
        self.documents = documents
        self.disciplines = disciplines
        self.comparator = comparator
        self.reprocessor = reprocessor

    def list_documents(
        self,
        filters: DocumentFilters | None = None,
        pagination: Pagination | None = None,
    ) -> DocumentPage:
        """List documents matching filters, newest first.

        An unknown discipline is rejected before the store is queried.
        Without pagination every match is returned as a single page.
        """
        filters = filters or DocumentFilters()

        if filters.discipline and filters.discipline.strip():
            discipline = normalize_discipline(filters.discipline)
            if not self.disciplines.exists(discipline):
                raise DisciplineNotFoundError(discipline)

        predicate = build_document_query(filters)
        total = self.documents.count(predicate)

        if pagination is None:
            items = self.documents.find(predicate, DOCUMENT_SORT)
            page, page_size = 1, len(items)
        else:
            items = self.documents.find(
                predicate,
                DOCUMENT_SORT,
                skip=pagination.skip,
                limit=pagination.page_size,
            )
            page, page_size = pagination.page, pagination.page_size

        logger.info(f"Listed {len(items)} of {total} documents (page {page})")
        return DocumentPage(items=items, total=total, page=page, page_size=page_size)

    def get_document(self, document_id: str) -> OdfDocument:
        document = self.documents.find_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def get_parsed_content(self, document_id: str) -> Any:
        """Return the document content parsed as XML or JSON."""
        document = self.get_document(document_id)
        return parse_content(document.content)

    def find_by_document_code(self, document_code: str) -> list[OdfDocument]:
        """Case-insensitive substring search on documentCode, newest first."""
        return self.documents.find(document_code_query(document_code), DOCUMENT_SORT)

    def find_by_content_hash(self, content_hash: str) -> OdfDocument | None:
        return self.documents.find_one({"contentHash": content_hash})

    def list_disciplines(self) -> list[str]:
        return self.disciplines.list_disciplines()

    def compare_documents(
        self, document1_id: str, document2_id: str
    ) -> RawComparison | StructuredComparison:
        return self.comparator.compare(document1_id, document2_id)

    def reprocess_document(
        self, document_id: str, backend_url: str | None = None
    ) -> ReprocessResult:
        """Ask the ingestion backend to reprocess an existing document."""
        if self.reprocessor is None:
            raise OdfMonitorError("Reprocessing is not configured")
        self.get_document(document_id)
        logger.info(f"Requesting reprocessing of {document_id}")
        return self.reprocessor.reprocess(document_id, backend_url)
