"""Document comparison."""

import logging

from ..ports.documents import DocumentStorePort
from .content import classify, parse_xml
from .errors import ContentParseError, DocumentNotFoundError, DocumentValidationError
from .models import (
    ComparisonMode,
    ContentDifference,
    ContentKind,
    FieldDifference,
    OdfDocument,
    RawComparison,
    RawDocumentContent,
    StructuredComparison,
)

logger = logging.getLogger(__name__)

COMPARED_FIELDS = ("competition_code", "document_code", "document_type", "version")


class DocumentComparator:
    """Compares two stored documents.

    RAW mode returns both XML payloads verbatim and rejects non-XML
    documents. STRUCTURED mode reports metadata field differences plus a
    content difference, degrading to an error marker when XML cannot be
    parsed.
    """

    def __init__(
        self, documents: DocumentStorePort, mode: ComparisonMode = ComparisonMode.RAW
    ) -> None:
        self.documents = documents
        self.mode = mode

    def compare(
        self, document1_id: str, document2_id: str
    ) -> RawComparison | StructuredComparison:
        doc1 = self._fetch(document1_id)
        doc2 = self._fetch(document2_id)

        logger.info(f"Comparing {document1_id} with {document2_id} ({self.mode.value})")
        if self.mode is ComparisonMode.STRUCTURED:
            return compare_structured(doc1, doc2)
        return compare_raw(doc1, doc2)

    def _fetch(self, document_id: str) -> OdfDocument:
        document = self.documents.find_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document


def _require_xml(document: OdfDocument) -> None:
    if classify(document.content) is not ContentKind.XML:
        raise DocumentValidationError(
            f"Document {document.id} is not XML. "
            "Comparison is only available for XML documents."
        )


def compare_raw(doc1: OdfDocument, doc2: OdfDocument) -> RawComparison:
    _require_xml(doc1)
    _require_xml(doc2)
    return RawComparison(
        document1=RawDocumentContent(id=doc1.id, xml_content=doc1.content),
        document2=RawDocumentContent(id=doc2.id, xml_content=doc2.content),
    )


def compare_fields(doc1: OdfDocument, doc2: OdfDocument) -> list[FieldDifference]:
    differences = []
    for name in COMPARED_FIELDS:
        value1 = getattr(doc1, name)
        value2 = getattr(doc2, name)
        if value1 != value2:
            differences.append(FieldDifference(field=name, value1=value1, value2=value2))
    return differences


def compare_content(doc1: OdfDocument, doc2: OdfDocument) -> ContentDifference | None:
    """Return the content difference, or None when payloads are identical."""
    if doc1.content == doc2.content:
        return None

    kind1 = classify(doc1.content)
    kind2 = classify(doc2.content)

    if kind1 is ContentKind.XML and kind2 is ContentKind.XML:
        try:
            parsed1 = parse_xml(doc1.content)
            parsed2 = parse_xml(doc2.content)
        except ContentParseError as e:
            logger.warning(f"Comparing unparsed XML ({doc1.id}, {doc2.id}): {e}")
            return ContentDifference(
                kind=ContentKind.XML.value,
                raw1=doc1.content,
                raw2=doc2.content,
                error=str(e),
            )
        if parsed1 == parsed2:
            return None
        return ContentDifference(
            kind=ContentKind.XML.value,
            raw1=doc1.content,
            raw2=doc2.content,
            parsed1=parsed1,
            parsed2=parsed2,
        )

    kind = "json" if kind1 is kind2 else "mixed"
    return ContentDifference(kind=kind, raw1=doc1.content, raw2=doc2.content)


def compare_structured(doc1: OdfDocument, doc2: OdfDocument) -> StructuredComparison:
    return StructuredComparison(
        document1_id=doc1.id,
        document2_id=doc2.id,
        fields=compare_fields(doc1, doc2),
        content=compare_content(doc1, doc2),
    )
