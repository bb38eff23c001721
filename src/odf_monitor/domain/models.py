"""Domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ContentKind(str, Enum):
    """Payload encoding of a stored document."""

    XML = "xml"
    JSON = "json"


class ComparisonMode(str, Enum):
    """How two documents are compared."""

    RAW = "raw"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class OdfDocument:
    """A stored competition result document."""

    id: str
    competition_code: str
    document_code: str
    document_type: str
    version: str
    date: datetime
    content: str
    document_subtype: str | None = None
    result_status: str | None = None
    unit_codes: list[str] | None = None
    content_hash: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class DocumentFilters:
    """Optional listing filters. Blank values count as absent."""

    competition_code: str | None = None
    document_code: str | None = None  # Case-insensitive substring
    document_type: str | None = None
    document_subtype: str | None = None
    discipline: str | None = None  # 3-letter prefix, supersedes document_code
    date_from: datetime | None = None
    date_to: datetime | None = None


@dataclass(frozen=True)
class Pagination:
    """1-based page request."""

    page: int
    page_size: int

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class DocumentPage:
    """One page of listing results."""

    items: list[OdfDocument]
    total: int
    page: int
    page_size: int


@dataclass(frozen=True)
class RawDocumentContent:
    id: str
    xml_content: str


@dataclass(frozen=True)
class RawComparison:
    """Both XML payloads, verbatim, for an external diff viewer."""

    document1: RawDocumentContent
    document2: RawDocumentContent


@dataclass(frozen=True)
class FieldDifference:
    field: str
    value1: Any
    value2: Any


@dataclass(frozen=True)
class ContentDifference:
    """Content-level difference between two documents.

    kind is "xml" when both sides are XML (parsed trees included unless
    parsing failed, in which case error is set), "json" when both are JSON
    and "mixed" otherwise.
    """

    kind: str
    raw1: str
    raw2: str
    parsed1: Any = None
    parsed2: Any = None
    error: str | None = None


@dataclass
class StructuredComparison:
    """Field-level and content differences between two documents."""

    document1_id: str
    document2_id: str
    fields: list[FieldDifference] = field(default_factory=list)
    content: ContentDifference | None = None

    @property
    def identical(self) -> bool:
        return not self.fields and self.content is None


@dataclass(frozen=True)
class ReprocessResult:
    success: bool
    message: str
