"""HTTP response and request models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..domain.models import (
    DocumentPage,
    OdfDocument,
    RawComparison,
    ReprocessResult,
    StructuredComparison,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OdfDocumentResponse(CamelModel):
    id: str
    competition_code: str
    document_code: str
    document_type: str
    document_subtype: str | None = None
    version: str
    date: datetime
    content: str
    result_status: str | None = None
    unit_codes: list[str] | None = None
    content_hash: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document: OdfDocument) -> "OdfDocumentResponse":
        return cls(
            id=document.id,
            competition_code=document.competition_code,
            document_code=document.document_code,
            document_type=document.document_type,
            document_subtype=document.document_subtype,
            version=document.version,
            date=document.date,
            content=document.content,
            result_status=document.result_status,
            unit_codes=document.unit_codes,
            content_hash=document.content_hash,
            created_at=document.created_at or document.date,
            updated_at=document.updated_at or document.date,
        )


class OdfDocumentListResponse(CamelModel):
    documents: list[OdfDocumentResponse]
    total: int
    page: int
    page_size: int

    @classmethod
    def from_page(cls, page: DocumentPage) -> "OdfDocumentListResponse":
        return cls(
            documents=[OdfDocumentResponse.from_document(d) for d in page.items],
            total=page.total,
            page=page.page,
            page_size=page.page_size,
        )


class DisciplineListResponse(CamelModel):
    disciplines: list[str]


class XmlDocumentContent(CamelModel):
    id: str
    xml_content: str


class RawComparisonResponse(CamelModel):
    document1: XmlDocumentContent
    document2: XmlDocumentContent

    @classmethod
    def from_comparison(cls, comparison: RawComparison) -> "RawComparisonResponse":
        return cls(
            document1=XmlDocumentContent(
                id=comparison.document1.id, xml_content=comparison.document1.xml_content
            ),
            document2=XmlDocumentContent(
                id=comparison.document2.id, xml_content=comparison.document2.xml_content
            ),
        )


class FieldDifferenceResponse(CamelModel):
    field: str
    value1: Any
    value2: Any


class ContentDifferenceResponse(CamelModel):
    kind: str
    raw1: str
    raw2: str
    parsed1: Any = None
    parsed2: Any = None
    error: str | None = None


class StructuredComparisonResponse(CamelModel):
    document1_id: str
    document2_id: str
    identical: bool
    fields: list[FieldDifferenceResponse]
    content: ContentDifferenceResponse | None = None

    @classmethod
    def from_comparison(
        cls, comparison: StructuredComparison
    ) -> "StructuredComparisonResponse":
        content = comparison.content
        return cls(
            document1_id=comparison.document1_id,
            document2_id=comparison.document2_id,
            identical=comparison.identical,
            fields=[
                FieldDifferenceResponse(field=to_camel(f.field), value1=f.value1, value2=f.value2)
                for f in comparison.fields
            ],
            content=(
                ContentDifferenceResponse(
                    kind=content.kind,
                    raw1=content.raw1,
                    raw2=content.raw2,
                    parsed1=content.parsed1,
                    parsed2=content.parsed2,
                    error=content.error,
                )
                if content
                else None
            ),
        )


class ReprocessRequest(CamelModel):
    backend_url: str | None = None


class ReprocessResponse(CamelModel):
    success: bool
    message: str

    @classmethod
    def from_result(cls, result: ReprocessResult) -> "ReprocessResponse":
        return cls(success=result.success, message=result.message)


class ErrorResponse(CamelModel):
    status_code: int
    error: str
    message: str
