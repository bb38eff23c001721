"""ODF document router."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from ..domain.errors import BadRequestError
from ..domain.models import DocumentFilters, Pagination, RawComparison
from ..domain.query import parse_date_bound
from ..domain.services import OdfDocumentService
from .schemas import (
    DisciplineListResponse,
    OdfDocumentListResponse,
    OdfDocumentResponse,
    RawComparisonResponse,
    ReprocessRequest,
    ReprocessResponse,
    StructuredComparisonResponse,
)

documents_router = APIRouter(prefix="/odf-documents", tags=["ODF Documents"])


def get_service(request: Request) -> OdfDocumentService:
    return request.app.state.service


def date_param(value: str | None, name: str, end_of_day: bool = False) -> datetime | None:
    if value is None:
        return None
    try:
        return parse_date_bound(value, end_of_day=end_of_day)
    except ValueError as e:
        raise BadRequestError(f"{name} must be an ISO 8601 date: {value}") from e


@documents_router.get("", response_model=OdfDocumentListResponse)
def list_documents(
    page: int | None = Query(None, ge=1),
    page_size: int | None = Query(None, alias="pageSize", ge=1),
    competition_code: str | None = Query(None, alias="competitionCode"),
    document_code: str | None = Query(None, alias="documentCode"),
    document_type: str | None = Query(None, alias="documentType"),
    document_subtype: str | None = Query(None, alias="documentSubtype"),
    discipline: str | None = Query(None),
    date_from: str | None = Query(None, alias="dateFrom"),
    date_to: str | None = Query(None, alias="dateTo"),
    service: OdfDocumentService = Depends(get_service),
) -> OdfDocumentListResponse:
    """List documents, paginated only when both page and pageSize are given."""
    filters = DocumentFilters(
        competition_code=competition_code,
        document_code=document_code,
        document_type=document_type,
        document_subtype=document_subtype,
        discipline=discipline,
        date_from=date_param(date_from, "dateFrom"),
        date_to=date_param(date_to, "dateTo", end_of_day=True),
    )
    pagination = Pagination(page, page_size) if page and page_size else None
    return OdfDocumentListResponse.from_page(service.list_documents(filters, pagination))


@documents_router.get("/disciplines/list", response_model=DisciplineListResponse)
def list_disciplines(
    service: OdfDocumentService = Depends(get_service),
) -> DisciplineListResponse:
    return DisciplineListResponse(disciplines=service.list_disciplines())


@documents_router.get("/document-code/{document_code}", response_model=list[OdfDocumentResponse])
def find_by_document_code(
    document_code: str,
    service: OdfDocumentService = Depends(get_service),
) -> list[OdfDocumentResponse]:
    return [
        OdfDocumentResponse.from_document(d)
        for d in service.find_by_document_code(document_code)
    ]


@documents_router.get(
    "/compare/{id1}/{id2}",
    response_model=RawComparisonResponse | StructuredComparisonResponse,
)
def compare_documents(
    id1: str,
    id2: str,
    service: OdfDocumentService = Depends(get_service),
) -> RawComparisonResponse | StructuredComparisonResponse:
    comparison = service.compare_documents(id1, id2)
    if isinstance(comparison, RawComparison):
        return RawComparisonResponse.from_comparison(comparison)
    return StructuredComparisonResponse.from_comparison(comparison)


@documents_router.get("/{document_id}/parsed")
def get_parsed_content(
    document_id: str,
    service: OdfDocumentService = Depends(get_service),
) -> Any:
    return service.get_parsed_content(document_id)


@documents_router.post("/{document_id}/reprocess", response_model=ReprocessResponse)
def reprocess_document(
    document_id: str,
    body: ReprocessRequest | None = Body(None),
    service: OdfDocumentService = Depends(get_service),
) -> ReprocessResponse:
    backend_url = body.backend_url if body else None
    return ReprocessResponse.from_result(service.reprocess_document(document_id, backend_url))


@documents_router.get("/{document_id}", response_model=OdfDocumentResponse)
def get_document(
    document_id: str,
    service: OdfDocumentService = Depends(get_service),
) -> OdfDocumentResponse:
    return OdfDocumentResponse.from_document(service.get_document(document_id))
