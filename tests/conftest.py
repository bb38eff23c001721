"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Callable
from unittest.mock import MagicMock

import pytest

from odf_monitor.domain.cache import TTLCache
from odf_monitor.domain.comparison import DocumentComparator
from odf_monitor.domain.disciplines import DisciplineResolver
from odf_monitor.domain.models import OdfDocument
from odf_monitor.domain.services import OdfDocumentService
from odf_monitor.ports.disciplines import DisciplineReferencePort
from odf_monitor.ports.documents import DocumentStorePort
from odf_monitor.ports.reprocess import ReprocessPort

SAMPLE_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<OdfBody CompetitionCode="OG2024" DocumentCode="ATHM100M--------------FNL-000100--" '
    'Version="1">\n'
    '  <Competition Gen="SOG-2.0">\n'
    '    <Result Rank="1" SortOrder="1" Result="9.79"/>\n'
    '    <Result Rank="2" SortOrder="2" Result="9.81"/>\n'
    "  </Competition>\n"
    "</OdfBody>"
)

SAMPLE_JSON = '{"odfBody": {"competitionCode": "OG2024", "results": [1, 2, 3]}}'

BASE_DATE = datetime(2024, 8, 4, 20, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_document() -> Callable[..., OdfDocument]:
    """Factory for OdfDocument with sensible defaults."""

    def _make(**overrides) -> OdfDocument:
        fields = {
            "id": "65f1c2aa0000000000000001",
            "competition_code": "OG2024",
            "document_code": "ATHM100M--------------FNL-000100--",
            "document_type": "DT_RESULT",
            "version": "1",
            "date": BASE_DATE,
            "content": SAMPLE_XML,
            "document_subtype": None,
            "result_status": "OFFICIAL",
            "unit_codes": ["ATHM100M--------------FNL-000100--"],
            "content_hash": "abc123",
            "created_at": BASE_DATE,
            "updated_at": BASE_DATE,
        }
        fields.update(overrides)
        return OdfDocument(**fields)

    return _make


@pytest.fixture
def make_corpus(make_document) -> Callable[[int], list[OdfDocument]]:
    """Factory for n documents with descending dates."""

    def _make(n: int) -> list[OdfDocument]:
        return [
            make_document(
                id=f"65f1c2aa{i:016x}",
                date=BASE_DATE - timedelta(hours=i),
            )
            for i in range(n)
        ]

    return _make


@pytest.fixture
def sample_xml() -> str:
    return SAMPLE_XML


@pytest.fixture
def sample_json() -> str:
    return SAMPLE_JSON


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_documents() -> MagicMock:
    """Mock document store port."""
    mock = MagicMock(spec=DocumentStorePort)
    mock.find.return_value = []
    mock.count.return_value = 0
    mock.find_by_id.return_value = None
    mock.find_one.return_value = None
    mock.aggregate.return_value = []
    return mock


@pytest.fixture
def mock_references() -> MagicMock:
    """Mock discipline reference port."""
    mock = MagicMock(spec=DisciplineReferencePort)
    mock.exists.return_value = True
    mock.find_existing_among.return_value = set()
    mock.find_all_codes.return_value = []
    return mock


@pytest.fixture
def mock_reprocessor() -> MagicMock:
    return MagicMock(spec=ReprocessPort)


@pytest.fixture
def resolver(mock_documents, mock_references, clock) -> DisciplineResolver:
    return DisciplineResolver(
        mock_documents, mock_references, cache=TTLCache(3600, clock=clock)
    )


@pytest.fixture
def service(mock_documents, resolver, mock_reprocessor) -> OdfDocumentService:
    return OdfDocumentService(
        documents=mock_documents,
        disciplines=resolver,
        comparator=DocumentComparator(mock_documents),
        reprocessor=mock_reprocessor,
    )
