"""Unit tests for the document query builder."""

import re
from datetime import datetime

import pytest

from odf_monitor.domain.models import DocumentFilters
from odf_monitor.domain.query import (
    DISCIPLINE_PIPELINE,
    DOCUMENT_SORT,
    build_document_query,
    date_range,
    document_code_query,
    parse_date_bound,
    prefix_pattern,
)


def matches(term: dict, value: str) -> bool:
    """Evaluate a {"$regex", "$options"} term the way the store would."""
    flags = re.IGNORECASE if "i" in term.get("$options", "") else 0
    return re.search(term["$regex"], value, flags) is not None


class TestBuildDocumentQuery:
    """Tests for build_document_query."""

    def test_no_filters(self) -> None:
        assert build_document_query(None) == {}
        assert build_document_query(DocumentFilters()) == {}

    def test_exact_fields(self) -> None:
        query = build_document_query(
            DocumentFilters(
                competition_code="OG2024",
                document_type="DT_RESULT",
                document_subtype="FINAL",
            )
        )
        assert query == {
            "competitionCode": "OG2024",
            "documentType": "DT_RESULT",
            "documentSubtype": "FINAL",
        }

    def test_blank_values_ignored(self) -> None:
        query = build_document_query(
            DocumentFilters(competition_code="", document_code="  ", discipline="")
        )
        assert query == {}

    def test_discipline_prefix_case_insensitive(self) -> None:
        query = build_document_query(DocumentFilters(discipline="mti"))
        term = query["documentCode"]
        assert matches(term, "MTI1234")
        assert not matches(term, "XMTI1234")

    def test_discipline_supersedes_document_code(self) -> None:
        query = build_document_query(
            DocumentFilters(discipline="MTI", document_code="ATHM100")
        )
        assert query["documentCode"] == prefix_pattern("MTI")
        assert "ATHM100" not in query["documentCode"]["$regex"]

    def test_discipline_metacharacters_escaped(self) -> None:
        query = build_document_query(DocumentFilters(discipline=".*("))
        term = query["documentCode"]
        assert matches(term, ".*(ABC")
        assert not matches(term, "ATH")

    def test_document_code_substring(self) -> None:
        query = build_document_query(DocumentFilters(document_code="m100"))
        term = query["documentCode"]
        assert matches(term, "ATHM100M----")
        assert not term["$regex"].startswith("^")

    def test_date_from_only(self) -> None:
        start = datetime(2024, 7, 1)
        query = build_document_query(DocumentFilters(date_from=start))
        assert query["date"] == {"$gte": start}
        assert "$lte" not in query["date"]

    def test_date_to_only(self) -> None:
        end = datetime(2024, 8, 31)
        query = build_document_query(DocumentFilters(date_to=end))
        assert query["date"] == {"$lte": end}

    def test_date_range(self) -> None:
        start, end = datetime(2024, 7, 1), datetime(2024, 8, 31)
        query = build_document_query(DocumentFilters(date_from=start, date_to=end))
        assert query["date"] == {"$gte": start, "$lte": end}

    def test_no_date_key_without_bounds(self) -> None:
        query = build_document_query(DocumentFilters(competition_code="OG2024"))
        assert "date" not in query

    def test_combined(self) -> None:
        start = datetime(2024, 7, 1)
        query = build_document_query(
            DocumentFilters(
                competition_code="OG2024",
                discipline="ATH",
                document_type="DT_RESULT",
                date_from=start,
            )
        )
        assert set(query) == {"competitionCode", "documentCode", "documentType", "date"}


class TestHelpers:
    """Tests for query helpers."""

    def test_date_range_empty(self) -> None:
        assert date_range(None, None) == {}

    def test_document_code_query(self) -> None:
        query = document_code_query("ath")
        assert matches(query["documentCode"], "ATHM100")

    def test_sort_newest_first(self) -> None:
        assert DOCUMENT_SORT[0] == ("date", -1)

    def test_discipline_pipeline_stages(self) -> None:
        stages = [next(iter(stage)) for stage in DISCIPLINE_PIPELINE]
        assert stages == ["$match", "$project", "$match", "$group", "$sort"]

    def test_discipline_pipeline_content_filter(self) -> None:
        pattern = DISCIPLINE_PIPELINE[0]["$match"]["content"]["$regex"]
        assert re.search(pattern, '<?xml version="1.0"?>')
        assert re.search(pattern, "  <OdfBody/>")
        assert not re.search(pattern, '{"a": 1}')


class TestParseDateBound:
    """Tests for parse_date_bound."""

    def test_date_only_lower_bound_is_midnight(self) -> None:
        assert parse_date_bound("2024-07-31") == datetime(2024, 7, 31)

    def test_date_only_upper_bound_covers_day(self) -> None:
        assert parse_date_bound("2024-07-31", end_of_day=True) == datetime(
            2024, 7, 31, 23, 59, 59, 999000
        )

    def test_explicit_time_kept(self) -> None:
        assert parse_date_bound("2024-07-31T12:30:00", end_of_day=True) == datetime(
            2024, 7, 31, 12, 30
        )

    def test_invalid_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_date_bound("2024-02-30")
