"""Unit tests for the discipline resolver."""

import pytest

from odf_monitor.domain.disciplines import DisciplineResolver, normalize_discipline
from odf_monitor.domain.errors import UpstreamUnavailableError
from odf_monitor.domain.query import DISCIPLINE_PIPELINE


class TestListDisciplines:
    """Tests for DisciplineResolver.list_disciplines."""

    def test_intersects_with_reference(self, resolver, mock_documents, mock_references) -> None:
        mock_documents.aggregate.return_value = [{"_id": "ATH"}, {"_id": "MTI"}, {"_id": "XXX"}]
        mock_references.find_existing_among.return_value = {"ATH", "MTI"}

        assert resolver.list_disciplines() == ["ATH", "MTI"]

    def test_aggregation_pushed_to_store(self, resolver, mock_documents, mock_references) -> None:
        mock_documents.aggregate.return_value = [{"_id": "ATH"}]
        mock_references.find_existing_among.return_value = {"ATH"}

        resolver.list_disciplines()

        mock_documents.aggregate.assert_called_once_with(DISCIPLINE_PIPELINE)
        mock_documents.find.assert_not_called()

    def test_single_batched_reference_lookup(
        self, resolver, mock_documents, mock_references
    ) -> None:
        mock_documents.aggregate.return_value = [{"_id": "BOX"}, {"_id": "ATH"}, {"_id": "MTI"}]
        mock_references.find_existing_among.return_value = {"ATH", "BOX", "MTI"}

        assert resolver.list_disciplines() == ["ATH", "BOX", "MTI"]
        mock_references.find_existing_among.assert_called_once_with(["ATH", "BOX", "MTI"])
        mock_references.exists.assert_not_called()

    def test_sorted_and_uppercased(self, resolver, mock_documents, mock_references) -> None:
        mock_documents.aggregate.return_value = [{"_id": "mti"}, {"_id": "ATH"}]
        mock_references.find_existing_among.return_value = {"MTI", "ath"}

        assert resolver.list_disciplines() == ["ATH", "MTI"]

    def test_no_derived_disciplines_skips_reference(
        self, resolver, mock_documents, mock_references
    ) -> None:
        mock_documents.aggregate.return_value = []

        assert resolver.list_disciplines() == []
        mock_references.find_existing_among.assert_not_called()

    def test_cached_within_ttl(self, resolver, mock_documents, mock_references, clock) -> None:
        mock_documents.aggregate.return_value = [{"_id": "ATH"}, {"_id": "MTI"}]
        mock_references.find_existing_among.return_value = {"ATH", "MTI"}

        first = resolver.list_disciplines()
        clock.advance(3599)
        second = resolver.list_disciplines()

        assert second is first
        assert mock_documents.aggregate.call_count == 1
        assert mock_references.find_existing_among.call_count == 1

    def test_result_stored_in_cache(self, resolver, mock_documents, mock_references) -> None:
        mock_documents.aggregate.return_value = [{"_id": "ATH"}]
        mock_references.find_existing_among.return_value = {"ATH"}

        result = resolver.list_disciplines()

        assert resolver.cache.get() is result

    def test_empty_result_cached(self, resolver, mock_documents) -> None:
        resolver.list_disciplines()
        resolver.list_disciplines()
        assert mock_documents.aggregate.call_count == 1

    def test_recomputed_after_expiry(self, resolver, mock_documents, mock_references, clock) -> None:
        mock_documents.aggregate.return_value = [{"_id": "ATH"}]
        mock_references.find_existing_among.return_value = {"ATH"}
        resolver.list_disciplines()

        clock.advance(3600)
        mock_documents.aggregate.return_value = [{"_id": "ATH"}, {"_id": "MTI"}]
        mock_references.find_existing_among.return_value = {"ATH", "MTI"}

        assert resolver.list_disciplines() == ["ATH", "MTI"]
        assert mock_documents.aggregate.call_count == 2

    def test_reference_failure_not_masked_by_expired_cache(
        self, resolver, mock_documents, mock_references, clock
    ) -> None:
        mock_documents.aggregate.return_value = [{"_id": "ATH"}]
        mock_references.find_existing_among.return_value = {"ATH"}
        resolver.list_disciplines()

        clock.advance(3600)
        mock_references.find_existing_among.side_effect = UpstreamUnavailableError("down")

        with pytest.raises(UpstreamUnavailableError):
            resolver.list_disciplines()

    def test_default_cache(self, mock_documents, mock_references) -> None:
        resolver = DisciplineResolver(mock_documents, mock_references)
        assert resolver.cache.ttl_seconds == 3600


class TestExists:
    """Tests for DisciplineResolver.exists."""

    def test_normalizes_code(self, resolver, mock_references) -> None:
        mock_references.exists.return_value = True
        assert resolver.exists(" ath ") is True
        mock_references.exists.assert_called_once_with("ATH")

    def test_missing(self, resolver, mock_references) -> None:
        mock_references.exists.return_value = False
        assert resolver.exists("ZZZ") is False


def test_normalize_discipline() -> None:
    assert normalize_discipline(" mti") == "MTI"
