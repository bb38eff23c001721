"""Translate listing filters into a document store predicate.

Predicates use MongoDB query syntax as plain dicts. Only the terms that are
present are ever constructed; an absent filter contributes nothing.
"""

import re
from datetime import datetime
from typing import Any

from .models import DocumentFilters

# Newest first, ties in insertion order
DOCUMENT_SORT: list[tuple[str, int]] = [("date", -1), ("_id", 1)]

XML_CONTENT_PATTERN = r"^\s*(<\?xml|<OdfBody)"
DISCIPLINE_PATTERN = r"^[A-Z]{3}$"
DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DISCIPLINE_PIPELINE: list[dict[str, Any]] = [
    {"$match": {"content": {"$regex": XML_CONTENT_PATTERN}}},
    {"$project": {"discipline": {"$toUpper": {"$substrCP": ["$documentCode", 0, 3]}}}},
    {"$match": {"discipline": {"$regex": DISCIPLINE_PATTERN}}},
    {"$group": {"_id": "$discipline"}},
    {"$sort": {"_id": 1}},
]


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def prefix_pattern(prefix: str) -> dict[str, str]:
    """Case-insensitive anchored match with regex metacharacters escaped."""
    return {"$regex": f"^{re.escape(prefix.strip())}", "$options": "i"}


def substring_pattern(text: str) -> dict[str, str]:
    """Case-insensitive unanchored match on the literal text."""
    return {"$regex": re.escape(text.strip()), "$options": "i"}


def date_range(date_from: datetime | None, date_to: datetime | None) -> dict[str, datetime]:
    """Range over the supplied bounds only."""
    bounds: dict[str, datetime] = {}
    if date_from is not None:
        bounds["$gte"] = date_from
    if date_to is not None:
        bounds["$lte"] = date_to
    return bounds


def build_document_query(filters: DocumentFilters | None = None) -> dict[str, Any]:
    """Build the AND of all present filter terms.

    A discipline filter is a prefix match on documentCode and replaces the
    documentCode substring filter entirely.
    """
    if filters is None:
        return {}

    terms: list[tuple[str, Any]] = []

    if _present(filters.competition_code):
        terms.append(("competitionCode", filters.competition_code))

    if _present(filters.discipline):
        terms.append(("documentCode", prefix_pattern(filters.discipline)))
    elif _present(filters.document_code):
        terms.append(("documentCode", substring_pattern(filters.document_code)))

    if _present(filters.document_type):
        terms.append(("documentType", filters.document_type))

    if _present(filters.document_subtype):
        terms.append(("documentSubtype", filters.document_subtype))

    bounds = date_range(filters.date_from, filters.date_to)
    if bounds:
        terms.append(("date", bounds))

    return dict(terms)


def document_code_query(document_code: str) -> dict[str, Any]:
    return {"documentCode": substring_pattern(document_code)}


def parse_date_bound(value: str, end_of_day: bool = False) -> datetime:
    """Parse an ISO 8601 date or datetime.

    With end_of_day, a date-only value covers the whole day so that an
    inclusive upper bound keeps documents dated later that day.
    Raises ValueError for malformed input.
    """
    parsed = datetime.fromisoformat(value)
    if end_of_day and DATE_ONLY_PATTERN.match(value):
        parsed = parsed.replace(hour=23, minute=59, second=59, microsecond=999000)
    return parsed
