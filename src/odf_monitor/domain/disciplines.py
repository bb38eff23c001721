"""Discipline derivation and validation."""

import logging

from ..ports.disciplines import DisciplineReferencePort
from ..ports.documents import DocumentStorePort
from .cache import TTLCache
from .query import DISCIPLINE_PIPELINE

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


def normalize_discipline(code: str) -> str:
    return code.strip().upper()


class DisciplineResolver:
    """Lists the disciplines that have XML documents and a reference entry."""

    def __init__(
        self,
        documents: DocumentStorePort,
        references: DisciplineReferencePort,
        cache: TTLCache[list[str]] | None = None,
    ) -> None:
        self.documents = documents
        self.references = references
        self.cache = cache or TTLCache(DEFAULT_TTL_SECONDS)

    def list_disciplines(self) -> list[str]:
        """Return sorted discipline codes, served from cache within the TTL."""
        return self.cache.get_or_compute(self._compute)

    def exists(self, code: str) -> bool:
        """Check a code against the reference collection."""
        return self.references.exists(normalize_discipline(code))

    def _compute(self) -> list[str]:
        logger.debug("Discipline cache miss, recomputing")
        # 1. Distinct prefixes of XML documents, aggregated by the store
        rows = self.documents.aggregate(DISCIPLINE_PIPELINE)
        derived = sorted({normalize_discipline(row["_id"]) for row in rows if row.get("_id")})

        if not derived:
            logger.info("No disciplines derived from XML documents")
            return []

        # 2. One batched lookup against the reference collection
        existing = {normalize_discipline(c) for c in self.references.find_existing_among(derived)}

        # 3. Intersect
        disciplines = [code for code in derived if code in existing]

        dropped = len(derived) - len(disciplines)
        if dropped:
            logger.info(f"Ignored {dropped} disciplines missing from reference collection")
        logger.info(f"Resolved {len(disciplines)} disciplines")
        return disciplines
