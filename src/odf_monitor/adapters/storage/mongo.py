"""Storage adapters using MongoDB."""

import logging
from datetime import datetime
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ...config import MongoConfig
from ...domain.errors import UpstreamUnavailableError
from ...domain.models import OdfDocument
from ...ports.disciplines import DisciplineReferencePort
from ...ports.documents import DocumentStorePort

logger = logging.getLogger(__name__)

DOCUMENT_INDEXES: list[tuple[list[tuple[str, int]], dict[str, Any]]] = [
    ([("documentCode", ASCENDING)], {}),
    ([("documentCode", ASCENDING), ("date", DESCENDING)], {}),
    ([("competitionCode", ASCENDING), ("documentType", ASCENDING), ("date", DESCENDING)], {}),
    ([("documentType", ASCENDING), ("documentSubtype", ASCENDING)], {}),
    ([("date", DESCENDING)], {}),
    ([("contentHash", ASCENDING)], {"unique": True, "sparse": True}),
]


def to_document(row: dict[str, Any]) -> OdfDocument:
    """Map a stored row to an OdfDocument, defaulting audit dates to date."""
    doc_date: datetime = row["date"]
    return OdfDocument(
        id=str(row["_id"]),
        competition_code=row.get("competitionCode", ""),
        document_code=row["documentCode"],
        document_type=row["documentType"],
        document_subtype=row.get("documentSubtype"),
        version=row["version"],
        date=doc_date,
        content=row["content"],
        result_status=row.get("resultStatus"),
        unit_codes=row.get("unitCodes"),
        content_hash=row.get("contentHash"),
        created_at=row.get("createdAt") or doc_date,
        updated_at=row.get("updatedAt") or doc_date,
    )


def _object_id(document_id: str) -> ObjectId | None:
    if not ObjectId.is_valid(document_id):
        return None
    return ObjectId(document_id)


def connect(config: MongoConfig) -> MongoClient:
    """Create a client; connection happens lazily on first operation."""
    return MongoClient(
        config.uri,
        serverSelectionTimeoutMS=config.timeout_ms,
        tz_aware=True,
    )


def get_database(client: MongoClient, config: MongoConfig):
    if config.database:
        return client[config.database]
    return client.get_default_database()


class MongoDocumentStore(DocumentStorePort):
    """Document store implementation using a MongoDB collection."""

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def find(
        self,
        predicate: dict[str, Any],
        sort: list[tuple[str, int]],
        skip: int | None = None,
        limit: int | None = None,
    ) -> list[OdfDocument]:
        try:
            cursor = self.collection.find(predicate).sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            return [to_document(row) for row in cursor]
        except PyMongoError as e:
            raise UpstreamUnavailableError(f"Document store unavailable: {e}") from e

    def count(self, predicate: dict[str, Any]) -> int:
        try:
            return self.collection.count_documents(predicate)
        except PyMongoError as e:
            raise UpstreamUnavailableError(f"Document store unavailable: {e}") from e

    def find_by_id(self, document_id: str) -> OdfDocument | None:
        oid = _object_id(document_id)
        if oid is None:
            logger.debug(f"Not an ObjectId: {document_id!r}")
            return None
        return self.find_one({"_id": oid})

    def find_one(self, predicate: dict[str, Any]) -> OdfDocument | None:
        try:
            row = self.collection.find_one(predicate)
        except PyMongoError as e:
            raise UpstreamUnavailableError(f"Document store unavailable: {e}") from e
        return to_document(row) if row else None

    def aggregate(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        try:
            return list(self.collection.aggregate(pipeline, allowDiskUse=True))
        except PyMongoError as e:
            raise UpstreamUnavailableError(f"Document store unavailable: {e}") from e

    def ensure_indexes(self) -> list[str]:
        """Create the indexes listing and search rely on. Returns index names."""
        names = []
        try:
            for keys, options in DOCUMENT_INDEXES:
                names.append(self.collection.create_index(keys, **options))
        except PyMongoError as e:
            raise UpstreamUnavailableError(f"Document store unavailable: {e}") from e
        logger.info(f"Ensured {len(names)} indexes on {self.collection.name}")
        return names


def _reference_code(row: dict[str, Any]) -> str | None:
    metadata = row.get("metadata") or {}
    code = metadata.get("discipline") or row.get("name")
    return code if isinstance(code, str) and code else None


class MongoDisciplineReference(DisciplineReferencePort):
    """Discipline reference implementation using the discipline-settings collection."""

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def exists(self, code: str) -> bool:
        try:
            row = self.collection.find_one(
                {"$or": [{"name": code}, {"metadata.discipline": code}]},
                {"_id": 1},
            )
        except PyMongoError as e:
            raise UpstreamUnavailableError(f"Discipline reference unavailable: {e}") from e
        return row is not None

    def find_all_codes(self) -> list[str]:
        try:
            rows = self.collection.find({}, {"name": 1, "metadata.discipline": 1})
            codes = {_reference_code(row) for row in rows}
        except PyMongoError as e:
            raise UpstreamUnavailableError(f"Discipline reference unavailable: {e}") from e
        return sorted(code for code in codes if code)

    def find_existing_among(self, codes: list[str]) -> set[str]:
        if not codes:
            return set()
        try:
            rows = self.collection.find(
                {
                    "$or": [
                        {"name": {"$in": codes}},
                        {"metadata.discipline": {"$in": codes}},
                    ]
                },
                {"name": 1, "metadata.discipline": 1},
            )
            found: set[str] = set()
            for row in rows:
                found.add(row.get("name"))
                found.add((row.get("metadata") or {}).get("discipline"))
        except PyMongoError as e:
            raise UpstreamUnavailableError(f"Discipline reference unavailable: {e}") from e
        # A row may match on either field; only report the codes asked about
        return found & set(codes)
