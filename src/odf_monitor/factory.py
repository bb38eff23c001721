"""Wire configured adapters into the document service."""

import logging

from pymongo import MongoClient

from .adapters.reprocess import HttpReprocessAdapter
from .adapters.storage import MongoDisciplineReference, MongoDocumentStore, connect, get_database
from .config import Settings, parse_mongo_uri
from .domain.cache import TTLCache
from .domain.comparison import DocumentComparator
from .domain.disciplines import DisciplineResolver
from .domain.models import ComparisonMode
from .domain.services import OdfDocumentService

logger = logging.getLogger(__name__)


def create_document_service(
    settings: Settings,
    client: MongoClient | None = None,
    mode: ComparisonMode | None = None,
) -> OdfDocumentService:
    """Create an OdfDocumentService backed by MongoDB."""
    client = client or connect(settings.mongo)
    database = get_database(client, settings.mongo)

    host, db_name = parse_mongo_uri(settings.mongo.uri)
    logger.info(f"Database: {host}/{settings.mongo.database or db_name}")

    documents = MongoDocumentStore(database[settings.mongo.documents_collection])
    references = MongoDisciplineReference(database[settings.mongo.disciplines_collection])

    return OdfDocumentService(
        documents=documents,
        disciplines=DisciplineResolver(
            documents,
            references,
            cache=TTLCache(settings.cache.discipline_ttl_seconds),
        ),
        comparator=DocumentComparator(documents, mode=mode or settings.comparison.mode),
        reprocessor=HttpReprocessAdapter(
            backend_url=settings.reprocess.backend_url,
            timeout=settings.reprocess.timeout,
        ),
    )
