"""Storage adapters."""

from .mongo import MongoDisciplineReference, MongoDocumentStore, connect, get_database

__all__ = ["MongoDisciplineReference", "MongoDocumentStore", "connect", "get_database"]
