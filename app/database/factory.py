import logging

from ..core.config import settings

logger = logging.getLogger(__name__)

_database = None


def get_database():
    """Storage collaborator selected by DATABASE_BACKEND (firestore or memory)"""
    global _database
    if _database is None:
        if settings.DATABASE_BACKEND == "memory":
            from .memory_store import InMemoryDatabaseService
            logger.warning("[DB] Using the in-memory database; data is lost on restart")
            _database = InMemoryDatabaseService()
        else:
            from .database_service import database_service
            _database = database_service
    return _database
