from typing import Any, Dict, List, Optional, Tuple, Union
import logging

from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions
from google.cloud.firestore_v1 import FieldFilter, Query

from ..core.firebase_init import initialize_firebase, is_firebase_available
from .collections import COLLECTION_SCHEMAS

logger = logging.getLogger(__name__)

Filter = Tuple[str, str, Any]
OrderBy = Union[str, List[Tuple[str, str]], None]


def normalize_order_by(order_by: OrderBy) -> List[Tuple[str, str]]:
    """Accept 'field', [('field', 'desc')] or None and return [(field, direction)]"""
    if not order_by:
        return []
    if isinstance(order_by, str):
        return [(order_by, 'asc')]
    return [(field, (direction or 'asc').lower()) for field, direction in order_by]


def missing_required_fields(collection_name: str, data: Dict[str, Any]) -> List[str]:
    schema = COLLECTION_SCHEMAS.get(collection_name)
    if not schema:
        return []
    return [f for f in schema['required'] if data.get(f) in (None, '')]


class DatabaseService:
    """
    Async facade over Cloud Firestore.

    Every method returns a tuple whose first element is a success flag and whose
    last element is an error string (None on success), so callers never have to
    catch Firestore exceptions themselves.
    """

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not is_firebase_available() and not initialize_firebase():
                raise RuntimeError("Firebase is not initialized - Firestore not available")
            self._client = firestore.client()
        return self._client

    @staticmethod
    def _snapshot_to_dict(snapshot) -> Dict[str, Any]:
        data = snapshot.to_dict() or {}
        data['id'] = snapshot.id
        return data

    async def create_document(
        self,
        collection_name: str,
        data: Dict[str, Any],
        document_id: Optional[str] = None,
        validate: bool = True,
    ) -> Tuple[bool, Optional[str], Optional[str]]:
        """Create a document; Firestore assigns the id unless document_id is given"""
        try:
            if validate:
                missing = missing_required_fields(collection_name, data)
                if missing:
                    return False, None, f"Missing required fields: {', '.join(missing)}"

            payload = {k: v for k, v in data.items() if k != 'id'}
            collection = self.client.collection(collection_name)
            if document_id:
                collection.document(document_id).set(payload)
                doc_id = document_id
            else:
                _, doc_ref = collection.add(payload)
                doc_id = doc_ref.id

            logger.debug(f"[DB] Created {collection_name}/{doc_id}")
            return True, doc_id, None
        except Exception as e:
            logger.error(f"[DB] Error creating document in {collection_name}: {e}")
            return False, None, str(e)

    async def get_document(
        self, collection_name: str, document_id: str
    ) -> Tuple[bool, Optional[Dict[str, Any]], Optional[str]]:
        try:
            snapshot = self.client.collection(collection_name).document(document_id).get()
            if not snapshot.exists:
                return False, None, "Document not found"
            return True, self._snapshot_to_dict(snapshot), None
        except Exception as e:
            logger.error(f"[DB] Error getting {collection_name}/{document_id}: {e}")
            return False, None, str(e)

    async def query_documents(
        self,
        collection_name: str,
        filters: Optional[List[Filter]] = None,
        order_by: OrderBy = None,
        limit: Optional[int] = None,
    ) -> Tuple[bool, List[Dict[str, Any]], Optional[str]]:
        """Query with (field, op, value) filters, optional ordering and limit"""
        try:
            query = self.client.collection(collection_name)
            for field, op, value in filters or []:
                query = query.where(filter=FieldFilter(field, op, value))
            for field, direction in normalize_order_by(order_by):
                query = query.order_by(
                    field,
                    direction=Query.DESCENDING if direction == 'desc' else Query.ASCENDING,
                )
            if limit:
                query = query.limit(limit)

            return True, [self._snapshot_to_dict(doc) for doc in query.stream()], None
        except Exception as e:
            logger.error(f"[DB] Error querying {collection_name}: {e}")
            return False, [], str(e)

    async def update_document(
        self,
        collection_name: str,
        document_id: str,
        data: Dict[str, Any],
        validate: bool = True,
    ) -> Tuple[bool, Optional[str]]:
        try:
            if validate:
                blanked = [f for f in missing_required_fields(collection_name, data) if f in data]
                if blanked:
                    return False, f"Required fields cannot be empty: {', '.join(blanked)}"

            payload = {k: v for k, v in data.items() if k != 'id'}
            self.client.collection(collection_name).document(document_id).update(payload)
            return True, None
        except gcp_exceptions.NotFound:
            return False, "Document not found"
        except Exception as e:
            logger.error(f"[DB] Error updating {collection_name}/{document_id}: {e}")
            return False, str(e)

    async def delete_document(self, collection_name: str, document_id: str) -> Tuple[bool, Optional[str]]:
        try:
            doc_ref = self.client.collection(collection_name).document(document_id)
            if not doc_ref.get().exists:
                return False, "Document not found"
            doc_ref.delete()
            return True, None
        except Exception as e:
            logger.error(f"[DB] Error deleting {collection_name}/{document_id}: {e}")
            return False, str(e)

    async def get_all_documents(self, collection_name: str) -> List[Dict[str, Any]]:
        success, documents, error = await self.query_documents(collection_name)
        if not success:
            raise Exception(f"Failed to read {collection_name}: {error}")
        return documents


database_service = DatabaseService()
