"""
In-memory implementation of the DatabaseService interface.

Used when DATABASE_BACKEND=memory (local demos without a Firebase project) and
as the storage fake in the test suite. Documents are deep-copied on the way in
and out so callers can never mutate stored state by accident.
"""

import copy
import operator
import uuid
from typing import Any, Dict, List, Optional, Tuple

from .database_service import Filter, OrderBy, missing_required_fields, normalize_order_by


def _array_contains(field_value, value) -> bool:
    return isinstance(field_value, list) and value in field_value


def _in(field_value, values) -> bool:
    return field_value in values


_OPERATORS = {
    '==': operator.eq,
    '!=': operator.ne,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
    'in': _in,
    'array_contains': _array_contains,
}


class InMemoryDatabaseService:
    def __init__(self, initial: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        # collection -> document id -> document
        self.storage: Dict[str, Dict[str, Dict[str, Any]]] = copy.deepcopy(initial) if initial else {}

    def _collection(self, collection_name: str) -> Dict[str, Dict[str, Any]]:
        return self.storage.setdefault(collection_name, {})

    @staticmethod
    def _with_id(doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        doc = copy.deepcopy(data)
        doc['id'] = doc_id
        return doc

    async def create_document(
        self,
        collection_name: str,
        data: Dict[str, Any],
        document_id: Optional[str] = None,
        validate: bool = True,
    ) -> Tuple[bool, Optional[str], Optional[str]]:
        if validate:
            missing = missing_required_fields(collection_name, data)
            if missing:
                return False, None, f"Missing required fields: {', '.join(missing)}"

        coll = self._collection(collection_name)
        doc_id = document_id or uuid.uuid4().hex[:20]
        coll[doc_id] = {k: copy.deepcopy(v) for k, v in data.items() if k != 'id'}
        return True, doc_id, None

    async def get_document(self, collection_name: str, document_id: str):
        doc = self._collection(collection_name).get(document_id)
        if doc is None:
            return False, None, "Document not found"
        return True, self._with_id(document_id, doc), None

    async def query_documents(
        self,
        collection_name: str,
        filters: Optional[List[Filter]] = None,
        order_by: OrderBy = None,
        limit: Optional[int] = None,
    ):
        docs = [self._with_id(doc_id, doc) for doc_id, doc in self._collection(collection_name).items()]

        for field, op, value in filters or []:
            compare = _OPERATORS.get(op)
            if compare is None:
                return False, [], f"Unsupported operator: {op}"
            docs = [d for d in docs if field in d and compare(d[field], value)]

        # Firestore excludes documents missing an order_by field
        for field, direction in reversed(normalize_order_by(order_by)):
            docs = [d for d in docs if d.get(field) is not None]
            docs.sort(key=lambda d: d[field], reverse=(direction == 'desc'))

        if limit:
            docs = docs[:limit]
        return True, docs, None

    async def update_document(
        self,
        collection_name: str,
        document_id: str,
        data: Dict[str, Any],
        validate: bool = True,
    ):
        coll = self._collection(collection_name)
        if document_id not in coll:
            return False, "Document not found"
        if validate:
            blanked = [f for f in missing_required_fields(collection_name, data) if f in data]
            if blanked:
                return False, f"Required fields cannot be empty: {', '.join(blanked)}"
        coll[document_id].update({k: copy.deepcopy(v) for k, v in data.items() if k != 'id'})
        return True, None

    async def delete_document(self, collection_name: str, document_id: str):
        coll = self._collection(collection_name)
        if document_id not in coll:
            return False, "Document not found"
        del coll[document_id]
        return True, None

    async def get_all_documents(self, collection_name: str) -> List[Dict[str, Any]]:
        return [self._with_id(doc_id, doc) for doc_id, doc in self._collection(collection_name).items()]
