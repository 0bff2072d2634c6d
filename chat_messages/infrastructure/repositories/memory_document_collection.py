"""In-process document collection for local development and tests."""
import copy
import logging
import threading
import uuid
from typing import Any, Dict, List, Optional

from chat_messages.domain.interfaces.document_collection import IDocumentCollection
from chat_messages.infrastructure.repositories.document_operations import apply_patch, matches


class InMemoryDocumentCollection(IDocumentCollection):
    """
    Document collection kept in a dictionary.

    Dictionaries preserve insertion order, which gives creation order
    for free. A re-entrant lock makes every update atomic per process.
    Data is lost when the process exits.
    """

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    def insert(self, document: Dict[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        stored = copy.deepcopy(document)
        stored["id"] = document_id
        with self._lock:
            self._documents[document_id] = stored
        self._logger.debug(f"Inserted document {document_id}")
        return document_id

    def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._documents.get(document_id)
            return copy.deepcopy(document) if document is not None else None

    def find_where(
        self,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        with self._lock:
            found = [
                copy.deepcopy(document)
                for document in self._documents.values()
                if matches(document, filters)
            ]
        end = offset + limit if limit is not None else None
        return found[offset:end]

    def update_by_id(
        self,
        document_id: str,
        patch: Dict[str, Dict[str, Any]],
        where: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        with self._lock:
            current = self._documents.get(document_id)
            if current is None or not matches(current, where):
                return None
            updated = apply_patch(current, patch)
            self._documents[document_id] = updated
            return copy.deepcopy(updated)

    def delete_all(self) -> int:
        with self._lock:
            count = len(self._documents)
            self._documents.clear()
        self._logger.info(f"Removed {count} documents")
        return count

    def ping(self) -> bool:
        return True
