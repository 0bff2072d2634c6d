"""Interface for document storage (Repository Pattern).

Messages are stored as schemaless documents. Backends only need id lookup,
filtered scans and atomic per-document updates.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class IDocumentCollection(ABC):
    """
    Interface for a collection of JSON-like documents.

    Allows switching storage backends (Redis, in-memory, etc.)
    without changing business logic.

    Filters map a field to either a literal or ``{"$in": [...]}``.
    A literal matches equal scalars, or membership when the stored
    field is a list. ``$in`` matches when any listed value matches.

    Patches use the operators ``$set``, ``$push``, ``$addToSet``
    and ``$pull``.
    """

    @abstractmethod
    def insert(self, document: Dict[str, Any]) -> str:
        """
        Store a new document.

        Args:
            document: Document body (without an id)

        Returns:
            The id assigned to the document
        """
        pass

    @abstractmethod
    def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a document by id.

        Args:
            document_id: Document identifier

        Returns:
            The document including its ``id``, or None if absent
        """
        pass

    @abstractmethod
    def find_where(
        self,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        """
        Retrieve every document matching all filters, in insertion order.

        Args:
            filters: Field filters (see class docstring)
            limit: Optional maximum number of documents
            offset: Number of matching documents to skip

        Returns:
            Matching documents, possibly empty
        """
        pass

    @abstractmethod
    def update_by_id(
        self,
        document_id: str,
        patch: Dict[str, Dict[str, Any]],
        where: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Atomically apply a patch to one document.

        Args:
            document_id: Document identifier
            patch: Update operators to apply
            where: Optional filters the current document must match

        Returns:
            The updated document, or None if the document is absent
            or does not match ``where`` (nothing is written then)
        """
        pass

    @abstractmethod
    def delete_all(self) -> int:
        """
        Hard-remove every document. Maintenance and test use only.

        Returns:
            Number of documents removed
        """
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the backend is reachable."""
        pass
