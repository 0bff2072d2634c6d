"""Interface for resolving related entities (conversation, sender) by id."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IReferenceResolver(ABC):
    """Resolves an identifier into a reference used to enrich output."""

    @abstractmethod
    def resolve(self, reference_id: str) -> Optional[Dict[str, Any]]:
        """
        Resolve a reference.

        Args:
            reference_id: Identifier of the referenced entity

        Returns:
            Reference dictionary containing at least ``id``, or None if unknown
        """
        pass
