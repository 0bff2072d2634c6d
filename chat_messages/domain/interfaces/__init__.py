"""Domain interfaces following Dependency Inversion Principle."""

from chat_messages.domain.interfaces.document_collection import IDocumentCollection
from chat_messages.domain.interfaces.reference_resolver import IReferenceResolver

__all__ = [
    "IDocumentCollection",
    "IReferenceResolver",
]
