"""Repository implementations (Infrastructure Layer).

Document collections implementing app-agnostic storage
defined in chat_messages.domain.interfaces.
"""
from chat_messages.infrastructure.repositories.memory_document_collection import InMemoryDocumentCollection
from chat_messages.infrastructure.repositories.redis_document_collection import RedisDocumentCollection

__all__ = [
    "InMemoryDocumentCollection",
    "RedisDocumentCollection",
]
