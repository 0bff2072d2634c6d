"""Factory for creating storage and resolver instances (Factory Pattern)."""
import logging
from typing import Optional

import redis

from chat_messages.domain.interfaces.document_collection import IDocumentCollection
from chat_messages.domain.interfaces.reference_resolver import IReferenceResolver
from chat_messages.infrastructure.repositories.memory_document_collection import InMemoryDocumentCollection
from chat_messages.infrastructure.repositories.redis_document_collection import RedisDocumentCollection
from chat_messages.infrastructure.resolvers.reference_resolvers import (
    IdReferenceResolver,
    RedisHashReferenceResolver,
)


logger = logging.getLogger(__name__)


class StorageFactory:
    """
    Factory for creating storage backends following Factory Pattern.

    Centralizes creation logic and allows switching implementations
    through configuration.
    """

    @staticmethod
    def create_document_collection(
        storage_type: str = "redis",
        redis_client: Optional[redis.Redis] = None,
        key_prefix: str = "message"
    ) -> IDocumentCollection:
        """
        Create a document collection.

        Args:
            storage_type: Type of storage ("redis" or "memory")
            redis_client: Redis client for the redis backend
            key_prefix: Key namespace for the redis backend

        Returns:
            IDocumentCollection instance

        Raises:
            ValueError: If storage type is not supported
        """
        storage_type = storage_type.lower()

        if storage_type == "redis":
            return RedisDocumentCollection(redis_client=redis_client, key_prefix=key_prefix)
        elif storage_type == "memory":
            logger.warning("Using in-memory document storage; messages will not persist")
            return InMemoryDocumentCollection()
        else:
            raise ValueError(f"Unsupported storage type: {storage_type}")

    @staticmethod
    def create_reference_resolver(
        resolver_type: str = "id",
        redis_client: Optional[redis.Redis] = None,
        key_prefix: str = ""
    ) -> IReferenceResolver:
        """
        Create a reference resolver.

        Args:
            resolver_type: Type of resolver ("id" or "redis")
            redis_client: Redis client for the redis resolver
            key_prefix: Hash key prefix for the redis resolver

        Returns:
            IReferenceResolver instance

        Raises:
            ValueError: If resolver type is not supported
        """
        resolver_type = resolver_type.lower()

        if resolver_type == "id":
            return IdReferenceResolver()
        elif resolver_type == "redis":
            return RedisHashReferenceResolver(redis_client=redis_client, key_prefix=key_prefix)
        else:
            raise ValueError(f"Unsupported resolver type: {resolver_type}")
