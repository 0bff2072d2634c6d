"""Service container wiring the message store from configuration."""
import logging
from typing import Optional

import redis

from chat_messages.application.services.message_store import MessageStore
from chat_messages.config.settings import Config
from chat_messages.domain.errors import PersistenceError
from chat_messages.domain.interfaces.document_collection import IDocumentCollection
from chat_messages.domain.interfaces.reference_resolver import IReferenceResolver
from chat_messages.infrastructure.factories.storage_factory import StorageFactory
from chat_messages.infrastructure.redis_client import RedisClientFactory


class ServiceContainer:
    """
    Composition root for one application instance.

    Builds each dependency lazily from the given configuration and hands
    it to MessageStore through its constructor. Nothing is registered
    globally: two containers never share a store.
    """

    def __init__(self, config: type[Config] = Config, redis_client: Optional[redis.Redis] = None):
        """
        Initialize service container.

        Args:
            config: Configuration class
            redis_client: Optional Redis client (skips RedisClientFactory)
        """
        self.config = config
        self._redis_client = redis_client
        self._document_collection: Optional[IDocumentCollection] = None
        self._conversation_resolver: Optional[IReferenceResolver] = None
        self._sender_resolver: Optional[IReferenceResolver] = None
        self._message_store: Optional[MessageStore] = None
        self._logger = logging.getLogger(__name__)

    def get_redis_client(self) -> Optional[redis.Redis]:
        """Get the Redis client, connecting on first use."""
        if self._redis_client is None:
            self._redis_client = RedisClientFactory.get_client(self.config.REDIS_URL)
        return self._redis_client

    def _needs_redis(self, backend_type: str) -> Optional[redis.Redis]:
        """
        Redis client for a redis-backed component, None for other backends.

        Raises:
            PersistenceError: If Redis is configured but unreachable. Nothing
                is cached, so the next call tries to connect again.
        """
        if backend_type != "redis":
            return None
        client = self.get_redis_client()
        if client is None:
            self._logger.error("Redis is unreachable; storage components not created")
            raise PersistenceError("Redis is unreachable")
        return client

    def get_document_collection(self) -> IDocumentCollection:
        """Get or create the message document collection."""
        if self._document_collection is None:
            storage_type = self.config.DOCUMENT_STORAGE_TYPE
            try:
                self._document_collection = StorageFactory.create_document_collection(
                    storage_type=storage_type,
                    redis_client=self._needs_redis(storage_type),
                    key_prefix=self.config.MESSAGE_KEY_PREFIX
                )
                self._logger.info(f"DocumentCollection created with {storage_type}")
            except Exception as e:
                self._logger.error(f"Failed to create DocumentCollection: {e}")
                raise
        return self._document_collection

    def get_conversation_resolver(self) -> IReferenceResolver:
        """Get or create the conversation reference resolver."""
        if self._conversation_resolver is None:
            resolver_type = self.config.REFERENCE_RESOLVER_TYPE
            self._conversation_resolver = StorageFactory.create_reference_resolver(
                resolver_type=resolver_type,
                redis_client=self._needs_redis(resolver_type),
                key_prefix=self.config.CONVERSATION_KEY_PREFIX
            )
        return self._conversation_resolver

    def get_sender_resolver(self) -> IReferenceResolver:
        """Get or create the sender reference resolver."""
        if self._sender_resolver is None:
            resolver_type = self.config.REFERENCE_RESOLVER_TYPE
            self._sender_resolver = StorageFactory.create_reference_resolver(
                resolver_type=resolver_type,
                redis_client=self._needs_redis(resolver_type),
                key_prefix=self.config.USER_KEY_PREFIX
            )
        return self._sender_resolver

    def get_message_store(self) -> MessageStore:
        """Get or create the message store."""
        if self._message_store is None:
            self._message_store = MessageStore(
                collection=self.get_document_collection(),
                conversation_resolver=self.get_conversation_resolver(),
                sender_resolver=self.get_sender_resolver()
            )
            self._logger.info("MessageStore created")
        return self._message_store
