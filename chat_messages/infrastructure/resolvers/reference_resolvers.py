"""Reference resolvers used to enrich message output."""
import logging
from typing import Any, Dict, Optional

import redis

from chat_messages.domain.interfaces.reference_resolver import IReferenceResolver


class IdReferenceResolver(IReferenceResolver):
    """Resolves every id to a bare ``{"id": ...}`` reference."""

    def resolve(self, reference_id: str) -> Optional[Dict[str, Any]]:
        return {"id": reference_id}


class RedisHashReferenceResolver(IReferenceResolver):
    """
    Resolves references from Redis hashes written by the owning service.

    A conversation stored at ``conversation:<id>`` with fields
    ``name`` and ``product`` resolves to
    ``{"id": <id>, "name": ..., "product": ...}``.
    """

    def __init__(self, redis_client: Optional[redis.Redis], key_prefix: str):
        """
        Initialize the resolver.

        Args:
            redis_client: Redis client instance (Dependency Injection)
            key_prefix: Key prefix of the hashes, e.g. ``"user:"``
        """
        self.redis = redis_client
        self._key_prefix = key_prefix
        self._logger = logging.getLogger(__name__)

    def resolve(self, reference_id: str) -> Optional[Dict[str, Any]]:
        if not self.redis:
            self._logger.error("Redis client not initialized")
            return None

        try:
            data = self.redis.hgetall(f"{self._key_prefix}{reference_id}")
        except redis.RedisError as e:
            self._logger.error(f"Error resolving {self._key_prefix}{reference_id}: {e}")
            return None

        if not data:
            self._logger.debug(f"No reference found for {self._key_prefix}{reference_id}")
            return None

        reference: Dict[str, Any] = dict(data)
        reference["id"] = reference_id
        return reference
