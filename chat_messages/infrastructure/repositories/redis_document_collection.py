"""Document collection backed by Redis (Repository Pattern)."""
import json
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional, Set

import redis

from chat_messages.domain.errors import PersistenceError
from chat_messages.domain.interfaces.document_collection import IDocumentCollection
from chat_messages.infrastructure.repositories.document_operations import (
    apply_patch,
    filter_values,
    matches,
)


class RedisDocumentCollection(IDocumentCollection):
    """
    Document collection stored in Redis.

    Key layout (for prefix ``message``):
    - ``message:doc:<id>``: document body as JSON
    - ``message:ids``: sorted set of ids scored by insertion sequence
    - ``message:seq``: insertion sequence counter
    - ``message:idx:<field>:<value>``: set of ids per indexed value

    Updates run inside WATCH/MULTI/EXEC so a document and its
    index entries change together. Concurrent writers to the same
    document are retried by ``redis.Redis.transaction``.
    """

    DEFAULT_INDEXED_FIELDS = ("tags", "conversationId", "senderId")

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        key_prefix: str = "message",
        indexed_fields: Iterable[str] = DEFAULT_INDEXED_FIELDS
    ):
        """
        Initialize the collection.

        Args:
            redis_client: Redis client instance (Dependency Injection),
                expected to use ``decode_responses=True``
            key_prefix: Namespace for every key of this collection
            indexed_fields: Fields with a secondary index
        """
        self.redis = redis_client
        self._prefix = key_prefix
        self._indexed_fields = tuple(indexed_fields)
        self._logger = logging.getLogger(__name__)

    def _doc_key(self, document_id: str) -> str:
        return f"{self._prefix}:doc:{document_id}"

    @property
    def _order_key(self) -> str:
        return f"{self._prefix}:ids"

    @property
    def _seq_key(self) -> str:
        return f"{self._prefix}:seq"

    def _index_key(self, field_name: str, value: str) -> str:
        return f"{self._prefix}:idx:{field_name}:{value}"

    def _index_keys(self, document: Dict[str, Any]) -> Set[str]:
        """Index keys a document belongs to."""
        keys = set()
        for field_name in self._indexed_fields:
            value = document.get(field_name)
            values = value if isinstance(value, list) else [value]
            for item in values:
                if isinstance(item, str):
                    keys.add(self._index_key(field_name, item))
        return keys

    def _client(self) -> redis.Redis:
        if not self.redis:
            self._logger.error("Redis client not initialized")
            raise PersistenceError("Redis client not initialized")
        return self.redis

    def insert(self, document: Dict[str, Any]) -> str:
        client = self._client()
        document_id = uuid.uuid4().hex
        stored = dict(document, id=document_id)

        try:
            sequence = client.incr(self._seq_key)
            pipe = client.pipeline(transaction=True)
            pipe.set(self._doc_key(document_id), json.dumps(stored))
            pipe.zadd(self._order_key, {document_id: sequence})
            for key in self._index_keys(stored):
                pipe.sadd(key, document_id)
            pipe.execute()
        except (redis.RedisError, TypeError, ValueError) as e:
            self._logger.error(f"Error inserting document: {e}")
            raise PersistenceError(f"Failed to insert document: {e}") from e

        self._logger.debug(f"Inserted document {document_id} (seq {sequence})")
        return document_id

    def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        client = self._client()
        try:
            data = client.get(self._doc_key(document_id))
        except redis.RedisError as e:
            self._logger.error(f"Error retrieving document {document_id}: {e}")
            raise PersistenceError(f"Failed to read document {document_id}: {e}") from e

        return json.loads(data) if data else None

    def _candidate_ids(self, client: redis.Redis, filters: Dict[str, Any]) -> List[str]:
        """Ids that may match, in insertion order, narrowed by indexes where possible."""
        indexed = {k: v for k, v in filters.items() if k in self._indexed_fields}
        if not indexed:
            return client.zrange(self._order_key, 0, -1)

        candidates: Optional[Set[str]] = None
        for field_name, condition in indexed.items():
            keys = [
                self._index_key(field_name, value)
                for value in filter_values(condition)
                if isinstance(value, str)
            ]
            ids = set(client.sunion(keys)) if keys else set()
            candidates = ids if candidates is None else candidates & ids

        if not candidates:
            return []

        ordered = list(candidates)
        pipe = client.pipeline(transaction=False)
        for document_id in ordered:
            pipe.zscore(self._order_key, document_id)
        scores = pipe.execute()

        ranked = [(score, doc_id) for score, doc_id in zip(scores, ordered) if score is not None]
        ranked.sort()
        return [doc_id for _, doc_id in ranked]

    def find_where(
        self,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        client = self._client()
        try:
            ids = self._candidate_ids(client, filters)
            if not ids:
                return []
            raw_documents = client.mget([self._doc_key(doc_id) for doc_id in ids])
        except redis.RedisError as e:
            self._logger.error(f"Error querying documents with {filters}: {e}")
            raise PersistenceError(f"Failed to query documents: {e}") from e

        found = []
        for raw in raw_documents:
            if not raw:
                continue
            document = json.loads(raw)
            if matches(document, filters):
                found.append(document)

        self._logger.debug(f"Found {len(found)} documents for {filters}")
        end = offset + limit if limit is not None else None
        return found[offset:end]

    def update_by_id(
        self,
        document_id: str,
        patch: Dict[str, Dict[str, Any]],
        where: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        client = self._client()
        key = self._doc_key(document_id)

        def _apply(pipe) -> Optional[Dict[str, Any]]:
            # Runs in immediate mode until multi(); retried on WatchError
            raw = pipe.get(key)
            if not raw:
                return None
            current = json.loads(raw)
            if not matches(current, where):
                return None

            updated = apply_patch(current, patch)
            old_keys = self._index_keys(current)
            new_keys = self._index_keys(updated)

            pipe.multi()
            pipe.set(key, json.dumps(updated))
            for index_key in old_keys - new_keys:
                pipe.srem(index_key, document_id)
            for index_key in new_keys - old_keys:
                pipe.sadd(index_key, document_id)
            return updated

        try:
            return client.transaction(_apply, key, value_from_callable=True)
        except redis.RedisError as e:
            self._logger.error(f"Error updating document {document_id}: {e}")
            raise PersistenceError(f"Failed to update document {document_id}: {e}") from e

    def delete_all(self) -> int:
        client = self._client()
        try:
            count = client.zcard(self._order_key)
            keys = list(client.scan_iter(match=f"{self._prefix}:*"))
            if keys:
                client.delete(*keys)
        except redis.RedisError as e:
            self._logger.error(f"Error clearing collection {self._prefix}: {e}")
            raise PersistenceError(f"Failed to clear collection: {e}") from e

        self._logger.info(f"Removed {count} documents from {self._prefix}")
        return count

    def ping(self) -> bool:
        if not self.redis:
            return False
        try:
            return bool(self.redis.ping())
        except redis.RedisError as e:
            self._logger.error(f"Redis ping failed: {e}")
            return False
