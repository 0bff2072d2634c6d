"""Reference resolvers (Infrastructure Layer)."""
from chat_messages.infrastructure.resolvers.reference_resolvers import (
    IdReferenceResolver,
    RedisHashReferenceResolver,
)

__all__ = [
    "IdReferenceResolver",
    "RedisHashReferenceResolver",
]
