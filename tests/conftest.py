"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import fakeredis
import pytest

from chat_messages import create_app
from chat_messages.application.services.message_store import MessageStore
from chat_messages.config.settings import TestingConfig
from chat_messages.infrastructure.repositories.memory_document_collection import InMemoryDocumentCollection
from chat_messages.infrastructure.repositories.redis_document_collection import RedisDocumentCollection
from chat_messages.infrastructure.resolvers.reference_resolvers import IdReferenceResolver


@pytest.fixture(scope="function")
def redis_client():
    """Isolated in-process Redis server per test."""
    client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture(scope="function", params=["memory", "redis"])
def collection(request, redis_client):
    """Every document collection backend."""
    if request.param == "memory":
        return InMemoryDocumentCollection()
    return RedisDocumentCollection(redis_client=redis_client, key_prefix="test-message")


@pytest.fixture(scope="function")
def store(collection) -> MessageStore:
    """Message store on each backend with id-only reference resolution."""
    return MessageStore(
        collection=collection,
        conversation_resolver=IdReferenceResolver(),
        sender_resolver=IdReferenceResolver(),
    )


@pytest.fixture(scope="function")
def app():
    """Flask application using in-memory storage."""
    return create_app(TestingConfig)


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()
