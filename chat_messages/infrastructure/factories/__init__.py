"""Factories (Infrastructure Layer)."""
from chat_messages.infrastructure.factories.storage_factory import StorageFactory

__all__ = ["StorageFactory"]
