"""Mapping between domain entities and storage documents."""
from chat_messages.infrastructure.mappers.message_mapper import MessageMapper

__all__ = ["MessageMapper"]
