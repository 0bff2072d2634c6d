"""Application services module.

Core business logic services that are transport-agnostic.
"""
from chat_messages.application.services.message_store import MessageStore

__all__ = [
    "MessageStore",
]
