"""Shared utilities."""
from chat_messages.utils.identifier_validator import IdentifierValidator

__all__ = ["IdentifierValidator"]
