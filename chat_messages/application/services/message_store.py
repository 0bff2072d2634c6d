"""Message store service (Service Layer Pattern).

The only path by which messages are created, read, soft-deleted,
tagged, liked, reacted to and queried.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from chat_messages.domain.entities.message import CreateMessageInput, Message, Reaction
from chat_messages.domain.errors import MessageDeletedError, NotFoundError, ValidationError
from chat_messages.domain.interfaces.document_collection import IDocumentCollection
from chat_messages.domain.interfaces.reference_resolver import IReferenceResolver
from chat_messages.infrastructure.mappers.message_mapper import MessageMapper
from chat_messages.utils.identifier_validator import IdentifierValidator


ACTIVE = {"deleted": False}


class MessageStore:
    """
    Owns the message lifecycle on top of a document collection.

    Every mutation is a single atomic update in the collection; the store
    never reads a document, changes it and writes it back. Mutations other
    than ``delete`` only apply to active (not soft-deleted) messages.

    Single-message results are enriched with resolved ``conversation`` and
    ``sender`` references. A resolver that fails or returns nothing yields
    a bare ``{"id": ...}`` reference instead of failing the call.
    """

    def __init__(
        self,
        collection: IDocumentCollection,
        conversation_resolver: IReferenceResolver,
        sender_resolver: IReferenceResolver
    ):
        """
        Initialize the message store.

        Args:
            collection: Document collection holding messages
            conversation_resolver: Resolves conversation references
            sender_resolver: Resolves sender (user) references
        """
        self.collection = collection
        self.conversation_resolver = conversation_resolver
        self.sender_resolver = sender_resolver
        self._logger = logging.getLogger(__name__)

    # ----------------- validation -----------------
    @staticmethod
    def _validate_id(value: Any, name: str) -> str:
        try:
            return IdentifierValidator.normalize(value, name)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    @staticmethod
    def _validate_tags(tags: Any) -> List[str]:
        try:
            return IdentifierValidator.normalize_tags(tags)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    @staticmethod
    def _validate_reaction(reaction: Any) -> str:
        if not isinstance(reaction, str) or not reaction.strip():
            raise ValidationError(f"Invalid reaction: {reaction!r}")
        return reaction.strip()

    # ----------------- enrichment -----------------
    def _resolve_reference(
        self,
        resolver: IReferenceResolver,
        reference_id: str,
        kind: str
    ) -> Dict[str, Any]:
        try:
            reference = resolver.resolve(reference_id)
        except Exception as e:
            self._logger.warning(f"Failed to resolve {kind} {reference_id}: {e}")
            reference = None

        if not reference:
            self._logger.debug(f"Falling back to bare {kind} reference for {reference_id}")
            return {"id": reference_id}

        return {**reference, "id": reference_id}

    def _enrich(self, message: Message) -> Message:
        message.conversation = self._resolve_reference(
            self.conversation_resolver, message.conversation_id, "conversation"
        )
        message.sender = self._resolve_reference(self.sender_resolver, message.sender_id, "sender")
        return message

    # ----------------- mutations -----------------
    def _update(
        self,
        message_id: Any,
        patch: Dict[str, Dict[str, Any]],
        active_only: bool = True
    ) -> Message:
        """Apply one atomic patch and return the enriched result."""
        message_id = self._validate_id(message_id, "message_id")

        patch = dict(patch)
        patch["$set"] = dict(patch.get("$set", {}))
        patch["$set"]["updatedAt"] = MessageMapper.format_timestamp(datetime.now(timezone.utc))

        document = self.collection.update_by_id(
            message_id, patch, where=ACTIVE if active_only else None
        )
        if document is None:
            # Distinguish a missing message from a deleted one; nothing was written
            if active_only and self.collection.find_by_id(message_id) is not None:
                raise MessageDeletedError(message_id)
            raise NotFoundError(message_id)

        return self._enrich(MessageMapper.from_document(document))

    def create(self, message_input: CreateMessageInput, sender_id: str) -> Message:
        """
        Create and persist a message.

        Args:
            message_input: Conversation id, text and optional tags
            sender_id: Authenticated sender id (never taken from the payload)

        Returns:
            The created message, enriched with conversation and sender

        Raises:
            ValidationError: If text is blank or an id/tag is malformed
            PersistenceError: If the write fails
        """
        conversation_id = self._validate_id(message_input.conversation_id, "conversation_id")
        sender_id = self._validate_id(sender_id, "sender_id")

        text = message_input.text
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("text must be a non-empty string")

        tags = self._validate_tags(message_input.tags if message_input.tags is not None else [])

        document = MessageMapper.new_document(conversation_id, sender_id, text, tags)
        message_id = self.collection.insert(document)

        self._logger.info(
            f"Created message {message_id} in conversation {conversation_id} by {sender_id}"
        )
        return self._enrich(MessageMapper.from_document({**document, "id": message_id}))

    def get_message(self, message_id: str) -> Message:
        """
        Get a message by id, including soft-deleted ones.

        Raises:
            ValidationError: If the id is malformed
            NotFoundError: If no message has this id
        """
        message_id = self._validate_id(message_id, "message_id")
        document = self.collection.find_by_id(message_id)
        if document is None:
            raise NotFoundError(message_id)

        self._logger.debug(f"Retrieved message {message_id}")
        return self._enrich(MessageMapper.from_document(document))

    def delete(self, message_id: str) -> Message:
        """
        Soft-delete a message. Deleting twice is not an error.

        Raises:
            NotFoundError: If no message has this id
        """
        message = self._update(message_id, {"$set": {"deleted": True}}, active_only=False)
        self._logger.info(f"Marked message {message.id} as deleted")
        return message

    def add_tags(self, message_id: str, tags: List[str]) -> Message:
        """
        Append tags after the existing ones, keeping order and duplicates.

        Raises:
            ValidationError: If a tag is blank
            MessageDeletedError: If the message is soft-deleted
            NotFoundError: If no message has this id
        """
        tags = self._validate_tags(tags)
        return self._update(message_id, {"$push": {"tags": tags}})

    def update_tags(self, message_id: str, tags: List[str]) -> Message:
        """Replace the whole tag list. Same failures as ``add_tags``."""
        tags = self._validate_tags(tags)
        return self._update(message_id, {"$set": {"tags": tags}})

    def like(self, message_id: str, user_id: str) -> Message:
        user_id = self._validate_id(user_id, "user_id")
        return self._update(message_id, {"$addToSet": {"likes": [user_id]}})

    def unlike(self, message_id: str, user_id: str) -> Message:
        user_id = self._validate_id(user_id, "user_id")
        return self._update(message_id, {"$pull": {"likes": [user_id]}})

    def add_reaction(self, message_id: str, user_id: str, reaction: str) -> Message:
        """Add a reaction; the same user/reaction pair is stored once."""
        record = MessageMapper.reaction_to_document(
            Reaction(user_id=self._validate_id(user_id, "user_id"), reaction=self._validate_reaction(reaction))
        )
        return self._update(message_id, {"$addToSet": {"reactions": [record]}})

    def remove_reaction(self, message_id: str, user_id: str, reaction: str) -> Message:
        record = MessageMapper.reaction_to_document(
            Reaction(user_id=self._validate_id(user_id, "user_id"), reaction=self._validate_reaction(reaction))
        )
        return self._update(message_id, {"$pull": {"reactions": [record]}})

    def resolve(self, message_id: str) -> Message:
        return self._update(message_id, {"$set": {"resolved": True}})

    def unresolve(self, message_id: str) -> Message:
        return self._update(message_id, {"$set": {"resolved": False}})

    # ----------------- queries -----------------
    def get_messages_by_tags(self, tags: List[str]) -> List[Message]:
        """
        Find messages carrying at least one of the given tags.

        Each matching message appears once, in creation order.
        Results are not enriched.

        Raises:
            ValidationError: If tags is empty or contains a blank tag
        """
        tags = self._validate_tags(tags)
        if not tags:
            raise ValidationError("At least one tag is required")

        documents = self.collection.find_where({"tags": {"$in": tags}})
        self._logger.debug(f"Found {len(documents)} messages for tags {tags}")
        return [MessageMapper.from_document(document) for document in documents]

    def get_conversation_messages(
        self,
        conversation_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
        include_deleted: bool = False
    ) -> List[Message]:
        """
        List a conversation's messages in creation order.

        Soft-deleted messages are hidden unless ``include_deleted`` is set.
        """
        conversation_id = self._validate_id(conversation_id, "conversation_id")
        if limit is not None and (not isinstance(limit, int) or limit < 0):
            raise ValidationError(f"Invalid limit: {limit!r}")
        if not isinstance(offset, int) or offset < 0:
            raise ValidationError(f"Invalid offset: {offset!r}")

        filters: Dict[str, Any] = {"conversationId": conversation_id}
        if not include_deleted:
            filters.update(ACTIVE)

        documents = self.collection.find_where(filters, limit=limit, offset=offset)
        return [MessageMapper.from_document(document) for document in documents]

    def purge(self) -> int:
        """Hard-remove every message. Maintenance and test use only."""
        count = self.collection.delete_all()
        self._logger.warning(f"Purged {count} messages")
        return count
