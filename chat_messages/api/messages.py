"""Messages API endpoints on top of the message store."""
import logging
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request

from chat_messages.application.services.message_store import MessageStore
from chat_messages.domain.entities.message import CreateMessageInput
from chat_messages.domain.errors import ValidationError
from chat_messages.infrastructure.mappers.message_mapper import MessageMapper
from chat_messages.middleware.monitoring import track_request


messages_blueprint = Blueprint("messages", __name__)
_logger = logging.getLogger(__name__)

# Set by the authentication layer in front of this service
USER_ID_HEADER = "X-User-Id"


def _store() -> MessageStore:
    """Get the message store from the service container."""
    container = current_app.config.get("service_container")
    if not container:
        _logger.warning("Service container not in app.config, creating new instance")
        from chat_messages.infrastructure.service_container import ServiceContainer
        container = ServiceContainer()
        current_app.config["service_container"] = container
    return container.get_message_store()


def _json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _current_user_id() -> Optional[str]:
    return request.headers.get(USER_ID_HEADER)


def _serialize(message):
    return MessageMapper.to_output(message)


@messages_blueprint.route("/api/messages", methods=["POST"])
@track_request("create_message")
def create_message():
    """
    Create a message sent by the authenticated user.

    Expected payload:
    {
        "conversationId": "5fe0cce861c8ea54018385af",
        "text": "Hello world",
        "tags": ["optional", "tags"]
    }
    """
    body = _json_body()
    message = _store().create(
        CreateMessageInput(
            conversation_id=body.get("conversationId"),
            text=body.get("text"),
            tags=body.get("tags"),
        ),
        _current_user_id(),
    )
    return jsonify(_serialize(message)), 201


@messages_blueprint.route("/api/messages", methods=["GET"])
@track_request("get_messages_by_tags")
def get_messages_by_tags():
    """
    Messages carrying any of the ``tag`` query parameters, in creation order.

    List results are not enriched: items have no ``conversation`` or
    ``sender`` keys. Fetch a single message for resolved references.
    """
    tags = request.args.getlist("tag")
    messages = _store().get_messages_by_tags(tags)
    return jsonify({"messages": [_serialize(m) for m in messages]}), 200


@messages_blueprint.route("/api/messages/<message_id>", methods=["GET"])
@track_request("get_message")
def get_message(message_id: str):
    return jsonify(_serialize(_store().get_message(message_id))), 200


@messages_blueprint.route("/api/messages/<message_id>", methods=["DELETE"])
@track_request("delete_message")
def delete_message(message_id: str):
    return jsonify(_serialize(_store().delete(message_id))), 200


@messages_blueprint.route("/api/messages/<message_id>/tags", methods=["POST"])
@track_request("add_tags")
def add_tags(message_id: str):
    tags = _json_body().get("tags")
    return jsonify(_serialize(_store().add_tags(message_id, tags))), 200


@messages_blueprint.route("/api/messages/<message_id>/tags", methods=["PUT"])
@track_request("update_tags")
def update_tags(message_id: str):
    tags = _json_body().get("tags")
    return jsonify(_serialize(_store().update_tags(message_id, tags))), 200


@messages_blueprint.route("/api/messages/<message_id>/likes", methods=["POST"])
@track_request("like")
def like(message_id: str):
    return jsonify(_serialize(_store().like(message_id, _current_user_id()))), 200


@messages_blueprint.route("/api/messages/<message_id>/likes", methods=["DELETE"])
@track_request("unlike")
def unlike(message_id: str):
    return jsonify(_serialize(_store().unlike(message_id, _current_user_id()))), 200


@messages_blueprint.route("/api/messages/<message_id>/reactions", methods=["POST"])
@track_request("add_reaction")
def add_reaction(message_id: str):
    reaction = _json_body().get("reaction")
    message = _store().add_reaction(message_id, _current_user_id(), reaction)
    return jsonify(_serialize(message)), 200


@messages_blueprint.route("/api/messages/<message_id>/reactions", methods=["DELETE"])
@track_request("remove_reaction")
def remove_reaction(message_id: str):
    reaction = _json_body().get("reaction")
    message = _store().remove_reaction(message_id, _current_user_id(), reaction)
    return jsonify(_serialize(message)), 200


@messages_blueprint.route("/api/messages/<message_id>/resolved", methods=["POST"])
@track_request("resolve")
def resolve(message_id: str):
    return jsonify(_serialize(_store().resolve(message_id))), 200


@messages_blueprint.route("/api/messages/<message_id>/resolved", methods=["DELETE"])
@track_request("unresolve")
def unresolve(message_id: str):
    return jsonify(_serialize(_store().unresolve(message_id))), 200


@messages_blueprint.route("/api/conversations/<conversation_id>/messages", methods=["GET"])
@track_request("get_conversation_messages")
def get_conversation_messages(conversation_id: str):
    """
    Active messages of a conversation.

    Query parameters: ``limit``, ``offset``, ``include_deleted=true``.
    """
    try:
        limit = int(request.args["limit"]) if "limit" in request.args else None
        offset = int(request.args.get("offset", "0"))
    except ValueError:
        raise ValidationError("limit and offset must be integers")

    include_deleted = request.args.get("include_deleted", "false").lower() == "true"
    messages = _store().get_conversation_messages(
        conversation_id, limit=limit, offset=offset, include_deleted=include_deleted
    )
    return jsonify({"messages": [_serialize(m) for m in messages]}), 200
