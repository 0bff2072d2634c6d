from __future__ import annotations

import threading

import pytest

from chat_messages.domain.errors import PersistenceError
from chat_messages.infrastructure.repositories.document_operations import apply_patch, matches
from chat_messages.infrastructure.repositories.redis_document_collection import RedisDocumentCollection


def _doc(conversation_id="c1", tags=None, deleted=False):
    return {"conversationId": conversation_id, "senderId": "u1", "tags": tags or [], "likes": [], "deleted": deleted}


def test_insert_assigns_unique_ids(collection):
    first = collection.insert(_doc())
    second = collection.insert(_doc())
    assert first != second
    assert collection.find_by_id(first)["id"] == first


def test_insert_does_not_keep_reference_to_input(collection):
    document = _doc(tags=["a"])
    document_id = collection.insert(document)
    document["tags"].append("b")
    assert collection.find_by_id(document_id)["tags"] == ["a"]


def test_find_by_id_missing(collection):
    assert collection.find_by_id("does-not-exist") is None


def test_find_where_in_matches_any_value(collection):
    a = collection.insert(_doc(tags=["x"]))
    b = collection.insert(_doc(tags=["y", "x"]))
    collection.insert(_doc(tags=["z"]))

    found = collection.find_where({"tags": {"$in": ["x", "y"]}})
    assert [d["id"] for d in found] == [a, b]


def test_find_where_combines_filters(collection):
    a = collection.insert(_doc(conversation_id="c1"))
    collection.insert(_doc(conversation_id="c1", deleted=True))
    collection.insert(_doc(conversation_id="c2"))

    found = collection.find_where({"conversationId": "c1", "deleted": False})
    assert [d["id"] for d in found] == [a]


def test_find_where_without_index_scans_in_order(collection):
    ids = [collection.insert(_doc()) for _ in range(3)]
    assert [d["id"] for d in collection.find_where({"deleted": False})] == ids


def test_find_where_limit_offset(collection):
    ids = [collection.insert(_doc()) for _ in range(4)]
    found = collection.find_where({"conversationId": "c1"}, limit=2, offset=1)
    assert [d["id"] for d in found] == ids[1:3]


def test_find_where_empty_in(collection):
    collection.insert(_doc(tags=["x"]))
    assert collection.find_where({"tags": {"$in": []}}) == []


def test_update_by_id_applies_operators(collection):
    document_id = collection.insert(_doc(tags=["a"]))

    updated = collection.update_by_id(document_id, {
        "$push": {"tags": ["b", "a"]},
        "$addToSet": {"likes": ["u2", "u2"]},
        "$set": {"resolved": True},
    })

    assert updated["tags"] == ["a", "b", "a"]
    assert updated["likes"] == ["u2"]
    assert updated["resolved"] is True
    assert collection.find_by_id(document_id) == updated


def test_update_by_id_keeps_tag_index_in_sync(collection):
    document_id = collection.insert(_doc(tags=["old"]))
    collection.update_by_id(document_id, {"$set": {"tags": ["new"]}})

    assert collection.find_where({"tags": "old"}) == []
    assert [d["id"] for d in collection.find_where({"tags": "new"})] == [document_id]


def test_update_by_id_missing_document(collection):
    assert collection.update_by_id("does-not-exist", {"$set": {"deleted": True}}) is None


def test_update_by_id_where_not_matching_writes_nothing(collection):
    document_id = collection.insert(_doc(tags=["a"], deleted=True))
    result = collection.update_by_id(document_id, {"$push": {"tags": ["b"]}}, where={"deleted": False})
    assert result is None
    assert collection.find_by_id(document_id)["tags"] == ["a"]


def test_update_by_id_rejects_unknown_operator(collection):
    document_id = collection.insert(_doc())
    with pytest.raises(ValueError):
        collection.update_by_id(document_id, {"$inc": {"count": 1}})


def test_concurrent_pushes_are_not_lost(collection):
    document_id = collection.insert(_doc())

    def push(tag):
        collection.update_by_id(document_id, {"$push": {"tags": [tag]}})

    threads = [threading.Thread(target=push, args=(f"t{i}",)) for i in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(collection.find_by_id(document_id)["tags"]) == sorted(f"t{i}" for i in range(10))


def test_delete_all(collection):
    collection.insert(_doc(tags=["x"]))
    collection.insert(_doc(tags=["x"]))
    assert collection.delete_all() == 2
    assert collection.find_where({"tags": "x"}) == []
    assert collection.ping() is True


def test_redis_collection_without_client():
    collection = RedisDocumentCollection(redis_client=None)
    assert collection.ping() is False
    with pytest.raises(PersistenceError):
        collection.find_by_id("abc")


def test_redis_collection_namespaces_keys(redis_client):
    collection = RedisDocumentCollection(redis_client=redis_client, key_prefix="msg")
    document_id = collection.insert(_doc(tags=["x"]))

    assert redis_client.exists(f"msg:doc:{document_id}")
    assert redis_client.sismember("msg:idx:tags:x", document_id)
    assert redis_client.sismember("msg:idx:conversationId:c1", document_id)


# ----------------- operations -----------------
def test_matches_literal_against_list_means_membership():
    assert matches({"tags": ["a", "b"]}, {"tags": "a"})
    assert not matches({"tags": ["a", "b"]}, {"tags": "c"})
    assert matches({"deleted": False}, {"deleted": False})
    assert matches({"anything": 1}, None)


def test_matches_rejects_unknown_filter_operator():
    with pytest.raises(ValueError):
        matches({"tags": ["a"]}, {"tags": {"$all": ["a"]}})


def test_apply_patch_does_not_mutate_input():
    document = {"id": "1", "tags": ["a"]}
    updated = apply_patch(document, {"$pull": {"tags": ["a"]}})
    assert updated["tags"] == []
    assert document["tags"] == ["a"]


def test_apply_patch_id_is_immutable():
    with pytest.raises(ValueError):
        apply_patch({"id": "1"}, {"$set": {"id": "2"}})


def test_apply_patch_requires_list_operands():
    with pytest.raises(ValueError):
        apply_patch({"id": "1", "tags": []}, {"$push": {"tags": "a"}})
