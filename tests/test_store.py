# tests/test_store.py
import uuid
import pytest

from noteai.common.errors import NotFoundError, NoteValidationError


def test_create_recomputes_counts(store):
    note = store.create("alice", {"title": "T", "content": "hello   world", "tags": ["a", "a"]})
    assert note.word_count == 2
    assert note.summary_word_count == 0
    assert note.tags == ["a", "a"]
    assert note.is_public is False
    assert note.ai_model == "gpt-3.5-turbo"
    assert note.reading_time == 1


def test_create_rejects_blank_content(store):
    with pytest.raises(NoteValidationError) as exc:
        store.create("alice", {"title": "T", "content": "   "})
    assert exc.value.field == "content"


def test_summary_word_count_zero_iff_empty(store):
    empty = store.create("alice", {"title": "T", "content": "c", "summary": ""})
    absent = store.create("alice", {"title": "T", "content": "c"})
    filled = store.create("alice", {"title": "T", "content": "c", "summary": "one two three"})
    assert empty.summary_word_count == 0
    assert absent.summary_word_count == 0
    assert filled.summary_word_count == 3
    assert filled.summary_reading_time == 1


def test_get_is_scoped_by_owner(store):
    note = store.create("alice", {"title": "T", "content": "c"})
    assert store.get("alice", note.id).id == note.id
    assert store.get("alice", str(note.id)).id == note.id

    # autre propriétaire -> NotFound, jamais "forbidden"
    with pytest.raises(NotFoundError):
        store.get("bob", note.id)


def test_get_unknown_or_malformed_id(store):
    with pytest.raises(NotFoundError):
        store.get("alice", uuid.uuid4())
    with pytest.raises(NotFoundError):
        store.get("alice", "not-a-uuid")


def test_update_applies_only_given_fields(store):
    note = store.create("alice", {"title": "T", "content": "one", "tags": ["x"], "is_public": True})
    updated = store.update("alice", note.id, {"content": "one two three"})
    assert updated.title == "T"
    assert updated.tags == ["x"]
    assert updated.is_public is True
    assert updated.word_count == 3


def test_update_replaces_tags_in_order(store):
    note = store.create("alice", {"title": "T", "content": "c", "tags": ["x"]})
    updated = store.update("alice", note.id, {"tags": ["b", "a", "b"]})
    assert updated.tags == ["b", "a", "b"]


def test_update_invalid_leaves_note_untouched(store):
    note = store.create("alice", {"title": "T", "content": "c"})
    with pytest.raises(NoteValidationError):
        store.update("alice", note.id, {"title": "new", "content": ""})
    assert store.get("alice", note.id).title == "T"


def test_update_cannot_reassign_owner(store):
    note = store.create("alice", {"title": "T", "content": "c"})
    with pytest.raises(NoteValidationError) as exc:
        store.update("alice", note.id, {"owner_id": "bob"})
    assert exc.value.field == "owner_id"
    assert store.get("alice", note.id).owner_id == "alice"


def test_update_other_owner_not_found(store):
    note = store.create("alice", {"title": "T", "content": "c"})
    with pytest.raises(NotFoundError):
        store.update("bob", note.id, {"title": "stolen"})
    assert store.get("alice", note.id).title == "T"


def test_delete_then_get_not_found(store):
    note = store.create("alice", {"title": "T", "content": "c", "tags": ["a"]})
    with pytest.raises(NotFoundError):
        store.delete("bob", note.id)

    store.delete("alice", note.id)
    with pytest.raises(NotFoundError):
        store.get("alice", note.id)
    with pytest.raises(NotFoundError):
        store.delete("alice", note.id)
