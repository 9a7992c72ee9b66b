# tests/test_enrichment.py
import pytest

from noteai.common.errors import (
    EmptyContentError, NotFoundError, NoteValidationError, SummaryGenerationError,
)
from noteai.extensions import db
from noteai.notes.enrichment import FALLBACK_TITLE
from noteai.notes.models import Note


def test_create_fills_title_and_tags(pipeline, summarizer):
    note = pipeline.create("alice", {"content": "some thoughts about work"})
    assert note.title == "Generated Title"
    assert note.tags == ["ideas", "work"]


def test_create_with_failing_service_uses_fallbacks(pipeline, summarizer):
    summarizer.fail = True
    note = pipeline.create("alice", {"content": "some content"})
    assert note.title == FALLBACK_TITLE == "Untitled Note"
    assert note.tags == []
    assert note.word_count == 2


def test_blank_title_is_generated(pipeline):
    note = pipeline.create("alice", {"title": "   ", "content": "c"})
    assert note.title == "Generated Title"


def test_given_fields_are_not_enriched(pipeline, summarizer):
    note = pipeline.create("alice", {"title": "Mine", "content": "c", "tags": []})
    assert note.title == "Mine"
    # liste vide explicite respectée
    assert note.tags == []
    assert summarizer.calls == []


def test_invalid_content_never_reaches_the_service(pipeline, summarizer):
    with pytest.raises(NoteValidationError):
        pipeline.create("alice", {"content": "  "})
    assert summarizer.calls == []


def test_auto_tags_drops_long_tags_and_caps_count(pipeline, summarizer):
    summarizer.tags = ["  python ", "x" * 21, "", "flask", "a", "b", "c", "d"]
    assert pipeline.auto_tags("text") == ["python", "flask", "a", "b", "c"]


def test_auto_title_cleans_answer(pipeline, summarizer):
    summarizer.title = '"Quoted title"'
    assert pipeline.auto_title("text") == "Quoted title"

    summarizer.title = "t" * 150
    assert len(pipeline.auto_title("text")) == 100

    summarizer.title = "   "
    assert pipeline.auto_title("text") == FALLBACK_TITLE


def test_auto_title_swallows_any_exception(pipeline, summarizer):
    def boom(text):
        raise RuntimeError("network down")
    summarizer.generate_title = boom
    summarizer.extract_tags = boom
    assert pipeline.auto_title("text") == FALLBACK_TITLE
    assert pipeline.auto_tags("text") == []


def test_summarize_writes_summary(pipeline, store, summarizer):
    note = store.create("alice", {"title": "T", "content": "a b c d"})
    summarizer.summary = "short version here"

    out = pipeline.summarize("alice", note.id, model="gpt-4")
    assert out.summary == "short version here"
    assert out.summary_word_count == 3
    assert out.ai_model == "gpt-4"
    assert out.last_summarized is not None
    assert summarizer.last_model == "gpt-4"


def test_summarize_uses_default_model(pipeline, store, summarizer):
    note = store.create("alice", {"title": "T", "content": "a b c"})
    pipeline.summarize("alice", note.id)
    assert summarizer.last_model == "gpt-3.5-turbo"


def test_summarize_failure_leaves_note_unchanged(pipeline, store, summarizer):
    note = store.create("alice", {"title": "T", "content": "a b c", "summary": "old summary"})
    summarizer.fail = True

    with pytest.raises(SummaryGenerationError):
        pipeline.summarize("alice", note.id, model="gpt-4")

    db.session.expire_all()
    again = store.get("alice", note.id)
    assert again.summary == "old summary"
    assert again.last_summarized is None
    assert again.ai_model == "gpt-3.5-turbo"


def test_summarize_rejects_oversized_answer(pipeline, store, summarizer):
    note = store.create("alice", {"title": "T", "content": "a b c"})
    summarizer.summary = "x" * 2_001
    with pytest.raises(SummaryGenerationError):
        pipeline.summarize("alice", note.id)
    assert store.get("alice", note.id).summary is None


def test_summarize_empty_content(pipeline, store, summarizer):
    # écriture directe: le store refuse un contenu vide
    note = Note(owner_id="alice", title="T", content="", ai_model="gpt-3.5-turbo")
    db.session.add(note)
    db.session.commit()

    with pytest.raises(EmptyContentError):
        pipeline.summarize("alice", note.id)
    assert store.get("alice", note.id).summary is None
    assert summarizer.calls == []


def test_summarize_other_owner_not_found(pipeline, store, summarizer):
    note = store.create("alice", {"title": "T", "content": "a b c"})
    with pytest.raises(NotFoundError):
        pipeline.summarize("bob", note.id)
    assert summarizer.calls == []
