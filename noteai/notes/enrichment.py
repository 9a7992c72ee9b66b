"""Enrichissement IA des notes.

Deux politiques d'échec:
- à la création (titre, tags) l'enrichissement est un confort: toute erreur
  du service est absorbée et remplacée par une valeur de repli;
- le résumé à la demande est une action explicite: l'erreur remonte et la
  note reste inchangée.
"""
import logging
from datetime import datetime, timezone

from noteai.common.errors import (
    EmptyContentError,
    NoteValidationError,
    SummaryGenerationError,
)
from noteai.notes import validation
from noteai.notes.models import Note
from noteai.notes.store import NoteStore

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Untitled Note"
MAX_AUTO_TAGS = 5


class EnrichmentPipeline:
    def __init__(self, summarizer, store: NoteStore, default_model: str = "gpt-3.5-turbo"):
        self.summarizer = summarizer
        self.store = store
        self.default_model = default_model

    # --- best-effort (création)

    def auto_title(self, content: str) -> str:
        try:
            title = self.summarizer.generate_title(content)
        except Exception:
            logger.warning("auto_title_failed", exc_info=True)
            return FALLBACK_TITLE

        title = (title or "").strip().strip("\"'").strip()
        if not title:
            return FALLBACK_TITLE
        return title[:validation.TITLE_MAX].rstrip()

    def auto_tags(self, content: str) -> list:
        try:
            raw = self.summarizer.extract_tags(content)
        except Exception:
            logger.warning("auto_tags_failed", exc_info=True)
            return []

        tags = []
        for tag in raw or []:
            tag = str(tag).strip()
            # trop long -> ignoré, jamais tronqué
            if tag and len(tag) <= validation.TAG_MAX:
                tags.append(tag)
        return tags[:MAX_AUTO_TAGS]

    def enrich(self, fields: dict) -> dict:
        """Complète titre (absent ou vide) et tags (absents) à partir du contenu."""
        content = validation.clean_content(fields.get("content"))
        out = dict(fields, content=content)

        title = fields.get("title")
        if title is None or (isinstance(title, str) and not title.strip()):
            out["title"] = self.auto_title(content)
        # une liste vide explicite est respectée
        if fields.get("tags") is None:
            out["tags"] = self.auto_tags(content)
        return out

    def create(self, owner, fields: dict) -> Note:
        return self.store.create(owner, self.enrich(fields))

    # --- à la demande

    def summarize(self, owner, note_id, model=None) -> Note:
        model = model or self.default_model
        note = self.store.get(owner, note_id)

        if not (note.content or "").strip():
            raise EmptyContentError()

        try:
            summary = self.summarizer.summarize(note.content, model)
        except Exception as e:
            logger.error("summary_generation_failed", extra={"note_id": str(note.id), "model": model}, exc_info=True)
            raise SummaryGenerationError() from e

        try:
            note = self.store.apply_summary(note, summary, model, at=datetime.now(timezone.utc))
        except NoteValidationError as e:
            # réponse vide ou trop longue: rien n'a été écrit
            logger.error("summary_rejected", extra={"note_id": str(note.id), "reason": e.message})
            raise SummaryGenerationError() from e

        logger.info("note_summarized", extra={"note_id": str(note.id), "model": model})
        return note
