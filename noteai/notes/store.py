import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from noteai.extensions import db
from noteai.common.errors import NotFoundError, NoteValidationError
from noteai.notes.models import Note
from noteai.notes import validation

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content", "tags", "is_public")

_CLEANERS = {
    "title": validation.clean_title,
    "content": validation.clean_content,
    "tags": validation.clean_tags,
    "is_public": validation.clean_is_public,
}


def _as_uuid(note_id):
    if isinstance(note_id, uuid.UUID):
        return note_id
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        return None


class NoteStore:
    """CRUD des notes, toujours limité au propriétaire.

    Une note d'un autre propriétaire est traitée exactement comme une note
    absente (NotFoundError), pour ne pas révéler son existence.
    """

    def __init__(self, session=None, default_model="gpt-3.5-turbo"):
        self._session = session
        self.default_model = default_model

    @property
    def session(self):
        return self._session or db.session

    def scoped(self, owner):
        return self.session.query(Note).filter(Note.owner_id == str(owner))

    def create(self, owner, fields: dict) -> Note:
        note = Note(
            owner_id=str(owner),
            title=validation.clean_title(fields.get("title")),
            content=validation.clean_content(fields.get("content")),
            summary=validation.clean_summary(fields.get("summary")),
            is_public=validation.clean_is_public(fields.get("is_public")),
            ai_model=fields.get("ai_model") or self.default_model,
        )
        note.tags = validation.clean_tags(fields.get("tags"))
        note.recompute_counts()

        self.session.add(note)
        self._commit()
        logger.info("note_created", extra={"note_id": str(note.id), "owner_id": note.owner_id})
        return note

    def get(self, owner, note_id) -> Note:
        uid = _as_uuid(note_id)
        note = None
        if uid is not None:
            note = self.scoped(owner).filter(Note.id == uid).first()
        if note is None:
            raise NotFoundError()
        return note

    def update(self, owner, note_id, fields: dict) -> Note:
        note = self.get(owner, note_id)

        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            field = sorted(unknown)[0]
            raise NoteValidationError(field, f"Field '{field}' cannot be updated.")
        if not fields:
            raise NoteValidationError("fields", "No updatable fields provided.")

        # valide tout avant de toucher la note (pas d'écriture partielle)
        cleaned = {name: _CLEANERS[name](value) for name, value in fields.items()}

        for name, value in cleaned.items():
            setattr(note, name, value)
        note.recompute_counts()

        self._commit()
        logger.info("note_updated", extra={"note_id": str(note.id), "fields": sorted(cleaned)})
        return note

    def delete(self, owner, note_id) -> None:
        note = self.get(owner, note_id)
        self.session.delete(note)
        self._commit()
        logger.info("note_deleted", extra={"note_id": str(note.id), "owner_id": note.owner_id})

    def apply_summary(self, note: Note, summary: str, model: str, at=None) -> Note:
        """Écrit le résultat d'un résumé déjà obtenu. Rien n'est modifié si invalide."""
        summary = validation.clean_summary(summary)
        if not summary:
            raise NoteValidationError("summary", "Summary cannot be empty.")

        note.summary = summary
        note.last_summarized = at or datetime.now(timezone.utc)
        note.ai_model = model
        note.recompute_counts()
        self._commit()
        return note

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
