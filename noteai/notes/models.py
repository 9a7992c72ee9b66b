import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, Uuid
from sqlalchemy.ext.orderinglist import ordering_list

from noteai.extensions import db
from noteai.notes.derived import count_words, reading_time


def _utcnow():
    return datetime.now(timezone.utc)


class Note(db.Model):
    __tablename__ = "notes"

    # pk entier = ordre d'insertion (départage les tris), id = identifiant public
    pk = db.Column(db.Integer, primary_key=True, autoincrement=True)
    id = db.Column(Uuid(as_uuid=True), unique=True, nullable=False, default=uuid.uuid4)
    # référence opaque fournie par le service d'identité, jamais réassignée
    owner_id = db.Column(db.String(64), nullable=False, index=True)

    title = db.Column(db.String(100), nullable=False)
    content = db.Column(db.Text, nullable=False)
    summary = db.Column(db.Text, nullable=True)
    is_public = db.Column(db.Boolean, nullable=False, default=False)

    word_count = db.Column(db.Integer, nullable=False, default=0)
    summary_word_count = db.Column(db.Integer, nullable=False, default=0)
    last_summarized = db.Column(db.DateTime(timezone=True), nullable=True)
    ai_model = db.Column(db.String(64), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    tag_rows = db.relationship(
        "NoteTag",
        order_by="NoteTag.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_notes_owner_created_at", "owner_id", "created_at"),
    )

    @property
    def tags(self) -> list:
        return [t.name for t in self.tag_rows]

    @tags.setter
    def tags(self, names):
        self.tag_rows = [NoteTag(name=n, position=i) for i, n in enumerate(names)]

    # --- champs "virtuels" (jamais persistés)
    @property
    def reading_time(self) -> int:
        return reading_time(self.word_count)

    @property
    def summary_reading_time(self) -> int:
        return reading_time(self.summary_word_count)

    def recompute_counts(self) -> None:
        self.word_count = count_words(self.content)
        self.summary_word_count = count_words(self.summary)

    def __repr__(self):
        return f"<Note {self.id} owner={self.owner_id!r} title={self.title!r}>"


class NoteTag(db.Model):
    __tablename__ = "note_tags"

    id = db.Column(db.Integer, primary_key=True)
    note_pk = db.Column(db.Integer, ForeignKey("notes.pk", ondelete="CASCADE"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(20), nullable=False, index=True)
