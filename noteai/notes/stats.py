from sqlalchemy import and_, case, func

from noteai.notes.models import Note, NoteTag
from noteai.notes.store import NoteStore


class StatsAggregator:
    """Agrégats par propriétaire, recalculés à chaque appel (pas de cache)."""

    def __init__(self, store: NoteStore):
        self.store = store

    def stats(self, owner) -> dict:
        has_summary = and_(Note.summary.isnot(None), Note.summary != "")
        row = (
            self.store.session.query(
                func.count(Note.pk),
                func.coalesce(func.sum(Note.word_count), 0),
                func.coalesce(func.sum(Note.summary_word_count), 0),
                func.coalesce(func.sum(case((has_summary, 1), else_=0)), 0),
            )
            .filter(Note.owner_id == str(owner))
            .one()
        )
        return {
            "total_notes": int(row[0]),
            "total_words": int(row[1]),
            "total_summary_words": int(row[2]),
            "notes_with_summary": int(row[3]),
        }

    def top_tags(self, owner, limit: int = 10) -> list:
        count = func.count(NoteTag.id).label("count")
        rows = (
            self.store.session.query(NoteTag.name, count)
            .join(Note, Note.pk == NoteTag.note_pk)
            .filter(Note.owner_id == str(owner))
            .group_by(NoteTag.name)
            .order_by(count.desc())
            .limit(limit)
            .all()
        )
        return [{"tag": name, "count": int(n)} for name, n in rows]
