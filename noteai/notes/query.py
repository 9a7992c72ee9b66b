import math
from dataclasses import dataclass, field

from sqlalchemy import String, func, or_

from noteai.common.errors import NoteValidationError
from noteai.common.utils import split_csv
from noteai.notes.models import Note, NoteTag
from noteai.notes.store import NoteStore

# clés exposées par l'API (camelCase) + leurs équivalents snake_case
SORT_FIELDS = {
    "createdAt": Note.created_at,
    "updatedAt": Note.updated_at,
    "title": Note.title,
    "wordCount": Note.word_count,
    "summaryWordCount": Note.summary_word_count,
    "lastSummarized": Note.last_summarized,
}
SORT_FIELDS.update({
    "created_at": Note.created_at,
    "updated_at": Note.updated_at,
    "word_count": Note.word_count,
    "summary_word_count": Note.summary_word_count,
    "last_summarized": Note.last_summarized,
})
SORT_ORDERS = ("asc", "desc")


@dataclass
class Page:
    items: list = field(default_factory=list)
    total_count: int = 0
    page_count: int = 0
    current_page: int = 1


class QueryEngine:
    def __init__(self, store: NoteStore, default_limit: int = 10, max_limit: int = 100):
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit

    def list(self, owner, search=None, tags=None, sort_by="createdAt", sort_order="desc",
             page=1, limit=None) -> Page:
        page = 1 if page is None else int(page)
        limit = self.default_limit if limit is None else int(limit)
        if page < 1:
            raise NoteValidationError("page", "page must be >= 1.")
        if limit < 1:
            raise NoteValidationError("limit", "limit must be >= 1.")
        limit = min(limit, self.max_limit)

        q = self._filtered(owner, search, tags)
        total = q.count()
        items = (
            q.order_by(*self._ordering(sort_by, sort_order))
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return Page(
            items=items,
            total_count=total,
            page_count=math.ceil(total / limit),
            current_page=page,
        )

    def _filtered(self, owner, search, tags):
        q = self.store.scoped(owner)

        if search:
            term = search.lower()
            q = q.filter(or_(
                func.lower(Note.title, type_=String).contains(term, autoescape=True),
                func.lower(Note.content, type_=String).contains(term, autoescape=True),
                func.lower(Note.summary, type_=String).contains(term, autoescape=True),
            ))

        wanted = split_csv(tags)
        if wanted:
            # au moins un tag en commun (pas tous)
            q = q.filter(Note.tag_rows.any(NoteTag.name.in_(wanted)))
        return q

    @staticmethod
    def _ordering(sort_by, sort_order):
        column = SORT_FIELDS.get(sort_by or "createdAt")
        if column is None:
            raise NoteValidationError("sortBy", f"Cannot sort by '{sort_by}'.")
        order = (sort_order or "desc").lower()
        if order not in SORT_ORDERS:
            raise NoteValidationError("sortOrder", "sortOrder must be 'asc' or 'desc'.")

        primary = column.desc() if order == "desc" else column.asc()
        # égalités départagées par l'ordre d'insertion
        return primary, Note.pk.asc()
