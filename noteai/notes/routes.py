from flask import Blueprint, request, jsonify, current_app

from noteai.common.authz import owner_required, current_owner
from noteai.common.errors import NoteValidationError
from noteai.common.utils import success
from noteai.notes.enrichment import EnrichmentPipeline
from noteai.notes.query import QueryEngine
from noteai.notes.schemas import (
    NoteIn, NoteUpdate, NoteOut, SummarizeIn, ListQuery, StatsOut, TagStatOut,
)
from noteai.notes.stats import StatsAggregator
from noteai.notes.store import NoteStore

bp = Blueprint("notes", __name__)

note_in = NoteIn()
note_update = NoteUpdate()
note_out = NoteOut()
note_out_many = NoteOut(many=True)
summarize_in = SummarizeIn()
list_query = ListQuery()
stats_out = StatsOut()
tag_stats_out = TagStatOut(many=True)


def _store() -> NoteStore:
    return NoteStore(default_model=current_app.config["AI_DEFAULT_MODEL"])


def _pipeline() -> EnrichmentPipeline:
    return EnrichmentPipeline(
        current_app.extensions["summarizer"],
        _store(),
        default_model=current_app.config["AI_DEFAULT_MODEL"],
    )


def _query_engine() -> QueryEngine:
    return QueryEngine(
        _store(),
        default_limit=current_app.config["NOTES_DEFAULT_PAGE_SIZE"],
        max_limit=current_app.config["NOTES_MAX_PAGE_SIZE"],
    )


@bp.get("/")
@owner_required
def list_notes():
    args = list_query.load(request.args.to_dict())
    page = _query_engine().list(current_owner(), **args)
    return jsonify({
        "notes": note_out_many.dump(page.items),
        "totalNotes": page.total_count,
        "totalPages": page.page_count,
        "currentPage": page.current_page,
    }), 200


@bp.get("/stats/overview")
@owner_required
def get_stats():
    aggregator = StatsAggregator(_store())
    owner = current_owner()
    return jsonify({
        "stats": stats_out.dump(aggregator.stats(owner)),
        "tagStats": tag_stats_out.dump(aggregator.top_tags(owner)),
    }), 200


@bp.get("/<uuid:note_id>")
@owner_required
def get_note(note_id):
    note = _store().get(current_owner(), note_id)
    return jsonify({"note": note_out.dump(note)}), 200


@bp.post("/")
@owner_required
def create_note():
    payload = request.get_json(silent=True) or {}
    data = note_in.load(payload)
    note = _pipeline().create(current_owner(), data)
    return success("Note created successfully", 201, note=note_out.dump(note))


@bp.route("/<uuid:note_id>", methods=["PUT", "PATCH"])
@owner_required
def update_note(note_id):
    payload = request.get_json(silent=True) or {}
    # Validations partielles (autorise un sous-ensemble des champs)
    data = note_update.load(payload)
    if not data:
        raise NoteValidationError("fields", "No updatable fields provided.")

    note = _store().update(current_owner(), note_id, data)
    return success("Note updated successfully", note=note_out.dump(note))


@bp.delete("/<uuid:note_id>")
@owner_required
def delete_note(note_id):
    _store().delete(current_owner(), note_id)
    return success("Note deleted successfully")


@bp.post("/<uuid:note_id>/summarize")
@owner_required
def summarize_note(note_id):
    payload = request.get_json(silent=True) or {}
    data = summarize_in.load(payload)
    note = _pipeline().summarize(current_owner(), note_id, model=data.get("model"))
    return success("Summary generated successfully", note=note_out.dump(note))
