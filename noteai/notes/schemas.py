from marshmallow import Schema, fields, validate, EXCLUDE

from noteai.notes import validation


class NoteIn(Schema):
    class Meta:
        unknown = EXCLUDE

    # titre / tags optionnels: générés par l'IA s'ils sont absents
    title = fields.String(allow_none=True, validate=validate.Length(max=validation.TITLE_MAX))
    content = fields.String(required=True, validate=validate.Length(min=1, max=validation.CONTENT_MAX))
    tags = fields.List(fields.String(validate=validate.Length(max=validation.TAG_MAX)), allow_none=True)
    is_public = fields.Boolean(data_key="isPublic")


class NoteUpdate(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(validate=validate.Length(min=1, max=validation.TITLE_MAX))
    content = fields.String(validate=validate.Length(min=1, max=validation.CONTENT_MAX))
    tags = fields.List(fields.String(validate=validate.Length(max=validation.TAG_MAX)))
    is_public = fields.Boolean(data_key="isPublic")


class SummarizeIn(Schema):
    class Meta:
        unknown = EXCLUDE

    model = fields.String(validate=validate.Length(min=1, max=64))


class ListQuery(Schema):
    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=None, validate=validate.Range(min=1))
    search = fields.String(load_default=None)
    tags = fields.String(load_default=None)
    sort_by = fields.String(data_key="sortBy", load_default="createdAt")
    sort_order = fields.String(data_key="sortOrder", load_default="desc",
                               validate=validate.OneOf(["asc", "desc"]))


class NoteOut(Schema):
    id = fields.UUID(required=True)
    owner_id = fields.String(data_key="owner", required=True)
    title = fields.String(required=True)
    content = fields.String(required=True)
    summary = fields.String(allow_none=True)
    tags = fields.List(fields.String())
    is_public = fields.Boolean(data_key="isPublic")
    word_count = fields.Integer(data_key="wordCount")
    summary_word_count = fields.Integer(data_key="summaryWordCount")
    # calculés à la lecture
    reading_time = fields.Integer(data_key="readingTime")
    summary_reading_time = fields.Integer(data_key="summaryReadingTime")
    last_summarized = fields.DateTime(data_key="lastSummarized", allow_none=True)
    ai_model = fields.String(data_key="aiModel")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class StatsOut(Schema):
    total_notes = fields.Integer(data_key="totalNotes")
    total_words = fields.Integer(data_key="totalWords")
    total_summary_words = fields.Integer(data_key="totalSummaryWords")
    notes_with_summary = fields.Integer(data_key="notesWithSummary")


class TagStatOut(Schema):
    tag = fields.String()
    count = fields.Integer()
