# noteai/docs/spec.py
from apispec import APISpec
from apispec.ext.marshmallow import MarshmallowPlugin
from marshmallow import Schema, fields

from noteai.notes.schemas import NoteIn, NoteUpdate, NoteOut, SummarizeIn, StatsOut, TagStatOut


class MessageSchema(Schema):
    message = fields.String()


class NoteEnvelope(MessageSchema):
    note = fields.Nested(NoteOut)


class NotePage(Schema):
    notes = fields.List(fields.Nested(NoteOut))
    totalNotes = fields.Integer()
    totalPages = fields.Integer()
    currentPage = fields.Integer()


class StatsEnvelope(Schema):
    stats = fields.Nested(StatsOut)
    tagStats = fields.List(fields.Nested(TagStatOut))


class ErrorSchema(Schema):
    code = fields.String()
    message = fields.String()
    details = fields.Dict()


def _ref(name: str):
    return {"$ref": f"#/components/schemas/{name}"}


def _json(name: str, description: str = "OK"):
    return {"description": description, "content": {"application/json": {"schema": _ref(name)}}}


_ID_PARAM = {"in": "path", "name": "id", "required": True, "schema": {"type": "string", "format": "uuid"}}
_AUTH = [{"bearerAuth": []}]


def build_spec():
    spec = APISpec(
        title="NoteAI API",
        version="1.0.0",
        openapi_version="3.0.3",
        info={"description": "Notes + AI enrichment (titles, tags, summaries): OpenAPI spec"},
        plugins=[MarshmallowPlugin()],
    )

    # JWT Bearer émis par le service d'identité
    spec.components.security_scheme(
        "bearerAuth",
        {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
    )

    spec.components.schema("NoteIn", schema=NoteIn)
    spec.components.schema("NoteUpdate", schema=NoteUpdate)
    spec.components.schema("NoteOut", schema=NoteOut)
    spec.components.schema("Summarize", schema=SummarizeIn)
    spec.components.schema("NoteEnvelope", schema=NoteEnvelope)
    spec.components.schema("NotePage", schema=NotePage)
    spec.components.schema("StatsEnvelope", schema=StatsEnvelope)
    spec.components.schema("Message", schema=MessageSchema)
    spec.components.schema("Error", schema=ErrorSchema)

    not_found = _json("Error", "Not found (absent or not owned)")

    spec.path(
        path="/api/v1/notes/",
        operations={
            "get": {
                "summary": "List my notes (search, tags, sort, pagination)",
                "security": _AUTH,
                "parameters": [
                    {"in": "query", "name": "page", "schema": {"type": "integer", "minimum": 1}},
                    {"in": "query", "name": "limit", "schema": {"type": "integer", "minimum": 1}},
                    {"in": "query", "name": "search", "schema": {"type": "string"}},
                    {"in": "query", "name": "tags", "schema": {"type": "string"},
                     "description": "Comma-separated; matches notes having at least one of them"},
                    {"in": "query", "name": "sortBy", "schema": {"type": "string", "default": "createdAt"}},
                    {"in": "query", "name": "sortOrder", "schema": {"type": "string", "enum": ["asc", "desc"]}},
                ],
                "responses": {"200": _json("NotePage")},
            },
            "post": {
                "summary": "Create note (title/tags generated when omitted)",
                "security": _AUTH,
                "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("NoteIn")}}},
                "responses": {"201": _json("NoteEnvelope", "Created"), "400": _json("Error", "Invalid")},
            },
        },
    )

    spec.path(
        path="/api/v1/notes/stats/overview",
        operations={
            "get": {
                "summary": "Aggregate counts and top tags",
                "security": _AUTH,
                "responses": {"200": _json("StatsEnvelope")},
            }
        },
    )

    spec.path(
        path="/api/v1/notes/{id}",
        operations={
            "get": {
                "summary": "Get note by id",
                "security": _AUTH,
                "parameters": [_ID_PARAM],
                "responses": {"200": _json("NoteEnvelope"), "404": not_found},
            },
            "put": {
                "summary": "Update note (partial)",
                "security": _AUTH,
                "parameters": [_ID_PARAM],
                "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("NoteUpdate")}}},
                "responses": {"200": _json("NoteEnvelope"), "404": not_found},
            },
            "delete": {
                "summary": "Delete note",
                "security": _AUTH,
                "parameters": [_ID_PARAM],
                "responses": {"200": _json("Message"), "404": not_found},
            },
        },
    )

    spec.path(
        path="/api/v1/notes/{id}/summarize",
        operations={
            "post": {
                "summary": "Generate an AI summary",
                "security": _AUTH,
                "parameters": [_ID_PARAM],
                "requestBody": {"content": {"application/json": {"schema": _ref("Summarize")}}},
                "responses": {
                    "200": _json("NoteEnvelope"),
                    "400": _json("Error", "Note has no content"),
                    "404": not_found,
                    "502": _json("Error", "Summarization service failed"),
                },
            }
        },
    )

    return spec.to_dict()
