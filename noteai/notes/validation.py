"""Contraintes des champs d'une note, indépendantes du stockage.

Chaque fonction renvoie la valeur nettoyée (trim) ou lève
NoteValidationError en nommant le champ fautif.
"""
from noteai.common.errors import NoteValidationError

TITLE_MAX = 100
CONTENT_MAX = 10_000
SUMMARY_MAX = 2_000
TAG_MAX = 20


def _clean_text(field, value, max_len, required):
    if value is None:
        if required:
            raise NoteValidationError(field, f"Note {field} is required.")
        return None
    if not isinstance(value, str):
        raise NoteValidationError(field, f"Note {field} must be a string.")
    value = value.strip()
    if required and not value:
        raise NoteValidationError(field, f"Note {field} is required.")
    if len(value) > max_len:
        raise NoteValidationError(field, f"{field.capitalize()} cannot exceed {max_len:,} characters.")
    return value


def clean_title(value) -> str:
    return _clean_text("title", value, TITLE_MAX, required=True)


def clean_content(value) -> str:
    return _clean_text("content", value, CONTENT_MAX, required=True)


def clean_summary(value):
    return _clean_text("summary", value, SUMMARY_MAX, required=False)


def clean_tags(value) -> list:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise NoteValidationError("tags", "Tags must be a list of strings.")
    out = []
    for tag in value:
        if not isinstance(tag, str):
            raise NoteValidationError("tags", "Tags must be a list of strings.")
        tag = tag.strip()
        if not tag:
            continue
        if len(tag) > TAG_MAX:
            raise NoteValidationError("tags", f"Tag cannot exceed {TAG_MAX} characters.")
        out.append(tag)
    return out


def clean_is_public(value) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise NoteValidationError("is_public", "is_public must be a boolean.")
    return value
