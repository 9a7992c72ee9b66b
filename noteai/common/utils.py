from flask import jsonify


def success(message="ok", status=200, **payload):
    return jsonify({"message": message, **payload}), status


def split_csv(value):
    """'a, b,,c' -> ['a', 'b', 'c'] ; une liste est nettoyée de la même façon."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [str(x).strip() for x in items if str(x).strip()]
