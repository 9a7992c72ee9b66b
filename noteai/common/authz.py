from functools import wraps
from flask import g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from noteai.common.errors import ApiError


def owner_required(fn):
    """
    Vérifie le JWT (émis par le service d'identité) et expose le `sub`
    comme propriétaire courant dans g.owner_id. Aucune revalidation des
    credentials: on fait confiance à l'identité fournie.

    Ex: @bp.get("/")
        @owner_required
        def list_notes(): ...
    """
    @wraps(fn)
    def inner(*args, **kwargs):
        verify_jwt_in_request()  # lève si non authentifié / token invalide
        identity = get_jwt_identity()
        if not identity:
            raise ApiError("Invalid token subject.", 422, "token_invalid_sub")
        g.owner_id = str(identity)
        return fn(*args, **kwargs)
    return inner


def current_owner() -> str:
    return g.owner_id
