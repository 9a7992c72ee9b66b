import os
from flask import Flask, jsonify, request
from flask_limiter import RateLimitExceeded
from dotenv import load_dotenv
from sqlalchemy import text

from .config import DevConfig, ProdConfig, TestConfig
from .extensions import db, migrate, jwt, cors, limiter
from .common.errors import register_error_handlers
from .common.logging import setup_json_logging, register_request_logging


def _csv(value, default_if_empty):
    """Convertit une chaîne CSV en liste, sinon retourne la valeur telle quelle ou un défaut."""
    if value is None:
        return default_if_empty
    if isinstance(value, str) and "," in value:
        items = [x.strip() for x in value.split(",") if x.strip()]
        return items if items else default_if_empty
    return value


def _config_for_env(env):
    if env in ("test", "testing"):
        return TestConfig
    if env == "production":
        return ProdConfig
    return DevConfig


def create_app(config_object=None, summarizer=None):
    """Fabrique de l'application.

    `summarizer` permet d'injecter un service de résumé (ex: un faux en test);
    sinon il est construit depuis la config (OpenAI).
    """
    # Charge .env si présent (dev)
    load_dotenv()

    app = Flask(__name__)

    env = os.getenv("APP_ENV") or os.getenv("FLASK_ENV", "development")
    app.config.from_object(config_object or _config_for_env(env))

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    setup_json_logging(app)
    register_request_logging(app)

    # --- CORS: whitelist + headers ---
    cors.init_app(app, resources={
        r"/api/*": {
            "origins": _csv(app.config.get("CORS_ORIGINS", "*"), "*"),
            "allow_headers": _csv(app.config.get("CORS_ALLOW_HEADERS"), ["Authorization", "Content-Type"]),
            "expose_headers": _csv(app.config.get("CORS_EXPOSE_HEADERS"), ["Content-Type"]),
            "supports_credentials": False,
        }
    })

    limiter.init_app(app)   # Limiter lit RATELIMIT_* depuis app.config

    # Service de résumé injecté (jamais un singleton global)
    if summarizer is None:
        from .ai.summarizer import build_summarizer
        summarizer = build_summarizer(app.config)
    app.extensions["summarizer"] = summarizer

    # Importer les modèles pour que Flask-Migrate/Alembic voie les tables
    from .notes import models as notes_models  # noqa: F401

    register_error_handlers(app)

    # --- Erreurs JWT standardisées ---
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"error": {"code": "token_expired", "message": "Token has expired", "details": {}}}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(err_msg):
        return jsonify({"error": {"code": "token_invalid", "message": err_msg, "details": {}}}), 422

    @jwt.unauthorized_loader
    def unauthorized_callback(err_msg):
        return jsonify({"error": {"code": "authorization_required", "message": err_msg, "details": {}}}), 401

    # --- Security headers ---
    @app.after_request
    def set_security_headers(resp):
        # API JSON: CSP très restrictif (pas d'HTML attendu)
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["Referrer-Policy"] = "no-referrer"

        # HSTS uniquement si HTTPS (prod / reverse-proxy)
        if (env == "production" or app.config.get("ENFORCE_HTTPS")) and (
            request.is_secure or request.headers.get("X-Forwarded-Proto", "") == "https"
        ):
            resp.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains; preload"

        return resp

    # --- 429 Rate limit JSON ---
    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limit(e):
        return jsonify({"error": {"code": "rate_limited", "message": "Rate limit exceeded.", "details": {}}}), 429

    # --- Blueprints ---
    from .notes.routes import bp as notes_bp
    limiter.limit(lambda: app.config.get("NOTES_RATELIMIT", "60/minute"))(notes_bp)
    app.register_blueprint(notes_bp, url_prefix="/api/v1/notes")

    from .docs.routes import bp as docs_bp
    app.register_blueprint(docs_bp)

    def _db_up() -> bool:
        try:
            with db.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    # Liveness probe
    @app.get("/healthz")
    def healthz():
        return jsonify({"status": "ok", "env": env, "db": "up" if _db_up() else "down"})

    # Readiness probe (DB + Redis si configuré pour le rate limit)
    @app.get("/readyz")
    def readyz():
        status = {"db": "up" if _db_up() else "down", "redis": "n/a"}
        ok = status["db"] == "up"

        uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
        if uri.startswith(("redis://", "rediss://")):
            try:
                import redis  # import tardif
                redis.from_url(uri).ping()
                status["redis"] = "up"
            except Exception:
                ok = False
                status["redis"] = "down"

        status["status"] = "ok" if ok else "error"
        return jsonify(status), (200 if ok else 503)

    return app
