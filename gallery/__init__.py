from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix  # Ensure proxy headers are honored for HTTPS redirects
import os
import time
import warnings
from time import perf_counter
from urllib.parse import urlparse, urlunparse

from config import Config
from .cli import register_cli_commands
from .errors import GalleryError
from .extensions import Mongo, compress, limiter
from .routes import gallery_bp, images_bp, signature_bp, status_bp
from .security import build_csp, talisman
from .services.catalog import CatalogService
from .services.catalog_store import MongoImageStore
from .services.media_library import MediaHost
from .utils.logger import configure_logging

SLOW_REQUEST_THRESHOLD_MS = 300


def _mask_mongodb_uri(uri: str) -> str:
    try:
        parsed = urlparse(uri)
        if parsed.password:
            netloc = parsed.netloc.replace(parsed.password, "***")
            parsed = parsed._replace(netloc=netloc)
        return urlunparse(parsed)
    except Exception:
        return "<unavailable>"


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(GalleryError)
    def render_gallery_error(error: GalleryError):
        app.logger.warning(
            "[API] %s %s failed: %s (%s)",
            request.method,
            request.path,
            error.message,
            error.code,
        )
        return jsonify({"error": error.to_payload()}), error.status_code

    @app.errorhandler(HTTPException)
    def render_http_error(error: HTTPException):
        code = (error.name or "error").lower().replace(" ", "_")
        return (
            jsonify({"error": {"code": code, "message": error.description}}),
            error.code or 500,
        )

    @app.errorhandler(Exception)
    def render_internal_error(error: Exception):
        app.logger.exception("[500] Internal server error")
        return (
            jsonify(
                {
                    "error": {
                        "code": "internal_error",
                        "message": "Something went wrong. Please try again.",
                    }
                }
            ),
            500,
        )


def _seed_catalog(app: Flask, catalog: CatalogService) -> None:
    try:
        inserted = catalog.seed_if_empty()
    except GalleryError as ex:
        app.logger.warning("[BOOT] Sample image seeding failed: %s", ex)
        return
    if inserted:
        app.logger.info("[BOOT] Seeded %s sample images ✅", inserted)


def create_app(config_overrides: dict | None = None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)
    app.config["START_TIME"] = time.time()

    log_path = configure_logging(app.config)
    app.logger.info("[BOOT] Logging configured. Writing to %s", log_path)

    app_env = (
        os.getenv("APP_ENV")
        or app.config.get("APP_ENV")
        or os.getenv("FLASK_ENV")
        or "development"
    ).lower()
    warnings.filterwarnings("ignore", message="Using the in-memory storage")

    app.config["APP_ENV"] = app_env

    # Honor X-Forwarded-* from the hosting proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)  # type: ignore[attr-defined]

    mongo = Mongo().init_app(app)
    if app.config.get("MONGO_CLIENT") is None:
        app.logger.info(
            "[BOOT] MongoDB %s resolved from %s (db=%s)",
            _mask_mongodb_uri(app.config["MONGODB_URI"]),
            app.config.get("MONGODB_URI_SOURCE") or "overrides",
            app.config["MONGODB_DB_NAME"],
        )

    store = MongoImageStore(mongo.collection(app.config["MONGODB_COLLECTION"]))
    media_host = MediaHost.from_config(app.config)
    configured, reason = media_host.configure()
    if configured:
        app.logger.info("[BOOT] Cloudinary configured for cloud %s ✅", media_host.cloud_name)
    else:
        app.logger.warning("[BOOT] %s", reason)

    catalog = CatalogService(store, media_host)
    app.extensions["gallery_media_host"] = media_host
    app.extensions["gallery_catalog"] = catalog

    if app.config.get("MONGODB_ENSURE_INDEXES"):
        try:
            store.ensure_indexes()
            app.logger.info("[BOOT] Image indexes ensured ✅")
        except GalleryError as ex:
            app.logger.warning("[BOOT] Image index creation failed: %s", ex)

    if app.config.get("SEED_SAMPLE_IMAGES"):
        _seed_catalog(app, catalog)

    app.config["BASE_CONTENT_SECURITY_POLICY"] = build_csp()
    talisman.init_app(
        app,
        content_security_policy=app.config["BASE_CONTENT_SECURITY_POLICY"],
        force_https=app_env == "production",
        frame_options="SAMEORIGIN",
    )
    compress.init_app(app)
    limiter.init_app(app)

    app.register_blueprint(images_bp)
    app.register_blueprint(signature_bp)
    app.register_blueprint(gallery_bp)
    app.register_blueprint(status_bp)

    register_cli_commands(app)
    _register_error_handlers(app)

    @app.before_request
    def start_request_timer():  # pragma: no cover - tiny helper
        g._request_started_at = perf_counter()

    @app.after_request
    def finalize_response(response):  # pragma: no cover - thin instrumentation
        started_at = getattr(g, "_request_started_at", None)
        if started_at is not None:
            elapsed_ms = (perf_counter() - started_at) * 1000
            if elapsed_ms > SLOW_REQUEST_THRESHOLD_MS:
                app.logger.warning(
                    "[SLOW] %s %s took %.1f ms", request.method, request.path, elapsed_ms
                )
        return response

    return app
