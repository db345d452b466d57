import time

from flask import Blueprint, current_app, jsonify

from ..errors import StorageError
from ..services.catalog import get_catalog
from ..services.media_library import get_media_host

status_bp = Blueprint("status", __name__)


@status_bp.route("/healthz")
def healthz():
    started_at = current_app.config.get("START_TIME", time.time())
    payload = {
        "ok": True,
        "uptime_seconds": int(time.time() - started_at),
        "database": {"online": False, "images": None},
        "media_host": {"configured": get_media_host().configured},
    }

    catalog = get_catalog()
    try:
        catalog.store.ping()
        payload["database"] = {"online": True, "images": catalog.store.count()}
    except StorageError as exc:
        current_app.logger.warning("[HEALTH] database check failed: %s", exc)
        payload["ok"] = False

    return jsonify(payload), 200 if payload["ok"] else 503
