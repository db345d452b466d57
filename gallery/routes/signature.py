from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..extensions import limiter
from ..services.media_library import get_media_host

signature_bp = Blueprint("signature", __name__)


def _signature_rate_limit() -> str:
    return current_app.config.get("SIGNATURE_RATE_LIMIT", "30 per minute")


@signature_bp.get("/api/cloudinary/signature")
@limiter.limit(_signature_rate_limit)
def upload_signature():
    """Sign a direct browser upload; ``publicId`` targets an existing asset."""

    public_id = (request.args.get("publicId") or "").strip()
    media_host = get_media_host()
    if public_id:
        payload = media_host.create_upload_authorization(public_id=public_id)
    else:
        payload = media_host.create_upload_authorization(
            folder=current_app.config.get("CLOUDINARY_FOLDER")
        )
    response = jsonify(payload)
    response.headers["Cache-Control"] = "no-store"
    return response
