"""REST endpoints over the image catalog."""

from __future__ import annotations

import mimetypes

import requests
from flask import Blueprint, Response, current_app, jsonify, request, stream_with_context
from slugify import slugify

from ..errors import ExternalDependencyError, ValidationError
from ..security import is_allowed_image_url
from ..services.catalog import get_catalog
from ..utils.logger import get_logger

bp = Blueprint("images", __name__, url_prefix="/images")
logger = get_logger(__name__)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def page_args() -> tuple[int, int]:
    page = request.args.get("page", 1, type=int)
    page_size = request.args.get(
        "pageSize", current_app.config.get("GALLERY_PAGE_SIZE", 12), type=int
    )
    return page, page_size


@bp.post("")
def create_image():
    record = get_catalog().create(_json_body())
    return jsonify({"success": True, "image": record.to_dict()}), 201


@bp.get("")
def list_images():
    page, page_size = page_args()
    tag = request.args.get("tag", "")
    catalog = get_catalog()
    if tag:
        result = catalog.list_by_tag(tag, page, page_size)
    else:
        result = catalog.list(page, page_size, request.args.get("q"))
    return jsonify(result.to_dict())


@bp.get("/<image_id>")
def get_image(image_id: str):
    return jsonify({"image": get_catalog().get(image_id).to_dict()})


@bp.patch("/<image_id>")
def update_image(image_id: str):
    record = get_catalog().update(image_id, _json_body())
    return jsonify({"success": True, "image": record.to_dict()})


@bp.delete("/<image_id>")
def delete_image(image_id: str):
    get_catalog().delete(image_id)
    return jsonify({"success": True})


def _download_filename(title: str, content_type: str) -> str:
    base = slugify(title or "") or "downloaded-image"
    extension = mimetypes.guess_extension((content_type or "").split(";")[0].strip()) or ""
    if extension == ".jpe":
        extension = ".jpg"
    return f"{base}{extension}"


@bp.get("/<image_id>/download")
def download_image(image_id: str):
    record = get_catalog().get(image_id)
    if not is_allowed_image_url(record.url):
        logger.warning("[DOWNLOAD] refused off-host url id=%s url=%s", image_id, record.url)
        raise ValidationError(
            "Image URL is not served by the media host", details={"id": image_id}
        )
    timeout = current_app.config.get("DOWNLOAD_TIMEOUT_SECONDS", 15)

    try:
        upstream = requests.get(record.url, stream=True, timeout=timeout)
        upstream.raise_for_status()
    except requests.RequestException as exc:
        logger.error("[DOWNLOAD] fetch failed id=%s url=%s error=%s", image_id, record.url, exc)
        raise ExternalDependencyError(
            "Failed to download image", details={"id": image_id}
        ) from exc

    content_type = upstream.headers.get("Content-Type", "application/octet-stream")
    response = Response(
        stream_with_context(upstream.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE)),
        mimetype=content_type.split(";")[0].strip() or "application/octet-stream",
    )
    response.headers["Content-Disposition"] = (
        f'attachment; filename="{_download_filename(record.title, content_type)}"'
    )
    response.call_on_close(upstream.close)
    return response
