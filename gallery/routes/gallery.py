"""Feed endpoints consumed by the masonry grid and the preview modal."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..errors import NotFoundError
from ..models.image import ImageRecord
from ..services.catalog import ImagePage, get_catalog
from ..services.gallery_view import neighbors, tag_filter
from .images import page_args

gallery_bp = Blueprint("gallery", __name__, url_prefix="/api/gallery")


def _loaded_images() -> tuple[list[ImageRecord], ImagePage]:
    """Records the client holds after scrolling through ``page`` pages."""

    page, page_size = page_args()
    return get_catalog().list_loaded(
        page,
        page_size,
        query=request.args.get("q"),
        tag=request.args.get("tag") or None,
    )


@gallery_bp.get("")
def feed():
    expanded = request.args.get("expandTags", "").lower() in {"1", "true", "yes"}
    loaded, current = _loaded_images()

    payload = current.to_dict()
    payload["tags"] = tag_filter(
        loaded,
        limit=current_app.config.get("TAG_FILTER_LIMIT", 10),
        expanded=expanded,
    )
    return jsonify(payload)


@gallery_bp.get("/<image_id>/preview")
def preview(image_id: str):
    record = get_catalog().get(image_id)
    loaded, _ = _loaded_images()

    navigation = neighbors(loaded, image_id)
    if navigation["position"] is None:
        raise NotFoundError(
            "Image is not part of the loaded gallery", details={"id": image_id}
        )
    return jsonify({"image": record.to_dict(), **navigation})
