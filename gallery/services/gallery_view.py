"""View helpers backing the masonry grid, tag filter and preview modal."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..models.image import ImageRecord

DEFAULT_TAG_LIMIT = 10


def collect_tags(images: Iterable[ImageRecord]) -> list[str]:
    """Union of tags across ``images`` in first-seen order."""

    seen: dict[str, None] = {}
    for image in images:
        for tag in image.tags:
            seen.setdefault(tag, None)
    return list(seen)


def tag_filter(
    images: Iterable[ImageRecord],
    *,
    limit: int = DEFAULT_TAG_LIMIT,
    expanded: bool = False,
) -> dict:
    tags = collect_tags(images)
    if expanded or limit <= 0 or len(tags) <= limit:
        return {"visible": tags, "hidden": 0}
    return {"visible": tags[:limit], "hidden": len(tags) - limit}


def neighbor_index(current: int, total: int, step: int) -> int:
    """Index reached from ``current`` moving ``step`` items, wrapping at both ends."""

    if total <= 0:
        raise ValueError("cannot navigate an empty image list")
    return (current + step) % total


def neighbors(images: Sequence[ImageRecord], image_id: str) -> dict:
    """Previous and next record ids around ``image_id`` in the loaded list."""

    ids = [image.id for image in images]
    try:
        position = ids.index(image_id)
    except ValueError:
        return {"previous": None, "next": None, "position": None}
    return {
        "previous": ids[neighbor_index(position, len(ids), -1)],
        "next": ids[neighbor_index(position, len(ids), 1)],
        "position": position,
    }


__all__ = [
    "DEFAULT_TAG_LIMIT",
    "collect_tags",
    "neighbor_index",
    "neighbors",
    "tag_filter",
]
