"""Image catalog records and the validation applied before they are stored."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping
from urllib.parse import urlparse

from ..errors import ValidationError
from ..security import is_allowed_image_url
from ..utils.sanitize import clean_tags, strip_markup
from ..utils.time import to_iso_utc

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
TAG_MAX_LENGTH = 50

# Transfer key -> storage key for every field a caller may set.
EDITABLE_FIELDS = {
    "title": "title",
    "description": "description",
    "tags": "tags",
    "url": "url",
    "width": "width",
    "height": "height",
    "externalAssetId": "public_id",
}
# A replacement upload brings all of these; externalAssetId may be omitted.
ASSET_FIELDS = ("url", "width", "height")


@dataclass
class ImageRecord:
    """A catalog entry describing an image hosted on the media host."""

    id: str
    title: str
    url: str
    width: int
    height: int
    created_at: datetime
    description: str = ""
    tags: list[str] = field(default_factory=list)
    public_id: str | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ImageRecord":
        return cls(
            id=str(document["_id"]),
            title=document["title"],
            url=document["url"],
            width=document["width"],
            height=document["height"],
            created_at=document["created_at"],
            description=document.get("description") or "",
            tags=list(document.get("tags") or []),
            public_id=document.get("public_id") or None,
            updated_at=document.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "externalAssetId": self.public_id,
            "tags": list(self.tags),
            "width": self.width,
            "height": self.height,
            "createdAt": to_iso_utc(self.created_at),
            "updatedAt": to_iso_utc(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - string helper
        return f"<ImageRecord {self.id} {self.title!r}>"


def _clean_title(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("Please provide a title for this image", details={"field": "title"})
    title = strip_markup(value)
    if not title:
        raise ValidationError("Please provide a title for this image", details={"field": "title"})
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title cannot be more than {TITLE_MAX_LENGTH} characters",
            details={"field": "title"},
        )
    return title


def _clean_description(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError("Description must be text", details={"field": "description"})
    description = strip_markup(value)
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description cannot be more than {DESCRIPTION_MAX_LENGTH} characters",
            details={"field": "description"},
        )
    return description


def _clean_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(tag, str) for tag in value):
        raise ValidationError("Tags must be a list of strings", details={"field": "tags"})
    tags = clean_tags(value)
    too_long = [tag for tag in tags if len(tag) > TAG_MAX_LENGTH]
    if too_long:
        raise ValidationError(
            f"Tags cannot be more than {TAG_MAX_LENGTH} characters",
            details={"field": "tags", "tags": too_long},
        )
    return tags


def _clean_url(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Please provide an image URL", details={"field": "url"})
    url = value.strip()
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValidationError("Image URL must be an http(s) URL", details={"field": "url"})
    if not is_allowed_image_url(url):
        raise ValidationError(
            "Image URL must point at the media host", details={"field": "url"}
        )
    return url


def _clean_dimension(value: Any, name: str) -> int:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Please provide the image {name}", details={"field": name})
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise ValidationError(
            f"Image {name} must be a positive integer", details={"field": name}
        )
    return value


def _clean_public_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(
            "externalAssetId must be text", details={"field": "externalAssetId"}
        )
    return value.strip() or None


def validate_new_image(data: Mapping[str, Any] | None) -> dict:
    """Validate a creation payload and return the storage fields."""

    if not isinstance(data, Mapping):
        raise ValidationError("Image data must be an object")

    return {
        "title": _clean_title(data.get("title")),
        "description": _clean_description(data.get("description")),
        "tags": _clean_tags(data.get("tags")),
        "url": _clean_url(data.get("url")),
        "public_id": _clean_public_id(data.get("externalAssetId")),
        "width": _clean_dimension(data.get("width"), "width"),
        "height": _clean_dimension(data.get("height"), "height"),
    }


def validate_image_changes(data: Mapping[str, Any] | None) -> dict:
    """Validate a partial update and return only the storage fields supplied.

    Asset fields travel together: a replacement file always brings a new
    URL and new dimensions, and the record's ``public_id`` follows it (cleared
    when the replacement carries no ``externalAssetId``).
    """

    if not isinstance(data, Mapping):
        raise ValidationError("Image data must be an object")

    unknown = sorted(key for key in data if key not in EDITABLE_FIELDS and key != "id")
    if unknown:
        raise ValidationError(
            "Unsupported fields in update", details={"fields": unknown}
        )

    supplied_asset_fields = [name for name in ASSET_FIELDS if name in data]
    if supplied_asset_fields and len(supplied_asset_fields) != len(ASSET_FIELDS):
        raise ValidationError(
            "A replacement image requires url, width and height together",
            details={"fields": list(ASSET_FIELDS)},
        )
    if "externalAssetId" in data and not supplied_asset_fields:
        raise ValidationError(
            "externalAssetId can only change together with a replacement image",
            details={"fields": [*ASSET_FIELDS, "externalAssetId"]},
        )

    changes: dict = {}
    if "title" in data:
        changes["title"] = _clean_title(data["title"])
    if "description" in data:
        changes["description"] = _clean_description(data["description"])
    if "tags" in data:
        changes["tags"] = _clean_tags(data["tags"])
    if supplied_asset_fields:
        changes["url"] = _clean_url(data["url"])
        changes["width"] = _clean_dimension(data["width"], "width")
        changes["height"] = _clean_dimension(data["height"], "height")
        changes["public_id"] = _clean_public_id(data.get("externalAssetId"))

    if not changes:
        raise ValidationError("No editable fields supplied")
    return changes


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "EDITABLE_FIELDS",
    "ImageRecord",
    "TAG_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "validate_image_changes",
    "validate_new_image",
]
