"""Security helpers: response headers and the image origins we trust."""
from __future__ import annotations

from typing import Dict, Iterable, List, Union
from urllib.parse import urlparse

from flask_talisman import Talisman

CSPDirective = Dict[str, Union[List[str], str]]

CLOUDINARY_DELIVERY = [
    "https://res.cloudinary.com",
]

CLOUDINARY_UPLOAD = [
    "https://api.cloudinary.com",
]

SAMPLE_IMAGE_HOSTS = [
    "https://images.unsplash.com",
]

STYLE_CDNS = [
    "https://fonts.googleapis.com",
]

FONT_CDNS = [
    "https://fonts.gstatic.com",
]

# Origins image records may point at; the download proxy fetches nothing else.
IMAGE_SOURCE_ORIGINS = [*CLOUDINARY_DELIVERY, *SAMPLE_IMAGE_HOSTS]


def _unique(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    unique_values: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            unique_values.append(value)
    return unique_values


def is_allowed_image_url(url: str) -> bool:
    try:
        parsed = urlparse(url or "")
        port = parsed.port
    except ValueError:
        return False
    if parsed.username or parsed.password or port is not None:
        return False
    host = (parsed.hostname or "").lower()
    return f"{parsed.scheme}://{host}" in IMAGE_SOURCE_ORIGINS


def build_csp() -> CSPDirective:
    """Content security policy letting the browser talk to Cloudinary directly."""

    return {
        "default-src": "'self'",
        "script-src": ["'self'"],
        "connect-src": _unique(["'self'", *CLOUDINARY_UPLOAD]),
        "img-src": _unique(
            ["'self'", "data:", "blob:", *CLOUDINARY_DELIVERY, *SAMPLE_IMAGE_HOSTS]
        ),
        "style-src": _unique(["'self'", "'unsafe-inline'", *STYLE_CDNS]),
        "font-src": _unique(["'self'", *FONT_CDNS]),
        "object-src": "'none'",
        "base-uri": "'self'",
        "frame-ancestors": "'self'",
    }


talisman = Talisman()
