"""Error kinds raised by the catalog and the media host adapter."""

from __future__ import annotations


class GalleryError(Exception):
    """Base class for every error surfaced to API callers."""

    code = "gallery_error"
    status_code = 500

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> dict:
        payload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(GalleryError):
    """Malformed or missing input."""

    code = "validation_error"
    status_code = 400


class NotFoundError(GalleryError):
    """The addressed record does not exist."""

    code = "not_found"
    status_code = 404


class ExternalDependencyError(GalleryError):
    """The media host rejected or failed a request."""

    code = "external_dependency_error"
    status_code = 502


class StorageError(GalleryError):
    """The document store failed."""

    code = "storage_error"
    status_code = 503


__all__ = [
    "ExternalDependencyError",
    "GalleryError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
