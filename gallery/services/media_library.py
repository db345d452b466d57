"""Helpers for signing direct uploads to Cloudinary and removing assets."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator

import cloudinary
import cloudinary.api
import cloudinary.uploader
import cloudinary.utils
from flask import current_app

from ..errors import ExternalDependencyError
from ..utils.logger import get_logger

logger = get_logger(__name__)

# "not found" means the asset is already gone, which is what a delete asks for.
DESTROY_SUCCESS_RESULTS = {"ok", "not found"}


@dataclass(frozen=True)
class HostedAsset:
    public_id: str
    created_at: datetime | None


class MediaHost:
    """Stateless adapter around the Cloudinary SDK."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret

    @classmethod
    def from_config(cls, config) -> "MediaHost":
        return cls(
            cloud_name=config.get("CLOUDINARY_CLOUD_NAME") or "",
            api_key=config.get("CLOUDINARY_API_KEY") or "",
            api_secret=config.get("CLOUDINARY_API_SECRET") or "",
        )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def configure(self) -> tuple[bool, str | None]:
        """Push the credentials into the SDK's global configuration."""

        if not self.configured:
            return False, "Cloudinary not configured: check the CLOUDINARY_* variables."

        cloudinary.config(
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            secure=True,
        )
        return True, None

    def _require_configuration(self) -> None:
        if not self.configured:
            raise ExternalDependencyError("Media host credentials are not configured")

    def create_upload_authorization(
        self,
        *,
        folder: str | None = None,
        public_id: str | None = None,
        timestamp: int | None = None,
    ) -> dict:
        """Sign the parameters the browser will post to the upload API.

        A target ``public_id`` (overwriting an existing asset) takes
        precedence over ``folder``.
        """

        self._require_configuration()
        if timestamp is None:
            timestamp = int(time.time())

        params: dict = {"timestamp": timestamp}
        if public_id:
            params["public_id"] = public_id
        elif folder:
            params["folder"] = folder

        signature = cloudinary.utils.api_sign_request(params, self.api_secret)

        payload = {
            "signature": signature,
            "timestamp": timestamp,
            "cloudName": self.cloud_name,
            "apiKey": self.api_key,
        }
        if "public_id" in params:
            payload["publicId"] = params["public_id"]
        if "folder" in params:
            payload["folder"] = params["folder"]
        return payload

    def delete_asset(self, public_id: str) -> dict:
        """Destroy the hosted asset, raising when the host does not confirm it."""

        self._require_configuration()
        try:
            result = cloudinary.uploader.destroy(
                public_id,
                resource_type="image",
                invalidate=True,
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
            )
        except Exception as exc:
            logger.error("[MEDIA] destroy failed public_id=%s error=%s", public_id, exc)
            raise ExternalDependencyError(
                "Failed to delete image from Cloudinary",
                details={"externalAssetId": public_id},
            ) from exc

        outcome = (result or {}).get("result")
        if outcome not in DESTROY_SUCCESS_RESULTS:
            logger.error("[MEDIA] destroy rejected public_id=%s result=%s", public_id, outcome)
            raise ExternalDependencyError(
                "Failed to delete image from Cloudinary",
                details={"externalAssetId": public_id, "result": outcome},
            )

        logger.info("[MEDIA] destroyed public_id=%s result=%s", public_id, outcome)
        return result

    def iter_folder_assets(self, folder: str, *, page_size: int = 100) -> Iterator[HostedAsset]:
        """Yield every uploaded image whose public id lives under ``folder``."""

        self._require_configuration()
        prefix = folder.rstrip("/") + "/" if folder else ""
        next_cursor = None
        while True:
            options = {
                "type": "upload",
                "resource_type": "image",
                "prefix": prefix,
                "max_results": page_size,
                "cloud_name": self.cloud_name,
                "api_key": self.api_key,
                "api_secret": self.api_secret,
            }
            if next_cursor:
                options["next_cursor"] = next_cursor
            try:
                response = cloudinary.api.resources(**options)
            except Exception as exc:
                logger.error("[MEDIA] listing folder=%s failed: %s", folder, exc)
                raise ExternalDependencyError("Failed to list Cloudinary assets") from exc

            for resource in response.get("resources", []):
                yield HostedAsset(
                    public_id=resource["public_id"],
                    created_at=_parse_created_at(resource.get("created_at")),
                )

            next_cursor = response.get("next_cursor")
            if not next_cursor:
                break


def _parse_created_at(value: str | None) -> datetime | None:
    if not value:
        return None
    raw = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def get_media_host() -> MediaHost:
    return current_app.extensions["gallery_media_host"]


__all__ = ["HostedAsset", "MediaHost", "get_media_host"]
