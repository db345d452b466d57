import os
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


DEFAULT_MONGODB_URI = "mongodb://localhost:27017"
DEFAULT_MONGODB_DB_NAME = "pinboard"

MONGODB_ENV_PRIORITY = (
    "MONGODB_URI",
    "MONGO_URL",
    "DATABASE_URL",
)


def get_mongodb_uri_from_env(default: Optional[str] = None) -> Tuple[Optional[str], Optional[str]]:
    for key in MONGODB_ENV_PRIORITY:
        value = os.getenv(key)
        if value and value.startswith(("mongodb://", "mongodb+srv://")):
            return value, key

    if default is not None:
        return default, "default"

    return None, None


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


RESOLVED_MONGODB_URI, RESOLVED_MONGODB_SOURCE = get_mongodb_uri_from_env(DEFAULT_MONGODB_URI)


class Config:
    MONGODB_URI = RESOLVED_MONGODB_URI or DEFAULT_MONGODB_URI
    MONGODB_URI_SOURCE = RESOLVED_MONGODB_SOURCE
    MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", DEFAULT_MONGODB_DB_NAME)
    MONGODB_COLLECTION = os.getenv("MONGODB_COLLECTION", "images")
    MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(
        os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "5000")
    )
    MONGODB_ENSURE_INDEXES = not _is_truthy(os.getenv("SKIP_INDEX_CREATION"))

    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER", "pinboard")

    GALLERY_PAGE_SIZE = int(os.getenv("GALLERY_PAGE_SIZE", "12"))
    TAG_FILTER_LIMIT = int(os.getenv("TAG_FILTER_LIMIT", "10"))
    SEED_SAMPLE_IMAGES = _is_truthy(os.getenv("SEED_SAMPLE_IMAGES", "1"))
    DOWNLOAD_TIMEOUT_SECONDS = float(os.getenv("DOWNLOAD_TIMEOUT_SECONDS", "15"))

    SIGNATURE_RATE_LIMIT = os.getenv("SIGNATURE_RATE_LIMIT", "30 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_FILE = os.getenv("LOG_FILE", "gallery.log")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
