from .catalog import CatalogService, ImagePage, get_catalog
from .catalog_store import MongoImageStore
from .media_library import MediaHost, get_media_host

__all__ = [
    "CatalogService",
    "ImagePage",
    "MediaHost",
    "MongoImageStore",
    "get_catalog",
    "get_media_host",
]
