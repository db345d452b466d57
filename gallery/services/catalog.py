"""Catalog access layer: CRUD, search and pagination over image records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from flask import current_app

from ..errors import ExternalDependencyError, NotFoundError, ValidationError
from ..models.image import ImageRecord, validate_image_changes, validate_new_image
from ..utils.logger import get_logger
from ..utils.time import utcnow
from .catalog_store import MongoImageStore
from .media_library import MediaHost
from .sample_images import SAMPLE_IMAGES

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 60
# Upper bound on how many records the feed reloads for an infinite-scroll position
MAX_LOADED_IMAGES = 1200


@dataclass(frozen=True)
class ImagePage:
    images: list[ImageRecord]
    total: int
    has_more: bool
    page: int
    page_size: int

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_more else None

    def to_dict(self) -> dict:
        return {
            "images": [image.to_dict() for image in self.images],
            "total": self.total,
            "hasMore": self.has_more,
            "page": self.page,
            "pageSize": self.page_size,
            "nextPage": self.next_page,
        }


def _check_pagination(page: int, page_size: int) -> None:
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise ValidationError("page must be a positive integer", details={"field": "page"})
    if (
        isinstance(page_size, bool)
        or not isinstance(page_size, int)
        or not 1 <= page_size <= MAX_PAGE_SIZE
    ):
        raise ValidationError(
            f"pageSize must be between 1 and {MAX_PAGE_SIZE}",
            details={"field": "pageSize"},
        )


class CatalogService:
    """Operations over the image catalog.

    The store and the media host are injected so either can be replaced by
    a fake in tests.
    """

    def __init__(self, store: MongoImageStore, media_host: MediaHost):
        self.store = store
        self.media_host = media_host

    def create(self, data: Mapping) -> ImageRecord:
        fields = validate_new_image(data)
        now = utcnow()
        document = self.store.insert({**fields, "created_at": now, "updated_at": now})
        record = ImageRecord.from_document(document)
        logger.info("[CATALOG] image created id=%s title=%r", record.id, record.title)
        return record

    def get(self, image_id: str) -> ImageRecord:
        document = self.store.find_by_id(image_id)
        if document is None:
            raise NotFoundError("Image not found", details={"id": image_id})
        return ImageRecord.from_document(document)

    def update(self, image_id: str, data: Mapping) -> ImageRecord:
        changes = validate_image_changes(data)

        previous_public_id = None
        if "public_id" in changes:
            previous = self.get(image_id)
            previous_public_id = previous.public_id

        document = self.store.update_fields(image_id, {**changes, "updated_at": utcnow()})
        if document is None:
            raise NotFoundError("Image not found", details={"id": image_id})

        record = ImageRecord.from_document(document)
        logger.info("[CATALOG] image updated id=%s fields=%s", record.id, sorted(changes))

        if previous_public_id and previous_public_id != record.public_id:
            self._discard_replaced_asset(record.id, previous_public_id)
        return record

    def _discard_replaced_asset(self, image_id: str, public_id: str) -> None:
        try:
            self.media_host.delete_asset(public_id)
        except ExternalDependencyError:
            # The record already points at the new asset; reconcile-assets picks this one up.
            logger.warning(
                "[CATALOG] replaced asset not removed id=%s public_id=%s", image_id, public_id
            )

    def delete(self, image_id: str) -> None:
        record = self.get(image_id)

        if record.public_id:
            self.media_host.delete_asset(record.public_id)

        if not self.store.delete(image_id):
            raise NotFoundError("Image not found", details={"id": image_id})
        logger.info("[CATALOG] image deleted id=%s public_id=%s", image_id, record.public_id)

    def _page(self, query: dict, page: int, page_size: int) -> ImagePage:
        _check_pagination(page, page_size)
        skip = (page - 1) * page_size
        total = self.store.count(query)
        documents = self.store.find_page(query, skip=skip, limit=page_size)
        images = [ImageRecord.from_document(document) for document in documents]
        return ImagePage(
            images=images,
            total=total,
            has_more=skip + len(images) < total,
            page=page,
            page_size=page_size,
        )

    @staticmethod
    def _search_query(query: str | None) -> dict:
        search = (query or "").strip()
        return {"$text": {"$search": search}} if search else {}

    @staticmethod
    def _tag_query(tag: str) -> dict:
        if not isinstance(tag, str) or not tag:
            raise ValidationError("tag must be a non-empty string", details={"field": "tag"})
        return {"tags": tag}

    def list(
        self,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        query: str | None = None,
    ) -> ImagePage:
        return self._page(self._search_query(query), page, page_size)

    def list_by_tag(
        self,
        tag: str,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ImagePage:
        return self._page(self._tag_query(tag), page, page_size)

    def list_loaded(
        self,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        *,
        query: str | None = None,
        tag: str | None = None,
    ) -> tuple[list[ImageRecord], ImagePage]:
        """Everything an infinite-scroll client holds after ``page`` pages.

        Returns the loaded records (pages 1..page, newest first) together
        with the ``page`` itself, using one count and one find.
        """

        _check_pagination(page, page_size)
        if page * page_size > MAX_LOADED_IMAGES:
            raise ValidationError(
                f"Cannot load more than {MAX_LOADED_IMAGES} images at once",
                details={"field": "page"},
            )

        mongo_query = self._tag_query(tag) if tag else self._search_query(query)
        total = self.store.count(mongo_query)
        documents = self.store.find_page(mongo_query, skip=0, limit=page * page_size)
        loaded = [ImageRecord.from_document(document) for document in documents]

        skip = (page - 1) * page_size
        current = loaded[skip:]
        return loaded, ImagePage(
            images=current,
            total=total,
            has_more=skip + len(current) < total,
            page=page,
            page_size=page_size,
        )

    def seed_if_empty(self, samples: Iterable[Mapping] = SAMPLE_IMAGES) -> int:
        if self.store.count() > 0:
            return 0

        now = utcnow()
        documents = [
            {**validate_new_image(sample), "created_at": now, "updated_at": now}
            for sample in samples
        ]
        inserted = self.store.insert_many(documents)
        logger.info("[CATALOG] seeded %s sample images", inserted)
        return inserted


def get_catalog() -> CatalogService:
    return current_app.extensions["gallery_catalog"]


__all__ = [
    "CatalogService",
    "DEFAULT_PAGE_SIZE",
    "ImagePage",
    "MAX_LOADED_IMAGES",
    "MAX_PAGE_SIZE",
    "get_catalog",
]
