"""MongoDB persistence for image catalog documents."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

import pymongo
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..errors import StorageError
from ..utils.logger import get_logger

logger = get_logger(__name__)

TEXT_INDEX_NAME = "image_text_search"
NEWEST_FIRST = [("created_at", pymongo.DESCENDING), ("_id", pymongo.DESCENDING)]


def parse_object_id(image_id: str | ObjectId | None) -> ObjectId | None:
    """Return the ObjectId for ``image_id`` or ``None`` when it cannot be one."""

    if isinstance(image_id, ObjectId):
        return image_id
    if not isinstance(image_id, str):
        return None
    try:
        return ObjectId(image_id)
    except (InvalidId, TypeError):
        return None


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.error("[STORE] %s failed: %s", action, exc)
        raise StorageError(f"Failed to {action}") from exc


class MongoImageStore:
    """Thin wrapper around the images collection.

    Every driver error surfaces as :class:`StorageError`; lookups by an id
    that is not a valid ObjectId behave like lookups of a missing record.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        with _storage_errors("create image indexes"):
            self.collection.create_index(
                [
                    ("title", pymongo.TEXT),
                    ("description", pymongo.TEXT),
                    ("tags", pymongo.TEXT),
                ],
                name=TEXT_INDEX_NAME,
            )
            self.collection.create_index(NEWEST_FIRST, name="created_at_desc")
            self.collection.create_index([("tags", pymongo.ASCENDING)], name="tags")
            self.collection.create_index(
                [("public_id", pymongo.ASCENDING)], name="public_id", sparse=True
            )

    def ping(self) -> bool:
        with _storage_errors("ping the database"):
            self.collection.database.client.admin.command("ping")
        return True

    def insert(self, document: dict) -> dict:
        stored = dict(document)
        with _storage_errors("add image"):
            result = self.collection.insert_one(stored)
        stored["_id"] = result.inserted_id
        return stored

    def insert_many(self, documents: Iterable[dict]) -> int:
        batch = [dict(document) for document in documents]
        if not batch:
            return 0
        with _storage_errors("insert images"):
            result = self.collection.insert_many(batch)
        return len(result.inserted_ids)

    def find_by_id(self, image_id: str) -> dict | None:
        object_id = parse_object_id(image_id)
        if object_id is None:
            return None
        with _storage_errors("get image"):
            return self.collection.find_one({"_id": object_id})

    def update_fields(self, image_id: str, changes: dict) -> dict | None:
        object_id = parse_object_id(image_id)
        if object_id is None:
            return None
        with _storage_errors("update image"):
            return self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )

    def delete(self, image_id: str) -> bool:
        object_id = parse_object_id(image_id)
        if object_id is None:
            return False
        with _storage_errors("delete image"):
            result = self.collection.delete_one({"_id": object_id})
        return result.deleted_count == 1

    def count(self, query: dict | None = None) -> int:
        with _storage_errors("count images"):
            return self.collection.count_documents(query or {})

    def find_page(self, query: dict, *, skip: int, limit: int) -> list[dict]:
        with _storage_errors("get images"):
            cursor = (
                self.collection.find(query)
                .sort(NEWEST_FIRST)
                .skip(skip)
                .limit(limit)
            )
            return list(cursor)

    def public_ids(self) -> set[str]:
        with _storage_errors("list asset ids"):
            cursor = self.collection.find(
                {"public_id": {"$nin": [None, ""]}}, {"public_id": 1}
            )
            return {document["public_id"] for document in cursor}


__all__ = ["MongoImageStore", "NEWEST_FIRST", "TEXT_INDEX_NAME", "parse_object_id"]
