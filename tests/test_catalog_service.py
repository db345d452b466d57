import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from gallery.errors import (
    ExternalDependencyError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from gallery.services.catalog import MAX_LOADED_IMAGES, CatalogService
from gallery.services.catalog_store import TEXT_INDEX_NAME, MongoImageStore
from gallery.services.sample_images import SAMPLE_IMAGES


class FakeMediaHost:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.deleted: list[str] = []

    def delete_asset(self, public_id: str) -> dict:
        if self.fail:
            raise ExternalDependencyError("Failed to delete image from Cloudinary")
        self.deleted.append(public_id)
        return {"result": "ok"}


@pytest.fixture()
def store():
    return MongoImageStore(mongomock.MongoClient().pinboard.images)


@pytest.fixture()
def media_host():
    return FakeMediaHost()


@pytest.fixture()
def catalog(store, media_host):
    return CatalogService(store, media_host)


def _image(title: str = "Sunset", **overrides) -> dict:
    data = {
        "title": title,
        "description": "Orange sky over the bay",
        "url": "https://res.cloudinary.com/demo/image/upload/pinboard/sunset.jpg",
        "externalAssetId": "pinboard/sunset",
        "tags": ["sky", "sea"],
        "width": 800,
        "height": 1200,
    }
    data.update(overrides)
    return data


def test_create_returns_stored_record_with_fresh_id(catalog):
    first = catalog.create(_image())
    second = catalog.create(_image("Dawn"))

    assert first.id and second.id
    assert first.id != second.id
    assert first.created_at is not None

    fetched = catalog.get(first.id)
    assert fetched.title == "Sunset"
    assert fetched.description == "Orange sky over the bay"
    assert fetched.tags == ["sky", "sea"]
    assert fetched.url == "https://res.cloudinary.com/demo/image/upload/pinboard/sunset.jpg"
    assert (fetched.width, fetched.height) == (800, 1200)
    assert fetched.public_id == "pinboard/sunset"


def test_create_without_asset_id_is_allowed(catalog):
    record = catalog.create(_image(externalAssetId=None))
    assert record.public_id is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": ""},
        {"title": "   "},
        {"title": "x" * 101},
        {"url": None},
        {"url": "ftp://example.com/a.jpg"},
        {"width": 0},
        {"height": -4},
        {"width": True},
        {"tags": "nature"},
        {"description": "d" * 501},
    ],
)
def test_create_rejects_invalid_payloads(catalog, store, overrides):
    with pytest.raises(ValidationError):
        catalog.create(_image(**overrides))
    assert store.count() == 0


def test_create_wraps_driver_failures(catalog, store, monkeypatch):
    def explode(*args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(store.collection, "insert_one", explode)

    with pytest.raises(StorageError):
        catalog.create(_image())


def test_get_unknown_or_malformed_id_raises_not_found(catalog):
    with pytest.raises(NotFoundError):
        catalog.get("65f000000000000000000000")
    with pytest.raises(NotFoundError):
        catalog.get("not-an-object-id")


def test_update_title_leaves_other_fields_untouched(catalog):
    original = catalog.create(_image())

    updated = catalog.update(original.id, {"title": "New"})

    assert updated.title == "New"
    assert updated.id == original.id
    assert updated.description == original.description
    assert updated.tags == original.tags
    assert updated.url == original.url
    assert updated.public_id == original.public_id
    assert (updated.width, updated.height) == (original.width, original.height)
    assert updated.to_dict()["createdAt"] == original.to_dict()["createdAt"]


def test_update_missing_record_raises_not_found(catalog):
    with pytest.raises(NotFoundError):
        catalog.update("65f000000000000000000000", {"title": "New"})


def test_update_rejects_long_title(catalog):
    record = catalog.create(_image())
    with pytest.raises(ValidationError):
        catalog.update(record.id, {"title": "x" * 101})
    assert catalog.get(record.id).title == "Sunset"


def test_update_requires_complete_replacement_asset(catalog):
    record = catalog.create(_image())
    with pytest.raises(ValidationError):
        catalog.update(record.id, {"url": "https://res.cloudinary.com/demo/new.jpg"})


def test_update_with_new_asset_discards_previous_one(catalog, media_host):
    record = catalog.create(_image())

    updated = catalog.update(
        record.id,
        {
            "url": "https://res.cloudinary.com/demo/image/upload/pinboard/sunset-v2.jpg",
            "width": 1024,
            "height": 768,
            "externalAssetId": "pinboard/sunset-v2",
        },
    )

    assert updated.public_id == "pinboard/sunset-v2"
    assert (updated.width, updated.height) == (1024, 768)
    assert media_host.deleted == ["pinboard/sunset"]


def test_update_overwriting_same_asset_keeps_it(catalog, media_host):
    record = catalog.create(_image())

    catalog.update(
        record.id,
        {
            "url": "https://res.cloudinary.com/demo/image/upload/v2/pinboard/sunset.jpg",
            "width": 640,
            "height": 480,
            "externalAssetId": "pinboard/sunset",
        },
    )

    assert media_host.deleted == []


def test_update_rejects_asset_id_without_replacement_image(catalog, media_host):
    record = catalog.create(_image())

    with pytest.raises(ValidationError):
        catalog.update(record.id, {"externalAssetId": None})

    unchanged = catalog.get(record.id)
    assert unchanged.public_id == "pinboard/sunset"
    assert unchanged.url == record.url
    assert media_host.deleted == []


def test_update_replacement_without_asset_id_clears_and_discards_old_asset(
    catalog, media_host
):
    record = catalog.create(_image())

    updated = catalog.update(
        record.id,
        {
            "url": "https://images.unsplash.com/photo-1500000000000?w=600",
            "width": 600,
            "height": 400,
        },
    )

    assert updated.public_id is None
    assert updated.url == "https://images.unsplash.com/photo-1500000000000?w=600"
    assert media_host.deleted == ["pinboard/sunset"]

    catalog.delete(record.id)
    assert media_host.deleted == ["pinboard/sunset"]


def test_delete_removes_hosted_asset_then_record(catalog, media_host):
    record = catalog.create(_image())

    catalog.delete(record.id)

    assert media_host.deleted == ["pinboard/sunset"]
    with pytest.raises(NotFoundError):
        catalog.get(record.id)


def test_delete_without_asset_skips_media_host(catalog, media_host):
    record = catalog.create(_image(externalAssetId=None))

    catalog.delete(record.id)

    assert media_host.deleted == []
    with pytest.raises(NotFoundError):
        catalog.get(record.id)


def test_delete_keeps_record_when_host_fails(store):
    catalog = CatalogService(store, FakeMediaHost(fail=True))
    record = catalog.create(_image())

    with pytest.raises(ExternalDependencyError):
        catalog.delete(record.id)

    assert catalog.get(record.id).title == "Sunset"


def test_delete_missing_record_raises_not_found(catalog):
    with pytest.raises(NotFoundError):
        catalog.delete("65f000000000000000000000")


def test_list_paginates_newest_first(catalog):
    for index in range(20):
        catalog.create(_image(f"Image {index}"))

    first = catalog.list(page=1, page_size=12)
    second = catalog.list(page=2, page_size=12)

    assert len(first.images) == 12
    assert first.has_more is True
    assert first.total == 20
    assert first.next_page == 2
    assert len(second.images) == 8
    assert second.has_more is False
    assert second.next_page is None

    titles = [image.title for image in first.images + second.images]
    assert titles == [f"Image {index}" for index in reversed(range(20))]


def test_list_past_the_end_is_empty(catalog):
    catalog.create(_image())
    result = catalog.list(page=3, page_size=12)
    assert result.images == []
    assert result.has_more is False
    assert result.total == 1


@pytest.mark.parametrize("page,page_size", [(0, 12), (-1, 12), (1, 0), (1, 61)])
def test_list_rejects_bad_pagination(catalog, page, page_size):
    with pytest.raises(ValidationError):
        catalog.list(page=page, page_size=page_size)


def test_list_with_query_uses_text_search(catalog, store, monkeypatch):
    seen = {}

    def fake_count(query=None):
        seen["count"] = query
        return 0

    def fake_find_page(query, *, skip, limit):
        seen["find"] = (query, skip, limit)
        return []

    monkeypatch.setattr(store, "count", fake_count)
    monkeypatch.setattr(store, "find_page", fake_find_page)

    result = catalog.list(page=2, page_size=5, query="  beach  ")

    assert seen["count"] == {"$text": {"$search": "beach"}}
    assert seen["find"] == ({"$text": {"$search": "beach"}}, 5, 5)
    assert result.total == 0


def test_list_with_blank_query_returns_everything(catalog):
    catalog.create(_image())
    assert catalog.list(query="   ").total == 1


def test_list_by_tag_matches_exact_tag(catalog):
    catalog.create(_image("Forest", tags=["nature", "trees"]))
    catalog.create(_image("Sea", tags=["ocean"]))
    catalog.create(_image("Caps", tags=["Nature"]))
    catalog.create(_image("Natural", tags=["natural"]))

    result = catalog.list_by_tag("nature", 1, 12)

    assert [image.title for image in result.images] == ["Forest"]
    assert result.total == 1
    assert result.has_more is False


def test_list_by_tag_orders_newest_first(catalog):
    catalog.create(_image("Beach", tags=["beach", "ocean"]))
    catalog.create(_image("Mountain", tags=["beach"]))

    result = catalog.list_by_tag("beach", 1, 12)

    assert [image.title for image in result.images] == ["Mountain", "Beach"]


def test_list_by_tag_requires_tag(catalog):
    with pytest.raises(ValidationError):
        catalog.list_by_tag("", 1, 12)


def test_seed_if_empty_is_idempotent(catalog, store):
    assert catalog.seed_if_empty() == len(SAMPLE_IMAGES)
    assert catalog.seed_if_empty() == 0
    assert store.count() == len(SAMPLE_IMAGES)


def test_seed_if_empty_skips_populated_catalog(catalog, store):
    catalog.create(_image())
    assert catalog.seed_if_empty() == 0
    assert store.count() == 1


def test_ensure_indexes_builds_text_search_over_title_description_and_tags(store):
    store.ensure_indexes()

    indexes = store.collection.index_information()

    assert indexes[TEXT_INDEX_NAME]["key"] == [
        ("title", "text"),
        ("description", "text"),
        ("tags", "text"),
    ]
    assert indexes["created_at_desc"]["key"] == [("created_at", -1), ("_id", -1)]
    assert indexes["public_id"]["sparse"] is True


def _count_store_calls(store, monkeypatch):
    calls = {"count": 0, "find_page": 0}
    original_count = store.count
    original_find_page = store.find_page

    def counting_count(query=None):
        calls["count"] += 1
        return original_count(query)

    def counting_find_page(query, *, skip, limit):
        calls["find_page"] += 1
        return original_find_page(query, skip=skip, limit=limit)

    monkeypatch.setattr(store, "count", counting_count)
    monkeypatch.setattr(store, "find_page", counting_find_page)
    return calls


def test_list_loaded_uses_one_count_and_one_find(catalog, store, monkeypatch):
    for index in range(7):
        catalog.create(_image(f"Image {index}"))
    calls = _count_store_calls(store, monkeypatch)

    loaded, current = catalog.list_loaded(3, 2)

    assert calls == {"count": 1, "find_page": 1}
    assert [image.title for image in loaded] == [f"Image {index}" for index in (6, 5, 4, 3, 2, 1)]
    assert [image.title for image in current.images] == ["Image 2", "Image 1"]
    assert current.has_more is True
    assert current.next_page == 4


def test_list_loaded_past_the_end_keeps_loaded_records(catalog):
    catalog.create(_image("Only"))

    loaded, current = catalog.list_loaded(4, 2)

    assert [image.title for image in loaded] == ["Only"]
    assert current.images == []
    assert current.page == 4
    assert current.has_more is False


def test_list_loaded_filters_by_tag(catalog):
    catalog.create(_image("Beach", tags=["beach"]))
    catalog.create(_image("City", tags=["urban"]))

    loaded, current = catalog.list_loaded(1, 12, tag="beach")

    assert [image.title for image in loaded] == ["Beach"]
    assert current.total == 1


def test_list_loaded_caps_scroll_depth(catalog, store, monkeypatch):
    calls = _count_store_calls(store, monkeypatch)

    with pytest.raises(ValidationError):
        catalog.list_loaded(MAX_LOADED_IMAGES // 60 + 1, 60)

    assert calls == {"count": 0, "find_page": 0}
