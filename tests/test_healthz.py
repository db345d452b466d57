import mongomock
import pytest

from gallery import create_app
from gallery.errors import StorageError


@pytest.fixture()
def app(tmp_path):
    return create_app(
        {
            "TESTING": True,
            "MONGO_CLIENT": mongomock.MongoClient(),
            "MONGODB_ENSURE_INDEXES": False,
            "SEED_SAMPLE_IMAGES": True,
            "CLOUDINARY_CLOUD_NAME": "demo",
            "CLOUDINARY_API_KEY": "1234",
            "CLOUDINARY_API_SECRET": "top-secret",
            "LOG_DIR": str(tmp_path / "logs"),
        }
    )


def test_healthz(app):
    response = app.test_client().get("/healthz")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["ok"] is True
    assert "uptime_seconds" in payload
    assert payload["database"] == {"online": True, "images": 12}
    assert payload["media_host"] == {"configured": True}


def test_healthz_reports_database_outage(app, monkeypatch):
    store = app.extensions["gallery_catalog"].store

    def down():
        raise StorageError("Failed to ping the database")

    monkeypatch.setattr(store, "ping", down)

    response = app.test_client().get("/healthz")

    assert response.status_code == 503
    payload = response.get_json()
    assert payload["ok"] is False
    assert payload["database"]["online"] is False


def test_boot_survives_unreachable_database(tmp_path, monkeypatch):
    from gallery.services.catalog_store import MongoImageStore

    def down(self, query=None):
        raise StorageError("Failed to count images")

    monkeypatch.setattr(MongoImageStore, "count", down)

    app = create_app(
        {
            "TESTING": True,
            "MONGO_CLIENT": mongomock.MongoClient(),
            "MONGODB_ENSURE_INDEXES": False,
            "SEED_SAMPLE_IMAGES": True,
            "LOG_DIR": str(tmp_path / "logs"),
        }
    )

    assert app.extensions["gallery_catalog"] is not None
