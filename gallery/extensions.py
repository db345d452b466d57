"""Application-wide extension instances."""

import atexit

import pymongo
from flask_compress import Compress
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Compression for responses (Brotli and Gzip)
compress = Compress()

# Storage comes from RATELIMIT_STORAGE_URI; in-memory unless configured.
limiter = Limiter(key_func=get_remote_address)


class Mongo:
    """Owns the MongoClient for an application.

    Tests hand in a ready client (e.g. ``mongomock.MongoClient()``) through
    the ``MONGO_CLIENT`` config key; only a client built here is closed at
    interpreter exit.
    """

    def __init__(self):
        self.client = None
        self.db = None

    def init_app(self, app):
        client = app.config.get("MONGO_CLIENT")
        if client is None:
            client = pymongo.MongoClient(
                app.config["MONGODB_URI"],
                serverSelectionTimeoutMS=app.config.get(
                    "MONGODB_SERVER_SELECTION_TIMEOUT_MS", 5000
                ),
                tz_aware=True,
                appname="pinboard-gallery",
            )
            atexit.register(client.close)
        self.client = client
        self.db = client[app.config["MONGODB_DB_NAME"]]
        app.extensions["gallery_mongo"] = self
        return self

    def collection(self, name: str):
        return self.db[name]


__all__ = ["Mongo", "compress", "limiter"]
