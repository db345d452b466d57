"""WSGI entry-point for gunicorn deployments."""

import os

from gallery import create_app

os.environ.setdefault("FLASK_APP", "gallery:create_app")

app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=False)
