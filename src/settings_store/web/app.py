"""Flask application factory for the settings web API.

``create_app`` wraps a ``Settings`` store (a new empty one by default)
and, optionally, the path of the file it loads from and saves to.  If
that file already exists it is loaded at startup.

Responses are JSON.  Failures map to HTTP status codes: 404 for a
missing key, 400 for a rejected request, 500 when the file cannot be
read or written.
"""

from __future__ import annotations

import sys
from pathlib import Path

from flask import Flask, Response, jsonify, request

from settings_store.settings import Settings

_HTTP_NO_CONTENT = 204
_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404
_HTTP_SERVER_ERROR = 500

DEFAULT_SETTINGS_FILE = "settings.conf"


def create_app(settings: Settings | None = None, *, path: Path | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: The store to serve (a new empty store if None).
        path: Backing file for ``/api/load`` and ``/api/save``.

    Returns:
        A configured Flask application ready to serve.

    """
    store = settings if settings is not None else Settings()
    if path is not None and path.exists():
        store.load(path)

    app = Flask(__name__)
    app.extensions["settings_store"] = store

    @app.route("/api/settings")
    def list_settings() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return every pair in insertion order."""
        return jsonify({"settings": [{"key": k, "value": v} for k, v in store.items()]})

    @app.route("/api/settings/<path:key>")
    def get_setting(key: str) -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return one value, or 404 if the key is not set."""
        value = store.get_string(key)
        if value is None:
            return jsonify({"error": f"Key {key!r} not found"}), _HTTP_NOT_FOUND
        return jsonify({"key": key, "value": value})

    @app.route("/api/settings/<path:key>", methods=["PUT"])
    def put_setting(key: str) -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Insert or replace one value.

        Expects JSON body: ``{"value": "..."}``
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("value"), str):
            return jsonify({"error": "Missing string 'value' field"}), _HTTP_BAD_REQUEST
        value: str = data["value"]
        if not store.set_string(key, value):
            return jsonify({"error": f"Value for {key!r} was rejected"}), _HTTP_BAD_REQUEST
        return jsonify({"key": key, "value": value})

    @app.route("/api/settings/<path:key>", methods=["DELETE"])
    def delete_setting(key: str) -> tuple[Response, int] | tuple[str, int]:  # pyright: ignore[reportUnusedFunction]
        """Remove one key, or 404 if it is not set."""
        if not store.remove(key):
            return jsonify({"error": f"Key {key!r} not found"}), _HTTP_NOT_FOUND
        return "", _HTTP_NO_CONTENT

    @app.route("/api/load", methods=["POST"])
    def load() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Merge the backing file into the store."""
        if path is None:
            return jsonify({"error": "No settings file configured"}), _HTTP_BAD_REQUEST
        if not store.load(path):
            return jsonify({"error": f"Cannot load {str(path)!r}"}), _HTTP_SERVER_ERROR
        report = store.last_load
        assert report is not None  # noqa: S101
        return jsonify({"applied": report.applied, "skipped": report.skipped, "rejected": report.rejected})

    @app.route("/api/save", methods=["POST"])
    def save() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Write the store to the backing file."""
        if path is None:
            return jsonify({"error": "No settings file configured"}), _HTTP_BAD_REQUEST
        if not store.save(path):
            return jsonify({"error": f"Cannot save {str(path)!r}"}), _HTTP_SERVER_ERROR
        return jsonify({"saved": len(store)})

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``settings-store-web`` console entry point.  The first
    argument names the settings file (``settings.conf`` by default).
    """
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(DEFAULT_SETTINGS_FILE)
    app = create_app(path=path)
    app.run(debug=True, port=8080)
