"""HTTP access to a settings store.

This package provides a small Flask application for inspecting and
editing a ``Settings`` instance over JSON.  It is an **optional** extra,
install with::

    pip install settings-store[web]

The ``create_app`` factory in ``app.py`` serves:

- ``GET /api/settings`` — every pair, in order.
- ``GET|PUT|DELETE /api/settings/<key>`` — one pair.
- ``POST /api/load`` and ``POST /api/save`` — the backing file.
"""
