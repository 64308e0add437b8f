"""Database configuration read from the environment.

``DATABASE_URL`` wins when set.  Otherwise the URL is assembled from
``PG_HOST``, ``PG_PORT``, ``PG_USER``, ``PG_PASSWORD`` and ``PG_DATABASE``
(the docker-compose defaults point at a local ``careplan`` database).

The same location is exposed with two drivers: psycopg2 for Alembic, which
migrates synchronously, and asyncpg for the application engine.
"""

import os

from sqlalchemy.engine import URL, make_url

SYNC_DRIVER = "postgresql+psycopg2"
ASYNC_DRIVER = "postgresql+asyncpg"


def _base_url() -> URL:
    raw = os.getenv("DATABASE_URL")
    if raw:
        return make_url(raw)
    return URL.create(
        "postgresql",
        username=os.getenv("PG_USER", "careplan"),
        password=os.getenv("PG_PASSWORD", "careplan"),
        host=os.getenv("PG_HOST", "localhost"),
        port=int(os.getenv("PG_PORT", "5432")),
        database=os.getenv("PG_DATABASE", "careplan"),
    )


def get_sync_url() -> str:
    """psycopg2 URL for Alembic."""
    url = _base_url().set(drivername=SYNC_DRIVER)
    return url.render_as_string(hide_password=False)


def get_async_url() -> str:
    """asyncpg URL for the runtime engine."""
    url = _base_url().set(drivername=ASYNC_DRIVER)
    return url.render_as_string(hide_password=False)
