"""Runtime configuration for familiar.

Settings are read from the environment once and passed explicitly to the
definition store and executors:

- FAMILIAR_DEFINITIONS_DIR: directory holding views/ and functions/
  (default "db", relative to the working directory).
- DATABASE_URL: PostgreSQL URL (psycopg2 also accepts a libpq DSN).
- DB_PASSWORD: optional password injected by sqlalchemy_url() when
  DATABASE_URL has none (get_conn() passes DATABASE_URL through as is).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote_plus, urlparse, urlunparse

DEFAULT_DEFINITIONS_DIR = "db"


@dataclass(frozen=True)
class Settings:
    """Explicit configuration for the definition store and database access.

    Attributes:
        definitions_dir: Root directory of versioned definition files.
        database_url: Raw DATABASE_URL value, if set.
    """

    definitions_dir: Path
    database_url: str | None = None

    def require_database_url(self) -> str:
        """Return DATABASE_URL or fail loudly."""
        if not self.database_url:
            raise RuntimeError("DATABASE_URL is required to run migrations")
        return self.database_url


def load_settings() -> Settings:
    """Build Settings from environment variables."""
    definitions_dir = os.environ.get("FAMILIAR_DEFINITIONS_DIR") or DEFAULT_DEFINITIONS_DIR
    return Settings(
        definitions_dir=Path(definitions_dir),
        database_url=os.environ.get("DATABASE_URL") or None,
    )


def sqlalchemy_url(settings: Settings) -> str:
    """Return DATABASE_URL as a SQLAlchemy URL using the psycopg2 driver.

    Raises:
        RuntimeError: If DATABASE_URL is not set or is not a URL.
    """
    url = settings.require_database_url()
    if "://" not in url:
        raise RuntimeError("DATABASE_URL must be a postgresql:// URL for migrations")

    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = "postgresql+psycopg2://" + url[len("postgresql://"):]

    db_password = os.environ.get("DB_PASSWORD", "")
    if db_password:
        parsed = urlparse(url)
        if not parsed.password:
            netloc = f"{quote_plus(parsed.username or '')}:{quote_plus(db_password)}@{parsed.hostname}"
            if parsed.port:
                netloc += f":{parsed.port}"
            url = urlunparse(parsed._replace(netloc=netloc))
    return url
