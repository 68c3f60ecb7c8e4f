"""Errors raised by the definition store and the migration engine.

Database errors raised while executing generated DDL (psycopg2, SQLAlchemy)
are never wrapped here; they propagate to the surrounding migration.
"""

from __future__ import annotations

from pathlib import Path


class FamiliarError(Exception):
    """Base class for familiar errors."""

    pass


class DefinitionNotFound(FamiliarError, LookupError):
    """Raised when no definition file exists for the requested version."""

    def __init__(
        self,
        kind: str,
        name: str,
        version: int,
        schema: str | None = None,
        path: Path | None = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.version = version
        self.schema = schema
        self.path = path
        target = f"{schema}.{name}" if schema else name
        message = f"No {kind} definition for {target} version {version}"
        if path is not None:
            message += f" (looked for {path})"
        super().__init__(message)


class InvalidOperation(FamiliarError, ValueError):
    """Raised when an operation is called with options it cannot honour."""

    pass


class IrreversibleOperation(InvalidOperation):
    """Raised when a reverse run is requested for a plan without down statements."""

    pass
