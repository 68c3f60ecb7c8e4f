"""Versioned definition files on disk.

Layout under the definitions root:

    views/<name>_v<version>.sql
    views/<schema>/<name>_v<version>.sql
    functions/<name>_v<version>.sql
    functions/<schema>/<name>_v<version>.sql

A published version must never be edited; new behaviour gets a new file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .config import Settings
from .errors import DefinitionNotFound
from .models import ObjectKind, ObjectRef, VersionedDefinition, check_version
from .observability.logging import get_logger

logger = get_logger(__name__)

DEFINITION_SUFFIX = ".sql"


class DefinitionStore:
    """Read-only lookup of definition bodies by object and version."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DefinitionStore":
        return cls(settings.definitions_dir)

    def path_for(self, ref: ObjectRef, version: int) -> Path:
        """Return the file path for a version of an object."""
        directory = self.root / ref.kind.directory
        if ref.schema:
            directory = directory / ref.schema
        return directory / f"{ref.name}_v{version}{DEFINITION_SUFFIX}"

    def load(self, ref: ObjectRef, version: int) -> VersionedDefinition:
        """Read one version of an object's definition.

        Raises:
            DefinitionNotFound: If the file does not exist.
            InvalidOperation: If version is not a positive integer.
        """
        check_version("version", version)
        path = self.path_for(ref, version)
        try:
            body = path.read_text(encoding="utf-8")
        except (FileNotFoundError, NotADirectoryError):
            raise DefinitionNotFound(
                ref.kind.value, ref.name, version, ref.schema, path
            ) from None

        logger.debug(
            "definition loaded",
            extra={
                "extra_fields": {
                    "kind": ref.kind.value,
                    "name": ref.name,
                    "schema": ref.schema,
                    "version": version,
                    "path": str(path),
                }
            },
        )
        return VersionedDefinition(object=ref, version=version, body=body, path=path)

    def lookup(
        self,
        kind: ObjectKind | str,
        name: Any,
        version: int,
        schema: Any = None,
    ) -> str:
        """Return the SQL body for (kind, name, version, schema)."""
        return self.load(ObjectRef.of(kind, name, schema), version).body
