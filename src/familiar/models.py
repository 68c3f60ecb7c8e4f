"""Value types shared by the definition store, DDL builders and engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import InvalidOperation


class ObjectKind(str, Enum):
    """Kind of versioned database object."""

    VIEW = "view"
    FUNCTION = "function"

    @property
    def directory(self) -> str:
        """Directory under the definitions root holding this kind."""
        return f"{self.value}s"

    @property
    def keyword(self) -> str:
        return self.value.upper()

    @classmethod
    def parse(cls, value: "ObjectKind | str") -> "ObjectKind":
        """Accept an ObjectKind or its name ("view", "FUNCTION", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidOperation(
                f"Unknown object kind {value!r}; expected 'view' or 'function'"
            ) from None


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DROP = "drop"


def _check_segment(label: str, value: str) -> None:
    if not value:
        raise InvalidOperation(f"{label} must not be empty")
    if "/" in value or "\\" in value or "\x00" in value or value in (".", ".."):
        raise InvalidOperation(f"Invalid {label} {value!r}")


def check_version(label: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidOperation(f"{label} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class ObjectRef:
    """A named view or function, optionally in a non-default schema.

    Attributes:
        kind: View or function.
        name: Object name; also the file name stem on disk.
        schema: Schema name; also a subdirectory on disk.
    """

    kind: ObjectKind
    name: str
    schema: str | None = None

    def __post_init__(self) -> None:
        _check_segment("name", self.name)
        if self.schema is not None:
            _check_segment("schema", self.schema)

    @classmethod
    def of(cls, kind: "ObjectKind | str", name: Any, schema: Any = None) -> "ObjectRef":
        """Build a ref, normalising names given as enum members or other objects."""
        return cls(
            kind=ObjectKind.parse(kind),
            name=str(name),
            schema=None if schema is None else str(schema),
        )

    def __str__(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


@dataclass(frozen=True)
class VersionedDefinition:
    """One immutable version of an object's SQL body, as read from disk."""

    object: ObjectRef
    version: int
    body: str
    path: Path | None = None


@dataclass(frozen=True)
class OperationSpec:
    """One invocation of create/update/replace/drop against one object.

    Attributes:
        operation: Which operation to plan.
        object: Target object.
        version: Version to create or switch to (create/update/replace).
        revert: Version to restore when the migration is rolled back.
        materialized: Views only; use MATERIALIZED VIEW statements.
        if_exists: Drop only; emit DROP ... IF EXISTS.
    """

    operation: Operation
    object: ObjectRef
    version: int | None = None
    revert: int | None = None
    materialized: bool = False
    if_exists: bool = False

    def validate(self) -> None:
        """Raise InvalidOperation if the options cannot produce a plan."""
        op = self.operation
        if op is Operation.DROP and self.version is not None:
            raise InvalidOperation("drop takes revert, not version")
        if op is Operation.CREATE and self.revert is not None:
            raise InvalidOperation("create is always reverted by dropping; revert is not accepted")
        if op is not Operation.DROP:
            if self.version is None:
                raise InvalidOperation(f"{op.value} {self.object.kind.value} {self.object} requires a version")
            check_version("version", self.version)
        if self.revert is not None:
            check_version("revert", self.revert)
        if self.materialized:
            if self.object.kind is ObjectKind.FUNCTION:
                raise InvalidOperation("materialized is only supported for views")
            if op is Operation.REPLACE:
                raise InvalidOperation("materialized views cannot be replaced; use update")
        if self.if_exists and op is not Operation.DROP:
            raise InvalidOperation("if_exists is only supported for drop")


@dataclass(frozen=True)
class DDLPlan:
    """Ordered statements for one operation.

    down is None when the operation cannot be reversed (no revert version).
    """

    up: tuple[str, ...]
    down: tuple[str, ...] | None = None

    @property
    def reversible(self) -> bool:
        return self.down is not None
