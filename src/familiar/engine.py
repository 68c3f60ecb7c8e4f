"""Migration engine for versioned views and functions.

Each operation loads the definition versions it needs, builds a DDLPlan and
hands it to the executor once. Nothing is kept between calls; which version
is live is known only to the migration history.

    engine = MigrationEngine(DefinitionStore("db"), executor)
    engine.create_view("chickens", version=1)
    engine.update_view("chickens", version=2, revert=1)
    engine.drop_function("mix", revert=1)

update drops and recreates the object, so anything depending on it (other
views, functions, triggers) must be dropped first. replace uses CREATE OR
REPLACE and only works when columns or the function signature are unchanged;
neither condition is checked here.
"""

from __future__ import annotations

from typing import Any, Callable

from . import ddl
from .definitions import DefinitionStore
from .executors import StatementExecutor
from .models import DDLPlan, ObjectKind, ObjectRef, Operation, OperationSpec
from .observability.logging import get_logger

logger = get_logger(__name__)

# (kind, target, body, materialized) -> statements applying body to a live object
ApplyStrategy = Callable[[ObjectKind, str, str, bool], tuple[str, ...]]


def _drop_and_create(kind: ObjectKind, target: str, body: str, materialized: bool) -> tuple[str, ...]:
    return ddl.drop_and_create(kind, target, body, materialized=materialized)


def _create_or_replace(kind: ObjectKind, target: str, body: str, materialized: bool) -> tuple[str, ...]:
    return (ddl.create_sql(kind, target, body, or_replace=True),)


_STRATEGIES: dict[Operation, ApplyStrategy] = {
    Operation.UPDATE: _drop_and_create,
    Operation.REPLACE: _create_or_replace,
}


class MigrationEngine:
    """Plans and applies create/update/replace/drop for views and functions."""

    def __init__(self, store: DefinitionStore, executor: StatementExecutor) -> None:
        self.store = store
        self.executor = executor

    def plan(self, spec: OperationSpec) -> DDLPlan:
        """Build the plan for spec without executing it.

        All definition files are read before any SQL is built, so a missing
        version fails before the executor sees anything.

        Raises:
            InvalidOperation: If spec options are missing or inconsistent.
            DefinitionNotFound: If a requested version has no file.
        """
        spec.validate()
        ref = spec.object
        new_body = self.store.load(ref, spec.version).body if spec.version is not None else None
        old_body = self.store.load(ref, spec.revert).body if spec.revert is not None else None

        target = ddl.qualified_name(ref.name, ref.schema)
        materialized = spec.materialized

        if spec.operation is Operation.CREATE:
            return DDLPlan(
                up=(ddl.create_sql(ref.kind, target, new_body, materialized=materialized),),
                down=(ddl.drop_sql(ref.kind, target, materialized=materialized),),
            )

        if spec.operation is Operation.DROP:
            up = (ddl.drop_sql(ref.kind, target, materialized=materialized, if_exists=spec.if_exists),)
            if old_body is None:
                return DDLPlan(up=up)
            return DDLPlan(
                up=up,
                down=(ddl.create_sql(ref.kind, target, old_body, materialized=materialized),),
            )

        strategy = _STRATEGIES[spec.operation]
        up = strategy(ref.kind, target, new_body, materialized)
        if old_body is None:
            return DDLPlan(up=up)
        return DDLPlan(up=up, down=strategy(ref.kind, target, old_body, materialized))

    def apply(self, spec: OperationSpec) -> DDLPlan:
        """Plan spec and hand the plan to the executor."""
        plan = self.plan(spec)
        logger.info(
            "ddl plan built",
            extra={
                "extra_fields": {
                    "operation": spec.operation.value,
                    "kind": spec.object.kind.value,
                    "object": str(spec.object),
                    "version": spec.version,
                    "revert": spec.revert,
                    "materialized": spec.materialized,
                    "reversible": plan.reversible,
                }
            },
        )
        self.executor.execute(plan.up, plan.down)
        return plan

    def create(
        self,
        kind: ObjectKind | str,
        name: Any,
        *,
        version: int | None = None,
        materialized: bool = False,
        schema: Any = None,
    ) -> DDLPlan:
        """Create an object from a definition file; reversed by dropping it.

        Args:
            kind: "view" or "function".
            name: Object name.
            version: Version of the definition to create.
            materialized: Create a materialized view. Views only.
            schema: Schema to create the object in; default schema if None.
        """
        return self.apply(
            OperationSpec(
                operation=Operation.CREATE,
                object=ObjectRef.of(kind, name, schema),
                version=version,
                materialized=materialized,
            )
        )

    def update(
        self,
        kind: ObjectKind | str,
        name: Any,
        *,
        version: int | None = None,
        materialized: bool = False,
        revert: int | None = None,
        schema: Any = None,
    ) -> DDLPlan:
        """Drop the object and recreate it from a new version.

        Without revert the operation cannot be rolled back.
        """
        return self.apply(
            OperationSpec(
                operation=Operation.UPDATE,
                object=ObjectRef.of(kind, name, schema),
                version=version,
                revert=revert,
                materialized=materialized,
            )
        )

    def replace(
        self,
        kind: ObjectKind | str,
        name: Any,
        *,
        version: int | None = None,
        revert: int | None = None,
        schema: Any = None,
    ) -> DDLPlan:
        """CREATE OR REPLACE the object from a new version."""
        return self.apply(
            OperationSpec(
                operation=Operation.REPLACE,
                object=ObjectRef.of(kind, name, schema),
                version=version,
                revert=revert,
            )
        )

    def drop(
        self,
        kind: ObjectKind | str,
        name: Any,
        *,
        materialized: bool = False,
        revert: int | None = None,
        schema: Any = None,
        if_exists: bool = False,
    ) -> DDLPlan:
        """Drop the object; with revert, rolling back recreates that version."""
        return self.apply(
            OperationSpec(
                operation=Operation.DROP,
                object=ObjectRef.of(kind, name, schema),
                revert=revert,
                materialized=materialized,
                if_exists=if_exists,
            )
        )

    def create_view(self, name: Any, **opts: Any) -> DDLPlan:
        return self.create(ObjectKind.VIEW, name, **opts)

    def update_view(self, name: Any, **opts: Any) -> DDLPlan:
        return self.update(ObjectKind.VIEW, name, **opts)

    def replace_view(self, name: Any, **opts: Any) -> DDLPlan:
        return self.replace(ObjectKind.VIEW, name, **opts)

    def drop_view(self, name: Any, **opts: Any) -> DDLPlan:
        return self.drop(ObjectKind.VIEW, name, **opts)

    def create_function(self, name: Any, **opts: Any) -> DDLPlan:
        return self.create(ObjectKind.FUNCTION, name, **opts)

    def update_function(self, name: Any, **opts: Any) -> DDLPlan:
        return self.update(ObjectKind.FUNCTION, name, **opts)

    def replace_function(self, name: Any, **opts: Any) -> DDLPlan:
        return self.replace(ObjectKind.FUNCTION, name, **opts)

    def drop_function(self, name: Any, **opts: Any) -> DDLPlan:
        return self.drop(ObjectKind.FUNCTION, name, **opts)
