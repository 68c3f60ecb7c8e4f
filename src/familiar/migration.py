"""Reversible Alembic migrations built from engine operations.

An Alembic revision describes its changes once, in forward order:

    from familiar.migration import reversible

    @reversible(definitions_dir=Path(__file__).resolve().parent.parent)
    def change(engine):
        engine.update_view("chickens", version=2, revert=1, materialized=True)
        engine.update_function("mix", version=2, revert=1)

    upgrade = change.upgrade
    downgrade = change.downgrade

upgrade() runs each operation's up statements in order. downgrade() runs
their down statements in reverse order, and refuses to run anything if one
of the operations was written without a revert version.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .config import load_settings
from .definitions import DefinitionStore
from .engine import MigrationEngine
from .executors import (
    PlanRecorder,
    StatementRunner,
    alembic_statement_runner,
    run_backward,
    run_forward,
)
from .models import DDLPlan
from .observability.revision import reset_revision, set_revision

ChangeBody = Callable[[MigrationEngine], None]


class ReversibleMigration:
    """A change() body that can be run forwards or backwards."""

    def __init__(
        self,
        body: ChangeBody,
        *,
        store: DefinitionStore | None = None,
        run_statement: StatementRunner | None = None,
        revision: str | None = None,
    ) -> None:
        self.body = body
        self._store = store
        self._run_statement = run_statement
        self.revision = revision or body.__module__

    @property
    def store(self) -> DefinitionStore:
        if self._store is None:
            self._store = DefinitionStore.from_settings(load_settings())
        return self._store

    def plans(self) -> list[DDLPlan]:
        """Plan every operation in the body without touching the database."""
        recorder = PlanRecorder()
        self.body(MigrationEngine(self.store, recorder))
        return recorder.plans

    def _runner(self) -> StatementRunner:
        return self._run_statement or alembic_statement_runner()

    def upgrade(self) -> None:
        token = set_revision(self.revision)
        try:
            run_forward(self.plans(), self._runner())
        finally:
            reset_revision(token)

    def downgrade(self) -> None:
        token = set_revision(self.revision)
        try:
            run_backward(self.plans(), self._runner())
        finally:
            reset_revision(token)


def reversible(
    definitions_dir: Path | str | None = None,
    *,
    run_statement: StatementRunner | None = None,
    revision: str | None = None,
) -> Callable[[ChangeBody], ReversibleMigration]:
    """Decorate a change(engine) body as a ReversibleMigration.

    Args:
        definitions_dir: Root holding views/ and functions/. Defaults to
            FAMILIAR_DEFINITIONS_DIR.
        run_statement: Statement runner; defaults to alembic.op.execute.
        revision: Revision id attached to log records while running.
    """
    store = DefinitionStore(definitions_dir) if definitions_dir is not None else None

    def decorate(body: ChangeBody) -> ReversibleMigration:
        return ReversibleMigration(
            body, store=store, run_statement=run_statement, revision=revision
        )

    return decorate
