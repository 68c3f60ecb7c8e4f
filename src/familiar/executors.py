"""Statement executors: the seam between planned DDL and a database.

The engine calls StatementExecutor.execute(up, down) exactly once per
operation. Executors decide whether to run the up statements now, the down
statements now (rolling back), or to record the plan for later.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol, Sequence

from sqlalchemy import DDL

from . import db
from .errors import IrreversibleOperation
from .models import DDLPlan
from .observability.logging import get_logger

logger = get_logger(__name__)

StatementRunner = Callable[[str], None]


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


class StatementExecutor(Protocol):
    def execute(self, up: Sequence[str], down: Sequence[str] | None = None) -> None:
        ...


def _run_all(statements: Sequence[str], run_statement: StatementRunner, direction: Direction) -> None:
    for index, sql in enumerate(statements):
        logger.debug(
            "executing statement",
            extra={"extra_fields": {"direction": direction.value, "index": index, "sql": sql}},
        )
        run_statement(sql)


class DirectionalExecutor:
    """Runs one side of each plan immediately.

    Direction.UP runs the up statements; Direction.DOWN runs the down
    statements and refuses plans that have none.

    Plans run in the order the engine is called, in both directions. To roll
    back several operations, record them with PlanRecorder and use
    run_backward(), which undoes them last-first.
    """

    def __init__(self, run_statement: StatementRunner, direction: Direction = Direction.UP) -> None:
        self.run_statement = run_statement
        self.direction = Direction(direction)

    def execute(self, up: Sequence[str], down: Sequence[str] | None = None) -> None:
        if self.direction is Direction.UP:
            _run_all(up, self.run_statement, self.direction)
            return
        if down is None:
            raise IrreversibleOperation(
                "Cannot roll back an operation that was planned without a revert version"
            )
        _run_all(down, self.run_statement, self.direction)


class PlanRecorder:
    """Collects plans without running anything."""

    def __init__(self) -> None:
        self.plans: list[DDLPlan] = []

    def execute(self, up: Sequence[str], down: Sequence[str] | None = None) -> None:
        self.plans.append(DDLPlan(up=tuple(up), down=None if down is None else tuple(down)))


def run_forward(plans: Sequence[DDLPlan], run_statement: StatementRunner) -> None:
    """Run every plan's up statements, in plan order."""
    for plan in plans:
        _run_all(plan.up, run_statement, Direction.UP)


def run_backward(plans: Sequence[DDLPlan], run_statement: StatementRunner) -> None:
    """Undo plans: down statements in reverse plan order.

    Every plan is checked before any statement runs, so an irreversible
    plan anywhere in the list means nothing is executed.
    """
    for index, plan in enumerate(plans):
        if not plan.reversible:
            raise IrreversibleOperation(
                f"Operation {index} was planned without a revert version: {plan.up[-1]}"
            )
    for plan in reversed(plans):
        _run_all(plan.down, run_statement, Direction.DOWN)


def as_ddl(sql: str) -> DDL:
    """Wrap a statement so SQLAlchemy never parses ":name" bind parameters in it.

    DDL applies %-formatting to its text, so literal % signs are doubled.
    """
    return DDL(sql.replace("%", "%%"))


def alembic_statement_runner() -> StatementRunner:
    """Run statements through alembic.op (honours --sql offline mode)."""
    from alembic import op

    def run(sql: str) -> None:
        op.execute(as_ddl(sql))

    return run


def cursor_statement_runner(cur) -> StatementRunner:
    """Run statements on an open psycopg2 cursor."""

    def run(sql: str) -> None:
        db.execute(cur, sql)

    return run
