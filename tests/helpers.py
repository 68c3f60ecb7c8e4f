"""Shared test helper functions for familiar tests.

This module contains helper functions that can be imported by both conftest.py
and individual test files. These are NOT fixtures - they are regular functions.
"""

from __future__ import annotations

from pathlib import Path

CHICKENS_V1 = "SELECT * FROM animals WHERE species = 'chicken'"
CHICKENS_V2 = "SELECT * FROM animals WHERE species = 'chicken' AND alive = true"
MIX_V1 = "(a integer, b integer) RETURNS integer AS 'select $1 + $2;' LANGUAGE SQL IMMUTABLE"
MIX_V2 = "(a integer, b integer) RETURNS integer AS 'select $1 * $2;' LANGUAGE SQL IMMUTABLE"

# (relative path, body)
DEFINITION_FILES = [
    ("views/chickens_v1.sql", CHICKENS_V1 + ";\n"),
    ("views/chickens_v2.sql", CHICKENS_V2 + ";\n"),
    ("views/view_v1.sql", "SELECT species FROM animals\n"),
    ("views/bi/chicken_analytics_v1.sql", "SELECT count(*) AS total FROM public.animals;\n"),
    ("views/bi/chickens_v1.sql", "SELECT species FROM public.animals WHERE species = 'chicken'\n"),
    ("functions/mix_v1.sql", MIX_V1 + ";\n"),
    ("functions/mix_v2.sql", MIX_V2 + ";\n"),
    ("functions/bi/analytical_mix_v1.sql", MIX_V1 + "\n"),
]


def write_definitions(root: Path) -> Path:
    """Write the sample definition tree under root and return root."""
    for relative, body in DEFINITION_FILES:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
    return root


class StatementLog:
    """Statement runner that records every statement it is given."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def __call__(self, sql: str) -> None:
        self.statements.append(sql)
