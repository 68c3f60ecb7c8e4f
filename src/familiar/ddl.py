"""DDL statement builders for versioned views and functions.

Names and bodies come from operator-authored migration files, not from
users, so they are interpolated directly. Identifiers always go through
quote_identifier() so keywords ("view") and mixed-case names survive.
"""

from __future__ import annotations

import re

from .models import ObjectKind

_TRAILING_TERMINATORS_RE = re.compile(r"[\s;]+\Z")


def quote_identifier(value: str) -> str:
    """Quote a PostgreSQL identifier, doubling embedded double quotes."""
    return '"' + value.replace('"', '""') + '"'


def qualified_name(name: str, schema: str | None = None) -> str:
    """Return "schema"."name" when a schema is given, else "name"."""
    if schema:
        return f"{quote_identifier(schema)}.{quote_identifier(name)}"
    return quote_identifier(name)


def normalize_body(body: str) -> str:
    """Strip trailing whitespace and semicolons so the body can be embedded."""
    return _TRAILING_TERMINATORS_RE.sub("", body)


def _kind_sql(kind: ObjectKind, materialized: bool) -> str:
    if materialized:
        return f"MATERIALIZED {kind.keyword}"
    return kind.keyword


def create_sql(
    kind: ObjectKind,
    target: str,
    body: str,
    *,
    materialized: bool = False,
    or_replace: bool = False,
) -> str:
    """CREATE [OR REPLACE] [MATERIALIZED] VIEW|FUNCTION for an already-quoted target.

    Views take "AS <body>"; a function body carries its own argument list,
    return type and language, so it follows the name directly.
    """
    verb = "CREATE OR REPLACE" if or_replace else "CREATE"
    body = normalize_body(body)
    if kind is ObjectKind.FUNCTION:
        return f"{verb} {kind.keyword} {target} {body}"
    return f"{verb} {_kind_sql(kind, materialized)} {target} AS {body}"


def drop_sql(
    kind: ObjectKind,
    target: str,
    *,
    materialized: bool = False,
    if_exists: bool = False,
) -> str:
    """DROP [MATERIALIZED] VIEW|FUNCTION [IF EXISTS] for an already-quoted target."""
    clause = " IF EXISTS" if if_exists else ""
    return f"DROP {_kind_sql(kind, materialized)}{clause} {target}"


def drop_and_create(
    kind: ObjectKind,
    target: str,
    body: str,
    *,
    materialized: bool = False,
) -> tuple[str, str]:
    return (
        drop_sql(kind, target, materialized=materialized),
        create_sql(kind, target, body, materialized=materialized),
    )
