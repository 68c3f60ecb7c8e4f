"""Create the chickens materialized view (v1) and the mix function (v1).

Revision ID: 002_create_views
Revises: 001_create_animals
Create Date: 2026-10-18
"""

from __future__ import annotations

from pathlib import Path

from familiar.migration import reversible

revision = "002_create_views"
down_revision = "001_create_animals"
branch_labels = None
depends_on = None

_DEFINITIONS_DIR = Path(__file__).resolve().parent.parent


@reversible(_DEFINITIONS_DIR, revision=revision)
def change(engine) -> None:
    engine.create_view("chickens", version=1, materialized=True)
    engine.create_function("mix", version=1)


upgrade = change.upgrade
downgrade = change.downgrade
