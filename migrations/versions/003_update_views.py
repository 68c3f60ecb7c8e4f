"""Update chickens to v2 (alive only) and mix to v2 (product).

Both revert to v1 on downgrade.

Revision ID: 003_update_views
Revises: 002_create_views
Create Date: 2026-10-18
"""

from __future__ import annotations

from pathlib import Path

from familiar.migration import reversible

revision = "003_update_views"
down_revision = "002_create_views"
branch_labels = None
depends_on = None

_DEFINITIONS_DIR = Path(__file__).resolve().parent.parent


@reversible(_DEFINITIONS_DIR, revision=revision)
def change(engine) -> None:
    engine.update_view("chickens", version=2, revert=1, materialized=True)
    engine.update_function("mix", version=2, revert=1)


upgrade = change.upgrade
downgrade = change.downgrade
