"""Create the animals table used by the sample views and functions.

Revision ID: 001_create_animals
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_create_animals"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE animals (
            id bigserial PRIMARY KEY,
            species varchar(255) NOT NULL,
            age integer NOT NULL,
            alive boolean NOT NULL,
            inserted_at timestamptz NOT NULL DEFAULT now(),
            updated_at timestamptz NOT NULL DEFAULT now()
        )
        """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS animals")
