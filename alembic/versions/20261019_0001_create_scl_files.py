# mypy: ignore-errors
"""
Migration Alembic pour créer la table scl_files.

Cette migration crée la table scl_files qui stocke une ligne par version de document SCL, avec la
contrainte d'unicité (type, id, version) sur laquelle repose la détection des écritures
concurrentes.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Crée la table scl_files, sa contrainte d'unicité et son index (type, id)."""
    op.create_table(
        "scl_files",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("scl_id", sa.String(length=36), nullable=False),
        sa.Column("scl_type", sa.String(length=3), nullable=False),
        sa.Column("major_version", sa.Integer(), nullable=False),
        sa.Column("minor_version", sa.Integer(), nullable=False),
        sa.Column("patch_version", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("scl_data", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "scl_type",
            "scl_id",
            "major_version",
            "minor_version",
            "patch_version",
            name="uq_scl_type_id_version",
        ),
    )
    op.create_index("ix_scl_files_type_id", "scl_files", ["scl_type", "scl_id"])


def downgrade() -> None:
    """Supprime l'index puis la table scl_files."""
    op.drop_index("ix_scl_files_type_id", table_name="scl_files")
    op.drop_table("scl_files")
