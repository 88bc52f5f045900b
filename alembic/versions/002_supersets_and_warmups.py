"""Add superset_id to sets and the warmups table.

Revision ID: 002
Revises: 001
Create Date: 2026-02-03

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("sets") as batch_op:
        batch_op.add_column(sa.Column("superset_id", sa.Uuid(), nullable=True))
        batch_op.create_index("ix_sets_superset_id", ["superset_id"], unique=False)

    op.create_table(
        "warmups",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("workout_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=100), nullable=False),
        sa.Column("duration_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("distance_meters", sa.Float(), nullable=True),
        sa.Column("avg_heart_rate", sa.Integer(), nullable=True),
        sa.Column(
            "difficulty",
            sa.Enum("Leicht", "Mittel", "Schwer", "Sehr schwer", name="difficulty", native_enum=False, length=20),
            nullable=True,
        ),
        sa.Column("calories", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["workout_id"], ["workouts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_warmups_workout_id"), "warmups", ["workout_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_warmups_workout_id"), table_name="warmups")
    op.drop_table("warmups")
    with op.batch_alter_table("sets") as batch_op:
        batch_op.drop_index("ix_sets_superset_id")
        batch_op.drop_column("superset_id")
