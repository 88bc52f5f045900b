"""Add durations_computed_at to workouts.

Revision ID: 003
Revises: 002
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Existing workouts start as pending so the next scheduled pass covers them
    with op.batch_alter_table("workouts") as batch_op:
        batch_op.add_column(sa.Column("durations_computed_at", sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("workouts") as batch_op:
        batch_op.drop_column("durations_computed_at")
