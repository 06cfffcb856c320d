"""Initial flashcards schema

Revision ID: 001
Revises:
Create Date: 2026-10-16

Creates the flashcards table with a unique (source_type, source_id) pair so a
correction or vocabulary item can only ever own one card.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "flashcards",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("front", sa.Text(), nullable=False),
        sa.Column("back", sa.Text(), nullable=False),
        sa.Column("hint", sa.Text(), nullable=True),
        sa.Column("example_sentence", sa.Text(), nullable=True),
        sa.Column("card_type", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("difficulty", sa.Text(), nullable=False),
        sa.Column("source_type", sa.Text(), nullable=False),
        sa.Column("source_id", sa.Text(), nullable=True),
        sa.Column("next_review_epoch", sa.Integer(), nullable=False),
        sa.Column("interval_days", sa.Integer(), nullable=True, default=1),
        sa.Column("ease_factor", sa.Float(), nullable=True, default=2.5),
        sa.Column("review_count", sa.Integer(), nullable=True, default=0),
        sa.Column("last_reviewed_epoch", sa.Integer(), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=True, default=False),
        sa.Column("created_epoch", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("source_type", "source_id", name="uq_flashcards_source"),
    )
    op.create_index("ix_flashcards_next_review_epoch", "flashcards", ["next_review_epoch"])


def downgrade() -> None:
    op.drop_index("ix_flashcards_next_review_epoch", table_name="flashcards")
    op.drop_table("flashcards")
