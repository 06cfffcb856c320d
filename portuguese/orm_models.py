"""
SQLAlchemy ORM models for the flashcard store.

These models are internal to the database layer. The public interface uses
the Card dataclass from models.py. Timestamps are kept as integer UTC epoch
seconds.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Float, Integer, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from portuguese.models import Card, CardType, Difficulty, SourceType, as_utc


class Base(DeclarativeBase):
    pass


class CardORM(Base):
    """SQLAlchemy model for the flashcards table."""

    __tablename__ = "flashcards"
    __table_args__ = (
        UniqueConstraint("source_type", "source_id", name="uq_flashcards_source"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    front: Mapped[str] = mapped_column(Text, nullable=False)
    back: Mapped[str] = mapped_column(Text, nullable=False)
    hint: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    example_sentence: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    card_type: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    difficulty: Mapped[str] = mapped_column(Text, nullable=False)
    source_type: Mapped[str] = mapped_column(Text, nullable=False)
    # NULL for custom cards; NULLs never collide in the unique constraint
    source_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    next_review_epoch: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    interval_days: Mapped[int] = mapped_column(Integer, default=1)
    ease_factor: Mapped[float] = mapped_column(Float, default=2.5)
    review_count: Mapped[int] = mapped_column(Integer, default=0)
    last_reviewed_epoch: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False)
    created_epoch: Mapped[int] = mapped_column(Integer, nullable=False)


def _to_epoch(moment: Optional[datetime]) -> Optional[int]:
    if moment is None:
        return None
    return int(as_utc(moment).timestamp())


def _from_epoch(epoch: Optional[int]) -> Optional[datetime]:
    if epoch is None:
        return None
    return datetime.fromtimestamp(epoch, tz=timezone.utc)


def card_orm_to_dataclass(orm: CardORM) -> Card:
    """Convert a CardORM row to a Card dataclass."""
    source_type = SourceType(orm.source_type)
    return Card(
        id=orm.id,
        front=orm.front,
        back=orm.back,
        hint=orm.hint,
        example_sentence=orm.example_sentence,
        card_type=CardType(orm.card_type),
        category=orm.category,
        difficulty=Difficulty(orm.difficulty),
        source_type=source_type,
        source_id=orm.source_id,
        next_review_date=_from_epoch(orm.next_review_epoch),
        interval=orm.interval_days or 1,
        ease_factor=orm.ease_factor if orm.ease_factor is not None else 2.5,
        review_count=orm.review_count or 0,
        last_reviewed=_from_epoch(orm.last_reviewed_epoch),
        is_archived=bool(orm.is_archived),
        created_date=_from_epoch(orm.created_epoch),
    )


def apply_card_to_orm(card: Card, orm: CardORM) -> CardORM:
    """Copy every mutable column from a Card onto an existing row."""
    orm.front = card.front
    orm.back = card.back
    orm.hint = card.hint
    orm.example_sentence = card.example_sentence
    orm.card_type = card.card_type.value
    orm.category = card.category
    orm.difficulty = card.difficulty.value
    orm.source_type = card.source_type.value
    orm.source_id = card.source_id if card.source_type != SourceType.CUSTOM else None
    orm.next_review_epoch = _to_epoch(card.next_review_date)
    orm.interval_days = card.interval
    orm.ease_factor = card.ease_factor
    orm.review_count = card.review_count
    orm.last_reviewed_epoch = _to_epoch(card.last_reviewed)
    orm.is_archived = card.is_archived
    orm.created_epoch = _to_epoch(card.created_date)
    return orm


def card_dataclass_to_orm(card: Card) -> CardORM:
    """Convert a Card dataclass to a new CardORM row."""
    return apply_card_to_orm(card, CardORM(id=card.id))
