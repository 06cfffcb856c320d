"""
Database operations for the Portuguese flashcards system.

Uses SQLAlchemy ORM for database access. The public API uses the Card
dataclass from models.py, with conversion to/from ORM models handled internally.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Union

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from portuguese.db_engine import get_engine, get_session
from portuguese.exceptions import DuplicateSourceCollision
from portuguese.generator import GenerationResult, generate_cards
from portuguese.models import Card, CorrectionRecord, SourceType, VocabItem
from portuguese.orm_models import (
    Base,
    CardORM,
    apply_card_to_orm,
    card_dataclass_to_orm,
    card_orm_to_dataclass,
)
from util.logging_util import log_generation_result, setup_logger

logger = setup_logger(__name__)


def init_db():
    """Initialize the database schema."""
    engine = get_engine()
    Base.metadata.create_all(engine)


def load_cards() -> List[Card]:
    """Load every card, archived ones included, oldest first."""
    with get_session() as session:
        stmt = select(CardORM).order_by(CardORM.created_epoch.asc(), CardORM.id.asc())
        orms = session.execute(stmt).scalars().all()
        return [card_orm_to_dataclass(orm) for orm in orms]


def get_card(card_id: str) -> Optional[Card]:
    """Get a card by id."""
    with get_session() as session:
        orm = session.get(CardORM, card_id)
        if orm is None:
            return None
        return card_orm_to_dataclass(orm)


def get_card_by_source(source_type: SourceType, source_id: str) -> Optional[Card]:
    with get_session() as session:
        stmt = select(CardORM).where(
            CardORM.source_type == source_type.value,
            CardORM.source_id == source_id,
        )
        orm = session.execute(stmt).scalar_one_or_none()
        if orm is None:
            return None
        return card_orm_to_dataclass(orm)


def insert_card(card: Card):
    """Insert a new card.

    Raises DuplicateSourceCollision if a card for the same source exists; the
    stored card is left untouched.
    """
    key = card.source_key
    if key is not None and get_card_by_source(key.source_type, key.source_id) is not None:
        raise DuplicateSourceCollision(
            f"A card for {key.source_type.value} source {key.source_id!r} already exists"
        )
    try:
        with get_session() as session:
            session.add(card_dataclass_to_orm(card))
    except IntegrityError as e:
        raise DuplicateSourceCollision(f"Card {card.id} collides with a stored card") from e


def save_card(card: Card):
    """Write a card's current state, inserting it if it is not stored yet."""
    with get_session() as session:
        orm = session.get(CardORM, card.id)
        if orm is None:
            session.add(card_dataclass_to_orm(card))
        else:
            apply_card_to_orm(card, orm)


def merge_cards(cards: Iterable[Card]) -> int:
    """Upsert each card by id. Returns the number of cards written."""
    count = 0
    with get_session() as session:
        for card in cards:
            orm = session.get(CardORM, card.id)
            if orm is None:
                session.add(card_dataclass_to_orm(card))
            else:
                apply_card_to_orm(card, orm)
            count += 1
    logger.info(f"Merged {count} cards")
    return count


def replace_cards(cards: Iterable[Card]) -> int:
    """Replace the whole stored collection with the given cards."""
    orms = [card_dataclass_to_orm(card) for card in cards]
    with get_session() as session:
        session.execute(delete(CardORM))
        session.add_all(orms)
    logger.info(f"Replaced card collection with {len(orms)} cards")
    return len(orms)


def count_cards() -> int:
    """Count total number of cards."""
    with get_session() as session:
        return session.execute(select(func.count()).select_from(CardORM)).scalar_one()


def ingest_sources(
    corrections: Iterable[Union[CorrectionRecord, dict]] = (),
    vocabulary: Iterable[Union[VocabItem, dict]] = (),
    now: Optional[datetime] = None,
) -> GenerationResult:
    """Generate cards for new sources against the stored collection and save them."""
    result = generate_cards(corrections, vocabulary, load_cards(), now=now)

    with get_session() as session:
        session.add_all([card_dataclass_to_orm(card) for card in result.cards])

    log_generation_result(logger, result)
    return result
