"""
Construction of new flashcards from corrections, vocabulary and user input.

Every card starts from the same SM-2 defaults: interval 1, ease 2.5, no
reviews, and due one day after creation.
"""

from datetime import datetime, timedelta
from typing import Optional
import uuid

from portuguese.constants import (
    BEGINNER_MAX_CONFIDENCE,
    CORRECTION_HINT,
    DEFAULT_EASE_FACTOR,
    FIRST_INTERVAL_DAYS,
    INTERMEDIATE_MAX_CONFIDENCE,
    VOCABULARY_CATEGORY,
)
from portuguese.exceptions import InvalidInput
from portuguese.models import (
    Card,
    CardType,
    CorrectionRecord,
    Difficulty,
    SourceType,
    VocabItem,
    as_utc,
    utc_now,
)


def _check_present(record_name: str, **fields) -> None:
    for name, value in fields.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidInput(f"{record_name} is missing required field '{name}'")


def create_card(
    front: str,
    back: str,
    card_type: CardType,
    category: str,
    difficulty: Difficulty,
    source_type: SourceType,
    source_id: Optional[str] = None,
    hint: Optional[str] = None,
    example_sentence: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Card:
    """Create a new card with default scheduling state."""
    _check_present("Card", front=front, back=back)
    created = as_utc(now) if now is not None else utc_now()

    return Card(
        id=str(uuid.uuid4()),
        front=front,
        back=back,
        card_type=card_type,
        category=category,
        difficulty=difficulty,
        source_type=source_type,
        source_id=source_id,
        hint=hint,
        example_sentence=example_sentence,
        next_review_date=created + timedelta(days=1),
        interval=FIRST_INTERVAL_DAYS,
        ease_factor=DEFAULT_EASE_FACTOR,
        review_count=0,
        last_reviewed=None,
        created_date=created,
        is_archived=False,
    )


def difficulty_for_confidence(confidence: float) -> Difficulty:
    if confidence <= BEGINNER_MAX_CONFIDENCE:
        return Difficulty.BEGINNER
    elif confidence <= INTERMEDIATE_MAX_CONFIDENCE:
        return Difficulty.INTERMEDIATE
    else:
        return Difficulty.ADVANCED


def from_correction(correction: CorrectionRecord, now: Optional[datetime] = None) -> Card:
    """Create a grammar card asking the learner to fix their own sentence."""
    _check_present(
        "Correction",
        id=correction.id,
        incorrect=correction.incorrect,
        corrected=correction.corrected,
        explanation=correction.explanation,
        category=correction.category,
        difficulty=correction.difficulty,
    )

    front = f'Correct this sentence:\n"{correction.incorrect}"'
    back = f"{correction.corrected}\n\n📚 {correction.explanation}"

    return create_card(
        front,
        back,
        CardType.GRAMMAR,
        correction.category,
        correction.difficulty,
        SourceType.CORRECTION,
        source_id=str(correction.id),
        hint=CORRECTION_HINT,
        example_sentence=correction.corrected,
        now=now,
    )


def from_vocabulary(vocab_item: VocabItem, now: Optional[datetime] = None) -> Card:
    """Create an English to Portuguese translation card for a word."""
    _check_present(
        "Vocabulary item",
        word=vocab_item.word,
        meaning=vocab_item.meaning,
        confidence=vocab_item.confidence,
    )

    front = f'Como se diz em português?\n"{vocab_item.meaning}"'

    return create_card(
        front,
        vocab_item.word,
        CardType.TRANSLATION,
        VOCABULARY_CATEGORY,
        difficulty_for_confidence(vocab_item.confidence),
        SourceType.VOCABULARY,
        source_id=vocab_item.word,
        example_sentence=vocab_item.source,
        now=now,
    )


def from_custom(
    front: str,
    back: str,
    category: str,
    difficulty: Difficulty,
    hint: Optional[str] = None,
    card_type: CardType = CardType.GRAMMAR,
    now: Optional[datetime] = None,
) -> Card:
    """Create a user-authored card. Custom cards have no source and never collide."""
    return create_card(
        front,
        back,
        card_type,
        category,
        difficulty,
        SourceType.CUSTOM,
        hint=hint,
        now=now,
    )
