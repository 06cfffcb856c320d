"""
Idempotent card generation from upstream learning events.

Given newly arrived corrections and vocabulary items plus the cards that
already exist, only cards for sources without a card are created. Running the
same batch again against the grown collection produces nothing.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Set, Union

from portuguese.card_factory import from_correction, from_vocabulary
from portuguese.exceptions import InvalidInput
from portuguese.models import (
    Card,
    CorrectionRecord,
    SourceKey,
    SourceType,
    VocabItem,
    utc_now,
)

GENERATED_SOURCE_TYPES = {SourceType.CORRECTION, SourceType.VOCABULARY}


@dataclass
class GenerationError:
    """A source record that could not be turned into a card."""
    source_type: SourceType
    index: int
    message: str


@dataclass
class GenerationResult:
    cards: List[Card] = field(default_factory=list)
    errors: List[GenerationError] = field(default_factory=list)


def existing_source_keys(cards: Iterable[Card]) -> Set[SourceKey]:
    """Keys of all correction and vocabulary cards, archived ones included."""
    return {
        card.source_key
        for card in cards
        if card.source_type in GENERATED_SOURCE_TYPES and card.source_key is not None
    }


def _to_correction(record: Union[CorrectionRecord, dict]) -> CorrectionRecord:
    if isinstance(record, dict):
        return CorrectionRecord.from_dict(record)
    if not isinstance(record, CorrectionRecord):
        raise InvalidInput(f"Correction must be a mapping, got {type(record).__name__}")
    return record


def _to_vocab_item(record: Union[VocabItem, dict]) -> VocabItem:
    if isinstance(record, dict):
        return VocabItem.from_dict(record)
    if not isinstance(record, VocabItem):
        raise InvalidInput(f"Vocabulary item must be a mapping, got {type(record).__name__}")
    return record


def generate_cards(
    corrections: Iterable[Union[CorrectionRecord, dict]],
    vocabulary: Iterable[Union[VocabItem, dict]],
    existing_cards: Iterable[Card],
    now: Optional[datetime] = None,
) -> GenerationResult:
    """Create cards for sources that have none yet.

    Correction cards come first, then vocabulary cards, each in input order.
    A malformed record is reported in the result's errors and skipped; the
    rest of the batch is still processed.
    """
    if now is None:
        now = utc_now()

    seen = existing_source_keys(existing_cards)
    result = GenerationResult()

    for index, record in enumerate(corrections):
        try:
            correction = _to_correction(record)
            if not correction.id:
                raise InvalidInput("Correction is missing required field 'id'")
            key = SourceKey(SourceType.CORRECTION, str(correction.id))
            if key in seen:
                continue
            card = from_correction(correction, now=now)
        except InvalidInput as e:
            result.errors.append(GenerationError(SourceType.CORRECTION, index, str(e)))
            continue
        seen.add(key)
        result.cards.append(card)

    for index, record in enumerate(vocabulary):
        try:
            vocab_item = _to_vocab_item(record)
            if not vocab_item.word:
                raise InvalidInput("Vocabulary item is missing required field 'word'")
            key = SourceKey(SourceType.VOCABULARY, vocab_item.word)
            if key in seen:
                continue
            card = from_vocabulary(vocab_item, now=now)
        except InvalidInput as e:
            result.errors.append(GenerationError(SourceType.VOCABULARY, index, str(e)))
            continue
        seen.add(key)
        result.cards.append(card)

    return result
