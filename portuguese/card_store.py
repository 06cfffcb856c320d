"""
In-memory card collection for a single learner.

The store is fully materialised before reviews start; loading it from and
writing it back to durable storage is the caller's job (see database.py).
"""

import dataclasses
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Union

from portuguese.exceptions import CardNotFound, DuplicateCardId, DuplicateSourceCollision
from portuguese.generator import GenerationResult, generate_cards
from portuguese.models import Card, CorrectionRecord, SourceKey, SourceType, VocabItem


class CardStore:

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self._cards: Dict[str, Card] = {}
        self._by_source: Dict[SourceKey, str] = {}
        for card in cards or []:
            self.add(card)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards.values()))

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._cards

    def all(self) -> List[Card]:
        return list(self._cards.values())

    def get(self, card_id: str) -> Optional[Card]:
        return self._cards.get(card_id)

    def find_by_source(self, source_type: SourceType, source_id: str) -> Optional[Card]:
        card_id = self._by_source.get(SourceKey(source_type, source_id))
        if card_id is None:
            return None
        return self._cards[card_id]

    def add(self, card: Card) -> None:
        """Insert a card directly.

        Raises DuplicateSourceCollision if another card already owns the same
        source; the existing card is kept. Raises DuplicateCardId if the id
        is already taken.
        """
        key = card.source_key
        if key is not None and key in self._by_source:
            raise DuplicateSourceCollision(
                f"A card for {key.source_type.value} source {key.source_id!r} already exists "
                f"(id {self._by_source[key]})"
            )
        if card.id in self._cards:
            raise DuplicateCardId(f"A card with id {card.id} already exists")

        self._cards[card.id] = card
        if key is not None:
            self._by_source[key] = card.id

    def replace(self, card: Card) -> None:
        """Swap in the new state of an existing card, matched by id."""
        if card.id not in self._cards:
            raise CardNotFound(card.id)
        self._cards[card.id] = card

    def ingest(
        self,
        corrections: Iterable[Union[CorrectionRecord, dict]] = (),
        vocabulary: Iterable[Union[VocabItem, dict]] = (),
        now: Optional[datetime] = None,
    ) -> GenerationResult:
        """Generate cards for new sources and add them to the store."""
        result = generate_cards(corrections, vocabulary, self.all(), now=now)
        for card in result.cards:
            self.add(card)
        return result

    def archive_source(self, source_type: SourceType, source_id: str) -> Optional[Card]:
        """Archive the card generated from a source the learner removed.

        The card keeps its scheduling state and still owns the source, so the
        source is not regenerated.
        """
        card = self.find_by_source(source_type, source_id)
        if card is None or card.is_archived:
            return card
        archived = dataclasses.replace(card, is_archived=True)
        self._cards[card.id] = archived
        return archived
