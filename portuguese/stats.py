"""
Review statistics derived from a card collection.

The categories overlap (a card can be both learning and struggling) and are
recomputed on every call.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Union

from portuguese.constants import MASTERED_MIN_EASE, MASTERED_MIN_REVIEWS, STRUGGLING_MAX_EASE
from portuguese.models import Card
from portuguese.scheduler import select_due


@dataclass
class FlashcardStats:
    total: int
    due_today: int
    mastered: int
    learning: int
    struggling: int
    archived: int


def get_flashcard_stats(
    cards: Iterable[Card], as_of: Optional[Union[datetime, date]] = None
) -> FlashcardStats:
    cards = list(cards)
    active = [c for c in cards if not c.is_archived]

    return FlashcardStats(
        total=len(active),
        due_today=len(select_due(cards, as_of)),
        mastered=sum(
            1 for c in active
            if c.review_count >= MASTERED_MIN_REVIEWS and c.ease_factor >= MASTERED_MIN_EASE
        ),
        learning=sum(1 for c in active if c.review_count < MASTERED_MIN_REVIEWS),
        struggling=sum(1 for c in active if c.ease_factor < STRUGGLING_MAX_EASE),
        archived=len(cards) - len(active),
    )
