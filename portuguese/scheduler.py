"""
SM-2 spaced repetition scheduling.

Pure functions: nothing here mutates a card or touches storage. Review days
are UTC calendar days, both for stored due dates and for the "as of" date a
due-set is selected against.
"""

from dataclasses import replace
from datetime import date, datetime, timedelta
from enum import Enum
import math
from typing import Iterable, List, Optional, Union

from portuguese.constants import (
    FIRST_INTERVAL_DAYS,
    MAX_EASE_FACTOR,
    MIN_EASE_FACTOR,
    MIN_PASSING_QUALITY,
    SECOND_INTERVAL_DAYS,
)
from portuguese.exceptions import UnknownQuality
from portuguese.models import Card, as_utc, utc_now


class Quality(Enum):
    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


QUALITY_SCORES = {
    Quality.AGAIN: 0,
    Quality.HARD: 3,
    Quality.GOOD: 4,
    Quality.EASY: 5,
}


def parse_quality(value: Union[Quality, str]) -> Quality:
    """Convert a rating label to a Quality, failing on anything unrecognised."""
    if isinstance(value, Quality):
        return value
    if isinstance(value, str):
        try:
            return Quality(value.strip().lower())
        except ValueError:
            pass
    valid = ", ".join(q.value for q in Quality)
    raise UnknownQuality(f"Unknown review quality {value!r}, expected one of: {valid}")


def get_score_for_quality(quality: Union[Quality, str]) -> int:

    return QUALITY_SCORES[parse_quality(quality)]


def review_day(moment: Union[datetime, date]) -> date:
    """The UTC calendar day a moment falls on."""
    if isinstance(moment, datetime):
        return as_utc(moment).date()
    return moment


def is_due(card: Card, as_of: Union[datetime, date]) -> bool:

    if card.is_archived:
        return False
    return review_day(card.next_review_date) <= review_day(as_of)


def select_due(
    cards: Iterable[Card], as_of: Optional[Union[datetime, date]] = None
) -> List[Card]:
    """Get all active cards due on or before as_of, most overdue first."""
    if as_of is None:
        as_of = utc_now()
    due = [card for card in cards if is_due(card, as_of)]
    return sorted(due, key=lambda card: as_utc(card.next_review_date))


def get_due_count(
    cards: Iterable[Card], as_of: Optional[Union[datetime, date]] = None
) -> int:
    return len(select_due(cards, as_of))


def clamp_ease_factor(ease_factor: float) -> float:
    return min(MAX_EASE_FACTOR, max(MIN_EASE_FACTOR, ease_factor))


def get_new_ease_factor(ease_factor: float, score: int) -> float:
    """SM-2 ease update. Failed recalls leave the ease factor untouched."""
    if score < MIN_PASSING_QUALITY:
        return ease_factor

    lapse = 5 - score
    adjustment = 0.1 - lapse * (0.08 + lapse * 0.02)

    return clamp_ease_factor(ease_factor + adjustment)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_new_interval(interval: int, review_count: int, score: int, ease_factor: float) -> int:
    """Days until the next review.

    Args:
        interval: Current interval in days
        review_count: Successful reviews since the last reset
        score: Numeric quality score (0-5)
        ease_factor: The already-updated ease factor

    Returns:
        New interval in days, never less than 1 and never capped
    """
    if score < MIN_PASSING_QUALITY:
        return FIRST_INTERVAL_DAYS

    if review_count == 0:
        return FIRST_INTERVAL_DAYS
    elif review_count == 1:
        return SECOND_INTERVAL_DAYS
    else:
        return max(1, _round_half_up(interval * ease_factor))


def apply_review(
    card: Card, quality: Union[Quality, str], now: Optional[datetime] = None
) -> Card:
    """Return the card's next scheduling state after a review. The input card is left as is."""
    score = get_score_for_quality(quality)
    now = as_utc(now) if now is not None else utc_now()

    new_ease_factor = get_new_ease_factor(card.ease_factor, score)
    new_interval = get_new_interval(card.interval, card.review_count, score, new_ease_factor)

    if score >= MIN_PASSING_QUALITY:
        new_review_count = card.review_count + 1
    else:
        new_review_count = 0

    return replace(
        card,
        interval=new_interval,
        ease_factor=new_ease_factor,
        review_count=new_review_count,
        last_reviewed=now,
        next_review_date=now + timedelta(days=new_interval),
    )
