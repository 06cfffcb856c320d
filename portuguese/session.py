"""
Interactive review session over a due-set snapshot.

The due-set is taken once when the session starts. Cards rescheduled while the
session runs never re-enter it; restart() takes a fresh snapshot.
"""

from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Union

from portuguese.card_store import CardStore
from portuguese.exceptions import InvalidSessionTransition
from portuguese.models import Card
from portuguese.scheduler import Quality, apply_review, parse_quality, select_due

ReviewCallback = Callable[[Card, Card, Quality], None]


class SessionState(Enum):
    NOT_STARTED = "not_started"
    FRONT_SHOWN = "front_shown"
    BACK_SHOWN = "back_shown"
    COMPLETE = "complete"


class ReviewSession:
    """Walks the learner through every due card: reveal, then rate.

    Args:
        store: The learner's cards. Rated cards are written back by id.
        on_review: Called with (old_card, new_card, quality) after each rating,
            before the next rating is accepted. Use it to persist the card.
    """

    def __init__(self, store: CardStore, on_review: Optional[ReviewCallback] = None):
        self.store = store
        self.on_review = on_review
        self.state = SessionState.NOT_STARTED
        self.reviewed_count = 0
        self._due: List[Card] = []
        self._position = 0

    @property
    def in_progress(self) -> bool:
        return self.state in (SessionState.FRONT_SHOWN, SessionState.BACK_SHOWN)

    @property
    def is_complete(self) -> bool:
        return self.state == SessionState.COMPLETE

    @property
    def total(self) -> int:
        return len(self._due)

    @property
    def position(self) -> int:
        """Zero-based index of the current card in the due-set."""
        return self._position

    @property
    def remaining(self) -> int:
        return self.total - self._position

    @property
    def progress(self) -> float:
        if self.total == 0:
            return 1.0 if self.is_complete else 0.0
        return self._position / self.total

    @property
    def current_card(self) -> Optional[Card]:
        if not self.in_progress:
            return None
        return self._due[self._position]

    @property
    def due_cards(self) -> List[Card]:
        return list(self._due)

    def _begin(self, now: Optional[datetime]) -> None:
        self._due = select_due(self.store.all(), now)
        self._position = 0
        self.reviewed_count = 0
        if self._due:
            self.state = SessionState.FRONT_SHOWN
        else:
            self.state = SessionState.COMPLETE

    def start(self, now: Optional[datetime] = None) -> SessionState:
        if self.state != SessionState.NOT_STARTED:
            raise InvalidSessionTransition(f"Cannot start a session that is {self.state.value}")
        self._begin(now)
        return self.state

    def reveal(self) -> Card:
        """Show the back of the current card. Revealing twice is a no-op."""
        if self.state == SessionState.BACK_SHOWN:
            return self.current_card
        if self.state != SessionState.FRONT_SHOWN:
            raise InvalidSessionTransition(f"Cannot reveal when session is {self.state.value}")
        self.state = SessionState.BACK_SHOWN
        return self.current_card

    def rate(self, quality: Union[Quality, str], now: Optional[datetime] = None) -> Card:
        """Rate the revealed card, store its new state and move on.

        on_review runs before the store is updated, so if it raises the store
        and the session are both left as they were. Returns the rescheduled card.
        """
        if self.state != SessionState.BACK_SHOWN:
            raise InvalidSessionTransition(
                f"Cannot rate when session is {self.state.value}; reveal the card first"
            )
        quality = parse_quality(quality)

        old_card = self.current_card
        new_card = apply_review(old_card, quality, now=now)
        if self.on_review is not None:
            self.on_review(old_card, new_card, quality)
        self.store.replace(new_card)

        self.reviewed_count += 1
        self._position += 1
        if self._position >= len(self._due):
            self.state = SessionState.COMPLETE
        else:
            self.state = SessionState.FRONT_SHOWN

        return new_card

    def restart(self, now: Optional[datetime] = None) -> SessionState:
        if self.state != SessionState.COMPLETE:
            raise InvalidSessionTransition(f"Cannot restart a session that is {self.state.value}")
        self._begin(now)
        return self.state
