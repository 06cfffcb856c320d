"""
Data models for the Portuguese flashcards system.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import NamedTuple, Optional

from portuguese.constants import DEFAULT_EASE_FACTOR, MAX_CONFIDENCE, MIN_CONFIDENCE
from portuguese.exceptions import InvalidInput


class CardType(Enum):
    TRANSLATION = "translation"
    CONJUGATION = "conjugation"
    GRAMMAR = "grammar"
    FILL_BLANK = "fill-blank"


class Difficulty(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def level(self) -> int:
        return _DIFFICULTY_LEVELS[self]

    def __lt__(self, other):
        if not isinstance(other, Difficulty):
            return NotImplemented
        return self.level < other.level


_DIFFICULTY_LEVELS = {
    Difficulty.BEGINNER: 0,
    Difficulty.INTERMEDIATE: 1,
    Difficulty.ADVANCED: 2,
}


class SourceType(Enum):
    CORRECTION = "correction"
    VOCABULARY = "vocabulary"
    LESSON = "lesson"
    CUSTOM = "custom"


class SourceKey(NamedTuple):
    """Deduplication key for cards generated from an upstream record."""
    source_type: SourceType
    source_id: str


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Return an aware UTC datetime. Naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass
class Card:
    """A single review unit with its SM-2 scheduling state."""
    id: str
    front: str
    back: str
    card_type: CardType
    category: str
    difficulty: Difficulty
    source_type: SourceType
    next_review_date: datetime
    created_date: datetime
    source_id: Optional[str] = None
    hint: Optional[str] = None
    example_sentence: Optional[str] = None
    interval: int = 1
    ease_factor: float = DEFAULT_EASE_FACTOR
    review_count: int = 0
    last_reviewed: Optional[datetime] = None
    is_archived: bool = False

    @property
    def source_key(self) -> Optional[SourceKey]:
        """The (source_type, source_id) pair, or None for cards that never collide."""
        if self.source_type == SourceType.CUSTOM or self.source_id is None:
            return None
        return SourceKey(self.source_type, self.source_id)


def _require(data: dict, key: str, record_name: str):
    if key not in data or data[key] is None:
        raise InvalidInput(f"{record_name} is missing required field '{key}'")
    return data[key]


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch seconds into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    try:
        return as_utc(datetime.fromisoformat(str(value)))
    except ValueError as e:
        raise InvalidInput(f"Invalid timestamp {value!r}") from e


@dataclass
class CorrectionRecord:
    """A grammar correction produced upstream by the chat tutor."""
    id: str
    incorrect: str
    corrected: str
    explanation: str
    category: str
    difficulty: Difficulty
    timestamp: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> "CorrectionRecord":
        difficulty = _require(data, "difficulty", "Correction")
        try:
            difficulty = Difficulty(difficulty)
        except ValueError as e:
            raise InvalidInput(f"Correction has unknown difficulty {difficulty!r}") from e
        return cls(
            id=str(_require(data, "id", "Correction")),
            incorrect=_require(data, "incorrect", "Correction"),
            corrected=_require(data, "corrected", "Correction"),
            explanation=_require(data, "explanation", "Correction"),
            category=_require(data, "category", "Correction"),
            difficulty=difficulty,
            timestamp=parse_timestamp(data.get("timestamp")),
        )


@dataclass
class VocabItem:
    """A word the learner has looked up or practised."""
    word: str
    meaning: str
    confidence: float
    last_practiced: Optional[datetime] = None
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "VocabItem":
        confidence = _require(data, "confidence", "Vocabulary item")
        try:
            confidence = float(confidence)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Vocabulary item has non-numeric confidence {confidence!r}") from e
        if not MIN_CONFIDENCE <= confidence <= MAX_CONFIDENCE:
            raise InvalidInput(
                f"Vocabulary item confidence {confidence} is outside {MIN_CONFIDENCE}-{MAX_CONFIDENCE}"
            )
        return cls(
            word=_require(data, "word", "Vocabulary item"),
            meaning=_require(data, "meaning", "Vocabulary item"),
            confidence=confidence,
            last_practiced=parse_timestamp(data.get("lastPracticed")),
            source=data.get("source"),
        )
