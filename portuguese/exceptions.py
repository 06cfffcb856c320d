"""
Exceptions raised by the flashcard core.
"""


class FlashcardError(Exception):
    """Base exception for all flashcard errors."""
    pass


class InvalidInput(FlashcardError, ValueError):
    """Raised when a source record is missing a required field."""
    pass


class UnknownQuality(FlashcardError, ValueError):
    """Raised when a review rating is not one of again/hard/good/easy."""
    pass


class DuplicateSourceCollision(FlashcardError):
    """Raised when inserting a card whose source already has a card."""
    pass


class DuplicateCardId(FlashcardError, ValueError):
    """Raised when adding a card whose id is already taken."""
    pass


class InvalidSessionTransition(FlashcardError):
    """Raised when a review session action is not valid in its current state."""
    pass


class CardNotFound(FlashcardError, KeyError):
    """Raised when a card id is not present in the store."""
    pass
