"""
Constants for the Portuguese flashcards system.
"""

from pathlib import Path

MODULE_ROOT = Path(__file__).parent

DB_NAME = "portuguese_flashcards.db"

# SM-2 scheduling
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 2.5
MIN_PASSING_QUALITY = 3
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6

# Statistics thresholds
MASTERED_MIN_REVIEWS = 5
MASTERED_MIN_EASE = 2.5
STRUGGLING_MAX_EASE = 2.0

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100

# Confidence upper bounds for vocabulary difficulty
BEGINNER_MAX_CONFIDENCE = 50
INTERMEDIATE_MAX_CONFIDENCE = 80

VOCABULARY_CATEGORY = "Vocabulary"
CORRECTION_HINT = "Think about the grammar rule"
