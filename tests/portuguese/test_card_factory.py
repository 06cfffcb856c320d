"""Tests for building cards from corrections, vocabulary and user input."""

from datetime import datetime, timedelta, timezone

import pytest

from portuguese.card_factory import (
    create_card,
    difficulty_for_confidence,
    from_correction,
    from_custom,
    from_vocabulary,
)
from portuguese.exceptions import InvalidInput
from portuguese.models import (
    CardType,
    CorrectionRecord,
    Difficulty,
    SourceKey,
    SourceType,
    VocabItem,
)

NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def correction():
    return CorrectionRecord(
        id="corr-1",
        incorrect="Eu está cansado",
        corrected="Eu estou cansado",
        explanation="'Estar' conjugates to 'estou' in the first person.",
        category="Present Tense",
        difficulty=Difficulty.INTERMEDIATE,
        timestamp=NOW,
    )


@pytest.fixture
def vocab_item():
    return VocabItem(word="saudade", meaning="longing", confidence=65, source="song lyrics")


class TestDefaults:
    """Every new card starts from the same scheduling state."""

    def test_fresh_card_state(self):
        card = create_card(
            "front", "back", CardType.TRANSLATION, "Misc", Difficulty.BEGINNER,
            SourceType.LESSON, source_id="lesson-3", now=NOW,
        )

        assert card.interval == 1
        assert card.ease_factor == 2.5
        assert card.review_count == 0
        assert card.last_reviewed is None
        assert card.is_archived is False
        assert card.created_date == NOW
        assert card.next_review_date == NOW + timedelta(days=1)

    def test_ids_are_unique(self):
        a = from_custom("a", "b", "Misc", Difficulty.BEGINNER, now=NOW)
        b = from_custom("a", "b", "Misc", Difficulty.BEGINNER, now=NOW)

        assert a.id != b.id

    def test_blank_front_rejected(self):
        with pytest.raises(InvalidInput):
            create_card("  ", "back", CardType.GRAMMAR, "Misc", Difficulty.BEGINNER, SourceType.CUSTOM)


class TestFromCorrection:

    def test_content(self, correction):
        card = from_correction(correction, now=NOW)

        assert card.front == 'Correct this sentence:\n"Eu está cansado"'
        assert card.back.startswith("Eu estou cansado\n\n")
        assert correction.explanation in card.back
        assert card.card_type == CardType.GRAMMAR
        assert card.category == "Present Tense"
        assert card.difficulty == Difficulty.INTERMEDIATE
        assert card.hint == "Think about the grammar rule"
        assert card.example_sentence == "Eu estou cansado"

    def test_provenance(self, correction):
        card = from_correction(correction, now=NOW)

        assert card.source_type == SourceType.CORRECTION
        assert card.source_id == "corr-1"
        assert card.source_key == SourceKey(SourceType.CORRECTION, "corr-1")

    def test_missing_field_rejected(self, correction):
        correction.corrected = ""
        with pytest.raises(InvalidInput, match="corrected"):
            from_correction(correction)


class TestFromVocabulary:

    def test_content(self, vocab_item):
        card = from_vocabulary(vocab_item, now=NOW)

        assert card.front == 'Como se diz em português?\n"longing"'
        assert card.back == "saudade"
        assert card.card_type == CardType.TRANSLATION
        assert card.category == "Vocabulary"
        assert card.example_sentence == "song lyrics"
        assert card.source_type == SourceType.VOCABULARY
        assert card.source_id == "saudade"

    def test_source_id_keeps_case(self):
        card = from_vocabulary(VocabItem(word="Brasil", meaning="Brazil", confidence=90))

        assert card.source_id == "Brasil"
        assert card.difficulty == Difficulty.ADVANCED

    @pytest.mark.parametrize(
        "confidence,expected",
        [
            (0, Difficulty.BEGINNER),
            (50, Difficulty.BEGINNER),
            (50.5, Difficulty.INTERMEDIATE),
            (51, Difficulty.INTERMEDIATE),
            (80, Difficulty.INTERMEDIATE),
            (80.5, Difficulty.ADVANCED),
            (81, Difficulty.ADVANCED),
            (100, Difficulty.ADVANCED),
        ],
    )
    def test_difficulty_thresholds(self, confidence, expected):
        assert difficulty_for_confidence(confidence) == expected

    def test_missing_meaning_rejected(self):
        with pytest.raises(InvalidInput, match="meaning"):
            from_vocabulary(VocabItem(word="casa", meaning=None, confidence=10))


class TestFromCustom:

    def test_custom_card(self):
        card = from_custom("Olá", "Hello", "Greetings", Difficulty.BEGINNER, hint="informal", now=NOW)

        assert card.source_type == SourceType.CUSTOM
        assert card.source_id is None
        assert card.source_key is None
        assert card.card_type == CardType.GRAMMAR
        assert card.hint == "informal"
        assert card.next_review_date == NOW + timedelta(days=1)


class TestRecordParsing:
    """Source records arrive as JSON objects with the tutor app's field names."""

    def test_correction_from_dict(self):
        record = CorrectionRecord.from_dict({
            "id": 42,
            "incorrect": "Eu vai",
            "corrected": "Eu vou",
            "explanation": "Ir: eu vou",
            "category": "Verbs",
            "difficulty": "beginner",
            "timestamp": "2026-03-01T10:30:00.000Z",
        })

        assert record.id == "42"
        assert record.difficulty == Difficulty.BEGINNER
        assert record.timestamp == datetime(2026, 3, 1, 10, 30, tzinfo=timezone.utc)

    def test_correction_missing_key(self):
        with pytest.raises(InvalidInput, match="explanation"):
            CorrectionRecord.from_dict({
                "id": "x", "incorrect": "a", "corrected": "b",
                "category": "c", "difficulty": "beginner",
            })

    def test_correction_bad_difficulty(self):
        with pytest.raises(InvalidInput):
            CorrectionRecord.from_dict({
                "id": "x", "incorrect": "a", "corrected": "b", "explanation": "e",
                "category": "c", "difficulty": "expert",
            })

    def test_vocab_from_dict(self):
        item = VocabItem.from_dict({
            "word": "reunião",
            "meaning": "meeting",
            "confidence": "72",
            "lastPracticed": "2026-03-09T08:00:00+00:00",
        })

        assert item.confidence == 72
        assert item.last_practiced == datetime(2026, 3, 9, 8, 0, tzinfo=timezone.utc)
        assert item.source is None

    def test_vocab_missing_word(self):
        with pytest.raises(InvalidInput, match="word"):
            VocabItem.from_dict({"meaning": "meeting", "confidence": 10})

    def test_vocab_fractional_confidence_kept(self):
        item = VocabItem.from_dict({"word": "casa", "meaning": "house", "confidence": 50.5})

        assert item.confidence == 50.5
        assert from_vocabulary(item, now=NOW).difficulty == Difficulty.INTERMEDIATE

    @pytest.mark.parametrize("confidence", [-1, 100.5, 250])
    def test_vocab_confidence_out_of_range(self, confidence):
        with pytest.raises(InvalidInput, match="outside"):
            VocabItem.from_dict({"word": "casa", "meaning": "house", "confidence": confidence})
