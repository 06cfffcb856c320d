"""Tests for idempotent card generation from source events."""

from dataclasses import replace
from datetime import datetime, timezone

from portuguese.card_factory import from_custom, from_vocabulary
from portuguese.generator import existing_source_keys, generate_cards
from portuguese.models import (
    CorrectionRecord,
    Difficulty,
    SourceKey,
    SourceType,
    VocabItem,
)

NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def make_correction(correction_id: str) -> CorrectionRecord:
    return CorrectionRecord(
        id=correction_id,
        incorrect="Ela são feliz",
        corrected="Ela é feliz",
        explanation="Third person singular of 'ser' is 'é'.",
        category="Ser vs Estar",
        difficulty=Difficulty.BEGINNER,
    )


def make_vocab(word: str, confidence: int = 30) -> VocabItem:
    return VocabItem(word=word, meaning=f"meaning of {word}", confidence=confidence)


class TestGenerateCards:

    def test_creates_one_card_per_new_source(self):
        result = generate_cards(
            [make_correction("c1"), make_correction("c2")],
            [make_vocab("casa"), make_vocab("gato")],
            [],
            now=NOW,
        )

        assert result.errors == []
        assert [c.source_id for c in result.cards] == ["c1", "c2", "casa", "gato"]
        assert [c.source_type for c in result.cards] == [
            SourceType.CORRECTION,
            SourceType.CORRECTION,
            SourceType.VOCABULARY,
            SourceType.VOCABULARY,
        ]

    def test_skips_existing_sources(self):
        existing = [from_vocabulary(make_vocab("casa"), now=NOW)]

        result = generate_cards([make_correction("c1")], [make_vocab("casa"), make_vocab("rua")], existing)

        assert [c.source_id for c in result.cards] == ["c1", "rua"]

    def test_idempotent(self):
        corrections = [make_correction("c1"), make_correction("c2")]
        vocabulary = [make_vocab("casa"), make_vocab("rua")]
        existing = [from_custom("Oi", "Hi", "Greetings", Difficulty.BEGINNER)]

        first = generate_cards(corrections, vocabulary, existing, now=NOW)
        grown = existing + first.cards
        second = generate_cards(corrections, vocabulary, grown, now=NOW)

        assert len(first.cards) == 4
        assert second.cards == []
        assert second.errors == []

    def test_archived_card_still_owns_source(self):
        archived = replace(from_vocabulary(make_vocab("casa")), is_archived=True)

        result = generate_cards([], [make_vocab("casa")], [archived])

        assert result.cards == []

    def test_repeated_source_in_batch_yields_one_card(self):
        result = generate_cards(
            [make_correction("c1"), make_correction("c1")],
            [make_vocab("casa"), make_vocab("casa", confidence=90)],
            [],
        )

        assert [c.source_id for c in result.cards] == ["c1", "casa"]

    def test_same_id_across_source_types_does_not_collide(self):
        existing = [from_vocabulary(make_vocab("42"))]

        result = generate_cards([make_correction("42")], [], existing)

        assert len(result.cards) == 1
        assert result.cards[0].source_key == SourceKey(SourceType.CORRECTION, "42")

    def test_vocabulary_key_is_case_sensitive(self):
        existing = [from_vocabulary(make_vocab("Casa"))]

        result = generate_cards([], [make_vocab("casa")], existing)

        assert [c.source_id for c in result.cards] == ["casa"]

    def test_bad_record_does_not_abort_batch(self):
        broken = make_correction("c2")
        broken.incorrect = ""

        result = generate_cards(
            [make_correction("c1"), broken, {"id": "c3"}, make_correction("c4")],
            [{"word": "casa", "meaning": "house", "confidence": 20}, {"meaning": "no word"}],
            [],
        )

        assert [c.source_id for c in result.cards] == ["c1", "c4", "casa"]
        assert [(e.source_type, e.index) for e in result.errors] == [
            (SourceType.CORRECTION, 1),
            (SourceType.CORRECTION, 2),
            (SourceType.VOCABULARY, 1),
        ]
        assert "incorrect" in result.errors[0].message

    def test_non_mapping_records_reported(self):
        result = generate_cards(
            [None],
            ["oops", {"word": "casa", "meaning": "house", "confidence": 20}],
            [],
            now=NOW,
        )

        assert [c.source_id for c in result.cards] == ["casa"]
        assert [(e.source_type, e.index) for e in result.errors] == [
            (SourceType.CORRECTION, 0),
            (SourceType.VOCABULARY, 0),
        ]
        assert "NoneType" in result.errors[0].message
        assert "str" in result.errors[1].message

    def test_rejected_record_can_be_fixed_later(self):
        broken = make_correction("c1")
        broken.explanation = None

        first = generate_cards([broken], [], [])
        second = generate_cards([make_correction("c1")], [], first.cards)

        assert first.cards == []
        assert len(second.cards) == 1


def test_existing_source_keys_ignores_custom_cards():
    cards = [
        from_custom("Oi", "Hi", "Greetings", Difficulty.BEGINNER),
        from_vocabulary(make_vocab("casa")),
    ]

    assert existing_source_keys(cards) == {SourceKey(SourceType.VOCABULARY, "casa")}
