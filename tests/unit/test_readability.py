"""
Unit tests for readability scoring.
"""

import pytest

from text_analysis.readability import calculate_readability


class TestCalculateReadability:
    """Test suite for calculate_readability."""

    @pytest.mark.unit
    def test_simple_sentence(self):
        scores = calculate_readability("The quick brown fox jumps over the lazy dog.")
        # 9 words, 1 sentence, 11 syllables
        assert scores.flesch_reading_ease == pytest.approx(94.3)
        assert scores.flesch_kincaid_grade == pytest.approx(0.39 * 9 + 11.8 * 11 / 9 - 15.59)

    @pytest.mark.unit
    def test_complex_sentence(self):
        text = "Understanding comprehensive documentation requires considerable concentration."
        scores = calculate_readability(text)
        # 6 words, 1 sentence, 24 syllables, 6 complex words
        assert scores.flesch_reading_ease == 0.0
        assert scores.flesch_kincaid_grade == pytest.approx(33.95)
        assert scores.gunning_fog == pytest.approx(42.4)
        expected_ari = 4.71 * (len(text) / 6) + 0.5 * 6 - 21.43
        assert scores.automated_readability_index == pytest.approx(expected_ari)

    @pytest.mark.unit
    def test_empty_text(self):
        scores = calculate_readability("")
        assert scores.flesch_reading_ease == 100.0
        assert scores.flesch_kincaid_grade == 0.0
        assert scores.gunning_fog == 0.0
        assert scores.automated_readability_index == 0.0

    @pytest.mark.unit
    @pytest.mark.parametrize("text", [
        "",
        "a",
        "a " * 200,
        "Incomprehensibilities " * 50,
        "!!!???...",
        "Supercalifragilisticexpialidocious.",
    ])
    def test_reading_ease_clamped(self, text):
        scores = calculate_readability(text)
        assert 0.0 <= scores.flesch_reading_ease <= 100.0
        assert scores.flesch_kincaid_grade >= 0.0
        assert scores.gunning_fog >= 0.0
        assert scores.automated_readability_index >= 0.0
