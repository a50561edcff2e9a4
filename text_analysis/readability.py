"""
Classic readability formulas computed from word, sentence and syllable counts.
"""

from .models import ReadabilityScores
from .segmentation import count_sentence_marks, count_syllables

COMPLEX_WORD_SYLLABLES = 3


def calculate_readability(text: str) -> ReadabilityScores:
    """
    Compute Flesch Reading Ease, Flesch-Kincaid Grade, Gunning Fog and ARI.

    Reading ease is clamped to [0, 100]; the other scores are floored at 0.
    Empty text yields well-defined values rather than an error.
    """
    words = text.split()
    word_count = float(len(words))
    sentence_count = float(count_sentence_marks(text))
    syllables = [count_syllables(w) for w in words]
    syllable_count = float(sum(syllables))
    complex_words = float(sum(1 for s in syllables if s >= COMPLEX_WORD_SYLLABLES))
    char_count = float(len(text))

    words_per_sentence = word_count / sentence_count
    word_denominator = max(word_count, 1.0)

    flesch_reading_ease = (
        206.835
        - 1.015 * words_per_sentence
        - 84.6 * (syllable_count / word_denominator)
    )
    flesch_kincaid_grade = (
        0.39 * words_per_sentence
        + 11.8 * (syllable_count / word_denominator)
        - 15.59
    )
    gunning_fog = 0.4 * (words_per_sentence + 100.0 * (complex_words / word_denominator))
    automated_readability_index = (
        4.71 * (char_count / word_denominator)
        + 0.5 * words_per_sentence
        - 21.43
    )

    return ReadabilityScores(
        flesch_kincaid_grade=max(flesch_kincaid_grade, 0.0),
        flesch_reading_ease=min(max(flesch_reading_ease, 0.0), 100.0),
        gunning_fog=max(gunning_fog, 0.0),
        automated_readability_index=max(automated_readability_index, 0.0),
    )
