"""
Basic document statistics.
"""

from typing import NamedTuple

from .segmentation import count_sentence_marks, split_paragraphs


class TextStats(NamedTuple):
    word_count: int
    sentence_count: int
    paragraph_count: int
    char_count: int
    avg_sentence_length: float
    avg_word_length: float


def calculate_stats(text: str) -> TextStats:
    """
    Count words, sentences, paragraphs and characters.

    Sentences are counted as terminal punctuation marks and paragraphs as
    non-blank blank-line separated segments; both are floored at one so the
    averages never divide by zero.
    """
    words = text.split()
    word_count = len(words)
    sentence_count = count_sentence_marks(text)
    paragraph_count = max(len(split_paragraphs(text)), 1)

    avg_sentence_length = word_count / sentence_count
    avg_word_length = sum(len(w) for w in words) / word_count if word_count else 0.0

    return TextStats(
        word_count=word_count,
        sentence_count=sentence_count,
        paragraph_count=paragraph_count,
        char_count=len(text),
        avg_sentence_length=avg_sentence_length,
        avg_word_length=avg_word_length,
    )
