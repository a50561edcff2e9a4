"""
Paragraph, sentence and syllable segmentation helpers.
"""

import re
from typing import List, Optional, Tuple

PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_TERMINATORS = ".!?"

# Terminal punctuation that is followed by whitespace or the end of text
_SENTENCE_END = re.compile(r"[.!?](?=\s|$)")
_TERMINATOR_SPLIT = re.compile(r"[.!?]")
_VOWELS = frozenset("aeiouy")

Span = Tuple[int, int]


def paragraph_spans(text: str) -> List[Span]:
    """Return (start, end) offsets of every blank-line separated segment."""
    spans = []
    pos = 0
    for segment in text.split(PARAGRAPH_SEPARATOR):
        spans.append((pos, pos + len(segment)))
        pos += len(segment) + len(PARAGRAPH_SEPARATOR)
    return spans


def split_paragraphs(text: str) -> List[str]:
    """Split on blank lines, dropping segments that are only whitespace."""
    return [p for p in text.split(PARAGRAPH_SEPARATOR) if p.strip()]


def _strip_span(text: str, start: int, end: int) -> Span:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


def sentence_spans(text: str, start: int = 0, end: Optional[int] = None) -> List[Span]:
    """
    Locate sentences inside text[start:end].

    A sentence ends at '.', '!' or '?' followed by whitespace or the end of
    the text. Trailing text without terminal punctuation forms the last
    sentence. Spans are stripped of surrounding whitespace and empty ones are
    dropped.
    """
    if end is None:
        end = len(text)
    spans = []
    cursor = start
    for match in _SENTENCE_END.finditer(text, start, end):
        s, e = _strip_span(text, cursor, match.end())
        if s < e:
            spans.append((s, e))
        cursor = match.end()
    s, e = _strip_span(text, cursor, end)
    if s < e:
        spans.append((s, e))
    return spans


def split_sentences(text: str) -> List[str]:
    """Split text into stripped sentences."""
    return [text[s:e] for s, e in sentence_spans(text)]


def split_on_terminators(text: str) -> List[str]:
    """Split on every '.', '!' or '?' and keep the non-blank pieces, stripped."""
    return [piece.strip() for piece in _TERMINATOR_SPLIT.split(text) if piece.strip()]


def count_sentence_marks(text: str) -> int:
    """Count terminal punctuation characters, floored at one."""
    return max(sum(1 for ch in text if ch in SENTENCE_TERMINATORS), 1)


def count_syllables(word: str) -> int:
    """
    Estimate syllables as the number of vowel groups.

    A trailing silent 'e' is discounted when the word has more than one
    group, and every word has at least one syllable.
    """
    word = word.lower()
    count = 0
    prev_vowel = False
    for ch in word:
        is_vowel = ch in _VOWELS
        if is_vowel and not prev_vowel:
            count += 1
        prev_vowel = is_vowel

    if word.endswith("e") and count > 1:
        count -= 1

    return max(count, 1)
