"""
Frequency-based keyword extraction.
"""

import math
from collections import Counter
from typing import List

from .models import KeywordScore

MIN_KEYWORD_LENGTH = 3

# English only, whatever language the text was detected as
STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
    "be", "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "this", "that",
    "these", "those", "i", "you", "he", "she", "it", "we", "they", "what",
    "which", "who", "whom", "its", "his", "her", "their", "my", "your", "our",
})


def _clean_token(token: str) -> str:
    return "".join(ch for ch in token.lower() if ch.isalnum())


def extract_keywords(text: str, limit: int) -> List[KeywordScore]:
    """
    Score keywords by weighted term frequency.

    Each whitespace token is lowercased and stripped of non-alphanumeric
    characters; tokens shorter than three characters or in STOP_WORDS are
    discarded. Score is ``(freq / total) * (1 + ln(freq))`` where total is the
    number of surviving tokens.

    Args:
        text: Text to analyze
        limit: Maximum number of keywords to return

    Returns:
        Keywords sorted by descending score; ties keep first-occurrence order
    """
    counts: Counter = Counter()
    for token in text.split():
        cleaned = _clean_token(token)
        if len(cleaned) >= MIN_KEYWORD_LENGTH and cleaned not in STOP_WORDS:
            counts[cleaned] += 1

    total_words = max(sum(counts.values()), 1)

    keywords = [
        KeywordScore(
            keyword=keyword,
            score=(frequency / total_words) * (1.0 + math.log(frequency)),
            frequency=frequency,
        )
        for keyword, frequency in counts.items()
    ]
    keywords.sort(key=lambda k: k.score, reverse=True)

    return keywords[:max(limit, 0)]
