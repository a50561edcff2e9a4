"""
Stop-word voting language detector.

Cheap and deterministic; not meant to be linguistically accurate.
"""

from typing import Dict, FrozenSet

DEFAULT_LANGUAGE = "en"

# Iteration order doubles as the tie-break order
LANGUAGE_MARKERS: Dict[str, FrozenSet[str]] = {
    "en": frozenset({"the", "is", "are", "was", "have", "has", "will", "would", "could", "should"}),
    "es": frozenset({"el", "la", "los", "las", "es", "son", "fue", "tiene", "está"}),
    "fr": frozenset({"le", "la", "les", "est", "sont", "était", "avoir", "être"}),
    "de": frozenset({"der", "die", "das", "ist", "sind", "war", "haben", "werden"}),
    "pt": frozenset({"o", "a", "os", "as", "é", "são", "foi", "tem", "está"}),
}


def detect_language(text: str) -> str:
    """Return the 2-letter code whose marker words occur most often."""
    votes = {code: 0 for code in LANGUAGE_MARKERS}
    for token in text.lower().split():
        for code, markers in LANGUAGE_MARKERS.items():
            if token in markers:
                votes[code] += 1

    best = max(votes, key=votes.get)
    if votes[best] == 0:
        return DEFAULT_LANGUAGE
    return best
