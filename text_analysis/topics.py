"""
Keyword-table topic detection and methodology suggestions.
"""

from typing import Dict, List, Tuple

TOPIC_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("technology", ("software", "computer", "app", "digital", "tech", "ai", "machine learning")),
    ("business", ("company", "market", "revenue", "profit", "investment", "startup")),
    ("health", ("health", "medical", "doctor", "patient", "disease", "treatment")),
    ("science", ("research", "study", "experiment", "scientist", "discovery", "data")),
    ("education", ("school", "university", "student", "teacher", "learning", "course")),
    ("finance", ("money", "bank", "stock", "trading", "investment", "financial")),
    ("politics", ("government", "election", "vote", "policy", "political", "president")),
    ("sports", ("game", "team", "player", "score", "championship", "match")),
    ("entertainment", ("movie", "music", "show", "celebrity", "concert", "entertainment")),
    ("travel", ("travel", "trip", "vacation", "hotel", "flight", "destination")),
]

# Methodology id -> trigger words
METHODOLOGY_KEYWORDS: Dict[int, Tuple[str, ...]] = {
    1: ("code", "programming", "function"),
    2: ("data", "analysis", "statistics"),
    3: ("write", "document", "report"),
    4: ("research", "study", "investigate"),
    5: ("plan", "schedule", "organize"),
    6: ("debug", "fix", "error"),
    7: ("design", "architecture", "system"),
    8: ("learn", "understand", "explain"),
}


def detect_topics(text: str) -> List[str]:
    """Return every topic with a keyword occurring as a substring, in table order."""
    lowered = text.lower()
    return [
        topic for topic, keywords in TOPIC_KEYWORDS
        if any(keyword in lowered for keyword in keywords)
    ]


def detect_methodology_hints(text: str) -> List[int]:
    """Suggest methodology ids whose trigger words occur in the text."""
    lowered = text.lower()
    return [
        methodology_id for methodology_id, keywords in METHODOLOGY_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]
