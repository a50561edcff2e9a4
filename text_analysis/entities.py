"""
Regex entity extraction over raw, unnormalized text.
"""

import re
from typing import List, Pattern, Tuple

from .models import Entity, EntityType

# Pass order determines output order; categories are never deduplicated
# against each other.
ENTITY_PATTERNS: List[Tuple[EntityType, Pattern[str]]] = [
    (EntityType.EMAIL, re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")),
    (EntityType.URL, re.compile(r"https?://[^\s]+")),
    (EntityType.DATE, re.compile(
        r"\b\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}\b|\b\d{4}[/\-]\d{1,2}[/\-]\d{1,2}\b"
    )),
    (EntityType.PHONE, re.compile(
        r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"
        r"|\+\d{1,3}[-.\s]?\d{1,4}[-.\s]?\d{1,4}[-.\s]?\d{1,4}"
    )),
    (EntityType.PROPER_NOUN, re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)+\b")),
]

PROPER_NOUN_EXCLUDED_PREFIXES = ("The", "This", "That", "These", "Those")


def extract_basic_entities(text: str) -> List[Entity]:
    """
    Run one regex pass per entity type.

    Offsets are UTF-8 byte offsets into ``text``, so
    ``text.encode("utf-8")[start_pos:end_pos]`` decodes to the entity text.
    Capitalized runs starting with a demonstrative or article are not
    reported as proper nouns.
    """
    entities = []
    for entity_type, pattern in ENTITY_PATTERNS:
        # Matches of one pass are in text order; byte position carries forward
        char_cursor = byte_cursor = 0
        for match in pattern.finditer(text):
            value = match.group(0)
            byte_cursor += len(text[char_cursor:match.start()].encode("utf-8"))
            char_cursor = match.start()
            if (
                entity_type is EntityType.PROPER_NOUN
                and value.startswith(PROPER_NOUN_EXCLUDED_PREFIXES)
            ):
                continue
            entities.append(Entity(
                text=value,
                entity_type=entity_type,
                start_pos=byte_cursor,
                end_pos=byte_cursor + len(value.encode("utf-8")),
            ))
    return entities
