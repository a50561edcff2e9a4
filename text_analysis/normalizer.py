"""
Text normalization ahead of analysis and prompt processing.

Cleans unicode spacing, unifies line endings, and collapses repeated spaces
and newlines. Input size is unbounded; oversized results are chunked
downstream.
"""

from typing import Iterable

CHARS_PER_TOKEN = 4

_UNICODE_SPACES = {
    "\u00A0": " ",  # Non-breaking space
    "\u2003": " ",  # Em space
    "\u2002": " ",  # En space
    "\u200B": "",   # Zero-width space
}


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four characters."""
    return len(text) // CHARS_PER_TOKEN


def _collapse_repeats(chars: Iterable[str]) -> str:
    # Only a space after a space and a newline after a newline are dropped;
    # mixed runs such as " \n" survive this pass.
    out = []
    prev = ""
    for ch in chars:
        if ch in " \n" and ch == prev:
            continue
        out.append(ch)
        prev = ch
    return "".join(out)


def normalize_text(text: str) -> str:
    """
    Normalize text for processing.

    Steps, in order: unicode space cleanup, line-ending unification,
    single-pass collapse of repeated spaces and newlines, per-line strip,
    final strip.

    Args:
        text: Raw input text of any size

    Returns:
        Normalized text
    """
    result = text
    for variant, replacement in _UNICODE_SPACES.items():
        result = result.replace(variant, replacement)

    result = result.replace("\r\n", "\n").replace("\r", "\n")

    result = _collapse_repeats(result)

    # Whitespace-only lines become empty once stripped; dropping them keeps
    # newline runs collapsed so a second pass is a no-op.
    result = "\n".join(line for line in (raw.strip() for raw in result.split("\n")) if line)

    return result.strip()
