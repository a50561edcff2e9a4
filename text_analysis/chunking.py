"""
Token-bounded text chunking with overlap and paragraph awareness.

Splits arbitrarily large documents into contiguous slices that respect a
token budget (one token per four characters). The semantic chunker keeps
paragraphs together where it can and falls back to sentence packing for
oversized paragraphs; the simple chunker uses fixed character windows.
"""

from typing import List, Dict, Any, Optional

from .models import TextChunk
from .normalizer import CHARS_PER_TOKEN
from .segmentation import paragraph_spans, sentence_spans
from .logging_conf import get_logger

logger = get_logger(__name__)


def _bounded_sizes(max_tokens: int, overlap_tokens: int):
    """Floor the window at one token and keep the overlap strictly smaller."""
    max_tokens = max(max_tokens, 1)
    overlap_tokens = min(max(overlap_tokens, 0), max_tokens - 1)
    return max_tokens, overlap_tokens


class _ChunkBuffer:
    """
    Running chunk expressed as a [start, end) span over the source text.

    Pieces are appended in text order, so the chunk text is always the
    contiguous slice ``text[start:end]`` including the separators between
    pieces.
    """

    def __init__(self, text: str, max_tokens: int, overlap_tokens: int):
        self.text = text
        self.max_tokens = max_tokens
        self.max_chars = max_tokens * CHARS_PER_TOKEN
        self.overlap_chars = overlap_tokens * CHARS_PER_TOKEN
        self.chunks: List[TextChunk] = []
        self.start: Optional[int] = None
        self.end = 0
        self.has_new_content = False
        self.partial = False

    def add(self, start: int, end: int, partial: bool = False) -> None:
        """Append text[start:end], flushing first if it would overflow."""
        if self.start is not None and self.has_new_content:
            if (end - self.start) // CHARS_PER_TOKEN > self.max_tokens:
                self.flush()

        if self.start is None:
            self.start = start
        elif not self.has_new_content:
            # Trim the overlap seed to fit the window, keeping it attached to
            # the end of the previous chunk
            self.start = max(self.start, min(start, end - self.max_chars, self.end))

        self.end = end
        self.has_new_content = True
        self.partial = self.partial or partial

    def flush(self) -> None:
        """Emit the buffer as a chunk and seed the next one with its tail."""
        if self.start is None or not self.has_new_content:
            return

        self.chunks.append(TextChunk(
            index=len(self.chunks),
            text=self.text[self.start:self.end],
            token_count=(self.end - self.start) // CHARS_PER_TOKEN,
            start_char=self.start,
            end_char=self.end,
            is_complete_paragraph=not self.partial,
        ))

        seed_start = max(self.start, self.end - self.overlap_chars)
        self.start = seed_start if seed_start < self.end else None
        self.has_new_content = False
        self.partial = False


def chunk_text_semantic(text: str, max_tokens: int, overlap_tokens: int) -> List[TextChunk]:
    """
    Chunk text along paragraph and sentence boundaries.

    Paragraphs ("\\n\\n" separated) are packed greedily into chunks of at most
    ``max_tokens``. A paragraph that alone exceeds the budget is packed
    sentence by sentence, and a sentence longer than the window is cut into
    fixed-size windows. Each new chunk is seeded with the last
    ``overlap_tokens`` worth of characters of the previous one.

    Args:
        text: Text to chunk
        max_tokens: Token budget per chunk (floored at 1)
        overlap_tokens: Overlap carried between chunks (capped below max_tokens)

    Returns:
        Ordered chunks; ``is_complete_paragraph`` is False for any chunk that
        holds part of a paragraph split at sentence level
    """
    if not text:
        return []

    max_tokens, overlap_tokens = _bounded_sizes(max_tokens, overlap_tokens)
    buffer = _ChunkBuffer(text, max_tokens, overlap_tokens)

    for para_start, para_end in paragraph_spans(text):
        if not text[para_start:para_end].strip():
            continue

        if (para_end - para_start) // CHARS_PER_TOKEN > max_tokens:
            buffer.flush()
            for sent_start, sent_end in sentence_spans(text, para_start, para_end):
                for window_start in range(sent_start, sent_end, buffer.max_chars):
                    window_end = min(window_start + buffer.max_chars, sent_end)
                    buffer.add(window_start, window_end, partial=True)
        else:
            buffer.add(para_start, para_end)

    buffer.flush()

    if not buffer.chunks:
        # Whitespace-only input still yields one chunk covering it
        buffer.chunks.append(TextChunk(
            index=0,
            text=text,
            token_count=len(text) // CHARS_PER_TOKEN,
            start_char=0,
            end_char=len(text),
            is_complete_paragraph=True,
        ))

    return buffer.chunks


def chunk_text_simple(text: str, max_tokens: int, overlap_tokens: int) -> List[TextChunk]:
    """
    Chunk text into fixed character windows with overlap.

    Windows are ``max_tokens * 4`` characters and consecutive windows share
    ``overlap_tokens * 4`` characters, so together they cover the whole text.
    """
    max_tokens, overlap_tokens = _bounded_sizes(max_tokens, overlap_tokens)
    max_chars = max_tokens * CHARS_PER_TOKEN
    step = max_chars - overlap_tokens * CHARS_PER_TOKEN

    chunks = []
    start = 0
    while start < len(text):
        end = min(start + max_chars, len(text))
        chunks.append(TextChunk(
            index=len(chunks),
            text=text[start:end],
            token_count=(end - start) // CHARS_PER_TOKEN,
            start_char=start,
            end_char=end,
            is_complete_paragraph=False,
        ))
        if end >= len(text):
            break
        start += step

    return chunks


class TextChunker:
    """Chunks documents with a configured budget and strategy."""

    def __init__(
        self,
        max_chunk_tokens: int = 4000,
        overlap_tokens: int = 200,
        preserve_paragraphs: bool = True
    ):
        """
        Initialize text chunker.

        Args:
            max_chunk_tokens: Token budget per chunk
            overlap_tokens: Tokens of overlap carried between chunks
            preserve_paragraphs: Use the paragraph-aware chunker instead of
                fixed windows
        """
        self.max_chunk_tokens, self.overlap_tokens = _bounded_sizes(max_chunk_tokens, overlap_tokens)
        self.preserve_paragraphs = preserve_paragraphs

        logger.debug(
            "TextChunker initialized",
            max_chunk_tokens=self.max_chunk_tokens,
            overlap_tokens=self.overlap_tokens,
            preserve_paragraphs=preserve_paragraphs
        )

    def chunk(self, text: str) -> List[TextChunk]:
        """Chunk text with the configured strategy."""
        if not text:
            logger.warning("No text provided for chunking")
            return []

        strategy = "semantic" if self.preserve_paragraphs else "simple"
        logger.info(
            "Starting text chunking",
            char_count=len(text),
            strategy=strategy,
            max_chunk_tokens=self.max_chunk_tokens
        )

        if self.preserve_paragraphs:
            chunks = chunk_text_semantic(text, self.max_chunk_tokens, self.overlap_tokens)
        else:
            chunks = chunk_text_simple(text, self.max_chunk_tokens, self.overlap_tokens)

        logger.info(
            "Text chunking completed",
            total_chunks=len(chunks),
            avg_tokens_per_chunk=sum(c.token_count for c in chunks) / len(chunks) if chunks else 0
        )

        return chunks

    def analyze_chunks(self, chunks: List[TextChunk]) -> Dict[str, Any]:
        """Analyze chunk statistics for quality assessment."""
        if not chunks:
            return {
                "total_chunks": 0,
                "avg_tokens": 0,
                "min_tokens": 0,
                "max_tokens": 0,
                "avg_chars": 0,
                "complete_paragraph_chunks": 0,
                "chunks_with_overlap": 0,
                "coverage": {"start_char": 0, "end_char": 0}
            }

        token_counts = [c.token_count for c in chunks]
        char_counts = [c.end_char - c.start_char for c in chunks]

        overlapped_chunks = sum(
            1 for prev, cur in zip(chunks, chunks[1:]) if cur.start_char < prev.end_char
        )

        return {
            "total_chunks": len(chunks),
            "avg_tokens": sum(token_counts) / len(token_counts),
            "min_tokens": min(token_counts),
            "max_tokens": max(token_counts),
            "avg_chars": sum(char_counts) / len(char_counts),
            "complete_paragraph_chunks": sum(1 for c in chunks if c.is_complete_paragraph),
            "chunks_with_overlap": overlapped_chunks,
            "coverage": {
                "start_char": chunks[0].start_char,
                "end_char": chunks[-1].end_char
            }
        }
