"""
Text Analysis Pipeline - Core Package

Structural text analysis without language models: normalization, statistics,
language and readability heuristics, keyword, entity and topic extraction,
token-bounded chunking, Abstract Meaning Tree construction, and a small JSON
document store for persisted analyses.
"""

__version__ = "0.1.0"
