"""
Abstract Meaning Tree construction.

Builds a root -> paragraph -> sentence scaffold of a document. Nodes are
allocated in a flat arena with a single id counter, so ids follow pre-order
and are unique across the whole tree.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .models import AMTNode, AMTNodeType, AMTRelation, AMTRelationType
from .segmentation import split_on_terminators, split_paragraphs
from .logging_conf import get_logger

logger = get_logger(__name__)

ROOT_PREVIEW_CHARS = 100
PARAGRAPH_PREVIEW_CHARS = 200

# Aspect -> any of these substrings marks it as covered
COVERAGE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "security": ("security", "auth", "permission", "encrypt"),
    "edge_cases": ("edge", "error", "exception", "handle"),
    "dependencies": ("depend", "require", "import", "external"),
    "constraints": ("constraint", "limit", "must", "cannot"),
    "testing": ("test", "verify", "validate"),
    "documentation": ("document", "comment", "readme"),
}


def _preview(text: str, limit: int) -> str:
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text


@dataclass
class _ArenaNode:
    node_type: AMTNodeType
    content: str
    parent: Optional[int]
    children: List[int] = field(default_factory=list)
    relationships: List[AMTRelation] = field(default_factory=list)


class _AMTArena:
    """Flat node storage; a node's id is its arena index plus one."""

    def __init__(self):
        self.nodes: List[_ArenaNode] = []

    def allocate(self, node_type: AMTNodeType, content: str, parent: Optional[int] = None) -> int:
        index = len(self.nodes)
        node = _ArenaNode(node_type=node_type, content=content, parent=parent)

        if parent is not None:
            siblings = self.nodes[parent].children
            if siblings:
                node.relationships.append(AMTRelation(
                    target_id=self.node_id(siblings[-1]),
                    relation_type=AMTRelationType.SEQUENCE,
                ))
            siblings.append(index)

        self.nodes.append(node)
        return index

    @staticmethod
    def node_id(index: int) -> int:
        return index + 1

    def materialize(self, index: int = 0) -> AMTNode:
        node = self.nodes[index]
        return AMTNode(
            id=self.node_id(index),
            node_type=node.node_type,
            content=node.content,
            children=[self.materialize(child) for child in node.children],
            relationships=list(node.relationships),
        )


def build_amt(text: str, depth: int) -> AMTNode:
    """
    Build an Abstract Meaning Tree for text.

    Args:
        text: Document text
        depth: 0 for the root only, 1 to add paragraph nodes, 2 or more to
            also add sentence nodes under each paragraph

    Returns:
        Root node; content of the root and paragraph nodes is a truncated
        preview, sentence nodes hold the full stripped sentence
    """
    arena = _AMTArena()
    root = arena.allocate(AMTNodeType.ROOT, _preview(text, ROOT_PREVIEW_CHARS))

    if depth >= 1:
        for paragraph in split_paragraphs(text):
            para = arena.allocate(
                AMTNodeType.PARAGRAPH,
                _preview(paragraph, PARAGRAPH_PREVIEW_CHARS),
                parent=root,
            )
            if depth >= 2:
                for sentence in split_on_terminators(paragraph):
                    arena.allocate(AMTNodeType.SENTENCE, sentence, parent=para)

    logger.debug("AMT built", depth=depth, node_count=len(arena.nodes))

    return arena.materialize(root)


def check_coverage(text: str, aspects: Sequence[str]) -> List[str]:
    """
    Report requested aspects that the text does not mention.

    Unknown aspect names are treated as covered.

    Returns:
        One "Missing coverage for: <aspect>" entry per uncovered aspect
    """
    lowered = text.lower()
    missing = []
    for aspect in aspects:
        keywords = COVERAGE_KEYWORDS.get(aspect)
        if keywords is None:
            continue
        if not any(keyword in lowered for keyword in keywords):
            missing.append(f"Missing coverage for: {aspect}")
    return missing
