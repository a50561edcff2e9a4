"""
Pydantic data models for the text analysis pipeline.

Defines the analysis records, the Abstract Meaning Tree, chunk and storage
records, and the tagged action descriptors accepted on the command line.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator


class KeywordScore(BaseModel):
    """A keyword with its frequency-derived score."""

    keyword: str
    score: float
    frequency: int


class EntityType(str, Enum):
    """Categories produced by the regex entity extractor."""
    EMAIL = "EMAIL"
    URL = "URL"
    DATE = "DATE"
    PHONE = "PHONE"
    PROPER_NOUN = "PROPER_NOUN"


class Entity(BaseModel):
    """Entity span; UTF-8 byte offsets into the original, unnormalized text."""

    text: str
    entity_type: EntityType
    start_pos: int = Field(..., ge=0)
    end_pos: int = Field(..., ge=0)


class ReadabilityScores(BaseModel):
    flesch_kincaid_grade: float = 0.0
    flesch_reading_ease: float = 0.0
    gunning_fog: float = 0.0
    automated_readability_index: float = 0.0


class SentimentResult(BaseModel):
    score: float = Field(..., ge=-1.0, le=1.0)
    label: str  # positive, negative or neutral


class AMTNodeType(str, Enum):
    ROOT = "root"
    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"
    TOPIC = "topic"
    SUBTOPIC = "subtopic"
    ENTITY = "entity"
    ACTION = "action"
    DETAIL = "detail"


class AMTRelationType(str, Enum):
    HIERARCHY = "hierarchy"
    SEQUENCE = "sequence"
    PARALLEL = "parallel"
    LINKAGE = "linkage"


class AMTRelation(BaseModel):
    """Same-tree reference to another node by id."""

    target_id: int
    relation_type: AMTRelationType


class AMTNode(BaseModel):
    """Abstract Meaning Tree node."""

    id: int
    node_type: AMTNodeType
    content: str = ""
    children: List[AMTNode] = Field(default_factory=list)
    relationships: List[AMTRelation] = Field(default_factory=list)
    metadata: Dict[str, str] = Field(default_factory=dict)

    def iter_nodes(self) -> Iterator[AMTNode]:
        """Walk the tree in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()


class TextAnalysis(BaseModel):
    """
    Result record of the structural analysis actions.

    Every field has a default so single-purpose actions only override the
    fields they compute.
    """

    word_count: int = 0
    sentence_count: int = 1
    paragraph_count: int = 1
    char_count: int = 0
    avg_sentence_length: float = 0.0
    avg_word_length: float = 0.0
    keywords: List[KeywordScore] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
    entities: List[Entity] = Field(default_factory=list)
    language: str = "unknown"
    readability: ReadabilityScores = Field(default_factory=ReadabilityScores)
    semantic_summary: Optional[str] = None
    sentiment: Optional[SentimentResult] = None
    amt: Optional[AMTNode] = None

    @field_validator('sentence_count', 'paragraph_count')
    @classmethod
    def floor_at_one(cls, v):
        """Sentence and paragraph counts never drop below one."""
        return max(v, 1)


class TextChunk(BaseModel):
    """Contiguous slice of a larger document."""

    index: int
    text: str
    token_count: int
    start_char: int
    end_char: int
    is_complete_paragraph: bool


class SimilarDocument(BaseModel):
    container_id: int
    similarity_score: float
    preview: str = ""


class Container(BaseModel):
    """Stored JSON blob owned by the storage collaborator."""

    container_id: int
    container_type: str = "TextAnalysis"
    content: Any = None
    created_at: int


class IndexEntry(BaseModel):
    """Row of the flat keyword index kept next to the containers."""

    container_id: int
    keywords: List[str] = Field(default_factory=list)
    word_count: Optional[int] = None
    language: Optional[str] = None


# Action descriptors

class NormalizeAction(BaseModel):
    action: Literal["Normalize"] = "Normalize"
    text: str
    context_limit: Optional[int] = Field(default=None, ge=0)
    analyze_tokens: Optional[bool] = None


class AnalyzeAction(BaseModel):
    action: Literal["Analyze"] = "Analyze"
    text: str
    extract_entities: bool = False
    extract_topics: bool = False


class ExtractKeywordsAction(BaseModel):
    action: Literal["ExtractKeywords"] = "ExtractKeywords"
    text: str
    limit: Optional[int] = Field(default=None, ge=0)


class CalculateStatsAction(BaseModel):
    action: Literal["CalculateStats"] = "CalculateStats"
    text: str


class DetectLanguageAction(BaseModel):
    action: Literal["DetectLanguage"] = "DetectLanguage"
    text: str


class CalculateReadabilityAction(BaseModel):
    action: Literal["CalculateReadability"] = "CalculateReadability"
    text: str


class FindSimilarAction(BaseModel):
    action: Literal["FindSimilar"] = "FindSimilar"
    text: str
    limit: Optional[int] = Field(default=None, ge=0)


class AnalyzeDocumentAction(BaseModel):
    action: Literal["AnalyzeDocument"] = "AnalyzeDocument"
    document_ref_id: int = Field(..., ge=0)


class StoreAnalysisAction(BaseModel):
    action: Literal["StoreAnalysis"] = "StoreAnalysis"
    analysis: TextAnalysis
    project_id: Optional[int] = None


class BuildAMTAction(BaseModel):
    action: Literal["BuildAMT"] = "BuildAMT"
    text: str
    depth: Optional[int] = Field(default=None, ge=0)
    methodology_ids: Optional[List[int]] = None
    ensure_coverage: Optional[List[str]] = None


class ExtractBasicEntitiesAction(BaseModel):
    action: Literal["ExtractBasicEntities"] = "ExtractBasicEntities"
    text: str


class ChunkTextAction(BaseModel):
    action: Literal["ChunkText"] = "ChunkText"
    text: str
    max_chunk_tokens: Optional[int] = Field(default=None, ge=0)
    overlap_tokens: Optional[int] = Field(default=None, ge=0)
    preserve_paragraphs: Optional[bool] = None


TextAnalysisInput = Annotated[
    Union[
        NormalizeAction,
        AnalyzeAction,
        ExtractKeywordsAction,
        CalculateStatsAction,
        DetectLanguageAction,
        CalculateReadabilityAction,
        FindSimilarAction,
        AnalyzeDocumentAction,
        StoreAnalysisAction,
        BuildAMTAction,
        ExtractBasicEntitiesAction,
        ChunkTextAction,
    ],
    Field(discriminator="action"),
]

_input_adapter = TypeAdapter(TextAnalysisInput)


def parse_action(payload: Union[str, bytes, Dict[str, Any]]):
    """
    Validate a JSON document or mapping into an action descriptor.

    Raises:
        pydantic.ValidationError: If the payload is malformed or the action
            is unknown
    """
    if isinstance(payload, (str, bytes)):
        return _input_adapter.validate_json(payload)
    return _input_adapter.validate_python(payload)


class TextAnalysisOutput(BaseModel):
    """Envelope printed by the CLI; unset fields are left out."""

    success: bool
    analysis: Optional[TextAnalysis] = None
    similar: Optional[List[SimilarDocument]] = None
    amt: Optional[AMTNode] = None
    container_id: Optional[int] = None
    normalized_text: Optional[str] = None
    token_count: Optional[int] = None
    chunks: Optional[List[TextChunk]] = None
    suggested_methodology_ids: Optional[List[int]] = None
    error: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json", exclude_none=True), ensure_ascii=False)
