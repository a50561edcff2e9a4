"""
Action dispatch for the text analysis pipeline.

Each action descriptor is routed to a handler that composes the analysis
functions and returns a TextAnalysisOutput. Handlers never reach the
environment or filesystem directly; persistence goes through the injected
DocumentStore.
"""

from typing import Any, Callable, Dict, List, Optional
import json
import time

from .models import (
    TextAnalysis, TextAnalysisOutput, SimilarDocument,
    NormalizeAction, AnalyzeAction, ExtractKeywordsAction, CalculateStatsAction,
    DetectLanguageAction, CalculateReadabilityAction, FindSimilarAction,
    AnalyzeDocumentAction, StoreAnalysisAction, BuildAMTAction,
    ExtractBasicEntitiesAction, ChunkTextAction,
)
from .normalizer import normalize_text, estimate_tokens
from .stats import calculate_stats
from .language import detect_language
from .readability import calculate_readability
from .keywords import extract_keywords
from .entities import extract_basic_entities
from .topics import detect_topics, detect_methodology_hints
from .chunking import TextChunker, chunk_text_semantic
from .amt import build_amt, check_coverage
from .storage import DocumentStore
from .settings import GlobalConfig
from .error_handler import BaseApplicationError, DocumentNotFoundError, ErrorContext, handle_error
from .logging_conf import get_logger, log_performance_metric

logger = get_logger(__name__)

PREVIEW_KEYWORDS = 5


def _stats_analysis(text: str, **overrides) -> TextAnalysis:
    """Analysis record carrying the basic statistics of text."""
    stats = calculate_stats(text)
    return TextAnalysis(**{**stats._asdict(), **overrides})


class TextAnalysisPipeline:
    """Executes action descriptors against a document store."""

    def __init__(self, store: DocumentStore, config: Optional[GlobalConfig] = None):
        """
        Initialize pipeline.

        Args:
            store: Storage used by the persistence and lookup actions
            config: Tunables; defaults apply when omitted
        """
        self.store = store
        self.config = config or GlobalConfig()
        self._handlers: Dict[type, Callable[[Any], TextAnalysisOutput]] = {
            NormalizeAction: self._normalize,
            ChunkTextAction: self._chunk_text,
            AnalyzeAction: self._analyze,
            ExtractKeywordsAction: self._extract_keywords,
            CalculateStatsAction: self._calculate_stats,
            DetectLanguageAction: self._detect_language,
            CalculateReadabilityAction: self._calculate_readability,
            ExtractBasicEntitiesAction: self._extract_entities,
            FindSimilarAction: self._find_similar,
            AnalyzeDocumentAction: self._analyze_document,
            StoreAnalysisAction: self._store_analysis,
            BuildAMTAction: self._build_amt,
        }

    def execute(self, action) -> TextAnalysisOutput:
        """
        Run one action.

        Missing documents come back as an unsuccessful output; storage and
        other application errors are logged and re-raised.

        Raises:
            BaseApplicationError: If the action fails
        """
        action_name = action.action
        handler = self._handlers.get(type(action))
        if handler is None:
            raise handle_error(
                ValueError(f"unsupported action: {action_name}"),
                ErrorContext(action=action_name)
            )

        start_time = time.time()
        logger.debug("Executing action", action=action_name)

        try:
            output = handler(action)
        except DocumentNotFoundError as e:
            handle_error(e, ErrorContext(action=action_name))
            output = TextAnalysisOutput(success=False, error=e.user_message)
        except BaseApplicationError as e:
            raise handle_error(e, ErrorContext(action=action_name))

        duration_ms = (time.time() - start_time) * 1000
        log_performance_metric(
            f"action.{action_name}",
            duration_ms,
            success=output.success
        )
        logger.info(
            "Action completed",
            action=action_name,
            success=output.success,
            duration_ms=round(duration_ms, 2)
        )

        return output

    # Text preparation

    def _normalize(self, action: NormalizeAction) -> TextAnalysisOutput:
        context_limit = (
            action.context_limit
            if action.context_limit is not None
            else self.config.normalize_context_limit
        )
        analyze = action.analyze_tokens if action.analyze_tokens is not None else True

        normalized = normalize_text(action.text)
        token_count = estimate_tokens(normalized)
        suggested = detect_methodology_hints(normalized)

        chunks = None
        if token_count > context_limit:
            chunks = chunk_text_semantic(
                normalized,
                context_limit // 4,
                self.config.normalize_overlap_tokens
            )
            logger.info(
                "Normalized text exceeds context limit",
                token_count=token_count,
                context_limit=context_limit,
                chunk_count=len(chunks)
            )

        analysis = None
        if analyze:
            analysis = _stats_analysis(
                normalized,
                keywords=extract_keywords(normalized, self.config.normalize_keyword_limit),
                topics=detect_topics(normalized),
                language=detect_language(normalized),
            )

        return TextAnalysisOutput(
            success=True,
            analysis=analysis,
            normalized_text=normalized,
            token_count=token_count,
            chunks=chunks,
            suggested_methodology_ids=suggested,
        )

    def _chunk_text(self, action: ChunkTextAction) -> TextAnalysisOutput:
        chunker = TextChunker(
            max_chunk_tokens=(
                action.max_chunk_tokens
                if action.max_chunk_tokens is not None
                else self.config.max_chunk_tokens
            ),
            overlap_tokens=(
                action.overlap_tokens
                if action.overlap_tokens is not None
                else self.config.overlap_tokens
            ),
            preserve_paragraphs=(
                action.preserve_paragraphs
                if action.preserve_paragraphs is not None
                else True
            ),
        )
        chunks = chunker.chunk(action.text)
        logger.debug("Chunk quality", **chunker.analyze_chunks(chunks))

        return TextAnalysisOutput(
            success=True,
            token_count=estimate_tokens(action.text),
            chunks=chunks,
        )

    # Structural analysis

    def analyze_text(self, text: str, extract_entities: bool, extract_topics: bool) -> TextAnalysis:
        """Full structural analysis of text with an attached AMT."""
        return _stats_analysis(
            text,
            language=detect_language(text),
            readability=calculate_readability(text),
            keywords=extract_keywords(text, self.config.default_keyword_limit),
            entities=extract_basic_entities(text) if extract_entities else [],
            topics=detect_topics(text) if extract_topics else [],
            amt=build_amt(text, self.config.analyze_amt_depth),
        )

    def _analyze(self, action: AnalyzeAction) -> TextAnalysisOutput:
        analysis = self.analyze_text(action.text, action.extract_entities, action.extract_topics)
        return TextAnalysisOutput(success=True, analysis=analysis)

    def _extract_keywords(self, action: ExtractKeywordsAction) -> TextAnalysisOutput:
        limit = action.limit if action.limit is not None else self.config.default_keyword_limit
        analysis = TextAnalysis(keywords=extract_keywords(action.text, limit))
        return TextAnalysisOutput(success=True, analysis=analysis)

    def _calculate_stats(self, action: CalculateStatsAction) -> TextAnalysisOutput:
        return TextAnalysisOutput(success=True, analysis=_stats_analysis(action.text))

    def _detect_language(self, action: DetectLanguageAction) -> TextAnalysisOutput:
        analysis = TextAnalysis(language=detect_language(action.text))
        return TextAnalysisOutput(success=True, analysis=analysis)

    def _calculate_readability(self, action: CalculateReadabilityAction) -> TextAnalysisOutput:
        analysis = TextAnalysis(readability=calculate_readability(action.text))
        return TextAnalysisOutput(success=True, analysis=analysis)

    def _extract_entities(self, action: ExtractBasicEntitiesAction) -> TextAnalysisOutput:
        analysis = TextAnalysis(entities=extract_basic_entities(action.text))
        return TextAnalysisOutput(success=True, analysis=analysis)

    # Storage-backed actions

    def _find_similar(self, action: FindSimilarAction) -> TextAnalysisOutput:
        limit = action.limit if action.limit is not None else self.config.similar_result_limit
        query_keywords = [
            k.keyword for k in extract_keywords(action.text, self.config.similar_keyword_limit)
        ]

        # container_id -> (entry keywords, number of query keywords that hit it)
        hits: Dict[int, List[Any]] = {}
        for keyword in query_keywords:
            for entry in self.store.search(keyword):
                if entry.container_id in hits:
                    hits[entry.container_id][1] += 1
                else:
                    hits[entry.container_id] = [entry.keywords, 1]

        similar = [
            SimilarDocument(
                container_id=container_id,
                similarity_score=matched / len(query_keywords),
                preview=", ".join(entry_keywords[:PREVIEW_KEYWORDS]),
            )
            for container_id, (entry_keywords, matched) in hits.items()
        ][:limit]

        logger.debug(
            "Similarity search completed",
            query_keywords=len(query_keywords),
            candidates=len(hits),
            returned=len(similar)
        )

        return TextAnalysisOutput(success=True, similar=similar)

    def _analyze_document(self, action: AnalyzeDocumentAction) -> TextAnalysisOutput:
        container = self.store.get(action.document_ref_id)
        if container is None:
            raise DocumentNotFoundError(action.document_ref_id)

        content = container.content if isinstance(container.content, dict) else {}
        text = content.get("text")
        if not isinstance(text, str):
            text = ""

        analysis = self.analyze_text(text, extract_entities=True, extract_topics=True)
        return TextAnalysisOutput(success=True, analysis=analysis)

    def _store_analysis(self, action: StoreAnalysisAction) -> TextAnalysisOutput:
        content = action.analysis.model_dump(mode="json")
        if action.project_id is not None:
            content["project_id"] = action.project_id

        container_id = self.store.put(content)
        return TextAnalysisOutput(
            success=True,
            analysis=action.analysis,
            container_id=container_id,
        )

    # Tree construction

    def _build_amt(self, action: BuildAMTAction) -> TextAnalysisOutput:
        depth = action.depth if action.depth is not None else self.config.amt_depth
        amt = build_amt(action.text, depth)

        incomplete = check_coverage(action.text, action.ensure_coverage or [])

        if action.methodology_ids is not None:
            amt.metadata["methodology_guided"] = "true"

        if incomplete:
            amt.metadata["incomplete_branches"] = json.dumps(incomplete)
            logger.info("AMT has uncovered aspects", incomplete_branches=incomplete)

        return TextAnalysisOutput(success=True, amt=amt)
