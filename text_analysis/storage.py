"""
Document storage for analysis results.

Containers are JSON blobs identified by an integer id. The file store keeps
one file per container plus a flat keyword index that is appended to on
every write; the in-memory store backs tests and embedded use.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional
import fcntl
import itertools
import json
import os
import time
import uuid

from pydantic import ValidationError

from .models import Container, IndexEntry
from .settings import GlobalConfig
from .error_handler import StorageError
from .logging_conf import get_logger

logger = get_logger(__name__)

DEFAULT_CONTAINER_TYPE = "TextAnalysis"


def _index_entry_for(container_id: int, content: Any) -> IndexEntry:
    """Derive the keyword index row from stored analysis content."""
    if not isinstance(content, dict):
        return IndexEntry(container_id=container_id)

    keywords = []
    for keyword in content.get("keywords") or []:
        if isinstance(keyword, dict) and isinstance(keyword.get("keyword"), str):
            keywords.append(keyword["keyword"])

    word_count = content.get("word_count")
    language = content.get("language")
    return IndexEntry(
        container_id=container_id,
        keywords=keywords,
        word_count=word_count if isinstance(word_count, int) else None,
        language=language if isinstance(language, str) else None,
    )


def _matches(entry: IndexEntry, query: str) -> bool:
    lowered = query.lower()
    return any(lowered in keyword.lower() for keyword in entry.keywords)


class DocumentStore(ABC):
    """Storage interface used by the pipeline."""

    @abstractmethod
    def get(self, container_id: int) -> Optional[Container]:
        """Return the container, or None when it does not exist."""

    @abstractmethod
    def put(self, content: Any, container_type: str = DEFAULT_CONTAINER_TYPE) -> int:
        """Persist content as a new container and return its id."""

    @abstractmethod
    def search(self, query: str) -> List[IndexEntry]:
        """Return index entries with a keyword containing the query."""


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed store with sequential ids."""

    def __init__(self):
        self._containers: Dict[int, Container] = {}
        self._index: List[IndexEntry] = []
        self._ids = itertools.count(1)

    def get(self, container_id: int) -> Optional[Container]:
        return self._containers.get(container_id)

    def put(self, content: Any, container_type: str = DEFAULT_CONTAINER_TYPE) -> int:
        container_id = next(self._ids)
        self._containers[container_id] = Container(
            container_id=container_id,
            container_type=container_type,
            content=content,
            created_at=int(time.time()),
        )
        self._index.append(_index_entry_for(container_id, content))
        return container_id

    def search(self, query: str) -> List[IndexEntry]:
        return [entry for entry in self._index if _matches(entry, query)]

    def __len__(self) -> int:
        return len(self._containers)


class FileDocumentStore(DocumentStore):
    """
    JSON file store.

    Layout under ``base_path``::

        local/<container_id>.json      one container per file
        indices/text_index.json        {"documents": [IndexEntry, ...]}
        indices/text_index.lock        lock file guarding index updates
    """

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self.local_dir = self.base_path / "local"
        self.index_dir = self.base_path / "indices"
        self.index_path = self.index_dir / "text_index.json"
        self.lock_path = self.index_dir / "text_index.lock"

        logger.debug("FileDocumentStore initialized", base_path=str(self.base_path))

    @staticmethod
    def _new_container_id() -> int:
        # 63 random bits keep ids positive in signed 64-bit consumers
        return uuid.uuid4().int >> 65

    def _container_path(self, container_id: int) -> Path:
        return self.local_dir / f"{container_id}.json"

    def _write_atomic(self, path: Path, data: Any) -> None:
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def get(self, container_id: int) -> Optional[Container]:
        path = self._container_path(container_id)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return Container.model_validate(data)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(
                "Unreadable container treated as missing",
                container_id=container_id,
                path=str(path),
                error=str(e)
            )
            return None

    def put(self, content: Any, container_type: str = DEFAULT_CONTAINER_TYPE) -> int:
        container_id = self._new_container_id()
        container = Container(
            container_id=container_id,
            container_type=container_type,
            content=content,
            created_at=int(time.time()),
        )
        path = self._container_path(container_id)

        try:
            self.local_dir.mkdir(parents=True, exist_ok=True)
            self._write_atomic(path, container.model_dump(mode="json"))
        except OSError as e:
            raise StorageError("write", e.strerror or str(e), file_path=path, cause=e)

        self._append_index_entry(_index_entry_for(container_id, content))

        logger.info(
            "Container stored",
            container_id=container_id,
            container_type=container_type,
            path=str(path)
        )
        return container_id

    def _load_documents(self) -> List[Any]:
        """Raw index rows; an index that cannot be read raises instead of reading as empty."""
        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
            raise StorageError("index_read", reason, file_path=self.index_path, cause=e)

        documents = data.get("documents") if isinstance(data, dict) else None
        if not isinstance(documents, list):
            raise StorageError("index_read", "no document list in index", file_path=self.index_path)
        return documents

    def _read_index(self) -> List[IndexEntry]:
        entries = []
        for raw in self._load_documents():
            try:
                entries.append(IndexEntry.model_validate(raw))
            except ValidationError:
                logger.debug("Skipping malformed index entry", entry=raw)
        return entries

    def _append_index_entry(self, entry: IndexEntry) -> None:
        try:
            self.index_dir.mkdir(parents=True, exist_ok=True)
            with open(self.lock_path, "a") as lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                try:
                    # Rows are carried over verbatim, malformed ones included
                    documents = self._load_documents()
                    documents.append(entry.model_dump(mode="json"))
                    self._write_atomic(self.index_path, {"documents": documents})
                finally:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            raise StorageError("index_update", e.strerror or str(e), file_path=self.index_path, cause=e)

    def search(self, query: str) -> List[IndexEntry]:
        return [entry for entry in self._read_index() if _matches(entry, query)]


def create_store(config: GlobalConfig) -> FileDocumentStore:
    """Build the file store rooted at the configured storage path."""
    return FileDocumentStore(config.storage_path)
