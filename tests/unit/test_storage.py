"""
Unit tests for the document stores.
"""

import json

import pytest

from text_analysis.storage import (
    FileDocumentStore, InMemoryDocumentStore, create_store,
)
from text_analysis.error_handler import StorageError
from text_analysis.settings import GlobalConfig


ANALYSIS_CONTENT = {
    "word_count": 12,
    "language": "en",
    "keywords": [
        {"keyword": "apple", "score": 0.5, "frequency": 2},
        {"keyword": "orchard", "score": 0.2, "frequency": 1},
    ],
}


class TestInMemoryDocumentStore:
    """Test suite for InMemoryDocumentStore."""

    @pytest.mark.unit
    def test_sequential_ids(self, memory_store):
        assert memory_store.put({"text": "one"}) == 1
        assert memory_store.put({"text": "two"}) == 2
        assert len(memory_store) == 2

    @pytest.mark.unit
    def test_get(self, memory_store):
        container_id = memory_store.put({"text": "hello"})
        container = memory_store.get(container_id)

        assert container.container_id == container_id
        assert container.container_type == "TextAnalysis"
        assert container.content == {"text": "hello"}
        assert memory_store.get(999) is None

    @pytest.mark.unit
    def test_search_matches_keyword_substrings(self, memory_store):
        container_id = memory_store.put(ANALYSIS_CONTENT)
        memory_store.put({"text": "no keywords"})

        assert [e.container_id for e in memory_store.search("APP")] == [container_id]
        assert memory_store.search("banana") == []


class TestFileDocumentStore:
    """Test suite for FileDocumentStore."""

    @pytest.mark.unit
    def test_put_writes_container_and_index(self, file_store):
        container_id = file_store.put(ANALYSIS_CONTENT)

        assert 0 < container_id < 2 ** 63
        container_path = file_store.local_dir / f"{container_id}.json"
        assert container_path.exists()

        data = json.loads(container_path.read_text(encoding="utf-8"))
        assert data["container_id"] == container_id
        assert data["content"] == ANALYSIS_CONTENT

        index = json.loads(file_store.index_path.read_text(encoding="utf-8"))
        assert index["documents"] == [{
            "container_id": container_id,
            "keywords": ["apple", "orchard"],
            "word_count": 12,
            "language": "en",
        }]

    @pytest.mark.unit
    def test_get_roundtrip(self, file_store):
        container_id = file_store.put({"text": "stored text"}, container_type="Document")
        container = file_store.get(container_id)

        assert container.content == {"text": "stored text"}
        assert container.container_type == "Document"

    @pytest.mark.unit
    def test_index_appended_and_searched(self, file_store):
        first = file_store.put(ANALYSIS_CONTENT)
        second = file_store.put(ANALYSIS_CONTENT)

        assert first != second
        assert [e.container_id for e in file_store.search("orch")] == [first, second]
        assert file_store.search("zzz") == []

    @pytest.mark.unit
    def test_missing_container(self, file_store):
        assert file_store.get(12345) is None

    @pytest.mark.unit
    def test_corrupt_container_reads_as_missing(self, file_store):
        file_store.local_dir.mkdir(parents=True)
        (file_store.local_dir / "7.json").write_text("{not json", encoding="utf-8")
        assert file_store.get(7) is None

    @pytest.mark.unit
    def test_search_without_index(self, file_store):
        assert file_store.search("anything") == []

    @pytest.mark.unit
    def test_corrupt_index_is_not_overwritten(self, file_store):
        file_store.index_dir.mkdir(parents=True)
        file_store.index_path.write_text("{\"documents\": [", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            file_store.put(ANALYSIS_CONTENT)

        assert exc_info.value.error_code == "STORAGE_INDEX_READ"
        assert exc_info.value.message.startswith("Index read failed:")
        assert file_store.index_path.read_text(encoding="utf-8") == "{\"documents\": ["

        with pytest.raises(StorageError):
            file_store.search("apple")

    @pytest.mark.unit
    def test_index_without_document_list_raises(self, file_store):
        file_store.index_dir.mkdir(parents=True)
        file_store.index_path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            file_store.search("apple")
        assert exc_info.value.error_code == "STORAGE_INDEX_READ"

    @pytest.mark.unit
    def test_malformed_index_rows_survive_append(self, file_store):
        file_store.index_dir.mkdir(parents=True)
        file_store.index_path.write_text(
            json.dumps({"documents": [{"unexpected": True}]}), encoding="utf-8"
        )

        container_id = file_store.put(ANALYSIS_CONTENT)

        documents = json.loads(file_store.index_path.read_text(encoding="utf-8"))["documents"]
        assert documents[0] == {"unexpected": True}
        assert documents[1]["container_id"] == container_id
        assert [e.container_id for e in file_store.search("apple")] == [container_id]

    @pytest.mark.unit
    def test_write_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = FileDocumentStore(blocker)

        with pytest.raises(StorageError) as exc_info:
            store.put({"text": "x"})

        assert exc_info.value.message.startswith("Write failed:")
        assert exc_info.value.error_code == "STORAGE_WRITE"

    @pytest.mark.unit
    def test_create_store_uses_config(self, tmp_path):
        store = create_store(GlobalConfig(storage_path=tmp_path / "data"))
        assert isinstance(store, FileDocumentStore)
        assert store.base_path == tmp_path / "data"
