"""
Shared pytest configuration and fixtures for text analysis pipeline tests.
"""

import pytest

from text_analysis.logging_conf import setup_logging
from text_analysis.settings import GlobalConfig
from text_analysis.storage import FileDocumentStore, InMemoryDocumentStore
from text_analysis.pipeline import TextAnalysisPipeline


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Route structured logs to stderr for the whole session."""
    setup_logging(debug=True)


@pytest.fixture
def test_config(tmp_path):
    """Default configuration with storage under a temporary directory."""
    return GlobalConfig(storage_path=tmp_path / "zsei_data")


@pytest.fixture
def memory_store():
    """Empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def file_store(test_config):
    """File document store rooted in a temporary directory."""
    return FileDocumentStore(test_config.storage_path)


@pytest.fixture
def pipeline(memory_store, test_config):
    """Pipeline backed by the in-memory store."""
    return TextAnalysisPipeline(memory_store, test_config)


@pytest.fixture
def sample_text():
    """Multi-paragraph document for analysis tests."""
    return (
        "The construction software platform tracks project data. "
        "Engineers review every report carefully.\n\n"
        "Jane Smith met the team in New York on 03/15/2024. "
        "Contact her at jane.smith@example.com or call 555-123-4567.\n\n"
        "Visit https://example.com/docs for the full documentation!"
    )


def generate_sentences(count: int, template: str = "Sentence number {} covers routine site work.") -> str:
    """Build a single paragraph of numbered sentences."""
    return " ".join(template.format(i) for i in range(count))


@pytest.fixture
def large_paragraph():
    """Roughly 50,000 characters with no blank lines."""
    return generate_sentences(1200)[:50000]
