"""
Unit tests for error handling.

Tests the error hierarchy, exception conversion, and error statistics.
"""

import pytest

from text_analysis.error_handler import (
    BaseApplicationError, ConfigurationError, DocumentNotFoundError,
    ErrorContext, ErrorHandler, ErrorSeverity, InputParseError, StorageError,
)


class TestErrorHierarchy:
    """Test the typed pipeline errors."""

    @pytest.mark.unit
    def test_input_parse_error(self):
        error = InputParseError("unexpected token")
        assert error.message == "Parse error: unexpected token"
        assert error.severity == ErrorSeverity.CRITICAL
        assert error.error_code == "INPUT_PARSE"
        assert isinstance(error, BaseApplicationError)

    @pytest.mark.unit
    def test_storage_error(self):
        error = StorageError("write", "disk full", file_path="/data/local/1.json")
        assert error.message == "Write failed: disk full"
        assert error.user_message == "Write failed: disk full"
        assert error.error_code == "STORAGE_WRITE"
        assert error.context.operation == "write"
        assert error.context.file_path == "/data/local/1.json"

    @pytest.mark.unit
    def test_storage_error_operation_label(self):
        error = StorageError("index_update", "permission denied")
        assert error.message == "Index update failed: permission denied"
        assert error.error_code == "STORAGE_INDEX_UPDATE"

    @pytest.mark.unit
    def test_document_not_found(self):
        error = DocumentNotFoundError(42)
        assert error.user_message == "Document not found"
        assert error.severity == ErrorSeverity.WARNING
        assert error.context.container_id == 42
        assert "42" in error.message

    @pytest.mark.unit
    def test_configuration_error(self):
        error = ConfigurationError("chunking", "overlap must be an integer")
        assert error.error_code == "CONFIG_CHUNKING"
        assert "chunking" in error.message

    @pytest.mark.unit
    def test_to_dict(self):
        error = StorageError("write", "disk full", context=ErrorContext(action="StoreAnalysis"))
        data = error.to_dict()
        assert data["error_code"] == "STORAGE_WRITE"
        assert data["severity"] == "error"
        assert data["context"]["action"] == "StoreAnalysis"
        assert data["context"]["operation"] == "write"


class TestErrorHandler:
    """Test the central error handler."""

    @pytest.fixture
    def handler(self):
        return ErrorHandler()

    @pytest.mark.unit
    def test_converts_os_error(self, handler):
        error = handler.handle_error(PermissionError(13, "Permission denied", "/data/x.json"))
        assert isinstance(error, StorageError)
        assert error.context.file_path == "/data/x.json"
        assert error.message == "Access failed: Permission denied"

    @pytest.mark.unit
    def test_converts_value_error(self, handler):
        error = handler.handle_error(ValueError("bad value"))
        assert isinstance(error, InputParseError)
        assert error.cause is not None

    @pytest.mark.unit
    def test_converts_unknown_exception(self, handler):
        error = handler.handle_error(RuntimeError("boom"))
        assert type(error) is BaseApplicationError
        assert error.user_message == "An unexpected error occurred: RuntimeError"

    @pytest.mark.unit
    def test_passes_through_application_errors(self, handler):
        original = DocumentNotFoundError(5)
        handled = handler.handle_error(original, ErrorContext(action="AnalyzeDocument"))
        assert handled is original
        assert handled.context.action == "AnalyzeDocument"

    @pytest.mark.unit
    def test_statistics(self, handler):
        handler.handle_error(StorageError("write", "disk full"))
        handler.handle_error(StorageError("write", "disk full"))
        handler.handle_error(DocumentNotFoundError(1))

        stats = handler.get_error_stats()
        assert stats["error_counts"] == {"STORAGE_WRITE": 2, "DOCUMENT_NOT_FOUND": 1}
        assert stats["recent_error_count"] == 3

        handler.clear_stats()
        assert handler.get_error_stats()["recent_error_count"] == 0

    @pytest.mark.unit
    def test_recent_errors_bounded(self, handler):
        handler.max_recent_errors = 5
        for i in range(8):
            handler.handle_error(DocumentNotFoundError(i))
        assert len(handler.recent_errors) == 5
        assert handler.recent_errors[0].context.container_id == 3
