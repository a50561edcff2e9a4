"""
Integration tests for the command-line entry point.

Runs text_analysis.cli.main in-process and checks the exit code, the single
JSON line on stdout and the diagnostics on stderr.
"""

import json

import pytest

from text_analysis.cli import EXIT_FAILURE, EXIT_OK, main
from text_analysis.settings import STORAGE_ENV_VAR, settings


@pytest.fixture
def isolated_settings(monkeypatch):
    """Keep the storage override out of the environment and reload afterwards."""
    monkeypatch.delenv(STORAGE_ENV_VAR, raising=False)
    yield
    monkeypatch.undo()
    settings.reload()


@pytest.fixture
def config_file(tmp_path, isolated_settings):
    """TOML config pointing storage at a temporary directory."""
    storage_path = tmp_path / "zsei_data"
    path = tmp_path / "config.toml"
    path.write_text(f'[storage]\npath = "{storage_path}"\n', encoding="utf-8")
    return path


def run_cli(capsys, *argv):
    exit_code = main(list(argv))
    captured = capsys.readouterr()
    return exit_code, captured.out, captured.err


class TestCliSuccess:
    """Successful invocations."""

    @pytest.mark.integration
    def test_calculate_stats(self, capsys, isolated_settings):
        exit_code, out, _ = run_cli(
            capsys, "--input", '{"action": "CalculateStats", "text": "One two. Three four."}'
        )

        assert exit_code == EXIT_OK
        lines = out.splitlines()
        assert len(lines) == 1
        result = json.loads(lines[0])
        assert result["success"] is True
        assert result["analysis"]["word_count"] == 4
        assert result["analysis"]["sentence_count"] == 2
        assert "error" not in result

    @pytest.mark.integration
    def test_missing_document_is_soft_failure(self, capsys, config_file):
        exit_code, out, _ = run_cli(
            capsys,
            "--config", str(config_file),
            "--input", '{"action": "AnalyzeDocument", "document_ref_id": 12345}',
        )

        assert exit_code == EXIT_OK
        assert out.strip() == '{"success": false, "error": "Document not found"}'

    @pytest.mark.integration
    def test_store_analysis_writes_container(self, capsys, config_file, tmp_path):
        payload = json.dumps({
            "action": "StoreAnalysis",
            "analysis": {
                "word_count": 3,
                "keywords": [{"keyword": "granite", "score": 0.5, "frequency": 1}],
            },
            "project_id": 4,
        })

        exit_code, out, _ = run_cli(capsys, "--config", str(config_file), "--input", payload)

        assert exit_code == EXIT_OK
        result = json.loads(out)
        container_path = tmp_path / "zsei_data" / "local" / f"{result['container_id']}.json"
        assert container_path.exists()
        stored = json.loads(container_path.read_text(encoding="utf-8"))
        assert stored["content"]["project_id"] == 4

        exit_code, out, _ = run_cli(
            capsys,
            "--config", str(config_file),
            "--input", '{"action": "FindSimilar", "text": "granite"}',
        )
        assert exit_code == EXIT_OK
        similar = json.loads(out)["similar"]
        assert [s["container_id"] for s in similar] == [result["container_id"]]
        assert similar[0]["preview"] == "granite"

    @pytest.mark.integration
    def test_debug_flag_logs_to_stderr(self, capsys, isolated_settings):
        exit_code, out, err = run_cli(
            capsys, "--debug", "--input", '{"action": "DetectLanguage", "text": "der die das"}'
        )

        assert exit_code == EXIT_OK
        assert json.loads(out)["analysis"]["language"] == "de"
        assert "Action completed" in err


    @pytest.mark.integration
    def test_debug_logs_chunk_quality(self, capsys, isolated_settings):
        payload = json.dumps({
            "action": "ChunkText",
            "text": "First paragraph here.\n\nSecond paragraph here.",
            "max_chunk_tokens": 5,
            "overlap_tokens": 0,
        })

        exit_code, out, err = run_cli(capsys, "--debug", "--input", payload)

        assert exit_code == EXIT_OK
        assert len(json.loads(out)["chunks"]) == 2
        assert "Chunk quality" in err
        assert "total_chunks=2" in err

    @pytest.mark.integration
    def test_debug_logs_error_summary(self, capsys, config_file):
        exit_code, _, err = run_cli(
            capsys,
            "--debug",
            "--config", str(config_file),
            "--input", '{"action": "AnalyzeDocument", "document_ref_id": 77}',
        )

        assert exit_code == EXIT_OK
        assert "Errors reported during run" in err
        assert "DOCUMENT_NOT_FOUND" in err

    @pytest.mark.integration
    def test_error_summary_reset_between_runs(self, capsys, isolated_settings):
        exit_code, _, err = run_cli(
            capsys, "--debug", "--input", '{"action": "CalculateStats", "text": "ok"}'
        )

        assert exit_code == EXIT_OK
        assert "Errors reported during run" not in err


class TestCliFailures:
    """Invocations that exit with a failure code."""

    @pytest.mark.integration
    def test_missing_input(self, capsys, isolated_settings):
        exit_code, out, err = run_cli(capsys)

        assert exit_code == EXIT_FAILURE
        assert out == ""
        assert "Error: --input is required" in err

    @pytest.mark.integration
    @pytest.mark.parametrize("payload", [
        "{not json",
        '{"action": "Summarize", "text": "x"}',
        '{"action": "CalculateStats"}',
    ])
    def test_invalid_input(self, capsys, isolated_settings, payload):
        exit_code, out, err = run_cli(capsys, "--input", payload)

        assert exit_code == EXIT_FAILURE
        assert out == ""
        assert "Error: Parse error:" in err

    @pytest.mark.integration
    def test_storage_failure(self, capsys, tmp_path, isolated_settings):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        config_path = tmp_path / "config.toml"
        config_path.write_text(f'[storage]\npath = "{blocker}"\n', encoding="utf-8")

        exit_code, out, _ = run_cli(
            capsys,
            "--config", str(config_path),
            "--input", '{"action": "StoreAnalysis", "analysis": {"word_count": 1}}',
        )

        assert exit_code == EXIT_FAILURE
        result = json.loads(out)
        assert result["success"] is False
        assert result["error"].startswith("Write failed")
