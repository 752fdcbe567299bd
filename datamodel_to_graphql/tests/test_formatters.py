#!/usr/bin/env python3

import logging
import subprocess
from pathlib import Path

import pytest

from datamodel_to_graphql.pipeline import FormatMode, SimpleMetricsCollector
from datamodel_to_graphql.pipeline.config import FormatterConfig
from datamodel_to_graphql.pipeline.emission import EmissionPipeline, StagedFile
from datamodel_to_graphql.pipeline.emission import pipeline as pipeline_module
from datamodel_to_graphql.pipeline.formatters import (
    BlackFormatter,
    Formatter,
    FormatResult,
    RuffFormatter,
    VerifyFormatter,
    get_formatter,
)


class FailingFormatter(Formatter):
    name = "failing"

    def is_available(self) -> bool:
        return True

    def format_tree(self, root, paths, config) -> FormatResult:
        return FormatResult(ok=False, message="boom")


class RecordingFormatter(Formatter):
    name = "recording"

    def __init__(self):
        self.calls = []

    def is_available(self) -> bool:
        return True

    def format_tree(self, root, paths, config) -> FormatResult:
        self.calls.append(list(paths))
        return FormatResult(ok=True)


class TestGetFormatter:
    """Test cases for formatter selection"""

    def test_modes(self):
        assert get_formatter(FormatMode.NONE) is None
        assert isinstance(get_formatter(FormatMode.VERIFY), VerifyFormatter)
        assert isinstance(get_formatter(FormatMode.RUFF), RuffFormatter)
        assert isinstance(get_formatter(FormatMode.BLACK), BlackFormatter)


class TestRuffFormatter:
    """Test cases for the ruff based formatters"""

    def test_commands(self, tmp_path):
        config = FormatterConfig(line_length=120, target_version="py313")
        assert RuffFormatter().command(tmp_path, config) == [
            "ruff",
            "format",
            "--no-cache",
            "--line-length",
            "120",
            "--target-version",
            "py313",
            str(tmp_path),
        ]
        verify = VerifyFormatter().command(tmp_path, config)
        assert verify[:5] == ["ruff", "check", "--no-cache", "--select", "E9,F63,F7,F82"]

    def test_missing_tool_is_a_failure_result(self, tmp_path, monkeypatch):
        def missing(*args, **kwargs):
            raise FileNotFoundError("ruff")

        monkeypatch.setattr(subprocess, "run", missing)
        formatter = RuffFormatter()
        assert not formatter.is_available()
        result = formatter.format_tree(tmp_path, [], FormatterConfig())
        assert not result.ok
        assert "not installed" in result.message

    def test_nonzero_exit_is_a_failure_result(self, tmp_path, monkeypatch):
        def run(cmd, **kwargs):
            if "--version" in cmd:
                return subprocess.CompletedProcess(cmd, 0, stdout="ruff 0.6.0", stderr="")
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="error: invalid syntax")

        monkeypatch.setattr(subprocess, "run", run)
        result = RuffFormatter().format_tree(tmp_path, [], FormatterConfig())
        assert not result.ok
        assert "invalid syntax" in result.message


class TestBlackFormatter:
    """Test cases for the black formatter"""

    def test_formats_files(self, tmp_path):
        pytest.importorskip("black")
        path = tmp_path / "a.py"
        path.write_text("x = {  'a':1 }\n")
        result = BlackFormatter().format_tree(tmp_path, [path], FormatterConfig())
        assert result.ok
        assert path.read_text() == 'x = {"a": 1}\n'


class TestFormattingInPipeline:
    """Formatting is best effort: failures never fail the run"""

    @pytest.fixture
    def options_for(self, make_config, output_dir):
        def build(mode):
            config = make_config(output_dir)
            config.formatter = FormatterConfig(mode=mode)
            return config.resolve()

        return build

    def test_failure_becomes_warning(self, options_for, output_dir, monkeypatch, caplog):
        monkeypatch.setattr(pipeline_module, "get_formatter", lambda mode: FailingFormatter())
        messages = []
        metrics = SimpleMetricsCollector()
        pipeline = EmissionPipeline(options_for(FormatMode.RUFF), metrics=metrics, log=messages.append)
        with caplog.at_level(logging.WARNING):
            result = pipeline.emit([StagedFile(Path("a.py"), "X = 1\n")], [])
        assert result.warnings == ["Code formatting failed (ruff): boom"]
        assert "Warning: Code formatting failed (ruff): boom" in messages
        assert "Code formatting failed (ruff): boom" in caplog.text
        assert metrics.get("code-formatting") is None
        assert (output_dir / "a.py").read_text() == "X = 1\n"

    def test_success_reports_metrics(self, options_for, output_dir, monkeypatch):
        formatter = RecordingFormatter()
        monkeypatch.setattr(pipeline_module, "get_formatter", lambda mode: formatter)
        metrics = SimpleMetricsCollector()
        options = options_for(FormatMode.VERIFY)
        pipeline = EmissionPipeline(options, metrics=metrics)
        staged = [StagedFile(Path("a.py"), "X = 1\n"), StagedFile(Path("data.json"), "{}\n")]
        result = pipeline.emit(staged, [])
        assert result.warnings == []
        assert formatter.calls == [[options.output_dir / "a.py"]]
        assert metrics.get("verify-formatting").item_count == 1
        assert metrics.get("code-formatting") is not None

    def test_disabled_formatter_is_not_called(self, options_for, output_dir, monkeypatch):
        def fail(mode):
            raise AssertionError("formatter requested")

        monkeypatch.setattr(pipeline_module, "get_formatter", fail)
        result = EmissionPipeline(options_for(FormatMode.NONE)).emit([StagedFile(Path("a.py"), "X = 1\n")], [])
        assert result.warnings == []


if __name__ == "__main__":
    pytest.main([__file__])
