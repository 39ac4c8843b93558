"""
Unit Tests for the Command Line

Tests the run, watch and fingerprint commands through Typer's CliRunner.

Author: filecopy Project
License: MIT
"""

import json
import pytest
from typer.testing import CliRunner

from filecopy.cli import app
from filecopy.config.config_loader import load_config
from filecopy.monitoring.watcher import CopyFilesWatcher
from filecopy.sync_engine.fingerprint import compute_config_fingerprint

runner = CliRunner()

CONFIG = """
copy_operations:
  - source_path: src
    include_globs: ["*.txt"]
    destination_folders: [out]
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("FILECOPY_LOG_LEVEL", "FILECOPY_MAX_PARALLELISM", "FILECOPY_STATE_PATH",
                 "FILECOPY_JSON_LOGS", "FILECOPY_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path, source_tree):
    path = tmp_path / "filecopy.yaml"
    path.write_text(CONFIG)
    return path


class TestRunCommand:
    """Test suite for `filecopy run`."""
    
    def test_run_copies_and_is_idempotent(self, config_file, tmp_path):
        result = runner.invoke(app, ["run", "--config", str(config_file)])
        
        assert result.exit_code == 0
        assert "Copied 2 files and linked 0 files" in result.output
        assert (tmp_path / "out" / "a.txt").read_text() == "hello"
        assert (tmp_path / ".filecopy" / "state.json").exists()
        
        result = runner.invoke(app, ["run", "--config", str(config_file)])
        
        assert result.exit_code == 0
        assert "Nothing to do" in result.output
    
    def test_verbose_logs_per_file_lines(self, config_file):
        result = runner.invoke(app, ["run", "-c", str(config_file), "--verbose"])
        
        assert result.exit_code == 0
        assert "a.txt" in result.output
        assert "Copied \"" in result.output
    
    def test_json_logs(self, config_file):
        result = runner.invoke(app, ["run", "-c", str(config_file), "--json-logs"])
        
        assert result.exit_code == 0
        records = [json.loads(line) for line in result.stdout.splitlines() if line.startswith("{")]
        assert any(record["message"] == "Copied 2 files and linked 0 files" for record in records)
    
    def test_config_from_environment(self, config_file, tmp_path, monkeypatch):
        monkeypatch.setenv("FILECOPY_CONFIG", str(config_file))

        result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        assert (tmp_path / "out" / "a.txt").read_text() == "hello"

    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["run", "-c", str(tmp_path / "nope.yaml")])
        
        assert result.exit_code == 2
        assert "not found" in result.output
    
    def test_conflict_exits_with_error(self, tmp_path):
        for folder in ("one", "two"):
            (tmp_path / folder).mkdir()
            (tmp_path / folder / "a.txt").write_text(folder)
        config_file = tmp_path / "filecopy.yaml"
        config_file.write_text(
            "copy_operations:\n"
            "  - {source_path: one, destination_folders: [out]}\n"
            "  - {source_path: two, destination_folders: [out]}\n"
        )
        
        result = runner.invoke(app, ["run", "-c", str(config_file)])
        
        assert result.exit_code == 1
        assert "Copy failed" in result.output
        assert not (tmp_path / "out").exists()
    
    def test_watch_enabled_keeps_watching(self, tmp_path, source_tree, monkeypatch):
        config_file = tmp_path / "filecopy.yaml"
        config_file.write_text(CONFIG + "watch:\n  enabled: true\n")
        calls = []
        
        def _interrupt(self, poll_interval=0.5, stop_event=None):
            calls.append(poll_interval)
            raise KeyboardInterrupt
        
        monkeypatch.setattr(CopyFilesWatcher, "run_forever", _interrupt)
        
        result = runner.invoke(app, ["run", "-c", str(config_file)])
        
        assert result.exit_code == 0
        assert calls == [0.5]
        assert "Stopped watching." in result.output


class TestWatchCommand:
    """Test suite for `filecopy watch`."""
    
    def test_watch_runs_first_then_watches(self, config_file, tmp_path, monkeypatch):
        seen = {}
        
        def _interrupt(self, poll_interval=0.5, stop_event=None):
            seen["debounce"] = self.debounce_seconds
            raise KeyboardInterrupt
        
        monkeypatch.setattr(CopyFilesWatcher, "run_forever", _interrupt)
        
        result = runner.invoke(app, ["watch", "-c", str(config_file), "--debounce", "0.25"])
        
        assert result.exit_code == 0
        assert seen["debounce"] == 0.25
        assert (tmp_path / "out" / "b.txt").read_text() == "world"


class TestFingerprintCommand:
    """Test suite for `filecopy fingerprint`."""
    
    def test_prints_fingerprint(self, config_file):
        expected = compute_config_fingerprint(load_config(str(config_file)).copy_operations)
        
        result = runner.invoke(app, ["fingerprint", "-c", str(config_file)])
        
        assert result.exit_code == 0
        assert result.stdout.strip() == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
