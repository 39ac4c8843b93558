"""
Unit Tests for Snapshot Persistence

Author: filecopy Project
License: MIT
"""

import json
import pytest

from filecopy.core.errors import SnapshotCorruptionError
from filecopy.sync_engine.snapshot import (
    CacheSnapshot,
    load_snapshot,
    try_read_snapshot,
    write_snapshot
)


class TestSnapshotPersistence:
    """Test suite for reading and writing snapshots."""
    
    def test_write_then_read(self, tmp_path):
        """Test that the mapping survives a write and read."""
        path = tmp_path / "state" / "state.json"
        snapshot = CacheSnapshot(
            config_fingerprint="abc=",
            input_file_versions={"/src/a.txt": "1111", "/src/b.txt": "2222"}
        )
        
        write_snapshot(snapshot, str(path))
        
        assert try_read_snapshot(str(path)) == snapshot
        assert json.loads(path.read_text())["config_fingerprint"] == "abc="
    
    def test_missing_file_is_no_state(self, tmp_path):
        assert try_read_snapshot(str(tmp_path / "missing.json")) is None
    
    @pytest.mark.parametrize("content", [
        "not json",
        "[]",
        '{"input_file_versions": {}}',
        '{"config_fingerprint": "x", "input_file_versions": {"a": 1}}',
        '{"version": 99, "config_fingerprint": "x"}',
    ])
    def test_corrupt_file_is_no_state(self, tmp_path, sink, caplog, content):
        """Test that malformed snapshots are discarded with a warning."""
        path = tmp_path / "state.json"
        path.write_text(content)
        
        with pytest.raises(SnapshotCorruptionError):
            load_snapshot(str(path))
        assert try_read_snapshot(str(path), sink) is None
        assert any("Discarding incremental state" in message for message in caplog.messages)
    
    def test_binary_garbage_is_no_state(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        
        assert try_read_snapshot(str(path)) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
