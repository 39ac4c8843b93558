"""
Unit Tests for File Operations

Tests file hashing, copy and hardlink overwrite behavior, and atomic writes.

Author: filecopy Project
License: MIT
"""

import json
import os
import pytest
import shutil

from filecopy.utils.file_ops import (
    atomic_temp_path,
    calculate_file_hash,
    copy_file,
    create_hard_link,
    digest_text,
    remove_existing_entry,
    write_json_atomic
)


class TestFileHashing:
    """Test suite for file hashing functions."""
    
    def test_calculate_hash_sha256(self, tmp_path):
        """Test SHA256 hash calculation."""
        test_file = tmp_path / "test.txt"
        test_file.write_text("Hello, World!")
        
        hash_value = calculate_file_hash(str(test_file), algorithm="sha256")
        
        # SHA256 of "Hello, World!"
        expected = "dffd6021bb2bd5b0af676290809ec3a53191dd81c7f70a4b28688a362182986f"
        assert hash_value == expected
    
    def test_hash_nonexistent_file_raises_error(self):
        """Test that hashing non-existent file raises error."""
        with pytest.raises(FileNotFoundError):
            calculate_file_hash("/nonexistent/file.txt")
    
    def test_unsupported_algorithm(self, tmp_path):
        """Test that unknown algorithms are rejected."""
        test_file = tmp_path / "test.txt"
        test_file.write_text("x")
        
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            calculate_file_hash(str(test_file), algorithm="nope")
    
    def test_hash_large_file(self, tmp_path):
        """Test hashing files larger than one chunk."""
        test_file = tmp_path / "large.bin"
        test_file.write_bytes(b'A' * (1024 * 1024))
        
        hash_value = calculate_file_hash(str(test_file), chunk_size=4096)
        assert len(hash_value) == 64  # SHA256 is 64 hex chars
    
    def test_digest_text_is_order_sensitive(self):
        """Test digests of string sequences."""
        assert digest_text(["a", "b"]) == digest_text(["a", "b"])
        assert digest_text(["a", "b"]) != digest_text(["b", "a"])


class TestCopyFile:
    """Test suite for copy with overwrite."""
    
    def test_creates_parent_directories(self, tmp_path):
        """Test copying into a folder that doesn't exist yet."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        destination = tmp_path / "deep" / "er" / "a.txt"
        
        copy_file(str(source), str(destination))
        
        assert destination.read_text() == "content"
    
    def test_overwrites_existing_file(self, tmp_path):
        """Test that an existing destination is replaced."""
        source = tmp_path / "a.txt"
        source.write_text("new")
        destination = tmp_path / "b.txt"
        destination.write_text("old")
        
        copy_file(str(source), str(destination))
        
        assert destination.read_text() == "new"
    
    def test_does_not_write_through_hardlink(self, tmp_path):
        """Test that copying over a hardlink of the source leaves the source alone."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        destination = tmp_path / "b.txt"
        os.link(source, destination)
        
        copy_file(str(source), str(destination))
        
        assert destination.read_text() == "content"
        assert os.stat(source).st_ino != os.stat(destination).st_ino
    
    def test_refuses_copy_onto_itself(self, tmp_path):
        """Test that copying a file onto its own path keeps the file."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        
        with pytest.raises(shutil.SameFileError):
            copy_file(str(source), str(tmp_path / "." / "a.txt"))
        
        assert source.read_text() == "content"
    
    def test_refuses_copy_through_symlinked_folder(self, tmp_path):
        """Test that a destination reached through a folder symlink is detected."""
        (tmp_path / "src").mkdir()
        source = tmp_path / "src" / "a.txt"
        source.write_text("content")
        os.symlink(tmp_path / "src", tmp_path / "alias")
        
        with pytest.raises(shutil.SameFileError):
            copy_file(str(source), str(tmp_path / "alias" / "a.txt"))
        
        assert source.read_text() == "content"


class TestCreateHardLink:
    """Test suite for hardlink with overwrite."""
    
    def test_links_file(self, tmp_path):
        """Test that the destination shares the source inode."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        destination = tmp_path / "nested" / "a.txt"
        
        create_hard_link(str(source), str(destination))
        
        assert destination.parent.is_dir()
        assert not destination.parent.is_symlink()
        assert os.stat(source).st_ino == os.stat(destination).st_ino
    
    def test_replaces_existing_file(self, tmp_path):
        """Test that an existing destination is replaced by the link."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        destination = tmp_path / "b.txt"
        destination.write_text("stale")
        
        create_hard_link(str(source), str(destination))
        
        assert destination.read_text() == "content"
        assert os.stat(source).st_ino == os.stat(destination).st_ino
    
    def test_missing_source_raises(self, tmp_path):
        """Test linking a missing file."""
        with pytest.raises(FileNotFoundError):
            create_hard_link(str(tmp_path / "missing"), str(tmp_path / "b.txt"))
    
    def test_link_onto_itself_is_noop(self, tmp_path):
        """Test that linking a file to its own path keeps the file."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        
        create_hard_link(str(source), str(source))
        
        assert source.read_text() == "content"
    
    def test_existing_link_left_alone(self, tmp_path):
        """Test that a destination already linked to the source is kept."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        destination = tmp_path / "b.txt"
        os.link(source, destination)
        inode = os.stat(destination).st_ino
        
        create_hard_link(str(source), str(destination))
        
        assert os.stat(destination).st_ino == inode
        assert source.read_text() == "content"
    
    def test_symlink_to_source_replaced_by_link(self, tmp_path):
        """Test that a symlink destination becomes a real hardlink."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        destination = tmp_path / "b.txt"
        os.symlink(source, destination)
        
        create_hard_link(str(source), str(destination))
        
        assert not destination.is_symlink()
        assert os.stat(source).st_ino == os.stat(destination).st_ino


class TestWriteJsonAtomic:
    """Test suite for atomic JSON writes."""
    
    def test_writes_and_replaces(self, tmp_path):
        """Test writing, then replacing, a JSON file."""
        target = tmp_path / "state" / "state.json"
        
        write_json_atomic(str(target), {"a": 1})
        write_json_atomic(str(target), {"b": 2})
        
        assert json.loads(target.read_text()) == {"b": 2}
        assert not os.path.exists(atomic_temp_path(str(target)))
    
    def test_failed_write_keeps_previous_content(self, tmp_path):
        """Test that a serialization failure leaves the old file intact."""
        target = tmp_path / "state.json"
        write_json_atomic(str(target), {"a": 1})
        
        with pytest.raises(TypeError):
            write_json_atomic(str(target), {"bad": object()})
        
        assert json.loads(target.read_text()) == {"a": 1}
        assert not os.path.exists(atomic_temp_path(str(target)))
    
    def test_remove_existing_entry(self, tmp_path):
        """Test removing present and absent entries."""
        target = tmp_path / "x"
        target.write_text("x")
        
        assert remove_existing_entry(str(target)) is True
        assert remove_existing_entry(str(target)) is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
