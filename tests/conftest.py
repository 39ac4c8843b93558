"""Shared fixtures."""

import logging

import pytest

from filecopy.config.schema import CopyOperation


@pytest.fixture(autouse=True)
def reset_filecopy_logger():
    """Undo setup_logging() so caplog keeps seeing package loggers."""
    yield
    logger = logging.getLogger("filecopy")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sink(caplog):
    """Injected logger whose records caplog captures at DEBUG."""
    caplog.set_level(logging.DEBUG, logger="tests.sink")
    return logging.getLogger("tests.sink")


@pytest.fixture
def source_tree(tmp_path):
    """src/ with a.txt ("hello") and b.txt ("world")."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.txt").write_text("hello")
    (src / "b.txt").write_text("world")
    return src


@pytest.fixture
def make_operation(tmp_path):
    """Build a CopyOperation rooted in tmp_path."""
    def _make(source="src", destinations=("out",), **kwargs):
        return CopyOperation(
            source_path=str(tmp_path / source),
            destination_folders=[str(tmp_path / d) for d in destinations],
            **kwargs
        )
    return _make
