"""Tests for bounded pseudo-file reads."""

import logging

import pytest

from procinspect.reader import (
    FileRead,
    PseudoFile,
    ReadStatus,
    Unavailable,
    open_pseudo_file,
    read_pseudo_file,
)


def test_open_missing_file_is_unavailable(tmp_path, caplog):
    """Test a missing file gives an Unavailable outcome and a warning."""
    with caplog.at_level(logging.WARNING, logger="procinspect.reader"):
        handle = open_pseudo_file(tmp_path / "nope")

    assert isinstance(handle, Unavailable)
    assert handle.path == tmp_path / "nope"
    assert "open" in caplog.text


def test_open_missing_ok_logs_at_debug(tmp_path, caplog):
    """Test missing_ok keeps the failure out of warning output."""
    with caplog.at_level(logging.WARNING, logger="procinspect.reader"):
        handle = open_pseudo_file(tmp_path / "gone", missing_ok=True)

    assert isinstance(handle, Unavailable)
    assert caplog.records == []


def test_read_in_chunks(tmp_path):
    """Test a handle returns bounded chunks then b"" at end of file."""
    path = tmp_path / "data"
    path.write_bytes(b"x" * 300)

    handle = open_pseudo_file(path)
    assert isinstance(handle, PseudoFile)
    with handle:
        sizes = []
        while chunk := handle.read(128):
            sizes.append(len(chunk))

    assert sizes == [128, 128, 44]
    assert handle.closed


def test_close_is_idempotent(tmp_path):
    """Test closing twice is safe."""
    path = tmp_path / "data"
    path.write_text("a")
    handle = open_pseudo_file(path)
    handle.close()
    handle.close()
    assert handle.closed


def test_read_after_close_raises(tmp_path):
    """Test reading a released handle is a programming error."""
    path = tmp_path / "data"
    path.write_text("a")
    handle = open_pseudo_file(path)
    handle.close()
    with pytest.raises(ValueError):
        handle.read()


def test_read_pseudo_file_joins_chunks(tmp_path):
    """Test a label straddling a chunk boundary survives the full read."""
    path = tmp_path / "stat"
    text = "a" * 126 + "\nprocesses 99\n"
    path.write_text(text)

    result = read_pseudo_file(path, chunk_size=128)

    assert result.ok
    assert result.text == text
    assert "processes 99" in result.text


def test_read_pseudo_file_unavailable(tmp_path):
    """Test a missing file reads as UNAVAILABLE with empty text."""
    result = read_pseudo_file(tmp_path / "missing")
    assert result == FileRead(tmp_path / "missing", ReadStatus.UNAVAILABLE, "")
    assert not result.ok


def test_read_failure_still_closes(tmp_path, caplog):
    """Test a failing read is reported and the descriptor is released."""
    # Reading a directory descriptor fails with EISDIR
    with caplog.at_level(logging.ERROR, logger="procinspect.reader"):
        result = read_pseudo_file(tmp_path)

    assert result.status is ReadStatus.READ_FAILURE
    assert result.text == ""
    assert "read" in caplog.text


def test_read_pseudo_file_decodes_invalid_utf8(tmp_path):
    """Test undecodable bytes are replaced instead of failing."""
    path = tmp_path / "comm"
    path.write_bytes(b"bad\xffname\n")
    result = read_pseudo_file(path)
    assert result.ok
    assert result.text.startswith("bad")
