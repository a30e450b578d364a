"""Tests for the inject-mode transaction log."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from example_factory.injector.transaction import RecordKind, TransactionLog, TransactionRecord


pytestmark = pytest.mark.unit


class TestTransactionRecord:
    def test_undo_create_deletes_file(self, tmp_path: Path):
        path = tmp_path / "new.sol"
        path.write_text("x", encoding="utf-8")
        TransactionRecord(RecordKind.CREATE, path).undo()
        assert not path.exists()

    def test_undo_create_tolerates_missing_file(self, tmp_path: Path):
        TransactionRecord(RecordKind.CREATE, tmp_path / "never-written.sol").undo()

    def test_undo_overwrite_restores_bytes(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_bytes(b"new")
        TransactionRecord(RecordKind.OVERWRITE, path, b"original\r\n").undo()
        assert path.read_bytes() == b"original\r\n"

    def test_overwrite_requires_original(self, tmp_path: Path):
        with pytest.raises(ValueError, match="original content"):
            TransactionRecord(RecordKind.OVERWRITE, tmp_path / "package.json")

    def test_overwrite_with_empty_original(self, tmp_path: Path):
        path = tmp_path / "empty.txt"
        path.write_bytes(b"new")
        TransactionRecord(RecordKind.OVERWRITE, path, b"").undo()
        assert path.read_bytes() == b""

    def test_undo_directory(self, tmp_path: Path):
        directory = tmp_path / "contracts"
        directory.mkdir()
        TransactionRecord(RecordKind.CREATE_DIR, directory).undo()
        assert not directory.exists()


class TestTransactionLog:
    def test_rollback_reverse_order(self, tmp_path: Path):
        log = TransactionLog()
        directory = tmp_path / "contracts"
        log.record_directory(directory)
        directory.mkdir()
        created = directory / "Foo.sol"
        log.record_create(created)
        created.write_text("foo", encoding="utf-8")
        existing = tmp_path / "package.json"
        existing.write_text("{}", encoding="utf-8")
        log.record_overwrite(existing, existing.read_bytes())
        existing.write_text('{"changed": true}', encoding="utf-8")

        assert len(log) == 3
        assert [r.path for r in log.records] == [directory, created, existing]

        failures = log.rollback()
        assert failures == []
        assert not directory.exists()
        assert existing.read_text(encoding="utf-8") == "{}"
        assert len(log) == 0

    def test_rollback_continues_after_failure(self, tmp_path: Path):
        log = TransactionLog()
        first = tmp_path / "a.sol"
        first.write_text("a", encoding="utf-8")
        log.record_create(first)
        second = tmp_path / "b.sol"
        second.write_text("b", encoding="utf-8")
        log.record_overwrite(second, b"original")

        original_write = Path.write_bytes

        def _failing_write(self, data):
            if self == second:
                raise PermissionError("read-only")
            return original_write(self, data)

        with patch.object(Path, "write_bytes", _failing_write):
            failures = log.rollback()

        assert [path for path, _ in failures] == [second]
        assert isinstance(failures[0][1], PermissionError)
        assert not first.exists()

    def test_discard(self, tmp_path: Path):
        log = TransactionLog()
        path = tmp_path / "keep.sol"
        path.write_text("x", encoding="utf-8")
        log.record_create(path)
        log.discard()
        assert log.rollback() == []
        assert path.exists()
