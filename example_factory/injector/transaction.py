"""In-memory transaction log for inject mode.

Every mutation the injection engine makes is recorded *before* it touches the
disk: new files and directories are marked for deletion, overwritten files
keep their original bytes.  On failure the log is replayed in strict reverse
order.  The log lives for a single run and is never persisted, so it cannot
help after a process crash.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class RecordKind(str, Enum):
    """How a recorded mutation is undone."""
    CREATE = "create"
    CREATE_DIR = "create_dir"
    OVERWRITE = "overwrite"


@dataclass(frozen=True)
class TransactionRecord:
    """One applied mutation plus what is needed to reverse it."""

    kind: RecordKind
    path: Path
    original: bytes | None = None

    def __post_init__(self) -> None:
        if self.kind is RecordKind.OVERWRITE and self.original is None:
            raise ValueError(f"Overwrite record for {self.path} needs the original content")

    def undo(self) -> None:
        if self.kind is RecordKind.CREATE:
            self.path.unlink(missing_ok=True)
        elif self.kind is RecordKind.CREATE_DIR:
            if self.path.exists():
                self.path.rmdir()
        else:
            self.path.write_bytes(self.original or b"")


@dataclass
class TransactionLog:
    """Ordered record of the mutations made during one injection run."""

    records: list[TransactionRecord] = field(default_factory=list)

    def record_create(self, path: Path) -> None:
        self.records.append(TransactionRecord(RecordKind.CREATE, path))

    def record_directory(self, path: Path) -> None:
        self.records.append(TransactionRecord(RecordKind.CREATE_DIR, path))

    def record_overwrite(self, path: Path, original: bytes) -> None:
        self.records.append(TransactionRecord(RecordKind.OVERWRITE, path, original))

    def discard(self) -> None:
        """Forget every record; called once the run has committed."""
        self.records.clear()

    def rollback(self) -> list[tuple[Path, BaseException]]:
        """Undo every record, newest first.

        Each step is attempted even if an earlier one failed.

        Returns:
            ``(path, error)`` for every record that could not be undone; an
            empty list means the tree is back to its pre-run state.
        """
        failures: list[tuple[Path, BaseException]] = []
        for record in reversed(self.records):
            try:
                record.undo()
            except OSError as exc:
                failures.append((record.path, exc))
        self.records.clear()
        return failures

    def __len__(self) -> int:
        return len(self.records)
