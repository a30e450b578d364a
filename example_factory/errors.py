"""Exception taxonomy for the example factory.

Planning errors are raised before anything on disk is touched, so callers can
retry or abort without cleanup.  ``ApplyFailure`` is the only error raised
after mutation has started; by the time it reaches the caller the engine has
already attempted a rollback and records the outcome on the exception.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any


class FactoryError(Exception):
    """Base class for every error raised by the factory."""


# ---------------------------------------------------------------------------
# Planning-phase errors (nothing mutated)
# ---------------------------------------------------------------------------


class PlanningError(FactoryError):
    """Raised before any filesystem mutation takes place."""


class UnknownIdentifier(PlanningError):
    """An example or category id is not present in the catalog."""

    def __init__(self, kind: str, identifier: str, valid: Iterable[str]) -> None:
        self.kind = kind
        self.identifier = identifier
        self.valid = sorted(valid)
        super().__init__(
            f'Unknown {kind} "{identifier}". '
            f"Valid {kind}s: {', '.join(self.valid) or '(none)'}"
        )


class MissingSourceFile(PlanningError):
    """A catalog entry points at a file that does not exist."""

    def __init__(self, path: str | Path, entry_id: str = "") -> None:
        self.path = Path(path)
        self.entry_id = entry_id
        owner = f" (declared by '{entry_id}')" if entry_id else ""
        super().__init__(f"Source file not found: {self.path}{owner}")


class UnreadableSource(PlanningError):
    """A catalog source exists but cannot be decoded as UTF-8 text."""

    def __init__(self, path: str | Path, entry_id: str = "") -> None:
        self.path = Path(path)
        self.entry_id = entry_id
        owner = f" (declared by '{entry_id}')" if entry_id else ""
        super().__init__(f"Source file is not valid UTF-8: {self.path}{owner}")


class InvalidAssetPath(PlanningError):
    """A declared asset path points outside the catalog root."""

    def __init__(self, declared: str) -> None:
        self.declared = declared
        super().__init__(f"Auxiliary path escapes the catalog: {declared}")


class DestinationCollision(PlanningError):
    """Two different sources would be written to the same destination."""

    def __init__(self, destination: str, first: str | Path, second: str | Path) -> None:
        self.destination = destination
        self.first = Path(first)
        self.second = Path(second)
        super().__init__(
            f"Destination '{destination}' is claimed by both "
            f"{self.first} and {self.second}"
        )


class TargetAlreadyExists(PlanningError):
    """Fresh-build mode refuses to write into an existing directory."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Directory already exists: {self.path}")


class NotATargetProject(PlanningError):
    """Inject mode was pointed at a directory that is not a Hardhat project."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Not a valid Hardhat project: {self.path} ({reason})")


# ---------------------------------------------------------------------------
# Applying-phase errors
# ---------------------------------------------------------------------------


class RollbackIncomplete(FactoryError):
    """Some transaction records could not be reversed.

    Never raised on its own; attached to :class:`ApplyFailure` so that the
    original error is not masked.
    """

    def __init__(self, failures: list[tuple[Path, BaseException]]) -> None:
        self.failures = failures
        paths = ", ".join(str(p) for p, _ in failures)
        super().__init__(f"Rollback could not restore: {paths}")


class ApplyFailure(FactoryError):
    """A filesystem operation failed while an injection was being applied."""

    def __init__(
        self,
        path: str | Path,
        state: Any,
        rollback: RollbackIncomplete | None = None,
    ) -> None:
        self.path = Path(path)
        self.state = state
        self.rollback = rollback
        message = f"Failed to apply change to {self.path}; state: {getattr(state, 'value', state)}"
        if rollback is not None:
            message += f". {rollback}"
        super().__init__(message)

    @property
    def rollback_complete(self) -> bool:
        return self.rollback is None
