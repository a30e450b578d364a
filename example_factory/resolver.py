"""Dependency resolution: manifest entries -> concrete asset set.

The resolver turns one or more ``ManifestEntry`` records into an ``AssetSet``:
an ordered, deduplicated list of ``(source, destination)`` pairs plus the
merged npm dependency map.  Resolution is eager and pure: every declared file
is checked up front, and identical inputs always yield an identical result.

Destination names come from the contract name declared inside the Solidity
source rather than from its file name, so a catalog file can be renamed
without changing the generated project.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field

from .catalog.models import ManifestEntry
from .config import ProjectLayout
from .errors import DestinationCollision, InvalidAssetPath, MissingSourceFile, UnreadableSource
from .utils import extract_contract_name


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class AssetRole(str, Enum):
    """What part of an example a file plays."""
    CONTRACT = "contract"
    TEST = "test"
    AUXILIARY = "auxiliary"


class AssetFile(BaseModel):
    """One file to place in the target project."""

    model_config = ConfigDict(frozen=True)

    source: Path = Field(..., description="Absolute path inside the catalog")
    destination: str = Field(..., description="POSIX path relative to the project root")
    role: AssetRole
    entry_id: str = Field(..., description="Example that first contributed the file")


class DiagnosticKind(str, Enum):
    DEPENDENCY_VERSION_CONFLICT = "DependencyVersionConflict"
    SYMBOL_NOT_DECLARED = "SymbolNotDeclared"


class Diagnostic(BaseModel):
    """Non-fatal finding reported alongside a successful resolution."""

    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    message: str
    entry_id: str = ""
    subject: str = Field(default="", description="Dependency name or file the finding is about")


class AssetSet(BaseModel):
    """Resolved, deduplicated plan of files and npm dependencies."""

    model_config = ConfigDict(frozen=True)

    files: tuple[AssetFile, ...] = ()
    dependencies: dict[str, str] = Field(default_factory=dict)
    contract_names: tuple[str, ...] = Field(
        default=(), description="Declared names of primary contracts, in entry order"
    )
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def destinations(self) -> list[str]:
        return [f.destination for f in self.files]

    @property
    def primary_contract(self) -> str | None:
        return self.contract_names[0] if self.contract_names else None

    def union(self, other: "AssetSet") -> "AssetSet":
        """Merge *other* into this set, first occurrence winning.

        Used to combine repeated resolutions; files are deduplicated by
        destination and dependencies keep the first-seen constraint.
        """
        files = {f.destination: f for f in self.files}
        for asset in other.files:
            files.setdefault(asset.destination, asset)
        dependencies = dict(self.dependencies)
        for name, constraint in other.dependencies.items():
            dependencies.setdefault(name, constraint)
        return AssetSet(
            files=tuple(files.values()),
            dependencies=dependencies,
            contract_names=tuple(dict.fromkeys([*self.contract_names, *other.contract_names])),
            diagnostics=tuple(dict.fromkeys([*self.diagnostics, *other.diagnostics])),
        )


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class DependencyResolver:
    """Resolves manifest entries against a catalog directory."""

    def __init__(self, catalog_root: str | Path, layout: ProjectLayout | None = None) -> None:
        self.catalog_root = Path(catalog_root)
        self.layout = layout or ProjectLayout()

    def resolve(self, entries: Sequence[ManifestEntry]) -> AssetSet:
        """Resolve *entries* (in order) into an ``AssetSet``.

        Raises:
            MissingSourceFile: A declared contract, test or auxiliary file
                does not exist.
            DestinationCollision: Two different sources map to the same
                destination path.
            UnreadableSource: A contract source is not valid UTF-8.
            InvalidAssetPath: An auxiliary path points outside the catalog.
        """
        claimed: dict[str, AssetFile] = {}
        dependencies: dict[str, str] = {}
        contract_names: list[str] = []
        diagnostics: list[Diagnostic] = []

        for entry in entries:
            contract_src = self._require(entry.primary_asset, entry.id)
            test_src = self._require(entry.test_asset, entry.id)
            aux_sources = [(p, self._require(p, entry.id)) for p in entry.auxiliary_assets]

            try:
                symbol = extract_contract_name(contract_src.read_text(encoding="utf-8"))
            except UnicodeDecodeError as exc:
                raise UnreadableSource(contract_src, entry.id) from exc
            if symbol is None:
                symbol = contract_src.name.split(".", 1)[0]
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.SYMBOL_NOT_DECLARED,
                        message=(
                            f"{entry.primary_asset} declares no contract; "
                            f"using file name '{symbol}'"
                        ),
                        entry_id=entry.id,
                        subject=entry.primary_asset,
                    )
                )
            if symbol not in contract_names:
                contract_names.append(symbol)

            self._claim(
                claimed,
                AssetFile(
                    source=contract_src,
                    destination=f"{self.layout.contracts_dir}/{symbol}{_suffixes(contract_src)}",
                    role=AssetRole.CONTRACT,
                    entry_id=entry.id,
                ),
            )
            self._claim(
                claimed,
                AssetFile(
                    source=test_src,
                    destination=f"{self.layout.tests_dir}/{symbol}{_suffixes(test_src)}",
                    role=AssetRole.TEST,
                    entry_id=entry.id,
                ),
            )
            for declared, source in aux_sources:
                self._claim(
                    claimed,
                    AssetFile(
                        source=source,
                        destination=self._auxiliary_destination(declared),
                        role=AssetRole.AUXILIARY,
                        entry_id=entry.id,
                    ),
                )

            for name, constraint in entry.extra_dependencies.items():
                existing = dependencies.get(name)
                if existing is None:
                    dependencies[name] = constraint
                elif existing != constraint:
                    diagnostics.append(
                        Diagnostic(
                            kind=DiagnosticKind.DEPENDENCY_VERSION_CONFLICT,
                            message=(
                                f"{name}: keeping '{existing}', ignoring '{constraint}' "
                                f"requested by '{entry.id}'"
                            ),
                            entry_id=entry.id,
                            subject=name,
                        )
                    )

        return AssetSet(
            files=tuple(claimed.values()),
            dependencies=dependencies,
            contract_names=tuple(contract_names),
            diagnostics=tuple(diagnostics),
        )

    # -- Helpers -----------------------------------------------------------

    def _require(self, declared: str, entry_id: str) -> Path:
        path = self.catalog_root / declared
        if not path.is_file():
            raise MissingSourceFile(path, entry_id)
        return path

    def _auxiliary_destination(self, declared: str) -> str:
        """Keep the sub-path below ``contracts/`` so nested files do not collide."""
        normalised = posixpath.normpath(PurePosixPath(declared).as_posix())
        if normalised.startswith("..") or PurePosixPath(normalised).is_absolute():
            raise InvalidAssetPath(declared)
        prefix = f"{self.layout.contracts_dir}/"
        relative = normalised[len(prefix):] if normalised.startswith(prefix) else normalised
        return f"{self.layout.contracts_dir}/{relative}"

    @staticmethod
    def _claim(claimed: dict[str, AssetFile], asset: AssetFile) -> None:
        existing = claimed.get(asset.destination)
        if existing is None:
            claimed[asset.destination] = asset
        elif existing.source != asset.source:
            raise DestinationCollision(asset.destination, existing.source, asset.source)


def resolve_entries(
    entries: Iterable[ManifestEntry],
    catalog_root: str | Path,
    layout: ProjectLayout | None = None,
) -> AssetSet:
    """Convenience wrapper around :class:`DependencyResolver`."""
    return DependencyResolver(catalog_root, layout).resolve(list(entries))


def _suffixes(path: Path) -> str:
    """``FHECounter.sol`` -> ``.sol``; ``Foo.test.ts`` -> ``.test.ts``."""
    return "".join(path.suffixes)
