"""Inject mode: merge one example into an existing Hardhat project.

A run moves through ``PLANNING -> APPLYING -> COMMITTED`` or, when any write
fails, ``PLANNING -> APPLYING -> ROLLING_BACK -> ROLLED_BACK``.

Planning does every read, check and conflict decision up front and never
mutates the target.  Applying writes one operation at a time, in asset-set
order, recording each mutation in a :class:`TransactionLog` before touching
the disk so that a failure can restore the tree.  Running two injections
against the same directory at once is not supported.
"""

from __future__ import annotations

import asyncio
import json
import os
from enum import Enum
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field

from ..catalog.registry import ManifestRegistry
from ..config import FactoryConfig
from ..errors import ApplyFailure, NotATargetProject, RollbackIncomplete
from ..package_manifest import declares_package, merge_missing, pin_dependencies
from ..resolver import AssetSet, Diagnostic, DependencyResolver
from ..utils import load_json, print_warning
from .decisions import Decision, DecisionFn
from .transaction import TransactionLog


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class InjectionState(str, Enum):
    PLANNING = "planning"
    APPLYING = "applying"
    COMMITTED = "committed"
    ROLLING_BACK = "rolling_back"
    ROLLED_BACK = "rolled_back"


class OperationKind(str, Enum):
    """Planned mutation for one destination."""
    CREATE = "create"
    OVERWRITE = "overwrite"
    SKIP_CONFLICT = "skip_conflict"


class FileOperation(BaseModel):
    """One planned file mutation, content already loaded."""

    kind: OperationKind
    destination: str = Field(..., description="Final project-relative path")
    requested: str = Field(..., description="Destination the asset set asked for")
    content: bytes = b""

    @property
    def renamed(self) -> bool:
        return self.destination != self.requested


class UpdatedDependency(BaseModel):
    """A framework package whose declared constraint was replaced."""

    name: str
    previous: str
    constraint: str


class InjectionPlan(BaseModel):
    """Everything the applying phase needs; produced without touching the target."""

    target: Path
    entry_id: str
    asset_set: AssetSet
    operations: list[FileOperation] = Field(default_factory=list)
    manifest_text: str | None = Field(
        default=None, description="New package.json content, None when unchanged"
    )
    dependencies_added: dict[str, str] = Field(default_factory=dict)
    dependencies_kept: dict[str, str] = Field(default_factory=dict)
    dependencies_updated: list[UpdatedDependency] = Field(default_factory=list)
    build_config: str = Field(..., description="Project-relative path of the build config")
    build_config_text: str | None = Field(
        default=None, description="New build config content, None when unchanged"
    )


class RenamedFile(BaseModel):
    original: str
    renamed: str


class InjectionSummary(BaseModel):
    """Outcome of an injection run, for CLI reporting."""

    target: Path
    entry_id: str
    state: InjectionState
    created: list[str] = Field(default_factory=list)
    overwritten: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    renamed: list[RenamedFile] = Field(default_factory=list)
    updated: list[str] = Field(
        default_factory=list, description="Project files merged in place (package.json, build config)"
    )
    dependencies_added: dict[str, str] = Field(default_factory=dict)
    dependencies_kept: dict[str, str] = Field(default_factory=dict)
    dependencies_updated: list[UpdatedDependency] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class InjectionEngine:
    """Plans and applies one example against an existing project."""

    def __init__(
        self,
        config: FactoryConfig,
        registry: ManifestRegistry,
        decide: DecisionFn,
    ) -> None:
        self.config = config
        self.registry = registry
        self.decide = decide
        self.state = InjectionState.PLANNING

    # -- Public API --------------------------------------------------------

    async def inject(self, target_dir: str | Path, example_id: str) -> InjectionSummary:
        """Plan and apply *example_id* against *target_dir*.

        Raises:
            UnknownIdentifier, MissingSourceFile, DestinationCollision,
            NotATargetProject: Planning failed; nothing was changed.
            ApplyFailure: A write failed; the tree was rolled back (see
                ``ApplyFailure.rollback`` for anything left unrestored).
        """
        plan = self.plan(target_dir, example_id)
        return await self.apply(plan)

    def detect_project(self, target_dir: str | Path) -> str:
        """Check the marker files and return the build config's relative path.

        Raises:
            NotATargetProject: A marker file is missing or the manifest does
                not declare the framework package.
        """
        target = Path(target_dir)
        layout = self.config.layout
        if not target.is_dir():
            raise NotATargetProject(target, "directory does not exist")

        manifest_path = target / layout.package_manifest
        if not manifest_path.is_file():
            raise NotATargetProject(target, f"{layout.package_manifest} not found")
        try:
            manifest = load_json(manifest_path)
        except (json.JSONDecodeError, ValueError) as exc:
            raise NotATargetProject(target, f"{layout.package_manifest} is not valid JSON") from exc
        if not declares_package(manifest, layout.framework_package):
            raise NotATargetProject(
                target, f"{layout.framework_package} is not listed in {layout.package_manifest}"
            )

        for name in layout.build_configs:
            if (target / name).is_file():
                return name
        raise NotATargetProject(target, f"none of {', '.join(layout.build_configs)} found")

    def plan(self, target_dir: str | Path, example_id: str) -> InjectionPlan:
        """Resolve the example and decide what happens to every destination."""
        self.state = InjectionState.PLANNING
        target = Path(target_dir).resolve()
        build_config = self.detect_project(target)

        entry = self.registry.lookup_example(example_id)
        asset_set = DependencyResolver(self.config.catalog_root, self.config.layout).resolve([entry])

        operations: list[FileOperation] = []
        taken = set(asset_set.destinations)
        for asset in asset_set.files:
            content = asset.source.read_bytes()
            destination = asset.destination
            if not os.path.lexists(target / destination):
                operations.append(
                    FileOperation(
                        kind=OperationKind.CREATE,
                        destination=destination,
                        requested=destination,
                        content=content,
                    )
                )
                continue

            decision = Decision(self.decide(destination))
            if decision is Decision.SKIP:
                operations.append(
                    FileOperation(
                        kind=OperationKind.SKIP_CONFLICT,
                        destination=destination,
                        requested=destination,
                    )
                )
            elif decision is Decision.OVERWRITE:
                operations.append(
                    FileOperation(
                        kind=OperationKind.OVERWRITE,
                        destination=destination,
                        requested=destination,
                        content=content,
                    )
                )
            else:
                renamed = disambiguate(target, destination, taken)
                taken.add(renamed)
                operations.append(
                    FileOperation(
                        kind=OperationKind.CREATE,
                        destination=renamed,
                        requested=destination,
                        content=content,
                    )
                )

        manifest_text, added, kept, updated = self._plan_manifest(target, asset_set)
        build_config_text = self._plan_build_config(target / build_config)

        return InjectionPlan(
            target=target,
            entry_id=entry.id,
            asset_set=asset_set,
            operations=operations,
            manifest_text=manifest_text,
            dependencies_added=added,
            dependencies_kept=kept,
            dependencies_updated=updated,
            build_config=build_config,
            build_config_text=build_config_text,
        )

    async def apply(self, plan: InjectionPlan) -> InjectionSummary:
        """Apply *plan* sequentially, rolling back on the first failure."""
        self.state = InjectionState.APPLYING
        log = TransactionLog()
        summary = InjectionSummary(
            target=plan.target,
            entry_id=plan.entry_id,
            state=self.state,
            dependencies_added=plan.dependencies_added,
            dependencies_kept=plan.dependencies_kept,
            dependencies_updated=plan.dependencies_updated,
            diagnostics=list(plan.asset_set.diagnostics),
        )

        current = plan.target
        try:
            for op in plan.operations:
                current = plan.target / op.destination
                if op.kind is OperationKind.SKIP_CONFLICT:
                    summary.skipped.append(op.destination)
                elif op.kind is OperationKind.CREATE:
                    await asyncio.to_thread(_create, plan.target, current, op.content, log)
                    if op.renamed:
                        summary.renamed.append(
                            RenamedFile(original=op.requested, renamed=op.destination)
                        )
                    else:
                        summary.created.append(op.destination)
                else:
                    await asyncio.to_thread(_overwrite, current, op.content, log)
                    summary.overwritten.append(op.destination)

            if plan.manifest_text is not None:
                manifest = self.config.layout.package_manifest
                current = plan.target / manifest
                await asyncio.to_thread(
                    _overwrite, current, plan.manifest_text.encode("utf-8"), log
                )
                summary.updated.append(manifest)

            if plan.build_config_text is not None:
                current = plan.target / plan.build_config
                await asyncio.to_thread(
                    _overwrite, current, plan.build_config_text.encode("utf-8"), log
                )
                summary.updated.append(plan.build_config)
        except Exception as exc:
            self.state = InjectionState.ROLLING_BACK
            failures = await asyncio.to_thread(log.rollback)
            self.state = InjectionState.ROLLED_BACK
            rollback = RollbackIncomplete(failures) if failures else None
            if rollback is not None:
                print_warning(f"RollbackIncomplete: {rollback}")
            raise ApplyFailure(current, self.state, rollback) from exc

        log.discard()
        self.state = InjectionState.COMMITTED
        summary.state = self.state
        return summary

    # -- Planning helpers --------------------------------------------------

    def _plan_manifest(
        self, target: Path, asset_set: AssetSet
    ) -> tuple[str | None, dict[str, str], dict[str, str], list[UpdatedDependency]]:
        """Pin the framework packages and add missing example dependencies.

        Framework constraints from the inject config replace whatever the
        project declared.  Example dependencies are only added when absent.
        Nothing is ever removed.
        """
        inject = self.config.inject
        data = load_json(target / self.config.layout.package_manifest)
        added: dict[str, str] = {}
        updated: list[UpdatedDependency] = []
        for section, deps in (
            ("dependencies", inject.dependencies),
            ("devDependencies", inject.dev_dependencies),
        ):
            data, section_added, replaced = pin_dependencies(data, section, deps)
            added.update(section_added)
            updated.extend(
                UpdatedDependency(name=name, previous=previous, constraint=deps[name])
                for name, previous in replaced.items()
            )

        data, example_added, kept = merge_missing(data, "dependencies", asset_set.dependencies)
        added.update(example_added)
        if not added and not updated:
            return None, added, kept, updated
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        return text, added, kept, updated

    def _plan_build_config(self, path: Path) -> str | None:
        """Insert the plugin import after the last import, unless present."""
        inject = self.config.inject
        content = path.read_text(encoding="utf-8")
        if inject.plugin_package in content:
            return None
        lines = content.split("\n")
        last_import = -1
        for index, line in enumerate(lines):
            if line.strip().startswith("import "):
                last_import = index
        lines.insert(last_import + 1, inject.plugin_import)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def disambiguate(target: Path, destination: str, taken: set[str]) -> str:
    """Return ``dir/Name_<n>.ext`` for the smallest free ``n >= 1``."""
    path = PurePosixPath(destination)
    stem, dot, extension = path.name.partition(".")
    counter = 1
    while True:
        candidate = str(path.with_name(f"{stem}_{counter}{dot}{extension}"))
        if candidate not in taken and not os.path.lexists(target / candidate):
            return candidate
        counter += 1


def _ensure_parent(root: Path, path: Path, log: TransactionLog) -> None:
    """Create missing parent directories top-down, recording each one."""
    missing: list[Path] = []
    parent = path.parent
    while parent != root and not os.path.lexists(parent):
        missing.append(parent)
        parent = parent.parent
    for directory in reversed(missing):
        log.record_directory(directory)
        _make_directory(directory)


def _create(root: Path, path: Path, content: bytes, log: TransactionLog) -> None:
    _ensure_parent(root, path, log)
    log.record_create(path)
    _write_bytes(path, content)


def _overwrite(path: Path, content: bytes, log: TransactionLog) -> None:
    log.record_overwrite(path, path.read_bytes())
    _write_bytes(path, content)


def _make_directory(path: Path) -> None:
    path.mkdir()


def _write_bytes(path: Path, content: bytes) -> None:
    path.write_bytes(content)
