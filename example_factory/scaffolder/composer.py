"""Fresh-project composition (build mode).

Copies the base Hardhat template into a brand-new directory, strips the
template's placeholder files, writes the resolved contracts, tests and shared
contract files, regenerates the deploy script and rewrites ``package.json``.

Every write lands inside the new directory.  There is no rollback: a failure
leaves a freshly created, clearly incomplete directory for the caller to
discard.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from pathlib import Path

from pydantic import BaseModel, Field

from ..catalog.registry import ManifestRegistry
from ..config import FactoryConfig
from ..errors import MissingSourceFile, TargetAlreadyExists
from ..package_manifest import apply_project_metadata, load_manifest, render_manifest
from ..resolver import AssetSet, DependencyResolver
from ..utils import print_warning, run_command
from .templates import TemplateRenderer

_TASK_IMPORT = re.compile(r"""import ["']\./tasks/[^"']+["'];?\n?""")


class ProjectMetadata(BaseModel):
    """What the generated ``package.json`` is called and how it is described."""

    name: str = Field(..., min_length=1, description="npm package name")
    description: str = Field(default="")


class TemplateComposer:
    """Builds a new project directory from a base template and an asset set."""

    def __init__(
        self,
        config: FactoryConfig | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config or FactoryConfig()
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def compose(
        self,
        base_template_dir: str | Path,
        asset_set: AssetSet,
        metadata: ProjectMetadata,
        target_dir: str | Path,
    ) -> Path:
        """Compose a project into *target_dir*, which must not exist yet.

        Returns:
            Path to the generated project root.

        Raises:
            TargetAlreadyExists: *target_dir* is already present.
            MissingSourceFile: The base template directory does not exist.
        """
        template = Path(base_template_dir)
        target = Path(target_dir)
        if target.exists():
            raise TargetAlreadyExists(target)
        if not template.is_dir():
            raise MissingSourceFile(template)
        if not asset_set.contract_names:
            raise ValueError("Asset set contains no contracts to compose")

        layout = self.config.layout

        # 1. Copy the template
        await asyncio.to_thread(
            shutil.copytree,
            template,
            target,
            ignore=_ignore_directories(self.config.template.copy_excludes),
        )

        # 2. Strip placeholders shipped by the template
        await asyncio.to_thread(self._remove_placeholders, target)
        await asyncio.to_thread(self._strip_task_imports, target)

        # 3. Write resolved contracts, tests and shared files
        for asset in asset_set.files:
            await asyncio.to_thread(_copy_file, asset.source, target / asset.destination)

        # 4. Regenerate the deploy script
        deploy_script = self.renderer.render_deploy_script(
            asset_set.contract_names,
            deploy_id=asset_set.primary_contract if len(asset_set.contract_names) == 1 else metadata.name,
        )
        await asyncio.to_thread(_write_text, target / layout.deploy_stub, deploy_script)

        # 5. Rewrite package.json
        manifest_path = target / layout.package_manifest
        manifest = await asyncio.to_thread(load_manifest, manifest_path)
        manifest = apply_project_metadata(
            manifest, metadata.name, metadata.description, asset_set.dependencies
        )
        await asyncio.to_thread(_write_text, manifest_path, render_manifest(manifest))

        if self.config.template.write_support_files:
            await self._write_support_files(target, metadata)

        # 6. Best-effort git init
        if self.config.template.init_git:
            await self._init_git(target)

        return target

    # -- Steps -------------------------------------------------------------

    def _remove_placeholders(self, root: Path) -> None:
        """Delete the fixed list of template-only files and directories."""
        for relative in self.config.template.placeholder_files:
            path = root / relative
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            elif path.exists() or path.is_symlink():
                path.unlink()

    def _strip_task_imports(self, root: Path) -> None:
        """Remove ``./tasks/*`` imports, the tasks directory is a placeholder."""
        for name in self.config.layout.build_configs:
            config_path = root / name
            if not config_path.is_file():
                continue
            content = config_path.read_text(encoding="utf-8")
            cleaned = _TASK_IMPORT.sub("", content)
            if cleaned != content:
                config_path.write_text(cleaned, encoding="utf-8")

    async def _write_support_files(self, root: Path, metadata: ProjectMetadata) -> None:
        layout = self.config.layout
        types_path = root / layout.test_types_file
        if not types_path.exists():
            await self.renderer.render_to_file("types.ts.j2", types_path, {})
        gitignore_path = root / layout.gitignore
        if not gitignore_path.exists():
            await self.renderer.render_to_file(
                "gitignore.j2", gitignore_path, {"project_name": metadata.name}
            )

    async def _init_git(self, root: Path) -> None:
        """Run ``git init``; failures are reported and never propagate."""
        try:
            code, _, stderr = await run_command(
                ["git", "init"], cwd=root, timeout=self.config.template.git_timeout
            )
        except OSError as exc:
            print_warning(f"Skipping git init: {exc}")
            return
        if code != 0:
            print_warning(f"git init failed (exit {code}): {stderr}")


# ---------------------------------------------------------------------------
# Catalog-level helpers
# ---------------------------------------------------------------------------


async def create_example_project(
    example_id: str,
    output_dir: str | Path,
    config: FactoryConfig,
    registry: ManifestRegistry,
) -> tuple[Path, AssetSet]:
    """Compose a single-example project named ``fhevm-example-<id>``."""
    entry = registry.lookup_example(example_id)
    asset_set = DependencyResolver(config.catalog_root, config.layout).resolve([entry])
    metadata = ProjectMetadata(name=entry.package_name, description=entry.description)
    path = await TemplateComposer(config).compose(
        config.resolved_template_dir, asset_set, metadata, output_dir
    )
    return path, asset_set


async def create_category_project(
    category_id: str,
    output_dir: str | Path,
    config: FactoryConfig,
    registry: ManifestRegistry,
) -> tuple[Path, AssetSet]:
    """Compose a project containing every example of a category."""
    category = registry.lookup_category(category_id)
    entries = registry.entries_for_category(category_id)
    asset_set = DependencyResolver(config.catalog_root, config.layout).resolve(entries)
    metadata = ProjectMetadata(name=category.package_name, description=category.description)
    path = await TemplateComposer(config).compose(
        config.resolved_template_dir, asset_set, metadata, output_dir
    )
    return path, asset_set


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ignore_directories(names: list[str]):
    """``shutil.copytree`` ignore callback that skips only directories."""
    excluded = set(names)

    def _ignore(directory: str, entries: list[str]) -> list[str]:
        return [e for e in entries if e in excluded and (Path(directory) / e).is_dir()]

    return _ignore


def _copy_file(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
