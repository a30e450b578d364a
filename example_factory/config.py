"""Example factory configuration.

Centralised, typed configuration for scaffolding and injection. All settings
use Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ProjectLayout(BaseModel):
    """Conventional locations inside a generated or existing Hardhat project."""

    contracts_dir: str = Field(default="contracts")
    tests_dir: str = Field(default="test")
    deploy_stub: str = Field(default="deploy/deploy.ts")
    package_manifest: str = Field(default="package.json")
    build_configs: list[str] = Field(
        default=["hardhat.config.ts", "hardhat.config.js"],
        min_length=1,
        description="Marker files; the first one found is the project's build config",
    )
    framework_package: str = Field(
        default="hardhat",
        description="Package that must appear in the manifest for inject mode to accept a project",
    )
    test_types_file: str = Field(default="test/types.ts")
    gitignore: str = Field(default=".gitignore")


class TemplateConfig(BaseModel):
    """How the base template is copied and cleaned in fresh-build mode."""

    placeholder_files: list[str] = Field(
        default=[
            ".git",
            ".github",
            ".vscode",
            ".DS_Store",
            "LICENSE",
            "contracts/FHECounter.sol",
            "contracts/.gitkeep",
            "test/FHECounter.ts",
            "test/.gitkeep",
            "tasks",
        ],
        description="Exact template-relative paths removed after copying",
    )
    copy_excludes: list[str] = Field(
        default=["node_modules", "artifacts", "cache", "coverage", "types", "dist", ".git"],
        description="Directory names never copied out of the template",
    )
    write_support_files: bool = Field(
        default=True, description="Write test/types.ts and a missing .gitignore"
    )
    init_git: bool = Field(default=True, description="Run 'git init' in the new project")
    git_timeout: int = Field(default=30, ge=1)


class InjectConfig(BaseModel):
    """What inject mode adds to an existing project besides the example files."""

    dependencies: dict[str, str] = Field(
        default_factory=lambda: {
            "encrypted-types": "^0.0.4",
            "@fhevm/solidity": "^0.9.1",
        }
    )
    dev_dependencies: dict[str, str] = Field(
        default_factory=lambda: {
            "@fhevm/hardhat-plugin": "^0.3.0-1",
            "@zama-fhe/relayer-sdk": "^0.3.0-5",
        }
    )
    plugin_package: str = Field(default="@fhevm/hardhat-plugin")
    plugin_import: str = Field(default='import "@fhevm/hardhat-plugin";')


class RemoteConfig(BaseModel):
    """Where catalog assets and the base template live upstream."""

    repo_url: str = Field(default="https://github.com/NecipAkgz/fhevm-example-factory.git")
    raw_base_url: str = Field(
        default="https://raw.githubusercontent.com/NecipAkgz/fhevm-example-factory"
    )
    branch: str = Field(default="main")
    template_path: str = Field(default="fhevm-hardhat-template")
    timeout: int = Field(default=30, ge=1, description="Per-request timeout in seconds")


class FactoryConfig(BaseModel):
    """Global example factory configuration.

    Instances are created once by the CLI entry point (or by a test) and then
    passed through the registry, resolver, composer and injection engine.
    """

    catalog_root: Path = Field(
        default=Path("."), description="Directory that catalog asset paths are relative to"
    )
    template_dir: Path = Field(default=Path("fhevm-hardhat-template"))
    catalog_file: Path | None = Field(
        default=None, description="Optional YAML/JSON catalog replacing the built-in one"
    )
    layout: ProjectLayout = Field(default_factory=ProjectLayout)
    template: TemplateConfig = Field(default_factory=TemplateConfig)
    inject: InjectConfig = Field(default_factory=InjectConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def resolved_template_dir(self) -> Path:
        """Template directory, relative paths anchored at ``catalog_root``."""
        if self.template_dir.is_absolute():
            return self.template_dir
        return self.catalog_root / self.template_dir

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "FactoryConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "FactoryConfig":
        """Build a ``FactoryConfig`` from environment variables.

        Recognised variables (all optional):
            FACTORY_CATALOG_ROOT, FACTORY_TEMPLATE_DIR, FACTORY_CATALOG_FILE,
            FACTORY_INIT_GIT, FACTORY_REPO_URL, FACTORY_BRANCH.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("FACTORY_CATALOG_ROOT"):
            kwargs["catalog_root"] = Path(os.environ["FACTORY_CATALOG_ROOT"])
        if os.environ.get("FACTORY_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["FACTORY_TEMPLATE_DIR"])
        if os.environ.get("FACTORY_CATALOG_FILE"):
            kwargs["catalog_file"] = Path(os.environ["FACTORY_CATALOG_FILE"])

        template_kwargs: dict[str, Any] = {}
        if os.environ.get("FACTORY_INIT_GIT"):
            template_kwargs["init_git"] = os.environ["FACTORY_INIT_GIT"].strip().lower() in (
                "1",
                "true",
                "yes",
                "on",
            )

        remote_kwargs: dict[str, Any] = {}
        if os.environ.get("FACTORY_REPO_URL"):
            remote_kwargs["repo_url"] = os.environ["FACTORY_REPO_URL"]
        if os.environ.get("FACTORY_BRANCH"):
            remote_kwargs["branch"] = os.environ["FACTORY_BRANCH"]

        return cls(
            template=TemplateConfig(**template_kwargs),
            remote=RemoteConfig(**remote_kwargs),
            **kwargs,
        )
