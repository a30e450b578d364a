"""Unit tests for FactoryConfig and related Pydantic models (example_factory.config).

Tests cover:
- ProjectLayout, TemplateConfig, InjectConfig, RemoteConfig defaults
- FactoryConfig derived template path
- save/load round trip
- from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from example_factory.config import (
    FactoryConfig,
    InjectConfig,
    ProjectLayout,
    RemoteConfig,
    TemplateConfig,
)


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class TestProjectLayout:
    @pytest.mark.unit
    def test_defaults(self):
        layout = ProjectLayout()
        assert layout.contracts_dir == "contracts"
        assert layout.tests_dir == "test"
        assert layout.deploy_stub == "deploy/deploy.ts"
        assert layout.package_manifest == "package.json"
        assert layout.build_configs == ["hardhat.config.ts", "hardhat.config.js"]
        assert layout.framework_package == "hardhat"

    @pytest.mark.unit
    def test_build_configs_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            ProjectLayout(build_configs=[])


class TestTemplateConfig:
    @pytest.mark.unit
    def test_placeholders_are_explicit_paths(self):
        cfg = TemplateConfig()
        assert "contracts/FHECounter.sol" in cfg.placeholder_files
        assert "test/FHECounter.ts" in cfg.placeholder_files
        assert "tasks" in cfg.placeholder_files
        assert not any("*" in p for p in cfg.placeholder_files)

    @pytest.mark.unit
    def test_node_modules_excluded_from_copy(self):
        assert "node_modules" in TemplateConfig().copy_excludes

    @pytest.mark.unit
    def test_git_timeout_positive(self):
        with pytest.raises(ValidationError):
            TemplateConfig(git_timeout=0)


class TestInjectConfig:
    @pytest.mark.unit
    def test_framework_dependencies(self):
        cfg = InjectConfig()
        assert cfg.dependencies["@fhevm/solidity"] == "^0.9.1"
        assert cfg.dependencies["encrypted-types"] == "^0.0.4"
        assert "@fhevm/hardhat-plugin" in cfg.dev_dependencies
        assert "@zama-fhe/relayer-sdk" in cfg.dev_dependencies

    @pytest.mark.unit
    def test_plugin_import_mentions_package(self):
        cfg = InjectConfig()
        assert cfg.plugin_package in cfg.plugin_import


class TestRemoteConfig:
    @pytest.mark.unit
    def test_defaults(self):
        cfg = RemoteConfig()
        assert cfg.branch == "main"
        assert cfg.repo_url.endswith(".git")
        assert cfg.template_path == "fhevm-hardhat-template"


# ---------------------------------------------------------------------------
# FactoryConfig
# ---------------------------------------------------------------------------


class TestFactoryConfig:
    @pytest.mark.unit
    def test_relative_template_dir_anchored_at_catalog_root(self, tmp_path: Path):
        cfg = FactoryConfig(catalog_root=tmp_path, template_dir=Path("tpl"))
        assert cfg.resolved_template_dir == tmp_path / "tpl"

    @pytest.mark.unit
    def test_absolute_template_dir_kept(self, tmp_path: Path):
        cfg = FactoryConfig(catalog_root=Path("/somewhere"), template_dir=tmp_path)
        assert cfg.resolved_template_dir == tmp_path

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        cfg = FactoryConfig(
            catalog_root=tmp_path,
            template=TemplateConfig(init_git=False),
            remote=RemoteConfig(branch="dev"),
        )
        path = cfg.save(tmp_path / "nested" / "config.json")
        assert path.exists()

        loaded = FactoryConfig.load(path)
        assert loaded.catalog_root == tmp_path
        assert loaded.template.init_git is False
        assert loaded.remote.branch == "dev"
        assert loaded.inject == cfg.inject

    @pytest.mark.unit
    def test_from_env(self, tmp_path: Path):
        env = {
            "FACTORY_CATALOG_ROOT": str(tmp_path),
            "FACTORY_TEMPLATE_DIR": "base",
            "FACTORY_CATALOG_FILE": str(tmp_path / "catalog.yaml"),
            "FACTORY_INIT_GIT": "false",
            "FACTORY_BRANCH": "release",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = FactoryConfig.from_env()
        assert cfg.catalog_root == tmp_path
        assert cfg.template_dir == Path("base")
        assert cfg.catalog_file == tmp_path / "catalog.yaml"
        assert cfg.template.init_git is False
        assert cfg.remote.branch == "release"

    @pytest.mark.unit
    def test_from_env_without_variables_uses_defaults(self):
        keys = [k for k in os.environ if k.startswith("FACTORY_")]
        with patch.dict(os.environ, {}, clear=False):
            for key in keys:
                os.environ.pop(key)
            cfg = FactoryConfig.from_env()
        assert cfg.catalog_file is None
        assert cfg.template.init_git is True
