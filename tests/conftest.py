"""Shared pytest fixtures for the example factory test suite.

Provides reusable fixtures for:
- A miniature on-disk catalog (contracts, tests, shared mocks)
- A matching ManifestRegistry
- A base Hardhat template directory
- An existing Hardhat project for inject mode
- A FactoryConfig wired to all of the above with git init disabled
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any

import pytest
import yaml

from example_factory.catalog.registry import ManifestRegistry
from example_factory.config import FactoryConfig, TemplateConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def snapshot(root: Path) -> dict[str, bytes]:
    """Map every file below *root* to its bytes."""
    return {
        str(p.relative_to(root).as_posix()): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


CATALOG_DATA: dict[str, Any] = {
    "examples": {
        "fhe-counter": {
            "primary_asset": "contracts/basic/FHECounter.sol",
            "test_asset": "test/basic/FHECounter.ts",
            "description": "Confidential counter",
            "category": "Basic",
        },
        "fhe-add": {
            "primary_asset": "contracts/basic/FHEAdd.sol",
            "test_asset": "test/basic/FHEAdd.ts",
            "description": "Encrypted addition",
            "category": "Basic",
        },
        "erc7984": {
            "primary_asset": "contracts/openzeppelin/ERC7984.sol",
            "test_asset": "test/openzeppelin/ERC7984.ts",
            "auxiliary_assets": ["contracts/openzeppelin/mocks/ERC20Mock.sol"],
            "extra_dependencies": {"@openzeppelin/confidential-contracts": "^0.3.0"},
            "category": "OpenZeppelin",
        },
        "wrapper": {
            "primary_asset": "contracts/openzeppelin/ERC7984ERC20Wrapper.sol",
            "test_asset": "test/openzeppelin/ERC7984ERC20Wrapper.ts",
            "auxiliary_assets": ["contracts/openzeppelin/mocks/ERC20Mock.sol"],
            "extra_dependencies": {
                "@openzeppelin/confidential-contracts": "^0.2.0",
                "@openzeppelin/contracts": "^5.4.0",
            },
            "category": "OpenZeppelin",
        },
        "undeclared": {
            "primary_asset": "contracts/misc/MathLib.sol",
            "test_asset": "test/misc/MathLib.ts",
        },
        "broken": {
            "primary_asset": "contracts/basic/DoesNotExist.sol",
            "test_asset": "test/basic/DoesNotExist.ts",
        },
    },
    "categories": {
        "basic": {"name": "Basic Examples", "entries": ["fhe-counter", "fhe-add"]},
        "openzeppelin": {"name": "OpenZeppelin Examples", "entries": ["erc7984", "wrapper"]},
    },
}


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """A catalog directory whose files match ``CATALOG_DATA``."""
    root = tmp_path / "catalog"
    write(root, "contracts/basic/FHECounter.sol", textwrap.dedent("""\
        // SPDX-License-Identifier: BSD-3-Clause-Clear
        pragma solidity ^0.8.24;

        contract FHECounter is ZamaEthereumConfig {
            euint32 private _count;
        }
    """))
    write(root, "test/basic/FHECounter.ts", 'describe("FHECounter", () => {});\n')
    write(root, "contracts/basic/FHEAdd.sol", "contract FHEAdd {\n}\n")
    write(root, "test/basic/FHEAdd.ts", 'describe("FHEAdd", () => {});\n')
    write(root, "contracts/openzeppelin/ERC7984.sol", textwrap.dedent("""\
        import {ERC7984} from "@openzeppelin/confidential-contracts/token/ERC7984/ERC7984.sol";

        contract ERC7984Example is ERC7984, ZamaEthereumConfig {
        }
    """))
    write(root, "test/openzeppelin/ERC7984.ts", 'describe("ERC7984Example", () => {});\n')
    write(root, "contracts/openzeppelin/ERC7984ERC20Wrapper.sol",
          "contract ERC7984ERC20WrapperExample is ERC7984ERC20Wrapper {\n}\n")
    write(root, "test/openzeppelin/ERC7984ERC20Wrapper.ts", 'describe("Wrapper", () => {});\n')
    write(root, "contracts/openzeppelin/mocks/ERC20Mock.sol", "contract ERC20Mock is ERC20 {\n}\n")
    write(root, "contracts/misc/MathLib.sol", "library MathLib {\n}\n")
    write(root, "test/misc/MathLib.ts", 'describe("MathLib", () => {});\n')
    return root


@pytest.fixture
def registry() -> ManifestRegistry:
    return ManifestRegistry.from_mapping(CATALOG_DATA)


# ---------------------------------------------------------------------------
# Base template
# ---------------------------------------------------------------------------


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A cut-down fhevm-hardhat-template with its placeholder files."""
    root = tmp_path / "template"
    write(root, "hardhat.config.ts", textwrap.dedent("""\
        import "@fhevm/hardhat-plugin";
        import "hardhat-deploy";
        import "./tasks/accounts";
        import "./tasks/FHECounter";

        export default {};
    """))
    write(root, "package.json", json.dumps({
        "name": "fhevm-hardhat-template",
        "version": "0.1.0",
        "dependencies": {"@fhevm/solidity": "^0.9.1"},
        "devDependencies": {"hardhat": "^2.26.0"},
    }, indent=2))
    write(root, "contracts/FHECounter.sol", "contract FHECounter {}\n")
    write(root, "test/FHECounter.ts", "// placeholder\n")
    write(root, "tasks/accounts.ts", "// task\n")
    write(root, "tasks/FHECounter.ts", "// task\n")
    write(root, "deploy/deploy.ts", "// old deploy script\n")
    write(root, "LICENSE", "BSD\n")
    write(root, ".github/workflows/ci.yml", "on: push\n")
    write(root, "node_modules/hardhat/index.js", "module.exports = {};\n")
    write(root, "README.md", "# Template\n")
    return root


@pytest.fixture
def config(catalog_root: Path, template_dir: Path) -> FactoryConfig:
    return FactoryConfig(
        catalog_root=catalog_root,
        template_dir=template_dir,
        template=TemplateConfig(init_git=False),
    )


# ---------------------------------------------------------------------------
# Existing project (inject mode)
# ---------------------------------------------------------------------------


@pytest.fixture
def hardhat_project(tmp_path: Path) -> Path:
    """An existing Hardhat project without the FHEVM plugin."""
    root = tmp_path / "my-app"
    write(root, "package.json", json.dumps({
        "name": "my-app",
        "version": "1.0.0",
        "dependencies": {"@fhevm/solidity": "^0.8.0"},
        "devDependencies": {"hardhat": "^2.22.0"},
    }, indent=2) + "\n")
    write(root, "hardhat.config.ts", textwrap.dedent("""\
        import { HardhatUserConfig } from "hardhat/config";
        import "@nomicfoundation/hardhat-toolbox";

        const config: HardhatUserConfig = {};
        export default config;
    """))
    write(root, "contracts/Lock.sol", "contract Lock {}\n")
    return root


@pytest.fixture
def tree_snapshot():
    """The ``snapshot`` helper, for comparing a directory before and after a call."""
    return snapshot


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """``CATALOG_DATA`` written as a YAML catalog file."""
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump(CATALOG_DATA, sort_keys=False), encoding="utf-8")
    return path
