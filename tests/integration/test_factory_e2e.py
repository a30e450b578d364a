"""End-to-end: scaffold a project, then inject further examples into it.

Runs the composer and the injection engine back to back against the same
directory, the way a user would run ``create`` followed by ``add``.  No
network access and no git.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from example_factory.errors import ApplyFailure
from example_factory.injector import Decision, InjectionEngine, InjectionState, fixed_policy
from example_factory.scaffolder import create_example_project


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_then_add(config, registry, tmp_path: Path, tree_snapshot):
    project, _ = await create_example_project("fhe-counter", tmp_path / "project", config, registry)

    engine = InjectionEngine(config, registry, fixed_policy(Decision.SKIP))
    summary = await engine.inject(project, "erc7984")

    assert summary.state is InjectionState.COMMITTED
    assert summary.created == [
        "contracts/ERC7984Example.sol",
        "test/ERC7984Example.ts",
        "contracts/openzeppelin/mocks/ERC20Mock.sol",
    ]
    # the template already imports the plugin
    assert "hardhat.config.ts" not in summary.updated

    data = json.loads((project / "package.json").read_text(encoding="utf-8"))
    assert data["name"] == "fhevm-example-fhe-counter"
    assert data["dependencies"]["@openzeppelin/confidential-contracts"] == "^0.3.0"
    assert (project / "contracts/FHECounter.sol").exists()

    # a second example sharing the mock skips it and keeps earlier dependencies
    before_mock = (project / "contracts/openzeppelin/mocks/ERC20Mock.sol").read_bytes()
    summary = await InjectionEngine(config, registry, fixed_policy(Decision.SKIP)).inject(
        project, "wrapper"
    )
    assert summary.skipped == ["contracts/openzeppelin/mocks/ERC20Mock.sol"]
    assert (project / "contracts/openzeppelin/mocks/ERC20Mock.sol").read_bytes() == before_mock
    data = json.loads((project / "package.json").read_text(encoding="utf-8"))
    assert data["dependencies"]["@openzeppelin/confidential-contracts"] == "^0.3.0"
    assert data["dependencies"]["@openzeppelin/contracts"] == "^5.4.0"

    # a failing run leaves the scaffolded project exactly as it was
    before = tree_snapshot(project)
    with patch(
        "example_factory.injector.engine._write_bytes",
        side_effect=OSError(5, "Input/output error"),
    ):
        with pytest.raises(ApplyFailure) as exc_info:
            await InjectionEngine(config, registry, fixed_policy(Decision.OVERWRITE)).inject(
                project, "fhe-add"
            )
    assert exc_info.value.state is InjectionState.ROLLED_BACK
    assert tree_snapshot(project) == before
