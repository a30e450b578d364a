"""Tests for Jinja2 rendering of generated project files."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from example_factory.scaffolder.templates import TemplateRenderer


pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


class TestDeployScript:
    def test_single_contract(self, renderer: TemplateRenderer):
        script = renderer.render_deploy_script(["FHECounter"], deploy_id="FHECounter")
        assert 'await deploy("FHECounter", {' in script
        assert "const deployedFHECounter" in script
        assert 'func.id = "deploy_fhecounter";' in script
        assert 'func.tags = ["FHECounter"];' in script
        assert script.endswith("\n")

    def test_multiple_contracts_in_order(self, renderer: TemplateRenderer):
        script = renderer.render_deploy_script(
            ("FHECounter", "FHEAdd"), deploy_id="fhevm-examples-basic"
        )
        assert script.index('deploy("FHECounter"') < script.index('deploy("FHEAdd"')
        assert 'func.tags = ["FHECounter", "FHEAdd"];' in script
        assert 'func.id = "deploy_fhevm-examples-basic";' in script

    def test_no_contracts_rejected(self, renderer: TemplateRenderer):
        with pytest.raises(ValueError):
            renderer.render_deploy_script([], deploy_id="x")

    def test_rendering_is_stable(self, renderer: TemplateRenderer):
        first = renderer.render_deploy_script(["A", "B"], deploy_id="x")
        assert renderer.render_deploy_script(["A", "B"], deploy_id="x") == first


class TestRenderer:
    def test_undefined_variable_is_error(self, renderer: TemplateRenderer):
        with pytest.raises(UndefinedError):
            renderer.render("gitignore.j2", {})

    def test_types_file(self, renderer: TemplateRenderer):
        content = renderer.render("types.ts.j2", {})
        assert "export interface Signers" in content

    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.j2").write_text("Hello {{ name }}!", encoding="utf-8")
        assert TemplateRenderer(tmp_path).render("hello.j2", {"name": "FHE"}) == "Hello FHE!"

    @pytest.mark.asyncio
    async def test_render_to_file_creates_parents(self, renderer: TemplateRenderer, tmp_path: Path):
        out = await renderer.render_to_file(
            "gitignore.j2", tmp_path / "a" / "b" / ".gitignore", {"project_name": "demo"}
        )
        assert out.read_text(encoding="utf-8").startswith("# demo\n")
        assert "node_modules/" in out.read_text(encoding="utf-8")
