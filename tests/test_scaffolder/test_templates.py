"""Unit tests for template rendering (create_ps.scaffolder.templates)."""

from __future__ import annotations

from pathlib import Path

import jinja2
import pytest
import yaml

from create_ps.scaffolder.templates import TemplateRenderer


def _context(**overrides) -> dict:
    context = {
        "package_name": "left-pad",
        "description": "",
        "esm": False,
        "package_manager": "npm",
        "version": "1.0.0",
        "today": "2024-05-17",
        "has_contributing": False,
        "license_name": None,
    }
    context.update(overrides)
    return context


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


class TestTemplateRenderer:
    @pytest.mark.unit
    def test_bundled_templates_ship(self, renderer: TemplateRenderer):
        assert sorted(renderer.env.list_templates(extensions=["j2"])) == [
            "CHANGELOG.md.j2",
            "CONTRIBUTING.md.j2",
            "README.md.j2",
            "dependabot.yml.j2",
            "example.js.j2",
            "example.md.j2",
            "example.test.js.j2",
            "workflow.yml.j2",
        ]

    @pytest.mark.unit
    def test_missing_variable_is_an_error(self, renderer: TemplateRenderer):
        with pytest.raises(jinja2.UndefinedError):
            renderer.render("README.md.j2", {"package_name": "foo"})

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_render_to_file_creates_parents(self, renderer: TemplateRenderer, tmp_path: Path):
        out = await renderer.render_to_file(
            "CHANGELOG.md.j2", tmp_path / "a" / "CHANGELOG.md", _context()
        )
        assert out.read_text() == "# Changelog\n\n## v1.0.0 (2024-05-17)\n\n* Initial release\n"


class TestReadmeTemplate:
    @pytest.mark.unit
    def test_commonjs_usage(self, renderer: TemplateRenderer):
        text = renderer.render("README.md.j2", _context())
        assert "const leftPad = require('left-pad');" in text
        assert "npm install left-pad" in text

    @pytest.mark.unit
    def test_optional_sections(self, renderer: TemplateRenderer):
        text = renderer.render(
            "README.md.j2",
            _context(description="Pads.", has_contributing=True, license_name="MIT License"),
        )
        assert text.startswith("# left-pad\n\nPads.\n")
        assert "## Contributing" in text
        assert "[MIT License](LICENSE)" in text
        assert text.endswith("\n")

    @pytest.mark.unit
    def test_package_manager_is_used(self, renderer: TemplateRenderer):
        text = renderer.render("README.md.j2", _context(package_manager="pnpm"))
        assert "pnpm install left-pad" in text


class TestYamlTemplates:
    @pytest.mark.unit
    def test_dependabot_is_valid_config(self, renderer: TemplateRenderer):
        data = yaml.safe_load(renderer.render("dependabot.yml.j2", _context()))
        assert data["version"] == 2
        update = data["updates"][0]
        assert update["package-ecosystem"] == "npm"
        assert update["directory"] == "/"
        assert update["schedule"]["interval"] == "daily"

    @pytest.mark.unit
    def test_workflow_is_comment_only(self, renderer: TemplateRenderer):
        text = renderer.render("workflow.yml.j2", _context())
        assert yaml.safe_load(text) is None


class TestExampleTemplates:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "esm,expected",
        [(True, "import leftPad from 'left-pad';"), (False, "const leftPad = require('left-pad');")],
    )
    def test_example_uses_module_system(self, renderer: TemplateRenderer, esm, expected):
        assert expected in renderer.render("example.js.j2", _context(esm=esm))
