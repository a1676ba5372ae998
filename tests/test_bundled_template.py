from __future__ import annotations

from pathlib import Path

import pytest

from pluginsmith.classification import DEFAULT_CLASSIFICATION
from pluginsmith.config import ProjectVariables, UiTool
from pluginsmith.scaffold import TEMPLATE_ROOT, ProjectGenerator


@pytest.mark.parametrize("tool", list(UiTool))
def test_bundled_template_renders_for_each_variant(tmp_path: Path, tool: UiTool):
    variables = ProjectVariables.from_answers("links", "run.halo", "Ada", ui_tool=tool)
    report = ProjectGenerator(classification=DEFAULT_CLASSIFICATION).generate(
        TEMPLATE_ROOT, tmp_path, variables
    )

    plugin = (tmp_path / "src/main/java/run/halo/links/LinksPlugin.java").read_text(encoding="utf-8")
    assert plugin.startswith("package run.halo.links;")
    assert "public class LinksPlugin extends BasePlugin" in plugin
    assert (tmp_path / "src/test/java/run/halo/links/LinksPluginTest.java").is_file()
    assert "rootProject.name = 'links'" in (tmp_path / "settings.gradle").read_text(encoding="utf-8")
    assert (tmp_path / ".gitignore").is_file()
    assert (tmp_path / "ui" / f"{tool.value}.config.ts").is_file()
    assert not any(path.name.endswith(".template") for path in tmp_path.rglob("*"))
    assert len(report.skipped) == 1


def test_bundled_template_without_ui(tmp_path: Path):
    variables = ProjectVariables.from_answers("links", "run.halo", "Ada", include_ui=False)
    ProjectGenerator().generate(TEMPLATE_ROOT, tmp_path, variables)

    assert not (tmp_path / "ui").exists()
    readme = (tmp_path / "README.md").read_text(encoding="utf-8")
    assert "pnpm" not in readme
    assert "node-gradle" not in (tmp_path / "build.gradle").read_text(encoding="utf-8")
