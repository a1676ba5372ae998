from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pluginsmith.classification import TemplateClassification  # noqa: E402
from pluginsmith.config import ProjectVariables, UiTool  # noqa: E402


@pytest.fixture()
def variables() -> ProjectVariables:
    return ProjectVariables.from_answers(
        "my-awesome-plugin",
        "com.example",
        "Ada",
        include_ui=True,
        ui_tool=UiTool.VITE,
    )


@pytest.fixture()
def classification() -> TemplateClassification:
    return TemplateClassification(
        template_files=(
            "README.md.template",
            "src/main/java/Plugin.java.template",
            "src/test/java/PluginTest.java.template",
            "ui/index.ts.template",
        ),
        conditional_files={
            "rsbuild": ("ui/rsbuild.config.ts",),
            "vite": ("ui/vite.config.ts",),
        },
        optional_module="ui",
    )


@pytest.fixture()
def template_root(tmp_path: Path) -> Path:
    """A small template tree matching the ``classification`` fixture."""

    root = tmp_path / "template"
    files = {
        "README.md.template": "# {{projectSlug}} by {{authorName}}\n",
        "LICENSE": "MIT\n",
        "src/main/java/Plugin.java.template": "package {{packageName}};\nclass {{typeName}}Plugin {}\n",
        "src/test/java/PluginTest.java.template": "package {{packageName}};\nclass {{typeName}}PluginTest {}\n",
        "ui/index.ts.template": (
            '{{#if (eq variantChoice "vite")}}\nimport "vite";\n{{else}}\nimport "rsbuild";\n{{/if}}\n'
        ),
        "ui/rsbuild.config.ts": "export default 'rsbuild';\n",
        "ui/vite.config.ts": "export default 'vite';\n",
        "ui/static.txt": "{{ not rendered }}\n",
    }
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root
