from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from pluginsmith import __version__
from pluginsmith.cli import (
    _parse_key_value_pairs,
    create_main,
    get_current_user,
    is_empty_directory,
    main,
)

JAVA_SOURCE = "src/main/java/com/example/myplugin/MyPluginPlugin.java"


def _answers(monkeypatch: pytest.MonkeyPatch, *answers: str) -> None:
    replies = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))


def test_parse_key_value_pairs():
    context = _parse_key_value_pairs(["name=demo", "version=1.0"])
    assert context == {"name": "demo", "version": "1.0"}

    with pytest.raises(argparse.ArgumentTypeError):
        _parse_key_value_pairs(["invalid"])


def test_is_empty_directory(tmp_path: Path):
    assert is_empty_directory(tmp_path / "missing")
    assert is_empty_directory(tmp_path)
    (tmp_path / ".git").mkdir()
    assert is_empty_directory(tmp_path)
    (tmp_path / "README.md").write_text("", encoding="utf-8")
    assert not is_empty_directory(tmp_path)


def test_get_current_user_falls_back(monkeypatch: pytest.MonkeyPatch):
    def broken() -> str:
        raise OSError("no user")

    monkeypatch.setattr("getpass.getuser", broken)
    assert get_current_user() == "Anonymous"


def test_cli_create_with_flags(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    project_dir = tmp_path / "output"
    exit_code = main(
        [
            "create",
            str(project_dir),
            "--name",
            "my-plugin",
            "--domain",
            "com.example",
            "--author",
            "Ada",
            "--ui-tool",
            "vite",
            "--yes",
        ]
    )
    assert exit_code == 0
    assert (project_dir / JAVA_SOURCE).is_file()
    assert (project_dir / "ui" / "vite.config.ts").is_file()
    assert not (project_dir / "ui" / "rsbuild.config.ts").exists()
    package_json = (project_dir / "ui" / "package.json").read_text(encoding="utf-8")
    assert '"build": "vite build"' in package_json
    assert "rsbuild" not in package_json

    output = capsys.readouterr().out
    assert "Render template: README.md" in output
    assert "Copy conditional file: ui/vite.config.ts" in output
    assert "./gradlew haloServer" in output


def test_cli_create_without_ui(tmp_path: Path):
    project_dir = tmp_path / "output"
    exit_code = main(
        ["create", str(project_dir), "--name", "my-plugin", "--domain", "com.example", "--no-ui", "--yes"]
    )
    assert exit_code == 0
    assert not (project_dir / "ui").exists()
    assert "PnpmTask" not in (project_dir / "build.gradle").read_text(encoding="utf-8")


def test_cli_create_interactive_defaults_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.chdir(tmp_path)
    # invalid name first, then a valid one; domain; author; include ui; tool; confirm
    _answers(monkeypatch, "Bad Name", "my-plugin", "com.example", "Ada", "", "2", "y")

    assert create_main([]) == 0

    project_dir = tmp_path / "plugin-my-plugin"
    assert (project_dir / JAVA_SOURCE).is_file()
    assert (project_dir / "ui" / "vite.config.ts").is_file()
    plugin_yaml = (project_dir / "src/main/resources/plugin.yaml").read_text(encoding="utf-8")
    assert "name: Ada" in plugin_yaml
    assert "Project name must follow the pattern" in capsys.readouterr().out


def test_cli_create_declined(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    _answers(monkeypatch, "n")
    exit_code = main(
        ["create", "--name", "my-plugin", "--domain", "com.example", "--author", "Ada", "--no-ui"]
    )
    assert exit_code == 0
    assert not (tmp_path / "plugin-my-plugin").exists()


def test_cli_create_cancelled_by_eof(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)

    def eof(prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    assert main(["create"]) == 0
    assert list(tmp_path.iterdir()) == []


def test_cli_refuses_non_empty_directory(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    project_dir = tmp_path / "output"
    project_dir.mkdir()
    (project_dir / "notes.txt").write_text("keep me", encoding="utf-8")

    exit_code = main(["create", str(project_dir), "--name", "demo", "--domain", "com.example", "--yes"])
    assert exit_code == 1
    assert "is not empty" in capsys.readouterr().err
    assert sorted(path.name for path in project_dir.iterdir()) == ["notes.txt"]


def test_cli_accepts_directory_with_only_git(tmp_path: Path):
    project_dir = tmp_path / "output"
    (project_dir / ".git").mkdir(parents=True)
    exit_code = main(["create", str(project_dir), "--name", "demo", "--domain", "com.example", "--yes"])
    assert exit_code == 0
    assert (project_dir / "settings.gradle").is_file()


def test_cli_rejects_invalid_domain_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    exit_code = main(["create", str(tmp_path / "out"), "--name", "demo", "--domain", "com", "--yes"])
    assert exit_code == 1
    assert "at least two parts" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_cli_dry_run_writes_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    project_dir = tmp_path / "output"
    exit_code = main(
        ["create", str(project_dir), "--name", "demo", "--domain", "com.example", "--yes", "--dry-run"]
    )
    assert exit_code == 0
    assert not project_dir.exists()
    assert "src/main/java/com/example/demo/DemoPlugin.java" in capsys.readouterr().out


def test_cli_render_writes_to_output(tmp_path: Path):
    template_path = tmp_path / "template.txt"
    template_path.write_text("Hello {{ name }}", encoding="utf-8")
    output_path = tmp_path / "output.txt"
    exit_code = main(["render", str(template_path), "-c", "name=world", "-o", str(output_path)])
    assert exit_code == 0
    assert output_path.read_text(encoding="utf-8") == "Hello world"


def test_cli_render_reports_missing_values(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    template_path = tmp_path / "template.txt"
    template_path.write_text("Hello {{ name }}", encoding="utf-8")
    assert main(["render", str(template_path)]) == 1
    assert "missing value for 'name'" in capsys.readouterr().err


def test_version_flag(capsys: pytest.CaptureFixture[str]):
    with pytest.raises(SystemExit) as excinfo:
        create_main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_cli_reports_unknown_log_level(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.setenv("PLUGINSMITH_LOG_LEVEL", "bogus")
    template_path = tmp_path / "template.txt"
    template_path.write_text("Hello", encoding="utf-8")

    assert main(["render", str(template_path)]) == 1
    assert "unknown log level 'BOGUS'" in capsys.readouterr().err


def test_cli_next_steps_create_gradle_wrapper(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    project_dir = tmp_path / "output"
    exit_code = main(["create", str(project_dir), "--name", "demo", "--domain", "com.example", "--yes"])
    assert exit_code == 0

    output = capsys.readouterr().out
    assert output.index("gradle wrapper") < output.index("./gradlew haloServer")
    assert "gradle wrapper" in (project_dir / "README.md").read_text(encoding="utf-8")
