from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml
from typer.testing import CliRunner

from coursefactory.cli import main as cli_main
from coursefactory.composer.compiler import CompiledModule
from coursefactory.runtime import collect_snapshot
from coursefactory.runtime.dom import parse_document, set_checked
from coursefactory.runtime.report import REPORT_TITLE
from coursefactory.runtime.snapshot import SNAPSHOT_KIND

runner = CliRunner()


def _write_module(tmp_path: Path, module: Dict[str, Any], name: str = "module.json") -> Path:
    path = tmp_path / name
    if path.suffix == ".json":
        path.write_text(json.dumps(module), encoding="utf-8")
    else:
        path.write_text(yaml.safe_dump(module, sort_keys=False), encoding="utf-8")
    return path


def _compile_fragment(tmp_path: Path, module: Dict[str, Any]) -> Path:
    out = tmp_path / "module.html"
    result = runner.invoke(cli_main.app, ["compile", str(_write_module(tmp_path, module)), "--fragment", "-o", str(out)])
    assert result.exit_code == 0, result.stdout
    return out


def test_compile_writes_standalone_page(tmp_path: Path, interactive_module: Dict[str, Any]) -> None:
    module_path = _write_module(tmp_path, interactive_module, "module.yaml")
    course_path = tmp_path / "course.yaml"
    course_path.write_text("courseName: Money 101\ntemplateDefault: coursebook\n", encoding="utf-8")
    out = tmp_path / "dist" / "page.html"

    result = runner.invoke(cli_main.app, ["compile", str(module_path), "--course", str(course_path), "--output", str(out)])

    assert result.exit_code == 0, result.stdout
    assert "Wrote compiled module" in result.stdout
    page = out.read_text(encoding="utf-8")
    assert "<title>Budgeting Basics | Money 101</title>" in page
    assert 'data-template="coursebook"' in page


def test_compile_fragment_to_stdout(tmp_path: Path, interactive_module: Dict[str, Any]) -> None:
    result = runner.invoke(cli_main.app, ["compile", str(_write_module(tmp_path, interactive_module)), "--fragment"])
    assert result.exit_code == 0
    assert "data-composer-root" in result.stdout
    assert '<html lang="en">' not in result.stdout
    assert result.stdout.lstrip().startswith("<style")
    assert "__CF_COMPOSER_RUNTIME_BOUND__" in result.stdout


def test_compile_fragment_escapes_inline_script(
    tmp_path: Path, interactive_module: Dict[str, Any], monkeypatch
) -> None:
    monkeypatch.setattr(
        cli_main,
        "compile_module",
        lambda module, settings: CompiledModule(html="<div></div>", css="", script='var s = "</script><b>";'),
    )
    result = runner.invoke(cli_main.app, ["compile", str(_write_module(tmp_path, interactive_module)), "--fragment"])
    assert result.exit_code == 0
    assert 'var s = "<\\/script><b>";' in result.stdout
    assert result.stdout.count("</script>") == 1


def test_compile_rejects_unparseable_module(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("activities: [\n", encoding="utf-8")
    result = runner.invoke(cli_main.app, ["compile", str(path)])
    assert result.exit_code == 1
    assert "Could not parse" in result.stdout


def test_validate_clean_module(tmp_path: Path, interactive_module: Dict[str, Any]) -> None:
    result = runner.invoke(cli_main.app, ["validate", str(_write_module(tmp_path, interactive_module))])
    assert result.exit_code == 0
    assert "Module looks good." in result.stdout


def test_validate_errors_fail(tmp_path: Path) -> None:
    module = {"activities": [{"id": "pic", "type": "image_block", "data": {}}]}
    result = runner.invoke(cli_main.app, ["validate", str(_write_module(tmp_path, module))])
    assert result.exit_code == 1
    assert "Activity validation" in result.stdout
    assert "error" in result.stdout


def test_validate_warnings_only_fail_when_requested(tmp_path: Path) -> None:
    module = {"activities": [{"id": "rubric", "type": "rubric_creator", "data": {"rowCount": 6}}]}
    path = _write_module(tmp_path, module)

    lenient = runner.invoke(cli_main.app, ["validate", str(path)])
    strict = runner.invoke(cli_main.app, ["validate", str(path), "--fail-on-warning"])

    assert lenient.exit_code == 0
    assert "warning" in lenient.stdout
    assert strict.exit_code == 1


def test_kinds_lists_registry() -> None:
    result = runner.invoke(cli_main.app, ["kinds"])
    assert result.exit_code == 0
    assert "Activity types" in result.stdout
    assert "flashcard_deck" in result.stdout


def test_report_command(tmp_path: Path, interactive_module: Dict[str, Any]) -> None:
    html_path = _compile_fragment(tmp_path, interactive_module)
    result = runner.invoke(cli_main.app, ["report", str(html_path)])
    assert result.exit_code == 0
    assert result.stdout.startswith(REPORT_TITLE)
    assert "[Weekly Tasks]" in result.stdout


def test_snapshot_command_emits_backup_json(tmp_path: Path, interactive_module: Dict[str, Any]) -> None:
    html_path = _compile_fragment(tmp_path, interactive_module)
    result = runner.invoke(cli_main.app, ["snapshot", str(html_path)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["kind"] == SNAPSHOT_KIND
    assert len(payload["fields"]) == 8


def test_restore_command_round_trip(tmp_path: Path, interactive_module: Dict[str, Any]) -> None:
    html_path = _compile_fragment(tmp_path, interactive_module)
    filled = parse_document(html_path.read_text(encoding="utf-8"))
    set_checked(filled.select("[data-checklist-input]")[0], True, filled)
    backup = tmp_path / "backup.json"
    backup.write_text(collect_snapshot(filled).to_json(), encoding="utf-8")
    restored = tmp_path / "restored.html"

    result = runner.invoke(cli_main.app, ["restore", str(html_path), str(backup), "-o", str(restored)])

    assert result.exit_code == 0, result.stdout
    assert "Restored 8 fields from backup." in result.stdout
    soup = parse_document(restored.read_text(encoding="utf-8"))
    assert soup.select("[data-checklist-input]")[0].has_attr("checked")


def test_restore_command_rejects_foreign_backup(tmp_path: Path, interactive_module: Dict[str, Any]) -> None:
    html_path = _compile_fragment(tmp_path, interactive_module)
    before = html_path.read_text(encoding="utf-8")
    backup = tmp_path / "other.json"
    backup.write_text(json.dumps({"kind": "other-tool", "fields": [{"value": "x"}]}), encoding="utf-8")

    result = runner.invoke(cli_main.app, ["restore", str(html_path), str(backup)])

    assert result.exit_code == 1
    assert "Unsupported backup type" in result.stdout
    assert html_path.read_text(encoding="utf-8") == before


def test_switch_template_command(tmp_path: Path, interactive_module: Dict[str, Any]) -> None:
    path = _write_module(tmp_path, interactive_module, "module.yaml")
    result = runner.invoke(cli_main.app, ["switch-template", str(path), "coursebook"])
    assert result.exit_code == 0
    updated = yaml.safe_load(result.stdout)
    assert updated["template"] == "coursebook"
    assert set(updated["templateLayoutProfiles"]) == {"deck", "coursebook"}
