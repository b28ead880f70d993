"""Command-line entry points for compiling modules and inspecting compiled documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..composer import (
    compile_module,
    list_activity_type_groups,
    render_document,
    switch_template,
    validate_activities,
)
from ..composer.registry import get_definition
from ..core.config import load_course_settings, load_module
from ..core.markup import escape_inline_script
from ..runtime import build_report, collect_snapshot, restore_backup_text
from ..runtime.dom import parse_document

LOGGER = logging.getLogger(__name__)

app = typer.Typer(help="Compile Course Factory modules and read learner progress from compiled pages.")
console = Console()


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)


def _emit(content: str, output: Optional[Path], label: str) -> None:
    if output is None:
        typer.echo(content)
        return
    output = output.expanduser()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    console.print(f"[green]Wrote {label} to {output}[/green]")


def _read_html(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Course Factory composer tools."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@app.command("compile")
def compile_command(
    module_path: Path = typer.Argument(..., exists=True, readable=True, help="Module YAML or JSON file."),
    course: Optional[Path] = typer.Option(
        None,
        "--course",
        exists=True,
        readable=True,
        help="Course settings file providing courseName and template/theme defaults.",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the result here instead of stdout."),
    fragment: bool = typer.Option(
        False,
        "--fragment",
        help="Emit only the module html and runtime script instead of a standalone page.",
    ),
) -> None:
    """Compile a module into interactive HTML."""
    try:
        module = load_module(module_path)
        settings = load_course_settings(course)
    except ValueError as exc:
        _fail(str(exc))

    compiled = compile_module(module.to_payload(), settings.to_payload())
    LOGGER.debug("Compiled %s activities from %s", len(module.activities), module_path)
    if fragment:
        content = f"{compiled.html}\n<script>\n{escape_inline_script(compiled.script)}\n</script>\n"
    else:
        content = render_document(compiled, title=module.title, course_name=settings.courseName)
    _emit(content, output, "compiled module")


@app.command()
def validate(
    module_path: Path = typer.Argument(..., exists=True, readable=True, help="Module YAML or JSON file."),
    fail_on_warning: bool = typer.Option(
        False,
        "--fail-on-warning",
        help="Exit with status 1 if warnings are present (errors always fail).",
    ),
) -> None:
    """Run the advisory data-quality checks over every activity in a module."""
    try:
        module = load_module(module_path)
    except ValueError as exc:
        _fail(str(exc))

    reports = [report for report in validate_activities(module.to_payload()["activities"]) if report.issues]
    if not reports:
        console.print("[green]Module looks good.[/green]")
        return

    table = Table(title="Activity validation", show_header=True)
    table.add_column("Severity", justify="center")
    table.add_column("Activity")
    table.add_column("Message")
    errors = warnings = 0
    for report in reports:
        label = report.id or f"#{report.index + 1}"
        for issue in report.issues:
            if issue.is_error:
                errors += 1
                table.add_row("error", label, issue.message, style="bold red")
            else:
                warnings += 1
                table.add_row("warning", label, issue.message, style="yellow")
    console.print(table)
    if errors or (fail_on_warning and warnings):
        raise typer.Exit(code=1)


@app.command()
def kinds() -> None:
    """List the registered activity types grouped by palette category."""
    table = Table(title="Activity types", show_header=True)
    table.add_column("Category")
    table.add_column("Type")
    table.add_column("Label")
    for group in list_activity_type_groups():
        for kind in group["types"]:
            definition = get_definition(kind)
            table.add_row(group["label"], kind, definition.label if definition else kind)
    console.print(table)


@app.command()
def report(
    html_path: Path = typer.Argument(..., exists=True, readable=True, help="Compiled module HTML."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report here instead of stdout."),
) -> None:
    """Print the submission report for a compiled module."""
    _emit(build_report(_read_html(html_path)), output, "report")


@app.command()
def snapshot(
    html_path: Path = typer.Argument(..., exists=True, readable=True, help="Compiled module HTML."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the backup JSON here instead of stdout."),
) -> None:
    """Export the learner progress stored in a compiled module as backup JSON."""
    _emit(collect_snapshot(_read_html(html_path)).to_json(), output, "progress backup")


@app.command()
def restore(
    html_path: Path = typer.Argument(..., exists=True, readable=True, help="Compiled module HTML."),
    backup_path: Path = typer.Argument(..., exists=True, readable=True, help="Progress backup JSON."),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Where to write the restored page (defaults to overwriting HTML).",
    ),
) -> None:
    """Apply a progress backup to a compiled module."""
    soup = parse_document(_read_html(html_path))
    result = restore_backup_text(soup, backup_path.read_text(encoding="utf-8"))
    if not result.ok:
        _fail(result.message)
    target = (output or html_path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(str(soup), encoding="utf-8")
    console.print(f"[green]{result.message}[/green]")


@app.command("switch-template")
def switch_template_command(
    module_path: Path = typer.Argument(..., exists=True, readable=True, help="Module YAML or JSON file."),
    template: str = typer.Argument(..., help="Target template: deck, finlit, coursebook or toolkit_dashboard."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the updated module here instead of stdout."),
) -> None:
    """Switch a module to another template, keeping a layout profile per template."""
    try:
        module = load_module(module_path)
    except ValueError as exc:
        _fail(str(exc))

    updated = switch_template(module.to_payload(), template)
    if module_path.suffix.lower() == ".json":
        content = json.dumps(updated, indent=2, ensure_ascii=False)
    else:
        content = yaml.safe_dump(updated, sort_keys=False, allow_unicode=True)
    _emit(content, output, "module")


if __name__ == "__main__":
    app()
