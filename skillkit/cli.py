from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import CATEGORY_NAMES, resolve_targets
from .installer import CategoryReport, InstallError, SourceOverlapError, install_assets
from .inventory import InventoryError, inventory_installed

app = typer.Typer(help="Install OpenCode and Codex skills and slash commands.")
console = Console()

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_INPUT = 2
EXIT_NOT_FOUND = 3


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    md = "md"


def _json_print(payload: dict) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=True, sort_keys=True))


def _print_key_value_table(title: str, rows: list[tuple[str, str]]) -> None:
    table = Table(title=title)
    table.add_column("Field")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, value)
    console.print(table)


def _emit_success(
    command: str,
    output_format: OutputFormat,
    data: dict,
    md_renderer: Callable[[dict], str] | None = None,
    table_renderer: Callable[[dict], None] | None = None,
) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": True,
                "command": command,
                "exit_code": EXIT_OK,
                "data": data,
            }
        )
        return

    if output_format == OutputFormat.md and md_renderer is not None:
        console.print(md_renderer(data))
        return

    if output_format == OutputFormat.table and table_renderer is not None:
        table_renderer(data)
        return

    if output_format == OutputFormat.md:
        lines = [f"# {command}", ""]
        lines.extend(f"- **{key}**: {value}" for key, value in data.items())
        console.print("\n".join(lines))
    else:
        _print_key_value_table(
            title=command,
            rows=[(str(key), str(value)) for key, value in data.items()],
        )


def _emit_error(
    command: str,
    output_format: OutputFormat,
    exit_code: int,
    code: str,
    message: str,
) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": False,
                "command": command,
                "exit_code": exit_code,
                "error": {
                    "code": code,
                    "message": message,
                },
            }
        )
    elif output_format == OutputFormat.md:
        console.print(f"# {command}\n\n- **status**: error\n- **code**: {code}\n- **message**: {message}")
    else:
        console.print(f"[red]Error ({code}):[/red] {message}")

    raise typer.Exit(code=exit_code)


def _print_category(item: CategoryReport) -> None:
    console.print(f"Installing {item.label}...")
    if item.found:
        console.print(f"  Installed {item.count} {item.noun}")
    else:
        console.print(f"  [yellow]{item.missing_message}[/yellow]")


def _run_install(source: Path, output_format: OutputFormat) -> None:
    root = source.resolve()
    if not root.exists() or not root.is_dir():
        _emit_error(
            command="install",
            output_format=output_format,
            exit_code=EXIT_INVALID_INPUT,
            code="invalid_source_path",
            message=f"Source path does not exist: {root}",
        )
        raise

    progress = None
    if output_format == OutputFormat.table:
        console.print("[bold]OpenCode Skills Installer[/bold]")
        console.print("=========================")
        console.print("")
        progress = _print_category

    try:
        report = install_assets(root, resolve_targets(), on_category=progress)
    except SourceOverlapError as error:
        _emit_error(
            command="install",
            output_format=output_format,
            exit_code=EXIT_INVALID_INPUT,
            code="source_overlaps_destination",
            message=str(error),
        )
        raise
    except InstallError as error:
        _emit_error(
            command="install",
            output_format=output_format,
            exit_code=EXIT_ERROR,
            code="install_error",
            message=str(error),
        )
        raise

    data = {
        "source": str(report.source_root),
        "total": report.total,
        "categories": [
            {
                "name": item.name,
                "label": item.label,
                "source": str(item.source),
                "destination": str(item.destination),
                "found": item.found,
                "count": item.count,
                "installed": list(item.installed),
                "message": f"Installed {item.count} {item.noun}" if item.found else item.missing_message,
            }
            for item in report.categories
        ],
    }

    def render_md(payload: dict) -> str:
        lines = [f"# Install from `{payload['source']}`", ""]
        for item in payload["categories"]:
            if item["found"]:
                lines.append(f"- **{item['name']}**: {item['count']} installed to `{item['destination']}`")
            else:
                lines.append(f"- **{item['name']}**: {item['message']}")
        return "\n".join(lines)

    def render_table(payload: dict) -> None:
        # Per-category lines were already printed while installing.
        console.print("")
        console.print("[green]Installation complete![/green]")
        for category in report.categories:
            console.print(f"{category.noun.capitalize()} installed to: {category.destination}")
        console.print("")
        console.print("Restart OpenCode and Codex to use the new skills.")

    _emit_success(command="install", output_format=output_format, data=data, md_renderer=render_md, table_renderer=render_table)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Run the installer when no command is given."""
    if ctx.invoked_subcommand is None:
        _run_install(Path("."), OutputFormat.table)


@app.command("install")
def install(
    source: Path = typer.Option(Path("."), "--source", "-s", help="Repository root holding skill/, command/ and codex-skill/."),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
):
    """Copy skills and slash commands into the OpenCode and Codex config directories."""
    _run_install(source, output_format)


@app.command("paths")
def paths(
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
):
    """Show where each category is installed."""
    targets = resolve_targets()
    data = {name: str(targets.destination_for(name)) for name in CATEGORY_NAMES}
    _emit_success(command="paths", output_format=output_format, data=data)


@app.command("list")
def list_installed(
    category: Optional[str] = typer.Option(None, "--category", "-c", help=f"One of: {', '.join(CATEGORY_NAMES)}"),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
):
    """List installed skills and slash commands."""
    try:
        rows = inventory_installed(resolve_targets(), category=category)
    except InventoryError as error:
        _emit_error(
            command="list",
            output_format=output_format,
            exit_code=EXIT_INVALID_INPUT,
            code="inventory_error",
            message=str(error),
        )
        raise

    if not rows:
        _emit_error(
            command="list",
            output_format=output_format,
            exit_code=EXIT_NOT_FOUND,
            code="nothing_installed",
            message="No installed skills or commands found.",
        )
        raise

    data = {
        "items": [
            {
                "category": row.category,
                "name": row.name,
                "title": row.title,
                "description": row.description,
                "path": str(row.path),
            }
            for row in rows
        ],
    }

    def render_md(payload: dict) -> str:
        lines = ["# Installed items", ""]
        for item in payload["items"]:
            suffix = f" | {item['description']}" if item["description"] else ""
            lines.append(f"- `{item['category']}` | `{item['title']}`{suffix}")
        return "\n".join(lines)

    def render_table(payload: dict) -> None:
        table = Table(title="Installed items")
        table.add_column("Category")
        table.add_column("Name")
        table.add_column("Description")
        for item in payload["items"]:
            table.add_row(item["category"], item["title"], item["description"] or "-")
        console.print(table)

    _emit_success(command="list", output_format=output_format, data=data, md_renderer=render_md, table_renderer=render_table)


@app.command("version")
def version(
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
) -> None:
    """Print version."""
    _emit_success(command="version", output_format=output_format, data={"version": __version__})


if __name__ == "__main__":
    app()
