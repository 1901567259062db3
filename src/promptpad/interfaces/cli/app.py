"""CLI application for PromptPad using Rich and Typer."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from promptpad.core.config import DEFAULT_FOLDER, setup_logging
from promptpad.core.errors import PromptPadError
from promptpad.core.factory import build_library
from promptpad.core.focus import FocusController, NullFocusController
from promptpad.core.library import PromptLibrary
from promptpad.core.types import (
    BulkImportPrompt,
    CreatePromptInput,
    PromptMetadata,
    UpdatePromptInput,
)

app = typer.Typer(
    name="promptpad",
    help="PromptPad CLI - your personal prompt library",
    no_args_is_help=True,
)

console = Console()

# Hosts with real focus automation replace this at startup
focus_controller: FocusController = NullFocusController()

_BULK_ADAPTER = TypeAdapter(list[BulkImportPrompt])


def _library(ctx: typer.Context) -> PromptLibrary:
    """Build the library lazily, once per invocation."""
    if ctx.obj.get("library") is None:
        try:
            ctx.obj["library"] = build_library(ctx.obj.get("root"))
        except PromptPadError as e:
            _fail(e)
    return ctx.obj["library"]


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


def _prompts_table(title: str, prompts: list[PromptMetadata]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="green")
    table.add_column("Folder")
    table.add_column("Tags")
    table.add_column("Uses", justify="right")

    for prompt in prompts:
        table.add_row(
            str(prompt.id)[:8],
            prompt.name,
            prompt.folder or "",
            ", ".join(prompt.tags),
            str(prompt.use_count),
        )
    return table


@app.callback()
def main(
    ctx: typer.Context,
    root: Optional[str] = typer.Option(
        None,
        "--root",
        "-r",
        help="Storage root (default: $PROMPTPAD_STORAGE_DIR or ~/PromptPad)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
):
    """PromptPad - store, search and reuse prompts."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        setup_logging()
    ctx.obj = {"root": root, "library": None}


@app.command("list")
def list_prompts(
    ctx: typer.Context,
    folder: Optional[str] = typer.Option(None, "--folder", "-f", help="Only this folder"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only prompts with this tag"),
):
    """List indexed prompts."""
    try:
        index = _library(ctx).get_index()
    except PromptPadError as e:
        _fail(e)

    prompts = [
        p
        for p in index.prompts
        if (folder is None or p.folder == folder) and (tag is None or tag in p.tags)
    ]
    if not prompts:
        console.print("[dim]No prompts yet.[/dim]")
        return
    console.print(_prompts_table("Prompts", prompts))


@app.command()
def show(ctx: typer.Context, prompt_id: str = typer.Argument(..., help="Prompt ID")):
    """Show a prompt with its metadata."""
    try:
        prompt = _library(ctx).read_prompt(prompt_id)
    except PromptPadError as e:
        _fail(e)

    fm = prompt.frontmatter
    subtitle = f"{fm.id} | uses: {fm.use_count}"
    if fm.tags:
        subtitle += f" | tags: {', '.join(fm.tags)}"
    if fm.description:
        console.print(f"[dim]{fm.description}[/dim]")
    console.print(
        Panel(Markdown(prompt.content), title=fm.name, subtitle=subtitle, border_style="green")
    )


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Prompt name"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="Prompt body"),
    file: Optional[Path] = typer.Option(None, "--file", help="Read the body from a file"),
    description: Optional[str] = typer.Option(None, "--description", help="Short description"),
    folder: Optional[str] = typer.Option(None, "--folder", "-f", help="Target folder"),
    tags: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Tag (repeatable)"),
):
    """Create a new prompt."""
    body = content or ""
    if file is not None:
        try:
            body = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            _fail(e)

    try:
        metadata = _library(ctx).create_prompt(
            CreatePromptInput(
                name=name,
                description=description,
                content=body,
                folder=folder,
                tags=tags or [],
            )
        )
    except PromptPadError as e:
        _fail(e)

    console.print(f"[green]Created {metadata.name}: {metadata.id}[/green]")
    console.print(f"[dim]{metadata.file_path}[/dim]")


@app.command()
def edit(
    ctx: typer.Context,
    prompt_id: str = typer.Argument(..., help="Prompt ID"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New body"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    folder: Optional[str] = typer.Option(None, "--folder", "-f", help="Move to folder"),
    tags: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Replace tags"),
):
    """Update fields of a prompt. Only given options change."""
    try:
        metadata = _library(ctx).update_prompt(
            prompt_id,
            UpdatePromptInput(
                name=name,
                description=description,
                content=content,
                folder=folder,
                tags=tags,
            ),
        )
    except PromptPadError as e:
        _fail(e)

    console.print(f"[green]Updated {metadata.name}[/green]")
    console.print(f"[dim]{metadata.file_path}[/dim]")


@app.command("rm")
def remove(ctx: typer.Context, prompt_id: str = typer.Argument(..., help="Prompt ID")):
    """Delete a prompt."""
    try:
        _library(ctx).delete_prompt(prompt_id)
    except PromptPadError as e:
        _fail(e)
    console.print(f"[yellow]Deleted {prompt_id}[/yellow]")


@app.command()
def use(
    ctx: typer.Context,
    prompt_id: str = typer.Argument(..., help="Prompt ID"),
    paste: bool = typer.Option(
        False, "--paste", help="Paste into the previously focused app"
    ),
):
    """Print a prompt body and record the usage."""
    library = _library(ctx)
    handle = focus_controller.capture_active_target() if paste else None
    try:
        content = library.get_prompt_content(prompt_id)
        library.record_usage(prompt_id)
    except PromptPadError as e:
        _fail(e)

    typer.echo(content)
    if paste and not focus_controller.restore_and_inject(handle):
        console.print("[yellow]Paste is not available on this host.[/yellow]")


@app.command()
def search(ctx: typer.Context, query: str = typer.Argument(..., help="Text to find")):
    """Search prompt bodies (case-insensitive)."""
    try:
        results = _library(ctx).search_content(query)
    except PromptPadError as e:
        _fail(e)

    if not results:
        console.print(f"[dim]No prompts contain {escape(repr(query))}.[/dim]")
        return
    console.print(_prompts_table(f"Results for {query!r}", results))


@app.command()
def folders(ctx: typer.Context):
    """List folders."""
    try:
        names = _library(ctx).list_folders()
    except PromptPadError as e:
        _fail(e)
    for name in names:
        console.print(name)


@app.command()
def mkdir(ctx: typer.Context, name: str = typer.Argument(..., help="Folder name")):
    """Create a folder."""
    try:
        _library(ctx).create_folder(name)
    except PromptPadError as e:
        _fail(e)
    console.print(f"[green]Folder created: {name}[/green]")


@app.command()
def rebuild(ctx: typer.Context):
    """Rebuild the index from the prompt files."""
    try:
        index = _library(ctx).rebuild_index()
    except PromptPadError as e:
        _fail(e)
    console.print(
        f"[green]Index rebuilt: {len(index.prompts)} prompts, "
        f"{len(index.folders)} folders, {len(index.tags)} tags[/green]"
    )


@app.command()
def settings(
    ctx: typer.Context,
    hotkey: Optional[str] = typer.Option(None, "--hotkey", help="Launcher hotkey"),
    theme: Optional[str] = typer.Option(None, "--theme", help="light, dark or system"),
    launch_at_startup: Optional[bool] = typer.Option(
        None, "--launch-at-startup/--no-launch-at-startup", help="Start with the OS"
    ),
    preserve_clipboard: Optional[bool] = typer.Option(
        None, "--preserve-clipboard/--no-preserve-clipboard", help="Restore clipboard after paste"
    ),
):
    """View or modify settings."""
    library = _library(ctx)
    try:
        current = library.get_settings()
        changes = {
            key: value
            for key, value in {
                "hotkey": hotkey,
                "theme": theme,
                "launch_at_startup": launch_at_startup,
                "preserve_clipboard": preserve_clipboard,
            }.items()
            if value is not None
        }
        if changes:
            current = library.update_settings(current.model_copy(update=changes))
    except PromptPadError as e:
        _fail(e)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Hotkey", current.hotkey)
    table.add_row("Theme", current.theme)
    table.add_row("Storage Location", current.storage_location or "(default)")
    table.add_row("Launch At Startup", "enabled" if current.launch_at_startup else "disabled")
    table.add_row("Preserve Clipboard", "enabled" if current.preserve_clipboard else "disabled")
    console.print(table)


@app.command("import")
def import_prompts(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="A .md file or a .json bulk export"),
    folder: Optional[str] = typer.Option(None, "--folder", "-f", help="Target folder for .md"),
):
    """Import a Markdown prompt or a JSON list of prompts."""
    library = _library(ctx)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(e)

    if path.suffix.lower() == ".json":
        try:
            items = _BULK_ADAPTER.validate_json(raw)
        except ValidationError as e:
            _fail(e)
        result = library.import_bulk(items)
        console.print(f"[green]Imported {result.success}[/green], failed {result.failed}")
        for error in result.errors:
            console.print(f"[red]{escape(error)}[/red]")
        if result.failed:
            raise typer.Exit(1)
        return

    try:
        metadata = library.import_markdown(path.name, raw, folder=folder or DEFAULT_FOLDER)
    except PromptPadError as e:
        _fail(e)
    console.print(f"[green]Imported {metadata.name}: {metadata.id}[/green]")


@app.command()
def export(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file"),
):
    """Export all prompts as JSON."""
    try:
        exported = _library(ctx).export_prompts()
    except PromptPadError as e:
        _fail(e)

    data = json.dumps(
        [p.model_dump(mode="json") for p in exported], indent=2, ensure_ascii=False
    )
    if output is None:
        typer.echo(data)
        return
    try:
        output.write_text(data, encoding="utf-8")
    except OSError as e:
        _fail(e)
    console.print(f"[green]Exported {len(exported)} prompts to {output}[/green]")


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
