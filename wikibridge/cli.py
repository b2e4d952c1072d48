"""CLI entry point for wikibridge."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from wikibridge.config import WikiBridgeConfig, load_config
from wikibridge.config.loader import DEFAULT_CONFIG_TEMPLATE
from wikibridge.transform import MarkdownProcessor, extract_tags, generate_path
from wikibridge.upload import UploadOutcome, UploadRequest, Uploader, merge_tags
from wikibridge.vault import ImageResolver, LocalVault, VaultError
from wikibridge.wiki import WikiClient, WikiError, WikiPage, create_client

app = typer.Typer(
    name="wikibridge",
    help="Publish Obsidian notes and their images to Wiki.js.",
)

config_app = typer.Typer(help="Manage wikibridge configuration.")
app.add_typer(config_app, name="config")

_LOG_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warn": logging.WARNING, "error": logging.ERROR}

# Global state
_config: WikiBridgeConfig | None = None
_vault_root: str = "."


def _get_config() -> WikiBridgeConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to wikibridge.yaml")
    ] = None,
    vault: Annotated[
        str, typer.Option("--vault", "-v", help="Vault root directory")
    ] = ".",
) -> None:
    """Global options."""
    global _config, _vault_root
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _vault_root = vault
    logging.basicConfig(
        level=_LOG_LEVELS[_config.log_level],
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _client_or_exit(cfg: WikiBridgeConfig) -> WikiClient:
    try:
        return create_client(cfg)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _vault_or_exit() -> LocalVault:
    try:
        return LocalVault(_vault_root)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _note_path(vault: LocalVault, note: str) -> str:
    """Accept either a vault-relative path or a filesystem path to the note."""
    candidate = Path(note)
    if candidate.exists():
        try:
            return vault.relative(candidate)
        except ValueError as e:
            rprint(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
    return note


def _parse_tags(raw: str) -> list[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


def _display_outcome(outcome: UploadOutcome) -> None:
    if outcome.assets:
        table = Table(title=f"Images ({len(outcome.assets)})")
        table.add_column("Image", style="cyan")
        table.add_column("Status")
        table.add_column("Detail", style="dim")
        for asset in outcome.assets:
            status = "[green]uploaded[/green]" if asset.success else "[red]failed[/red]"
            table.add_row(asset.name, status, asset.remote_path or asset.message)
        rprint(table)

    if outcome.folder is not None and outcome.folder.degraded:
        rprint(
            "[yellow]Warning:[/yellow] asset folder(s) "
            f"{', '.join(outcome.folder.degraded_segments)} could not be created; "
            f"images were placed in folder {outcome.folder.folder_id}."
        )

    if outcome.cancelled:
        rprint(f"[yellow]{outcome.page.message}[/yellow]")
    elif outcome.success:
        rprint(f"[green]{outcome.page.message}:[/green] {outcome.page.page_url}")
    else:
        rprint(f"[red]Upload failed:[/red] {outcome.page.message}")


@app.command()
def check() -> None:
    """Test the connection to Wiki.js."""
    cfg = _get_config()
    client = _client_or_exit(cfg)
    if asyncio.run(client.check_connection()):
        rprint(f"[green]Connected[/green] to {client.base_url}")
    else:
        rprint(f"[red]Cannot connect[/red] to {client.base_url}. Check url and token.")
        raise typer.Exit(1)


@app.command()
def pages() -> None:
    """List pages on the wiki, ordered by title."""
    cfg = _get_config()
    client = _client_or_exit(cfg)
    try:
        listed = asyncio.run(client.list_pages())
    except WikiError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Pages ({len(listed)})")
    table.add_column("ID", justify="right")
    table.add_column("Path", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Updated", style="dim")
    for page in listed:
        table.add_row(str(page.id), page.path, page.title, page.updated_at or "-")
    rprint(table)


@app.command()
def preview(
    note: str = typer.Argument(..., help="Note to convert (vault-relative or filesystem path)"),
    path: str | None = typer.Option(None, "--path", "-p", help="Target page path for image URLs"),
) -> None:
    """Show the converted note and how its images resolve, without uploading."""
    cfg = _get_config()
    vault = _vault_or_exit()
    note_path = _note_path(vault, note)

    source = vault.get_file(note_path)
    if source is None:
        rprint(f"[red]Error:[/red] Note not found in vault: {note_path}")
        raise typer.Exit(1)
    try:
        text = asyncio.run(vault.read_text(source))
    except VaultError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    page_path = path or generate_path(source.name, source.parent)
    result = MarkdownProcessor(cfg.conversion).process(text, source.name, page_path)
    tags = merge_tags(extract_tags(text), cfg.upload.default_tags)

    rprint(
        Panel(
            f"[dim]Title:[/dim] {result.title}\n"
            f"[dim]Path:[/dim]  {page_path}\n"
            f"[dim]Tags:[/dim]  {', '.join(tags) or '-'}",
            title=source.path,
            border_style="blue",
        )
    )
    rprint(Syntax(result.content, "markdown", word_wrap=True))

    if result.images:
        report = ImageResolver(vault).resolve_all(result.images, source)
        table = Table(title=f"Images ({len(result.images)})")
        table.add_column("Reference", style="cyan")
        table.add_column("Resolved file")
        for image in result.images:
            found = report.files.get(image.path)
            table.add_row(image.path, found.path if found else "[red]not found[/red]")
        rprint(table)


@app.command()
def upload(
    note: str = typer.Argument(..., help="Note to publish (vault-relative or filesystem path)"),
    path: str | None = typer.Option(None, "--path", "-p", help="Override the page path"),
    title: str | None = typer.Option(None, "--title", "-t", help="Override the page title"),
    description: str | None = typer.Option(None, "--description", "-d", help="Page description"),
    tags: str | None = typer.Option(None, "--tags", help="Comma-separated tags (replaces detected tags)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Update an existing page without asking"),
) -> None:
    """Publish a note and its images to Wiki.js."""
    cfg = _get_config()
    client = _client_or_exit(cfg)
    vault = _vault_or_exit()
    note_path = _note_path(vault, note)
    uploader = Uploader(client=client, vault=vault, config=cfg)

    try:
        draft = asyncio.run(uploader.prepare(note_path))
    except (ValueError, VaultError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    request = UploadRequest.from_draft(
        draft,
        path=path,
        title=title,
        description=description,
        tags=_parse_tags(tags) if tags is not None else None,
    )

    def _confirm(existing: WikiPage) -> bool:
        if yes:
            return True
        rprint(f'A page already exists at "{request.path}": [bold]{existing.title}[/bold]')
        return typer.confirm("Update the existing page?", default=False)

    if draft.preview.images:
        rprint(f"Uploading {len(draft.preview.images)} image(s)...")
    outcome = asyncio.run(uploader.upload(request, confirm_update=_confirm))
    _display_outcome(outcome)
    if not outcome.success and not outcome.cancelled:
        raise typer.Exit(1)


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Write a starter wikibridge.yaml in the current directory."""
    target = Path("wikibridge.yaml")
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration."""
    cfg = _get_config()
    dumped = yaml.dump(cfg.model_dump(), default_flow_style=False, sort_keys=False)
    rprint(Syntax(dumped, "yaml"))


if __name__ == "__main__":
    app()
