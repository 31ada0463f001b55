"""Command-line interface for Quill.

This module defines the CLI commands using Click framework.

Commands:
- new: Scaffold a new site.
- serve: Run the website, optionally with live reload.
- post: Create a new blog post interactively.
"""

from __future__ import annotations

import shutil
from datetime import date
from pathlib import Path

import click
import questionary

from . import __version__
from .config import SiteConfig, load_config
from .content import POST_SUFFIX
from .utils import parse_date, slugify

# Path to the default site template directory
_TEMPLATES_DIR = Path(__file__).parent / "scaffold"


@click.group()
@click.version_option(version=__version__, prog_name="quill")
def cli():
    """Quill personal website."""


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new site."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Quill site created at {target}")


@cli.command()
@click.option("--host", required=False, help="Interface to bind (overrides quill.yaml)")
@click.option(
    "--port",
    type=int,
    required=False,
    help="Port to run the server (overrides quill.yaml)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=False,
    help="Reload open pages when posts, templates or styles change",
)
@click.option(
    "--ws-port",
    type=int,
    required=False,
    help="Port for the live reload websocket server (overrides quill.yaml ws_port)",
)
def serve(host: str | None, port: int | None, live_reload: bool, ws_port: int | None):
    """Run the website from the current directory."""
    config = _load_site_config()
    from .server import SiteServer

    server = SiteServer(
        config, live_reload=live_reload, host=host, http_port=port, ws_port=ws_port
    )
    server.start()


@cli.command()
def post():
    """Create a new blog post interactively."""
    config = _load_site_config()

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    tags = questionary.text(
        "Tags (comma separated):",
        style=_questionary_style(),
    ).ask()
    if tags is None:
        raise click.Abort()

    published = questionary.text(
        "Date:",
        default=date.today().isoformat(),
        validate=_validate_date,
        style=_questionary_style(),
    ).ask()
    if published is None:
        raise click.Abort()

    target_path = config.posts_dir / f"{slugify(title)}{POST_SUFFIX}"
    if target_path.exists():
        raise click.ClickException(f"File already exists: {target_path}")

    target_path.parent.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        _post_template(title, parse_date(published), tags), encoding="utf-8"
    )
    click.echo(f"Created {target_path.relative_to(config.root)}")


def _load_site_config() -> SiteConfig:
    try:
        return load_config(Path.cwd())
    except ValueError as exc:
        raise click.ClickException(f"Invalid quill.yaml: {exc}") from exc


def _validate_date(value: str) -> bool | str:
    try:
        parse_date(value)
    except ValueError:
        return "Enter a date such as 2024-05-01"
    return True


def _post_template(title: str, published: date, tags: str) -> str:
    """Return the source of a new post: metadata preamble, then the title heading."""
    lines = [f"Date: {published.isoformat()}"]
    cleaned = [tag.strip() for tag in tags.split(",") if tag.strip()]
    if cleaned:
        lines.append(f"Tags: {', '.join(cleaned)}")
    lines.extend(["", f"# {title}", "", ""])
    return "\n".join(lines)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Copy the starter site into a new directory.

    Args:
        root: Root directory for the new site.
    """
    for src_path in _TEMPLATES_DIR.rglob("*"):
        if src_path.is_dir():
            continue
        rel_path = src_path.relative_to(_TEMPLATES_DIR)
        dest_path = root / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)
