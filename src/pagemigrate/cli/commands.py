"""CLI command implementations"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from pagemigrate.config import Settings, load_config
from pagemigrate.core.markdown import import_markdown
from pagemigrate.core.migrate import migrate_html
from pagemigrate.core.models import CoverImage, DocumentWrapper, Page
from pagemigrate.core.pipeline import run_migrate_pages
from pagemigrate.core.utils.slug import slug_from_path
from pagemigrate.crud.database import init_db, make_engine, reset_db
from pagemigrate.crud.pages import content_html_path, load_page_content, save_page_content, save_page_cover_image
from pagemigrate.crud.sql_store import SQLContentStore


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")
    return settings


def _store(settings: Settings) -> SQLContentStore:
    engine = make_engine(settings.db_url)
    init_db(engine)
    return SQLContentStore(engine, settings.max_versions)


def _page(content_path: str, title: Optional[str] = None) -> Page:
    """Page addressed by its content path; the slug is the last path segment."""
    slug = slug_from_path(content_path)
    return Page(slug=slug, title=title or slug, content_path=content_path.strip("/"))


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot read {path}", e)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the content store schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    init_db(engine)
    typer.echo(f"Content store initialized at: {settings.db_url}")


def convert_cmd(
    path: Annotated[Path, typer.Argument(help="Legacy HTML file to convert")],
    out: Annotated[Optional[Path], typer.Option("--out", "-o", help="Write JSON here instead of stdout")] = None,
    ):
    """Convert a legacy HTML file to content.json (no store involved)."""
    _settings()
    blocks = migrate_html(_read(path))
    text = json.dumps(DocumentWrapper(blocks=blocks).to_json(), indent=2, ensure_ascii=False)
    if out is None:
        typer.echo(text)
        return
    out.write_text(text, encoding="utf-8")
    typer.echo(f"  {path} -> {out} ({len(blocks)} blocks)")


def put_html_cmd(
    path: Annotated[Path, typer.Argument(help="Legacy HTML file")],
    content_path: Annotated[str, typer.Argument(help="Page content path in the store")],
    ):
    """Store a legacy index.html for a page."""
    settings = _settings()
    store = _store(settings)
    page = _page(content_path)
    html = _read(path)
    try:
        asyncio.run(store.put_content(content_html_path(page), html, f"Add legacy page: {page.slug}"))
    except Exception as e:
        _fail("Write failed", e)
    typer.echo(f"  {path} -> {content_html_path(page)}")


def import_md_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to import")],
    content_path: Annotated[str, typer.Argument(help="Page content path in the store")],
    ):
    """Import a markdown file as a page's content.json."""
    settings = _settings()
    try:
        imported = import_markdown(_read(path))
    except ValueError as e:
        _fail(str(e))
    store = _store(settings)
    page = _page(content_path, imported.title)
    try:
        asyncio.run(save_page_content(store, page, imported.blocks, message=f"Import page: {page.title}"))
    except Exception as e:
        _fail("Import failed", e)
    typer.echo(f"Imported '{page.title}' ({len(imported.blocks)} blocks) -> {page.content_path}")


def show_cmd(
    content_path: Annotated[str, typer.Argument(help="Page content path in the store")],
    ):
    """Show which format a page is stored in and its content."""
    settings = _settings()
    store = _store(settings)
    try:
        loaded = asyncio.run(load_page_content(store, _page(content_path)))
    except Exception as e:
        _fail("Read failed", e)

    typer.echo(f"format: {loaded.format}")
    if loaded.format == "json":
        wrapper = DocumentWrapper(blocks=loaded.content, cover_image=loaded.cover_image)
        typer.echo(json.dumps(wrapper.to_json(), indent=2, ensure_ascii=False))
    elif loaded.format == "html":
        typer.echo(loaded.content)
    else:
        raise typer.Exit(1)


def migrate_cmd(
    content_paths: Annotated[list[str], typer.Argument(help="Page content paths to migrate")],
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Convert but do not write content.json")] = False,
    ):
    """Migrate legacy index.html pages to content.json, skipping pages already migrated."""
    settings = _settings()
    store = _store(settings)
    pages = [_page(p) for p in content_paths]
    counts, changes = asyncio.run(run_migrate_pages(store, pages, dry_run=dry_run))

    for status, slug in changes:
        typer.echo(f"  {status}: {slug}")
    typer.echo(
        f"Migration complete - "
        f"{counts['converted']} converted, "
        f"{counts['skipped']} skipped, "
        f"{counts['errors']} errors"
    )
    if counts["errors"]:
        raise typer.Exit(1)


def set_cover_cmd(
    content_path: Annotated[str, typer.Argument(help="Page content path in the store")],
    url: Annotated[Optional[str], typer.Option("--url", help="Cover image URL")] = None,
    position: Annotated[Optional[float], typer.Option("--position", help="Vertical focus, 0-100")] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Remove the cover image")] = False,
    ):
    """Set or remove a page's cover image, migrating legacy HTML if needed."""
    settings = _settings()
    if not clear and not url:
        _fail("Pass --url or --clear")
    cover = None if clear else CoverImage(
        url=url, position=settings.default_cover_position if position is None else position,
    )
    store = _store(settings)
    try:
        asyncio.run(save_page_cover_image(store, _page(content_path), cover))
    except Exception as e:
        _fail("Cover update failed", e)
    typer.echo("Cover image removed." if clear else f"Cover image set: {url}")


def history_cmd(
    path: Annotated[str, typer.Argument(help="Store path, e.g. pages/intro/content.json")],
    from_num: Annotated[Optional[int], typer.Option("--from", help="Diff from this version number")] = None,
    to_num: Annotated[Optional[int], typer.Option("--to", help="Diff to this version number")] = None,
    ):
    """List prior versions of a stored file, or diff two of them."""
    settings = _settings()
    store = _store(settings)
    if from_num is not None or to_num is not None:
        if from_num is None or to_num is None:
            _fail("Pass both --from and --to")
        try:
            lines = store.diff(path, from_num, to_num)
        except ValueError as e:
            _fail(str(e))
        typer.echo("".join(lines), nl=False)
        return

    versions = store.history(path)
    if not versions:
        typer.echo(f"No prior versions for {path}.")
        raise typer.Exit(1)
    for v in versions:
        typer.echo(f"  v{v.version_num}  {v.created_at:%Y-%m-%d %H:%M}  {v.message}")
