"""Page content persistence: canonical content.json with legacy index.html fallback"""

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from pagemigrate.core.migrate import migrate_html
from pagemigrate.core.models import BlockNode, CoverImage, DocumentWrapper, Page, PageContent, paragraph
from pagemigrate.crud.store import ContentStore


logger = logging.getLogger(__name__)

# distinguishes "caller did not pass a cover image" from an explicit None (remove)
UNSET: Any = object()


def content_json_path(page: Page) -> str:
    return f"{page.content_path}/content.json"


def content_html_path(page: Page) -> str:
    return f"{page.content_path}/index.html"


def _parse_json_content(raw: str) -> Optional[PageContent]:
    """Read either the {coverImage?, blocks} wrapper or a bare blocks array; None if unreadable."""
    try:
        parsed = json.loads(raw)
        if isinstance(parsed, dict) and isinstance(parsed.get("blocks"), list):
            wrapper = DocumentWrapper.model_validate(parsed)
            return PageContent(format="json", content=wrapper.blocks, cover_image=wrapper.cover_image)
        if isinstance(parsed, list):
            return PageContent(format="json", content=[BlockNode.model_validate(b) for b in parsed])
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("unreadable content.json: %s", e)
        return None
    logger.warning("content.json has no blocks list")
    return None


async def load_page_content(store: ContentStore, page: Page) -> PageContent:
    """Load a page's content: content.json first, then legacy index.html, else format 'none'."""
    json_file = await store.get_content(content_json_path(page))
    if json_file is not None and json_file.content:
        loaded = _parse_json_content(json_file.content)
        if loaded is not None:
            return loaded

    html_file = await store.get_content(content_html_path(page))
    if html_file is not None and html_file.content:
        return PageContent(format="html", content=html_file.content)

    return PageContent(format="none")


async def _existing_cover_image(store: ContentStore, page: Page) -> Optional[CoverImage]:
    existing = await store.get_content(content_json_path(page))
    if existing is None or not existing.content:
        return None
    loaded = _parse_json_content(existing.content)
    return loaded.cover_image if loaded is not None else None


async def save_page_content(
    store: ContentStore,
    page: Page,
    blocks: list[BlockNode],
    cover_image: Optional[CoverImage] = UNSET,
    message: Optional[str] = None,
    ) -> None:
    """Write blocks to content.json in the wrapper format.

    An omitted cover_image keeps the one already in content.json; an explicit
    None removes it. index.html is never touched.

    The read of the existing cover and the write are not atomic: with
    concurrent writers to the same page the last write wins.
    """
    if cover_image is UNSET:
        cover_image = await _existing_cover_image(store, page)

    wrapper = DocumentWrapper(blocks=blocks, cover_image=cover_image)
    await store.put_content(
        content_json_path(page),
        json.dumps(wrapper.to_json(), indent=2, ensure_ascii=False),
        message or f"Update page: {page.title}",
    )


async def _current_blocks(store: ContentStore, page: Page) -> tuple[list[BlockNode], Optional[CoverImage]]:
    loaded = await load_page_content(store, page)
    if loaded.format == "json":
        return loaded.content, loaded.cover_image
    if loaded.format == "html":
        return migrate_html(loaded.content), None
    return [paragraph()], None


async def save_page_cover_image(store: ContentStore, page: Page, cover_image: Optional[CoverImage]) -> None:
    """Set (or with None, remove) the cover image without new editor blocks.

    A page that only has legacy HTML is migrated first so the new
    content.json does not lose its content.
    """
    blocks, _ = await _current_blocks(store, page)
    await save_page_content(store, page, blocks, cover_image)


async def load_viewer_blocks(store: ContentStore, page: Page) -> tuple[list[BlockNode], Optional[CoverImage]]:
    """Blocks and cover image for read-only display; legacy HTML is migrated in memory, not saved."""
    return await _current_blocks(store, page)
