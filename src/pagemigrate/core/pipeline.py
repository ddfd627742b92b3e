"""Pipeline step functions: bulk migration of legacy pages in a content store"""

import logging

from pagemigrate.core.migrate import migrate_html
from pagemigrate.core.models import Page
from pagemigrate.crud.pages import content_html_path, content_json_path, save_page_content
from pagemigrate.crud.store import ContentStore


logger = logging.getLogger(__name__)


async def run_migrate_pages(
    store: ContentStore,
    pages: list[Page],
    dry_run: bool = False,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Migrate every page that still only has legacy index.html.

    Pages that already have content.json are skipped; pages with neither file,
    or whose migration fails, are counted as errors without stopping the batch.
    Returns (counts, changes) where changes lists (status, slug) per page.
    """
    counts = {"converted": 0, "skipped": 0, "errors": 0}
    changes: list[tuple[str, str]] = []

    for page in pages:
        try:
            if await store.get_content(content_json_path(page)) is not None:
                logger.info("skipping %s: content.json already exists", page.slug)
                counts["skipped"] += 1
                changes.append(("skipped", page.slug))
                continue

            legacy = await store.get_content(content_html_path(page))
            if legacy is None or not legacy.content:
                logger.warning("no index.html found for %s", page.slug)
                counts["errors"] += 1
                changes.append(("missing", page.slug))
                continue

            blocks = migrate_html(legacy.content)
            if not dry_run:
                await save_page_content(
                    store, page, blocks, message=f"Migrate {page.slug} from HTML to block format",
                )
            logger.info("converted %s (%d blocks)", page.slug, len(blocks))
            counts["converted"] += 1
            changes.append(("converted", page.slug))
        except Exception as e:
            logger.error("error converting %s: %s", page.slug, e)
            counts["errors"] += 1
            changes.append(("error", page.slug))

    return counts, changes
