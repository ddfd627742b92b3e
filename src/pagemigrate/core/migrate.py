"""Legacy HTML page -> editor block tree"""

import logging

from pagemigrate.core.extract.document import extract_body, scan_heading_colors
from pagemigrate.core.extract.embeds import preprocess_embeds
from pagemigrate.core.models import BlockNode, paragraph
from pagemigrate.core.parse import parse_html
from pagemigrate.core.reclassify import reclassify


logger = logging.getLogger(__name__)


def migrate_html(html: str) -> list[BlockNode]:
    """Convert a legacy HTML page into editor blocks.

    Heading colors are read from the full document before the body is
    stripped. A page with no body content migrates to one empty paragraph.
    The conversion is lossy; callers keep the legacy HTML alongside.
    """
    heading_colors = scan_heading_colors(html)
    body = extract_body(html)
    if not body:
        return [paragraph()]

    baseline = parse_html(preprocess_embeds(body))
    blocks = reclassify(baseline, heading_colors)
    logger.debug("migrated %d baseline blocks into %d blocks", len(baseline), len(blocks))
    return blocks or [paragraph()]
