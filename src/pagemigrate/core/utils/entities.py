"""Minimal HTML entity decoding for code scraped out of legacy widget markup"""

import re


ENTITY_RE = re.compile(r'&[^;]+;')

ENTITIES: dict[str, str] = {
    '&lt;':   '<',
    '&gt;':   '>',
    '&amp;':  '&',
    '&quot;': '"',
    '&#39;':  "'",
}


def decode_html_entities(text: str) -> str:
    """Decode the five entities the legacy editor escaped; leave any other entity as written."""
    return ENTITY_RE.sub(lambda m: ENTITIES.get(m.group(0), m.group(0)), text)
