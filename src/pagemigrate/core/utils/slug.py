"""Page slugs derived from content store paths"""

import re
from pathlib import PurePosixPath


NON_WORD_RE = re.compile(r'[^\w\s-]')
SEPARATOR_RE = re.compile(r'[\s_-]+')


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated, URL-safe form of text."""
    text = NON_WORD_RE.sub('', text.lower())
    return SEPARATOR_RE.sub('-', text).strip('-')


def slug_from_path(content_path: str, default: str = "page") -> str:
    """Slug of the page stored under content_path: its last segment, slugified."""
    name = PurePosixPath(content_path.strip("/")).name
    return slugify(name) or default
