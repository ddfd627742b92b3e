"""Rewrite legacy video embeds into placeholder paragraphs the structural parser keeps"""

import re


VIDEO_MARKER = 'VIDEO_EMBED:::'
PLACEHOLDER = r'<p class="VIDEO_EMBED_PLACEHOLDER">' + VIDEO_MARKER + r'\1</p>'

EMBED_RES: list[re.Pattern] = [
    # <iframe src> players (YouTube, Vimeo, ...)
    re.compile(r'<div class="video-embed">\s*<iframe[^>]*src="([^"]*)"[^>]*></iframe>\s*</div>'),
    # <video> with a <source> child
    re.compile(r'<div class="video-embed">\s*<video[^>]*>\s*<source\s+src="([^"]*)"[^>]*>[^<]*</video>\s*</div>'),
    # <video src> attribute
    re.compile(r'<div class="video-embed">\s*<video[^>]*src="([^"]*)"[^>]*>[^<]*</video>\s*</div>'),
]


def preprocess_embeds(body_html: str) -> str:
    """Replace each recognized `div.video-embed` with a `VIDEO_EMBED:::<url>` paragraph."""
    for pattern in EMBED_RES:
        body_html = pattern.sub(PLACEHOLDER, body_html)
    return body_html
