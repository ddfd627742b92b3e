"""Strip legacy page chrome and read document-level heading colors"""

import re


BODY_RE = re.compile(r'<body[^>]*>([\s\S]*)</body>', re.IGNORECASE)
TITLE_RE = re.compile(r'<h1[^>]*>.*?</h1>', re.IGNORECASE)
SUBTITLE_RE = re.compile(r'<p class="subtitle"[^>]*>.*?</p>', re.IGNORECASE)
STYLE_RE = re.compile(r'<style[^>]*>([\s\S]*?)</style>', re.IGNORECASE)

HEADING_COLOR_RES: dict[int, re.Pattern] = {
    level: re.compile(rf'h{level}\s*\{{[^}}]*background-color:\s*([^;]+)', re.IGNORECASE)
    for level in (1, 2, 3)
}


def extract_body(html: str) -> str:
    """Return the inner <body> markup without the duplicated page title and subtitle.

    Fragments with no <body> element pass through unchanged.
    """
    if not html:
        return ''

    m = BODY_RE.search(html)
    if not m:
        return html

    content = m.group(1).strip()
    # title and subtitle live on the Page record, not in the block tree
    content = TITLE_RE.sub('', content, count=1)
    content = SUBTITLE_RE.sub('', content, count=1)
    return content.strip()


def scan_heading_colors(html: str) -> dict[int, str]:
    """Map heading level (1-3) to the background-color declared in the first <style> block."""
    if not html:
        return {}
    m = STYLE_RE.search(html)
    if not m:
        return {}

    css = m.group(1)
    colors: dict[int, str] = {}
    for level, pattern in HEADING_COLOR_RES.items():
        found = pattern.search(css)
        if found:
            colors[level] = found.group(1).strip()
    return colors
