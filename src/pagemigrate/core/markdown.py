"""Markdown import: frontmatter, source normalization, and markdown-it rendering into blocks"""

import base64
import re
from dataclasses import dataclass
from typing import Any, Optional

import yaml
from markdown_it import MarkdownIt

from pagemigrate.core.models import BlockNode, BlockType
from pagemigrate.core.parse import parse_html
from pagemigrate.core.reclassify import reclassify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
COMMENT_RE = re.compile(r'<!--[\s\S]*?-->')
WIKI_IMAGE_RE = re.compile(r'!\[\[([^\]]+)\]\]')
H1_RE = re.compile(r'^#\s+(.+)$', re.MULTILINE)

# Notion exports collapsible sections as emoji-led list items with a 4-space indented body
TOGGLE_EMOJI = (
    '❓', '💡', '⚠️', '📝', '✅', '❌', '🔥', '📌', '👉', '🎯', '📚', '🛠️', '🔔', '⭐', '💻', '🚀',
    '👽', '📦', '🔧', '💭', '🤔', '❗', 'ℹ️', '🎨', '🔍', '📋', '✨', '🐛', '🔒', '🔓', '⏰', '📎',
    '🏷️', '📖', '🔖', '🗂️',
)
TOGGLE_ITEM_RE = re.compile(r'^- (.+)$')
NESTED_LIST_RE = re.compile(r'^[-*+]\s')
ENCODED_BODY_RE = re.compile(r'<div data-encoded="([A-Za-z0-9+/=]*)"></div>')
INDENT = '    '

CALLOUT_EMOJI = ('💻', '🚀', '❓', '💡', '⚠️', '📝', '✅', '❌', '🔥', '📌', '👉', '🎯', '📚', '🛠️', '🔔', '⭐')
EMOJI_CALLOUT_RE = re.compile(
    r'^<p>(' + '|'.join(map(re.escape, CALLOUT_EMOJI)) + r')\s*:\s*(.+)</p>$', re.MULTILINE
)
# shorter "💻: run in Terminal" lines are legend entries, not callouts
MIN_CALLOUT_LENGTH = 30

# imported h1/h2 get the editor palette's header backgrounds
HEADER_COLORS: dict[int, str] = {1: '#DDEBF1', 2: '#FBF3DB'}


@dataclass
class ImportedMarkdown:
    title:       Optional[str]
    frontmatter: dict[str, Any]
    blocks:      list[BlockNode]


def _make_parser() -> MarkdownIt:
    """CommonMark with tables, raw HTML allowed so legacy widgets pass through."""
    return MarkdownIt("commonmark", options_update={"html": True}).enable("table")


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def normalize_markdown(markdown: str) -> str:
    """Drop HTML comments and rewrite Obsidian-style `![[img]]` embeds to standard images."""
    markdown = COMMENT_RE.sub('', markdown)
    return WIKI_IMAGE_RE.sub(r'![](\1)', markdown)


def extract_title(markdown: str) -> Optional[str]:
    """First level-1 heading text, without exporter comments; None if there is none."""
    m = H1_RE.search(markdown)
    if not m:
        return None
    return COMMENT_RE.sub('', m.group(1)).strip()


# --- toggles ---

def _toggle_body(lines: list[str], start: int) -> tuple[list[str], int]:
    """Unindented body lines of the toggle whose item line precedes start, and the index after it."""
    j = start
    while j < len(lines) and lines[j] == '':
        j += 1
    if j == len(lines) or not lines[j].startswith(INDENT) or NESTED_LIST_RE.match(lines[j][len(INDENT):]):
        return [], start

    body: list[str] = []
    in_fence = False
    j = start
    while j < len(lines):
        line = lines[j]
        unindented = line[len(INDENT):] if line.startswith(INDENT) else line
        if unindented.strip().startswith('```'):
            in_fence = not in_fence

        if line.startswith(INDENT) or in_fence:
            body.append(unindented)
        elif line == '':
            k = j + 1
            while k < len(lines) and lines[k] == '':
                k += 1
            if k == len(lines) or not lines[k].startswith(INDENT):
                break
            body.append('')
        else:
            break
        j += 1
    return body, j


def process_toggle_lists(markdown: str) -> str:
    """Rewrite Notion toggles as one-line `<details>` HTML blocks.

    A toggle is a `- ` item starting with a toggle emoji and followed by
    4-space indented content that is not a nested list. Anything else is
    left as markdown. The rendered body travels base64-encoded so block
    parsing cannot split it; expand_toggles restores it after rendering.
    """
    md = _make_parser()
    lines = markdown.split('\n')
    out: list[str] = []
    i = 0
    while i < len(lines):
        m = TOGGLE_ITEM_RE.match(lines[i])
        body, end = _toggle_body(lines, i + 1) if m and m.group(1).startswith(TOGGLE_EMOJI) else ([], i + 1)
        if not any(line.strip() for line in body):
            out.append(lines[i])
            i += 1
            continue

        inner = md.render('\n'.join(body).strip())
        encoded = base64.b64encode(inner.encode('utf-8')).decode('ascii')
        summary = md.renderInline(m.group(1))
        out.extend([f'<details><summary>{summary}</summary><div data-encoded="{encoded}"></div></details>', ''])
        i = end
    return '\n'.join(out)


def expand_toggles(html: str) -> str:
    """Replace encoded toggle bodies with their HTML."""
    return ENCODED_BODY_RE.sub(lambda m: f'<div>{base64.b64decode(m.group(1)).decode("utf-8")}</div>', html)


# --- callouts ---

def _emoji_callout(m: re.Match) -> str:
    emoji, text = m.group(1), m.group(2).strip()
    if len(text) < MIN_CALLOUT_LENGTH:
        return m.group(0)
    return (f'<div class="callout" style="align-items: flex-start;">'
            f'<span class="callout-emoji">{emoji}</span><span>{text}</span></div>')


def process_emoji_callouts(html: str) -> str:
    """Turn `<p>💡: text</p>` paragraphs with enough text into callout widget markup."""
    return EMOJI_CALLOUT_RE.sub(_emoji_callout, html)


def import_markdown(text: str) -> ImportedMarkdown:
    """Convert a markdown document into editor blocks.

    The frontmatter `title` wins over the first H1; the H1 used as title is
    not repeated in the blocks. Remaining h1/h2 headings get HEADER_COLORS
    backgrounds.
    """
    frontmatter, body = strip_frontmatter(text)
    body = normalize_markdown(body)
    h1 = extract_title(body)
    title = frontmatter.get("title") or h1

    html = _make_parser().render(process_toggle_lists(body))
    baseline = parse_html(process_emoji_callouts(expand_toggles(html)))
    if h1 is not None:
        for i, block in enumerate(baseline):
            if block.type == BlockType.heading.value and block.props.get("level") == 1:
                baseline = baseline[:i] + baseline[i + 1:]
                break
    return ImportedMarkdown(title=title, frontmatter=frontmatter, blocks=reclassify(baseline, HEADER_COLORS))
