"""Rewrite a baseline block tree into the editor's block schema.

The structural parser only knows generic HTML. Legacy widgets (terminals,
callouts, alerts, file trees, diffs, videos) arrive as paragraphs whose text
is the widget's raw markup, or as code blocks with a shell language. Each
position of the block list is run through an ordered list of rules and the
first rule that returns a Step decides what is emitted there.

Inputs are never mutated: changed nodes are rebuilt with `model_copy`.
"""

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from pagemigrate.core.colors import map_color
from pagemigrate.core.extract.embeds import VIDEO_MARKER
from pagemigrate.core.models import (
    BlockNode, BlockType, callout, code_block, divider, is_empty_paragraph, paragraph, terminal, video,
)
from pagemigrate.core.utils.entities import decode_html_entities


SPURIOUS_HEADER_RE = re.compile(r'^(?:[a-z]+(?:\s+\d+)?|\d+)$', re.IGNORECASE)
CODE_TYPES = {BlockType.codeBlock.value, BlockType.terminal.value}
SHELL_TITLES = {'powershell': 'powershell', 'bash': 'Terminal'}

CODE_RE = re.compile(r'<code[^>]*>([\s\S]*?)</code>')
PRE_RE = re.compile(r'<pre>([\s\S]*?)</pre>')
TERMINAL_TITLE_RE = re.compile(r'class="terminal-title">([^<]*)<')
CODE_LANG_RE = re.compile(r'<span class="code-lang">(terminal|powershell)</span>', re.IGNORECASE)
SHELL_KEYWORD_RE = re.compile(r'Terminal|powershell', re.IGNORECASE)
TRAILING_TEXT_RE = re.compile(r'>([^<]+)<[^>]*$')
LANGUAGE_CLASS_RE = re.compile(r'class="(?:[^"]*\s)?language-(\w+)')
CALLOUT_EMOJI_RE = re.compile(r'class="callout-emoji">([^<]*)<')
CALLOUT_TEXT_RE = re.compile(r'callout-emoji">[^<]*</span>\s*<span>([\s\S]*?)</span>')
ALERT_TYPE_RE = re.compile(r'data-type="(\w+)"')
FIRST_SPAN_RE = re.compile(r'<span>([\s\S]*?)</span>')
DATA_TITLE_RE = re.compile(r'data-title="([^"]*)"')
DATA_CONTENT_RE = re.compile(r'data-content="([^"]*)"')
WS_RE = re.compile(r'\s+')

DEFAULT_EMOJI = '💡'
ALERT_EMOJI: dict[str, str] = {
    'info':    '💡',
    'warning': '⚠️',
    'error':   '🚨',
    'success': '✅',
    'note':    '📌',
}


@dataclass(frozen=True)
class Step:
    """Blocks to emit at the current position and how many input blocks they consume."""
    blocks: list[BlockNode] = field(default_factory=list)
    advance: int = 1


# --- helpers ---

def _group(pattern: re.Pattern, text: str, default: str = '') -> str:
    """First capture group of pattern in text, or default when absent or empty."""
    m = pattern.search(text)
    return (m.group(1) if m else '') or default


def _is_spurious_header(block: BlockNode) -> bool:
    return (block.type == BlockType.paragraph.value
            and SPURIOUS_HEADER_RE.match(block.text().strip()) is not None)


def _with_children(block: BlockNode, heading_colors: dict[int, str]) -> BlockNode:
    if not block.children:
        return block
    return block.model_copy(update={'children': reclassify(block.children, heading_colors)})


# --- block rules, in priority order ---

def _elide_spurious_header(blocks: list[BlockNode], i: int, heading_colors, emitted) -> Optional[Step]:
    """Drop 'JavaScript 12'-style header leftovers sitting in front of a code block."""
    block = blocks[i]
    if i + 1 >= len(blocks) or not _is_spurious_header(block):
        return None
    nxt = blocks[i + 1]
    if nxt.type in CODE_TYPES:
        return Step()
    if i + 2 < len(blocks) and _is_spurious_header(nxt) and blocks[i + 2].type in CODE_TYPES:
        return Step()
    return None


def _normalize_heading(blocks: list[BlockNode], i: int, heading_colors, emitted) -> Optional[Step]:
    block = blocks[i]
    if block.type != BlockType.heading.value:
        return None

    props = dict(block.props)
    level = props.get('level') or 1
    if heading_colors.get(level):
        props['backgroundColor'] = map_color(heading_colors[level]).value
    heading = block.model_copy(update={
        'props': props,
        'children': reclassify(block.children, heading_colors) if block.children else block.children,
    })

    # spacer is skipped when one is already there so re-running stays stable
    if emitted and is_empty_paragraph(emitted[-1]):
        return Step([heading])
    return Step([paragraph(), heading])


def _shell_code_to_terminal(blocks: list[BlockNode], i: int, heading_colors, emitted) -> Optional[Step]:
    block = blocks[i]
    if block.type != BlockType.codeBlock.value:
        return None
    language = str(block.props.get('language') or '').lower()
    if language not in SHELL_TITLES:
        return None
    return Step([terminal(SHELL_TITLES[language], block.text())])


def _merge_terminal_label(blocks: list[BlockNode], i: int, heading_colors, emitted) -> Optional[Step]:
    """A 'Terminal' / 'powershell' caption paragraph followed by a code block becomes one terminal."""
    block = blocks[i]
    if block.type != BlockType.paragraph.value or i + 1 >= len(blocks):
        return None
    label = block.text().strip()
    lowered = label.lower()
    if ('terminal' not in lowered and 'powershell' not in lowered) or blocks[i + 1].type != BlockType.codeBlock.value:
        return None
    return Step([terminal(label, blocks[i + 1].text())], advance=2)


def _pass_through(blocks: list[BlockNode], i: int, heading_colors, emitted) -> Optional[Step]:
    block = blocks[i]
    if block.type == BlockType.paragraph.value:
        return None
    return Step([_with_children(block, heading_colors)])


# --- paragraph matchers: whole block ---

def _match_video(block: BlockNode) -> Optional[BlockNode]:
    text = block.text()
    if not text.startswith(VIDEO_MARKER):
        return None
    url = text[len(VIDEO_MARKER):].strip()
    return video(url) if url else None


def _match_divider(block: BlockNode) -> Optional[BlockNode]:
    class_name = str(block.props.get('className') or '')
    if block.text().strip() == '' and 'divider' in class_name:
        return divider()
    return None


# --- paragraph matchers: raw widget markup in a text span ---

def _match_terminal_block(html: str) -> Optional[BlockNode]:
    if 'class="terminal-block"' not in html:
        return None
    title = _group(TERMINAL_TITLE_RE, html)
    code = _group(CODE_RE, html)
    return terminal(title, decode_html_entities(code))


def _match_code_block(html: str) -> Optional[BlockNode]:
    """Code widget; a shell language label or a preceding 'Terminal' caption makes it a terminal."""
    marker = 'class="code-block"'
    if marker not in html:
        return None
    code = decode_html_entities(_group(CODE_RE, html))

    lang = CODE_LANG_RE.search(html)
    if lang:
        return terminal(lang.group(1), code)

    keyword = SHELL_KEYWORD_RE.search(html)
    if keyword and keyword.start() < html.index(marker):
        title = _group(TRAILING_TEXT_RE, html[:keyword.start()]).strip() or keyword.group(0)
        return terminal(title, code)

    return code_block(code, _group(LANGUAGE_CLASS_RE, html, 'javascript'))


def _match_callout(html: str) -> Optional[BlockNode]:
    if 'class="callout"' not in html:
        return None
    emoji = _group(CALLOUT_EMOJI_RE, html, DEFAULT_EMOJI)
    return callout(emoji, _group(CALLOUT_TEXT_RE, html))


def _match_alert(html: str) -> Optional[BlockNode]:
    # class="alert", class="alert-info", class="alert alert-warning", ...
    if 'class="alert' not in html:
        return None
    alert_type = _group(ALERT_TYPE_RE, html, 'info')
    return callout(ALERT_EMOJI.get(alert_type, DEFAULT_EMOJI), _group(FIRST_SPAN_RE, html))


def _match_file_tree(html: str) -> Optional[BlockNode]:
    if 'class="file-tree"' not in html:
        return None
    title = _group(DATA_TITLE_RE, html, 'File Structure')
    return terminal(title, decode_html_entities(_group(PRE_RE, html)))


def _decode_base64(data: str) -> Optional[str]:
    try:
        return base64.b64decode(WS_RE.sub('', data), validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None


def _match_diff_block(html: str) -> Optional[BlockNode]:
    if 'class="diff-block"' not in html:
        return None
    encoded = DATA_CONTENT_RE.search(html)
    code = _decode_base64(encoded.group(1)) if encoded else None
    if code is None:
        code = _group(PRE_RE, html)
    return code_block(decode_html_entities(code), 'diff')


BlockMatcher = Callable[[BlockNode], Optional[BlockNode]]
SpanMatcher = Callable[[str], Optional[BlockNode]]

BLOCK_MATCHERS: list[BlockMatcher] = [_match_video, _match_divider]
SPAN_MATCHERS: list[SpanMatcher] = [
    _match_terminal_block,
    _match_code_block,
    _match_callout,
    _match_alert,
    _match_file_tree,
    _match_diff_block,
]


def match_paragraph(block: BlockNode) -> Optional[BlockNode]:
    """Replacement block for a legacy widget paragraph, or None if nothing matches.

    Block-level markers are checked first, then each text span in order; the
    first span that any matcher accepts decides the result.
    """
    for matcher in BLOCK_MATCHERS:
        found = matcher(block)
        if found is not None:
            return found

    if not isinstance(block.content, list):
        return None
    for span in block.content:
        if span.type != 'text' or not span.text:
            continue
        for matcher in SPAN_MATCHERS:
            found = matcher(span.text)
            if found is not None:
                return found
    return None


def _rewrite_paragraph(blocks: list[BlockNode], i: int, heading_colors, emitted) -> Optional[Step]:
    block = blocks[i]
    found = match_paragraph(block)
    if found is not None:
        return Step([found])
    return Step([_with_children(block, heading_colors)])


Rule = Callable[[list[BlockNode], int, dict[int, str], list[BlockNode]], Optional[Step]]

RULES: list[Rule] = [
    _elide_spurious_header,
    _normalize_heading,
    _shell_code_to_terminal,
    _merge_terminal_label,
    _pass_through,
    _rewrite_paragraph,
]


def reclassify(blocks: list[BlockNode], heading_colors: Optional[dict[int, str]] = None) -> list[BlockNode]:
    """Map a baseline block list onto the editor schema, recursing into children.

    heading_colors maps heading level to the CSS background color scanned
    from the legacy document's <style> block.
    """
    heading_colors = heading_colors or {}
    result: list[BlockNode] = []
    i = 0
    while i < len(blocks):
        step = None
        for rule in RULES:
            step = rule(blocks, i, heading_colors, result)
            if step is not None:
                break
        result.extend(step.blocks)
        i += step.advance
    return result
