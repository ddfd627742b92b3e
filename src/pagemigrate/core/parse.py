"""Generic HTML -> baseline block tree parsing with BeautifulSoup"""

import re
from typing import Any

from bs4 import BeautifulSoup, NavigableString, Tag

from pagemigrate.core.models import BlockNode, BlockType, InlineSpan


WS_RE = re.compile(r'\s+')
LANG_CLASS_RE = re.compile(r'^(?:language|lang)-(\S+)$')

SKIP_TAGS = {'head', 'title', 'meta', 'link', 'script', 'style', 'noscript', 'template', 'br'}
# classless wrappers are transparent; their children become top-level blocks
CONTAINER_TAGS = {'html', 'body', 'main', 'article', 'section', 'div', 'header', 'footer', 'nav', 'aside', 'figure'}
INLINE_TAGS = {
    'a', 'abbr', 'b', 'strong', 'i', 'em', 'u', 'ins', 's', 'del', 'strike', 'code', 'kbd',
    'mark', 'small', 'span', 'sub', 'sup', 'label', 'q', 'cite', 'time', 'var', 'samp',
}
STYLE_TAGS: dict[str, str] = {
    'b': 'bold', 'strong': 'bold',
    'i': 'italic', 'em': 'italic',
    'u': 'underline', 'ins': 'underline',
    's': 'strike', 'del': 'strike', 'strike': 'strike',
    'code': 'code', 'kbd': 'code',
}
MEDIA_TAGS = ['img', 'iframe', 'video', 'audio', 'svg', 'canvas', 'object', 'embed']
# editor widgets the reclassifier rebuilds from their markup; alert-* classes are matched by prefix
WIDGET_CLASSES = {'terminal-block', 'code-block', 'callout', 'file-tree', 'diff-block', 'video-embed', 'divider'}


def _classes(tag: Tag) -> list[str]:
    classes = tag.get('class') or []
    return classes if isinstance(classes, list) else str(classes).split()


def _class_name(tag: Tag) -> str:
    return ' '.join(_classes(tag))


def _is_widget(tag: Tag) -> bool:
    return any(cls in WIDGET_CLASSES or cls.startswith('alert') for cls in _classes(tag))


def _has_block_children(tag: Tag) -> bool:
    return any(
        isinstance(child, Tag) and child.name not in INLINE_TAGS and child.name not in SKIP_TAGS
        for child in tag.children
    )


def _props(tag: Tag, **props) -> dict[str, Any]:
    class_name = _class_name(tag)
    if class_name:
        props['className'] = class_name
    return props


def _collect_spans(node, styles: dict[str, bool], out: list[InlineSpan]) -> None:
    for child in node.children:
        if isinstance(child, NavigableString):
            if type(child) is NavigableString:
                out.append(InlineSpan(text=str(child), styles=dict(styles)))
        elif isinstance(child, Tag):
            if child.name == 'br':
                out.append(InlineSpan(text='\n', styles=dict(styles)))
            elif child.name in ('ul', 'ol'):
                continue
            else:
                style = STYLE_TAGS.get(child.name)
                _collect_spans(child, {**styles, style: True} if style else styles, out)


def inline_spans(tag: Tag) -> list[InlineSpan]:
    """Flatten a tag's text into styled spans with collapsed whitespace; adjacent equal styles merge."""
    raw: list[InlineSpan] = []
    _collect_spans(tag, {}, raw)

    spans: list[InlineSpan] = []
    for span in raw:
        text = span.text if span.text == '\n' else WS_RE.sub(' ', span.text)
        if spans and spans[-1].styles == span.styles:
            spans[-1] = InlineSpan(text=spans[-1].text + text, styles=span.styles)
        else:
            spans.append(InlineSpan(text=text, styles=span.styles))

    if spans:
        spans[0] = InlineSpan(text=spans[0].text.lstrip(' '), styles=spans[0].styles)
        spans[-1] = InlineSpan(text=spans[-1].text.rstrip(' '), styles=spans[-1].styles)
    return [s for s in spans if s.text]


def _code_language(pre: Tag) -> str:
    code = pre.find('code')
    for tag in (pre, code):
        if not isinstance(tag, Tag):
            continue
        for cls in tag.get('class') or []:
            m = LANG_CLASS_RE.match(cls)
            if m:
                return m.group(1)
    return ''


def _list_items(tag: Tag) -> list[BlockNode]:
    item_type = BlockType.numberedListItem if tag.name == 'ol' else BlockType.bulletListItem
    items = []
    for li in tag.find_all('li', recursive=False):
        children = []
        for nested in li.find_all(['ul', 'ol'], recursive=False):
            children.extend(_list_items(nested))
        items.append(BlockNode(type=item_type.value, props=_props(li), content=inline_spans(li), children=children))
    return items


def _table(tag: Tag) -> BlockNode:
    rows = []
    for tr in tag.find_all('tr'):
        cells = [[span.model_dump() for span in inline_spans(cell)] for cell in tr.find_all(['td', 'th'])]
        rows.append({'cells': cells})
    return BlockNode(type=BlockType.table.value, props=_props(tag), content={'type': 'tableContent', 'rows': rows})


def _is_empty(tag: Tag) -> bool:
    return not tag.get_text(strip=True) and tag.find(MEDIA_TAGS) is None


def _parse_element(tag: Tag) -> list[BlockNode]:
    name = tag.name
    if name in SKIP_TAGS:
        return []
    if name in CONTAINER_TAGS and not _class_name(tag):
        return parse_nodes(tag)
    if name == 'p':
        return [BlockNode(type=BlockType.paragraph.value, props=_props(tag), content=inline_spans(tag))]
    if re.fullmatch(r'h[1-6]', name):
        level = min(int(name[1]), 3)
        return [BlockNode(type=BlockType.heading.value, props=_props(tag, level=level), content=inline_spans(tag))]
    if name == 'pre':
        code = tag.get_text()
        return [BlockNode(
            type=BlockType.codeBlock.value,
            props={'language': _code_language(tag)},
            content=[InlineSpan(text=code)] if code else [],
        )]
    if name in ('ul', 'ol'):
        return _list_items(tag)
    if name == 'blockquote':
        return [BlockNode(type=BlockType.quote.value, props=_props(tag), content=inline_spans(tag))]
    if name == 'table':
        return [_table(tag)]
    if name == 'img':
        return [BlockNode(type=BlockType.image.value, props={'url': tag.get('src', ''), 'caption': tag.get('alt', '')})]
    if name == 'hr':
        return [BlockNode(type=BlockType.paragraph.value, props={'className': 'divider'}, content=[])]
    if _is_widget(tag):
        # keep the markup as text so the reclassifier can rebuild the widget
        if _is_empty(tag):
            return [BlockNode(type=BlockType.paragraph.value, props=_props(tag), content=[])]
        return [BlockNode(type=BlockType.paragraph.value, props=_props(tag), content=[InlineSpan(text=str(tag))])]

    # Classed wrappers and unknown tags: descend into block content, otherwise flatten to one paragraph
    if _has_block_children(tag):
        return parse_nodes(tag)
    spans = inline_spans(tag)
    return [BlockNode(type=BlockType.paragraph.value, props=_props(tag), content=spans)] if spans else []


def parse_nodes(parent) -> list[BlockNode]:
    """Convert the direct children of a parsed node into baseline blocks."""
    blocks: list[BlockNode] = []
    for node in parent.children:
        if isinstance(node, Tag):
            blocks.extend(_parse_element(node))
        elif type(node) is NavigableString:
            text = WS_RE.sub(' ', str(node)).strip()
            if text:
                blocks.append(BlockNode(type=BlockType.paragraph.value, content=[InlineSpan(text=text)]))
    return blocks


def parse_html(body_html: str) -> list[BlockNode]:
    """Parse body HTML into a baseline block tree of generic block types. Never raises on bad markup."""
    if not body_html or not body_html.strip():
        return []
    soup = BeautifulSoup(body_html, 'html.parser')
    return parse_nodes(soup)
