"""Block-tree document models shared by the migration pipeline and the content store"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BlockType(str, Enum):
    """Block types understood by the block editor"""
    paragraph = "paragraph"
    heading = "heading"
    codeBlock = "codeBlock"
    terminal = "terminal"
    callout = "callout"
    divider = "divider"
    video = "video"
    # emitted by the structural parser, passed through untouched
    bulletListItem = "bulletListItem"
    numberedListItem = "numberedListItem"
    quote = "quote"
    table = "table"
    image = "image"


class ColorToken(str, Enum):
    """The closed set of background colors the editor can render"""
    default = "default"
    gray = "gray"
    brown = "brown"
    red = "red"
    orange = "orange"
    yellow = "yellow"
    green = "green"
    blue = "blue"
    purple = "purple"
    pink = "pink"


class InlineSpan(BaseModel):
    """A run of text inside a block's inline content.

    Only plain text spans are produced here; other inline kinds stored by the
    editor (links, mentions) are kept as-is through the extra fields.
    """
    model_config = ConfigDict(extra="allow")

    type: str = "text"
    text: str = ""
    styles: dict[str, Any] = Field(default_factory=dict)


class BlockNode(BaseModel):
    """A node in the block tree.

    `content` is None for props-only blocks (terminal, divider, video) and a
    list of spans for inline blocks. Transformations never mutate a node;
    they build a new one with `model_copy(update=...)`.
    """
    model_config = ConfigDict(extra="allow")

    type: str
    props: dict[str, Any] = Field(default_factory=dict)
    # tables store a {"type": "tableContent", ...} object instead of spans
    content: Optional[list[InlineSpan] | dict[str, Any]] = None
    children: list["BlockNode"] = Field(default_factory=list)

    def text(self) -> str:
        """Concatenated text of all inline text spans ('' when there is no span list)."""
        if not isinstance(self.content, list):
            return ""
        return "".join(span.text for span in self.content if span.type == "text")

    def to_json(self) -> dict[str, Any]:
        """Editor wire shape: `content` omitted when None, `children` when empty."""
        data: dict[str, Any] = {**(self.model_extra or {}), "type": self.type, "props": dict(self.props)}
        if isinstance(self.content, list):
            data["content"] = [span.model_dump() for span in self.content]
        elif self.content is not None:
            data["content"] = self.content
        if self.children:
            data["children"] = [child.to_json() for child in self.children]
        return data


def _span(text: str) -> InlineSpan:
    return InlineSpan(text=text)


def paragraph(text: str = "", **props) -> BlockNode:
    return BlockNode(type=BlockType.paragraph.value, props=props, content=[_span(text)] if text else [])


def heading(text: str, level: int = 1, **props) -> BlockNode:
    return BlockNode(type=BlockType.heading.value, props={"level": level, **props}, content=[_span(text)])


def code_block(code: str, language: str = "javascript") -> BlockNode:
    # code is opaque data; it rides in a single unstyled span by editor convention
    return BlockNode(type=BlockType.codeBlock.value, props={"language": language}, content=[_span(code)])


def terminal(title: str, code: str) -> BlockNode:
    return BlockNode(type=BlockType.terminal.value, props={"title": title, "code": code})


def callout(emoji: str, text: str = "") -> BlockNode:
    return BlockNode(type=BlockType.callout.value, props={"emoji": emoji}, content=[_span(text)] if text else [])


def divider() -> BlockNode:
    return BlockNode(type=BlockType.divider.value)


def video(url: str, caption: str = "") -> BlockNode:
    return BlockNode(type=BlockType.video.value, props={"url": url, "caption": caption})


def is_empty_paragraph(block: BlockNode) -> bool:
    return block.type == BlockType.paragraph.value and not block.children and block.text().strip() == ""


class CoverImage(BaseModel):
    """Page header image and its vertical focus position (percent)."""
    url: str
    position: Union[int, float] = 50


class DocumentWrapper(BaseModel):
    """Canonical content.json shape: {"coverImage"?: {...}, "blocks": [...]}"""
    model_config = ConfigDict(populate_by_name=True)

    cover_image: Optional[CoverImage] = Field(default=None, alias="coverImage")
    blocks: list[BlockNode] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"blocks": [b.to_json() for b in self.blocks]}
        if self.cover_image is not None:
            data["coverImage"] = self.cover_image.model_dump()
        return data


class Page(BaseModel):
    """A page whose content lives under `content_path` in the content store."""
    slug: str
    title: str = ""
    content_path: str


class PageContent(BaseModel):
    """Result of reading a page: canonical blocks, raw legacy HTML, or nothing."""
    format: Literal["json", "html", "none"]
    content: Optional[list[BlockNode] | str] = None
    cover_image: Optional[CoverImage] = None
