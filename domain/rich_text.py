"""Rich text documents as a tree of tagged nodes, and their conversion to html.

The content service stores long form fields (a recipe method, say) as a json
document of nested nodes. `parse_document` turns that json into `Node`s keyed by
`NodeType` so `to_html` can match on every kind of node.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from markupsafe import Markup, escape


class RichTextError(ValueError):
    pass


class NodeType(Enum):
    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading-1"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    HEADING_4 = "heading-4"
    HEADING_5 = "heading-5"
    HEADING_6 = "heading-6"
    ORDERED_LIST = "ordered-list"
    UNORDERED_LIST = "unordered-list"
    LIST_ITEM = "list-item"
    BLOCKQUOTE = "blockquote"
    HR = "hr"
    TABLE = "table"
    TABLE_ROW = "table-row"
    TABLE_CELL = "table-cell"
    TABLE_HEADER_CELL = "table-header-cell"
    HYPERLINK = "hyperlink"
    ENTRY_HYPERLINK = "entry-hyperlink"
    ASSET_HYPERLINK = "asset-hyperlink"
    EMBEDDED_ENTRY_BLOCK = "embedded-entry-block"
    EMBEDDED_ENTRY_INLINE = "embedded-entry-inline"
    EMBEDDED_ASSET_BLOCK = "embedded-asset-block"
    TEXT = "text"


class Mark(Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    CODE = "code"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"
    STRIKETHROUGH = "strikethrough"


MARK_TAGS = {
    Mark.BOLD: "b",
    Mark.ITALIC: "i",
    Mark.UNDERLINE: "u",
    Mark.CODE: "code",
    Mark.SUPERSCRIPT: "sup",
    Mark.SUBSCRIPT: "sub",
    Mark.STRIKETHROUGH: "s",
}


HEADINGS = {
    NodeType.HEADING_1: "h1",
    NodeType.HEADING_2: "h2",
    NodeType.HEADING_3: "h3",
    NodeType.HEADING_4: "h4",
    NodeType.HEADING_5: "h5",
    NodeType.HEADING_6: "h6",
}


# Nodes that are plain containers: tag wraps the rendered children.
CONTAINERS = {
    NodeType.PARAGRAPH: "p",
    NodeType.ORDERED_LIST: "ol",
    NodeType.UNORDERED_LIST: "ul",
    NodeType.LIST_ITEM: "li",
    NodeType.BLOCKQUOTE: "blockquote",
    NodeType.TABLE_ROW: "tr",
    NodeType.TABLE_CELL: "td",
    NodeType.TABLE_HEADER_CELL: "th",
    **HEADINGS,
}


@dataclass(frozen=True)
class Node:
    node_type: NodeType
    content: tuple["Node", ...] = ()
    value: str = ""
    marks: tuple[Mark, ...] = ()
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """All the text below this node, without markup."""
        if self.node_type is NodeType.TEXT:
            return self.value
        return "".join(child.text for child in self.content)


def parse_document(raw: dict[str, Any]) -> Node:
    if not isinstance(raw, dict) or "nodeType" not in raw:
        raise RichTextError(f"Not a rich text node: {raw!r:.80}")

    try:
        node_type = NodeType(raw["nodeType"])
    except ValueError:
        raise RichTextError(f"Unknown node type: {raw['nodeType']}") from None

    if node_type is NodeType.TEXT:
        try:
            marks = tuple(Mark(m["type"]) for m in raw.get("marks", []))
        except ValueError as e:
            raise RichTextError(f"Unknown mark: {e}") from None
        return Node(
            node_type,
            value=raw.get("value", ""),
            marks=marks,
            data=raw.get("data") or {},
        )

    return Node(
        node_type,
        content=tuple(parse_document(c) for c in raw.get("content", [])),
        data=raw.get("data") or {},
    )


def _children(node: Node) -> Markup:
    return Markup("").join(to_html(child) for child in node.content)


def _text(node: Node) -> Markup:
    html = escape(node.value)
    for mark in node.marks:
        tag = MARK_TAGS[mark]
        html = Markup(f"<{tag}>{html}</{tag}>")
    return html


def _target_fields(node: Node) -> dict[str, Any]:
    target = node.data.get("target") or {}
    return target.get("fields") or {}


def _asset_url(fields: dict[str, Any]) -> str:
    url = (fields.get("file") or {}).get("url", "")
    return "https:" + url if url.startswith("//") else url


def _embedded_asset(node: Node) -> Markup:
    fields = _target_fields(node)
    file = fields.get("file") or {}
    url = _asset_url(fields)
    if not url:
        return Markup("")
    title = fields.get("title") or fields.get("description") or ""
    if file.get("contentType", "image/").startswith("image/"):
        image = (file.get("details") or {}).get("image") or {}
        size = ""
        if image.get("width") and image.get("height"):
            size = Markup(' width="{}" height="{}"').format(
                image.get("width"), image.get("height")
            )
        return Markup('<img src="{}" alt="{}"{}>').format(url, title, size)
    return Markup('<a href="{}">{}</a>').format(url, title or url)


def _embedded_entry(node: Node, tag: str) -> Markup:
    title = _target_fields(node).get("title")
    if not title:
        return Markup("")
    return Markup('<{0} class="embedded-entry">{1}</{0}>').format(
        Markup(tag), title
    )


def to_html(node: Node) -> Markup:
    """Render a rich text node, and everything below it, as html."""
    match node.node_type:
        case NodeType.DOCUMENT:
            return _children(node)
        case NodeType.TEXT:
            return _text(node)
        case NodeType.HR:
            return Markup("<hr/>")
        case NodeType.TABLE:
            return Markup("<table><tbody>{}</tbody></table>").format(_children(node))
        case NodeType.HYPERLINK:
            return Markup('<a href="{}">{}</a>').format(
                node.data.get("uri", ""), _children(node)
            )
        case NodeType.ENTRY_HYPERLINK:
            slug = _target_fields(node).get("slug")
            if not slug:
                return _children(node)
            return Markup('<a href="/recipes/{}">{}</a>').format(
                slug, _children(node)
            )
        case NodeType.ASSET_HYPERLINK:
            return Markup('<a href="{}">{}</a>').format(
                _asset_url(_target_fields(node)), _children(node)
            )
        case NodeType.EMBEDDED_ASSET_BLOCK:
            return _embedded_asset(node)
        case NodeType.EMBEDDED_ENTRY_BLOCK:
            return _embedded_entry(node, "div")
        case NodeType.EMBEDDED_ENTRY_INLINE:
            return _embedded_entry(node, "span")
        case (
            NodeType.PARAGRAPH
            | NodeType.HEADING_1
            | NodeType.HEADING_2
            | NodeType.HEADING_3
            | NodeType.HEADING_4
            | NodeType.HEADING_5
            | NodeType.HEADING_6
            | NodeType.ORDERED_LIST
            | NodeType.UNORDERED_LIST
            | NodeType.LIST_ITEM
            | NodeType.BLOCKQUOTE
            | NodeType.TABLE_ROW
            | NodeType.TABLE_CELL
            | NodeType.TABLE_HEADER_CELL
        ):
            tag = CONTAINERS[node.node_type]
            return Markup(f"<{tag}>{{}}</{tag}>").format(_children(node))
