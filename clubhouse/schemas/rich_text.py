# clubhouse/schemas/rich_text.py
"""
Rich-text document model used by posts and comments.

Content is the editor's JSON tree: `{type, attrs?, content?, text?, marks?}`
starting from a single `doc` node. Only the node and mark types the editor
knows are accepted.
"""

from typing import Annotated, Any, Dict, List

from pydantic import AfterValidator

NODE_TYPES = {
    "doc",
    "paragraph",
    "text",
    "heading",
    "bulletList",
    "orderedList",
    "listItem",
    "blockquote",
    "codeBlock",
    "hardBreak",
    "horizontalRule",
    # club specific block atoms
    "headingCard",
    "buttonBlock",
    "imageUrl",
}
MARK_TYPES = {"bold", "italic", "strike", "code", "link"}

# Nodes whose children are inline content
TEXTBLOCK_TYPES = {"paragraph", "heading", "codeBlock"}

MAX_DEPTH = 32

EMPTY_DOC: Dict[str, Any] = {"type": "doc", "content": [{"type": "paragraph"}]}


def paragraph_doc(text: str) -> Dict[str, Any]:
    """Wrap plain text into a one-paragraph document."""
    text = text.strip()
    if not text:
        return {"type": "doc", "content": [{"type": "paragraph"}]}
    return {
        "type": "doc",
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": text}]}],
    }


def _check_marks(marks: Any) -> None:
    if not isinstance(marks, list):
        raise ValueError("Rich text marks must be a list")
    for mark in marks:
        if not isinstance(mark, dict) or mark.get("type") not in MARK_TYPES:
            raise ValueError(f"Unknown rich text mark: {mark!r}")
        if mark["type"] == "link":
            href = (mark.get("attrs") or {}).get("href")
            if not isinstance(href, str):
                raise ValueError("Link marks need an href")


def _check_node(node: Any, depth: int) -> None:
    if depth > MAX_DEPTH:
        raise ValueError("Rich text content is nested too deeply")
    if not isinstance(node, dict):
        raise ValueError("Rich text nodes must be objects")

    node_type = node.get("type")
    if node_type not in NODE_TYPES:
        raise ValueError(f"Unknown rich text node type: {node_type!r}")
    if node_type == "doc" and depth > 0:
        raise ValueError("'doc' is only allowed at the root")

    if node_type == "text":
        if not isinstance(node.get("text"), str):
            raise ValueError("Text nodes need a text string")
    elif "text" in node:
        raise ValueError(f"'{node_type}' nodes cannot carry text")

    attrs = node.get("attrs")
    if attrs is not None and not isinstance(attrs, dict):
        raise ValueError("Rich text attrs must be an object")
    if "marks" in node:
        _check_marks(node["marks"])

    content = node.get("content")
    if content is None:
        return
    if not isinstance(content, list):
        raise ValueError("Rich text content must be a list")
    for child in content:
        _check_node(child, depth + 1)


def validate_rich_text(doc: Any) -> Dict[str, Any]:
    if not isinstance(doc, dict) or doc.get("type") != "doc":
        raise ValueError("Rich text content must be a 'doc' node")
    _check_node(doc, 0)
    return doc


RichTextDoc = Annotated[Dict[str, Any], AfterValidator(validate_rich_text)]


def _inline_text(node: Dict[str, Any]) -> str:
    if node.get("type") == "text":
        return node.get("text", "")
    if node.get("type") == "hardBreak":
        return "\n"
    return "".join(_inline_text(child) for child in node.get("content") or [])


def _block_texts(node: Dict[str, Any]) -> List[str]:
    node_type = node.get("type")
    if node_type in TEXTBLOCK_TYPES:
        return [_inline_text(node)]
    if node_type == "headingCard":
        return [str((node.get("attrs") or {}).get("title", ""))]
    blocks: List[str] = []
    for child in node.get("content") or []:
        blocks.extend(_block_texts(child))
    return blocks


def plain_text(doc: Dict[str, Any]) -> str:
    """Text of a document, one blank line between blocks."""
    blocks = [b for b in _block_texts(doc) if b.strip()]
    return "\n\n".join(blocks).strip()
