"""An in-memory rich-text document tree and editor."""

from richtext.richtext_editor import RichTextEditor
from richtext.richtext_exceptions import RichTextError, RichTextPathError
from richtext.richtext_node import (
    RichTextBlockNode,
    RichTextDocumentNode,
    RichTextLinkNode,
    RichTextNode,
    RichTextTextNode,
    RichTextVisitor,
)
from richtext.richtext_printer import RichTextPrinter


__all__ = [
    "RichTextBlockNode",
    "RichTextDocumentNode",
    "RichTextEditor",
    "RichTextError",
    "RichTextLinkNode",
    "RichTextNode",
    "RichTextPathError",
    "RichTextPrinter",
    "RichTextTextNode",
    "RichTextVisitor",
]
