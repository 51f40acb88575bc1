"""Shared fixtures and utilities for auto-markdown tests."""

import pytest
from typing import Any, List, Tuple

from automarkdown import AutoMarkdown, DeleteUnit, Range
from richtext import (
    RichTextBlockNode, RichTextDocumentNode, RichTextEditor, RichTextLinkNode, RichTextNode, RichTextTextNode
)


class RecordingEditor(RichTextEditor):
    """In-memory editor that records the host calls the engine makes."""

    def __init__(self, document: RichTextDocumentNode | None = None) -> None:
        super().__init__(document)
        self.calls: List[Tuple[str, Any]] = []

    def delete(self, at: Range | None = None) -> None:
        self.calls.append(("delete", at))
        super().delete(at)

    def set_block_type(self, block_type: str, at: Tuple[int, ...]) -> None:
        self.calls.append(("set_block_type", block_type))
        super().set_block_type(block_type, at)

    def wrap_block(self, container_type: str, at: Tuple[int, ...]) -> None:
        self.calls.append(("wrap_block", container_type))
        super().wrap_block(container_type, at)

    def set_mark(self, mark: str, at: Range) -> None:
        self.calls.append(("set_mark", mark))
        super().set_mark(mark, at)

    def remove_mark(self, mark: str) -> None:
        self.calls.append(("remove_mark", mark))
        super().remove_mark(mark)

    def wrap_link(self, url: str, at: Range) -> None:
        self.calls.append(("wrap_link", url))
        super().wrap_link(url, at)

    def insert_text(self, text: str) -> None:
        self.calls.append(("insert_text", text))
        super().insert_text(text)

    def delete_backward(self, unit: DeleteUnit = DeleteUnit.CHARACTER) -> None:
        self.calls.append(("delete_backward", unit))
        super().delete_backward(unit)


@pytest.fixture
def engine():
    """Create an engine with the default shortcut tables."""
    return AutoMarkdown()


@pytest.fixture
def editor():
    """Create an editor holding one empty paragraph."""
    return RichTextEditor()


@pytest.fixture
def recording_editor():
    """Create an editor that records host calls."""
    return RecordingEditor()


class AutoMarkdownTestHelpers:
    """Helper utilities for auto-markdown testing."""

    @staticmethod
    def outline(node: RichTextNode) -> Any:
        """
        Summarize a document tree as nested tuples and lists.

        Blocks become (type, children), links become ("link", url, children)
        and text runs become ("text", content, sorted marks).
        """
        if isinstance(node, RichTextTextNode):
            return ("text", node.content, tuple(sorted(node.marks)))

        children = [AutoMarkdownTestHelpers.outline(child) for child in node.children]
        if isinstance(node, RichTextLinkNode):
            return ("link", node.url, children)

        if isinstance(node, RichTextBlockNode):
            return (node.block_type, children)

        return children

    @staticmethod
    def create_document(*paragraphs: str) -> RichTextDocumentNode:
        """Create a document with one plain paragraph per string."""
        document = RichTextDocumentNode()
        for content in paragraphs:
            paragraph = RichTextBlockNode("paragraph")
            paragraph.add_child(RichTextTextNode(content))
            document.add_child(paragraph)

        return document


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return AutoMarkdownTestHelpers
