"""Shared fixtures for rich-text tests."""

import pytest

from richtext import RichTextBlockNode, RichTextDocumentNode, RichTextEditor, RichTextLinkNode, RichTextTextNode


@pytest.fixture
def sample_document():
    """
    Create a document with a paragraph holding plain, bold and linked text,
    followed by a bulleted list with one item.
    """
    document = RichTextDocumentNode()

    paragraph = document.add_child(RichTextBlockNode("paragraph"))
    paragraph.add_child(RichTextTextNode("plain "))
    paragraph.add_child(RichTextTextNode("bold", {"bold"}))
    link = paragraph.add_child(RichTextLinkNode("http://example.com"))
    link.add_child(RichTextTextNode("link"))

    bulleted = document.add_child(RichTextBlockNode("bulleted-list"))
    item = bulleted.add_child(RichTextBlockNode("list-item"))
    item.add_child(RichTextTextNode("item"))

    return document


@pytest.fixture
def text_editor():
    """Create an editor over a two-paragraph document, caret at the end."""
    document = RichTextDocumentNode()
    for content in ("hello world", "second line"):
        paragraph = document.add_child(RichTextBlockNode("paragraph"))
        paragraph.add_child(RichTextTextNode(content))

    return RichTextEditor(document)
