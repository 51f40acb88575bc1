"""Tests for the in-memory rich-text editor."""

import pytest

from automarkdown import DeleteUnit, Point, Range
from richtext import (
    RichTextBlockNode, RichTextDocumentNode, RichTextEditor, RichTextLinkNode, RichTextPathError, RichTextTextNode
)


def contents(block):
    """Get (content, marks) pairs for the runs of a block."""
    return [(node.content, node.marks) for node in block.text_nodes()]


class TestEditorState:
    """Test selection and document queries."""

    def test_default_document(self):
        """Test that a new editor holds one empty paragraph with the caret in it."""
        editor = RichTextEditor()

        assert len(editor.document().children) == 1
        assert editor.document().children[0].block_type == "paragraph"
        assert editor.selection() == Range.collapsed(Point((0, 0), 0))
        assert editor.default_block_type() == "paragraph"

    def test_caret_starts_at_end(self, text_editor):
        """Test that an existing document is opened with the caret at its end."""
        assert text_editor.selection() == Range.collapsed(Point((1, 0), 11))

    def test_empty_document_has_no_selection(self):
        """Test that a document without text has no caret and edits do nothing."""
        editor = RichTextEditor(RichTextDocumentNode())

        editor.insert_text("x")
        editor.insert_break()
        editor.delete_backward()

        assert editor.selection() is None
        assert editor.document().children == []

    def test_start_and_end(self, text_editor):
        """Test the first and last points inside blocks."""
        assert text_editor.start((1,)) == Point((1, 0), 0)
        assert text_editor.end((0,)) == Point((0, 0), 11)
        assert text_editor.start((0, 0)) == Point((0, 0), 0)

    def test_start_of_block_without_text(self):
        """Test that a block with no runs has no start point."""
        document = RichTextDocumentNode()
        document.add_child(RichTextBlockNode("bulleted-list"))
        editor = RichTextEditor(document)

        with pytest.raises(RichTextPathError):
            editor.start((0,))

    def test_block_above(self, sample_document):
        """Test finding the nearest enclosing block of a point."""
        editor = RichTextEditor(sample_document)

        block, path = editor.block_above(Point((0, 2, 0), 1))
        assert path == (0,)
        assert editor.block_type(block) == "paragraph"

        block, path = editor.block_above(Point((1, 0, 0), 0))
        assert path == (1, 0)
        assert editor.block_type(block) == "list-item"

    def test_string_across_blocks(self, text_editor):
        """Test reading text between points in different blocks."""
        at = Range(Point((1, 0), 6), Point((0, 0), 6))

        assert text_editor.string(at) == "worldsecond"

    def test_select_validates_points(self, text_editor):
        """Test that points must address text within range."""
        with pytest.raises(RichTextPathError):
            text_editor.select(Range.collapsed(Point((0, 0), 12)))

        with pytest.raises(RichTextPathError):
            text_editor.select(Range.collapsed(Point((0,), 0)))

        with pytest.raises(RichTextPathError):
            text_editor.select(Range.collapsed(Point((5, 0), 0)))


class TestEditing:
    """Test text and structure editing."""

    def test_insert_replaces_selection(self, text_editor):
        """Test that inserting over a selection deletes it first."""
        text_editor.select(Range(Point((0, 0), 0), Point((0, 0), 5)))

        text_editor.insert_text("goodbye")

        assert text_editor.document().children[0].text() == "goodbye world"
        assert text_editor.selection() == Range.collapsed(Point((0, 0), 7))

    def test_delete_across_blocks_merges(self, text_editor):
        """Test that deleting across a block boundary joins the blocks."""
        text_editor.delete(Range(Point((0, 0), 5), Point((1, 0), 6)))

        assert len(text_editor.document().children) == 1
        assert text_editor.document().text() == "hello line"
        assert text_editor.selection() == Range.collapsed(Point((0, 0), 10))

    def test_delete_collapsed_range_does_nothing(self, text_editor):
        """Test that an empty range deletes nothing."""
        text_editor.delete(Range.collapsed(Point((0, 0), 3)))

        assert text_editor.document().text() == "hello worldsecond line"

    def test_insert_break_splits_block(self, text_editor):
        """Test splitting a paragraph at the caret."""
        text_editor.select(Range.collapsed(Point((0, 0), 5)))

        text_editor.insert_break()

        assert [block.text() for block in text_editor.document().children] == ["hello", " world", "second line"]
        assert text_editor.selection() == Range.collapsed(Point((1, 0), 0))

    def test_insert_break_splits_link(self):
        """Test that a break inside a link leaves a link in each block."""
        document = RichTextDocumentNode()
        paragraph = document.add_child(RichTextBlockNode())
        link = paragraph.add_child(RichTextLinkNode("u"))
        link.add_child(RichTextTextNode("abcd"))
        editor = RichTextEditor(document)
        editor.select(Range.collapsed(Point((0, 0, 0), 2)))

        editor.insert_break()

        first, second = editor.document().children
        assert isinstance(first.children[0], RichTextLinkNode)
        assert isinstance(second.children[0], RichTextLinkNode)
        assert first.text() == "ab"
        assert second.text() == "cd"
        assert editor.selection() == Range.collapsed(Point((1, 0, 0), 0))

    @pytest.mark.parametrize("unit, remaining", [
        (DeleteUnit.CHARACTER, "hello worl"),
        (DeleteUnit.WORD, "hello "),
        (DeleteUnit.LINE, ""),
        (DeleteUnit.BLOCK, ""),
    ])
    def test_delete_backward_units(self, text_editor, unit, remaining):
        """Test how much each unit removes."""
        text_editor.select(Range.collapsed(Point((0, 0), 11)))

        text_editor.delete_backward(unit)

        assert text_editor.document().children[0].text() == remaining
        assert text_editor.document().children[1].text() == "second line"

    def test_delete_word_punctuation(self):
        """Test that a run of punctuation counts as a word."""
        document = RichTextDocumentNode()
        document.add_child(RichTextBlockNode()).add_child(RichTextTextNode("foo, bar!!"))
        editor = RichTextEditor(document)

        editor.delete_backward(DeleteUnit.WORD)
        assert document.text() == "foo, bar"

        editor.delete_backward(DeleteUnit.WORD)
        assert document.text() == "foo, "

    def test_delete_backward_at_block_start_joins(self, text_editor):
        """Test that backspace at the start of a block joins it to the previous one."""
        text_editor.select(Range.collapsed(Point((1, 0), 0)))

        text_editor.delete_backward()

        assert [block.text() for block in text_editor.document().children] == ["hello worldsecond line"]
        assert text_editor.selection() == Range.collapsed(Point((0, 0), 11))

    def test_delete_backward_at_document_start(self, text_editor):
        """Test that backspace before any text does nothing."""
        text_editor.select(Range.collapsed(Point((0, 0), 0)))

        text_editor.delete_backward()

        assert text_editor.document().text() == "hello worldsecond line"

    def test_set_and_wrap_block(self, text_editor):
        """Test retyping a block and wrapping it in a container."""
        text_editor.set_block_type("list-item", (1,))
        text_editor.wrap_block("bulleted-list", (1,))

        container = text_editor.document().children[1]
        assert container.block_type == "bulleted-list"
        assert container.children[0].block_type == "list-item"
        assert text_editor.selection() == Range.collapsed(Point((1, 0, 0), 11))

    def test_block_operations_need_block_paths(self, text_editor):
        """Test that block operations reject paths to text or the root."""
        with pytest.raises(RichTextPathError):
            text_editor.set_block_type("heading-one", (0, 0))

        with pytest.raises(RichTextPathError):
            text_editor.wrap_block("bulleted-list", ())


class TestMarks:
    """Test marks on existing and future text."""

    def test_set_mark_on_part_of_run(self, text_editor):
        """Test that marking part of a run splits it."""
        text_editor.set_mark("bold", Range(Point((0, 0), 5), Point((0, 0), 0)))

        assert contents(text_editor.document().children[0]) == [("hello", {"bold"}), (" world", set())]

    def test_runs_with_equal_marks_merge(self, text_editor):
        """Test that adjacent runs with the same marks become one run."""
        text_editor.set_mark("bold", Range(Point((0, 0), 0), Point((0, 0), 5)))
        text_editor.set_mark("bold", Range(Point((0, 1), 0), Point((0, 1), 6)))

        assert contents(text_editor.document().children[0]) == [("hello world", {"bold"})]

    def test_set_mark_twice(self, text_editor):
        """Test that marks are idempotent."""
        at = Range(Point((1, 0), 0), Point((1, 0), 6))
        text_editor.set_mark("italic", at)
        text_editor.set_mark("italic", at)

        assert contents(text_editor.document().children[1]) == [("second", {"italic"}), (" line", set())]

    def test_pending_marks_survive_break(self):
        """Test that a mark removed before a break stays removed in the new block."""
        editor = RichTextEditor()
        editor.add_mark("bold")
        editor.insert_text("a")
        editor.remove_mark("bold")

        editor.insert_break()
        editor.insert_text("b")

        assert contents(editor.document().children[0]) == [("a", {"bold"})]
        assert contents(editor.document().children[1]) == [("b", set())]

    def test_add_mark_applies_to_next_text(self):
        """Test that pending marks are used for the next insertion only."""
        editor = RichTextEditor()
        editor.insert_text("a")
        editor.add_mark("italic")

        assert editor.pending_marks() == {"italic"}

        editor.insert_text("b")
        editor.insert_text("c")

        assert contents(editor.document().children[0]) == [("a", set()), ("bc", {"italic"})]
        assert editor.pending_marks() is None

    def test_remove_mark_applies_to_next_text(self, text_editor):
        """Test that removing a mark at the end of a marked run starts an unmarked run."""
        text_editor.set_mark("code", Range(Point((1, 0), 0), Point((1, 0), 11)))
        text_editor.remove_mark("code")

        text_editor.insert_text("!")

        assert contents(text_editor.document().children[1]) == [("second line", {"code"}), ("!", set())]

    def test_select_clears_pending_marks(self, text_editor):
        """Test that moving the caret forgets pending marks."""
        text_editor.add_mark("bold")

        text_editor.select(Range.collapsed(Point((0, 0), 0)))

        assert text_editor.pending_marks() is None


class TestLinks:
    """Test wrapping text in links."""

    def test_wrap_link_moves_caret_after_link(self, text_editor):
        """Test that a caret at the end of the linked text moves out of the link."""
        text_editor.wrap_link("http://x", Range(Point((1, 0), 7), Point((1, 0), 11)))

        block = text_editor.document().children[1]
        assert isinstance(block.children[1], RichTextLinkNode)
        assert block.children[1].text() == "line"
        assert text_editor.selection() == Range.collapsed(Point((1, 2), 0))

    def test_existing_link_is_kept(self):
        """Test that text already in a link is not wrapped again."""
        document = RichTextDocumentNode()
        paragraph = document.add_child(RichTextBlockNode())
        paragraph.add_child(RichTextTextNode("ab"))
        paragraph.add_child(RichTextLinkNode("u")).add_child(RichTextTextNode("cd"))
        editor = RichTextEditor(document)

        editor.wrap_link("v", Range(Point((0, 0), 0), Point((0, 1, 0), 2)))

        links = paragraph.children
        assert [(link.url, link.text()) for link in links] == [("v", "ab"), ("u", "cd")]

    def test_empty_link_is_removed(self):
        """Test that a link whose text is deleted disappears."""
        document = RichTextDocumentNode()
        paragraph = document.add_child(RichTextBlockNode())
        paragraph.add_child(RichTextTextNode("a"))
        paragraph.add_child(RichTextLinkNode("u")).add_child(RichTextTextNode("b"))
        paragraph.add_child(RichTextTextNode("c"))
        editor = RichTextEditor(document)

        editor.delete(Range(Point((0, 1, 0), 0), Point((0, 1, 0), 1)))

        assert contents(paragraph) == [("ac", set())]
        assert len(paragraph.children) == 1


class TestChangeListeners:
    """Test change notification."""

    def test_nested_edits_notify_once(self, text_editor):
        """Test that an outer edit block groups inner edits."""
        changes = []
        text_editor.add_change_listener(changes.append)

        with text_editor.edit_block():
            text_editor.insert_text("a")
            text_editor.insert_text("b")
            assert changes == []

        assert changes == [text_editor.document()]

    def test_removed_listener_is_not_called(self, text_editor):
        """Test unregistering a listener."""
        changes = []
        text_editor.add_change_listener(changes.append)
        text_editor.remove_change_listener(changes.append)

        text_editor.insert_text("a")

        assert changes == []

    def test_selection_change_does_not_notify(self, text_editor):
        """Test that only document changes are reported."""
        changes = []
        text_editor.add_change_listener(changes.append)

        text_editor.select(Range.collapsed(Point((0, 0), 1)))

        assert changes == []
