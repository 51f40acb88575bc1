"""
In-memory rich-text editor.

RichTextEditor owns a RichTextDocumentNode tree and a selection, and provides
the editing operations the auto-markdown engine needs.  Selection positions
are held as references to text nodes rather than paths, so wrapping, splitting
and merging nodes never leaves the caret pointing at the wrong place.
"""

from contextlib import contextmanager
from dataclasses import dataclass
import logging
import re
from typing import Callable, Iterator, List, Set, Tuple

from automarkdown import AutoMarkdownHost, BlockType, DeleteUnit, Path, Point, Range

from richtext.richtext_exceptions import RichTextPathError
from richtext.richtext_node import (
    RichTextBlockNode, RichTextDocumentNode, RichTextLinkNode, RichTextNode, RichTextTextNode
)


@dataclass
class _TextPosition:
    """A selection position tracked by node identity."""

    node: RichTextTextNode
    offset: int


ChangeListener = Callable[[RichTextDocumentNode], None]


class RichTextEditor(AutoMarkdownHost):
    """Editor state for an in-memory rich-text document."""

    def __init__(self, document: RichTextDocumentNode | None = None) -> None:
        """
        Initialize the editor with the caret at the end of the document.

        Args:
            document: Document to edit; a single empty paragraph if None
        """
        if document is None:
            document = RichTextDocumentNode()
            paragraph = RichTextBlockNode(BlockType.PARAGRAPH)
            paragraph.add_child(RichTextTextNode())
            document.add_child(paragraph)

        self._document = document
        self._anchor: _TextPosition | None = None
        self._focus: _TextPosition | None = None

        # Marks for the next inserted text, or None to inherit from the text at the caret
        self._pending_marks: Set[str] | None = None

        self._edit_depth = 0
        self._modified = False
        self._listeners: List[ChangeListener] = []

        self._logger = logging.getLogger("RichTextEditor")

        self.move_to_end()

    def document(self) -> RichTextDocumentNode:
        """
        Get the document being edited.

        Returns:
            The document node
        """
        return self._document

    def pending_marks(self) -> Set[str] | None:
        """Get the marks the next inserted text will carry, or None if it inherits them."""
        return None if self._pending_marks is None else set(self._pending_marks)

    def add_change_listener(self, listener: ChangeListener) -> None:
        """
        Register a callback run once after each completed change to the document.

        Args:
            listener: Callback receiving the document
        """
        self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        """
        Unregister a change callback.

        Args:
            listener: Callback previously passed to add_change_listener()
        """
        self._listeners.remove(listener)

    def move_to_end(self) -> None:
        """Collapse the selection at the end of the last text run, if there is one."""
        last: RichTextTextNode | None = None
        for node in self._document.text_nodes():
            last = node

        if last is None:
            self._anchor = None
            self._focus = None
            return

        self._set_selection(_TextPosition(last, len(last.content)), _TextPosition(last, len(last.content)))

    def end(self, path: Path) -> Point:
        """
        Get the last point inside the node at a path.

        Args:
            path: Path to a block or text node

        Returns:
            The end point of that node
        """
        node = self._document.node_at(path)
        if isinstance(node, RichTextTextNode):
            return Point(path, len(node.content))

        last: RichTextTextNode | None = None
        for text_node in node.text_nodes():
            last = text_node

        if last is None:
            raise RichTextPathError(f"No text inside node at path {path}", {'path': path})

        return Point(last.path(), len(last.content))

    def selection(self) -> Range | None:
        if self._anchor is None or self._focus is None:
            return None

        return Range(self._to_point(self._anchor), self._to_point(self._focus))

    def default_block_type(self) -> str:
        return BlockType.PARAGRAPH

    def block_above(self, point: Point) -> Tuple[RichTextBlockNode, Path] | None:
        block = self._block_of(self._to_position(point).node)
        if block is None:
            return None

        return block, block.path()

    def block_type(self, block: RichTextBlockNode) -> str:  # type: ignore[override]
        return block.block_type

    def start(self, path: Path) -> Point:
        node = self._document.node_at(path)
        if isinstance(node, RichTextTextNode):
            return Point(path, 0)

        first = next(node.text_nodes(), None)
        if first is None:
            raise RichTextPathError(f"No text inside node at path {path}", {'path': path})

        return Point(first.path(), 0)

    def string(self, at: Range) -> str:
        start, end = self._edge_positions(at)
        if start.node is end.node:
            return start.node.content[start.offset:end.offset]

        leaves = list(self._document.text_nodes())
        first = self._leaf_index(leaves, start.node)
        last = self._leaf_index(leaves, end.node)

        parts = [start.node.content[start.offset:]]
        parts.extend(node.content for node in leaves[first + 1:last])
        parts.append(end.node.content[:end.offset])
        return "".join(parts)

    def select(self, at: Range) -> None:
        anchor = self._to_position(at.anchor)
        focus = self._to_position(at.focus)
        self._set_selection(anchor, focus)
        self._pending_marks = None

    def delete(self, at: Range | None = None) -> None:
        if at is None:
            at = self.selection()
            if at is None:
                return

        if at.is_collapsed():
            return

        start, end = self._edge_positions(at)
        with self.edit_block():
            self._delete_span(start, end)

    def set_block_type(self, block_type: str, at: Path) -> None:
        block = self._block_at(at)
        with self.edit_block():
            block.block_type = block_type
            self._modified = True

    def wrap_block(self, container_type: str, at: Path) -> None:
        block = self._block_at(at)
        parent = block.parent
        if parent is None:
            raise RichTextPathError(f"Cannot wrap the node at path {at}", {'path': at})

        with self.edit_block():
            index = block.index()
            parent.remove_child(block)
            container = RichTextBlockNode(container_type)
            parent.insert_child(index, container)
            container.add_child(block)
            self._modified = True

    def set_mark(self, mark: str, at: Range) -> None:
        if at.is_collapsed():
            return

        start, end = self._edge_positions(at)
        with self.edit_block():
            for node in self._split_range(start, end):
                node.marks.add(mark)

            self._modified = True

    def add_mark(self, mark: str) -> None:
        """
        Make the next typed text carry a mark.

        Args:
            mark: Mark name to add to the pending marks
        """
        if self._anchor is None:
            return

        self._pending_marks = self._current_marks() | {mark}

    def remove_mark(self, mark: str) -> None:
        if self._anchor is None:
            return

        self._pending_marks = self._current_marks() - {mark}

    def wrap_link(self, url: str, at: Range) -> None:
        if at.is_collapsed():
            return

        start, end = self._edge_positions(at)
        with self.edit_block():
            leaves = self._split_range(start, end)
            last_link: RichTextLinkNode | None = None

            for group in self._sibling_groups(leaves):
                parent = group[0].parent
                assert parent is not None, "Text nodes are always attached"

                # Text that is already a link keeps its link
                if isinstance(parent, RichTextLinkNode):
                    continue

                index = group[0].index()
                link = RichTextLinkNode(url)
                for node in group:
                    parent.remove_child(node)
                    link.add_child(node)

                parent.insert_child(index, link)
                last_link = link

            if last_link is not None:
                self._move_positions_after_link(last_link)

            self._modified = True

    def insert_text(self, text: str) -> None:
        if self._anchor is None or self._focus is None or not text:
            return

        with self.edit_block():
            self._delete_selection()
            assert self._anchor is not None
            node = self._anchor.node
            offset = self._anchor.offset
            marks = node.marks if self._pending_marks is None else self._pending_marks

            if marks == node.marks:
                node.content = node.content[:offset] + text + node.content[offset:]
                for position in self._positions():
                    if position.node is node and position.offset >= offset:
                        position.offset += len(text)

            else:
                new_node = RichTextTextNode(text, marks)
                parent = node.parent
                assert parent is not None, "Text nodes are always attached"
                if offset == 0:
                    parent.insert_child(node.index(), new_node)

                else:
                    if offset < len(node.content):
                        self._split_text(node, offset)

                    parent.insert_child(node.index() + 1, new_node)

                self._set_selection(_TextPosition(new_node, len(text)), _TextPosition(new_node, len(text)))

            self._pending_marks = None
            self._modified = True

    def insert_break(self) -> None:
        if self._anchor is None:
            return

        with self.edit_block():
            self._delete_selection()
            assert self._anchor is not None
            node = self._anchor.node
            block = self._block_of(node)
            if block is None or block.parent is None:
                return

            right = self._split_text(node, self._anchor.offset)
            moving: RichTextNode = right

            # Breaking inside a link splits the link too
            link = right.parent
            if isinstance(link, RichTextLinkNode) and link.parent is not None:
                new_link = RichTextLinkNode(link.url)
                for child in link.children[right.index():]:
                    link.remove_child(child)
                    new_link.add_child(child)

                link.parent.insert_child(link.index() + 1, new_link)
                moving = new_link

            new_block = RichTextBlockNode(block.block_type)
            for child in block.children[moving.index():]:
                block.remove_child(child)
                new_block.add_child(child)

            block.parent.insert_child(block.index() + 1, new_block)
            self._set_selection(_TextPosition(right, 0), _TextPosition(right, 0))

            # An empty run at the caret takes the marks pending for the next text
            if self._pending_marks is not None and not right.content:
                right.marks = set(self._pending_marks)

            self._pending_marks = None
            self._modified = True

    def delete_backward(self, unit: DeleteUnit = DeleteUnit.CHARACTER) -> None:
        selection = self.selection()
        if selection is None:
            return

        with self.edit_block():
            if not selection.is_collapsed():
                self._delete_selection()
                return

            assert self._anchor is not None
            caret = _TextPosition(self._anchor.node, self._anchor.offset)
            block = self._block_of(caret.node)
            if block is None:
                return

            leaves = list(block.text_nodes())
            index = self._leaf_index(leaves, caret.node)
            block_offset = sum(len(node.content) for node in leaves[:index]) + caret.offset

            if block_offset == 0:
                target = self._end_of_previous_block(leaves[0])
                if target is None:
                    return

            else:
                length = self._backward_length(block.text()[:block_offset], unit)
                target = self._position_at_block_offset(leaves, block_offset - length)

            self._delete_span(target, caret)
            self._pending_marks = None

    @contextmanager
    def edit_block(self) -> Iterator[None]:
        self._edit_depth += 1
        try:
            yield

        finally:
            self._edit_depth -= 1
            if self._edit_depth == 0 and self._modified:
                self._modified = False
                self._normalize()
                for listener in list(self._listeners):
                    listener(self._document)

    def _set_selection(self, anchor: _TextPosition, focus: _TextPosition) -> None:
        # Anchor and focus must never share an object or transforms would apply twice
        self._anchor = _TextPosition(anchor.node, anchor.offset)
        self._focus = _TextPosition(focus.node, focus.offset)

    def _positions(self) -> List[_TextPosition]:
        return [position for position in (self._anchor, self._focus) if position is not None]

    def _current_marks(self) -> Set[str]:
        if self._pending_marks is not None:
            return set(self._pending_marks)

        assert self._anchor is not None
        return set(self._anchor.node.marks)

    def _to_position(self, point: Point) -> _TextPosition:
        """
        Resolve a point to a text node and offset.

        Args:
            point: Point to resolve

        Returns:
            The position addressed by the point

        Raises:
            RichTextPathError: If the path is not a text node or the offset is out of range
        """
        node = self._document.node_at(point.path)
        if not isinstance(node, RichTextTextNode):
            raise RichTextPathError(f"Path {point.path} is not a text node", {'path': point.path})

        if point.offset < 0 or point.offset > len(node.content):
            raise RichTextPathError(
                f"Offset {point.offset} is outside text node at path {point.path}",
                {'path': point.path, 'offset': point.offset, 'length': len(node.content)}
            )

        return _TextPosition(node, point.offset)

    def _to_point(self, position: _TextPosition) -> Point:
        return Point(position.node.path(), position.offset)

    def _edge_positions(self, at: Range) -> Tuple[_TextPosition, _TextPosition]:
        start, end = at.edges()
        return self._to_position(start), self._to_position(end)

    def _block_at(self, path: Path) -> RichTextBlockNode:
        node = self._document.node_at(path)
        if not isinstance(node, RichTextBlockNode):
            raise RichTextPathError(f"Path {path} is not a block", {'path': path})

        return node

    def _block_of(self, node: RichTextNode) -> RichTextBlockNode | None:
        parent = node.parent
        while parent is not None and not isinstance(parent, RichTextBlockNode):
            parent = parent.parent

        return parent

    @staticmethod
    def _leaf_index(leaves: List[RichTextTextNode], node: RichTextTextNode) -> int:
        for index, leaf in enumerate(leaves):
            if leaf is node:
                return index

        raise RichTextPathError("Text node is not part of the document")

    def _delete_selection(self) -> None:
        """Delete the selected text, leaving a collapsed selection at its start."""
        selection = self.selection()
        if selection is None or selection.is_collapsed():
            return

        start, end = self._edge_positions(selection)
        self._delete_span(start, end)

    def _delete_span(self, start: _TextPosition, end: _TextPosition) -> None:
        """
        Delete the text between two positions, merging their blocks if they differ.

        Args:
            start: First position, in document order
            end: Second position, in document order
        """
        self._modified = True
        if start.node is end.node:
            self._remove_text(start.node, start.offset, end.offset)
            return

        leaves = list(self._document.text_nodes())
        first = self._leaf_index(leaves, start.node)
        last = self._leaf_index(leaves, end.node)
        between = leaves[first + 1:last]

        for position in self._positions():
            if any(position.node is node for node in between):
                position.node, position.offset = start.node, start.offset

            elif position.node is end.node:
                if position.offset <= end.offset:
                    position.node, position.offset = start.node, start.offset

                else:
                    position.offset -= end.offset

            elif position.node is start.node and position.offset > start.offset:
                position.offset = start.offset

        start.node.content = start.node.content[:start.offset]
        end.node.content = end.node.content[end.offset:]

        for node in between:
            self._detach(node)

        start_block = self._block_of(start.node)
        end_block = self._block_of(end.node)
        if start_block is not None and end_block is not None and start_block is not end_block:
            for child in list(end_block.children):
                end_block.remove_child(child)
                start_block.add_child(child)

            self._detach(end_block)

    def _remove_text(self, node: RichTextTextNode, start: int, end: int) -> None:
        if start == end:
            return

        node.content = node.content[:start] + node.content[end:]
        for position in self._positions():
            if position.node is not node:
                continue

            if position.offset >= end:
                position.offset -= end - start

            elif position.offset > start:
                position.offset = start

    def _detach(self, node: RichTextNode) -> None:
        """Remove a node, then any ancestors left empty by its removal."""
        parent = node.parent
        if parent is None:
            return

        parent.remove_child(node)
        while not parent.children and not isinstance(parent, RichTextDocumentNode):
            grandparent = parent.parent
            if grandparent is None:
                break

            grandparent.remove_child(parent)
            parent = grandparent

    def _split_text(self, node: RichTextTextNode, offset: int) -> RichTextTextNode:
        """
        Split a text node in two at an offset.

        Positions after the offset move to the new node; a position exactly at
        the offset stays at the end of the original node.

        Args:
            node: Text node to split
            offset: Split point

        Returns:
            The new node holding the text after the offset
        """
        right = RichTextTextNode(node.content[offset:], node.marks)
        node.content = node.content[:offset]
        parent = node.parent
        assert parent is not None, "Text nodes are always attached"
        parent.insert_child(node.index() + 1, right)

        for position in self._positions():
            if position.node is node and position.offset > offset:
                position.node = right
                position.offset -= offset

        return right

    def _split_range(self, start: _TextPosition, end: _TextPosition) -> List[RichTextTextNode]:
        """
        Split text nodes at both edges of a span.

        Args:
            start: First position, in document order
            end: Second position, in document order

        Returns:
            The text nodes that exactly cover the span, in document order
        """
        # Split the end first so the start offset is still valid afterwards
        last: RichTextTextNode | None = end.node
        if 0 < end.offset < len(end.node.content):
            self._split_text(end.node, end.offset)

        elif end.offset == 0:
            last = self._adjacent_leaf(end.node, -1)

        first: RichTextTextNode | None = start.node
        if 0 < start.offset < len(start.node.content):
            right = self._split_text(start.node, start.offset)
            if last is start.node:
                last = right

            first = right

        elif 0 < start.offset == len(start.node.content):
            first = self._adjacent_leaf(start.node, 1)

        if first is None or last is None:
            return []

        leaves = list(self._document.text_nodes())
        first_index = self._leaf_index(leaves, first)
        last_index = self._leaf_index(leaves, last)
        return leaves[first_index:last_index + 1]

    def _adjacent_leaf(self, node: RichTextTextNode, step: int) -> RichTextTextNode | None:
        leaves = list(self._document.text_nodes())
        index = self._leaf_index(leaves, node) + step
        return leaves[index] if 0 <= index < len(leaves) else None

    @staticmethod
    def _sibling_groups(leaves: List[RichTextTextNode]) -> List[List[RichTextTextNode]]:
        """Group consecutive text nodes that are adjacent children of the same parent."""
        groups: List[List[RichTextTextNode]] = []
        for node in leaves:
            if groups:
                previous = groups[-1][-1]
                if previous.parent is node.parent and previous.index() + 1 == node.index():
                    groups[-1].append(node)
                    continue

            groups.append([node])

        return groups

    def _move_positions_after_link(self, link: RichTextLinkNode) -> None:
        """Move positions at the very end of a new link to just after it, so typing continues outside it."""
        last = link.children[-1]
        assert isinstance(last, RichTextTextNode)
        trailing = [p for p in self._positions() if p.node is last and p.offset == len(last.content)]
        if not trailing:
            return

        following = link.next_sibling()
        if not isinstance(following, RichTextTextNode):
            parent = link.parent
            assert parent is not None
            following = parent.insert_child(link.index() + 1, RichTextTextNode("", last.marks))

        assert isinstance(following, RichTextTextNode)
        for position in trailing:
            position.node = following
            position.offset = 0

    def _end_of_previous_block(self, first_leaf: RichTextTextNode) -> _TextPosition | None:
        previous = self._adjacent_leaf(first_leaf, -1)
        if previous is None:
            return None

        return _TextPosition(previous, len(previous.content))

    @staticmethod
    def _backward_length(before: str, unit: DeleteUnit) -> int:
        """
        Work out how many characters a backward deletion removes.

        Args:
            before: Block text before the caret; never empty
            unit: Deletion unit

        Returns:
            Number of characters to delete
        """
        if unit is DeleteUnit.CHARACTER:
            return 1

        if unit is DeleteUnit.WORD:
            match = re.search(r'(?:\w+|[^\w\s]+)?\s*\Z', before)
            return len(match.group(0)) if match and match.group(0) else 1

        return len(before)

    @staticmethod
    def _position_at_block_offset(leaves: List[RichTextTextNode], offset: int) -> _TextPosition:
        for node in leaves:
            if offset <= len(node.content):
                return _TextPosition(node, offset)

            offset -= len(node.content)

        raise RichTextPathError(f"Offset {offset} is past the end of the block")

    def _normalize(self) -> None:
        """Tidy the tree after an edit: drop empty runs and links, merge runs with equal marks."""
        self._normalize_children(self._document)

    def _holds_position(self, node: RichTextNode) -> bool:
        for position in self._positions():
            ancestor: RichTextNode | None = position.node
            while ancestor is not None:
                if ancestor is node:
                    return True

                ancestor = ancestor.parent

        return False

    def _normalize_children(self, parent: RichTextNode) -> None:
        for child in list(parent.children):
            if not isinstance(child, RichTextTextNode):
                self._normalize_children(child)

        for child in list(parent.children):
            if isinstance(child, RichTextLinkNode) and not child.text() and not self._holds_position(child):
                parent.remove_child(child)

        for child in list(parent.children):
            if (
                isinstance(child, RichTextTextNode) and
                not child.content and
                len(parent.children) > 1 and
                not self._holds_position(child)
            ):
                parent.remove_child(child)

        index = 0
        while index < len(parent.children) - 1:
            left = parent.children[index]
            right = parent.children[index + 1]
            if (
                isinstance(left, RichTextTextNode) and
                isinstance(right, RichTextTextNode) and
                left.marks == right.marks
            ):
                for position in self._positions():
                    if position.node is right:
                        position.node = left
                        position.offset += len(left.content)

                left.content += right.content
                parent.remove_child(right)
                continue

            index += 1

        # A block that lost all of its inline content gets an empty run back
        if isinstance(parent, RichTextBlockNode) and not parent.children:
            self._logger.debug("restoring empty text run in %s block", parent.block_type)
            parent.add_child(RichTextTextNode())
