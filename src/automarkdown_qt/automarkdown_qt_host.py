"""Qt-specific auto-markdown host for text document editors."""

from contextlib import contextmanager
import logging
from typing import Dict, Iterator, Tuple

from PySide6.QtGui import (
    QFont, QTextBlock, QTextBlockFormat, QTextCharFormat, QTextCursor, QTextDocument, QTextListFormat
)

from automarkdown import AutoMarkdownHost, BlockType, DeleteUnit, Path, Point, Range


# Custom format properties start at QTextFormat.UserProperty (0x100000)
BLOCK_TYPE_PROPERTY = 0x100000 + 1
CONTAINER_TYPE_PROPERTY = 0x100000 + 2


class AutoMarkdownQtHost(AutoMarkdownHost):
    """
    Auto-markdown host for a Qt text document.

    Qt addresses text by absolute character position, so points use a
    two-element path: the block number, and the offset within the block at
    which the run of identically formatted characters holding the point
    starts.  A point's offset is relative to the start of that run.

    Block types are stored in a custom block format property, and headings
    also get a Qt heading level.  List containers become QTextLists.
    """

    _HEADING_LEVELS: Dict[str, int] = {
        BlockType.HEADING_ONE: 1,
        BlockType.HEADING_TWO: 2,
        BlockType.HEADING_THREE: 3,
    }

    _LIST_STYLES: Dict[str, QTextListFormat.Style] = {
        BlockType.BULLETED_LIST: QTextListFormat.Style.ListDisc,
        BlockType.NUMBERED_LIST: QTextListFormat.Style.ListDecimal,
    }

    def __init__(self, document: QTextDocument, cursor: QTextCursor) -> None:
        """
        Initialize the host.

        Args:
            document: Qt text document to edit
            cursor: The editor's text cursor; its position is the selection
        """
        self._document = document
        self._cursor = cursor
        self._logger = logging.getLogger("AutoMarkdownQtHost")

    def cursor(self) -> QTextCursor:
        """
        Get the text cursor the host edits through.

        Returns:
            The cursor; editors should make it their text cursor again after each call
        """
        return self._cursor

    def selection(self) -> Range | None:
        return Range(self._point_at(self._cursor.anchor()), self._point_at(self._cursor.position()))

    def default_block_type(self) -> str:
        return BlockType.PARAGRAPH

    def block_above(self, point: Point) -> Tuple[QTextBlock, Path] | None:
        block = self._document.findBlockByNumber(point.path[0])
        if not block.isValid():
            return None

        return block, (block.blockNumber(),)

    def block_type(self, block: QTextBlock) -> str:  # type: ignore[override]
        block_format = block.blockFormat()
        if block_format.hasProperty(BLOCK_TYPE_PROPERTY):
            return block_format.stringProperty(BLOCK_TYPE_PROPERTY)

        if block.textList() is not None:
            return BlockType.LIST_ITEM

        return BlockType.PARAGRAPH

    def start(self, path: Path) -> Point:
        if len(path) == 1:
            return Point((path[0], 0), 0)

        return Point(path, 0)

    def string(self, at: Range) -> str:
        cursor = self._range_cursor(at)

        # Qt separates blocks with a paragraph separator character
        return cursor.selectedText().replace("\u2029", "")

    def select(self, at: Range) -> None:
        self._cursor.setPosition(self._position_of(at.anchor))
        self._cursor.setPosition(self._position_of(at.focus), QTextCursor.MoveMode.KeepAnchor)

    def delete(self, at: Range | None = None) -> None:
        cursor = self._cursor if at is None else self._range_cursor(at)
        if cursor.hasSelection():
            cursor.removeSelectedText()

    def set_block_type(self, block_type: str, at: Path) -> None:
        block = self._document.findBlockByNumber(at[0])
        cursor = QTextCursor(block)

        block_format = QTextBlockFormat(block.blockFormat())
        block_format.setProperty(BLOCK_TYPE_PROPERTY, block_type)
        block_format.setHeadingLevel(self._HEADING_LEVELS.get(block_type, 0))
        cursor.setBlockFormat(block_format)

    def wrap_block(self, container_type: str, at: Path) -> None:
        block = self._document.findBlockByNumber(at[0])
        cursor = QTextCursor(block)

        style = self._LIST_STYLES.get(container_type)
        if style is None:
            self._logger.warning("no list style for container type '%s', using a bulleted list", container_type)
            style = QTextListFormat.Style.ListDisc

        # Every wrap creates a new list, matching the in-memory host
        list_format = QTextListFormat()
        list_format.setStyle(style)
        list_format.setProperty(CONTAINER_TYPE_PROPERTY, container_type)
        cursor.createList(list_format)

    def set_mark(self, mark: str, at: Range) -> None:
        char_format = QTextCharFormat()
        if mark == "bold":
            char_format.setFontWeight(QFont.Weight.Bold)

        elif mark == "italic":
            char_format.setFontItalic(True)

        elif mark == "code":
            char_format.setFontFixedPitch(True)

        else:
            self._logger.warning("cannot represent mark '%s' in a Qt text document", mark)
            return

        self._range_cursor(at).mergeCharFormat(char_format)

    def remove_mark(self, mark: str) -> None:
        char_format = self._cursor.charFormat()
        if mark == "bold":
            char_format.setFontWeight(QFont.Weight.Normal)

        elif mark == "italic":
            char_format.setFontItalic(False)

        elif mark == "code":
            char_format.setFontFixedPitch(False)

        else:
            return

        # With no selection this only changes the format of the next inserted text
        self._cursor.setCharFormat(char_format)

    def wrap_link(self, url: str, at: Range) -> None:
        link_format = QTextCharFormat()
        link_format.setAnchor(True)
        link_format.setAnchorHref(url)
        link_format.setFontUnderline(True)
        self._range_cursor(at).mergeCharFormat(link_format)

        # Text typed straight after the link must not extend it
        _start, end = at.edges()
        if not self._cursor.hasSelection() and self._cursor.position() == self._position_of(end):
            char_format = self._cursor.charFormat()
            char_format.setAnchor(False)
            char_format.setAnchorHref("")
            char_format.setFontUnderline(False)
            self._cursor.setCharFormat(char_format)

    def insert_text(self, text: str) -> None:
        self._cursor.insertText(text)

    def insert_break(self) -> None:
        self._cursor.insertBlock()

    def delete_backward(self, unit: DeleteUnit = DeleteUnit.CHARACTER) -> None:
        if self._cursor.hasSelection():
            self._cursor.removeSelectedText()
            return

        if unit is DeleteUnit.CHARACTER:
            self._cursor.deletePreviousChar()
            return

        if unit is DeleteUnit.WORD:
            self._cursor.movePosition(QTextCursor.MoveOperation.PreviousWord, QTextCursor.MoveMode.KeepAnchor)

        else:
            self._cursor.movePosition(QTextCursor.MoveOperation.StartOfBlock, QTextCursor.MoveMode.KeepAnchor)

        if self._cursor.hasSelection():
            self._cursor.removeSelectedText()

        else:
            self._cursor.deletePreviousChar()

    @contextmanager
    def edit_block(self) -> Iterator[None]:
        self._cursor.beginEditBlock()
        try:
            yield

        finally:
            self._cursor.endEditBlock()

    def _range_cursor(self, at: Range) -> QTextCursor:
        """
        Create a cursor selecting a range.

        Args:
            at: Range to select

        Returns:
            A new cursor on the document with the range selected
        """
        cursor = QTextCursor(self._document)
        cursor.setPosition(self._position_of(at.anchor))
        cursor.setPosition(self._position_of(at.focus), QTextCursor.MoveMode.KeepAnchor)
        return cursor

    def _position_of(self, point: Point) -> int:
        """
        Convert a point to an absolute document position.

        Args:
            point: Point to convert

        Returns:
            The absolute character position
        """
        block = self._document.findBlockByNumber(point.path[0])
        run_start = point.path[1] if len(point.path) > 1 else 0
        return block.position() + run_start + point.offset

    def _point_at(self, position: int) -> Point:
        """
        Convert an absolute document position to a point.

        The point's run is the one holding the character before the position,
        as that is the format Qt gives to text typed at the position.

        Args:
            position: Absolute character position

        Returns:
            The point for the position
        """
        block = self._document.findBlock(position)
        relative = position - block.position()
        if relative == 0:
            return Point((block.blockNumber(), 0), 0)

        # A cursor's char format is the format of the character before it
        probe = QTextCursor(block)
        probe.setPosition(position)
        run_format = probe.charFormat()

        run_start = relative - 1
        while run_start > 0:
            probe.setPosition(block.position() + run_start)
            if probe.charFormat() != run_format:
                break

            run_start -= 1

        return Point((block.blockNumber(), run_start), relative - run_start)
