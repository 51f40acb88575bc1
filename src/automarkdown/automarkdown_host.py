"""Abstract editor host that the auto-markdown engine drives."""

from abc import ABC, abstractmethod
from typing import Any, ContextManager, Tuple

from automarkdown.automarkdown_types import DeleteUnit, Path, Point, Range


class AutoMarkdownHost(ABC):
    """
    Abstract base class for the editor state the auto-markdown engine works on.

    A host owns a document tree and a selection.  The engine only reads text
    and block information through this interface and only changes the document
    through its write operations, so any structured-text editor can be driven
    by providing an implementation.
    """

    @abstractmethod
    def selection(self) -> Range | None:
        """
        Get the current selection.

        Returns:
            The selection range, or None if the editor has no selection
        """

    @abstractmethod
    def default_block_type(self) -> str:
        """Get the type given to plain blocks (the type an outdent reverts to)."""

    @abstractmethod
    def block_above(self, point: Point) -> Tuple[Any, Path] | None:
        """
        Find the nearest block enclosing a point.

        Args:
            point: Point to start from

        Returns:
            Tuple of (block, block path), or None if the point is not inside a block
        """

    @abstractmethod
    def block_type(self, block: Any) -> str:
        """
        Get the type of a block returned by block_above().

        Args:
            block: The block

        Returns:
            The block type name
        """

    @abstractmethod
    def start(self, path: Path) -> Point:
        """
        Get the first point inside the node at a path.

        Args:
            path: Path to a block or text node

        Returns:
            The start point of that node
        """

    @abstractmethod
    def string(self, at: Range) -> str:
        """
        Get the text covered by a range.

        Args:
            at: Range to read, in either direction

        Returns:
            The concatenated text of the range
        """

    @abstractmethod
    def select(self, at: Range) -> None:
        """
        Set the selection.

        Args:
            at: New selection range
        """

    @abstractmethod
    def delete(self, at: Range | None = None) -> None:
        """
        Delete the text covered by a range.

        Args:
            at: Range to delete; the current selection if None
        """

    @abstractmethod
    def set_block_type(self, block_type: str, at: Path) -> None:
        """
        Change the type of a block.

        Args:
            block_type: New block type
            at: Path to the block
        """

    @abstractmethod
    def wrap_block(self, container_type: str, at: Path) -> None:
        """
        Wrap a block in a new container block.

        Args:
            container_type: Type of the new container
            at: Path to the block to wrap
        """

    @abstractmethod
    def set_mark(self, mark: str, at: Range) -> None:
        """
        Add a mark to all text in a range, splitting text runs at the range edges.

        Args:
            mark: Mark name, e.g. "bold"
            at: Range to mark
        """

    @abstractmethod
    def remove_mark(self, mark: str) -> None:
        """
        Stop the next typed text inheriting a mark from the text before the caret.

        Args:
            mark: Mark name to drop from the pending marks
        """

    @abstractmethod
    def wrap_link(self, url: str, at: Range) -> None:
        """
        Wrap the text in a range in a link.

        Args:
            url: Link target
            at: Range covering the link text
        """

    @abstractmethod
    def insert_text(self, text: str) -> None:
        """
        Insert text at the selection, replacing any selected text.

        Args:
            text: Text to insert
        """

    @abstractmethod
    def insert_break(self) -> None:
        """Split the block at the selection, starting a new block."""

    @abstractmethod
    def delete_backward(self, unit: DeleteUnit = DeleteUnit.CHARACTER) -> None:
        """
        Delete backwards from the selection, merging blocks at block boundaries.

        Args:
            unit: How much to delete
        """

    @abstractmethod
    def edit_block(self) -> ContextManager[None]:
        """
        Group edits so observers see them as one change.

        Returns:
            Context manager; edits made inside it form a single change
        """
