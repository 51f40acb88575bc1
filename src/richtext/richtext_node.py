"""
Node classes for an in-memory rich-text document tree.

A document holds blocks.  A block holds either inline nodes (text runs and
links) or, for containers such as lists, further blocks.  Nodes are addressed
by paths: tuples of child indexes from the document root.
"""

from typing import Any, Iterator, List, Set, Tuple

from richtext.richtext_exceptions import RichTextPathError


class RichTextNode:
    """Base class for all rich-text nodes."""

    def __init__(self) -> None:
        """Initialize a node with no parent and no children."""
        self.parent: RichTextNode | None = None
        self.children: List[RichTextNode] = []

    def add_child(self, child: "RichTextNode") -> "RichTextNode":
        """
        Append a child node.

        Args:
            child: The child node to add

        Returns:
            The added child node for method chaining
        """
        child.parent = self
        self.children.append(child)
        return child

    def insert_child(self, index: int, child: "RichTextNode") -> "RichTextNode":
        """
        Insert a child node at an index.

        Args:
            index: Position among the existing children
            child: The child node to insert

        Returns:
            The inserted child node
        """
        child.parent = self
        self.children.insert(index, child)
        return child

    def remove_child(self, child: "RichTextNode") -> None:
        """
        Remove a child node.

        Args:
            child: The child node to remove

        Raises:
            ValueError: If the child is not a child of this node
        """
        if not any(c is child for c in self.children):
            raise ValueError("Node is not a child of this node")

        self.children = [c for c in self.children if c is not child]
        child.parent = None

    def index(self) -> int:
        """
        Get the position of this node among its parent's children.

        Returns:
            The child index, or 0 for a root node
        """
        if self.parent is None:
            return 0

        for i, sibling in enumerate(self.parent.children):
            if sibling is self:
                return i

        raise ValueError("Node is not a child of its parent")

    def path(self) -> Tuple[int, ...]:
        """
        Get the path from the root to this node.

        Returns:
            Tuple of child indexes; empty for the root
        """
        indexes: List[int] = []
        node: RichTextNode = self
        while node.parent is not None:
            indexes.append(node.index())
            node = node.parent

        return tuple(reversed(indexes))

    def previous_sibling(self) -> "RichTextNode | None":
        """Get the previous sibling of this node, if any."""
        if self.parent is None:
            return None

        index = self.index()
        return self.parent.children[index - 1] if index > 0 else None

    def next_sibling(self) -> "RichTextNode | None":
        """Get the next sibling of this node, if any."""
        if self.parent is None:
            return None

        index = self.index()
        return self.parent.children[index + 1] if index < len(self.parent.children) - 1 else None

    def text_nodes(self) -> Iterator["RichTextTextNode"]:
        """
        Iterate over the text runs below this node in document order.

        Yields:
            Each descendant text node
        """
        for child in self.children:
            if isinstance(child, RichTextTextNode):
                yield child

            else:
                yield from child.text_nodes()

    def text(self) -> str:
        """Get the concatenated text below this node."""
        return "".join(node.content for node in self.text_nodes())


class RichTextVisitor:
    """Base visitor class for rich-text tree traversal."""

    def visit(self, node: RichTextNode) -> Any:
        """
        Visit a node and dispatch to the appropriate visit method.

        Args:
            node: The node to visit

        Returns:
            The result of visiting the node
        """
        method_name = f'visit_{node.__class__.__name__}'
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: RichTextNode) -> List[Any]:
        """
        Default visit method for nodes without specific handlers.

        Args:
            node: The node to visit

        Returns:
            A list of results from visiting each child
        """
        return [self.visit(child) for child in node.children]


class RichTextDocumentNode(RichTextNode):
    """Root node of a rich-text document."""

    def node_at(self, path: Tuple[int, ...]) -> RichTextNode:
        """
        Find the node at a path.

        Args:
            path: Tuple of child indexes from the root

        Returns:
            The addressed node

        Raises:
            RichTextPathError: If no node exists at the path
        """
        node: RichTextNode = self
        for depth, index in enumerate(path):
            if index < 0 or index >= len(node.children):
                raise RichTextPathError(f"No node at path {path}", {'path': path, 'depth': depth})

            node = node.children[index]

        return node


class RichTextBlockNode(RichTextNode):
    """Node representing a block: a paragraph, heading, quote, list, list item and so on."""

    def __init__(self, block_type: str = "paragraph") -> None:
        """
        Initialize a block node.

        Args:
            block_type: Name of the block type
        """
        super().__init__()
        self.block_type = block_type

    def is_container(self) -> bool:
        """Check whether this block holds other blocks rather than inline content."""
        return any(isinstance(child, RichTextBlockNode) for child in self.children)


class RichTextTextNode(RichTextNode):
    """Node representing a run of text sharing one set of marks."""

    def __init__(self, content: str = "", marks: Set[str] | None = None) -> None:
        """
        Initialize a text node.

        Args:
            content: The text content
            marks: Mark names applied to the whole run, e.g. {"bold"}
        """
        super().__init__()
        self.content = content
        self.marks: Set[str] = set(marks) if marks else set()


class RichTextLinkNode(RichTextNode):
    """Node representing a link wrapping inline text."""

    def __init__(self, url: str = "") -> None:
        """
        Initialize a link node.

        Args:
            url: The link URL
        """
        super().__init__()
        self.url = url
