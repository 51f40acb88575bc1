"""
Visitor class to print rich-text document trees for debugging
"""
from typing import Any, List

from richtext.richtext_node import (
    RichTextBlockNode, RichTextLinkNode, RichTextNode, RichTextTextNode, RichTextVisitor
)


class RichTextPrinter(RichTextVisitor):
    """Visitor that prints the document structure for debugging."""
    def __init__(self) -> None:
        """Initialize the printer with zero indentation."""
        super().__init__()
        self.indent_level = 0

    def _indent(self) -> str:
        """
        Get the current indentation string.

        Returns:
            A string of spaces for the current indentation level
        """
        return "  " * self.indent_level

    def _visit_children(self, node: RichTextNode) -> List[Any]:
        self.indent_level += 1
        results = super().generic_visit(node)
        self.indent_level -= 1
        return results

    def generic_visit(self, node: RichTextNode) -> List[Any]:
        """
        Default visit method that prints the node type.

        Args:
            node: The node to visit

        Returns:
            The results of visiting the children
        """
        name = node.__class__.__name__.removeprefix("RichText").removesuffix("Node")
        print(f"{self._indent()}{name}")
        return self._visit_children(node)

    def visit_RichTextBlockNode(self, node: RichTextBlockNode) -> List[Any]:  # pylint: disable=invalid-name
        """
        Visit a block node and print its type.

        Args:
            node: The block node to visit

        Returns:
            The results of visiting the children
        """
        print(f"{self._indent()}Block ({node.block_type})")
        return self._visit_children(node)

    def visit_RichTextTextNode(self, node: RichTextTextNode) -> str:  # pylint: disable=invalid-name
        """
        Visit a text node and print its content and marks.

        Args:
            node: The text node to visit

        Returns:
            The text content
        """
        marks = f" [{', '.join(sorted(node.marks))}]" if node.marks else ""
        print(f"{self._indent()}Text{marks}: '{node.content}'")
        return node.content

    def visit_RichTextLinkNode(self, node: RichTextLinkNode) -> List[Any]:  # pylint: disable=invalid-name
        """Visit a link node and print its URL."""
        print(f"{self._indent()}Link ({node.url})")
        return self._visit_children(node)
