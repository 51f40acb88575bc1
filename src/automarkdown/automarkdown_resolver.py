"""Matching of typed text against the shortcut tables."""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from automarkdown.automarkdown_shortcuts import BlockShortcut, InlineShortcut, InlineShortcutKind


@dataclass
class BlockShortcutMatch:
    """Result of matching a line prefix against the block table."""

    shortcut: BlockShortcut
    text: str  # The line prefix that matched, removed when the shortcut applies


@dataclass
class InlineShortcutMatch:
    """Result of matching an inline run against the inline table."""

    shortcut: InlineShortcut
    groups: Tuple[str, ...]

    @property
    def kind(self) -> InlineShortcutKind:
        """The kind of formatting this match produces."""
        return self.shortcut.kind

    @property
    def open_delimiter(self) -> str:
        """Opening delimiter (or opening bracket for links)."""
        return self.groups[0]

    @property
    def inner_text(self) -> str:
        """Text to be formatted (or the link text)."""
        return self.groups[1]

    @property
    def close_delimiter(self) -> str:
        """Closing delimiter (or closing paren for links).  Its last character is the one being typed."""
        return self.groups[-1]

    @property
    def middle_marker(self) -> str:
        """Marker between link text and url, e.g. ``](``.  Empty for marks."""
        return self.groups[2] if self.kind is InlineShortcutKind.LINK else ""

    @property
    def url(self) -> str:
        """Link target.  Empty for marks."""
        return self.groups[3] if self.kind is InlineShortcutKind.LINK else ""


class BlockShortcutResolver:
    """Finds the block shortcut, if any, that a whole line prefix spells out."""

    def __init__(self, shortcuts: Sequence[BlockShortcut]) -> None:
        """
        Initialize the resolver.

        Args:
            shortcuts: Ordered block shortcut table
        """
        self._shortcuts = list(shortcuts)

    def shortcuts(self) -> List[BlockShortcut]:
        """Get the block shortcut table in evaluation order."""
        return list(self._shortcuts)

    def resolve(self, line_prefix: str) -> BlockShortcutMatch | None:
        """
        Find the first block shortcut whose pattern matches the entire line prefix.

        Args:
            line_prefix: Text from the start of the block up to the caret

        Returns:
            The match, or None if no shortcut matches exactly
        """
        for shortcut in self._shortcuts:
            if shortcut.pattern.fullmatch(line_prefix):
                return BlockShortcutMatch(shortcut, line_prefix)

        return None


class InlineShortcutResolver:
    """Finds the inline shortcut, if any, that the character being typed completes."""

    def __init__(self, shortcuts: Sequence[InlineShortcut]) -> None:
        """
        Initialize the resolver.

        Args:
            shortcuts: Ordered inline shortcut table
        """
        self._shortcuts = list(shortcuts)

    def shortcuts(self) -> List[InlineShortcut]:
        """Get the inline shortcut table in evaluation order."""
        return list(self._shortcuts)

    def resolve(self, run_text: str) -> InlineShortcutMatch | None:
        """
        Find the first inline shortcut that matches the end of the run text.

        Args:
            run_text: Text from the start of the current inline run to the caret,
                followed by the character being typed

        Returns:
            The match with its captured groups, or None if nothing matches
        """
        for shortcut in self._shortcuts:
            result = shortcut.end_pattern.search(run_text)
            if result is None:
                continue

            groups = tuple(group or "" for group in result.groups())
            return InlineShortcutMatch(shortcut, groups)

        return None
