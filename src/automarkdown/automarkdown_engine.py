"""
Live markdown formatting for structured-text editors.

The engine intercepts character insertion and backward deletion.  When the
text typed so far spells out a markdown shortcut it rewrites the document
structure (block type, inline marks, links) instead of leaving the markdown
characters in place.
"""

import logging
from typing import Sequence

from automarkdown.automarkdown_host import AutoMarkdownHost
from automarkdown.automarkdown_resolver import (
    BlockShortcutResolver, InlineShortcutMatch, InlineShortcutResolver
)
from automarkdown.automarkdown_settings import AutoMarkdownSettings
from automarkdown.automarkdown_shortcuts import (
    DEFAULT_BLOCK_SHORTCUTS, DEFAULT_INLINE_SHORTCUTS, BlockShortcut, BlockType, InlineShortcut,
    check_trigger, container_block_types
)
from automarkdown.automarkdown_types import DeleteUnit, Path, Point, Range


def delete_text(host: AutoMarkdownHost, path: Path, offset: int, length: int) -> None:
    """
    Delete the characters in [offset - length, offset) of a text node.

    Args:
        host: Editor host to modify
        path: Path to the text node
        offset: Offset the deleted span ends at
        length: Number of characters to delete; nothing happens if this is zero
    """
    if length == 0:
        return

    host.delete(Range(Point(path, offset - length), Point(path, offset)))


class AutoMarkdown:
    """
    Applies markdown shortcuts to an editor host as text is typed.

    The engine holds only the shortcut tables.  All document and selection
    state lives in the host passed to each call.
    """

    def __init__(
        self,
        block_shortcuts: Sequence[BlockShortcut] | None = None,
        inline_shortcuts: Sequence[InlineShortcut] | None = None,
        trigger: str = " "
    ) -> None:
        """
        Initialize the engine.

        Args:
            block_shortcuts: Ordered block table; the default table if None
            inline_shortcuts: Ordered inline table; the default table if None
            trigger: Character that completes a block shortcut

        Raises:
            ShortcutConfigError: If the trigger is not a single character
        """
        check_trigger(trigger)

        if block_shortcuts is None:
            block_shortcuts = DEFAULT_BLOCK_SHORTCUTS

        if inline_shortcuts is None:
            inline_shortcuts = DEFAULT_INLINE_SHORTCUTS

        self._block_resolver = BlockShortcutResolver(block_shortcuts)
        self._inline_resolver = InlineShortcutResolver(inline_shortcuts)
        self._trigger = trigger

        # Block types that live inside containers are never outdented by backspace
        self._outdent_exempt_types = {BlockType.LIST_ITEM, *container_block_types(list(block_shortcuts))}

        self._logger = logging.getLogger("AutoMarkdown")

    @classmethod
    def from_settings(cls, settings: AutoMarkdownSettings) -> "AutoMarkdown":
        """
        Create an engine configured by a settings object.

        Args:
            settings: Shortcut tables and trigger character

        Returns:
            A configured engine
        """
        return cls(settings.block_shortcuts, settings.inline_shortcuts, settings.trigger)

    def insert_text(self, host: AutoMarkdownHost, text: str) -> None:
        """
        Handle a character being typed.

        Shortcuts are only recognized for a single typed character.  Longer text,
        such as a paste, is inserted as it is.

        Args:
            host: Editor host receiving the text
            text: The typed text, normally a single character
        """
        selection = host.selection()
        if len(text) != 1 or selection is None or not selection.is_collapsed():
            host.insert_text(text)
            return

        anchor = selection.anchor

        # Block shortcuts win over inline ones when both could apply
        if text == self._trigger and self._apply_block_shortcut(host, anchor):
            return

        if self._apply_inline_shortcut(host, anchor, text):
            return

        host.insert_text(text)

    def delete_backward(self, host: AutoMarkdownHost, unit: DeleteUnit = DeleteUnit.CHARACTER) -> None:
        """
        Handle a backward deletion.

        A caret at the very start of a formatted block (a heading or quote, for
        example) turns the block back into a plain one instead of deleting.

        Args:
            host: Editor host to modify
            unit: How much to delete if no outdent happens
        """
        selection = host.selection()
        if selection is not None and selection.is_collapsed():
            above = host.block_above(selection.anchor)
            if above is not None:
                block, path = above
                block_type = host.block_type(block)
                default_type = host.default_block_type()

                if (
                    block_type != default_type and
                    block_type not in self._outdent_exempt_types and
                    selection.anchor == host.start(path)
                ):
                    self._logger.debug("outdent %s block at %s", block_type, path)
                    host.set_block_type(default_type, path)
                    return

        host.delete_backward(unit)

    def type_text(self, host: AutoMarkdownHost, text: str) -> None:
        """
        Feed a string to the engine one keystroke at a time.

        A newline splits the block and a backspace character deletes backwards,
        so whole documents can be typed from a single string.

        Args:
            host: Editor host receiving the keystrokes
            text: Keystrokes to replay
        """
        for char in text:
            if char == "\n":
                host.insert_break()

            elif char == "\b":
                self.delete_backward(host)

            else:
                self.insert_text(host, char)

    def _apply_block_shortcut(self, host: AutoMarkdownHost, anchor: Point) -> bool:
        """
        Try to turn the block containing the caret into a different block type.

        Args:
            host: Editor host to modify
            anchor: Collapsed caret point

        Returns:
            True if a block shortcut was applied
        """
        above = host.block_above(anchor)
        if above is None:
            return False

        _block, path = above
        before_range = Range(anchor, host.start(path))
        match = self._block_resolver.resolve(host.string(before_range))
        if match is None:
            return False

        shortcut = match.shortcut
        self._logger.debug("block shortcut '%s' -> %s at %s", match.text, shortcut.block_type, path)

        with host.edit_block():
            host.select(before_range)
            host.delete()
            host.set_block_type(shortcut.block_type, path)

            if shortcut.container_type is not None:
                host.wrap_block(shortcut.container_type, path)

        return True

    def _apply_inline_shortcut(self, host: AutoMarkdownHost, anchor: Point, text: str) -> bool:
        """
        Try to turn a delimited span ending at the caret into marked text or a link.

        Args:
            host: Editor host to modify
            anchor: Collapsed caret point
            text: The character being typed; it is never inserted if a shortcut applies

        Returns:
            True if an inline shortcut was applied
        """
        run_range = Range(anchor, host.start(anchor.path))
        match = self._inline_resolver.resolve(host.string(run_range) + text)
        if match is None:
            return False

        self._logger.debug("inline shortcut %s for '%s' at %s", match.kind.value, match.inner_text, anchor.path)

        with host.edit_block():
            if match.kind.is_mark():
                self._apply_mark(host, anchor, match)

            else:
                self._apply_link(host, anchor, match)

        return True

    def _apply_mark(self, host: AutoMarkdownHost, anchor: Point, match: InlineShortcutMatch) -> None:
        """
        Remove the delimiters around the inner text and mark it.

        Args:
            host: Editor host to modify
            anchor: Collapsed caret point
            match: The mark shortcut match
        """
        path = anchor.path
        end = anchor.offset
        inner_length = len(match.inner_text)

        # The last character of the closing delimiter is not in the document
        close_length = len(match.close_delimiter) - 1
        delete_text(host, path, end, close_length)
        end -= close_length

        open_length = len(match.open_delimiter)
        delete_text(host, path, end - inner_length, open_length)
        end -= open_length

        mark = match.kind.value
        host.set_mark(mark, Range(Point(path, end), Point(path, end - inner_length)))
        host.remove_mark(mark)

    def _apply_link(self, host: AutoMarkdownHost, anchor: Point, match: InlineShortcutMatch) -> None:
        """
        Remove the link syntax around the link text and wrap the text in a link.

        Args:
            host: Editor host to modify
            anchor: Collapsed caret point
            match: The link shortcut match
        """
        path = anchor.path
        end = anchor.offset
        text_length = len(match.inner_text)

        # The last character of the closing paren is not in the document
        tail_length = len(match.middle_marker) + len(match.url) + len(match.close_delimiter) - 1
        delete_text(host, path, end, tail_length)
        end -= tail_length

        open_length = len(match.open_delimiter)
        delete_text(host, path, end - text_length, open_length)
        end -= open_length

        host.wrap_link(match.url, Range(Point(path, end), Point(path, end - text_length)))
