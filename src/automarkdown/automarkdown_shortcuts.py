"""
Shortcut tables for live markdown formatting.

Block shortcuts are matched against the text between the start of a block and
the caret when the trigger character is typed.  Inline shortcuts are matched
against the text of the current inline run plus the character being typed.
Both tables are ordered and the first matching entry wins.
"""

from dataclasses import dataclass, field
from enum import Enum
import re
from typing import List, Pattern

from automarkdown.automarkdown_exceptions import ShortcutConfigError


class BlockType:
    """Block type names produced by the default shortcut tables."""
    PARAGRAPH = "paragraph"
    HEADING_ONE = "heading-one"
    HEADING_TWO = "heading-two"
    HEADING_THREE = "heading-three"
    BLOCK_QUOTE = "block-quote"
    LIST_ITEM = "list-item"
    BULLETED_LIST = "bulleted-list"
    NUMBERED_LIST = "numbered-list"


class InlineShortcutKind(Enum):
    """What an inline shortcut turns its inner text into."""
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    LINK = "link"

    def is_mark(self) -> bool:
        """Check whether this kind is applied as a text mark rather than a link node."""
        return self is not InlineShortcutKind.LINK

    def group_count(self) -> int:
        """
        Get the number of capture groups a pattern of this kind must define.

        Marks capture (open, inner, close); links capture
        (open bracket, text, middle marker, url, close paren).

        Returns:
            The required number of capture groups
        """
        return 5 if self is InlineShortcutKind.LINK else 3


@dataclass(frozen=True)
class BlockShortcut:
    """A block-level shortcut: a line prefix that retypes the block it is typed in."""

    pattern: Pattern[str]
    block_type: str
    container_type: str | None = None  # Wraps the retyped block in a new container of this type

    def __post_init__(self) -> None:
        if self.block_type == BlockType.LIST_ITEM and self.container_type is None:
            raise ShortcutConfigError(
                f"Block shortcut '{self.pattern.pattern}' produces a list item but has no container type",
                {'pattern': self.pattern.pattern, 'type': self.block_type}
            )


# Global inline flags such as "(?i)" are only legal at the very start of a pattern
_LEADING_FLAGS_RE = re.compile(r'(?:\(\?[aiLmsux]+\))+')


@dataclass(frozen=True)
class InlineShortcut:
    """
    An inline shortcut: a delimited span that becomes a mark or a link.

    The pattern is also compiled as `end_pattern`, anchored to the end of the
    text, because the closing delimiter always ends with the character being
    typed.  Leading global flags are carried over through the compiled flags.
    """

    pattern: Pattern[str]
    kind: InlineShortcutKind
    end_pattern: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        expected = self.kind.group_count()
        if self.pattern.groups != expected:
            raise ShortcutConfigError(
                f"Inline shortcut '{self.pattern.pattern}' must define {expected} capture groups "
                f"for kind '{self.kind.value}', found {self.pattern.groups}",
                {'pattern': self.pattern.pattern, 'kind': self.kind.value, 'groups': self.pattern.groups}
            )

        source = self.pattern.pattern
        flags_match = _LEADING_FLAGS_RE.match(source)
        if flags_match is not None:
            source = source[flags_match.end():]

        try:
            end_pattern = re.compile(f'(?:{source})\\Z', self.pattern.flags)

        except re.error as e:
            raise ShortcutConfigError(
                f"Inline shortcut '{self.pattern.pattern}' cannot be matched at the caret: {e}",
                {'pattern': self.pattern.pattern, 'kind': self.kind.value, 'reason': str(e)}
            ) from e

        object.__setattr__(self, 'end_pattern', end_pattern)


def check_trigger(trigger: object) -> None:
    """
    Check that a block shortcut trigger is a single character.

    Args:
        trigger: Candidate trigger

    Raises:
        ShortcutConfigError: If the trigger is not a one-character string
    """
    if not isinstance(trigger, str) or len(trigger) != 1:
        raise ShortcutConfigError(
            f"Trigger must be a single character, got {trigger!r}",
            {'trigger': trigger}
        )


DEFAULT_BLOCK_SHORTCUTS: List[BlockShortcut] = [
    BlockShortcut(re.compile(r'(\*|-|\+)'), BlockType.LIST_ITEM, BlockType.BULLETED_LIST),
    BlockShortcut(re.compile(r'([0-9]+\.)'), BlockType.LIST_ITEM, BlockType.NUMBERED_LIST),
    BlockShortcut(re.compile(r'>'), BlockType.BLOCK_QUOTE),
    BlockShortcut(re.compile(r'#'), BlockType.HEADING_ONE),
    BlockShortcut(re.compile(r'##'), BlockType.HEADING_TWO),
    BlockShortcut(re.compile(r'###'), BlockType.HEADING_THREE),
]

# Two-character delimiters must come before their one-character forms
DEFAULT_INLINE_SHORTCUTS: List[InlineShortcut] = [
    InlineShortcut(re.compile(r'(?:^|\s)(\*\*)([^*]+)(\*\*)'), InlineShortcutKind.BOLD),
    InlineShortcut(re.compile(r'(?:^|\s)(__)([^_]+)(__)'), InlineShortcutKind.BOLD),
    InlineShortcut(re.compile(r'(?:^|\s)(\*)([^*]+)(\*)'), InlineShortcutKind.ITALIC),
    InlineShortcut(re.compile(r'(?:^|\s)(_)([^_]+)(_)'), InlineShortcutKind.ITALIC),
    InlineShortcut(re.compile(r'(?:^|\s)(`)(.+)(`)'), InlineShortcutKind.CODE),
    InlineShortcut(re.compile(r'(?:^|\s)(\[)(.+)(\]\()(.+)(\))'), InlineShortcutKind.LINK),
]


def container_block_types(shortcuts: List[BlockShortcut]) -> List[str]:
    """
    Get the block types that a table wraps in containers (the list item types).

    Args:
        shortcuts: Block shortcut table

    Returns:
        Distinct block types, in table order, that carry a container type
    """
    types: List[str] = []
    for shortcut in shortcuts:
        if shortcut.container_type is not None and shortcut.block_type not in types:
            types.append(shortcut.block_type)

    return types
