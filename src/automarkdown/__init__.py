"""
Live markdown formatting for structured-text editors.

This package recognizes markdown shortcuts as they are typed and rewrites the
document structure of any editor that implements the AutoMarkdownHost interface.
"""

from automarkdown.automarkdown_engine import AutoMarkdown, delete_text
from automarkdown.automarkdown_exceptions import AutoMarkdownError, ShortcutConfigError
from automarkdown.automarkdown_host import AutoMarkdownHost
from automarkdown.automarkdown_resolver import (
    BlockShortcutMatch,
    BlockShortcutResolver,
    InlineShortcutMatch,
    InlineShortcutResolver,
)
from automarkdown.automarkdown_settings import AutoMarkdownSettings
from automarkdown.automarkdown_shortcuts import (
    DEFAULT_BLOCK_SHORTCUTS,
    DEFAULT_INLINE_SHORTCUTS,
    BlockShortcut,
    BlockType,
    InlineShortcut,
    InlineShortcutKind,
)
from automarkdown.automarkdown_types import DeleteUnit, Path, Point, Range

__all__ = [
    # Exceptions
    'AutoMarkdownError',
    'ShortcutConfigError',
    # Types
    'DeleteUnit',
    'Path',
    'Point',
    'Range',
    # Shortcut tables
    'BlockType',
    'BlockShortcut',
    'InlineShortcut',
    'InlineShortcutKind',
    'DEFAULT_BLOCK_SHORTCUTS',
    'DEFAULT_INLINE_SHORTCUTS',
    # Resolvers
    'BlockShortcutMatch',
    'BlockShortcutResolver',
    'InlineShortcutMatch',
    'InlineShortcutResolver',
    # Core classes
    'AutoMarkdownHost',
    'AutoMarkdownSettings',
    'AutoMarkdown',
    'delete_text',
]
