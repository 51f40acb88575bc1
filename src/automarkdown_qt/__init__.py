"""Auto-markdown support for Qt text documents."""

from automarkdown_qt.automarkdown_qt_host import (
    BLOCK_TYPE_PROPERTY,
    CONTAINER_TYPE_PROPERTY,
    AutoMarkdownQtHost,
)


__all__ = [
    "AutoMarkdownQtHost",
    "BLOCK_TYPE_PROPERTY",
    "CONTAINER_TYPE_PROPERTY",
]
