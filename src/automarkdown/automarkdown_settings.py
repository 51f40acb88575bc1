from dataclasses import dataclass, field
import json
import re
from typing import Any, Dict, List, Pattern

from automarkdown.automarkdown_exceptions import ShortcutConfigError
from automarkdown.automarkdown_shortcuts import (
    DEFAULT_BLOCK_SHORTCUTS, DEFAULT_INLINE_SHORTCUTS, BlockShortcut, InlineShortcut, InlineShortcutKind,
    check_trigger
)


def _compile(section: str, index: int, pattern: Any) -> Pattern[str]:
    """
    Compile a pattern read from a settings file.

    Args:
        section: Table the pattern belongs to ("block" or "inline")
        index: Position of the entry in its table
        pattern: Pattern source read from the file

    Returns:
        The compiled pattern

    Raises:
        ShortcutConfigError: If the pattern is not a valid regular expression
    """
    if not isinstance(pattern, str):
        raise ShortcutConfigError(
            f"{section} shortcut {index} has no pattern",
            {'section': section, 'index': index, 'pattern': pattern}
        )

    try:
        return re.compile(pattern)

    except re.error as e:
        raise ShortcutConfigError(
            f"{section} shortcut {index} has an invalid pattern: {e}",
            {'section': section, 'index': index, 'pattern': pattern, 'reason': str(e)}
        ) from e


def _entries(section: str, entries: Any) -> List[Dict[str, Any]]:
    """
    Check that a table read from a settings file is a list of objects.

    Args:
        section: Table name ("block" or "inline")
        entries: Table read from the file

    Returns:
        The table entries

    Raises:
        ShortcutConfigError: If the table or any of its entries has the wrong shape
    """
    if not isinstance(entries, list):
        raise ShortcutConfigError(
            f"{section} shortcuts must be a list, got {type(entries).__name__}",
            {'section': section}
        )

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ShortcutConfigError(
                f"{section} shortcut {index} must be an object, got {type(entry).__name__}",
                {'section': section, 'index': index, 'entry': entry}
            )

    return entries


@dataclass
class AutoMarkdownSettings:
    """
    Settings for live markdown formatting.

    This class handles the loading and saving of the shortcut tables to a JSON file.
    """
    block_shortcuts: List[BlockShortcut] = field(default_factory=lambda: list(DEFAULT_BLOCK_SHORTCUTS))
    inline_shortcuts: List[InlineShortcut] = field(default_factory=lambda: list(DEFAULT_INLINE_SHORTCUTS))
    trigger: str = " "

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AutoMarkdownSettings":
        """
        Build settings from decoded JSON data.  Missing tables keep their defaults.

        Raises:
            ShortcutConfigError: If any table entry is invalid
        """
        if not isinstance(data, dict):
            raise ShortcutConfigError(
                f"Settings must be an object, got {type(data).__name__}",
                {'type': type(data).__name__}
            )

        shortcuts = data.get("shortcuts", {})
        if not isinstance(shortcuts, dict):
            raise ShortcutConfigError(
                f"Shortcuts must be an object, got {type(shortcuts).__name__}",
                {'type': type(shortcuts).__name__}
            )

        settings = cls(trigger=data.get("trigger", " "))
        check_trigger(settings.trigger)

        if "block" in shortcuts:
            settings.block_shortcuts = [
                BlockShortcut(
                    _compile("block", index, entry.get("pattern")),
                    entry.get("type", ""),
                    entry.get("containerType")
                )
                for index, entry in enumerate(_entries("block", shortcuts["block"]))
            ]

        if "inline" in shortcuts:
            inline_shortcuts: List[InlineShortcut] = []
            for index, entry in enumerate(_entries("inline", shortcuts["inline"])):
                kind_name = entry.get("kind")
                try:
                    kind = InlineShortcutKind(kind_name)

                except ValueError as e:
                    raise ShortcutConfigError(
                        f"inline shortcut {index} has unknown kind {kind_name!r}",
                        {'section': 'inline', 'index': index, 'kind': kind_name}
                    ) from e

                inline_shortcuts.append(InlineShortcut(_compile("inline", index, entry.get("pattern")), kind))

            settings.inline_shortcuts = inline_shortcuts

        return settings

    @classmethod
    def load(cls, path: str) -> "AutoMarkdownSettings":
        """Load settings from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)

            except json.JSONDecodeError as e:
                raise ShortcutConfigError(
                    f"Settings file {path} is not valid JSON: {e}",
                    {'path': path, 'reason': str(e)}
                ) from e

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the settings to JSON-compatible data."""
        block: List[Dict[str, Any]] = []
        for shortcut in self.block_shortcuts:
            entry: Dict[str, Any] = {"pattern": shortcut.pattern.pattern, "type": shortcut.block_type}
            if shortcut.container_type is not None:
                entry["containerType"] = shortcut.container_type

            block.append(entry)

        return {
            "trigger": self.trigger,
            "shortcuts": {
                "block": block,
                "inline": [
                    {"pattern": shortcut.pattern.pattern, "kind": shortcut.kind.value}
                    for shortcut in self.inline_shortcuts
                ],
            },
        }

    def save(self, path: str) -> None:
        """Save settings to a JSON file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
