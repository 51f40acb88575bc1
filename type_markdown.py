#!/usr/bin/env python3
"""Type text through the auto-markdown engine and print the resulting document."""

import argparse
import logging
import sys
sys.path.insert(0, 'src')

from automarkdown import AutoMarkdown, AutoMarkdownSettings
from richtext import RichTextEditor, RichTextPrinter

# The keystrokes to type; "\n" splits a block and "\b" is a backspace
default_keystrokes = (
    "# Developer installation\n"
    "\b> See [Getting Started](https://github.com/m6r-ai/getting-started-with-metaphor) for a guide\n"
    "\b1. Create and activate a **virtual environment**\n"
    "Install in *development* mode with `pip install -e .`"
)

parser = argparse.ArgumentParser(description="Type markdown shortcuts into an in-memory editor")
parser.add_argument("text", nargs="?", default=default_keystrokes, help="keystrokes to type")
parser.add_argument("--settings", help="JSON file holding shortcut tables")
parser.add_argument("--verbose", action="store_true", help="log each shortcut that applies")
args = parser.parse_args()

if args.verbose:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

engine = AutoMarkdown()
if args.settings:
    engine = AutoMarkdown.from_settings(AutoMarkdownSettings.load(args.settings))

editor = RichTextEditor()
engine.type_text(editor, args.text.replace("\\n", "\n").replace("\\b", "\b"))

# Print the document tree
printer = RichTextPrinter()
printer.visit(editor.document())
