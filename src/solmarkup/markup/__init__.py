"""solmarkup.markup - Markdown rendering of contract documentation."""

from solmarkup.markup.factory import MarkdownFactory
from solmarkup.markup.generator import MarkdownGenerator

__all__ = [
    "MarkdownFactory",
    "MarkdownGenerator",
]
