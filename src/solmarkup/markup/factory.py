"""Markdown block emission."""

from __future__ import annotations

DEFAULT_CODE_LANGUAGE = "solidity"

_MIN_COLUMN_WIDTH = 4  # Fits the ":---" alignment marker


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


class MarkdownFactory:
    """Collect document blocks and render them as Markdown.

    Blocks are rendered in the order they were added, separated by one blank line.
    """

    def __init__(self):
        self._blocks: list[str] = []

    def add_heading(self, text: str, level: int = 2) -> None:
        if not 1 <= level <= 6:
            raise ValueError(f"Invalid heading level: {level}")
        self._blocks.append(f"{'#' * level} {text}")

    def add_paragraph(self, text: str) -> None:
        self._blocks.append(text)

    def add_plain_text(self, text: str) -> None:
        """Add free text; whitespace-only text adds nothing."""
        if text.strip():
            self._blocks.append(text)

    def add_list(self, items: list[str], ordered: bool = False) -> None:
        if not items:
            return
        if ordered:
            lines = [f"{i}. {item}" for i, item in enumerate(items, start=1)]
        else:
            lines = [f"- {item}" for item in items]
        self._blocks.append("\n".join(lines))

    def add_table(self, headers: list[str], rows: list[list[str]], pretty: bool = True) -> None:
        """Add a left-aligned table.

        Raises:
            ValueError: If a row does not have one cell per header.
        """
        for row in rows:
            if len(row) != len(headers):
                raise ValueError(
                    f"Expected {len(headers)} columns, got {len(row)} in row {row!r}"
                )

        cells = [[_escape_cell(c) for c in headers]]
        cells.extend([_escape_cell(c) for c in row] for row in rows)

        if pretty:
            widths = [
                max(_MIN_COLUMN_WIDTH, *(len(line[i]) for line in cells))
                for i in range(len(headers))
            ]
        else:
            widths = [_MIN_COLUMN_WIDTH] * len(headers)

        def render_row(line: list[str]) -> str:
            if pretty:
                line = [cell.ljust(width) for cell, width in zip(line, widths)]
            return "| " + " | ".join(line) + " |"

        separator = "| " + " | ".join(":" + "-" * (width - 1) for width in widths) + " |"
        lines = [render_row(cells[0]), separator]
        lines.extend(render_row(line) for line in cells[1:])
        self._blocks.append("\n".join(lines))

    def add_code_block(self, lines: list[str], language: str = DEFAULT_CODE_LANGUAGE) -> None:
        body = "\n".join(lines)
        self._blocks.append(f"```{language}\n{body}\n```")

    def render(self) -> str:
        if not self._blocks:
            return ""
        return "\n\n".join(self._blocks) + "\n"
