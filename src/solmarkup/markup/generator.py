"""Render a contract's resolved documentation as Markdown."""

from __future__ import annotations

from solmarkup.markup.factory import MarkdownFactory
from solmarkup.models import (
    ContractInfo,
    Documentation,
    DocumentationBlock,
    NatSpec,
    Param,
    Return,
)
from solmarkup.natspec.comments import CODE_FENCE

CONTRACT_NAME_LEVEL = 1
BLOCK_NAME_LEVEL = 2
DECLARATION_TITLE_LEVEL = 3


def _description_header(info: ContractInfo) -> str:
    kind = info.contract_kind[:1].upper() + info.contract_kind[1:]
    prefix = "Abstract " if info.is_abstract else ""
    return f"{prefix}{kind} Description"


def _emphasize_lines(text: str) -> str:
    """Wrap each prose line in `_` markers; fenced code and blank lines stay as is."""
    lines = []
    in_code_block = False
    for line in text.split("\n"):
        if CODE_FENCE in line:
            in_code_block = not in_code_block
        elif not in_code_block and line.strip():
            line = f"_{line.strip()}_"
        lines.append(line)
    return "\n".join(lines)


class MarkdownGenerator:
    """Turn a ``ContractInfo`` into one Markdown document.

    Example:
        markdown = MarkdownGenerator().generate(parser.parse_contract_info(source, name))
    """

    def generate(self, info: ContractInfo) -> str:
        factory = MarkdownFactory()

        factory.add_heading(info.name, CONTRACT_NAME_LEVEL)
        factory.add_heading(_description_header(info), BLOCK_NAME_LEVEL)
        factory.add_paragraph(f"License: {info.license}")

        for block in info.blocks:
            self._block(factory, block)

        return factory.render()

    def _block(self, factory: MarkdownFactory, block: DocumentationBlock) -> None:
        if not block.documentation:
            return

        # The contract's own record has no block heading
        if block.name:
            factory.add_heading(block.name, BLOCK_NAME_LEVEL)

        for documentation in block.documentation:
            self._declaration(factory, documentation)

    def _declaration(self, factory: MarkdownFactory, documentation: Documentation) -> None:
        if documentation.title:
            factory.add_heading(documentation.title, DECLARATION_TITLE_LEVEL)
        if documentation.display_signature:
            factory.add_code_block([documentation.display_signature])
        self._natspec(factory, documentation.natspec)

    def _natspec(self, factory: MarkdownFactory, natspec: NatSpec) -> None:
        lines = []
        if natspec.author:
            lines.append(f"Author: {natspec.author}")
        if natspec.title:
            lines.append(natspec.title)
        if natspec.notice:
            lines.append(natspec.notice)
        if natspec.dev:
            lines.append(_emphasize_lines(natspec.dev))
        for key, value in natspec.custom.items():
            lines.append(f"{key}: {value}")
        factory.add_plain_text("\n".join(lines))

        if natspec.params:
            factory.add_paragraph("Parameters:")
            if all(param.type is None for param in natspec.params):
                # Enum members carry no type
                factory.add_table(
                    ["Name", "Description"],
                    [[param.name, param.description] for param in natspec.params],
                )
            else:
                factory.add_table(["Name", "Type", "Description"], self._rows(natspec.params))

        if natspec.returns:
            factory.add_paragraph("Return values:")
            factory.add_table(["Name", "Type", "Description"], self._rows(natspec.returns))

    @staticmethod
    def _rows(elements: list[Param] | list[Return]) -> list[list[str]]:
        return [
            [element.name or f"[{i}]", element.type or "", element.description]
            for i, element in enumerate(elements)
        ]
