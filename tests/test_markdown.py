"""
Markdown rendering tests.

Tests for:
- MarkdownFactory block emission
- MarkdownGenerator document layout
"""

import pytest

from solmarkup.markup import MarkdownFactory, MarkdownGenerator
from solmarkup.models import (
    ContractInfo,
    Documentation,
    DocumentationBlock,
    NatSpec,
    Param,
    Return,
)
from solmarkup.parser import ContractParser


def _doc(title, signature, natspec=None, node_type="FunctionDefinition", output_count=0):
    return Documentation(
        title=title,
        signature=signature,
        display_signature=signature,
        natspec=natspec or NatSpec(),
        node_type=node_type,
        output_count=output_count,
    )


class TestMarkdownFactory:
    """Test individual block kinds."""

    def test_headings(self):
        factory = MarkdownFactory()
        factory.add_heading("Title", 1)
        factory.add_heading("Section")
        assert factory.render() == "# Title\n\n## Section\n"

    @pytest.mark.parametrize("level", [0, 7])
    def test_invalid_heading_level(self, level):
        with pytest.raises(ValueError, match="Invalid heading level"):
            MarkdownFactory().add_heading("x", level)

    def test_empty_plain_text_is_skipped(self):
        factory = MarkdownFactory()
        factory.add_plain_text("")
        factory.add_plain_text("  \n")
        factory.add_paragraph("kept")
        assert factory.render() == "kept\n"

    def test_lists(self):
        factory = MarkdownFactory()
        factory.add_list(["a", "b"])
        factory.add_list(["c"], ordered=True)
        factory.add_list([])
        assert factory.render() == "- a\n- b\n\n1. c\n"

    def test_code_block(self):
        factory = MarkdownFactory()
        factory.add_code_block(["function f(", "\tuint256 a", ");"])
        assert factory.render() == "```solidity\nfunction f(\n\tuint256 a\n);\n```\n"

    def test_pretty_table(self):
        factory = MarkdownFactory()
        factory.add_table(["Name", "Description"], [["a", "x | y"]])
        assert factory.render() == (
            "| Name | Description |\n"
            "| :--- | :---------- |\n"
            "| a    | x \\| y      |\n"
        )

    def test_compact_table(self):
        factory = MarkdownFactory()
        factory.add_table(["Name", "Type"], [["amount", "uint256"]], pretty=False)
        assert factory.render() == "| Name | Type |\n| :--- | :--- |\n| amount | uint256 |\n"

    def test_table_column_mismatch(self):
        with pytest.raises(ValueError, match="Expected 2 columns, got 1"):
            MarkdownFactory().add_table(["Name", "Type"], [["only"]])

    def test_empty_document(self):
        assert MarkdownFactory().render() == ""


class TestMarkdownGenerator:
    """Test the contract document layout."""

    def test_full_document(self):
        info = ContractInfo(
            name="Vault",
            source="contracts/Vault.sol",
            license="MIT",
            is_abstract=True,
            contract_kind="contract",
            blocks=[
                DocumentationBlock(
                    "",
                    [
                        _doc(
                            "",
                            "abstract contract Vault",
                            NatSpec(notice="Holds funds"),
                            node_type="ContractDefinition",
                        )
                    ],
                ),
                DocumentationBlock("Events info"),
                DocumentationBlock(
                    "Functions info",
                    [
                        _doc(
                            "deposit (0xb6b55f25)",
                            "function deposit(uint256 amount) external returns (uint256 shares)",
                            NatSpec(
                                notice="Deposits",
                                dev="Rounds down",
                                params=[Param("amount", "uint256", "Amount in")],
                                returns=[Return("shares", "uint256", "Shares out")],
                                custom={"since": "1.0"},
                            ),
                            output_count=1,
                        )
                    ],
                ),
            ],
        )
        assert MarkdownGenerator().generate(info) == (
            "# Vault\n"
            "\n"
            "## Abstract Contract Description\n"
            "\n"
            "License: MIT\n"
            "\n"
            "```solidity\n"
            "abstract contract Vault\n"
            "```\n"
            "\n"
            "Holds funds\n"
            "\n"
            "## Functions info\n"
            "\n"
            "### deposit (0xb6b55f25)\n"
            "\n"
            "```solidity\n"
            "function deposit(uint256 amount) external returns (uint256 shares)\n"
            "```\n"
            "\n"
            "Deposits\n"
            "_Rounds down_\n"
            "since: 1.0\n"
            "\n"
            "Parameters:\n"
            "\n"
            "| Name   | Type    | Description |\n"
            "| :----- | :------ | :---------- |\n"
            "| amount | uint256 | Amount in   |\n"
            "\n"
            "Return values:\n"
            "\n"
            "| Name   | Type    | Description |\n"
            "| :----- | :------ | :---------- |\n"
            "| shares | uint256 | Shares out  |\n"
        )

    def _render(self, *documentation):
        info = ContractInfo(
            name="A",
            source="A.sol",
            license="MIT",
            is_abstract=False,
            contract_kind="library",
            blocks=[DocumentationBlock("Items", list(documentation))],
        )
        return MarkdownGenerator().generate(info)

    def test_kind_is_capitalised(self):
        assert "## Library Description" in self._render()

    def test_enum_members_use_two_columns(self):
        natspec = NatSpec(params=[Param("Active", None, "Running")])
        markdown = self._render(_doc("State", "enum State {\n\tActive\n}", natspec, "EnumDefinition"))
        assert "| Name   | Description |" in markdown
        assert "| Active | Running     |" in markdown

    def test_unnamed_returns_are_indexed(self):
        natspec = NatSpec(returns=[Return(None, "bool", "ok"), Return(None, "uint256", "n")])
        markdown = self._render(_doc("f", "function f() external returns (bool, uint256)", natspec))
        assert "| [0]  | bool    | ok          |" in markdown
        assert "| [1]  | uint256 | n           |" in markdown

    def test_author_comes_first(self):
        natspec = NatSpec(author="Alice", notice="Does things")
        assert "Author: Alice\nDoes things" in self._render(_doc("f", "function f()", natspec))

    def test_undocumented_declaration_has_no_text(self):
        markdown = self._render(_doc("f", "function f() external"))
        assert markdown.endswith("### f\n\n```solidity\nfunction f() external\n```\n")

    def test_dev_lines_are_emphasized(self):
        """Prose lines of @dev are emphasized one by one; fenced code is left alone."""
        natspec = NatSpec(dev="Line one\nLine two\n```\nfunction g() {\n    return;\n}\n```")
        markdown = self._render(_doc("f", "function f()", natspec))
        assert "_Line one_\n_Line two_\n```\nfunction g() {\n    return;\n}\n```" in markdown


class TestEndToEnd:
    """Test rendering parsed contracts."""

    def test_token_document(self, token_build):
        info = ContractParser(token_build).parse_contract_info("contracts/Token.sol", "Token")
        markdown = MarkdownGenerator().generate(info)
        assert markdown.startswith("# Token\n\n## Contract Description\n\nLicense: MIT\n")
        assert "Author: Alice\nSimple token\nA token for tests" in markdown
        assert "## Events info" not in markdown
        assert "### transfer (0xa9059cbb)" in markdown
        assert markdown.index("## Constants info") < markdown.index("## State variables info")
        assert "_burn" not in markdown

