"""Per-contract documentation: navigation, signatures and NatSpec combined."""

from __future__ import annotations

import logging
from typing import Protocol

from solmarkup.ast.index import (
    collect_declarations,
    find_contract,
    is_externally_visible,
    select_functions,
)
from solmarkup.ast.nodes import (
    ContractDefinition,
    EnumDefinition,
    ErrorDefinition,
    EventDefinition,
    FunctionDefinition,
    ModifierDefinition,
    Node,
    StructDefinition,
    UsingForDirective,
    VariableDeclaration,
)
from solmarkup.base import MarkupError, NatSpecError, UnsupportedNodeKindError
from solmarkup.buildinfo import BuildInfo
from solmarkup.models import ContractInfo, Documentation, DocumentationBlock, NatSpec
from solmarkup.natspec.compiled import CompiledNatSpecResolver
from solmarkup.natspec.resolver import NatSpecResolver
from solmarkup.signatures import (
    DEFAULT_MAX_WIDTH,
    build_signature,
    build_title,
    format_signature,
)

log = logging.getLogger(__name__)

DEFAULT_LICENSE = "UNLICENSED"

CONTRACT_BLOCK_NAME = ""
USING_FOR_BLOCK_NAME = "Using-for directives info"
ENUMS_BLOCK_NAME = "Enums info"
STRUCTS_BLOCK_NAME = "Structs info"
EVENTS_BLOCK_NAME = "Events info"
ERRORS_BLOCK_NAME = "Errors info"
CONSTANTS_BLOCK_NAME = "Constants info"
STATE_VARIABLES_BLOCK_NAME = "State variables info"
MODIFIERS_BLOCK_NAME = "Modifiers info"
FUNCTIONS_BLOCK_NAME = "Functions info"

DOC_SOURCES = ("ast", "compiler")


class Resolver(Protocol):
    def resolve(self, node: Node) -> NatSpec: ...


def _output_count(node: Node) -> int:
    if isinstance(node, FunctionDefinition):
        return len(node.return_parameters.parameters)
    if isinstance(node, VariableDeclaration):
        return 1
    return 0


class ContractParser:
    """Build ``ContractInfo`` records for contracts of one build.

    Example:
        parser = ContractParser(BuildInfo.from_file(path))
        info = parser.parse_contract_info("contracts/Token.sol", "Token")

    Args:
        build_info: The compiled build the contracts come from.
        doc_source: "ast" to parse doc comments, "compiler" to read devdoc/userdoc.
        strict: Report unmatched @param/@return tags instead of dropping them.
        max_signature_width: Display signatures wider than this are wrapped.
    """

    def __init__(
        self,
        build_info: BuildInfo,
        doc_source: str = "ast",
        strict: bool = False,
        max_signature_width: int = DEFAULT_MAX_WIDTH,
    ):
        if doc_source not in DOC_SOURCES:
            raise ValueError(f"Unknown doc source: {doc_source}")

        self.build_info = build_info
        self.doc_source = doc_source
        self.max_signature_width = max_signature_width
        self._ast_resolver = NatSpecResolver(build_info.index, build_info.source_text, strict)

    def parse_contract_info(self, source: str, name: str) -> ContractInfo:
        """Document every retained declaration of one contract.

        Raises:
            ContractNotFoundError: If ``source`` declares no contract ``name``.
            BuildInfoError: If ``source`` is not part of the build.
        """
        unit = self.build_info.source_unit(source)
        contract = find_contract(unit, name)

        resolver: Resolver
        if self.doc_source == "compiler":
            resolver = CompiledNatSpecResolver(self.build_info.contract_output(source, name))
        else:
            resolver = self._ast_resolver

        variables = collect_declarations(contract, VariableDeclaration)
        groups: list[tuple[str, list[Node]]] = [
            (CONTRACT_BLOCK_NAME, [contract]),
            (USING_FOR_BLOCK_NAME, collect_declarations(contract, UsingForDirective)),
            (ENUMS_BLOCK_NAME, collect_declarations(contract, EnumDefinition)),
            (STRUCTS_BLOCK_NAME, collect_declarations(contract, StructDefinition)),
            (EVENTS_BLOCK_NAME, collect_declarations(contract, EventDefinition)),
            (ERRORS_BLOCK_NAME, collect_declarations(contract, ErrorDefinition)),
            (
                CONSTANTS_BLOCK_NAME,
                [v for v in variables if v.constant and is_externally_visible(v)],
            ),
            (
                STATE_VARIABLES_BLOCK_NAME,
                [v for v in variables if not v.constant and is_externally_visible(v)],
            ),
            (MODIFIERS_BLOCK_NAME, collect_declarations(contract, ModifierDefinition)),
            (FUNCTIONS_BLOCK_NAME, select_functions(contract)),
        ]

        info = ContractInfo(
            name=contract.name,
            source=source,
            license=unit.license or DEFAULT_LICENSE,
            is_abstract=contract.abstract,
            contract_kind=contract.contract_kind,
        )
        for block_name, nodes in groups:
            block = DocumentationBlock(block_name)
            for node in nodes:
                documentation = self._document(node, resolver, info)
                if documentation is not None:
                    block.documentation.append(documentation)
            info.blocks.append(block)

        return info

    def _document(
        self, node: Node, resolver: Resolver, info: ContractInfo
    ) -> Documentation | None:
        label = self._label(node, info)
        try:
            signature = build_signature(node, self.build_info.source_text)
            display = format_signature(
                node, self.build_info.source_text, self.max_signature_width
            )
        except UnsupportedNodeKindError as e:
            log.warning("Skipping %s: %s", label, e)
            return None

        try:
            natspec = resolver.resolve(node)
        except NatSpecError as e:
            for error in e.errors:
                log.warning("%s: %s", label, error)
                info.issues.append(f"{label}: {error}")
            natspec = e.natspec or NatSpec()
        except MarkupError as e:
            log.warning("Cannot resolve documentation of %s: %s", label, e)
            info.issues.append(f"{label}: {e}")
            natspec = NatSpec()

        return Documentation(
            title=build_title(node),
            signature=signature,
            display_signature=display,
            natspec=natspec,
            node_type=node.node_type,
            output_count=_output_count(node),
        )

    @staticmethod
    def _label(node: Node, info: ContractInfo) -> str:
        if isinstance(node, ContractDefinition):
            return info.name
        name = getattr(node, "name", "") or getattr(node, "kind", "") or node.node_type
        return f"{info.name}.{name}"
