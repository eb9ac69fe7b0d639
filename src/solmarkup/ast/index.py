"""Contract lookup, declaration enumeration and by-id dereference.

``AstIndex`` is built once per build-info and shared read-only by every
contract parsed from it: override and scope pointers are plain ids that may
lead into other source units.
"""

from __future__ import annotations

from typing import Iterable, Iterator, TypeVar

from solmarkup.ast.nodes import (
    ContractDefinition,
    EnumDefinition,
    FunctionDefinition,
    Node,
    SourceUnit,
    StructDefinition,
    VariableDeclaration,
)
from solmarkup.base import BuildInfoError, ContractNotFoundError

N = TypeVar("N", bound=Node)


class AstIndex:
    """Id -> node lookup over every source unit of one build."""

    def __init__(self, source_units: Iterable[SourceUnit]):
        self._nodes: dict[int, Node] = {}
        self._owners: dict[int, ContractDefinition] = {}

        # Explicit stack: (node, enclosing contract)
        stack: list[tuple[Node, ContractDefinition | None]] = [
            (unit, None) for unit in source_units
        ]
        while stack:
            node, owner = stack.pop()
            self._nodes[node.id] = node
            if owner is not None:
                self._owners[node.id] = owner

            if isinstance(node, SourceUnit):
                stack.extend((child, None) for child in node.nodes)
            elif isinstance(node, ContractDefinition):
                stack.extend((child, node) for child in node.nodes)
            elif isinstance(node, FunctionDefinition):
                for param in (*node.parameters.parameters, *node.return_parameters.parameters):
                    stack.append((param, owner))
            elif isinstance(node, (StructDefinition, EnumDefinition)):
                stack.extend((member, owner) for member in node.members)
            elif hasattr(node, "parameters"):
                stack.extend((param, owner) for param in node.parameters.parameters)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: int) -> Node | None:
        return self._nodes.get(node_id)

    def dereference(self, node_id: int, kind: type[N] = Node) -> N:
        """Follow an id to its node, checking the expected node class.

        Raises:
            BuildInfoError: If the id is unknown or points at another kind.
        """
        node = self._nodes.get(node_id)
        if node is None:
            raise BuildInfoError(f"No AST node with id {node_id}")
        if not isinstance(node, kind):
            raise BuildInfoError(
                f"AST node {node_id} is a {node.node_type}, expected {kind.__name__}"
            )
        return node

    def owner_of(self, node: Node) -> ContractDefinition | None:
        """Return the contract a member is declared in (None for free declarations)."""
        return self._owners.get(node.id)


def find_contract(unit: SourceUnit, name: str) -> ContractDefinition:
    """Find a contract, interface or library declared at the top of a source unit."""
    for node in unit.nodes:
        if isinstance(node, ContractDefinition) and node.name == name:
            return node
    raise ContractNotFoundError(unit.absolute_path, name)


def iter_declarations(contract: ContractDefinition, kind: type[N]) -> Iterator[N]:
    """Yield the contract's members of one kind, in declaration order."""
    for node in contract.nodes:
        if isinstance(node, kind):
            yield node


def collect_declarations(contract: ContractDefinition, kind: type[N]) -> list[N]:
    return list(iter_declarations(contract, kind))


def is_externally_visible(node: FunctionDefinition | VariableDeclaration) -> bool:
    return node.visibility in ("public", "external")


def is_internal(node: FunctionDefinition | VariableDeclaration) -> bool:
    return node.visibility == "internal"


def is_private_or_internal(node: FunctionDefinition | VariableDeclaration) -> bool:
    return node.visibility == "private" or is_internal(node)


def select_functions(contract: ContractDefinition) -> list[FunctionDefinition]:
    """Functions that make up the contract's documented surface.

    Libraries consisting only of private/internal functions are linked
    statically, so their internal functions are the callable surface.
    """
    functions = collect_declarations(contract, FunctionDefinition)

    if contract.contract_kind == "library" and all(
        is_private_or_internal(fn) for fn in functions
    ):
        return [fn for fn in functions if is_internal(fn)]

    return [fn for fn in functions if is_externally_visible(fn)]
