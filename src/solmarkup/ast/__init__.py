"""solmarkup.ast - typed solc AST models and navigation."""

from solmarkup.ast.index import (
    AstIndex,
    collect_declarations,
    find_contract,
    is_externally_visible,
    select_functions,
)
from solmarkup.ast.nodes import (
    ContractDefinition,
    Declaration,
    EnumDefinition,
    ErrorDefinition,
    EventDefinition,
    FunctionDefinition,
    ModifierDefinition,
    SourceUnit,
    StructDefinition,
    UsingForDirective,
    VariableDeclaration,
)

__all__ = [
    "AstIndex",
    "ContractDefinition",
    "Declaration",
    "EnumDefinition",
    "ErrorDefinition",
    "EventDefinition",
    "FunctionDefinition",
    "ModifierDefinition",
    "SourceUnit",
    "StructDefinition",
    "UsingForDirective",
    "VariableDeclaration",
    "collect_declarations",
    "find_contract",
    "is_externally_visible",
    "select_functions",
]
