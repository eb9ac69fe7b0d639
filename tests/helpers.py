"""Builders for solc-shaped AST and build-info JSON.

Tests describe contracts with these builders instead of running a compiler.
Every node gets a fresh id, so nodes built in one test can be mixed freely.
"""

import itertools
import json
from pathlib import Path

_ids = itertools.count(1)


def next_id() -> int:
    return next(_ids)


class SourceFile:
    """
    Accumulates source text and hands out ``start:length:index`` locations.

    Use it when a test needs documentation or initializers sliced from source:

        source = SourceFile("contracts/A.sol")
        fn = function("f", doc=source.doc("/// @notice Does f"))
        data = build_info_data([source_unit(source.path, [contract("A", [fn])])], [source])
    """

    def __init__(self, path: str = "contracts/Test.sol", index: int = 0):
        self.path = path
        self.index = index
        self.content = ""

    def add(self, text: str) -> str:
        start = len(self.content.encode("utf-8"))
        self.content += text + "\n"
        return f"{start}:{len(text.encode('utf-8'))}:{self.index}"

    def doc(self, comment: str) -> dict:
        """Documentation whose text only exists in the source file."""
        return {
            "id": next_id(),
            "nodeType": "StructuredDocumentation",
            "src": self.add(comment),
            "text": "",
        }


def doc(text: str) -> dict:
    """Documentation as solc stores it in ``documentation.text``."""
    return {"id": next_id(), "nodeType": "StructuredDocumentation", "src": "", "text": text}


def identifier_path(name: str, referenced_declaration: int | None = None) -> dict:
    return {
        "id": next_id(),
        "nodeType": "IdentifierPath",
        "src": "",
        "name": name,
        "referencedDeclaration": referenced_declaration,
    }


def identifier(name: str) -> dict:
    return {"id": next_id(), "nodeType": "Identifier", "src": "", "name": name}


def literal(value: str, kind: str = "number", subdenomination: str | None = None) -> dict:
    return {
        "id": next_id(),
        "nodeType": "Literal",
        "src": "",
        "kind": kind,
        "value": value,
        "subdenomination": subdenomination,
    }


def expression(src: str, node_type: str = "BinaryOperation") -> dict:
    """An expression that can only be rendered from source text."""
    return {"id": next_id(), "nodeType": node_type, "src": src}


def param(
    name: str,
    type_string: str,
    indexed: bool = False,
    storage_location: str = "default",
) -> dict:
    return {
        "id": next_id(),
        "nodeType": "VariableDeclaration",
        "src": "",
        "name": name,
        "typeDescriptions": {"typeString": type_string},
        "storageLocation": storage_location,
        "indexed": indexed,
        "visibility": "internal",
        "constant": False,
        "mutability": "mutable",
        "stateVariable": False,
    }


def parameter_list(params=()) -> dict:
    return {"id": next_id(), "nodeType": "ParameterList", "src": "", "parameters": list(params)}


def override_specifier(*names: str) -> dict:
    return {
        "id": next_id(),
        "nodeType": "OverrideSpecifier",
        "src": "",
        "overrides": [identifier_path(name) for name in names],
    }


def modifier_invocation(name: str, arguments: list | None = None) -> dict:
    return {
        "id": next_id(),
        "nodeType": "ModifierInvocation",
        "src": "",
        "modifierName": identifier_path(name),
        "arguments": arguments,
        "kind": "modifierInvocation",
    }


def function(
    name: str,
    params=(),
    returns=(),
    kind: str = "function",
    visibility: str = "external",
    state_mutability: str = "nonpayable",
    modifiers=(),
    virtual: bool = False,
    override: bool = False,
    base_functions: list[int] | None = None,
    selector: str | None = None,
    doc: dict | str | None = None,
) -> dict:
    return {
        "id": next_id(),
        "nodeType": "FunctionDefinition",
        "src": "",
        "name": name,
        "kind": kind,
        "visibility": visibility,
        "stateMutability": state_mutability,
        "parameters": parameter_list(params),
        "returnParameters": parameter_list(returns),
        "modifiers": list(modifiers),
        "virtual": virtual,
        "overrides": override_specifier() if override else None,
        "baseFunctions": base_functions,
        "functionSelector": selector,
        "documentation": doc,
        "implemented": True,
    }


def variable(
    name: str,
    type_string: str,
    visibility: str = "public",
    constant: bool = False,
    mutability: str | None = None,
    selector: str | None = None,
    base_functions: list[int] | None = None,
    override: bool = False,
    value: dict | None = None,
    doc: dict | None = None,
) -> dict:
    return {
        "id": next_id(),
        "nodeType": "VariableDeclaration",
        "src": "",
        "name": name,
        "typeDescriptions": {"typeString": type_string},
        "storageLocation": "default",
        "visibility": visibility,
        "constant": constant,
        "mutability": mutability or ("constant" if constant else "mutable"),
        "stateVariable": True,
        "functionSelector": selector,
        "baseFunctions": base_functions,
        "overrides": override_specifier() if override else None,
        "value": value,
        "documentation": doc,
    }


def event(name: str, params=(), anonymous: bool = False, doc: dict | None = None) -> dict:
    return {
        "id": next_id(),
        "nodeType": "EventDefinition",
        "src": "",
        "name": name,
        "parameters": parameter_list(params),
        "anonymous": anonymous,
        "documentation": doc,
    }


def error(name: str, params=(), doc: dict | None = None) -> dict:
    return {
        "id": next_id(),
        "nodeType": "ErrorDefinition",
        "src": "",
        "name": name,
        "parameters": parameter_list(params),
        "documentation": doc,
    }


def enum(name: str, members=(), doc: dict | None = None) -> dict:
    return {
        "id": next_id(),
        "nodeType": "EnumDefinition",
        "src": "",
        "name": name,
        "members": [
            {"id": next_id(), "nodeType": "EnumValue", "src": "", "name": member}
            for member in members
        ],
        "documentation": doc,
    }


def struct(name: str, members=(), doc: dict | None = None) -> dict:
    return {
        "id": next_id(),
        "nodeType": "StructDefinition",
        "src": "",
        "name": name,
        "members": list(members),
        "visibility": "public",
        "documentation": doc,
    }


def modifier(
    name: str,
    params=(),
    virtual: bool = False,
    override: bool = False,
    base_modifiers: list[int] | None = None,
    doc: dict | None = None,
) -> dict:
    return {
        "id": next_id(),
        "nodeType": "ModifierDefinition",
        "src": "",
        "name": name,
        "parameters": parameter_list(params),
        "visibility": "internal",
        "virtual": virtual,
        "overrides": override_specifier() if override else None,
        "baseModifiers": base_modifiers,
        "documentation": doc,
    }


def using_for(
    library: str | None = None,
    type_string: str | None = None,
    functions=(),
    is_global: bool = False,
) -> dict:
    node = {
        "id": next_id(),
        "nodeType": "UsingForDirective",
        "src": "",
        "global": is_global,
    }
    if library is not None:
        node["libraryName"] = identifier_path(library)
    else:
        node["functionList"] = [{"function": identifier_path(f)} for f in functions]
    if type_string is not None:
        node["typeName"] = {
            "id": next_id(),
            "nodeType": "ElementaryTypeName",
            "src": "",
            "name": type_string,
            "typeDescriptions": {"typeString": type_string},
        }
    return node


def contract(
    name: str,
    nodes=(),
    kind: str = "contract",
    abstract: bool = False,
    bases=(),
    doc: dict | str | None = None,
) -> dict:
    return {
        "id": next_id(),
        "nodeType": "ContractDefinition",
        "src": "",
        "name": name,
        "canonicalName": name,
        "contractKind": kind,
        "abstract": abstract,
        "baseContracts": [
            {
                "id": next_id(),
                "nodeType": "InheritanceSpecifier",
                "src": "",
                "baseName": identifier_path(base),
            }
            for base in bases
        ],
        "nodes": list(nodes),
        "documentation": doc,
    }


def source_unit(path: str, nodes=(), license: str | None = "MIT") -> dict:
    return {
        "id": next_id(),
        "nodeType": "SourceUnit",
        "src": "",
        "absolutePath": path,
        "license": license,
        "nodes": [
            {"id": next_id(), "nodeType": "PragmaDirective", "src": "", "literals": ["solidity"]},
            *nodes,
        ],
    }


def build_info_data(units, files=(), contracts: dict | None = None) -> dict:
    """Assemble a build-info; source ids follow the order of ``units``."""
    contents = {f.path: f.content for f in files}
    return {
        "_format": "hh-sol-build-info-1",
        "solcVersion": "0.8.20",
        "input": {
            "language": "Solidity",
            "sources": {
                unit["absolutePath"]: {"content": contents.get(unit["absolutePath"], "")}
                for unit in units
            },
        },
        "output": {
            "sources": {
                unit["absolutePath"]: {"id": i, "ast": unit} for i, unit in enumerate(units)
            },
            "contracts": contracts or {},
        },
    }


def write_build_info(directory: Path, name: str, data: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.json"
    path.write_text(json.dumps(data))
    return path


def token_project() -> dict:
    """
    A two-file project: ``IToken`` and a ``Token`` implementing it.

    Documentation is carried in ``documentation.text`` the way solc emits it.
    """
    interface_transfer = function(
        "transfer",
        [param("to", "address"), param("amount", "uint256")],
        [param("", "bool")],
        selector="a9059cbb",
        virtual=True,
        doc=doc(
            "@notice Moves `amount` tokens to `to`\n"
            " @param to The recipient\n"
            " @param amount The amount to move\n"
            " @return Whether the transfer succeeded"
        ),
    )
    transfer_event = event(
        "Transfer",
        [
            param("from", "address", indexed=True),
            param("to", "address", indexed=True),
            param("value", "uint256"),
        ],
        doc=doc("@notice Emitted on every transfer\n @param from Sender\n @param to Recipient"),
    )
    interface = contract("IToken", [transfer_event, interface_transfer], kind="interface")

    token = contract(
        "Token",
        [
            using_for(library="SafeMath", type_string="uint256"),
            enum(
                "State",
                ["Active", "Paused"],
                doc=doc("@notice Lifecycle\n @param Active Running\n @param Paused Halted"),
            ),
            error(
                "InsufficientBalance",
                [param("available", "uint256"), param("required", "uint256")],
                doc=doc("@notice Balance too low\n @param available Current balance"),
            ),
            variable(
                "DECIMALS",
                "uint8",
                constant=True,
                selector="2e0f2625",
                value=literal("18"),
                doc=doc("@notice Decimal places"),
            ),
            variable(
                "balanceOf",
                "mapping(address => uint256)",
                selector="70a08231",
                doc=doc("@notice Balances by holder\n @return The balance"),
            ),
            variable("_owner", "address", visibility="private"),
            modifier("onlyOwner", doc=doc("@dev Restricts to the owner")),
            function(
                "transfer",
                [param("to", "address"), param("amount", "uint256")],
                [param("", "bool")],
                selector="a9059cbb",
                override=True,
                base_functions=[interface_transfer["id"]],
            ),
            function("mint", [param("to", "address")], modifiers=[modifier_invocation("onlyOwner")]),
            function("_burn", [param("amount", "uint256")], visibility="internal"),
        ],
        bases=["IToken"],
        doc=doc("@title Simple token\n @author Alice\n @notice A token for tests"),
    )

    units = [
        source_unit("contracts/interfaces/IToken.sol", [interface]),
        source_unit("contracts/Token.sol", [token], license="MIT"),
    ]
    contracts = {
        "contracts/interfaces/IToken.sol": {"IToken": {"abi": []}},
        "contracts/Token.sol": {"Token": {"abi": []}},
    }
    return build_info_data(units, contracts=contracts)
