"""Read-only models of the solc AST declaration kinds.

Only the fields the documentation pipeline reads are modelled; everything else
in the compiler output is ignored. Node kinds without a model (pragmas, imports,
function bodies, user-defined value types, ...) validate into ``OtherNode`` so a
newer compiler never breaks parsing.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel


class Node(BaseModel):
    """Common shape of every AST node: a build-unique id and a ``src`` span."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: int
    node_type: str
    src: str = ""


class OtherNode(Node):
    """Any node kind the pipeline does not look into."""


class StructuredDocumentation(Node):
    text: str = ""


# Older compilers emit contract-level documentation as a bare string.
DocComment = Union[StructuredDocumentation, str, None]


class TypeDescriptions(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    type_string: str | None = None
    type_identifier: str | None = None


class Expression(Node):
    """Any expression; only identifiers and literals are rendered structurally."""

    name: str | None = None  # Identifier
    value: str | None = None  # Literal
    kind: str | None = None  # Literal: "number" | "bool" | "string" | ...
    subdenomination: str | None = None
    type_descriptions: TypeDescriptions = Field(default_factory=TypeDescriptions)


class IdentifierPath(Node):
    """IdentifierPath or UserDefinedTypeName (both carry ``name``)."""

    name: str = ""
    referenced_declaration: int | None = None


class TypeName(Node):
    name: str | None = None
    type_descriptions: TypeDescriptions = Field(default_factory=TypeDescriptions)


class OverrideSpecifier(Node):
    overrides: list[IdentifierPath] = Field(default_factory=list)


class VariableDeclaration(Node):
    name: str = ""
    type_descriptions: TypeDescriptions = Field(default_factory=TypeDescriptions)
    storage_location: str = "default"
    indexed: bool = False
    visibility: str = "internal"
    constant: bool = False
    mutability: str = "mutable"
    state_variable: bool = False
    function_selector: str | None = None
    base_functions: list[int] | None = None
    overrides: OverrideSpecifier | None = None
    documentation: DocComment = None
    value: Expression | None = None
    scope: int | None = None

    @property
    def type_string(self) -> str:
        return self.type_descriptions.type_string or ""


class ParameterList(Node):
    parameters: list[VariableDeclaration] = Field(default_factory=list)


class ModifierInvocation(Node):
    modifier_name: IdentifierPath
    arguments: list[Expression] | None = None
    kind: str | None = None


class FunctionDefinition(Node):
    name: str = ""
    kind: str = "function"  # function | constructor | fallback | receive | freeFunction
    visibility: str = "public"
    state_mutability: str = "nonpayable"
    parameters: ParameterList
    return_parameters: ParameterList
    modifiers: list[ModifierInvocation] = Field(default_factory=list)
    virtual: bool = False
    overrides: OverrideSpecifier | None = None
    base_functions: list[int] | None = None
    function_selector: str | None = None
    documentation: DocComment = None
    scope: int | None = None


class EventDefinition(Node):
    name: str
    parameters: ParameterList
    anonymous: bool = False
    event_selector: str | None = None
    documentation: DocComment = None


class ErrorDefinition(Node):
    name: str
    parameters: ParameterList
    error_selector: str | None = None
    documentation: DocComment = None


class EnumValue(Node):
    name: str


class EnumDefinition(Node):
    name: str
    canonical_name: str | None = None
    members: list[EnumValue] = Field(default_factory=list)
    documentation: DocComment = None


class StructDefinition(Node):
    name: str
    canonical_name: str | None = None
    members: list[VariableDeclaration] = Field(default_factory=list)
    visibility: str = "public"
    documentation: DocComment = None


class ModifierDefinition(Node):
    name: str
    parameters: ParameterList
    visibility: str = "internal"
    virtual: bool = False
    overrides: OverrideSpecifier | None = None
    base_modifiers: list[int] | None = None
    documentation: DocComment = None


class UsingForFunction(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    function: IdentifierPath | None = None
    definition: IdentifierPath | None = None
    operator: str | None = None


class UsingForDirective(Node):
    library_name: IdentifierPath | None = None
    function_list: list[UsingForFunction] | None = None
    type_name: TypeName | None = None
    is_global: bool = Field(default=False, alias="global")


class InheritanceSpecifier(Node):
    base_name: IdentifierPath


MEMBER_KINDS = frozenset(
    {
        "FunctionDefinition",
        "VariableDeclaration",
        "EventDefinition",
        "ErrorDefinition",
        "EnumDefinition",
        "StructDefinition",
        "ModifierDefinition",
        "UsingForDirective",
    }
)


def _member_tag(value: Any) -> str:
    kind = value.get("nodeType") if isinstance(value, dict) else getattr(value, "node_type", None)
    return kind if kind in MEMBER_KINDS else "Other"


MemberNode = Annotated[
    Union[
        Annotated[FunctionDefinition, Tag("FunctionDefinition")],
        Annotated[VariableDeclaration, Tag("VariableDeclaration")],
        Annotated[EventDefinition, Tag("EventDefinition")],
        Annotated[ErrorDefinition, Tag("ErrorDefinition")],
        Annotated[EnumDefinition, Tag("EnumDefinition")],
        Annotated[StructDefinition, Tag("StructDefinition")],
        Annotated[ModifierDefinition, Tag("ModifierDefinition")],
        Annotated[UsingForDirective, Tag("UsingForDirective")],
        Annotated[OtherNode, Tag("Other")],
    ],
    Discriminator(_member_tag),
]


class ContractDefinition(Node):
    name: str
    canonical_name: str | None = None
    contract_kind: str = "contract"  # contract | interface | library
    abstract: bool = False
    base_contracts: list[InheritanceSpecifier] = Field(default_factory=list)
    linearized_base_contracts: list[int] = Field(default_factory=list)
    nodes: list[MemberNode] = Field(default_factory=list)
    documentation: DocComment = None


def _unit_tag(value: Any) -> str:
    kind = value.get("nodeType") if isinstance(value, dict) else getattr(value, "node_type", None)
    return "ContractDefinition" if kind == "ContractDefinition" else _member_tag(value)


UnitNode = Annotated[
    Union[
        Annotated[ContractDefinition, Tag("ContractDefinition")],
        Annotated[FunctionDefinition, Tag("FunctionDefinition")],
        Annotated[VariableDeclaration, Tag("VariableDeclaration")],
        Annotated[EventDefinition, Tag("EventDefinition")],
        Annotated[ErrorDefinition, Tag("ErrorDefinition")],
        Annotated[EnumDefinition, Tag("EnumDefinition")],
        Annotated[StructDefinition, Tag("StructDefinition")],
        Annotated[ModifierDefinition, Tag("ModifierDefinition")],
        Annotated[UsingForDirective, Tag("UsingForDirective")],
        Annotated[OtherNode, Tag("Other")],
    ],
    Discriminator(_unit_tag),
]


class SourceUnit(Node):
    absolute_path: str = ""
    license: str | None = None
    nodes: list[UnitNode] = Field(default_factory=list)


# The closed set of declaration kinds the pipeline documents.
Declaration = Union[
    FunctionDefinition,
    VariableDeclaration,
    EventDefinition,
    ErrorDefinition,
    EnumDefinition,
    StructDefinition,
    ModifierDefinition,
    UsingForDirective,
    ContractDefinition,
]
