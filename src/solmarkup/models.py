"""Data models for resolved contract documentation."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Param:
    """A documented parameter (or struct/enum member)."""

    name: str
    type: str | None  # None for enum members
    description: str


@dataclass
class Return:
    """A documented output, aligned with the declaration's return list."""

    name: str | None  # None for unnamed outputs
    type: str | None
    description: str


@dataclass
class NatSpec:
    """NatSpec fields resolved for one declaration."""

    title: str | None = None  # Contracts only
    author: str | None = None
    notice: str | None = None
    dev: str | None = None
    params: list[Param] = field(default_factory=list)
    returns: list[Return] = field(default_factory=list)
    custom: dict[str, str] = field(default_factory=dict)  # custom:<tag> -> text

    @property
    def is_empty(self) -> bool:
        return not (
            self.title
            or self.author
            or self.notice
            or self.dev
            or self.params
            or self.returns
            or self.custom
        )


@dataclass
class Documentation:
    """Everything rendered for one declaration."""

    title: str  # "transfer (0xa9059cbb)"
    signature: str  # Canonical one-line signature
    display_signature: str  # Possibly wrapped across lines
    natspec: NatSpec
    node_type: str  # "FunctionDefinition", "EventDefinition", ...
    output_count: int = 0  # Return parameters (functions), 1 for state variables


@dataclass
class DocumentationBlock:
    """Declarations of one kind, e.g. "Functions info"."""

    name: str
    documentation: list[Documentation] = field(default_factory=list)


@dataclass
class ContractInfo:
    """Per-contract result handed to the renderer."""

    name: str
    source: str
    license: str
    is_abstract: bool
    contract_kind: str  # "contract" | "interface" | "library"
    blocks: list[DocumentationBlock] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)  # Reported NatSpec problems

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source}:{self.name}"

    def all_documentation(self) -> list[Documentation]:
        return [doc for block in self.blocks for doc in block.documentation]


@dataclass
class ValidationResult:
    """Results from documentation validation."""

    errors: list[str] = field(default_factory=list)  # Strict runs fail if non-empty
    warnings: list[str] = field(default_factory=list)  # Printed but allowed
