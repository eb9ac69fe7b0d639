"""Exception hierarchy shared by every solmarkup stage.

Failures are scoped: a missing contract aborts one contract, an unsupported
declaration aborts one declaration, and NatSpec problems are reported while the
rest of the declaration's documentation is kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solmarkup.models import NatSpec


class MarkupError(Exception):
    """Base exception for solmarkup operations."""


class BuildInfoError(MarkupError):
    """Raised when a build artifact is unreadable or references unknown nodes."""


class ConfigError(MarkupError):
    """Raised when the markup configuration fails validation."""


class ContractNotFoundError(MarkupError):
    """Raised when a source unit has no contract with the requested name."""

    def __init__(self, source: str, name: str):
        super().__init__(f"Contract {name} not found in {source}")
        self.source = source
        self.name = name


class UnsupportedNodeKindError(MarkupError):
    """Raised when a signature is requested for a node kind with no builder."""

    def __init__(self, node_type: str):
        super().__init__(f"Unknown node type {node_type}")
        self.node_type = node_type


class NatSpecError(MarkupError):
    """Base exception for documentation problems worth surfacing to the author.

    The resolver keeps going after the first problem, so by the time this is
    raised ``natspec`` holds everything that could still be resolved and
    ``errors`` lists every problem found for the declaration.
    """

    def __init__(self, message: str, natspec: NatSpec | None = None):
        super().__init__(message)
        self.natspec = natspec
        self.errors: list[NatSpecError] = [self]


class UnknownTagError(NatSpecError):
    """Raised for a tag outside the NatSpec vocabulary (usually a typo)."""

    def __init__(self, tag: str, natspec: NatSpec | None = None):
        super().__init__(f"Unknown tag: {tag}", natspec)
        self.tag = tag


class InvalidInheritdocError(NatSpecError):
    """Raised when @inheritdoc names a contract outside the override chain."""

    def __init__(self, text: str, natspec: NatSpec | None = None):
        super().__init__(f"Invalid inheritdoc tag: {text}", natspec)
        self.text = text


class MalformedTagError(NatSpecError):
    """Raised in strict mode for @param/@return tags that cannot be matched."""

    def __init__(self, tag: str, text: str, natspec: NatSpec | None = None):
        super().__init__(f"Malformed @{tag} tag: {text}", natspec)
        self.tag = tag
        self.text = text


class UnresolvedBaseError(NatSpecError):
    """Raised when an override points at a declaration missing from the build."""

    def __init__(self, node_id: int, natspec: NatSpec | None = None):
        super().__init__(f"Unresolved base declaration: {node_id}", natspec)
        self.node_id = node_id
