"""solmarkup - Markdown documentation for compiled Solidity contracts."""

from solmarkup.base import (
    BuildInfoError,
    ConfigError,
    ContractNotFoundError,
    InvalidInheritdocError,
    MalformedTagError,
    MarkupError,
    NatSpecError,
    UnknownTagError,
    UnresolvedBaseError,
    UnsupportedNodeKindError,
)
from solmarkup.buildinfo import BuildInfo
from solmarkup.config import MarkupConfig, load_config
from solmarkup.generator import Generator
from solmarkup.models import ContractInfo, Documentation, DocumentationBlock, NatSpec
from solmarkup.parser import ContractParser

__all__ = [
    "BuildInfo",
    "BuildInfoError",
    "ConfigError",
    "ContractInfo",
    "ContractNotFoundError",
    "ContractParser",
    "Documentation",
    "DocumentationBlock",
    "Generator",
    "InvalidInheritdocError",
    "MalformedTagError",
    "MarkupConfig",
    "MarkupError",
    "NatSpec",
    "NatSpecError",
    "UnknownTagError",
    "UnresolvedBaseError",
    "UnsupportedNodeKindError",
    "load_config",
]
