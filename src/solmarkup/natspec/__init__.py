"""solmarkup.natspec - NatSpec resolution from doc comments or compiler output."""

from solmarkup.natspec.compiled import CompiledNatSpecResolver
from solmarkup.natspec.resolver import NatSpecResolver

__all__ = [
    "CompiledNatSpecResolver",
    "NatSpecResolver",
]
