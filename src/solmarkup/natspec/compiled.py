"""NatSpec resolution from the compiler's devdoc/userdoc output.

solc already resolves inheritance when it emits these maps, so lookup is a
plain match of each declaration to its canonical signature.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from solmarkup.ast.nodes import (
    ContractDefinition,
    ErrorDefinition,
    EventDefinition,
    FunctionDefinition,
    Node,
    VariableDeclaration,
)
from solmarkup.buildinfo import ContractOutput
from solmarkup.models import NatSpec, Param, Return
from solmarkup.natspec.resolver import declared_outputs, declared_parameters

log = logging.getLogger(__name__)

_CUSTOM_PREFIX = "custom:"
_DATA_LOCATION = re.compile(r" (?:memory|calldata|storage(?: pointer| ref)?)\b")


def canonical_type(param: dict[str, Any]) -> str:
    """ABI type with tuples expanded, e.g. ``(address,uint256)[]``."""
    type_ = param.get("type", "")
    if type_.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in param.get("components", []))
        return f"({inner}){type_[len('tuple'):]}"
    return type_


def canonical_signature(entry: dict[str, Any]) -> str:
    """``name(type,...)`` as used for devdoc/userdoc keys."""
    types = ",".join(canonical_type(p) for p in entry.get("inputs", []))
    return f"{entry.get('name', '')}({types})"


def _without_location(type_string: str) -> str:
    """``struct S memory[] memory`` -> ``struct S[]``, as ABI ``internalType`` spells it."""
    return _DATA_LOCATION.sub("", type_string)


def _custom_tags(doc: dict[str, Any]) -> dict[str, str]:
    return {
        key[len(_CUSTOM_PREFIX) :]: value
        for key, value in doc.items()
        if key.startswith(_CUSTOM_PREFIX) and isinstance(value, str)
    }


def _first(entry: Any) -> dict[str, Any]:
    """Error docs are lists (one per definition); others are plain objects."""
    if isinstance(entry, list):
        return entry[0] if entry else {}
    return entry or {}


class CompiledNatSpecResolver:
    """Resolve NatSpec for one contract from its devdoc/userdoc maps.

    Example:
        resolver = CompiledNatSpecResolver(build_info.contract_output(source, name))
        natspec = resolver.resolve(function_node)
    """

    def __init__(self, output: ContractOutput):
        self.devdoc = output.devdoc
        self.userdoc = output.userdoc
        self.abi = output.abi
        self._signatures_by_selector = {
            selector: signature for signature, selector in output.method_identifiers.items()
        }

    def resolve(self, node: Node) -> NatSpec:
        if isinstance(node, ContractDefinition):
            return self._contract()

        if isinstance(node, FunctionDefinition):
            signature = self._function_signature(node)
            dev = self.devdoc.get("methods", {}).get(signature, {}) if signature else {}
            user = self.userdoc.get("methods", {}).get(signature, {}) if signature else {}
        elif isinstance(node, VariableDeclaration):
            dev = self.devdoc.get("stateVariables", {}).get(node.name, {})
            signature = self._signatures_by_selector.get(node.function_selector or "")
            user = self.userdoc.get("methods", {}).get(signature, {}) if signature else {}
        elif isinstance(node, EventDefinition):
            signature = self._abi_signature("event", node)
            dev = self.devdoc.get("events", {}).get(signature, {}) if signature else {}
            user = self.userdoc.get("events", {}).get(signature, {}) if signature else {}
        elif isinstance(node, ErrorDefinition):
            signature = self._abi_signature("error", node)
            dev = _first(self.devdoc.get("errors", {}).get(signature)) if signature else {}
            user = _first(self.userdoc.get("errors", {}).get(signature)) if signature else {}
        else:
            # Structs, enums, modifiers and using-for directives are not in devdoc/userdoc
            return NatSpec()

        return self._build(node, dev, user)

    def _contract(self) -> NatSpec:
        return NatSpec(
            title=self.devdoc.get("title"),
            author=self.devdoc.get("author"),
            notice=self.userdoc.get("notice"),
            dev=self.devdoc.get("details"),
            custom=_custom_tags(self.devdoc),
        )

    def _function_signature(self, node: FunctionDefinition) -> str | None:
        if node.kind == "constructor":
            return "constructor"
        if node.function_selector:
            signature = self._signatures_by_selector.get(node.function_selector)
            if signature:
                return signature
        return self._abi_signature("function", node)

    def _abi_signature(
        self, kind: str, node: FunctionDefinition | EventDefinition | ErrorDefinition
    ) -> str | None:
        parameters = node.parameters.parameters
        names = [p.name for p in parameters]
        candidates = [
            entry
            for entry in self.abi
            if entry.get("type") == kind
            and entry.get("name") == node.name
            and [i.get("name", "") for i in entry.get("inputs", [])] == names
        ]
        if not candidates:
            log.debug("No ABI entry for %s %s", kind, node.name)
            return None

        if len(candidates) > 1:
            # Overloads may share parameter names; tell them apart by declared type
            types = [_without_location(p.type_string) for p in parameters]
            typed = [
                entry
                for entry in candidates
                if [i.get("internalType") for i in entry.get("inputs", [])] == types
            ]
            candidates = typed or candidates

        return canonical_signature(candidates[0])

    def _build(self, node: Node, dev: dict[str, Any], user: dict[str, Any]) -> NatSpec:
        natspec = NatSpec(
            notice=user.get("notice"),
            dev=dev.get("details"),
            custom=_custom_tags(dev),
        )

        param_docs = dev.get("params", {})
        for param in declared_parameters(node):
            if param.name in param_docs:
                natspec.params.append(
                    Param(
                        name=param.name,
                        type=getattr(param, "type_string", None) or None,
                        description=param_docs[param.name],
                    )
                )

        return_docs = dict(dev.get("returns", {}))
        if isinstance(dev.get("return"), str):
            # State variable getters with a single @return
            return_docs.setdefault("_0", dev["return"])

        for i, (name, type_string) in enumerate(declared_outputs(node)):
            key = name if name in return_docs else f"_{i}"
            if key in return_docs:
                natspec.returns.append(
                    Return(name=name or None, type=type_string, description=return_docs[key])
                )

        return natspec
