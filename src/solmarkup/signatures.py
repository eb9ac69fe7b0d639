"""Human-readable declaration signatures rebuilt from typed AST nodes.

``build_signature`` produces the canonical one-line form. ``format_signature``
is the display form: function, event and error signatures wider than the
configured width are wrapped one parameter per line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from solmarkup.ast.nodes import (
    ContractDefinition,
    EnumDefinition,
    ErrorDefinition,
    EventDefinition,
    Expression,
    FunctionDefinition,
    ModifierDefinition,
    ModifierInvocation,
    Node,
    StructDefinition,
    UsingForDirective,
    VariableDeclaration,
)
from solmarkup.base import UnsupportedNodeKindError

# src -> original source text, or None when the source is not available
SourceReader = Callable[[str], str | None]

DEFAULT_MAX_WIDTH = 99

_TYPE_PREFIXES = ("enum ", "struct ", "contract ")


def _no_source(src: str) -> str | None:
    return None


def remove_type_prefix(type_string: str) -> str:
    """Drop the first ``enum ``/``struct ``/``contract `` qualifier."""
    for prefix in _TYPE_PREFIXES:
        if prefix in type_string:
            return type_string.replace(prefix, "", 1)
    return type_string


def format_parameter(param: VariableDeclaration) -> str:
    """``{type}[ {location}][ indexed][ {name}]``"""
    parts = [remove_type_prefix(param.type_string)]
    if param.storage_location != "default":
        parts.append(param.storage_location)
    if param.indexed:
        parts.append("indexed")
    if param.name:
        parts.append(param.name)
    return " ".join(parts)


def format_expression(expression: Expression, source: SourceReader) -> str:
    """Identifiers and simple literals are rendered; anything else is copied from source."""
    if expression.node_type == "Identifier" and expression.name:
        return expression.name
    if expression.node_type == "Literal" and expression.kind in ("number", "bool"):
        if expression.value is not None:
            if expression.subdenomination:
                return f"{expression.value} {expression.subdenomination}"
            return expression.value

    text = source(expression.src) if expression.src else None
    if text is not None:
        return text
    if expression.node_type == "Literal" and expression.value is not None:
        if expression.kind in ("string", "unicodeString"):
            return f'"{expression.value}"'
        return expression.value
    return expression.name or "..."


def format_modifier_invocation(invocation: ModifierInvocation, source: SourceReader) -> str:
    name = invocation.modifier_name.name
    if invocation.arguments is None:
        return name
    args = ", ".join(format_expression(arg, source) for arg in invocation.arguments)
    return f"{name}({args})"


@dataclass
class _CallableParts:
    """Pieces of a function-like signature, shared by both renderings."""

    head: str  # "function transfer"
    params: list[str]
    tail: list[str] = field(default_factory=list)  # visibility, mutability, modifiers, ...
    returns: list[str] = field(default_factory=list)

    def returns_str(self) -> str:
        return f"returns ({', '.join(self.returns)})" if self.returns else ""

    def tail_str(self) -> str:
        items = [*self.tail]
        if self.returns:
            items.append(self.returns_str())
        return "".join(f" {item}" for item in items)

    def one_line(self) -> str:
        return f"{self.head}({', '.join(self.params)}){self.tail_str()}"

    def wrapped(self, max_width: int) -> list[str]:
        lines = [f"{self.head}("]
        if self.params:
            lines.extend(_indent_items(self.params, ","))
            lines.append(")")
        else:
            lines[-1] += ")"

        tail = self.tail_str()
        if len(tail) <= max_width:
            lines[-1] += tail
        else:
            lines.extend(f"\t{item}" for item in self.tail)
            if self.returns:
                lines.append("\treturns (")
                lines.extend(_indent_items(self.returns, ",", "\t\t"))
                lines.append("\t)")

        lines[-1] += ";"
        return lines


def _indent_items(items: list[str], separator: str, prefix: str = "\t") -> list[str]:
    last = len(items) - 1
    return [f"{prefix}{item}{separator if i != last else ''}" for i, item in enumerate(items)]


def _function_parts(node: FunctionDefinition, source: SourceReader) -> _CallableParts:
    head = f"{node.kind} {node.name}" if node.name else node.kind
    tail = []
    if node.kind != "constructor":
        tail.append(node.visibility)
    if node.state_mutability != "nonpayable":
        tail.append(node.state_mutability)
    tail.extend(format_modifier_invocation(m, source) for m in node.modifiers)
    if node.virtual:
        tail.append("virtual")
    if node.overrides is not None:
        tail.append("override")
    return _CallableParts(
        head=head,
        params=[format_parameter(p) for p in node.parameters.parameters],
        tail=tail,
        returns=[format_parameter(p) for p in node.return_parameters.parameters],
    )


def _event_parts(node: EventDefinition, source: SourceReader) -> _CallableParts:
    return _CallableParts(
        head=f"event {node.name}",
        params=[format_parameter(p) for p in node.parameters.parameters],
        tail=["anonymous"] if node.anonymous else [],
    )


def _error_parts(node: ErrorDefinition, source: SourceReader) -> _CallableParts:
    return _CallableParts(
        head=f"error {node.name}",
        params=[format_parameter(p) for p in node.parameters.parameters],
    )


def _modifier_parts(node: ModifierDefinition, source: SourceReader) -> _CallableParts:
    return _CallableParts(
        head=f"modifier {node.name}",
        params=[format_parameter(p) for p in node.parameters.parameters],
    )


_CALLABLE_PARTS: dict[type[Node], Callable[[Node, SourceReader], _CallableParts]] = {
    FunctionDefinition: _function_parts,
    EventDefinition: _event_parts,
    ErrorDefinition: _error_parts,
    ModifierDefinition: _modifier_parts,
}

# Only these get wrapped for display
_WRAPPABLE = (FunctionDefinition, EventDefinition, ErrorDefinition)


def _variable_signature(node: VariableDeclaration, source: SourceReader) -> str:
    parts = [remove_type_prefix(node.type_string)]
    if node.mutability != "mutable":
        parts.append(node.mutability)
    elif node.constant:
        # Compilers before 0.6.5 only set the constant flag
        parts.append("constant")
    parts.append(node.name)
    signature = " ".join(parts)

    if node.value is not None:
        signature += f" = {format_expression(node.value, source)}"
    return signature


def _struct_signature(node: StructDefinition, source: SourceReader) -> str:
    members = "\n".join(f"\t{format_parameter(member)};" for member in node.members)
    return f"struct {node.name} {{\n{members}\n}}"


def _enum_signature(node: EnumDefinition, source: SourceReader) -> str:
    members = ",\n".join(f"\t{member.name}" for member in node.members)
    return f"enum {node.name} {{\n{members}\n}}"


def _using_for_signature(node: UsingForDirective, source: SourceReader) -> str:
    if node.library_name is not None:
        library = node.library_name.name
    else:
        functions = []
        for entry in node.function_list or []:
            if entry.function is not None:
                functions.append(entry.function.name)
            elif entry.definition is not None:
                functions.append(f"{entry.definition.name} as {entry.operator}")
        library = f"{{{', '.join(functions)}}}"

    if node.type_name is None:
        target = "*"
    else:
        target = remove_type_prefix(
            node.type_name.type_descriptions.type_string or node.type_name.name or ""
        )

    signature = f"using {library} for {target}"
    if node.is_global:
        signature += " global"
    return signature


def _contract_signature(node: ContractDefinition, source: SourceReader) -> str:
    signature = f"{'abstract ' if node.abstract else ''}{node.contract_kind} {node.name}"
    if node.base_contracts:
        bases = ", ".join(base.base_name.name for base in node.base_contracts)
        signature += f" is {bases}"
    return signature


_SIGNATURE_BUILDERS: dict[type[Node], Callable[[Node, SourceReader], str]] = {
    VariableDeclaration: _variable_signature,
    StructDefinition: _struct_signature,
    EnumDefinition: _enum_signature,
    UsingForDirective: _using_for_signature,
    ContractDefinition: _contract_signature,
}


def build_signature(node: Node, source: SourceReader | None = None) -> str:
    """Rebuild the canonical one-line signature of a declaration.

    Args:
        node: Any documented declaration node.
        source: Reader for original source text, used for initializers and
            modifier arguments that are not identifiers or literals.

    Raises:
        UnsupportedNodeKindError: If the node kind has no signature form.
    """
    source = source or _no_source
    parts_builder = _CALLABLE_PARTS.get(type(node))
    if parts_builder is not None:
        return parts_builder(node, source).one_line()

    builder = _SIGNATURE_BUILDERS.get(type(node))
    if builder is None:
        raise UnsupportedNodeKindError(node.node_type)
    return builder(node, source)


def format_signature(
    node: Node,
    source: SourceReader | None = None,
    max_width: int = DEFAULT_MAX_WIDTH,
) -> str:
    """Display form of ``build_signature``; long callables are wrapped.

    A wrapped signature puts the head on its own line, one parameter per
    tab-indented line, and ends with a semicolon.
    """
    if not isinstance(node, _WRAPPABLE):
        return build_signature(node, source)

    parts = _CALLABLE_PARTS[type(node)](node, source or _no_source)
    line = parts.one_line()
    if len(line) + 1 <= max_width:
        return line
    return "\n".join(parts.wrapped(max_width))


def build_title(node: Node, selector: str | None = None) -> str:
    """Short display name, with ``(0xSELECTOR)`` for functions and state variables.

    Args:
        node: The declaration.
        selector: Selector from an external table; defaults to the AST's own.
    """
    if isinstance(node, ContractDefinition):
        return ""
    if isinstance(node, (FunctionDefinition, VariableDeclaration)):
        name = node.name or getattr(node, "kind", "")
        selector = selector or node.function_selector
        return f"{name} (0x{selector})" if selector else name
    return getattr(node, "name", "") or ""
