"""NatSpec resolution from doc comments embedded in the AST.

Resolution is a breadth-first walk over override edges rooted at the requested
declaration. The requested node is visited first, so its own tags always win
over anything inherited; every node is visited at most once, which keeps
diamond-shaped or cyclic override graphs finite.
"""

from __future__ import annotations

import logging
import re
from collections import deque

from solmarkup.ast.index import AstIndex
from solmarkup.ast.nodes import (
    ContractDefinition,
    EnumDefinition,
    EventDefinition,
    FunctionDefinition,
    ModifierDefinition,
    Node,
    StructDefinition,
    VariableDeclaration,
)
from solmarkup.base import (
    BuildInfoError,
    InvalidInheritdocError,
    MalformedTagError,
    NatSpecError,
    UnknownTagError,
    UnresolvedBaseError,
)
from solmarkup.models import NatSpec, Param, Return
from solmarkup.natspec.comments import (
    join_lines,
    split_name_description,
    split_segments,
    strip_comment_decoration,
    strip_line_indent,
)
from solmarkup.signatures import SourceReader

log = logging.getLogger(__name__)

_INHERITDOC_TARGET = re.compile(r"^(\w+)$", re.MULTILINE)


def declared_parameters(node: Node) -> list:
    """Names a @param tag may refer to on this node."""
    if isinstance(node, (EnumDefinition, StructDefinition)):
        return node.members
    parameters = getattr(node, "parameters", None)
    return parameters.parameters if parameters is not None else []


def declared_outputs(node: Node) -> list[tuple[str, str | None]]:
    """(name, type) of each output a @return tag may describe."""
    if isinstance(node, FunctionDefinition):
        return [(p.name, p.type_string or None) for p in node.return_parameters.parameters]
    if isinstance(node, VariableDeclaration):
        # The getter of a public state variable returns one unnamed value
        return [("", node.type_string or None)]
    return []


def _base_ids(node: Node) -> list[int]:
    if isinstance(node, (FunctionDefinition, VariableDeclaration)):
        return node.base_functions or []
    if isinstance(node, ModifierDefinition):
        return node.base_modifiers or []
    return []


class NatSpecResolver:
    """Resolve NatSpec for declarations of one build.

    Example:
        resolver = NatSpecResolver(build_info.index, build_info.source_text)
        natspec = resolver.resolve(function_node)

    Args:
        index: Shared id index of the build; override pointers are followed through it.
        source: Reader for original source text. Comments are read from source
            when available and from ``documentation.text`` otherwise.
        strict: Report unmatched @param/@return tags as ``MalformedTagError``
            instead of dropping them.
    """

    def __init__(self, index: AstIndex, source: SourceReader | None = None, strict: bool = False):
        self.index = index
        self.source = source
        self.strict = strict

    def resolve(self, node: Node) -> NatSpec:
        """Resolve the documentation of one declaration.

        Raises:
            NatSpecError: For unknown tags, broken @inheritdoc references,
                override ids missing from the build and, in strict mode,
                malformed tags. The exception carries the partially resolved
                record and every problem found.
        """
        natspec = NatSpec()
        errors: list[NatSpecError] = []

        worklist: deque[Node] = deque([node])
        seen = {node.id}

        while worklist:
            current = worklist.popleft()
            text = self._doc_text(current)

            if text is None:
                try:
                    parent = self._inheritable_parent(current)
                except NatSpecError as e:
                    log.debug("%s on node %s", e, current.id)
                    errors.append(e)
                    continue
                if parent is not None and parent.id not in seen:
                    seen.add(parent.id)
                    worklist.append(parent)
                continue

            for segment in split_segments(strip_comment_decoration(text)):
                tag: str | None = segment.tag
                # A handler may hand the segment back under another tag
                while tag is not None:
                    try:
                        tag = self._apply(tag, segment.text, current, natspec, worklist, seen)
                    except NatSpecError as e:
                        log.debug("%s on node %s", e, current.id)
                        errors.append(e)
                        tag = None

        if errors:
            first = errors[0]
            first.natspec = natspec
            first.errors = errors
            raise first

        return natspec

    def _doc_text(self, node: Node) -> str | None:
        documentation = getattr(node, "documentation", None)
        if documentation is None:
            return None
        if isinstance(documentation, str):
            return strip_line_indent(documentation)

        if self.source is not None and documentation.src:
            text = self.source(documentation.src)
            if text is not None:
                return text
        return strip_line_indent(documentation.text)

    def _inheritable_parent(self, node: Node) -> Node | None:
        """The single override parent whose documentation may be inherited.

        Functions only inherit when the parameter names line up exactly, so
        inherited @param tags stay valid.
        """
        if not isinstance(node, (FunctionDefinition, VariableDeclaration)):
            return None
        if not node.base_functions or len(node.base_functions) != 1:
            return None

        parent = self._base(node.base_functions[0])
        if isinstance(node, VariableDeclaration):
            return parent
        if not isinstance(parent, FunctionDefinition):
            return None

        names = [p.name for p in node.parameters.parameters]
        parent_names = [p.name for p in parent.parameters.parameters]
        return parent if names == parent_names else None

    def _base(self, node_id: int) -> Node:
        try:
            return self.index.dereference(node_id)
        except BuildInfoError as e:
            raise UnresolvedBaseError(node_id) from e

    def _apply(
        self,
        tag: str,
        text: str,
        node: Node,
        natspec: NatSpec,
        worklist: deque[Node],
        seen: set[int],
    ) -> str | None:
        """Apply one segment; returns a tag to re-dispatch the same text under."""
        if tag == "title":
            if isinstance(node, ContractDefinition) and not natspec.title:
                natspec.title = text
        elif tag == "author":
            if not natspec.author:
                natspec.author = text
        elif tag == "notice":
            if not natspec.notice:
                natspec.notice = text
        elif tag == "dev":
            if not natspec.dev:
                natspec.dev = text
        elif tag == "param":
            return self._apply_param(text, node, natspec)
        elif tag == "return":
            return self._apply_return(text, node, natspec)
        elif tag.startswith("custom:"):
            natspec.custom[tag[len("custom:") :]] = text
        elif tag == "inheritdoc":
            target = self._inheritdoc_target(node, text)
            if target.id not in seen:
                seen.add(target.id)
                worklist.append(target)
        else:
            raise UnknownTagError(tag)
        return None

    def _apply_param(self, text: str, node: Node, natspec: NatSpec) -> str | None:
        parsed = split_name_description(text)
        if parsed is None:
            self._malformed("param", text)
            return None

        name, description = parsed
        if any(param.name == name for param in natspec.params):
            return None

        declared = next((p for p in declared_parameters(node) if p.name == name), None)
        if declared is None:
            if isinstance(node, EventDefinition):
                self._malformed("param", text)
                return None
            # Compilers accept @param for named returns; treat it as the next @return
            return "return"

        type_string = getattr(declared, "type_string", None) or None
        natspec.params.append(Param(name=name, type=type_string, description=description))
        return None

    def _apply_return(self, text: str, node: Node, natspec: NatSpec) -> str | None:
        if isinstance(node, EventDefinition):
            return "param"

        outputs = declared_outputs(node)
        if len(natspec.returns) >= len(outputs):
            self._malformed("return", text)
            return None

        expected_name, type_string = outputs[len(natspec.returns)]
        if not expected_name:
            description = join_lines(text)
            if isinstance(node, VariableDeclaration):
                # "@return owner The owner" names the getter after the variable
                parsed = split_name_description(text)
                if parsed is not None and parsed[0] == node.name:
                    description = parsed[1]
            natspec.returns.append(Return(name=None, type=type_string, description=description))
            return None

        parsed = split_name_description(text)
        if parsed is None or parsed[0] != expected_name:
            self._malformed("return", text)
            return None

        natspec.returns.append(Return(name=parsed[0], type=type_string, description=parsed[1]))
        return None

    def _malformed(self, tag: str, text: str) -> None:
        if self.strict:
            raise MalformedTagError(tag, text)
        log.debug("Dropping unusable @%s tag: %r", tag, text)

    def _inheritdoc_target(self, node: Node, text: str) -> Node:
        """Find the override-chain member declared in the contract named by @inheritdoc.

        Depth-first over ``baseFunctions``/``baseModifiers`` with an explicit stack.

        Raises:
            InvalidInheritdocError: If no such member exists.
        """
        match = _INHERITDOC_TARGET.search(text)
        if not match or not isinstance(
            node, (FunctionDefinition, VariableDeclaration, ModifierDefinition)
        ):
            raise InvalidInheritdocError(text)
        contract_name = match.group(1)

        stack = [node]
        visited: set[int] = set()
        while stack:
            current = stack.pop()
            if current.id in visited:
                continue
            visited.add(current.id)

            owner = self.index.owner_of(current)
            if owner is not None and contract_name in (owner.name, owner.canonical_name):
                return current

            bases = [self._base(base_id) for base_id in _base_ids(current)]
            stack.extend(reversed(bases))

        raise InvalidInheritdocError(text)

