"""Compiled build artifacts: standard-JSON input and output of one solc run.

A build-info carries the original source text (``input.sources``), one AST per
source file (``output.sources``) and per-contract compiler output
(``output.contracts``) such as the ABI and the devdoc/userdoc maps.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from solmarkup.ast.index import AstIndex
from solmarkup.ast.nodes import SourceUnit
from solmarkup.base import BuildInfoError

log = logging.getLogger(__name__)


class SourceLocation(NamedTuple):
    start: int
    length: int
    index: int


def decode_src(src: str) -> SourceLocation:
    """Decode a solc ``start:length:sourceIndex`` location."""
    try:
        start, length, index = (int(part) for part in src.split(":"))
    except ValueError as e:
        raise BuildInfoError(f"Malformed src location: {src!r}") from e
    return SourceLocation(start, length, index)


class ContractOutput(BaseModel):
    """The slice of ``output.contracts[source][name]`` used for documentation."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    abi: list[dict[str, Any]] = Field(default_factory=list)
    devdoc: dict[str, Any] = Field(default_factory=dict)
    userdoc: dict[str, Any] = Field(default_factory=dict)
    evm: dict[str, Any] = Field(default_factory=dict)

    @property
    def method_identifiers(self) -> dict[str, str]:
        """Canonical function signature -> 4-byte selector (hex, no prefix)."""
        return self.evm.get("methodIdentifiers") or {}


class BuildInfo:
    """Parsed build-info with source slicing and a shared AST index.

    Example:
        build_info = BuildInfo.from_file(Path("artifacts/build-info/abc.json"))
        unit = build_info.source_unit("contracts/Token.sol")
        text = build_info.source_text(node.documentation.src)
    """

    def __init__(self, data: dict[str, Any], path: Path | None = None):
        self.path = path
        output = data.get("output")
        if not isinstance(output, dict):
            raise BuildInfoError(f"Build info {path or '<memory>'} has no compiler output")

        self.solc_version: str | None = data.get("solcVersion")
        self.sources: dict[str, str] = {}
        for source, entry in (data.get("input") or {}).get("sources", {}).items():
            content = entry.get("content")
            if isinstance(content, str):
                self.sources[source] = content

        self.source_units: dict[str, SourceUnit] = {}
        self._paths_by_id: dict[int, str] = {}
        for source, entry in output.get("sources", {}).items():
            ast = entry.get("ast")
            if ast is None:
                continue
            try:
                unit = SourceUnit.model_validate(ast)
            except ValidationError as e:
                raise BuildInfoError(f"Malformed AST for {source}: {e}") from e
            self.source_units[source] = unit
            if "id" in entry:
                self._paths_by_id[entry["id"]] = source

        self._contracts: dict[str, dict[str, Any]] = output.get("contracts") or {}
        self.index = AstIndex(self.source_units.values())
        log.debug("Indexed %d AST nodes from %d sources", len(self.index), len(self.source_units))

    @classmethod
    def from_file(cls, path: Path) -> BuildInfo:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise BuildInfoError(f"Cannot read build info {path}: {e}") from e
        return cls(data, Path(path))

    def source_unit(self, source: str) -> SourceUnit:
        try:
            return self.source_units[source]
        except KeyError:
            raise BuildInfoError(f"Source {source} not found in build info") from None

    def source_text(self, src: str) -> str | None:
        """Slice original source text by byte offsets, or None if unavailable."""
        start, length, index = decode_src(src)
        path = self._paths_by_id.get(index)
        content = self.sources.get(path) if path is not None else None
        if content is None or start < 0 or length < 0:
            return None

        raw = content.encode("utf-8")
        if start + length > len(raw):
            log.debug("src %s is out of bounds for %s", src, path)
            return None
        return raw[start : start + length].decode("utf-8", errors="replace")

    def contract_output(self, source: str, name: str) -> ContractOutput:
        entry = self._contracts.get(source, {}).get(name)
        if entry is None:
            return ContractOutput()
        return ContractOutput.model_validate(entry)

    def fully_qualified_names(self) -> list[str]:
        """All ``source:Name`` pairs this build produced output for."""
        names = [
            f"{source}:{name}"
            for source, contracts in self._contracts.items()
            for name in contracts
        ]
        if not names:
            # ASTs only (e.g. stopAfter=parsing): fall back to declared contracts
            for source, unit in self.source_units.items():
                names.extend(
                    f"{source}:{node.name}"
                    for node in unit.nodes
                    if node.node_type == "ContractDefinition"
                )
        return names


def discover_build_infos(path: Path) -> list[Path]:
    """Build-info files at ``path``, oldest first so later builds win.

    Raises:
        BuildInfoError: If the path does not exist.
    """
    path = Path(path)
    if path.is_file():
        return [path]
    if not path.is_dir():
        raise BuildInfoError(f"Artifacts path not found: {path}")
    return sorted(path.glob("*.json"), key=lambda p: (p.stat().st_mtime, p.name))
