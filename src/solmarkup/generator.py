"""Generation driver: build-info discovery, contract filters and file output."""

from __future__ import annotations

import logging
import posixpath
import re
import shutil
from pathlib import Path

from solmarkup.base import ConfigError, MarkupError
from solmarkup.buildinfo import BuildInfo, discover_build_infos
from solmarkup.config import MarkupConfig
from solmarkup.markup.generator import MarkdownGenerator
from solmarkup.models import ContractInfo
from solmarkup.parser import ContractParser

log = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\\/]+")


def to_unix_path(path: str) -> str:
    return _SEPARATORS.sub("/", path)


def _tokens(path: str) -> list[str]:
    return [token for token in to_unix_path(path).split("/") if token and token != "."]


def is_sub_path(parent: str, child: str) -> bool:
    """Token-wise prefix match: ``contracts/mock`` covers ``contracts/mock/A.sol``
    but not ``contracts/mocks/A.sol``."""
    parent_tokens = _tokens(parent)
    child_tokens = _tokens(child)
    return parent_tokens == child_tokens[: len(parent_tokens)]


def split_name(fully_qualified_name: str) -> tuple[str, str]:
    """``contracts/Token.sol:Token`` -> (``contracts/Token.sol``, ``Token``)."""
    source, sep, name = fully_qualified_name.rpartition(":")
    if not sep or not source or not name:
        raise ConfigError(f"Not a fully qualified contract name: {fully_qualified_name}")
    return source, name


class Generator:
    """Write one Markdown file per compiled contract.

    Example:
        generator = Generator(load_config())
        names = generator.generate()

    Output goes to ``<outdir>/<dirname(source)>/<Name>.md``.
    """

    def __init__(self, config: MarkupConfig | None = None):
        self.config = config or MarkupConfig()
        self.outdir = Path(self.config.outdir).resolve()
        self.only_files = [to_unix_path(p) for p in self.config.only_files]
        self.skip_files = [to_unix_path(p) for p in self.config.skip_files]
        self.markdown = MarkdownGenerator()
        self.contracts: list[ContractInfo] = []  # Parsed by the last generate()

    def generate(self) -> list[str]:
        """Generate Markdown for every contract that passes the filters.

        Returns:
            Fully qualified names of the generated contracts.

        Raises:
            BuildInfoError: If the artifacts path does not exist or a build-info
                cannot be read.
            ConfigError: If ``only`` is not a fully qualified name.
        """
        builds = self.load_builds()
        names = list(builds)

        if self.config.only:
            split_name(self.config.only)
            selected = [name for name in names if name == self.config.only]
            if not selected:
                log.warning("Contract %s not found in build artifacts", self.config.only)
        else:
            selected = [name for name in names if self._included(split_name(name)[0])]

        log.info(
            "%d compiled contracts found, skipping %d of them",
            len(names),
            len(names) - len(selected),
        )
        return self.generate_markups(selected, builds)

    def load_builds(self) -> dict[str, BuildInfo]:
        """Map each fully qualified name to the newest build that produced it."""
        builds: dict[str, BuildInfo] = {}
        for path in discover_build_infos(Path(self.config.artifacts)):
            build_info = BuildInfo.from_file(path)
            log.debug("Loaded build info %s (solc %s)", path, build_info.solc_version)
            for name in build_info.fully_qualified_names():
                builds[name] = build_info
        return builds

    def generate_markups(self, names: list[str], builds: dict[str, BuildInfo]) -> list[str]:
        parsers: dict[int, ContractParser] = {}
        generated = []
        self.contracts = []

        for fully_qualified_name in names:
            source, name = split_name(fully_qualified_name)
            build_info = builds[fully_qualified_name]
            parser = parsers.get(id(build_info))
            if parser is None:
                parser = ContractParser(
                    build_info,
                    doc_source=self.config.doc_source,
                    strict=self.config.strict,
                    max_signature_width=self.config.max_signature_width,
                )
                parsers[id(build_info)] = parser

            log.debug("Started generating markup for %s", fully_qualified_name)
            try:
                info = parser.parse_contract_info(source, name)
            except MarkupError as e:
                log.warning("Skipping %s: %s", fully_qualified_name, e)
                continue

            target = self.output_path(source, name)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.markdown.generate(info), encoding="utf-8")
            log.debug("Markup for %s written to %s", name, target)

            self.contracts.append(info)
            generated.append(fully_qualified_name)

        return generated

    def output_path(self, source: str, name: str) -> Path:
        directory = posixpath.dirname(to_unix_path(source))
        # Keep sources outside the project root inside outdir
        parts = [token for token in _tokens(directory) if token != ".."]
        return self.outdir.joinpath(*parts, f"{name}.md")

    def clean(self) -> None:
        """Remove the output directory.

        Raises:
            ConfigError: If ``outdir`` exists and is not a directory.
        """
        if not self.outdir.exists():
            return
        if not self.outdir.is_dir():
            raise ConfigError(f"outdir is not a directory: {self.outdir}")
        shutil.rmtree(self.outdir)

    def _included(self, source: str) -> bool:
        if self.only_files and not any(is_sub_path(p, source) for p in self.only_files):
            return False
        return not any(is_sub_path(p, source) for p in self.skip_files)
