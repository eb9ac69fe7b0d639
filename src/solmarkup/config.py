"""Generator configuration and its ``[tool.solmarkup]`` TOML table."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from solmarkup.base import ConfigError
from solmarkup.signatures import DEFAULT_MAX_WIDTH

log = logging.getLogger(__name__)

DEFAULT_OUTDIR = "./generated-markups"
DEFAULT_ARTIFACTS = "./artifacts/build-info"


class MarkupConfig(BaseModel):
    """Settings for one generation run."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    outdir: str = DEFAULT_OUTDIR
    only: str = ""  # One fully qualified name, e.g. "contracts/Token.sol:Token"
    only_files: list[str] = Field(default_factory=list)
    skip_files: list[str] = Field(default_factory=list)
    verbose: bool = False
    doc_source: Literal["ast", "compiler"] = "ast"
    strict: bool = False
    max_signature_width: int = Field(default=DEFAULT_MAX_WIDTH, gt=0)
    artifacts: str = DEFAULT_ARTIFACTS  # build-info directory or a single build-info file

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> MarkupConfig:
        """Validate user settings; keys may be kebab-case or snake_case.

        Raises:
            ConfigError: If a key is unknown or a value is invalid.
        """
        normalized = {str(key).replace("-", "_"): value for key, value in data.items()}
        try:
            return cls.model_validate(normalized)
        except ValidationError as e:
            raise ConfigError(f"Invalid solmarkup configuration: {e}") from e

    def merged(self, **overrides: Any) -> MarkupConfig:
        """A copy with every non-None override applied.

        Raises:
            ConfigError: If an override is invalid.
        """
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return self.from_mapping(data)


def load_config(path: str | Path | None = None) -> MarkupConfig:
    """Load settings from the ``[tool.solmarkup]`` table of a TOML file.

    A missing file or table gives the defaults.

    Raises:
        ConfigError: If the file is not valid TOML or the table is invalid.
    """
    config_path = Path(path) if path is not None else Path("pyproject.toml")
    if not config_path.is_file():
        log.debug("No config file at %s, using defaults", config_path)
        return MarkupConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Cannot parse {config_path}: {e}") from e

    table = data.get("tool", {}).get("solmarkup")
    if table is None:
        log.debug("No [tool.solmarkup] table in %s, using defaults", config_path)
        return MarkupConfig()
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.solmarkup] in {config_path} must be a table")

    return MarkupConfig.from_mapping(table)
