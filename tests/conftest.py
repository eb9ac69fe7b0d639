"""Pytest fixtures for solmarkup tests."""

import pytest

from solmarkup.buildinfo import BuildInfo
from solmarkup.config import MarkupConfig
from tests.helpers import token_project, write_build_info


@pytest.fixture
def token_data():
    """Raw build-info JSON of the IToken/Token project."""
    return token_project()


@pytest.fixture
def token_build(token_data):
    """
    Parsed build-info of the IToken/Token project.

    Example:
        def test_something(token_build):
            unit = token_build.source_unit("contracts/Token.sol")
    """
    return BuildInfo(token_data)


@pytest.fixture
def artifacts_dir(tmp_path, token_data):
    """A build-info directory holding the IToken/Token project."""
    directory = tmp_path / "artifacts" / "build-info"
    write_build_info(directory, "token", token_data)
    return directory


@pytest.fixture
def markup_config(tmp_path, artifacts_dir):
    """Config reading ``artifacts_dir`` and writing under ``tmp_path/docs``."""
    return MarkupConfig(artifacts=str(artifacts_dir), outdir=str(tmp_path / "docs"))
