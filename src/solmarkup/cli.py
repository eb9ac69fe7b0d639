"""Command-line entry point.

Commands:
    solmarkup generate  - Write one Markdown file per compiled contract
    solmarkup clean     - Remove the output directory
"""

import logging
from pathlib import Path

import typer

from solmarkup.base import MarkupError
from solmarkup.config import MarkupConfig, load_config
from solmarkup.coverage import compute_coverage, validate_docs
from solmarkup.generator import Generator

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = typer.Typer(help="Generate Markdown documentation for compiled Solidity contracts")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def _load(config_path: Path | None, **overrides) -> MarkupConfig:
    if config_path is not None and not config_path.is_file():
        typer.echo(f"✗ Config file not found: {config_path}", err=True)
        raise typer.Exit(1)
    try:
        return load_config(config_path).merged(**overrides)
    except MarkupError as e:
        typer.echo(f"✗ {e}", err=True)
        raise typer.Exit(1)


@app.command("generate")
def generate(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with a [tool.solmarkup] table"
    ),
    artifacts: str | None = typer.Option(
        None, "--artifacts", "-a", help="build-info directory or a single build-info file"
    ),
    outdir: str | None = typer.Option(None, "--outdir", "-o", help="Output directory"),
    only: str | None = typer.Option(
        None, "--only", help="Generate one contract, e.g. contracts/Token.sol:Token"
    ),
    only_files: list[str] | None = typer.Option(
        None, "--only-file", help="Keep sources under this path (repeatable)"
    ),
    skip_files: list[str] | None = typer.Option(
        None, "--skip-file", help="Skip sources under this path (repeatable)"
    ),
    doc_source: str | None = typer.Option(
        None, "--doc-source", help="'ast' (doc comments) or 'compiler' (devdoc/userdoc)"
    ),
    max_signature_width: int | None = typer.Option(
        None, "--max-width", help="Wrap signatures wider than this"
    ),
    strict: bool | None = typer.Option(
        None, "--strict/--no-strict", help="Fail on malformed or missing documentation"
    ),
    verbose: bool | None = typer.Option(None, "--verbose/--quiet", "-v", help="Debug logging"),
) -> None:
    """Generate Markdown for every compiled contract.

    Examples:
        solmarkup generate
        solmarkup generate --artifacts artifacts/build-info --outdir docs/contracts
        solmarkup generate --only contracts/Token.sol:Token --strict
    """
    config = _load(
        config_path,
        artifacts=artifacts,
        outdir=outdir,
        only=only,
        only_files=only_files or None,
        skip_files=skip_files or None,
        doc_source=doc_source,
        max_signature_width=max_signature_width,
        strict=strict,
        verbose=verbose,
    )
    _configure_logging(config.verbose)

    typer.echo("Generating markups...")
    generator = Generator(config)
    try:
        names = generator.generate()
    except MarkupError as e:
        typer.echo(f"✗ {e}", err=True)
        raise typer.Exit(1)

    for name in names:
        typer.echo(f"  ✓ {name}")

    validation = validate_docs(generator.contracts, strict=config.strict)
    for warning in validation.warnings:
        typer.echo(f"  ! {warning}")

    coverage = compute_coverage(generator.contracts)
    kinds = ", ".join(
        f"{kind} {value:.0%}" for kind, value in sorted(coverage.items()) if kind != "total"
    )
    summary = f"Coverage: {coverage['total']:.0%}"
    typer.echo(f"\n{summary} ({kinds})" if kinds else f"\n{summary}")

    if validation.errors:
        typer.echo("\nValidation errors:", err=True)
        for error in validation.errors:
            typer.echo(f"  ✗ {error}", err=True)
        raise typer.Exit(1)

    typer.echo(f"\nGenerated {len(names)} markups in {generator.outdir}")


@app.command("clean")
def clean(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with a [tool.solmarkup] table"
    ),
    outdir: str | None = typer.Option(None, "--outdir", "-o", help="Output directory"),
) -> None:
    """Remove the output directory."""
    config = _load(config_path, outdir=outdir)
    _configure_logging(config.verbose)

    generator = Generator(config)
    try:
        generator.clean()
    except MarkupError as e:
        typer.echo(f"✗ {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Removed {generator.outdir}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
