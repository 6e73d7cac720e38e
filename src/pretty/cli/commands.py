"""CLI command implementations"""

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated, Optional

import typer

from pretty.core.pipeline import run_pipeline
from pretty.errors import PrettyError


DIST_NAME = "pretty-md"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        typer.echo(version(DIST_NAME))
    except PackageNotFoundError:
        typer.echo("unknown")
    raise typer.Exit()


def convert_cmd(
    path: Annotated[Optional[Path], typer.Argument(help="Markdown file to be compiled")] = None,
    show: Annotated[bool, typer.Option("--show", "-s", help="Open the PDF after compiling")] = False,
    hedgedoc: Annotated[bool, typer.Option("--hedgedoc", "-H", help="Source is a HedgeDoc instance")] = False,
    domain: Annotated[Optional[str], typer.Option("--domain", "-D", help="Domain of the HedgeDoc instance")] = None,
    document_id: Annotated[Optional[str], typer.Option("--document_id", "--document-id", "-I", help="ID of the document on the HedgeDoc instance")] = None,
    keep: Annotated[bool, typer.Option("--keep", "-k", help="Keep the downloaded Markdown next to the PDF")] = False,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output file or directory [default: pretty.pdf]")] = None,
    title: Annotated[Optional[str], typer.Option("--title", "-t", help="Document title")] = None,
    author: Annotated[Optional[str], typer.Option("--author", "-a", help="Document author")] = None,
    font: Annotated[Optional[str], typer.Option("--font", "-f", help="Main font")] = None,
    toc_title: Annotated[Optional[str], typer.Option("--toc-title", help="Table of contents heading")] = None,
    toc_subtitle: Annotated[Optional[str], typer.Option("--toc-subtitle", help="Line under the table of contents")] = None,
    logo: Annotated[Optional[str], typer.Option("--logo", help="Logo image for the title page")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every pipeline step")] = False,
    _version: Annotated[Optional[bool], typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit")] = None,
    ):
    """Compile a Markdown file, or a HedgeDoc document, into a styled PDF."""
    _setup_logging(verbose)
    # flags that are not given stay None so they never clobber config files
    overrides = {
        "input_path": path,
        "show": show or None,
        "hedgedoc": hedgedoc or None,
        "keep": keep or None,
        "domain": domain,
        "document_id": document_id,
        "title": title,
        "author": author,
        "font": font,
        "toc_title": toc_title,
        "toc_subtitle": toc_subtitle,
        "logo": logo,
    }
    try:
        result = run_pipeline(overrides, output, strict_remote=True)
    except PrettyError as e:
        _fail(e.render())

    typer.echo(f"PDF written to {result.pdf}")
    if result.markdown:
        typer.echo(f"Markdown kept at {result.markdown}")
