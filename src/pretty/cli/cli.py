"""CLI entrypoint: Typer app definition and command registration"""

import typer

from pretty.cli.commands import convert_cmd


app = typer.Typer(name="pretty", add_completion=False, help="Compile Markdown into a styled PDF via pandoc")

app.command(name="convert")(convert_cmd)
