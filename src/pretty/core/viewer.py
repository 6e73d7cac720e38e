"""Open a produced file with the platform's default viewer"""

from pathlib import Path

import typer

from pretty.errors import OpenError


def open_file(path: Path) -> None:
    try:
        code = typer.launch(str(path))
    except OSError as e:
        raise OpenError(f"Could not open {path}: {e}", pdf=path) from e
    if code != 0:
        raise OpenError(f"Viewer exited with status {code} for {path}", pdf=path)
